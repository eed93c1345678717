"""Review queue: lifecycle transitions over stored artifacts."""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, Field
from rich.console import Console
from rich.table import Table

from ..models import FRONTMATTER_ERRORS, LifecycleState, estimate_read_time, is_valid_slug
from ..validation import CopyReview, CopyReviewer, ValidationVerdict, Validator, split_frontmatter
from .storage import ArtifactStore

console = Console()


class QueueEntry(BaseModel):
    """A non-published artifact with its current verdict."""

    slug: str
    title: str
    date: str = ""
    category: str = "Uncategorized"
    status: LifecycleState = LifecycleState.DRAFT
    path: str
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


class TransitionResult(BaseModel):
    """Outcome of a lifecycle transition."""

    success: bool
    message: str
    slug: str


class PublishReport(BaseModel):
    """Outcome of publishing every approved artifact."""

    published: List[str] = Field(default_factory=list)
    skipped: Dict[str, str] = Field(default_factory=dict, description="Slug -> reason")


class ReviewQueue:
    """
    Human review over one artifact directory.

    The queue holds no state of its own: every call re-scans the store.
    draft -> review (clean) -> published (approve / publish_approved);
    any non-published state -> rejected (reject, file archived);
    regenerate resets to draft.
    """

    def __init__(self, store: ArtifactStore, validator: Optional[Validator] = None) -> None:
        self.store = store
        self.validator = validator or Validator()

    def _missing(self, slug: str) -> Optional[TransitionResult]:
        """Failure result for a slug that is malformed or has no file, else None."""
        if not is_valid_slug(slug):
            return TransitionResult(success=False, message=f"Invalid slug: {slug}", slug=slug)
        if not self.store.exists(slug):
            return TransitionResult(success=False, message=f"Draft not found: {slug}", slug=slug)
        return None

    def _verdict(self, slug: str) -> ValidationVerdict:
        return self.validator.validate(self.store.read_text(slug))

    def _set_status(self, slug: str, status: LifecycleState) -> None:
        post = self.store.load_post(slug)
        post["status"] = status.value
        self.store.save_post(slug, post)

    def _entry(self, slug: str) -> QueueEntry:
        verdict = self._verdict(slug)
        path = str(self.store.path_for(slug))
        try:
            metadata = self.store.load_post(slug).metadata
        except FRONTMATTER_ERRORS:
            metadata = {}

        return QueueEntry(
            slug=slug,
            title=str(metadata.get("title") or "Untitled"),
            date=str(metadata.get("date") or ""),
            category=str(metadata.get("category") or "Uncategorized"),
            status=LifecycleState.parse(metadata.get("status", LifecycleState.DRAFT.value)),
            path=path,
            errors=verdict.errors,
            warnings=verdict.warnings,
        )

    def pending(self) -> List[QueueEntry]:
        """All non-published artifacts with their verdicts, newest first."""
        entries = [self._entry(slug) for slug in self.store.list_slugs()]
        pending = [e for e in entries if e.status is not LifecycleState.PUBLISHED]
        # ISO dates sort lexically; undated entries go last
        pending.sort(key=lambda e: (bool(e.date), e.date), reverse=True)
        return pending

    def approve(self, slug: str) -> TransitionResult:
        """Mark an artifact published."""
        missing = self._missing(slug)
        if missing:
            return missing

        try:
            post = self.store.load_post(slug)
        except FRONTMATTER_ERRORS as e:
            return TransitionResult(success=False, message=f"Cannot parse {slug}: {e}", slug=slug)

        if LifecycleState.parse(post.get("status")) is LifecycleState.PUBLISHED:
            return TransitionResult(success=True, message=f"Already published: {slug}", slug=slug)

        post["status"] = LifecycleState.PUBLISHED.value
        self.store.save_post(slug, post)
        return TransitionResult(success=True, message=f"Published: {slug}", slug=slug)

    def reject(self, slug: str) -> TransitionResult:
        """Archive an artifact; it is no longer tracked by the queue."""
        missing = self._missing(slug)
        if missing:
            return missing

        try:
            self._set_status(slug, LifecycleState.REJECTED)
        except FRONTMATTER_ERRORS as e:
            console.print(f"[yellow]Archiving {slug} without status update: {e}[/yellow]")
        self.store.archive(slug)
        return TransitionResult(success=True, message=f"Rejected and archived: {slug}", slug=slug)

    def clean(self, slug: str) -> TransitionResult:
        """Apply the cleaner to the whole file and mark it for review."""
        missing = self._missing(slug)
        if missing:
            return missing

        self.store.write_text(slug, self.validator.clean(self.store.read_text(slug)))
        try:
            self._set_status(slug, LifecycleState.REVIEW)
        except FRONTMATTER_ERRORS as e:
            return TransitionResult(
                success=False, message=f"Cleaned, but cannot set status on {slug}: {e}", slug=slug
            )
        return TransitionResult(success=True, message=f"Cleaned and marked for review: {slug}", slug=slug)

    def regenerate(self, slug: str, body: str) -> TransitionResult:
        """Replace the body with new content and reset to draft."""
        missing = self._missing(slug)
        if missing:
            return missing

        try:
            post = self.store.load_post(slug)
        except FRONTMATTER_ERRORS as e:
            return TransitionResult(success=False, message=f"Cannot parse {slug}: {e}", slug=slug)

        post.content = body.strip() + "\n"
        post["status"] = LifecycleState.DRAFT.value
        post["readTime"] = estimate_read_time(body)
        self.store.save_post(slug, post)
        return TransitionResult(success=True, message=f"Regenerated and reset to draft: {slug}", slug=slug)

    def copy_review(
        self, slug: str, reviewer: CopyReviewer, rewrite: bool = False
    ) -> Tuple[TransitionResult, Optional[CopyReview]]:
        """
        Run the brand-voice review on an artifact.

        With rewrite, a failing artifact that came back with a rewrite has
        its body replaced and is reset to draft.
        """
        missing = self._missing(slug)
        if missing:
            return missing, None

        review = reviewer.review(self.store.read_text(slug))
        if rewrite and not review.passed and review.rewritten_content:
            _, body = split_frontmatter(review.rewritten_content)
            return self.regenerate(slug, self.validator.clean(body)), review

        return (
            TransitionResult(success=True, message=f"Reviewed {slug}: {review.score}/100", slug=slug),
            review,
        )

    def publish_approved(self) -> PublishReport:
        """Publish every artifact in review with no validation errors."""
        report = PublishReport()

        for entry in self.pending():
            if entry.status is not LifecycleState.REVIEW:
                report.skipped[entry.slug] = f"not reviewed (status: {entry.status.value})"
                continue

            if entry.errors:
                report.skipped[entry.slug] = f"validation errors: {'; '.join(entry.errors)}"
                continue

            result = self.approve(entry.slug)
            if result.success:
                report.published.append(entry.slug)
            else:
                report.skipped[entry.slug] = result.message

        return report


def print_queue(entries: List[QueueEntry], channel: str) -> None:
    """Print pending artifacts as a table."""
    if not entries:
        console.print(f"[green]No pending {channel} drafts.[/green]")
        return

    table = Table(title=f"Pending {channel} drafts ({len(entries)})")
    table.add_column("Slug", style="cyan")
    table.add_column("Title")
    table.add_column("Date")
    table.add_column("Status")
    table.add_column("Valid", justify="center")

    for entry in entries:
        valid = "[green]yes[/green]" if entry.is_valid else f"[red]{len(entry.errors)} errors[/red]"
        table.add_row(entry.slug, entry.title, entry.date, entry.status.value, valid)

    console.print(table)

    for entry in entries:
        for error in entry.errors:
            console.print(f"  [red]{entry.slug}:[/red] {error}")
        for warning in entry.warnings:
            console.print(f"  [yellow]{entry.slug}:[/yellow] {warning}")


def print_publish_report(report: PublishReport) -> None:
    """Print the outcome of publish-all."""
    for slug in report.published:
        console.print(f"[green]Published:[/green] {slug}")
    for slug, reason in report.skipped.items():
        console.print(f"[yellow]Skipped:[/yellow] {slug} ({reason})")
    console.print(
        f"\n[bold]{len(report.published)} published, {len(report.skipped)} skipped[/bold]"
    )
