"""Brand-voice validation and cleanup of generated content."""

import re
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field
from rich.console import Console

from ..config import ConfigModel, ValidationRules
from ..config.models import DEFAULT_BANNED_PHRASES
from ..errors import ArtifactValidationError
from ..models import FRONTMATTER_ERRORS, LifecycleState, count_words

console = Console()

EMOJI_CLASS = "\U0001F300-\U0001F9FF\u2600-\u26FF\u2700-\u27BF"
EMOJI_RE = re.compile(f"[{EMOJI_CLASS}]")
SMART_PUNCT_RE = re.compile("[\u201c\u201d\u2018\u2019\u2026\u2014\u2013\u2022]")

_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)", re.DOTALL)
_EMPTY_FRONTMATTER_RE = re.compile(r"\A---[ \t]*\r?\n---[ \t]*(?:\r?\n|\Z)")

# Emoji run, optionally with variation selectors; spaces around and between
# the emoji are absorbed
_EMOJI_RUN = f"[ \\t]*(?:[{EMOJI_CLASS}]\ufe0f?[ \\t]*)+"
_INNER_EMOJI_RE = re.compile(f"(?<=\\S){_EMOJI_RUN}(?=\\S)")
_EMOJI_RUN_RE = re.compile(_EMOJI_RUN)
_EM_DASH_RE = re.compile("[ \\t]*\u2014[ \\t]*")

_REPLACEMENTS = (
    ("\u201c", '"'),
    ("\u201d", '"'),
    ("\u2018", "'"),
    ("\u2019", "'"),
    ("\u2026", "..."),
    ("\u2013", "-"),
    ("\u2022", "-"),
)

VALID_STATUSES = {state.value for state in LifecycleState}


class ValidationVerdict(BaseModel):
    """Outcome of validating one piece of content."""

    is_valid: bool = Field(True, description="No hard errors")
    errors: List[str] = Field(default_factory=list, description="Hard errors, block publishing")
    warnings: List[str] = Field(default_factory=list, description="Review recommended")
    word_count: int = Field(0, description="Body word count")

    def raise_for_errors(self, slug: str) -> None:
        """
        Raises:
            ArtifactValidationError: if the verdict carries hard errors
        """
        if self.errors:
            raise ArtifactValidationError(slug, self.errors)


class FileVerdict(ValidationVerdict):
    """Verdict for a file on disk."""

    path: str = Field(..., description="Validated file")


def split_frontmatter(text: str) -> Tuple[Optional[str], str]:
    """
    Split text into its raw front-matter block and body.

    Returns:
        (front-matter YAML or None when there is no delimited block, body)
    """
    match = _EMPTY_FRONTMATTER_RE.match(text)
    if match:
        return "", text[match.end():]

    match = _FRONTMATTER_RE.match(text)
    if not match:
        return None, text
    return match.group(1), text[match.end():]


def clean_text(text: str) -> str:
    """
    Replace typographic punctuation and strip emoji.

    Idempotent: clean_text(clean_text(t)) == clean_text(t).
    """
    for old, new in _REPLACEMENTS:
        text = text.replace(old, new)
    text = _EM_DASH_RE.sub(" - ", text)
    text = _INNER_EMOJI_RE.sub(" ", text)
    return _EMOJI_RUN_RE.sub("", text)


class Validator:
    """Check generated content against the brand-voice rubric."""

    def __init__(
        self,
        rules: Optional[ValidationRules] = None,
        banned_phrases: Optional[Iterable[str]] = None,
    ) -> None:
        self.rules = rules or ValidationRules()
        phrases = DEFAULT_BANNED_PHRASES if banned_phrases is None else banned_phrases
        self.banned_phrases = [p for p in phrases if p]

    @classmethod
    def for_channel(cls, config: ConfigModel, channel: str) -> "Validator":
        """Validator with the configured rules for 'blog' or 'social'."""
        rules = config.validation.social if channel == "social" else config.validation.blog
        return cls(rules, config.voice.banned_phrases)

    def _check_metadata(self, metadata: dict, verdict: ValidationVerdict) -> None:
        title = str(metadata.get("title") or "")
        if len(title) > self.rules.max_title_chars:
            verdict.warnings.append(
                f"Title too long: {len(title)} chars (recommended: {self.rules.max_title_chars} max)"
            )

        description = str(metadata.get("description") or "")
        if len(description) > self.rules.max_description_chars:
            verdict.warnings.append(
                f"Description too long: {len(description)} chars "
                f"(max: {self.rules.max_description_chars})"
            )

        status = metadata.get("status")
        if status is None or str(status).strip().lower() not in VALID_STATUSES:
            verdict.warnings.append(
                "Missing or unknown status field (should be draft/review/published/rejected)"
            )

    def validate(self, text: str) -> ValidationVerdict:
        """
        Validate content.

        Errors block publishing: missing or malformed front-matter, emoji,
        typographic punctuation, body word count outside the bounds.
        Warnings recommend review: banned phrases, long title or
        description, missing status.
        """
        verdict = ValidationVerdict()
        raw_meta, body = split_frontmatter(text)

        metadata = None
        if raw_meta is None:
            verdict.errors.append("Missing or invalid front-matter")
        else:
            try:
                metadata = yaml.safe_load(raw_meta)
            except FRONTMATTER_ERRORS as e:
                verdict.errors.append(f"Malformed front-matter: {e}")
            else:
                if not isinstance(metadata, dict):
                    verdict.errors.append("Malformed front-matter: expected a mapping")
                    metadata = None

        if EMOJI_RE.search(text):
            verdict.errors.append("Contains emojis")

        glyphs = sorted(set(SMART_PUNCT_RE.findall(text)))
        if glyphs:
            verdict.errors.append(
                f"Contains typographic punctuation: {' '.join(glyphs)}"
            )

        verdict.word_count = count_words(body)
        if verdict.word_count < self.rules.min_words:
            verdict.errors.append(
                f"Content too short: {verdict.word_count} words (minimum: {self.rules.min_words})"
            )
        elif verdict.word_count > self.rules.max_words:
            verdict.errors.append(
                f"Content too long: {verdict.word_count} words (maximum: {self.rules.max_words})"
            )

        lower_text = text.lower()
        found = [p for p in self.banned_phrases if p.lower() in lower_text]
        if found:
            verdict.warnings.append(f"Contains banned phrases: {', '.join(found)}")

        if metadata is not None:
            self._check_metadata(metadata, verdict)

        verdict.is_valid = not verdict.errors
        return verdict

    def clean(self, text: str) -> str:
        """Apply the cleanup pass."""
        return clean_text(text)

    def validate_file(self, path: Path) -> FileVerdict:
        """Validate a file on disk."""
        if not path.exists():
            return FileVerdict(path=str(path), is_valid=False, errors=["File not found"])

        verdict = self.validate(path.read_text(encoding="utf-8"))
        return FileVerdict(path=str(path), **verdict.model_dump())

    def validate_directory(self, directory: Path) -> List[FileVerdict]:
        """Validate every .md/.mdx file directly inside a directory."""
        files = sorted(
            p for p in directory.iterdir() if p.is_file() and p.suffix in (".md", ".mdx")
        )
        return [self.validate_file(p) for p in files]


def print_verdicts(verdicts: List[FileVerdict]) -> None:
    """Print validation results."""
    for verdict in verdicts:
        mark = "[green]PASS[/green]" if verdict.is_valid else "[red]FAIL[/red]"
        console.print(f"{mark} {verdict.path} ({verdict.word_count} words)")
        for error in verdict.errors:
            console.print(f"  [red]error:[/red] {error}")
        for warning in verdict.warnings:
            console.print(f"  [yellow]warning:[/yellow] {warning}")

    passed = sum(1 for v in verdicts if v.is_valid)
    console.print(f"\n[bold]{passed}/{len(verdicts)} passed[/bold]")
