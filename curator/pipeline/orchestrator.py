"""Pipeline orchestrator that runs the complete content curation pipeline."""

import time
from typing import Callable, Dict, List, Optional

import yaml
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from rich.table import Table

from ..config import Config, load_sources
from ..dedup import FingerprintLedger
from ..errors import (
    ArtifactValidationError,
    ConfigurationError,
    GenerationError,
    SourceFetchError,
)
from ..generation import (
    DEFAULT_TONE,
    LINK_PLACEHOLDER,
    PromptBuilder,
    StylePicker,
    TextGenerator,
    build_generator,
)
from ..generation.models import PromptRequest
from ..ingestion import CandidateItem, IngestionResult, IngestionStage, SourceRegistry, TopicClassifier
from ..ingestion.article_fetcher import ArticleFetcher
from ..ingestion.search import SearchIngestion
from ..ingestion.stage import Clock, utc_now
from ..models import (
    FRONTMATTER_ERRORS,
    ContentArtifact,
    ItemOutcome,
    LifecycleState,
    OutputKind,
    RunOptions,
    RunSummary,
    estimate_read_time,
    make_slug,
)
from ..queue import ArtifactStore
from ..validation import Validator, split_frontmatter

console = Console()

# Ingestion over-fetches so that ledger duplicates do not starve the item cap
CANDIDATE_MULTIPLIER = 5
STORAGE_ERROR = "storage"
ARTIFACT_ERROR = "artifact"
URL_SOURCE = "url"
TOPIC_SOURCE = "topic"
SOCIAL_CATEGORY = "Social"


class PipelineStage:
    """Represents a pipeline stage."""

    def __init__(self, name: str, description: str):
        self.name = name
        self.description = description
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.error: Optional[str] = None
        self.stats: Dict = {}

    def start(self):
        """Mark stage as started."""
        self.start_time = time.time()

    def complete(self, stats: Optional[Dict] = None):
        """Mark stage as completed successfully."""
        self.end_time = time.time()
        self.success = True
        if stats:
            self.stats.update(stats)

    def fail(self, error: str):
        """Mark stage as failed."""
        self.end_time = time.time()
        self.success = False
        self.error = error

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


class PipelineOrchestrator:
    """
    Orchestrates ingestion, dedup, generation and filing of drafts.

    Items are processed strictly one after another. An item is recorded in
    the ledger only after every requested artifact for it has been written,
    so a crash between the two leads to reprocessing, never to loss.
    """

    def __init__(
        self,
        config: Config,
        ledger: FingerprintLedger,
        ingestion: IngestionStage,
        stores: Dict[str, ArtifactStore],
        prompt_builder: PromptBuilder,
        classifier: TopicClassifier,
        generator: Optional[TextGenerator] = None,
        generator_factory: Optional[Callable[[], TextGenerator]] = None,
        clock: Clock = utc_now,
    ):
        """
        Initialize pipeline orchestrator.

        Args:
            config: Loaded configuration
            ledger: Dedup ledger
            ingestion: RSS ingestion stage
            stores: Artifact store per channel ('blog', 'social')
            prompt_builder: Prompt construction with the configured voice
            classifier: Topic classifier, shared with search mode
            generator: Text generator; built on first use when omitted
            generator_factory: Builds the generator when none is given
            clock: Source of the current time
        """
        self.config = config
        self.ledger = ledger
        self.ingestion = ingestion
        self.stores = stores
        self.prompt_builder = prompt_builder
        self.classifier = classifier
        self._generator = generator
        self._generator_factory = generator_factory or (
            lambda: build_generator(config.get_llm_config())
        )
        self.clock = clock
        self.validators = {
            channel: Validator.for_channel(config.config, channel) for channel in stores
        }
        self.stages: List[PipelineStage] = []

    @classmethod
    def from_config(
        cls,
        config: Config,
        generator: Optional[TextGenerator] = None,
        style_picker: Optional[StylePicker] = None,
    ) -> "PipelineOrchestrator":
        """
        Wire the pipeline from configuration.

        Raises:
            ConfigurationError: config or sources file missing or invalid
        """
        model = config.config

        try:
            sources = load_sources(config.sources_path)
        except FileNotFoundError as e:
            raise ConfigurationError(f"{e}. Run 'curator init' first.") from e
        except ValueError as e:
            raise ConfigurationError(str(e)) from e

        classifier = TopicClassifier(model.topics)
        return cls(
            config=config,
            ledger=FingerprintLedger(config.ledger_path, model.ledger.max_entries),
            ingestion=IngestionStage(SourceRegistry(sources), classifier),
            stores={
                "blog": ArtifactStore(config.get_content_dir("blog")),
                "social": ArtifactStore(config.get_content_dir("social")),
            },
            prompt_builder=PromptBuilder(model.voice, style_picker),
            classifier=classifier,
            generator=generator,
        )

    @property
    def generator(self) -> TextGenerator:
        """Configured text generator, built on first access."""
        if self._generator is None:
            self._generator = self._generator_factory()
        return self._generator

    def _today(self) -> str:
        return self.clock().date().isoformat()

    def _collect(self, options: RunOptions) -> IngestionResult:
        cap = options.item_cap * CANDIDATE_MULTIPLIER
        if options.use_search:
            search = SearchIngestion(self.generator, self.prompt_builder, self.classifier, self.clock)
            return search.collect(options.topic_filter, options.recency_days, cap)
        return self.ingestion.collect(options.topic_filter, options.recency_days, cap)

    def _blog_artifact(self, text: str, item: CandidateItem, slug: str) -> ContentArtifact:
        """Build a blog artifact from generated text, repairing the header if needed."""
        raw_meta, body = split_frontmatter(text)
        metadata: Dict = {}
        if raw_meta is not None:
            try:
                loaded = yaml.safe_load(raw_meta)
            except FRONTMATTER_ERRORS:
                loaded = None
            if isinstance(loaded, dict):
                metadata = loaded

        artifact = ContentArtifact.from_metadata(slug, metadata, body.strip())
        return artifact.model_copy(
            update={
                "title": str(metadata.get("title") or item.title),
                "date": artifact.date or self._today(),
                "description": artifact.description or item.summary[:155],
                "category": str(metadata.get("category") or "Industry Insights"),
                "tags": artifact.tags or item.topics[:3],
                "read_time": estimate_read_time(body),
                "status": LifecycleState.DRAFT,
                "kind": OutputKind.BLOG,
                "source_name": item.source_name,
                "source_link": item.link or None,
            }
        )

    def _social_artifact(
        self, text: str, item: CandidateItem, kind: OutputKind, slug: str
    ) -> ContentArtifact:
        if kind is OutputKind.TWITTER:
            text = text.replace(LINK_PLACEHOLDER, item.link)
        return ContentArtifact(
            slug=slug,
            title=item.title,
            date=self._today(),
            description=item.summary[:155],
            category=SOCIAL_CATEGORY,
            tags=item.topics[:3],
            read_time=estimate_read_time(text),
            status=LifecycleState.DRAFT,
            body=text.strip(),
            kind=kind,
            source_name=item.source_name,
            source_link=item.link or None,
        )

    def _slug_for(self, store: ArtifactStore, slug: str, item: CandidateItem) -> str:
        """Slug for an item's artifact; a same-titled draft from another source keeps its file."""
        if not store.exists(slug):
            return slug
        try:
            owner = store.load_post(slug).get("originalSource")
        except FRONTMATTER_ERRORS:
            owner = None
        if owner is None or str(owner) == item.source_name:
            return slug
        return f"{slug}-{make_slug(item.source_name)}"

    def _produce(
        self,
        kind: OutputKind,
        item: CandidateItem,
        request: PromptRequest,
        outcome: ItemOutcome,
    ) -> ContentArtifact:
        """Generate, clean, validate and persist one artifact."""
        validator = self.validators[kind.channel]
        store = self.stores[kind.channel]
        text = validator.clean(self.generator.generate(request))

        prefix = "curated-" if kind is OutputKind.BLOG else f"{kind.value}-"
        slug = self._slug_for(store, make_slug(item.title, prefix=prefix), item)
        if kind is OutputKind.BLOG:
            artifact = self._blog_artifact(text, item, slug)
        else:
            artifact = self._social_artifact(text, item, kind, slug)
        artifact = artifact.model_copy(
            update={
                "title": validator.clean(artifact.title),
                "description": validator.clean(artifact.description),
            }
        )

        verdict = validator.validate(artifact.to_text())
        try:
            verdict.raise_for_errors(artifact.slug)
        except ArtifactValidationError as e:
            outcome.validation_errors.extend(f"{e.slug}: {err}" for err in e.errors)
            console.print(f"    [yellow]{kind.value}: saved with errors - {'; '.join(e.errors)}[/yellow]")
        outcome.warnings.extend(f"{artifact.slug}: {w}" for w in verdict.warnings)

        store.write(artifact)
        outcome.slugs.append(artifact.slug)
        return artifact

    def _capture_failure(self, outcome: ItemOutcome, error: Exception) -> None:
        """Record a per-item failure in the outcome."""
        if isinstance(error, GenerationError):
            outcome.error = str(error)
            outcome.error_category = error.category
        elif isinstance(error, OSError):
            outcome.error = f"Storage error: {error}"
            outcome.error_category = STORAGE_ERROR
        else:
            outcome.error = f"Unusable generated content: {error}"
            outcome.error_category = ARTIFACT_ERROR

    def process_item(self, item: CandidateItem, kinds: List[OutputKind]) -> ItemOutcome:
        """
        Generate and file every requested artifact for one item.

        Generation, storage and artifact-building failures are captured in
        the outcome.
        """
        outcome = ItemOutcome(title=item.title, source=item.source_name, success=False)

        try:
            for kind in kinds:
                self._produce(kind, item, self.prompt_builder.build(kind, item), outcome)

            output_kind = "all" if set(kinds) == set(OutputKind) else ",".join(k.value for k in kinds)
            self.ledger.mark_processed(item.title, item.source_name, output_kind)
            outcome.success = True
        except (GenerationError, OSError, ValueError, TypeError) as e:
            self._capture_failure(outcome, e)

        return outcome

    def process_url(self, url: str, title: Optional[str] = None) -> ItemOutcome:
        """
        Fetch an arbitrary article and file a blog draft rewritten from it.

        Returns:
            Outcome of the single item; failures are captured, not raised
        """
        fetcher = ArticleFetcher()
        article = fetcher.fetch_sync(url, title)
        if not article.fetch_success:
            error = SourceFetchError(URL_SOURCE, article.error or "fetch failed")
            return ItemOutcome(
                title=title or url,
                source=URL_SOURCE,
                success=False,
                error=str(error),
                error_category=error.category,
            )

        item = CandidateItem(
            title=article.title,
            link=url,
            published_at=article.published_at or self.clock(),
            raw_body=article.text,
            summary=article.text[:300],
            source_name=URL_SOURCE,
            topics=self.classifier.classify(f"{article.title} {article.text}"),
        )
        outcome = ItemOutcome(title=item.title, source=URL_SOURCE, success=False)

        if self.ledger.is_duplicate(item.title, URL_SOURCE):
            console.print(f"[yellow]Already processed, regenerating: {item.title}[/yellow]")

        request = self.prompt_builder.rewrite(article.title, url, article.text)
        try:
            self._produce(OutputKind.BLOG, item, request, outcome)
            self.ledger.mark_processed(item.title, URL_SOURCE, OutputKind.BLOG.value)
            outcome.success = True
        except (GenerationError, OSError, ValueError, TypeError) as e:
            self._capture_failure(outcome, e)

        return outcome

    def process_topic(self, topic: str, kind: OutputKind, tone: str = DEFAULT_TONE) -> ItemOutcome:
        """
        Generate one artifact on a topic and file it as a draft.

        There is no source item, so nothing is recorded in the ledger.
        """
        item = CandidateItem(
            title=topic.strip(),
            published_at=self.clock(),
            source_name=TOPIC_SOURCE,
            topics=self.classifier.classify(topic),
        )
        outcome = ItemOutcome(title=item.title, source=TOPIC_SOURCE, success=False)

        try:
            self._produce(kind, item, self.prompt_builder.topic(kind, item, tone), outcome)
            outcome.success = True
        except (GenerationError, OSError, ValueError, TypeError) as e:
            self._capture_failure(outcome, e)

        return outcome

    def run(self, options: RunOptions) -> RunSummary:
        """
        Run the complete pipeline.

        Raises:
            ConfigurationError: the generation backend cannot be configured
        """
        start = time.time()
        summary = RunSummary(dry_run=options.dry_run)
        self.stages = [
            PipelineStage("ingest", "Collecting candidate items"),
            PipelineStage("dedup", "Filtering processed items"),
            PipelineStage("generate", "Generating drafts"),
        ]

        console.print(Panel.fit(
            f"Content Curation Pipeline\n"
            f"Items: {options.item_cap} | Topics: {', '.join(options.topic_filter)} | "
            f"Days: {options.recency_days} | Mode: {'search' if options.use_search else 'rss'}"
            f"{' | DRY RUN' if options.dry_run else ''}",
            style="bold blue",
        ))

        # Fail before touching any source when the backend is unusable
        if options.use_search or not options.dry_run:
            _ = self.generator

        try:
            self._execute(options, summary)
        finally:
            summary.duration = time.time() - start
            self._print_summary(summary)

        return summary

    def _execute(self, options: RunOptions, summary: RunSummary) -> None:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            # Stage 1: ingestion
            stage = self.stages[0]
            task = progress.add_task(stage.description, total=1)
            stage.start()
            result = self._collect(options)
            summary.candidates = len(result.items)
            for failed in result.failed_sources:
                message = f"{failed.source_name}: {failed.error}"
                summary.source_failures.append(message)
                summary.record_error(SourceFetchError.category, message)
            stage.complete({
                "sources": len(result.feed_results),
                "failed": len(result.failed_sources),
                "candidates": summary.candidates,
            })
            progress.advance(task, 1)

            # Stage 2: dedup and cap
            stage = self.stages[1]
            progress.remove_task(task)
            task = progress.add_task(stage.description, total=1)
            stage.start()
            fresh = [i for i in result.items if not self.ledger.is_duplicate(i.title, i.source_name)]
            summary.skipped_duplicates = len(result.items) - len(fresh)
            selected = fresh[: options.item_cap]
            summary.selected = [i.title for i in selected]
            stage.complete({"new": len(fresh), "duplicates": summary.skipped_duplicates})
            progress.advance(task, 1)
            progress.remove_task(task)

        if not selected:
            console.print("\n[yellow]No new items to process. Try increasing --days or check later.[/yellow]")
            return

        console.print(f"\nSelected {len(selected)} items:")
        for index, item in enumerate(selected, 1):
            console.print(f"  {index}. [cyan][{item.source_name}][/cyan] {item.title}")

        if options.dry_run:
            console.print("\n[yellow][DRY RUN] Would generate content for the items above.[/yellow]")
            return

        # Stage 3: sequential generation
        stage = self.stages[2]
        stage.start()
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            TimeElapsedColumn(),
            console=console,
        ) as progress:
            task = progress.add_task(stage.description, total=len(selected))
            for item in selected:
                progress.update(task, description=f"Generating: {item.title[:50]}")
                outcome = self.process_item(item, options.output_kinds)
                summary.items.append(outcome)
                summary.artifacts_written.extend(outcome.slugs)
                if outcome.success:
                    summary.success_count += 1
                else:
                    summary.error_count += 1
                    summary.record_error(outcome.error_category, f"{item.title}: {outcome.error}")
                    console.print(f"  [red]Error: {item.title[:50]}: {outcome.error}[/red]")
                progress.advance(task, 1)

        stage.complete({
            "succeeded": summary.success_count,
            "failed": summary.error_count,
            "artifacts": len(summary.artifacts_written),
        })

    def _print_summary(self, summary: RunSummary) -> None:
        """Print pipeline execution summary."""
        table = Table(title="Pipeline Summary")
        table.add_column("Stage", style="cyan")
        table.add_column("Status", style="bold")
        table.add_column("Duration", style="yellow")
        table.add_column("Details", style="dim")

        for stage in self.stages:
            if stage.start_time is None:
                status = "[dim]-[/dim]"
            else:
                status = "[green]ok[/green]" if stage.success else "[red]failed[/red]"
            duration = f"{stage.duration:.1f}s" if stage.duration > 0 else "-"

            details = ""
            if stage.success and stage.stats:
                if stage.name == "ingest":
                    details = (
                        f"{stage.stats.get('candidates', 0)} candidates, "
                        f"{stage.stats.get('failed', 0)} failed sources"
                    )
                elif stage.name == "dedup":
                    details = f"{stage.stats.get('new', 0)} new, {stage.stats.get('duplicates', 0)} duplicates"
                elif stage.name == "generate":
                    details = (
                        f"{stage.stats.get('succeeded', 0)} ok, {stage.stats.get('failed', 0)} failed, "
                        f"{stage.stats.get('artifacts', 0)} artifacts"
                    )
            elif stage.error:
                details = stage.error

            table.add_row(stage.name.title(), status, duration, details)

        console.print("\n")
        console.print(table)

        if summary.dry_run:
            style, headline = "yellow", "Dry run complete, nothing written"
        elif summary.error_count:
            style, headline = "yellow", "Pipeline completed with errors"
        else:
            style, headline = "green", "Pipeline completed successfully"

        lines = [
            f"[{style}]{headline}[/{style}]\n",
            f"Duration: {summary.duration:.1f} seconds",
            f"Succeeded: {summary.success_count} | Failed: {summary.error_count}",
            f"Duplicates skipped: {summary.skipped_duplicates}",
        ]
        if summary.error_categories:
            categories = ", ".join(f"{k}: {v}" for k, v in sorted(summary.error_categories.items()))
            lines.append(f"Errors by category: {categories}")
        if summary.artifacts_written:
            lines.append("\nDrafts written:")
            lines.extend(f"- {slug}" for slug in summary.artifacts_written)
            lines.append("\nReview with: curator queue list")

        console.print(Panel("\n".join(lines), style=style))
