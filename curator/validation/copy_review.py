"""LLM brand-voice review of finished content."""

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field
from rich.console import Console
from rich.panel import Panel

from ..errors import GenerationError
from ..generation import PromptBuilder, TextGenerator

console = Console()

PASS_SCORE = 70
ISSUE_TYPES = ("error", "warning", "suggestion")

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


class ReviewIssue(BaseModel):
    """One problem found by the reviewer."""

    type: str = Field("suggestion", description="error, warning or suggestion")
    description: str
    location: Optional[str] = Field(None, description="Line or phrase the issue refers to")


class CopyReview(BaseModel):
    """Brand-voice review verdict."""

    score: int = Field(0, description="Brand alignment score, 0-100")
    passed: bool = False
    issues: List[ReviewIssue] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)
    rewritten_content: Optional[str] = Field(None, description="Rewrite offered for failing content")

    @classmethod
    def failed(cls, reason: str) -> "CopyReview":
        """Review that could not be carried out."""
        return cls(issues=[ReviewIssue(type="error", description=reason)])


def _issue(raw: Any) -> Optional[ReviewIssue]:
    if isinstance(raw, str):
        return ReviewIssue(description=raw) if raw.strip() else None
    if not isinstance(raw, dict) or not raw.get("description"):
        return None
    kind = str(raw.get("type") or "suggestion").lower()
    location = raw.get("location")
    return ReviewIssue(
        type=kind if kind in ISSUE_TYPES else "suggestion",
        description=str(raw["description"]),
        location=str(location) if location else None,
    )


def parse_review_response(text: str, pass_score: int = PASS_SCORE) -> CopyReview:
    """
    Pull the review JSON object out of a free-text response.

    The pass mark is applied here; a 'passed' flag in the response is ignored.

    Raises:
        ValueError: no JSON object in the response, or it is not valid JSON
    """
    match = _JSON_OBJECT_RE.search(text or "")
    if not match:
        raise ValueError("Could not find a review in the response")

    try:
        data: Dict[str, Any] = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ValueError(f"Could not parse review response: {e}") from e
    if not isinstance(data, dict):
        raise ValueError("Review response is not a JSON object")

    try:
        score = int(data.get("score") or 0)
    except (TypeError, ValueError):
        score = 0
    score = max(0, min(100, score))

    issues = [i for i in (_issue(raw) for raw in data.get("issues") or []) if i]
    suggestions = [str(s) for s in data.get("suggestions") or [] if str(s).strip()]
    rewritten = data.get("rewrittenContent") or data.get("rewritten_content")

    return CopyReview(
        score=score,
        passed=score >= pass_score,
        issues=issues,
        suggestions=suggestions,
        rewritten_content=str(rewritten).strip() if rewritten else None,
    )


class CopyReviewer:
    """Ask the text generator to score content against the brand voice."""

    def __init__(
        self,
        generator: TextGenerator,
        prompt_builder: PromptBuilder,
        pass_score: int = PASS_SCORE,
    ) -> None:
        self.generator = generator
        self.prompt_builder = prompt_builder
        self.pass_score = pass_score

    def review(self, content: str) -> CopyReview:
        """Review content. Backend or parse failures yield a failed review."""
        try:
            response = self.generator.generate(self.prompt_builder.copy_review(content))
            return parse_review_response(response, self.pass_score)
        except (GenerationError, ValueError) as e:
            console.print(f"[yellow]Copy review failed: {e}[/yellow]")
            return CopyReview.failed(f"Review failed: {e}")

    def review_file(self, path: Path) -> CopyReview:
        if not path.is_file():
            return CopyReview.failed("File not found")
        return self.review(path.read_text(encoding="utf-8"))


def print_review(review: CopyReview, name: str) -> None:
    """Print a review verdict."""
    if review.score >= 80:
        rating, style = "EXCELLENT", "green"
    elif review.passed:
        rating, style = "PASSED", "green"
    else:
        rating, style = "NEEDS WORK", "red"

    lines = [
        f"Score: [{style}]{review.score}/100 ({rating})[/{style}]",
        f"Status: {'Ready for publishing' if review.passed else 'Revision needed'}",
    ]

    if review.issues:
        lines.append("\nIssues:")
        markers = {"error": "[red]x[/red]", "warning": "[yellow]![/yellow]", "suggestion": "-"}
        for issue in review.issues:
            lines.append(f"  {markers.get(issue.type, '-')} {issue.description}")
            if issue.location:
                lines.append(f"      at: \"{issue.location}\"")

    if review.suggestions:
        lines.append("\nSuggestions:")
        lines.extend(f"  - {s}" for s in review.suggestions)

    if review.rewritten_content:
        lines.append("\n[dim]A rewrite is available (use --rewrite to apply it).[/dim]")

    console.print(Panel("\n".join(lines), title=f"Copy review: {name}"))
