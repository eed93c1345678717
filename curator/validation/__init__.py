"""Validation and cleanup of generated content."""

from .copy_review import (
    CopyReview,
    CopyReviewer,
    ReviewIssue,
    parse_review_response,
    print_review,
)
from .validator import (
    FileVerdict,
    ValidationVerdict,
    Validator,
    clean_text,
    print_verdicts,
    split_frontmatter,
)

__all__ = [
    "CopyReview",
    "CopyReviewer",
    "FileVerdict",
    "ReviewIssue",
    "ValidationVerdict",
    "Validator",
    "clean_text",
    "parse_review_response",
    "print_review",
    "print_verdicts",
    "split_frontmatter",
]
