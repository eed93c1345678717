"""Content Curator - RSS curation, drafting and review queue pipeline."""

__version__ = "0.1.0"
