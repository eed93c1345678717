"""Tone/structure variants selected per generation call."""

import random
from enum import Enum
from typing import Dict, List, Optional

from ..models import OutputKind


class StyleVariant(str, Enum):
    """Prompt style templates."""

    ANALYSIS = "analysis"
    CONTRARIAN = "contrarian"
    HOW_TO = "how_to"
    CASE_STUDY = "case_study"
    OPINION = "opinion"
    HOT_TAKE = "hot_take"
    STORY = "story"
    QUICK_TIP = "quick_tip"
    CHALLENGE = "challenge"
    DATA_DROP = "data_drop"
    BREAKDOWN = "breakdown"


STYLE_GUIDES: Dict[StyleVariant, str] = {
    StyleVariant.ANALYSIS: (
        "THE ANALYSIS. Deep dive into what this means and break down the findings.\n"
        "Structure: Introduction -> Key Finding -> Why It Matters -> My Take -> Action Step"
    ),
    StyleVariant.CONTRARIAN: (
        "CONTRARIAN TAKE. Challenge the article's premise or a common assumption.\n"
        "Structure: \"Most people think X, but...\" -> Evidence -> My perspective -> What to do differently"
    ),
    StyleVariant.HOW_TO: (
        "HOW-TO. Extract the actionable parts and make them practical.\n"
        "Structure: Problem statement -> Step 1, 2, 3 -> Pro tip -> Results you can expect"
    ),
    StyleVariant.CASE_STUDY: (
        "CASE STUDY. Tell it as a story about a client who faced this exact issue.\n"
        "Structure: The problem -> What we tried -> What worked -> Lesson learned"
    ),
    StyleVariant.OPINION: (
        "OPINION PIECE. A strong personal opinion backed by experience.\n"
        "Structure: Bold claim -> My reasoning -> Evidence from the article -> Call to action"
    ),
    StyleVariant.HOT_TAKE: (
        "CONTRARIAN HOT TAKE. Open with \"Unpopular opinion:\" or \"Hot take:\" and challenge "
        "conventional wisdom. Short paragraphs. End with \"Agree or disagree?\""
    ),
    StyleVariant.STORY: (
        "STORY-BASED. Open with \"Last week...\" or \"I just saw...\" and share a mini-story "
        "from personal experience. End with the lesson learned."
    ),
    StyleVariant.QUICK_TIP: (
        "QUICK TIP. One actionable insight for store owners. No fluff, 3-4 lines max."
    ),
    StyleVariant.CHALLENGE: (
        "THE CHALLENGE. Open with \"Try this:\" and give readers something specific and "
        "time-bound to do."
    ),
    StyleVariant.DATA_DROP: (
        "DATA DROP. Lead with a surprising number, explain why it matters, keep it punchy."
    ),
    StyleVariant.BREAKDOWN: (
        "THE BREAKDOWN. \"Here's what I learned from <source>:\" followed by three short "
        "dash bullets and your take at the end."
    ),
}

STYLES_BY_KIND: Dict[OutputKind, List[StyleVariant]] = {
    OutputKind.BLOG: [
        StyleVariant.ANALYSIS,
        StyleVariant.CONTRARIAN,
        StyleVariant.HOW_TO,
        StyleVariant.CASE_STUDY,
        StyleVariant.OPINION,
    ],
    OutputKind.LINKEDIN: [
        StyleVariant.HOT_TAKE,
        StyleVariant.STORY,
        StyleVariant.QUICK_TIP,
        StyleVariant.CHALLENGE,
        StyleVariant.DATA_DROP,
        StyleVariant.BREAKDOWN,
    ],
    OutputKind.TWITTER: [
        StyleVariant.HOT_TAKE,
        StyleVariant.QUICK_TIP,
        StyleVariant.DATA_DROP,
    ],
}


class StylePicker:
    """Choose a style variant per call from an injected random source."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def pick(self, kind: OutputKind) -> StyleVariant:
        return self.rng.choice(STYLES_BY_KIND[kind])


class FixedStylePicker(StylePicker):
    """Always pick the same variant when the kind allows it."""

    def __init__(self, variant: StyleVariant) -> None:
        super().__init__()
        self.variant = variant

    def pick(self, kind: OutputKind) -> StyleVariant:
        allowed = STYLES_BY_KIND[kind]
        return self.variant if self.variant in allowed else allowed[0]
