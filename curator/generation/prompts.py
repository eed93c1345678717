"""Prompt templates for each output kind."""

import json
from typing import Optional

import pendulum

from ..config import VoiceConfig
from ..ingestion.models import CandidateItem
from ..models import OutputKind
from .models import PromptRequest
from .styles import STYLE_GUIDES, StylePicker

MAX_SOURCE_CHARS = 3000
LINK_PLACEHOLDER = "[LINK]"
DEFAULT_TONE = "educational"


def _voice_block(voice: VoiceConfig) -> str:
    avoid = ", ".join(voice.banned_phrases) if voice.banned_phrases else "none"
    return (
        "VOICE RULES (MUST FOLLOW):\n"
        f"{voice.rules.strip()}\n"
        f"Never use these words or phrases: {avoid}"
    )


class PromptBuilder:
    """Build prompt requests from candidate items and the configured voice."""

    def __init__(self, voice: VoiceConfig, style_picker: Optional[StylePicker] = None) -> None:
        self.voice = voice
        self.style_picker = style_picker or StylePicker()

    def build(self, kind: OutputKind, item: CandidateItem) -> PromptRequest:
        """Build the prompt for one output kind."""
        if kind is OutputKind.BLOG:
            return self.blog(item)
        if kind is OutputKind.LINKEDIN:
            return self.linkedin(item)
        return self.twitter(item)

    def _context(self, item: CandidateItem) -> dict:
        return {
            "title": item.title,
            "source": item.source_name,
            "link": item.link,
            "topics": list(item.topics),
            "date": pendulum.now("UTC").to_date_string(),
        }

    def blog(self, item: CandidateItem) -> PromptRequest:
        """Long-form curated article with front-matter."""
        style = self.style_picker.pick(OutputKind.BLOG)
        context = self._context(item)
        categories = " | ".join(self.voice.categories)
        topics = ", ".join(item.topics)

        text = f"""You are {self.voice.persona}, writing a curated insight for your blog.

{_voice_block(self.voice)}

---

ORIGINAL ARTICLE:
Title: {item.title}
Source: {item.source_name}
Topics: {topics}
Summary: {item.summary}

Full content (if available):
{item.raw_body[:MAX_SOURCE_CHARS]}

---

YOUR TASK:
Write an original article in this style:
{STYLE_GUIDES[style]}

MUST INCLUDE:
- Your perspective on why this matters to the reader
- One practical action the reader can take today
- Clean H2/H3 structure, short paragraphs, 400-600 words

REQUIRED OUTPUT FORMAT (front-matter then markdown body):
---
title: "[Your unique angle, under 60 chars]"
date: "{context['date']}"
description: "[Compelling summary, max 155 chars]"
category: "[{categories}]"
tags: {json.dumps(item.topics[:3])}
readTime: "2 min read"
status: "draft"
---

## [H2 header with your angle]

[Body]

### Key Takeaways

- [Point 1]
- [Point 2]
- [Point 3]

### What You Can Do Today

[Practical action step]

Do not summarize or link the original article. Write in the first person."""

        return PromptRequest(kind=OutputKind.BLOG.value, text=text, style=style, context=context)

    def linkedin(self, item: CandidateItem) -> PromptRequest:
        """Professional short-form post."""
        style = self.style_picker.pick(OutputKind.LINKEDIN)
        topics = ", ".join(item.topics) or "general"

        text = f"""You are {self.voice.persona}. Write a LinkedIn post about this article.

{_voice_block(self.voice)}

ARTICLE:
Title: {item.title}
Source: {item.source_name}
Summary: {item.summary}
Topics: {topics}

STYLE:
{STYLE_GUIDES[style]}

RULES:
- 150-200 words max
- Line breaks for mobile reading
- First-person perspective, sound like a real person

OUTPUT: Just the post text, ready to paste."""

        return PromptRequest(
            kind=OutputKind.LINKEDIN.value,
            text=text,
            style=style,
            max_tokens=600,
            context=self._context(item),
        )

    def twitter(self, item: CandidateItem) -> PromptRequest:
        """Single micro-post with a link placeholder."""
        style = self.style_picker.pick(OutputKind.TWITTER)

        text = f"""You are {self.voice.persona}. Write a single tweet (not a thread) sharing this article.

{_voice_block(self.voice)}

ARTICLE:
Title: {item.title}
Source: {item.source_name}
Summary: {item.summary}

STYLE:
{STYLE_GUIDES[style]}

RULES:
- Under 280 characters total
- Your take plus the placeholder {LINK_PLACEHOLDER} where the URL goes
- One hashtag at most

OUTPUT: Just the tweet text."""

        return PromptRequest(
            kind=OutputKind.TWITTER.value,
            text=text,
            style=style,
            max_tokens=200,
            context=self._context(item),
        )

    def rewrite(self, title: str, url: str, content: str) -> PromptRequest:
        """Blog post rewritten from an arbitrary fetched article."""
        style = self.style_picker.pick(OutputKind.BLOG)
        today = pendulum.now("UTC").to_date_string()
        categories = " | ".join(self.voice.categories)

        text = f"""You are {self.voice.persona}.

{_voice_block(self.voice)}

---

SOURCE CONTENT:
Title: {title}
URL: {url}
Content:
{content[:MAX_SOURCE_CHARS * 2]}

---

Rewrite this as an original blog post in this style:
{STYLE_GUIDES[style]}

REQUIRED OUTPUT FORMAT (front-matter then markdown body):
---
title: "[Your unique angle, under 60 chars]"
date: "{today}"
description: "[Compelling summary, max 155 chars]"
category: "[{categories}]"
tags: ["tag1", "tag2", "tag3"]
readTime: "3 min read"
status: "draft"
---

[400-800 word body with H2/H3 headers, Key Takeaways and What You Can Do Today sections]"""

        return PromptRequest(
            kind="rewrite",
            text=text,
            style=style,
            context={"title": title, "link": url, "source": "url", "topics": [], "date": today},
        )

    def topic(self, kind: OutputKind, item: CandidateItem, tone: str = DEFAULT_TONE) -> PromptRequest:
        """Original content on a topic, with no source article behind it."""
        context = self._context(item)

        if kind is OutputKind.BLOG:
            categories = " | ".join(self.voice.categories)
            task = f"""Write a {tone} blog article about: {item.title}

MUST INCLUDE:
- A concrete problem the reader recognizes
- Specific numbers or examples where you can
- One practical action the reader can take today
- Clean H2/H3 structure, short paragraphs, 600-900 words

REQUIRED OUTPUT FORMAT (front-matter then markdown body):
---
title: "[Title under 60 chars]"
date: "{context['date']}"
description: "[Compelling summary, max 155 chars]"
category: "[{categories}]"
tags: {json.dumps(item.topics[:3])}
readTime: "4 min read"
status: "draft"
---

[Body]"""
            max_tokens = None
        elif kind is OutputKind.LINKEDIN:
            task = f"""Write a {tone} LinkedIn post about: {item.title}

RULES:
- 150-200 words max
- Line breaks for mobile reading
- Open with a hook, end with a question

OUTPUT: Just the post text, ready to paste."""
            max_tokens = 600
        else:
            task = f"""Write a single {tone} tweet (not a thread) about: {item.title}

RULES:
- Under 280 characters total
- One hashtag at most
- No links

OUTPUT: Just the tweet text."""
            max_tokens = 200

        text = f"""You are {self.voice.persona}.

{_voice_block(self.voice)}

---

{task}"""

        context["tone"] = tone
        return PromptRequest(kind=kind.value, text=text, max_tokens=max_tokens, context=context)

    def copy_review(self, content: str) -> PromptRequest:
        """Brand-voice review of finished content, answered as JSON."""
        text = f"""You are reviewing content written as {self.voice.persona} for brand voice alignment.

{_voice_block(self.voice)}

---

CONTENT TO REVIEW:
{content[:MAX_SOURCE_CHARS * 4]}

---

Analyze this content and return a JSON object with:
{{
  "score": <0-100 brand alignment score>,
  "issues": [
    {{
      "type": "<error|warning|suggestion>",
      "description": "<what is wrong>",
      "location": "<line or phrase where the issue occurs>"
    }}
  ],
  "suggestions": ["<specific improvement>"],
  "rewrittenContent": "<only if score < 70: the full rewritten markdown body>"
}}

Be strict about:
- AI-sounding phrases (error)
- Emojis or special characters (error)
- Missing first-person perspective (warning)
- Generic language without specifics (suggestion)

Return ONLY the JSON, no other text."""

        return PromptRequest(kind="review", text=text, temperature=0.3)

    def search(self, topics_query: str, days_back: int, limit: int) -> PromptRequest:
        """News discovery through a search-capable text service."""
        text = f"""Search for the latest news and articles about "{topics_query}" from the past {days_back} days.

Return ONLY a JSON array with the {limit} most relevant articles. Each article must have:
{{
  "title": "Article title",
  "summary": "2-3 sentence summary",
  "source": "Source name",
  "url": "Full URL to the article",
  "date": "Publication date in YYYY-MM-DD format"
}}

Return ONLY the JSON array, no other text."""

        return PromptRequest(
            kind="search",
            text=text,
            temperature=0.3,
            context={"query": topics_query, "days": days_back, "limit": limit},
        )
