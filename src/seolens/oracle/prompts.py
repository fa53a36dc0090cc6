"""
Prompt templates for the language-model oracle.
"""

from __future__ import annotations

import json

from seolens.protocols import Document

SYSTEM_PROMPT = "You are a helpful assistant that provides SEO analysis for blog content."

HEADLINE_CATEGORIES = (
    "power",
    "action",
    "descriptive",
    "number",
    "question",
    "adjective",
    "emotional",
)

HEADLINE_PROMPT = """Classify the words of the headline below.

Count how many words fall into each category. A word may be counted in more
than one category.

- power: persuasive words that trigger curiosity or urgency (e.g. "proven", "ultimate", "secret")
- action: verbs that prompt the reader to act (e.g. "boost", "learn", "discover")
- descriptive: words that describe the topic concretely
- number: numerals or spelled-out numbers
- question: question words (who, what, when, where, why, how)
- adjective: adjectives
- emotional: words carrying positive or negative emotion

Respond with a single JSON object and nothing else, using exactly these keys
with integer values:
{reply_shape}

Headline: {headline}"""

NARRATIVE_PROMPT = """Analyze the blog post below for SEO and reply in plain text with these sections:

## Suggestions
Five concrete SEO suggestions for the post.

## Meta Description
A rewritten meta description between 120 and 155 characters.

## Alternative Headlines
Three alternative headlines.

Title: {title}
SEO title: {seo_title}
Meta description: {seo_description}
Tags: {tags}

Content:
{content}"""


def headline_prompt(headline: str) -> str:
    reply_shape = json.dumps({name: 0 for name in HEADLINE_CATEGORIES})
    return HEADLINE_PROMPT.format(reply_shape=reply_shape, headline=headline.strip())


def narrative_prompt(document: Document, content: str, max_chars: int) -> str:
    if len(content) > max_chars:
        content = content[:max_chars].rstrip() + " ..."
    return NARRATIVE_PROMPT.format(
        title=document.title or "(none)",
        seo_title=document.seo_title or "(none)",
        seo_description=document.seo_description or "(none)",
        tags=", ".join(tag.name for tag in document.tags) or "(none)",
        content=content or "(empty)",
    )
