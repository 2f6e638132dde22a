"""Keyword-lexicon sentiment tagging for news articles.

Matching is plain substring containment on the lower-cased title and
description, so "war" also matches "warning" and "award". The keyword lists in
``config`` are tuned against that behaviour; keep it unless the lists change too.
"""
from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from .config import (
    DEFAULT_LEXICONS,
    SENTIMENT_NEGATIVE,
    SENTIMENT_NEUTRAL,
    SENTIMENT_POSITIVE,
    Lexicons,
)
from .models import Article


def _article_text(title: str | None, description: str | None) -> str:
    return f"{title or ''} {description or ''}".lower()


def keyword_hits(text: str, keywords: Iterable[str]) -> int:
    """Count distinct keywords found in ``text``; repeats of one keyword count once."""
    lowered = (text or "").lower()
    return sum(1 for keyword in set(keywords) if keyword in lowered)


def contains_keyword(text: str, keywords: Iterable[str]) -> bool:
    lowered = (text or "").lower()
    return any(keyword in lowered for keyword in keywords)


def classify(title: str | None, description: str | None, lexicons: Lexicons = DEFAULT_LEXICONS) -> str:
    """Label text as 'positive', 'negative' or 'neutral'.

    Depressing and fear keywords both count towards the negative score. The
    higher non-zero score wins; ties (including no hits at all) are neutral.
    """
    text = _article_text(title, description)
    positive_score = keyword_hits(text, lexicons.positive)
    negative_score = keyword_hits(text, lexicons.negative)

    if positive_score > negative_score and positive_score > 0:
        return SENTIMENT_POSITIVE
    if negative_score > positive_score and negative_score > 0:
        return SENTIMENT_NEGATIVE
    return SENTIMENT_NEUTRAL


def classify_article(article: Article, lexicons: Lexicons = DEFAULT_LEXICONS) -> Article:
    """Return a copy of ``article`` with its sentiment set; the input is left untouched."""
    return replace(article, sentiment=classify(article.title, article.description, lexicons))


def classify_articles(articles: list[Article], lexicons: Lexicons = DEFAULT_LEXICONS) -> list[Article]:
    return [classify_article(article, lexicons) for article in articles]
