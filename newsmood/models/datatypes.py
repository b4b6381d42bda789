"""Data structures for the news sentiment pipeline."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class Article:
    """
    Represents a normalized article returned by the news metadata API.
    ``body`` stays ``None`` until the scraper fills it in.
    """
    url: str
    published_at: str  # ISO 8601 timestamp as returned by the API
    title: str
    author: Optional[str] = None
    description: Optional[str] = None
    source_id: Optional[str] = None
    source_name: Optional[str] = None
    body: Optional[str] = None


@dataclass
class NewsPage:
    """A single page of search results plus the API's total hit count.

    ``n_raw`` counts the entries the API returned, before unusable ones
    (no URL, ``"[Removed]"`` placeholders) were dropped from ``articles``.
    """
    total_results: int
    articles: List[Article] = field(default_factory=list)
    n_raw: int = 0


@dataclass
class Source:
    """A publisher known to the news metadata API."""
    id: str
    name: str
    description: Optional[str] = None
    url: Optional[str] = None
    category: Optional[str] = None
    language: Optional[str] = None
    country: Optional[str] = None


@dataclass
class PipelineRow:
    """
    One output row per article, written to ``articles.csv``.

    ``status`` records how far the article got: ``scored``,
    ``robots_disallowed``, ``no_body``, ``no_lexicon_match`` or ``error``.
    """
    date: Optional[str]
    url: str
    title: str
    author: Optional[str]
    source: Optional[str]
    allowed: bool
    status: str
    n_tokens: int
    n_matched: int
    sentiment_score: Optional[float]
    sentiment_label: Optional[str]


@dataclass
class DailySentiment:
    """Per-day aggregate over scored articles."""
    date: str
    mean_sentiment: float
    n_articles: int
