"""Utility helpers for article metadata: publish dates, URL identity, de-duplication."""

from typing import Iterable, List, Optional
from urllib.parse import urlsplit, urlunsplit

import pandas as pd

from newsmood.core.logger import logger
from newsmood.models.datatypes import Article


def published_day(published_at: Optional[str]) -> Optional[str]:
    """Return the UTC calendar day of an ISO timestamp.

    Examples:
        ``"2024-03-05T23:10:00Z"`` → ``"2024-03-05"``
        ``"2024-03-05T23:10:00-05:00"`` → ``"2024-03-06"``

    Args:
        published_at (str): Timestamp as returned by the API.

    Returns:
        Optional[str]: ``YYYY-MM-DD``, or ``None`` when the value cannot be parsed.
    """
    if not published_at:
        return None
    ts = pd.to_datetime(published_at, utc=True, errors="coerce")
    if pd.isna(ts):
        logger.debug(f"published_day: unparsable timestamp {published_at!r}")
        return None
    return ts.strftime("%Y-%m-%d")


def normalize_url(url: str) -> str:
    """Canonical form of an article URL used for identity checks.

    Lowercases scheme and host, drops the fragment and any trailing slash.
    The query string is kept since some publishers route articles through it.
    """
    parts = urlsplit(url.strip())
    path = parts.path.rstrip("/") or "/"
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


def host_of(url: str) -> str:
    """Return ``scheme://netloc`` for a URL (robots.txt is scoped per host)."""
    parts = urlsplit(url)
    return f"{parts.scheme.lower()}://{parts.netloc.lower()}"


def dedupe_articles(articles: Iterable[Article]) -> List[Article]:
    """Keep the first article per normalized URL, preserving input order.

    Args:
        articles: Articles in API order.

    Returns:
        List[Article]: Articles with unique URLs.
    """
    seen = set()
    unique: List[Article] = []
    for article in articles:
        key = normalize_url(article.url)
        if key in seen:
            logger.debug(f"dedupe_articles: dropped duplicate {article.url}")
            continue
        seen.add(key)
        unique.append(article)
    return unique
