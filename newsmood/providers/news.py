"""NewsAPI (newsapi.org v2) metadata provider.

Endpoints used:
  1. ``/everything``             — full archive search (query and/or sources)
  2. ``/top-headlines``          — current headlines by country/category/source
  3. ``/top-headlines/sources``  — publisher catalogue

Only metadata comes from the API (URL, publish time, author, title). Article
bodies are scraped separately by :mod:`newsmood.providers.scraper`.

Pagination is sequential: page N+1 is requested only after page N arrived,
and stops at ``totalResults``, ``max_results`` or the first empty page.
"""

import math
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import requests

from newsmood.core.cache import SQLiteCache, make_cache_key
from newsmood.core.exceptions import NewsAPIError, QueryValidationError
from newsmood.core.logger import logger
from newsmood.core.retry import with_retries
from newsmood.models.datatypes import Article, NewsPage, Source
from newsmood.providers.base import NewsProvider

NEWSAPI_BASE_URL = "https://newsapi.org/v2"
MAX_PAGE_SIZE = 100
REMOVED_PLACEHOLDER = "[Removed]"

SORT_ORDERS = ("relevancy", "popularity", "publishedAt")
LANGUAGES = ("ar", "de", "en", "es", "fr", "he", "it", "nl", "no", "pt", "ru", "sv", "ud", "zh")
CATEGORIES = ("business", "entertainment", "general", "health", "science", "sports", "technology")

# Raised by the API when a free-tier key pages past its result cap.
_RESULTS_CAP_CODE = "maximumResultsReached"


class NewsAPIProvider(NewsProvider):
    """Client for the NewsAPI v2 REST endpoints.

    The API key travels in the ``X-Api-Key`` header so it never appears in
    logged URLs or cache keys. Successful pages are cached in SQLite when a
    cache instance is supplied.

    Args:
        api_key: NewsAPI key.
        cache_instance: Optional shared :class:`SQLiteCache`.
        session: Optional ``requests.Session`` (one is created if omitted).
        timeout: Per-request timeout in seconds.
        base_url: Override for the API root.
    """

    def __init__(
        self,
        api_key: str,
        cache_instance: Optional[SQLiteCache] = None,
        session: Optional[requests.Session] = None,
        timeout: float = 15,
        base_url: str = NEWSAPI_BASE_URL,
    ) -> None:
        self.api_key = api_key
        self.cache = cache_instance
        self.session = session or requests.Session()
        self.session.headers.update({"X-Api-Key": api_key})
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")

    # ── /everything ─────────────────────────────────────────────────────────

    def fetch_everything(
        self,
        query: Optional[str] = None,
        sources: Optional[str] = None,
        domains: Optional[str] = None,
        exclude_domains: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        language: Optional[str] = None,
        sort_by: str = "publishedAt",
        page_size: int = MAX_PAGE_SIZE,
        page: int = 1,
    ) -> NewsPage:
        """Fetch one page of ``/everything``.

        Args:
            query: Keywords or phrase; NewsAPI query syntax applies.
            sources: Comma-separated source ids (e.g. ``"the-new-york-times"``).
            domains: Comma-separated domains to restrict to.
            exclude_domains: Comma-separated domains to exclude.
            from_date: Oldest article date, ``YYYY-MM-DD`` or ISO timestamp.
            to_date: Newest article date.
            language: Two-letter ISO-639-1 code.
            sort_by: One of ``relevancy``, ``popularity``, ``publishedAt``.
            page_size: Results per page, 1–100.
            page: 1-based page number.

        Returns:
            :class:`NewsPage` with parsed articles and ``totalResults``.
        """
        if not (query or sources or domains):
            raise QueryValidationError(
                "At least one of query, sources or domains is required.", "query"
            )
        _check_page(page_size, page)
        if sort_by not in SORT_ORDERS:
            raise QueryValidationError(
                f"sort_by must be one of {SORT_ORDERS}, got {sort_by!r}", "sort_by"
            )
        if language is not None and language not in LANGUAGES:
            raise QueryValidationError(f"Unsupported language {language!r}", "language")
        from_value = _check_date(from_date, "from_date")
        to_value = _check_date(to_date, "to_date")
        if from_value and to_value and from_value > to_value:
            raise QueryValidationError(
                f"from_date {from_date} is after to_date {to_date}", "from_date"
            )

        params = {
            "q": query,
            "sources": sources,
            "domains": domains,
            "excludeDomains": exclude_domains,
            "from": str(from_date) if from_date else None,
            "to": str(to_date) if to_date else None,
            "language": language,
            "sortBy": sort_by,
            "pageSize": page_size,
            "page": page,
        }
        payload = self._get("everything", params)
        return _parse_page(payload)

    def fetch_everything_all(
        self,
        query: Optional[str] = None,
        sources: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        max_results: int = MAX_PAGE_SIZE,
        **kwargs: Any,
    ) -> List[Article]:
        """Page through ``/everything`` until all results (or ``max_results``) arrived.

        Extra keyword arguments are forwarded to :meth:`fetch_everything`.
        """
        page_size = min(kwargs.pop("page_size", MAX_PAGE_SIZE), max_results)

        def fetch_page(page: int) -> NewsPage:
            return self.fetch_everything(
                query=query, sources=sources, from_date=from_date, to_date=to_date,
                page_size=page_size, page=page, **kwargs,
            )

        label = query or sources or kwargs.get("domains")
        return _paginate(fetch_page, page_size, max_results, label=f"everything[{label}]")

    # ── /top-headlines ──────────────────────────────────────────────────────

    def fetch_headlines(
        self,
        query: Optional[str] = None,
        country: Optional[str] = None,
        category: Optional[str] = None,
        sources: Optional[str] = None,
        page_size: int = MAX_PAGE_SIZE,
        page: int = 1,
    ) -> NewsPage:
        """Fetch one page of ``/top-headlines``.

        NewsAPI refuses ``sources`` mixed with ``country`` or ``category``,
        so that combination is rejected locally.
        """
        if sources and (country or category):
            raise QueryValidationError(
                "sources cannot be combined with country or category.", "sources"
            )
        if not (query or country or category or sources):
            raise QueryValidationError(
                "At least one of query, country, category or sources is required.", "query"
            )
        if category is not None and category not in CATEGORIES:
            raise QueryValidationError(f"Unknown category {category!r}", "category")
        _check_page(page_size, page)

        params = {
            "q": query,
            "country": country,
            "category": category,
            "sources": sources,
            "pageSize": page_size,
            "page": page,
        }
        payload = self._get("top-headlines", params)
        return _parse_page(payload)

    def fetch_headlines_all(
        self,
        query: Optional[str] = None,
        country: Optional[str] = None,
        category: Optional[str] = None,
        sources: Optional[str] = None,
        max_results: int = MAX_PAGE_SIZE,
    ) -> List[Article]:
        """Page through ``/top-headlines`` the same way as :meth:`fetch_everything_all`."""
        page_size = min(MAX_PAGE_SIZE, max_results)

        def fetch_page(page: int) -> NewsPage:
            return self.fetch_headlines(
                query=query, country=country, category=category, sources=sources,
                page_size=page_size, page=page,
            )

        label = query or sources or country or category
        return _paginate(fetch_page, page_size, max_results, label=f"top-headlines[{label}]")

    # ── /top-headlines/sources ──────────────────────────────────────────────

    def fetch_sources(
        self,
        category: Optional[str] = None,
        language: Optional[str] = None,
        country: Optional[str] = None,
    ) -> List[Source]:
        """Return the publisher catalogue, optionally filtered."""
        if category is not None and category not in CATEGORIES:
            raise QueryValidationError(f"Unknown category {category!r}", "category")
        if language is not None and language not in LANGUAGES:
            raise QueryValidationError(f"Unsupported language {language!r}", "language")

        params = {"category": category, "language": language, "country": country}
        payload = self._get("top-headlines/sources", params)
        sources = [
            Source(
                id=raw.get("id") or "",
                name=raw.get("name") or "",
                description=raw.get("description"),
                url=raw.get("url"),
                category=raw.get("category"),
                language=raw.get("language"),
                country=raw.get("country"),
            )
            for raw in payload.get("sources", [])
        ]
        logger.info(f"NewsAPIProvider: {len(sources)} sources listed")
        return sources

    # ── internal ────────────────────────────────────────────────────────────

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Cache-aware GET returning the decoded ``status == "ok"`` payload."""
        params = {k: v for k, v in params.items() if v is not None}
        cache_key = make_cache_key(endpoint, params)
        if self.cache is not None:
            cached = self.cache.get(cache_key)
            if cached is not None:
                logger.debug(f"NewsAPIProvider: cache hit for {endpoint} {params}")
                return cached

        payload = self._call_api(endpoint, params)
        if self.cache is not None:
            self.cache.set(cache_key, payload)
        return payload

    @with_retries(max_retries=3, initial_delay=2, exceptions=(requests.RequestException,))
    def _call_api(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """Issue the HTTP request. Transport errors are retried by the decorator."""
        url = f"{self.base_url}/{endpoint}"
        logger.info(f"NewsAPIProvider: GET /{endpoint} params={params}")
        resp = self.session.get(url, params=params, timeout=self.timeout)

        try:
            payload = resp.json()
        except ValueError:
            payload = {}

        if resp.status_code != 200 or payload.get("status") != "ok":
            code = payload.get("code") or f"http{resp.status_code}"
            message = payload.get("message") or resp.text[:200]
            logger.error(
                f"NewsAPIProvider: INFRA_FAILURE /{endpoint} "
                f"HTTP {resp.status_code} code={code}: {message}"
            )
            raise NewsAPIError(code, message, http_status=resp.status_code)

        return payload


# ── helpers ───────────────────────────────────────────────────────────────────

def _check_page(page_size: int, page: int) -> None:
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise QueryValidationError(
            f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}", "page_size"
        )
    if page < 1:
        raise QueryValidationError(f"page must be >= 1, got {page}", "page")


def _check_date(value: Optional[str], name: str) -> Optional[datetime]:
    """Parse a date parameter, raising :class:`QueryValidationError` if malformed."""
    if value is None or value == "":
        return None
    text = str(value)
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise QueryValidationError(f"{name} is not an ISO date: {text!r}", name) from None
    return parsed.replace(tzinfo=None)


def _parse_article(raw: Dict[str, Any]) -> Optional[Article]:
    """Map one API article dict onto :class:`Article`; ``None`` for unusable rows."""
    url = (raw.get("url") or "").strip()
    title = (raw.get("title") or "").strip()
    if not url or title == REMOVED_PLACEHOLDER:
        return None
    source = raw.get("source") or {}
    return Article(
        url=url,
        published_at=raw.get("publishedAt") or "",
        title=title,
        author=raw.get("author"),
        description=raw.get("description"),
        source_id=source.get("id"),
        source_name=source.get("name"),
    )


def _parse_page(payload: Dict[str, Any]) -> NewsPage:
    raw_articles = payload.get("articles") or []
    articles = []
    for raw in raw_articles:
        article = _parse_article(raw)
        if article is None:
            logger.debug(f"NewsAPIProvider: skipped unusable article {raw.get('url')!r}")
            continue
        articles.append(article)
    return NewsPage(
        total_results=int(payload.get("totalResults", 0)),
        articles=articles,
        n_raw=len(raw_articles),
    )


def _paginate(
    fetch_page: Callable[[int], NewsPage],
    page_size: int,
    max_results: int,
    label: str,
) -> List[Article]:
    """Request pages 1..N in order and concatenate their articles."""
    if max_results < 1:
        raise QueryValidationError(f"max_results must be >= 1, got {max_results}", "max_results")

    first = fetch_page(1)
    articles: List[Article] = list(first.articles)
    target = min(first.total_results, max_results)
    n_pages = math.ceil(target / page_size) if target else 1
    logger.info(
        f"NewsAPIProvider: {label} totalResults={first.total_results} "
        f"→ fetching {n_pages} page(s) (max_results={max_results})"
    )

    for page in range(2, n_pages + 1):
        try:
            result = fetch_page(page)
        except NewsAPIError as exc:
            if exc.code == _RESULTS_CAP_CODE:
                logger.warning(
                    f"NewsAPIProvider: {label} result cap reached at page {page}; "
                    f"keeping {len(articles)} articles"
                )
                break
            raise
        if not result.n_raw:
            break
        articles.extend(result.articles)

    return articles[:max_results]
