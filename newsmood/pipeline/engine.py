"""Pipeline engine — metadata → permission → scrape → score → aggregate → plot.

Flow:
  1. News      — NewsAPI search (``everything`` or ``top-headlines``)
  2. Dedupe    — one row per article URL
  3. Robots    — robots.txt check per URL; disallowed articles are never fetched
  4. Scrape    — sequential GET with a fixed delay, CSS-selector body extraction
  5. Sentiment — tokenize + lexicon join, mean value per article
  6. Aggregate — mean sentiment and article count per publish day
  7. Output    — articles.csv, daily_sentiment.csv, daily_sentiment.png

A failure on a single article is logged and recorded in its row status; the
engine always continues with the next article.
"""

import os
from typing import Any, Dict, List, Optional

import pandas as pd

from newsmood.core.cache import SQLiteCache
from newsmood.core.config import get_api_key
from newsmood.core.logger import logger
from newsmood.core.news_utils import dedupe_articles, published_day
from newsmood.models.datatypes import Article, PipelineRow
from newsmood.pipeline.aggregate import DAILY_COLUMNS, aggregate_by_day, daily_records, rows_to_frame
from newsmood.pipeline.plot import plot_daily_sentiment
from newsmood.providers.base import NewsProvider, SentimentProvider
from newsmood.providers.news import NewsAPIProvider
from newsmood.providers.robots import RobotsChecker
from newsmood.providers.scraper import DEFAULT_SELECTOR, DEFAULT_USER_AGENT, ArticleScraper
from newsmood.providers.sentiment import DEFAULT_LEXICON, LexiconSentimentProvider

ARTICLES_CSV = "articles.csv"
DAILY_CSV = "daily_sentiment.csv"
DAILY_PNG = "daily_sentiment.png"


class PipelineEngine:
    """Orchestrates the full news sentiment pipeline.

    Collaborators are built from ``config`` unless passed in explicitly.

    Args:
        config: Parsed config.yaml dict (passed in; not re-loaded internally).
        output_dir: Directory where CSVs and the chart are written.
    """

    def __init__(
        self,
        config: Dict[str, Any],
        output_dir: str = "output",
        news: Optional[NewsProvider] = None,
        robots: Optional[RobotsChecker] = None,
        scraper: Optional[ArticleScraper] = None,
        sentiment: Optional[SentimentProvider] = None,
    ) -> None:
        self.config = config
        self.output_dir = output_dir
        self.daily: pd.DataFrame = pd.DataFrame(columns=DAILY_COLUMNS)

        scraper_cfg = config.get("scraper", {}) or {}
        robots_cfg = config.get("robots", {}) or {}
        sentiment_cfg = config.get("sentiment", {}) or {}

        self.news = news or self._build_news_provider()
        self.scraper = scraper or ArticleScraper(
            selector=scraper_cfg.get("selector", DEFAULT_SELECTOR),
            delay_seconds=float(scraper_cfg.get("delay_seconds", 1.0)),
            timeout=scraper_cfg.get("timeout", 15),
            user_agent=scraper_cfg.get("user_agent", DEFAULT_USER_AGENT),
        )
        # robots.txt is matched against the agent the scraper actually sends
        robots_agent = robots_cfg.get("user_agent") or self.scraper.session.headers.get(
            "User-Agent", DEFAULT_USER_AGENT
        )
        self.robots = robots or RobotsChecker(
            user_agent=robots_agent,
            session=self.scraper.session,
            timeout=scraper_cfg.get("timeout", 15),
        )
        self.sentiment = sentiment or LexiconSentimentProvider(
            lexicon=sentiment_cfg.get("lexicon", DEFAULT_LEXICON),
            neutral_band=float(sentiment_cfg.get("neutral_band", 0.05)),
        )

    # ── public ────────────────────────────────────────────────────────────────

    def run(self) -> List[PipelineRow]:
        """Run the pipeline once.

        Returns:
            List of :class:`PipelineRow`, one per unique article.
        """
        articles = dedupe_articles(self._fetch_metadata())
        logger.info(f"PipelineEngine: {len(articles)} unique articles from the news API")

        permissions = self.robots.paths_allowed([a.url for a in articles])
        allowed = [a for a in articles if permissions.get(a.url, False)]
        for article in articles:
            if not permissions.get(article.url, False):
                logger.warning(f"PipelineEngine: ROBOTS_DISALLOWED {article.url}")

        self.scraper.fetch_bodies(allowed)

        rows = [
            self._process_row(article, permissions.get(article.url, False))
            for article in articles
        ]

        frame = rows_to_frame(rows)
        self.daily = aggregate_by_day(frame)
        for day in daily_records(self.daily):
            logger.info(
                f"DAILY [{day.date}] mean_sentiment={day.mean_sentiment:+.3f} "
                f"n_articles={day.n_articles}"
            )
        self._write_outputs(frame, self.daily)

        scored = sum(1 for row in rows if row.status == "scored")
        logger.info(
            f"PipelineEngine: {scored}/{len(rows)} articles scored across "
            f"{len(self.daily)} days → {self.output_dir}"
        )
        return rows

    # ── internal ──────────────────────────────────────────────────────────────

    def _build_news_provider(self) -> NewsAPIProvider:
        cache_cfg = self.config.get("cache", {}) or {}
        cache = None
        if cache_cfg.get("enabled", True):
            cache = SQLiteCache(cache_cfg.get("path", os.path.join(self.output_dir, ".cache.db")))
        return NewsAPIProvider(api_key=get_api_key(), cache_instance=cache)

    def _fetch_metadata(self) -> List[Article]:
        """Run the configured search against the news API."""
        news_cfg = self.config.get("news", {}) or {}
        endpoint = news_cfg.get("endpoint", "everything")
        max_results = int(news_cfg.get("max_results", 100))

        if endpoint == "top-headlines":
            return self.news.fetch_headlines_all(
                query=news_cfg.get("query"),
                country=news_cfg.get("country"),
                category=news_cfg.get("category"),
                sources=news_cfg.get("sources"),
                max_results=max_results,
            )
        if endpoint != "everything":
            raise ValueError(f"Unknown news endpoint {endpoint!r}")

        optional = {
            "domains": news_cfg.get("domains"),
            "exclude_domains": news_cfg.get("exclude_domains"),
            "language": news_cfg.get("language"),
            "sort_by": news_cfg.get("sort_by"),
            "page_size": news_cfg.get("page_size"),
        }
        return self.news.fetch_everything_all(
            query=news_cfg.get("query"),
            sources=news_cfg.get("sources"),
            from_date=_as_text(news_cfg.get("from")),
            to_date=_as_text(news_cfg.get("to")),
            max_results=max_results,
            **{k: v for k, v in optional.items() if v is not None},
        )

    def _process_row(self, article: Article, allowed: bool) -> PipelineRow:
        """Score one article and build its output row."""
        row = PipelineRow(
            date=published_day(article.published_at),
            url=article.url,
            title=article.title,
            author=article.author,
            source=article.source_name or article.source_id,
            allowed=allowed,
            status="robots_disallowed",
            n_tokens=0,
            n_matched=0,
            sentiment_score=None,
            sentiment_label=None,
        )
        if not allowed:
            return row
        if not article.body:
            row.status = "no_body"
            return row

        try:
            result = self.sentiment.analyze(article.body)
        except Exception as exc:
            logger.error(f"PipelineEngine: sentiment failed for {article.url}: {exc}")
            row.status = "error"
            return row

        row.n_tokens = result.n_tokens
        row.n_matched = result.n_matched
        if result.score is None:
            logger.warning(f"PipelineEngine: NO_LEXICON_MATCH {article.url}")
            row.status = "no_lexicon_match"
            return row

        row.status = "scored"
        row.sentiment_score = result.score
        row.sentiment_label = result.label
        return row

    def _write_outputs(self, frame: pd.DataFrame, daily: pd.DataFrame) -> None:
        """Write articles.csv, daily_sentiment.csv and the chart (overwrites each run)."""
        os.makedirs(self.output_dir, exist_ok=True)

        articles_path = os.path.join(self.output_dir, ARTICLES_CSV)
        frame.to_csv(articles_path, index=False)
        logger.info(f"PipelineEngine: saved {len(frame)} articles → {articles_path}")

        daily_path = os.path.join(self.output_dir, DAILY_CSV)
        daily.to_csv(daily_path, index=False)
        logger.info(f"PipelineEngine: saved {len(daily)} days → {daily_path}")

        query = (self.config.get("news", {}) or {}).get("query")
        title = f"Mean article sentiment per day — {query}" if query else "Mean article sentiment per day"
        plot_daily_sentiment(daily, os.path.join(self.output_dir, DAILY_PNG), title=title)


# ── helpers ───────────────────────────────────────────────────────────────────

def _as_text(value: Any) -> Optional[str]:
    """YAML turns bare dates into ``datetime.date``; the API wants strings."""
    if value is None or value == "":
        return None
    return str(value)
