"""Sequential article-body scraper.

One GET per article, no retries. Any status other than 200 (or a transport
error) leaves the body missing. Requests are spaced by a fixed delay so the
publisher sees at most one request per ``delay_seconds``.
"""

import time
from typing import List, Optional

import requests
from bs4 import BeautifulSoup

from newsmood.core.logger import logger
from newsmood.models.datatypes import Article

# Paragraphs inside the article body container on nytimes.com
DEFAULT_SELECTOR = 'section[name="articleBody"] p'
DEFAULT_USER_AGENT = "newsmood/0.1 (+https://github.com/newsmood/newsmood)"


def extract_body(html: str, selector: str = DEFAULT_SELECTOR) -> str:
    """Return the text of every node matching ``selector``, joined by single spaces.

    Args:
        html: Raw page HTML.
        selector: CSS selector for the body paragraphs.

    Returns:
        str: Concatenated paragraph text, or ``""`` when nothing matches.
    """
    soup = BeautifulSoup(html, "lxml")
    parts = [" ".join(node.get_text().split()) for node in soup.select(selector)]
    return " ".join(part for part in parts if part)


class ArticleScraper:
    """Fetches article pages one at a time and extracts their body text.

    Args:
        selector: CSS selector passed to :func:`extract_body`.
        delay_seconds: Pause between consecutive requests.
        timeout: Per-request timeout in seconds.
        user_agent: ``User-Agent`` header sent with each request.
        session: Optional ``requests.Session``.
    """

    def __init__(
        self,
        selector: str = DEFAULT_SELECTOR,
        delay_seconds: float = 1.0,
        timeout: float = 15,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.selector = selector
        self.delay_seconds = delay_seconds
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        })

    def get_article_body(self, url: str) -> Optional[str]:
        """Fetch ``url`` and return its body text, or ``None`` if the page is unavailable."""
        try:
            resp = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error(f"ArticleScraper: INFRA_FAILURE for {url}: {exc}")
            return None

        if resp.status_code != 200:
            logger.warning(f"ArticleScraper: HTTP_{resp.status_code} for {url}")
            return None

        body = extract_body(resp.text, self.selector)
        if not body:
            logger.warning(f"ArticleScraper: NO_BODY, selector {self.selector!r} matched nothing at {url}")
        return body

    def fetch_bodies(self, articles: List[Article]) -> List[Article]:
        """Fill ``article.body`` for each article, strictly in order.

        Sleeps ``delay_seconds`` between requests, never before the first one.

        Returns:
            The same list, for chaining.
        """
        for i, article in enumerate(articles):
            if i > 0 and self.delay_seconds > 0:
                time.sleep(self.delay_seconds)
            article.body = self.get_article_body(article.url)
            logger.info(
                f"ArticleScraper: [{i + 1}/{len(articles)}] "
                f"{len(article.body or '')} chars — {article.url}"
            )
        return articles
