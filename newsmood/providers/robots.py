"""robots.txt permission checks for article URLs.

robots.txt is fetched once per host with ``requests`` (same session settings as
the scraper) and parsed with :class:`urllib.robotparser.RobotFileParser`.

Status handling:
    2xx            → rules parsed from the body
    401 / 403      → every path disallowed
    other 4xx      → every path allowed (no robots.txt)
    5xx / network  → every path disallowed
"""

from typing import Dict, Iterable, Optional
from urllib.robotparser import RobotFileParser

import requests

from newsmood.core.logger import logger
from newsmood.core.news_utils import host_of


class RobotsChecker:
    """Answers "may ``user_agent`` fetch this URL?" for many URLs.

    Args:
        user_agent: Agent name matched against robots.txt groups.
        session: Optional ``requests.Session``.
        timeout: Timeout for each robots.txt request in seconds.
    """

    def __init__(
        self,
        user_agent: str = "*",
        session: Optional[requests.Session] = None,
        timeout: float = 15,
    ) -> None:
        self.user_agent = user_agent
        self.session = session or requests.Session()
        self.timeout = timeout
        self._parsers: Dict[str, RobotFileParser] = {}

    def paths_allowed(self, urls: Iterable[str]) -> Dict[str, bool]:
        """Check every URL, fetching each host's robots.txt at most once.

        Returns:
            Dict[str, bool]: URL → permission, in input order.
        """
        results = {url: self.is_allowed(url) for url in urls}
        denied = sum(1 for ok in results.values() if not ok)
        logger.info(
            f"RobotsChecker: {len(results) - denied}/{len(results)} URLs allowed "
            f"for user-agent {self.user_agent!r}"
        )
        return results

    def is_allowed(self, url: str) -> bool:
        parser = self._parser_for(host_of(url))
        allowed = parser.can_fetch(self.user_agent, url)
        if not allowed:
            logger.debug(f"RobotsChecker: ROBOTS_DISALLOWED {url}")
        return allowed

    # ── internal ─────────────────────────────────────────────────────────────

    def _parser_for(self, host: str) -> RobotFileParser:
        if host not in self._parsers:
            self._parsers[host] = self._load(host)
        return self._parsers[host]

    def _load(self, host: str) -> RobotFileParser:
        robots_url = f"{host}/robots.txt"
        parser = RobotFileParser(robots_url)
        try:
            resp = self.session.get(robots_url, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error(f"RobotsChecker: INFRA_FAILURE fetching {robots_url}: {exc}")
            parser.disallow_all = True
            return parser

        if 200 <= resp.status_code < 300:
            parser.parse(resp.text.splitlines())
        elif resp.status_code in (401, 403):
            logger.warning(f"RobotsChecker: {robots_url} HTTP {resp.status_code} — disallowing host")
            parser.disallow_all = True
        elif 400 <= resp.status_code < 500:
            logger.info(f"RobotsChecker: no robots.txt at {host} (HTTP {resp.status_code})")
            parser.allow_all = True
        else:
            logger.error(
                f"RobotsChecker: INFRA_FAILURE {robots_url} HTTP {resp.status_code} — disallowing host"
            )
            parser.disallow_all = True
        return parser
