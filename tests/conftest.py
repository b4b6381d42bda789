from typing import Any, Callable, Dict, List, Optional, Union

import pandas as pd
import pytest

from newsmood.providers.sentiment import LexiconSentimentProvider


class FakeResponse:
    def __init__(self, status_code: int = 200, json_data: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._json = json_data
        self.text = text

    def json(self) -> Any:
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json


Route = Union[FakeResponse, Exception, Callable[[Optional[Dict[str, Any]]], FakeResponse], List[Any]]


class FakeSession:
    """Stands in for ``requests.Session``; answers GETs from a URL → route table.

    A route can be a response, an exception to raise, a callable taking the
    query params, or a list consumed one entry per call.
    """

    def __init__(self, routes: Optional[Dict[str, Route]] = None) -> None:
        self.routes: Dict[str, Route] = routes or {}
        self.headers: Dict[str, str] = {}
        self.calls: List[Dict[str, Any]] = []

    def get(self, url: str, params: Optional[Dict[str, Any]] = None, timeout: Any = None) -> FakeResponse:
        self.calls.append({"url": url, "params": dict(params or {}), "timeout": timeout})
        if url not in self.routes:
            return FakeResponse(404, text="not found")
        route = self.routes[url]
        if isinstance(route, list):
            route = route.pop(0)
        if isinstance(route, Exception):
            raise route
        if callable(route):
            return route(params)
        return route


def make_api_article(n: int, day: str = "2024-05-01", **overrides: Any) -> Dict[str, Any]:
    article = {
        "source": {"id": "the-new-york-times", "name": "The New York Times"},
        "author": f"Reporter {n}",
        "title": f"Headline {n}",
        "description": f"Description {n}",
        "url": f"https://www.nytimes.com/2024/05/01/world/story-{n}.html",
        "urlToImage": None,
        "publishedAt": f"{day}T12:00:00Z",
        "content": "truncated…",
    }
    article.update(overrides)
    return article


def make_api_payload(articles: List[Dict[str, Any]], total: Optional[int] = None) -> Dict[str, Any]:
    return {
        "status": "ok",
        "totalResults": len(articles) if total is None else total,
        "articles": articles,
    }


@pytest.fixture
def fake_session_cls():
    return FakeSession


@pytest.fixture
def tiny_lexicon() -> pd.DataFrame:
    return pd.DataFrame({
        "word": ["good", "great", "bad", "awful", "fine"],
        "value": [3.0, 3.0, -3.0, -4.0, 0.0],
    })


@pytest.fixture
def sentiment_provider(tiny_lexicon) -> LexiconSentimentProvider:
    return LexiconSentimentProvider(lexicon=tiny_lexicon)


@pytest.fixture(autouse=True)
def no_sleep(monkeypatch):
    """Retry and scraper delays must not slow the suite down."""
    sleeps: List[float] = []
    monkeypatch.setattr("newsmood.core.retry.time.sleep", sleeps.append)
    monkeypatch.setattr("newsmood.providers.scraper.time.sleep", sleeps.append)
    return sleeps
