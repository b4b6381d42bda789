"""Abstract base classes for data providers."""

from abc import ABC, abstractmethod
from typing import List, Optional

from newsmood.models.datatypes import Article, Source


class NewsProvider(ABC):
    """Abstract interface for fetching article metadata."""

    @abstractmethod
    def fetch_everything_all(
        self,
        query: Optional[str] = None,
        sources: Optional[str] = None,
        from_date: Optional[str] = None,
        to_date: Optional[str] = None,
        max_results: int = 100,
        **kwargs,
    ) -> List[Article]:
        """
        Fetch every article matching a search, across as many pages as needed.

        Args:
            query (str): Free-text search query.
            sources (str): Comma-separated source identifiers.
            from_date (str): Oldest publish date, YYYY-MM-DD.
            to_date (str): Newest publish date, YYYY-MM-DD.
            max_results (int): Upper bound on returned articles.

        Returns:
            List[Article]: Articles in API order.
        """
        pass

    @abstractmethod
    def fetch_sources(
        self,
        category: Optional[str] = None,
        language: Optional[str] = None,
        country: Optional[str] = None,
    ) -> List[Source]:
        """List the publishers the API knows about."""
        pass


class SentimentProvider(ABC):
    """Abstract interface for scoring the sentiment of a text."""

    @abstractmethod
    def analyze(self, text: str):
        """
        Analyze the sentiment of a given text.

        Args:
            text (str): The text to analyze.

        Returns:
            SentimentResult: label, score and token counts.
        """
        pass
