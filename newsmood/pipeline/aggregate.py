"""Tabular views of pipeline output: the article table and its per-day aggregate."""

from dataclasses import asdict
from typing import List

import pandas as pd

from newsmood.models.datatypes import DailySentiment, PipelineRow

ARTICLE_COLUMNS = [
    "date", "url", "title", "author", "source", "allowed", "status",
    "n_tokens", "n_matched", "sentiment_score", "sentiment_label",
]
DAILY_COLUMNS = ["date", "mean_sentiment", "n_articles"]


def rows_to_frame(rows: List[PipelineRow]) -> pd.DataFrame:
    """One DataFrame row per article, columns in :data:`ARTICLE_COLUMNS` order."""
    if not rows:
        return pd.DataFrame(columns=ARTICLE_COLUMNS)
    return pd.DataFrame([asdict(row) for row in rows], columns=ARTICLE_COLUMNS)


def aggregate_by_day(frame: pd.DataFrame) -> pd.DataFrame:
    """Mean sentiment and article count per publish day.

    Only articles with a sentiment score and a parsable date contribute.

    Args:
        frame: Output of :func:`rows_to_frame`.

    Returns:
        pd.DataFrame: Columns ``date``, ``mean_sentiment``, ``n_articles``,
        one row per day, ascending by date.
    """
    scored = frame.dropna(subset=["date", "sentiment_score"])
    if scored.empty:
        return pd.DataFrame(columns=DAILY_COLUMNS)

    daily = (
        scored.assign(sentiment_score=scored["sentiment_score"].astype(float))
        .groupby("date", sort=True)
        .agg(mean_sentiment=("sentiment_score", "mean"), n_articles=("url", "count"))
        .reset_index()
    )
    daily["mean_sentiment"] = daily["mean_sentiment"].round(4)
    daily["n_articles"] = daily["n_articles"].astype(int)
    return daily[DAILY_COLUMNS]


def daily_records(daily: pd.DataFrame) -> List[DailySentiment]:
    """Convert the aggregate frame into :class:`DailySentiment` objects."""
    return [
        DailySentiment(
            date=str(rec["date"]),
            mean_sentiment=float(rec["mean_sentiment"]),
            n_articles=int(rec["n_articles"]),
        )
        for rec in daily.to_dict("records")
    ]
