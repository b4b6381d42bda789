"""Output validator — sanity checks on articles.csv and daily_sentiment.csv.

Checks:
  1. Both CSVs exist and carry the expected columns
  2. One row per article (URLs unique)
  3. sentiment_score within the lexicon range [-4.0, 4.0]
  4. Daily n_articles sums to the number of dated, scored articles
  5. Daily dates strictly ascending

Usage:
    python -m newsmood.pipeline.validator output/
"""

import os
import sys
from typing import List, Tuple

import pandas as pd

from newsmood.pipeline.aggregate import ARTICLE_COLUMNS, DAILY_COLUMNS
from newsmood.pipeline.engine import ARTICLES_CSV, DAILY_CSV
from newsmood.providers.sentiment import LEXICON_BOUNDS


def validate(output_dir: str) -> Tuple[bool, List[str]]:
    """Run all validation checks against the files in ``output_dir``.

    Args:
        output_dir: Directory written by :class:`PipelineEngine`.

    Returns:
        Tuple of ``(passed: bool, messages: list[str])``.
        ``messages`` contains PASS/FAIL lines for each check.
    """
    messages: List[str] = []
    passed = True

    # ── load ──────────────────────────────────────────────────────────────────
    frames = {}
    for name, columns in ((ARTICLES_CSV, ARTICLE_COLUMNS), (DAILY_CSV, DAILY_COLUMNS)):
        path = os.path.join(output_dir, name)
        try:
            df = pd.read_csv(path)
        except FileNotFoundError:
            return False, [f"FAIL  file not found: {path}"]
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
            return False, [f"FAIL  could not read {path}: {exc}"]
        missing = [c for c in columns if c not in df.columns]
        if missing:
            return False, [f"FAIL  {name} missing columns: {missing}"]
        frames[name] = df

    articles = frames[ARTICLES_CSV]
    daily = frames[DAILY_CSV]

    # ── check 1: unique URLs ──────────────────────────────────────────────────
    dupes = articles["url"][articles["url"].duplicated()].tolist()
    if not dupes:
        messages.append(f"PASS  {len(articles)} articles, URLs unique")
    else:
        messages.append(f"FAIL  {len(dupes)} duplicate URL(s): {dupes[:3]}")
        passed = False

    # ── check 2: score range ──────────────────────────────────────────────────
    low, high = LEXICON_BOUNDS
    scores = articles["sentiment_score"].dropna()
    bad = scores[(scores < low) | (scores > high)]
    if bad.empty:
        messages.append(f"PASS  sentiment_score ∈ [{low}, {high}] for all scored rows")
    else:
        messages.append(f"FAIL  sentiment_score out of range in {len(bad)} rows: {bad.tolist()[:3]}")
        passed = False

    # ── check 3: daily counts reconcile ───────────────────────────────────────
    scored = articles.dropna(subset=["date", "sentiment_score"])
    total = int(daily["n_articles"].sum()) if not daily.empty else 0
    if total == len(scored):
        messages.append(f"PASS  daily n_articles sum = {total} scored articles")
    else:
        messages.append(f"FAIL  daily n_articles sum = {total}, scored articles = {len(scored)}")
        passed = False

    # ── check 4: dates ascending ──────────────────────────────────────────────
    dates = daily["date"].astype(str).tolist()
    if all(a < b for a, b in zip(dates, dates[1:])):
        messages.append(f"PASS  {len(dates)} daily rows in ascending date order")
    else:
        messages.append("FAIL  daily rows are not strictly ascending by date")
        passed = False

    return passed, messages


def main() -> int:
    if len(sys.argv) < 2:
        print("Usage: python -m newsmood.pipeline.validator <output_dir>")
        return 1
    passed, messages = validate(sys.argv[1])
    for msg in messages:
        print(msg)
    if passed:
        print("\nVALIDATION PASSED ✓")
        return 0
    print("\nVALIDATION FAILED ✗")
    return 1


if __name__ == "__main__":
    sys.exit(main())
