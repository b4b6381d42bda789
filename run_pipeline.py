"""News sentiment pipeline entry point.

Usage:
    python run_pipeline.py [--config config.yaml] [--query TEXT] [--from DATE] [--to DATE]
    python run_pipeline.py --list-sources

Loads config.yaml, initialises all providers, runs PipelineEngine,
and reports success/failure to stdout and the pipeline log.
"""

import argparse
import os
import sys
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()  # must precede newsmood imports so env vars are available at module load

from newsmood.core.config import get_api_key, load_config  # noqa: E402
from newsmood.core.exceptions import NewsmoodError  # noqa: E402
from newsmood.core.logger import logger  # noqa: E402
from newsmood.pipeline.engine import ARTICLES_CSV, DAILY_CSV, PipelineEngine  # noqa: E402
from newsmood.providers.news import NewsAPIProvider  # noqa: E402


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Daily lexicon sentiment of news articles.")
    parser.add_argument("--config", default="config.yaml", help="Path to the YAML config")
    parser.add_argument("--query", help="Override news.query")
    parser.add_argument("--from", dest="from_date", help="Override news.from (YYYY-MM-DD)")
    parser.add_argument("--to", dest="to_date", help="Override news.to (YYYY-MM-DD)")
    parser.add_argument(
        "--list-sources", action="store_true",
        help="Print the source ids known to the news API and exit",
    )
    return parser.parse_args(argv)


def _list_sources(config: dict) -> int:
    news_cfg = config.get("news", {}) or {}
    provider = NewsAPIProvider(api_key=get_api_key())
    sources = provider.fetch_sources(
        category=news_cfg.get("category"), language=news_cfg.get("language"),
    )
    for source in sources:
        print(f"{source.id:<32} {source.name}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Run the pipeline. Returns 0 on success, 1 on failure."""
    args = _parse_args(argv)
    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as exc:
        logger.error(f"run_pipeline: failed to load config: {exc}")
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1

    news_cfg = config.get("news") or {}
    config["news"] = news_cfg
    for key, value in (("query", args.query), ("from", args.from_date), ("to", args.to_date)):
        if value:
            news_cfg[key] = value

    output_dir = config.get("output_dir", "output")

    try:
        if args.list_sources:
            return _list_sources(config)
        engine = PipelineEngine(config=config, output_dir=output_dir)
        rows = engine.run()
    except (NewsmoodError, ValueError) as exc:
        logger.error(f"run_pipeline: {exc}")
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:
        logger.error(f"run_pipeline: PipelineEngine raised: {exc}", exc_info=True)
        print(f"ERROR: pipeline failed — {exc}", file=sys.stderr)
        return 1

    articles_path = os.path.join(output_dir, ARTICLES_CSV)
    daily_path = os.path.join(output_dir, DAILY_CSV)
    print(f"SUCCESS: {len(rows)} articles → {articles_path}, {len(engine.daily)} days → {daily_path}")
    logger.info(f"run_pipeline: completed — {len(rows)} articles, {len(engine.daily)} days")
    return 0


if __name__ == "__main__":
    sys.exit(main())
