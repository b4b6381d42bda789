"""Daily sentiment chart."""

from pathlib import Path
from typing import Optional

import matplotlib

matplotlib.use("Agg")  # headless; figures are only written to disk

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from newsmood.core.logger import logger  # noqa: E402


def plot_daily_sentiment(
    daily: pd.DataFrame,
    path: str | Path,
    title: str = "Mean article sentiment per day",
) -> Optional[Path]:
    """Save a two-panel PNG: mean sentiment per day above article counts per day.

    Args:
        daily: Output of :func:`newsmood.pipeline.aggregate.aggregate_by_day`.
        path: Destination PNG path.
        title: Figure title.

    Returns:
        Optional[Path]: The written path, or ``None`` when there was nothing to plot.
    """
    if daily.empty:
        logger.warning("plot_daily_sentiment: no scored days — skipping chart")
        return None

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    dates = pd.to_datetime(daily["date"])

    fig, (ax_sent, ax_count) = plt.subplots(
        2, 1, figsize=(12, 7), sharex=True, gridspec_kw={"height_ratios": [3, 1]}
    )
    ax_sent.plot(dates, daily["mean_sentiment"], marker="o", label="Mean sentiment")
    ax_sent.axhline(0.0, color="grey", linestyle="--", linewidth=1)
    ax_sent.set_ylabel("Mean lexicon score")
    ax_sent.set_title(title)
    ax_sent.grid(True, linestyle="--", alpha=0.5)
    ax_sent.legend()

    ax_count.bar(dates, daily["n_articles"], color="tab:grey")
    ax_count.set_ylabel("Articles")
    ax_count.set_xlabel("Date")
    ax_count.grid(True, axis="y", linestyle="--", alpha=0.5)

    fig.autofmt_xdate()
    fig.tight_layout()
    fig.savefig(out, dpi=150)
    plt.close(fig)

    logger.info(f"plot_daily_sentiment: saved {len(daily)} days → {out}")
    return out
