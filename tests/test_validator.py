import pandas as pd

from newsmood.models.datatypes import PipelineRow
from newsmood.pipeline.aggregate import aggregate_by_day, rows_to_frame
from newsmood.pipeline.engine import ARTICLES_CSV, DAILY_CSV
from newsmood.pipeline.validator import validate


def _row(url, date, score):
    return PipelineRow(
        date=date, url=url, title="t", author=None, source=None, allowed=True,
        status="scored" if score is not None else "no_body", n_tokens=3,
        n_matched=1 if score is not None else 0, sentiment_score=score, sentiment_label=None,
    )


def _write(tmp_path, rows, daily=None):
    frame = rows_to_frame(rows)
    frame.to_csv(tmp_path / ARTICLES_CSV, index=False)
    (daily if daily is not None else aggregate_by_day(frame)).to_csv(tmp_path / DAILY_CSV, index=False)


def test_valid_output_passes(tmp_path):
    _write(tmp_path, [_row("u1", "2024-05-01", 1.5), _row("u2", "2024-05-02", -0.5), _row("u3", None, None)])

    passed, messages = validate(str(tmp_path))

    assert passed, messages
    assert all(m.startswith("PASS") for m in messages)


def test_empty_run_passes(tmp_path):
    _write(tmp_path, [])

    passed, messages = validate(str(tmp_path))

    assert passed, messages


def test_missing_file_fails(tmp_path):
    passed, messages = validate(str(tmp_path))

    assert not passed
    assert "file not found" in messages[0]


def test_duplicate_urls_and_out_of_range_scores_fail(tmp_path):
    _write(tmp_path, [_row("u1", "2024-05-01", 1.0), _row("u1", "2024-05-01", 9.0)])

    passed, messages = validate(str(tmp_path))

    assert not passed
    assert any("duplicate URL" in m for m in messages)
    assert any("out of range" in m for m in messages)


def test_unreconciled_daily_counts_fail(tmp_path):
    daily = pd.DataFrame([
        {"date": "2024-05-02", "mean_sentiment": 1.0, "n_articles": 3},
        {"date": "2024-05-01", "mean_sentiment": 1.0, "n_articles": 1},
    ])
    _write(tmp_path, [_row("u1", "2024-05-01", 1.0)], daily=daily)

    passed, messages = validate(str(tmp_path))

    assert not passed
    assert any(m.startswith("FAIL  daily n_articles sum") for m in messages)
    assert any("not strictly ascending" in m for m in messages)


def test_missing_columns_fail(tmp_path):
    pd.DataFrame({"url": ["u1"]}).to_csv(tmp_path / ARTICLES_CSV, index=False)
    pd.DataFrame({"date": []}).to_csv(tmp_path / DAILY_CSV, index=False)

    passed, messages = validate(str(tmp_path))

    assert not passed
    assert "missing columns" in messages[0]
