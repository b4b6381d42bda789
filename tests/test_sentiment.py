import pandas as pd
import pytest

from newsmood.providers.sentiment import LexiconSentimentProvider, load_lexicon, tokenize


@pytest.mark.parametrize("text,expected", [
    ("Don't PANIC, it's fine!", ["don't", "panic", "it's", "fine"]),
    ("It’s good", ["it's", "good"]),
    ("snake_case and 2024 -- numbers", ["snake", "case", "and", "2024", "numbers"]),
    ("Café au lait", ["café", "au", "lait"]),
    ("", []),
    (None, []),
])
def test_tokenize(text, expected):
    assert tokenize(text) == expected


def test_analyze_mean_of_matched_tokens(sentiment_provider):
    result = sentiment_provider.analyze("Good, good... bad day.")

    assert result.n_tokens == 4
    assert result.n_matched == 3
    assert result.score == pytest.approx(1.0)
    assert result.label == "Positive"


def test_analyze_negative_and_neutral(sentiment_provider):
    assert sentiment_provider.analyze("An awful, bad result").label == "Negative"
    neutral = sentiment_provider.analyze("Everything is fine")
    assert neutral.score == 0.0
    assert neutral.label == "Neutral"


def test_neutral_band_is_configurable(tiny_lexicon):
    provider = LexiconSentimentProvider(lexicon=tiny_lexicon, neutral_band=2.0)

    result = provider.analyze("good good bad")

    assert result.score == pytest.approx(1.0)
    assert result.label == "Neutral"


def test_analyze_without_matches_is_unscored(sentiment_provider):
    result = sentiment_provider.analyze("The committee met on Tuesday")

    assert result.score is None
    assert result.label is None
    assert result.n_tokens == 5
    assert result.n_matched == 0


def test_analyze_empty_text(sentiment_provider):
    result = sentiment_provider.analyze("")

    assert (result.score, result.n_tokens, result.n_matched) == (None, 0, 0)


def test_score_tokens_keeps_one_row_per_occurrence(sentiment_provider):
    joined = sentiment_provider.score_tokens(["good", "news", "good"])

    assert joined["word"].tolist() == ["good", "good"]
    assert joined["value"].tolist() == [3.0, 3.0]


def test_load_lexicon_from_csv(tmp_path):
    path = tmp_path / "lexicon.csv"
    path.write_text("word,value\nGood,2\ngood,5\nbad,-2\nodd,n/a\n", encoding="utf-8")

    lexicon = load_lexicon(str(path))

    assert lexicon.to_dict("records") == [
        {"word": "good", "value": 2.0},
        {"word": "bad", "value": -2.0},
    ]


def test_load_lexicon_rejects_missing_columns(tmp_path):
    path = tmp_path / "lexicon.csv"
    path.write_text("term,score\ngood,1\n", encoding="utf-8")

    with pytest.raises(ValueError):
        load_lexicon(str(path))


def test_load_lexicon_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_lexicon(str(tmp_path / "nope.csv"))


def test_vader_lexicon_is_default():
    lexicon = load_lexicon()

    values = dict(zip(lexicon["word"], lexicon["value"]))
    assert values["good"] > 0
    assert values["terrible"] < 0
    assert lexicon["word"].is_unique


def test_provider_loads_lexicon_lazily(tmp_path):
    path = tmp_path / "lexicon.csv"
    path.write_text("word,value\nhappy,2\n", encoding="utf-8")
    provider = LexiconSentimentProvider(lexicon=str(path))

    assert provider._lexicon is None
    assert provider.analyze("happy happy").score == 2.0
    assert isinstance(provider._lexicon, pd.DataFrame)
