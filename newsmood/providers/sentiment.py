"""Lexicon-based sentiment scoring.

Pipeline:
    body (str) → tokenize() → inner join against lexicon → mean value → SentimentResult

The default lexicon is the word-valence table shipped with vaderSentiment
(values roughly in [-4, 4]). Any CSV with ``word`` and ``value`` columns can
be used instead, e.g. an AFINN export.

Only the word-level join is used here; VADER's rule-based adjustments
(negation, intensifiers, punctuation) are not applied.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import pandas as pd
from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from newsmood.core.logger import logger
from newsmood.providers.base import SentimentProvider

DEFAULT_LEXICON = "vader"
LEXICON_BOUNDS = (-4.0, 4.0)

_TOKEN_RE = re.compile(r"[^\W_]+(?:'[^\W_]+)*")


@dataclass
class SentimentResult:
    """Output of a single lexicon scoring call.

    Attributes:
        label: ``"Positive"``, ``"Neutral"`` or ``"Negative"``; ``None`` when unscored.
        score: Mean lexicon value of the matched tokens; ``None`` when no token matched.
        n_tokens: Number of tokens in the input.
        n_matched: Number of tokens found in the lexicon.
    """
    label: Optional[str]
    score: Optional[float]
    n_tokens: int
    n_matched: int


def tokenize(text: Optional[str]) -> List[str]:
    """Split text into lowercase word tokens.

    Punctuation is dropped; apostrophes inside a word are kept so that
    ``"don't"`` stays one token. Curly apostrophes are folded to ``'``.
    """
    if not text:
        return []
    return _TOKEN_RE.findall(text.lower().replace("’", "'"))


def load_lexicon(name_or_path: str = DEFAULT_LEXICON) -> pd.DataFrame:
    """Load a word → value lexicon as a two-column DataFrame.

    Args:
        name_or_path: ``"vader"`` or a path to a CSV with ``word,value`` columns.

    Returns:
        pd.DataFrame: Columns ``word`` (lowercase, unique) and ``value`` (float).
    """
    if name_or_path == DEFAULT_LEXICON:
        lexicon = SentimentIntensityAnalyzer().lexicon
        df = pd.DataFrame({"word": list(lexicon.keys()), "value": list(lexicon.values())})
    else:
        path = Path(name_or_path)
        if not path.exists():
            raise FileNotFoundError(f"Lexicon file not found at {name_or_path}")
        df = pd.read_csv(path)
        missing = {"word", "value"} - set(df.columns)
        if missing:
            raise ValueError(f"Lexicon {name_or_path} is missing columns: {sorted(missing)}")

    df = df[["word", "value"]].copy()
    df["word"] = df["word"].astype(str).str.strip().str.lower()
    df["value"] = pd.to_numeric(df["value"], errors="coerce")
    df = df.dropna(subset=["value"]).drop_duplicates(subset="word", keep="first")
    return df.reset_index(drop=True)


class LexiconSentimentProvider(SentimentProvider):
    """Scores text by joining its tokens against a sentiment lexicon.

    The lexicon is loaded lazily on the first call so that constructing the
    provider costs nothing.

    Args:
        lexicon: ``"vader"``, a CSV path, or an already-loaded DataFrame.
        neutral_band: Scores within ``[-band, band]`` are labelled Neutral.
    """

    def __init__(self, lexicon=DEFAULT_LEXICON, neutral_band: float = 0.05) -> None:
        self.neutral_band = neutral_band
        if isinstance(lexicon, pd.DataFrame):
            self._lexicon: Optional[pd.DataFrame] = lexicon
            self.lexicon_name = "custom"
        else:
            self._lexicon = None
            self.lexicon_name = str(lexicon)

    @property
    def lexicon(self) -> pd.DataFrame:
        if self._lexicon is None:
            self._lexicon = load_lexicon(self.lexicon_name)
            logger.info(
                f"LexiconSentimentProvider: loaded {len(self._lexicon)} words "
                f"from {self.lexicon_name!r}"
            )
        return self._lexicon

    def score_tokens(self, tokens: List[str]) -> pd.DataFrame:
        """Inner-join tokens against the lexicon; one row per matched token occurrence."""
        token_df = pd.DataFrame({"word": tokens}, dtype=object)
        return token_df.merge(self.lexicon, on="word", how="inner")

    def analyze(self, text: Optional[str]) -> SentimentResult:
        """Return the mean lexicon value of ``text`` and its label.

        Text with no tokens, or no token in the lexicon, yields
        ``score=None`` and ``label=None``.
        """
        tokens = tokenize(text)
        if not tokens:
            return SentimentResult(label=None, score=None, n_tokens=0, n_matched=0)

        joined = self.score_tokens(tokens)
        if joined.empty:
            logger.debug(f"LexiconSentimentProvider: NO_LEXICON_MATCH in {len(tokens)} tokens")
            return SentimentResult(label=None, score=None, n_tokens=len(tokens), n_matched=0)

        score = round(float(joined["value"].mean()), 4)
        label = _label(score, self.neutral_band)
        logger.debug(
            f"LexiconSentimentProvider: [{label} / {score:+.3f}] "
            f"{len(joined)}/{len(tokens)} tokens matched"
        )
        return SentimentResult(
            label=label, score=score, n_tokens=len(tokens), n_matched=len(joined),
        )


# ── helpers ───────────────────────────────────────────────────────────────────

def _label(score: float, neutral_band: float) -> str:
    if score > neutral_band:
        return "Positive"
    if score < -neutral_band:
        return "Negative"
    return "Neutral"
