"""Lexicon-based sentiment scoring.

Tokens are case-folded and looked up in the AFINN-165 word list (integer
polarity in [-5, 5]). Unknown tokens score 0.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from afinn import Afinn

from data_enricher.analysis.tokenizer import tokenize
from data_enricher.core.models import SentimentResult


class SentimentAnalyzer:
    def __init__(self, lexicon: Optional[Afinn] = None):
        self._lexicon = lexicon or Afinn(language="en")
        self.polarity = lru_cache(maxsize=65536)(self._lookup)

    def _lookup(self, token: str) -> int:
        return int(self._lexicon.score_with_wordlist(token))

    def analyze(self, text: str) -> SentimentResult:
        tokens = tokenize((text or "").lower())
        score = 0
        positive = []
        negative = []
        for token in tokens:
            value = self.polarity(token)
            if value > 0:
                positive.append(token)
            elif value < 0:
                negative.append(token)
            score += value
        return SentimentResult(
            score=score,
            comparative=score / (len(tokens) or 1),
            positive=positive,
            negative=negative,
        )


__all__ = ["SentimentAnalyzer"]
