"""Surface readability metrics: word/sentence counts and averages."""

from __future__ import annotations

import math

from data_enricher.analysis.tokenizer import split_sentences, tokenize
from data_enricher.core.models import ReadabilityResult


def round1(value: float) -> float:
    # half-up, so 2.25 -> 2.3 rather than banker's rounding
    return math.floor(value * 10 + 0.5) / 10


class ReadabilityCalculator:
    def analyze(self, text: str) -> ReadabilityResult:
        words = tokenize(text)
        word_count = len(words)
        sentence_count = len(split_sentences(text))
        avg_words = word_count / sentence_count if sentence_count > 0 else 0.0
        avg_length = sum(len(w) for w in words) / (word_count or 1)
        return ReadabilityResult(
            word_count=word_count,
            sentence_count=sentence_count,
            avg_words_per_sentence=round1(avg_words),
            avg_word_length=round1(avg_length),
        )


__all__ = ["ReadabilityCalculator", "round1"]
