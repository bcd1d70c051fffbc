"""Stopword-count language guess.

Only one stopword list (English) is available, so every candidate label is
scored against the same list and the first candidate reaching the maximum
wins. In practice the result is either ``english`` or ``unknown``.
"""

from __future__ import annotations

from typing import FrozenSet, Iterable, Optional, Sequence

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

from data_enricher.analysis.tokenizer import tokenize

CANDIDATE_LANGUAGES = ("english", "spanish", "french", "german", "portuguese")
UNKNOWN_LANGUAGE = "unknown"
SAMPLE_CHARS = 500


class LanguageGuesser:
    def __init__(
        self,
        stopwords: Optional[Iterable[str]] = None,
        candidates: Sequence[str] = CANDIDATE_LANGUAGES,
        sample_chars: int = SAMPLE_CHARS,
    ):
        self.stopwords: FrozenSet[str] = frozenset(stopwords) if stopwords is not None else ENGLISH_STOP_WORDS
        self.candidates = tuple(candidates)
        self.sample_chars = sample_chars

    def analyze(self, text: str) -> str:
        tokens = tokenize((text or "").lower()[: self.sample_chars])
        detected = UNKNOWN_LANGUAGE
        max_count = 0
        for lang in self.candidates:
            count = sum(1 for token in tokens if token in self.stopwords)
            if count > max_count:
                max_count = count
                detected = lang
        return detected


__all__ = ["LanguageGuesser", "CANDIDATE_LANGUAGES", "UNKNOWN_LANGUAGE"]
