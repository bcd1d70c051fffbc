"""Duplicate detection: an up-front match index plus a forward-only canonical map.

``DuplicateIndex`` is built once from every subject text in the input before
the main pass and is read-only afterwards. ``CanonicalMap`` starts empty and
is filled during the single forward pass, so an item can only ever be
flagged as a duplicate of an item processed before it.

Exact membership is case-insensitive only: the index keeps the first original
text per lower-cased form, and an exact hit short-circuits with similarity
1.0. Texts differing in punctuation or spacing are distinct members. The
fuzzy fallback compares ``rapidfuzz.utils.default_process`` forms (lower
case, non-alphanumerics stripped, whitespace collapsed).

Known limitation: every queried text is itself a member of the index, so the
best match is normally the text itself with similarity 1.0. Detection
therefore behaves like case-insensitive exact matching; near-duplicates are
not flagged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple

from rapidfuzz import fuzz, process
from rapidfuzz.utils import default_process

logger = logging.getLogger(__name__)


def match_key(text: str) -> str:
    return text.lower()


def fuzzy_key(text: str) -> str:
    return " ".join(default_process(text).split())


class DuplicateIndex:
    """Immutable approximate-match index over a fixed list of texts."""

    def __init__(self, texts: Iterable[str], scorer: Callable[..., float] = fuzz.ratio):
        self._scorer = scorer
        self._by_key: Dict[str, str] = {}
        for text in texts:
            if not text:
                continue
            self._by_key.setdefault(match_key(text), text)
        self._fuzzy: Dict[str, str] = {}
        for text in self._by_key.values():
            self._fuzzy.setdefault(fuzzy_key(text), text)
        self._fuzzy_keys: Tuple[str, ...] = tuple(k for k in self._fuzzy if k)

    def __len__(self) -> int:
        return len(self._by_key)

    def __contains__(self, text: str) -> bool:
        return match_key(text) in self._by_key

    def best_match(self, text: str) -> Optional[Tuple[float, str]]:
        """Return ``(similarity, stored_text)`` for the closest stored text, or None."""
        text = text or ""
        exact = self._by_key.get(match_key(text))
        if exact is not None:
            return 1.0, exact
        query = fuzzy_key(text)
        if not query or not self._fuzzy_keys:
            return None
        match = process.extractOne(query, self._fuzzy_keys, scorer=self._scorer, processor=None)
        if match is None:
            return None
        choice, score, _ = match
        return float(score) / 100.0, self._fuzzy[choice]


class CanonicalMap:
    """Text -> identity of the first item recorded under it. Append-only."""

    def __init__(self):
        self._first: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._first)

    def get(self, text: str) -> Optional[int]:
        return self._first.get(text)

    def register(self, text: str, item_id: int) -> None:
        self._first.setdefault(text, item_id)


@dataclass
class DuplicateVerdict:
    is_duplicate: bool = False
    duplicate_of: Optional[int] = None
    similarity: float = 0.0
    matched_text: Optional[str] = None
    # set when this item should become canonical for its own text on commit
    register_text: Optional[str] = None


class DuplicateDetector:
    def __init__(self, index: DuplicateIndex, threshold: float, canonical: Optional[CanonicalMap] = None):
        self.index = index
        self.threshold = threshold
        self.canonical = canonical if canonical is not None else CanonicalMap()

    @classmethod
    def from_texts(cls, texts: Iterable[str], threshold: float) -> "DuplicateDetector":
        texts = [t for t in texts if t]
        index = DuplicateIndex(texts)
        logger.info("Built duplicate index over %d texts (%d distinct)", len(texts), len(index))
        return cls(index, threshold)

    def check(self, item_id: int, text: str) -> DuplicateVerdict:
        """Classify ``text`` without touching the canonical map."""
        match = self.index.best_match(text)
        if match is None:
            return DuplicateVerdict()
        similarity, matched_text = match
        verdict = DuplicateVerdict(similarity=similarity, matched_text=matched_text)
        if similarity < self.threshold:
            return verdict
        earlier = self.canonical.get(matched_text)
        if earlier is None or earlier == item_id:
            verdict.register_text = text
        else:
            verdict.is_duplicate = True
            verdict.duplicate_of = earlier
        return verdict

    def commit(self, item_id: int, verdict: DuplicateVerdict) -> None:
        if verdict.register_text is None:
            return
        self.canonical.register(verdict.register_text, item_id)
        # lookups go through the index's stored form
        if verdict.matched_text is not None:
            self.canonical.register(verdict.matched_text, item_id)

    def observe(self, item_id: int, text: str) -> DuplicateVerdict:
        """check() followed by commit()."""
        verdict = self.check(item_id, text)
        self.commit(item_id, verdict)
        return verdict


__all__ = ["DuplicateIndex", "CanonicalMap", "DuplicateDetector", "DuplicateVerdict", "match_key", "fuzzy_key"]
