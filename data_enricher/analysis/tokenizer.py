"""Word tokenizer shared by the sentiment, readability and language analyzers.

Splits on every character outside ``[A-Za-zА-Яа-я0-9_]``; empty pieces are
dropped. Case is preserved, callers fold it when they need to.
"""

from __future__ import annotations

import re
from typing import List

WORD_RE = re.compile(r"[A-Za-zА-Яа-я0-9_]+")
SENTENCE_SPLIT_RE = re.compile(r"[.!?]+")


def tokenize(text: str) -> List[str]:
    return WORD_RE.findall(text or "")


def split_sentences(text: str) -> List[str]:
    return [s for s in SENTENCE_SPLIT_RE.split(text or "") if s.strip()]


__all__ = ["tokenize", "split_sentences", "WORD_RE"]
