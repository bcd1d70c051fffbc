"""Incremental TF-IDF keyword extraction over a growing corpus.

``TermCorpus`` is owned by a single pipeline run and only ever grows. Each
document is ranked against every document added before it plus itself, so a
document's keywords depend on input order and on which items were processed:
re-running a subset or a reordered dataset gives different rankings.

Weighting per term t of document d, with N documents in the corpus
(including d) and df(t) documents containing t::

    weight = count(t, d) * (1 + ln(N / (1 + df(t))))

Ties keep first-appearance order within the document.
"""

from __future__ import annotations

import logging
import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from sklearn.feature_extraction.text import CountVectorizer

from data_enricher.analysis.tokenizer import WORD_RE

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 10


def default_term_analyzer() -> Callable[[str], List[str]]:
    """Lower-cased word tokens with English stop words removed."""
    return CountVectorizer(lowercase=True, stop_words="english", token_pattern=WORD_RE.pattern).build_analyzer()


@dataclass
class StagedDocument:
    """A document ranked against the corpus but not yet appended to it."""

    terms: Counter = field(default_factory=Counter)
    keywords: List[str] = field(default_factory=list)
    committed: bool = False


class TermCorpus:
    """Append-only collection of term-count documents with document frequencies."""

    def __init__(self, analyzer: Optional[Callable[[str], List[str]]] = None):
        self._analyzer = analyzer or default_term_analyzer()
        self._documents: List[Counter] = []
        self._doc_freq: Counter = Counter()

    def __len__(self) -> int:
        return len(self._documents)

    def terms(self, text: str) -> Counter:
        return Counter(self._analyzer(text or ""))

    def document_frequency(self, term: str) -> int:
        return self._doc_freq[term]

    def idf(self, term: str, n_docs: Optional[int] = None, pending: int = 0) -> float:
        n = len(self) if n_docs is None else n_docs
        df = self._doc_freq[term] + pending
        return 1.0 + math.log(n / (1 + df))

    def append(self, terms: Counter) -> int:
        """Add a document's term counts; returns its index."""
        self._documents.append(Counter(terms))
        self._doc_freq.update(terms.keys())
        return len(self._documents) - 1


class KeywordExtractor:
    def __init__(self, corpus: Optional[TermCorpus] = None, top_n: int = DEFAULT_TOP_N):
        self.corpus = corpus if corpus is not None else TermCorpus()
        self.top_n = top_n

    def stage(self, text: str) -> StagedDocument:
        """Rank ``text`` as if it were already the newest corpus document.

        Ranking failures degrade to an empty keyword list; the document is
        still appended on commit.
        """
        staged = StagedDocument()
        try:
            staged.terms = self.corpus.terms(text)
            staged.keywords = self._rank(staged.terms)
        except Exception as e:
            logger.warning("Keyword ranking failed; continuing without keywords: %s", e)
            staged.keywords = []
        return staged

    def commit(self, staged: StagedDocument) -> None:
        if staged.committed:
            return
        self.corpus.append(staged.terms)
        staged.committed = True

    def extract_top(self, text: str) -> List[str]:
        """Append ``text`` to the corpus and return its top-ranked terms."""
        staged = self.stage(text)
        self.commit(staged)
        return list(staged.keywords)

    def _rank(self, terms: Counter) -> List[str]:
        if not terms:
            return []
        n_docs = len(self.corpus) + 1
        weighted = [(term, count * self.corpus.idf(term, n_docs=n_docs, pending=1)) for term, count in terms.items()]
        weighted.sort(key=lambda pair: pair[1], reverse=True)
        return [term for term, _ in weighted[: self.top_n]]


__all__ = ["TermCorpus", "KeywordExtractor", "StagedDocument", "default_term_analyzer", "DEFAULT_TOP_N"]
