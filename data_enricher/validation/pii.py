"""Pattern-based PII detection and redaction.

Four independent categories are scanned, always reported in this order:
``email``, ``phone``, ``ssn`` and ``credit_card``. Detection runs on the
original text. Redaction rewrites a working copy category by category, so a
later category only sees what earlier replacements left behind.
Placeholders contain no digits or ``@`` and never match any pattern, which
makes redaction idempotent.

Recognition uses presidio-analyzer ``PatternRecognizer`` instances (regex
only, no NLP engine) and replacement uses presidio-anonymizer's
``AnonymizerEngine`` with a ``replace`` operator, applied one span at a
time so every match gets its own placeholder.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from presidio_analyzer import Pattern, PatternRecognizer
from presidio_anonymizer import AnonymizerEngine
from presidio_anonymizer.entities import OperatorConfig

from data_enricher.core.config import DEFAULT_PII_PATTERNS

logger = logging.getLogger(__name__)

PII_PLACEHOLDERS: Dict[str, str] = {
    "email": "[EMAIL_REDACTED]",
    "phone": "[PHONE_REDACTED]",
    "ssn": "[SSN_REDACTED]",
    "credit_card": "[CC_REDACTED]",
}

PATTERN_SCORE = 0.9


@dataclass
class Redaction:
    pii_type: str
    placeholder: str
    matches: int
    original_len: int
    redacted_len: int


@dataclass
class PIIScanResult:
    pii_types: List[str] = field(default_factory=list)
    redacted_text: Optional[str] = None
    redactions: List[Redaction] = field(default_factory=list)

    @property
    def has_pii(self) -> bool:
        return bool(self.pii_types)


class PIIDetector:
    def __init__(
        self,
        patterns: Mapping[str, str] = DEFAULT_PII_PATTERNS,
        placeholders: Mapping[str, str] = PII_PLACEHOLDERS,
    ):
        self._recognizers: Dict[str, PatternRecognizer] = {}
        self._placeholders: Dict[str, str] = {}
        for category, regex in patterns.items():
            entity = category.upper()
            self._recognizers[category] = PatternRecognizer(
                supported_entity=entity,
                name=f"{category}_recognizer",
                patterns=[Pattern(name=category, regex=regex, score=PATTERN_SCORE)],
            )
            self._placeholders[category] = placeholders.get(category, f"[{entity}_REDACTED]")
        self._anonymizer = AnonymizerEngine()

    @property
    def categories(self) -> List[str]:
        return list(self._recognizers)

    def find(self, category: str, text: str):
        recognizer = self._recognizers[category]
        return recognizer.analyze(text=text or "", entities=recognizer.supported_entities)

    def scan(self, text: str, redact: bool = False) -> PIIScanResult:
        """Report which categories match ``text`` and optionally redact them.

        ``redacted_text`` is only set when ``redact`` is requested and at
        least one category matched; ``text`` itself is never modified.
        """
        result = PIIScanResult()
        working = text or ""
        for category in self._recognizers:
            if not self.find(category, text):
                continue
            result.pii_types.append(category)
            if redact:
                working = self._redact_category(category, working, result)
        if redact and result.pii_types:
            result.redacted_text = working
        return result

    def redact(self, text: str) -> str:
        """Redact every category; returns the input unchanged when nothing matches."""
        scan = self.scan(text, redact=True)
        return scan.redacted_text if scan.redacted_text is not None else (text or "")

    def _redact_category(self, category: str, working: str, result: PIIScanResult) -> str:
        hits = self.find(category, working)
        if not hits:
            return working
        placeholder = self._placeholders[category]
        entity = self._recognizers[category].supported_entities[0]
        operators = {entity: OperatorConfig("replace", {"new_value": placeholder})}
        redacted = working
        # one span per call, right to left; the engine merges whitespace-adjacent spans
        for hit in sorted(hits, key=lambda h: h.start, reverse=True):
            redacted = self._anonymizer.anonymize(text=redacted, analyzer_results=[hit], operators=operators).text
        result.redactions.append(
            Redaction(
                pii_type=category,
                placeholder=placeholder,
                matches=len(hits),
                original_len=len(working),
                redacted_len=len(redacted),
            )
        )
        logger.debug("Redacted %d %s match(es)", len(hits), category)
        return redacted


__all__ = ["PIIDetector", "PIIScanResult", "Redaction", "PII_PLACEHOLDERS"]
