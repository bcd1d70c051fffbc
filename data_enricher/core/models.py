"""Records produced by an enrichment run.

Internally snake_case dataclasses; ``to_dict`` renders the camelCase shape
written to the output dataset. Optional sub-records are omitted (not
emptied) when they were not computed.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SentimentResult:
    score: int = 0
    comparative: float = 0.0
    positive: List[str] = field(default_factory=list)
    negative: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "score": self.score,
            "comparative": self.comparative,
            "positive": list(self.positive),
            "negative": list(self.negative),
        }


@dataclass
class EntitiesResult:
    people: List[str] = field(default_factory=list)
    places: List[str] = field(default_factory=list)
    organizations: List[str] = field(default_factory=list)
    dates: List[str] = field(default_factory=list)
    values: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "people": list(self.people),
            "places": list(self.places),
            "organizations": list(self.organizations),
            "dates": list(self.dates),
            "values": list(self.values),
        }


@dataclass
class ReadabilityResult:
    word_count: int = 0
    sentence_count: int = 0
    avg_words_per_sentence: float = 0.0
    avg_word_length: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wordCount": self.word_count,
            "sentenceCount": self.sentence_count,
            "avgWordsPerSentence": self.avg_words_per_sentence,
            "avgWordLength": self.avg_word_length,
        }


@dataclass
class EnrichmentResult:
    sentiment: Optional[SentimentResult] = None
    entities: Optional[EntitiesResult] = None
    keywords: Optional[List[str]] = None
    language: Optional[str] = None
    readability: Optional[ReadabilityResult] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {}
        if self.sentiment is not None:
            out["sentiment"] = self.sentiment.to_dict()
        if self.entities is not None:
            out["entities"] = self.entities.to_dict()
        if self.keywords is not None:
            out["keywords"] = list(self.keywords)
        if self.language is not None:
            out["language"] = self.language
        if self.readability is not None:
            out["readability"] = self.readability.to_dict()
        return out


@dataclass
class ValidationResult:
    is_valid: bool = True
    is_duplicate: bool = False
    duplicate_of: Optional[int] = None
    has_pii: bool = False
    pii_types: Optional[List[str]] = None
    length_valid: bool = True
    schema_valid: bool = True
    schema_errors: Optional[List[str]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "isValid": self.is_valid,
            "isDuplicate": self.is_duplicate,
            "hasPII": self.has_pii,
            "lengthValid": self.length_valid,
            "schemaValid": self.schema_valid,
        }
        if self.duplicate_of is not None:
            out["duplicateOf"] = self.duplicate_of
        if self.pii_types is not None:
            out["piiTypes"] = list(self.pii_types)
        if self.schema_errors is not None:
            out["schemaErrors"] = list(self.schema_errors)
        return out


@dataclass
class ProcessedItem:
    id: int
    original_text: str
    enrichment: EnrichmentResult = field(default_factory=EnrichmentResult)
    validation: ValidationResult = field(default_factory=ValidationResult)
    processed_text: Optional[str] = None
    # original input fields, merged in when includeOriginal is set
    original_fields: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        # computed fields overwrite input fields; ``id`` is positional
        out: Dict[str, Any] = dict(self.original_fields or {})
        out["id"] = self.id
        out["originalText"] = self.original_text
        if self.processed_text is not None:
            out["processedText"] = self.processed_text
        out["enrichment"] = self.enrichment.to_dict()
        out["validation"] = self.validation.to_dict()
        return out


@dataclass
class RunSummary:
    total_processed: int = 0
    valid_items: int = 0
    duplicates_found: int = 0
    items_with_pii: int = 0
    output_items: int = 0
    rejected_items: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            "totalProcessed": self.total_processed,
            "validItems": self.valid_items,
            "duplicatesFound": self.duplicates_found,
            "itemsWithPII": self.items_with_pii,
            "outputItems": self.output_items,
            "rejectedItems": self.rejected_items,
        }


@dataclass
class RunResult:
    items: List[ProcessedItem]
    summary: RunSummary
    skipped_ids: List[int] = field(default_factory=list)
    failed_ids: List[int] = field(default_factory=list)

    def output_records(self) -> List[Dict[str, Any]]:
        return [item.to_dict() for item in self.items]


__all__ = [
    "SentimentResult",
    "EntitiesResult",
    "ReadabilityResult",
    "EnrichmentResult",
    "ValidationResult",
    "ProcessedItem",
    "RunSummary",
    "RunResult",
]
