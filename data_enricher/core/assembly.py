"""Decision & Assembly: merge analyzer outputs, decide validity and emission.

An item starts valid and is invalidated by any of:

- subject text length outside [min, max] (max == 0 means no upper bound)
- being marked a duplicate of an earlier item
- containing PII while not in flag-only mode
- failing schema validation

An item is emitted iff flag-only mode is set or the item is valid.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from data_enricher.core.config import OutputOptions, ValidationOptions
from data_enricher.core.models import EnrichmentResult, ProcessedItem, RunSummary, ValidationResult
from data_enricher.validation.duplicates import DuplicateVerdict
from data_enricher.validation.pii import PIIScanResult
from data_enricher.validation.schema import SchemaCheckResult


def length_within_bounds(text: str, min_length: int, max_length: int) -> bool:
    length = len(text)
    if min_length > 0 and length < min_length:
        return False
    if max_length > 0 and length > max_length:
        return False
    return True


def build_validation(
    text: str,
    options: ValidationOptions,
    flag_only: bool,
    duplicate: Optional[DuplicateVerdict] = None,
    pii: Optional[PIIScanResult] = None,
    schema: Optional[SchemaCheckResult] = None,
) -> ValidationResult:
    result = ValidationResult()

    if not length_within_bounds(text, options.min_text_length, options.max_text_length):
        result.length_valid = False
        result.is_valid = False

    if duplicate is not None and duplicate.is_duplicate:
        result.is_duplicate = True
        result.duplicate_of = duplicate.duplicate_of
        result.is_valid = False

    if pii is not None and pii.has_pii:
        result.has_pii = True
        result.pii_types = list(pii.pii_types)
        if not flag_only:
            result.is_valid = False

    if schema is not None and not schema.valid:
        result.schema_valid = False
        result.schema_errors = list(schema.errors)
        result.is_valid = False

    return result


def assemble_item(
    item_id: int,
    item: Mapping[str, Any],
    text: str,
    enrichment: EnrichmentResult,
    validation: ValidationResult,
    output: OutputOptions,
    pii: Optional[PIIScanResult] = None,
) -> ProcessedItem:
    processed = ProcessedItem(id=item_id, original_text=text, enrichment=enrichment, validation=validation)
    if output.include_original:
        processed.original_fields = dict(item)
    if output.remove_pii and pii is not None and pii.redacted_text is not None:
        processed.processed_text = pii.redacted_text
    return processed


def should_emit(item: ProcessedItem, flag_only: bool) -> bool:
    return flag_only or item.validation.is_valid


@dataclass
class RunCounters:
    """Run-level tallies. ``skipped`` counts items without subject text."""

    loaded: int = 0
    skipped: int = 0
    failed: int = 0
    valid: int = 0
    duplicates: int = 0
    with_pii: int = 0
    emitted: int = 0

    def record(self, item: ProcessedItem, emitted: bool) -> None:
        if item.validation.is_valid:
            self.valid += 1
        if item.validation.is_duplicate:
            self.duplicates += 1
        if item.validation.has_pii:
            self.with_pii += 1
        if emitted:
            self.emitted += 1

    def summary(self) -> RunSummary:
        return RunSummary(
            total_processed=self.loaded,
            valid_items=self.valid,
            duplicates_found=self.duplicates,
            items_with_pii=self.with_pii,
            output_items=self.emitted,
            rejected_items=self.loaded - self.skipped - self.emitted,
        )


__all__ = ["length_within_bounds", "build_validation", "assemble_item", "should_emit", "RunCounters"]
