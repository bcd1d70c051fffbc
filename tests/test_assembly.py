import pytest

from data_enricher.core.assembly import (
    RunCounters,
    assemble_item,
    build_validation,
    length_within_bounds,
    should_emit,
)
from data_enricher.core.config import OutputOptions, ValidationOptions
from data_enricher.core.models import EnrichmentResult, SentimentResult
from data_enricher.validation.duplicates import DuplicateVerdict
from data_enricher.validation.pii import PIIScanResult
from data_enricher.validation.schema import SchemaCheckResult


@pytest.mark.parametrize(
    "text,min_len,max_len,expected",
    [
        ("short", 10, 0, False),
        ("long enough text", 10, 0, True),
        ("x" * 500, 0, 0, True),
        ("exactly10!", 10, 10, True),
        ("eleven char", 0, 10, False),
        ("", 0, 0, True),
    ],
)
def test_length_bounds(text, min_len, max_len, expected):
    assert length_within_bounds(text, min_len, max_len) is expected


def test_short_text_invalidates():
    result = build_validation("tiny", ValidationOptions(), flag_only=False)
    assert result.length_valid is False
    assert result.is_valid is False


def test_duplicate_invalidates_and_records_reference():
    verdict = DuplicateVerdict(is_duplicate=True, duplicate_of=4, similarity=1.0)
    result = build_validation("a long enough text", ValidationOptions(), False, duplicate=verdict)
    assert result.is_duplicate and result.duplicate_of == 4
    assert result.is_valid is False


def test_pii_invalidates_only_outside_flag_only():
    pii = PIIScanResult(pii_types=["email"])
    strict = build_validation("a long enough text", ValidationOptions(), False, pii=pii)
    flagged = build_validation("a long enough text", ValidationOptions(), True, pii=pii)
    assert strict.has_pii and strict.is_valid is False
    assert flagged.has_pii and flagged.is_valid is True
    assert flagged.pii_types == ["email"]


def test_schema_failure_invalidates():
    schema = SchemaCheckResult(valid=False, errors=["label: bad"])
    result = build_validation("a long enough text", ValidationOptions(), True, schema=schema)
    assert result.schema_valid is False
    assert result.schema_errors == ["label: bad"]
    assert result.is_valid is False


def test_clean_item_serializes_without_optional_keys():
    result = build_validation("a long enough text", ValidationOptions(), False)
    assert result.to_dict() == {
        "isValid": True,
        "isDuplicate": False,
        "hasPII": False,
        "lengthValid": True,
        "schemaValid": True,
    }


def test_assemble_merges_original_fields_under_computed_ones():
    item = {"id": "external-7", "text": "hello there friend", "label": "positive"}
    enrichment = EnrichmentResult(sentiment=SentimentResult(score=2, comparative=0.5, positive=["friend"]))
    validation = build_validation(item["text"], ValidationOptions(), False)
    processed = assemble_item(3, item, item["text"], enrichment, validation, OutputOptions())

    record = processed.to_dict()
    assert record["id"] == 3
    assert record["label"] == "positive"
    assert record["text"] == "hello there friend"
    assert record["originalText"] == "hello there friend"
    assert "processedText" not in record
    assert list(record["enrichment"]) == ["sentiment"]


def test_assemble_without_original_and_with_redaction():
    item = {"text": "mail a@b.com please", "label": "x"}
    pii = PIIScanResult(pii_types=["email"], redacted_text="mail [EMAIL_REDACTED] please")
    validation = build_validation(item["text"], ValidationOptions(), False, pii=pii)
    output = OutputOptions(include_original=False, remove_pii=True)
    record = assemble_item(0, item, item["text"], EnrichmentResult(), validation, output, pii=pii).to_dict()
    assert "label" not in record
    assert record["processedText"] == "mail [EMAIL_REDACTED] please"
    assert record["originalText"] == "mail a@b.com please"


def test_emission_rule():
    valid = assemble_item(0, {}, "t", EnrichmentResult(), build_validation("long enough!", ValidationOptions(), False), OutputOptions())
    invalid = assemble_item(1, {}, "t", EnrichmentResult(), build_validation("t", ValidationOptions(), False), OutputOptions())
    assert should_emit(valid, flag_only=False) is True
    assert should_emit(invalid, flag_only=False) is False
    assert should_emit(invalid, flag_only=True) is True


def test_counters_exclude_skipped_from_rejected():
    counters = RunCounters(loaded=5, skipped=1)
    ok = assemble_item(0, {}, "t", EnrichmentResult(), build_validation("long enough!", ValidationOptions(), False), OutputOptions())
    pii = PIIScanResult(pii_types=["ssn"])
    bad = assemble_item(1, {}, "t", EnrichmentResult(), build_validation("long enough!", ValidationOptions(), False, pii=pii), OutputOptions())
    counters.record(ok, emitted=True)
    counters.record(bad, emitted=False)
    counters.failed += 1

    summary = counters.summary().to_dict()
    assert summary == {
        "totalProcessed": 5,
        "validItems": 1,
        "duplicatesFound": 0,
        "itemsWithPII": 1,
        "outputItems": 1,
        "rejectedItems": 3,
    }
