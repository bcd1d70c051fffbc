"""Training data enrichment pipeline orchestrator.

Provides EnrichmentPipeline, which runs every input item through the
stateless analyzers, the incremental keyword extractor, the duplicate,
PII, length and schema checks, and finally Decision & Assembly.

Control flow per run:

1. Build the duplicate index once over the subject texts of all loaded items.
2. Visit items in input order exactly once. Items without subject text are
   skipped with a warning.
3. For each item, compute annotations and validation results without
   touching cross-item state, assemble the record, then commit the item's
   staged corpus document and canonical-map entry.

Committing only after assembly keeps the term corpus and the canonical map
limited to items that made it through. A fault inside one analyzer degrades
that annotation; any other per-item fault drops the item and the run goes on.
Only configuration and storage faults end a run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Sequence

from data_enricher.analysis.entities import EntityExtractor
from data_enricher.analysis.keywords import KeywordExtractor, StagedDocument, TermCorpus
from data_enricher.analysis.language import UNKNOWN_LANGUAGE, LanguageGuesser
from data_enricher.analysis.readability import ReadabilityCalculator
from data_enricher.analysis.sentiment import SentimentAnalyzer
from data_enricher.core.assembly import RunCounters, assemble_item, build_validation, should_emit
from data_enricher.core.config import AppConfig, RunInput, load_run_input
from data_enricher.core.models import (
    EnrichmentResult,
    EntitiesResult,
    ProcessedItem,
    ReadabilityResult,
    RunResult,
    SentimentResult,
)
from data_enricher.debug.audit_log import log_item_redactions
from data_enricher.storage.local_store import LocalStorage
from data_enricher.utils.observability import count_analyzer_error, count_item, measure_item
from data_enricher.validation.duplicates import DuplicateDetector, DuplicateVerdict
from data_enricher.validation.pii import PIIDetector, PIIScanResult
from data_enricher.validation.schema import SchemaValidator

logger = logging.getLogger(__name__)


@dataclass
class PendingItem:
    """An assembled item whose cross-item side effects are not yet applied."""

    item: ProcessedItem
    staged_keywords: Optional[StagedDocument] = None
    duplicate: Optional[DuplicateVerdict] = None
    pii: Optional[PIIScanResult] = None


def subject_text(item: Mapping[str, Any], text_field: str) -> Optional[str]:
    """Return the item's subject text, or None when it is absent, empty or not a string."""
    value = item.get(text_field)
    if isinstance(value, str) and value:
        return value
    return None


class EnrichmentPipeline:
    def __init__(self, run_input: RunInput, config: Optional[AppConfig] = None):
        self.run_input = run_input
        self.config = config or AppConfig()

        enrich = run_input.enrichment_options
        self.sentiment = SentimentAnalyzer() if enrich.sentiment else None
        self.entities = EntityExtractor() if enrich.entities else None
        self.language = LanguageGuesser() if enrich.language else None
        self.readability = ReadabilityCalculator() if enrich.readability else None

        checks = run_input.validation_options
        self.pii = PIIDetector() if checks.detect_pii else None
        # raises SchemaDefinitionError before any item is touched
        self.schema = SchemaValidator(run_input.schema_validation)

        # run-scoped cross-item state, created by process()
        self.keywords: Optional[KeywordExtractor] = None
        self.duplicates: Optional[DuplicateDetector] = None

    @property
    def corpus(self) -> Optional[TermCorpus]:
        return self.keywords.corpus if self.keywords is not None else None

    # ------------------ run ------------------
    def run(self, storage: LocalStorage) -> RunResult:
        """Load the input dataset, process it, and persist items and summary."""
        logger.info("Starting enrichment run for dataset %s", self.run_input.dataset_id)
        dataset = storage.open_dataset(self.run_input.dataset_id)
        items = dataset.get_items(limit=self.run_input.item_limit)
        logger.info("Loaded %d items from input dataset", len(items))
        if not items:
            logger.warning("Input dataset is empty")

        result = self.process(items)

        storage.open_dataset(self.config.output_dataset).push_items(result.output_records())
        summary = result.summary.to_dict()
        storage.open_key_value_store(self.config.key_value_store).set_value(self.config.summary_key, summary)
        logger.info("Processing complete: %s", summary)
        return result

    def process(self, items: Sequence[Mapping[str, Any]]) -> RunResult:
        """Run the forward pass over an in-memory item list."""
        text_field = self.run_input.text_field
        flag_only = self.run_input.output_options.flag_only
        counters = RunCounters(loaded=len(items))
        output: List[ProcessedItem] = []
        skipped: List[int] = []
        failed: List[int] = []

        self.keywords = KeywordExtractor(TermCorpus()) if self.run_input.enrichment_options.keywords else None
        self.duplicates = None
        checks = self.run_input.validation_options
        if checks.detect_duplicates:
            texts = [t for t in (subject_text(item, text_field) for item in items) if t]
            self.duplicates = DuplicateDetector.from_texts(texts, checks.duplicate_similarity_threshold)

        total = len(items)
        for i, item in enumerate(items):
            text = subject_text(item, text_field)
            if text is None:
                logger.warning("Item %d missing text field '%s'", i, text_field)
                counters.skipped += 1
                skipped.append(i)
                count_item("skipped")
                continue

            logger.info("Processing item %d/%d", i + 1, total)
            try:
                pending = self.process_item(i, item, text)
                self._commit(pending)
            except Exception:
                logger.exception("Item %d failed; dropping it from the output", i)
                counters.failed += 1
                failed.append(i)
                count_item("failed")
                continue

            emitted = should_emit(pending.item, flag_only)
            counters.record(pending.item, emitted)
            if emitted:
                output.append(pending.item)
            count_item("emitted" if emitted else "rejected")

        summary = counters.summary()
        if failed:
            logger.warning("%d item(s) failed and were dropped: %s", len(failed), failed)
        return RunResult(items=output, summary=summary, skipped_ids=skipped, failed_ids=failed)

    # ------------------ per item ------------------
    @measure_item
    def process_item(self, item_id: int, item: Mapping[str, Any], text: str) -> PendingItem:
        """Enrich, validate and assemble one item without committing shared state."""
        enrichment = EnrichmentResult()
        staged: Optional[StagedDocument] = None

        if self.sentiment is not None:
            enrichment.sentiment = self._analyze("sentiment", self.sentiment.analyze, text, SentimentResult)
        if self.entities is not None:
            enrichment.entities = self._analyze("entities", self.entities.analyze, text, EntitiesResult)
        if self.keywords is not None:
            staged = self.keywords.stage(text)
            enrichment.keywords = list(staged.keywords)
        if self.language is not None:
            enrichment.language = self._analyze("language", self.language.analyze, text, lambda: UNKNOWN_LANGUAGE)
        if self.readability is not None:
            enrichment.readability = self._analyze("readability", self.readability.analyze, text, ReadabilityResult)

        output = self.run_input.output_options
        verdict = self.duplicates.check(item_id, text) if self.duplicates is not None else None
        pii = self.pii.scan(text, redact=output.remove_pii) if self.pii is not None else None
        schema = self.schema.validate(item)

        validation = build_validation(
            text,
            self.run_input.validation_options,
            output.flag_only,
            duplicate=verdict,
            pii=pii,
            schema=schema,
        )
        processed = assemble_item(item_id, item, text, enrichment, validation, output, pii=pii)
        return PendingItem(item=processed, staged_keywords=staged, duplicate=verdict, pii=pii)

    def _commit(self, pending: PendingItem) -> None:
        item_id = pending.item.id
        if pending.staged_keywords is not None and self.keywords is not None:
            self.keywords.commit(pending.staged_keywords)
        if pending.duplicate is not None and self.duplicates is not None:
            self.duplicates.commit(item_id, pending.duplicate)
        if pending.item.processed_text is not None and pending.pii is not None and self.config.audit.enabled:
            log_item_redactions(item_id, pending.pii.redactions, self.config.audit.audit_dir)

    def _analyze(self, name: str, fn: Callable[[str], Any], text: str, default: Callable[[], Any]) -> Any:
        try:
            return fn(text)
        except Exception as e:
            logger.warning("%s analyzer failed; using default annotation: %s", name, e)
            count_analyzer_error(name)
            return default()


def run_enrichment(
    raw_input: Optional[Mapping[str, Any]],
    config: Optional[AppConfig] = None,
    storage: Optional[LocalStorage] = None,
) -> RunResult:
    """Validate input, build the pipeline and execute one full run.

    Raises ConfigurationError before any item is read when the input or the
    environment is invalid, and StorageError on collaborator I/O failure.
    """
    config = config or AppConfig()
    run_input = load_run_input(raw_input)
    config.validate_environment(run_input.dataset_id)
    logger.info(
        "Run input: %s",
        {k: v for k, v in run_input.model_dump(by_alias=True).items() if k != "schemaValidation"},
    )
    pipeline = EnrichmentPipeline(run_input, config)
    return pipeline.run(storage or LocalStorage(config.storage_dir))


__all__ = ["EnrichmentPipeline", "PendingItem", "run_enrichment", "subject_text"]
