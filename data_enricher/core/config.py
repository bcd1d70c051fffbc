"""Configuration management for the training data enricher.

Two layers live here:

- ``RunInput`` is the per-run input document (which dataset to read, which
  enrichment and validation steps to run, and the output policy). It uses
  camelCase aliases so the JSON stored under the ``INPUT`` key can be loaded
  as-is.
- ``AppConfig`` holds process-level settings (storage location, logging,
  audit trail) using pydantic-settings so environment variables prefixed with
  ``ENRICHER_`` and a local ``.env`` file can override values.

Logs must never contain raw PII. ``AppConfig.setup_logging`` attaches a
redacting formatter that masks the same patterns the PII detector scans for
before anything reaches a handler.
"""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict
from pythonjsonlogger.json import JsonFormatter

from data_enricher.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


# Category name -> regex, in the order categories are reported.
DEFAULT_PII_PATTERNS: Dict[str, str] = {
    "email": r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Z|a-z]{2,}\b",
    "phone": r"(?:\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}",
    "ssn": r"\b\d{3}-\d{2}-\d{4}\b",
    "credit_card": r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b",
}

LOG_REDACTION_TOKEN = "[REDACTED_PII]"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class _InputModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class EnrichmentOptions(_InputModel):
    """Toggles for the stateless analyzers and the keyword extractor."""

    sentiment: bool = True
    entities: bool = True
    keywords: bool = True
    language: bool = True
    readability: bool = True


class ValidationOptions(_InputModel):
    """Quality checks.

    duplicate_similarity_threshold: minimum similarity in [0, 1] for the best
    index match to count as a duplicate candidate.
    min_text_length / max_text_length: bounds on the subject text length in
    characters; 0 disables the corresponding bound.
    """

    detect_duplicates: bool = True
    duplicate_similarity_threshold: float = Field(0.85, ge=0.0, le=1.0)
    detect_pii: bool = Field(True, alias="detectPII")
    min_text_length: int = Field(10, ge=0)
    max_text_length: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _coherent_bounds(self) -> "ValidationOptions":
        if self.max_text_length and self.min_text_length > self.max_text_length:
            raise ValueError("minTextLength must not exceed maxTextLength")
        return self


class OutputOptions(_InputModel):
    include_original: bool = True
    flag_only: bool = False
    remove_pii: bool = Field(False, alias="removePII")


class RunInput(_InputModel):
    """Per-run input document."""

    dataset_id: str = Field(..., min_length=1)
    text_field: str = Field("text", min_length=1)
    enrichment_options: EnrichmentOptions = Field(default_factory=EnrichmentOptions)
    validation_options: ValidationOptions = Field(default_factory=ValidationOptions)
    schema_validation: Dict[str, Any] = Field(default_factory=dict)
    output_options: OutputOptions = Field(default_factory=OutputOptions)
    max_items: int = Field(0, ge=0)

    @field_validator("schema_validation", mode="before")
    def _none_means_empty(cls, v):
        return {} if v is None else v

    @property
    def item_limit(self) -> Optional[int]:
        return self.max_items or None


def load_run_input(raw: Optional[Mapping[str, Any]]) -> RunInput:
    """Validate a raw input document, raising ConfigurationError on failure."""
    if not raw or not raw.get("datasetId", raw.get("dataset_id")):
        raise ConfigurationError("Missing required input: datasetId")
    try:
        return RunInput.model_validate(dict(raw))
    except ValidationError as e:
        first = e.errors()[0]
        loc = ".".join(str(p) for p in first["loc"]) or "input"
        raise ConfigurationError(f"Invalid input {loc}: {first['msg']}") from e


class LoggingConfig(BaseModel):
    log_level: str = Field("INFO")
    log_file_path: Optional[str] = Field("logs/data_enricher.log")
    json_format: bool = False
    max_log_size_mb: int = Field(50, ge=1)
    backup_count: int = Field(5, ge=0)

    @field_validator("log_level")
    def _valid_level(cls, v: str) -> str:
        v = v.upper()
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR"}
        if v not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v


class AuditConfig(BaseModel):
    # JSON-lines redaction events, one file per day. Never holds raw text.
    enabled: bool = True
    audit_dir: str = Field("logs/pii_audit")


class RedactingFormatter(logging.Formatter):
    """Plain-text formatter that masks PII patterns in the rendered record."""

    def __init__(self, fmt: str = LOG_FORMAT, pattern: Optional[re.Pattern] = None):
        super().__init__(fmt)
        self._pattern = pattern or build_redaction_pattern()

    def format(self, record: logging.LogRecord) -> str:
        return self._pattern.sub(LOG_REDACTION_TOKEN, super().format(record))


class RedactingJsonFormatter(JsonFormatter):
    """JSON formatter variant of RedactingFormatter."""

    def __init__(self, fmt: str = "%(asctime)s %(levelname)s %(name)s %(message)s", pattern: Optional[re.Pattern] = None):
        super().__init__(fmt)
        self._pattern = pattern or build_redaction_pattern()

    def format(self, record: logging.LogRecord) -> str:
        return self._pattern.sub(LOG_REDACTION_TOKEN, super().format(record))


def build_redaction_pattern(patterns: Optional[Mapping[str, str]] = None) -> re.Pattern:
    patterns = patterns or DEFAULT_PII_PATTERNS
    return re.compile("|".join(f"(?:{p})" for p in patterns.values()))


class AppConfig(BaseSettings):
    """Top-level process configuration.

    Values can be overridden with ``ENRICHER_<FIELD>`` environment variables;
    nested values use ``__`` (for example ``ENRICHER_LOGGING__LOG_LEVEL``).
    """

    model_config = SettingsConfigDict(
        env_prefix="ENRICHER_",
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field("dev")
    storage_dir: str = Field("storage")
    input_key: str = Field("INPUT")
    summary_key: str = Field("SUMMARY")
    output_dataset: str = Field("default")
    key_value_store: str = Field("default")

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)

    @field_validator("environment")
    def _env_allowed(cls, v: str) -> str:
        allowed = {"dev", "staging", "prod"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    def validate_environment(self, input_dataset: Optional[str] = None) -> bool:
        """Startup checks. Raises ConfigurationError on failure.

        - the storage directory exists or can be created
        - production runs keep the redaction audit trail enabled
        - the input dataset, when given, is not the output dataset
        """
        if input_dataset is not None and input_dataset == self.output_dataset:
            raise ConfigurationError(
                f"datasetId '{input_dataset}' is also the output dataset; set ENRICHER_OUTPUT_DATASET to another name"
            )
        if self.environment == "prod" and not self.audit.enabled:
            raise ConfigurationError("Audit trail must be enabled in production (audit.enabled)")
        storage = Path(self.storage_dir)
        try:
            storage.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"Storage directory {storage} is not usable: {e}") from e
        return True

    def setup_logging(self) -> None:
        """Configure root logging with PII redaction.

        Adds a console handler and, when ``logging.log_file_path`` is set, a
        RotatingFileHandler. Repeated calls do not stack handlers.
        """
        level = getattr(logging, self.logging.log_level)
        pattern = build_redaction_pattern()
        if self.logging.json_format:
            formatter: logging.Formatter = RedactingJsonFormatter(pattern=pattern)
        else:
            formatter = RedactingFormatter(pattern=pattern)

        root = logging.getLogger()
        root.setLevel(level)

        if not any(getattr(h, "_enricher_console", False) for h in root.handlers):
            console = logging.StreamHandler()
            console._enricher_console = True  # type: ignore[attr-defined]
            console.setLevel(level)
            console.setFormatter(formatter)
            root.addHandler(console)

        if self.logging.log_file_path:
            log_path = Path(self.logging.log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handler = RotatingFileHandler(
                filename=str(log_path),
                maxBytes=self.logging.max_log_size_mb * 1024 * 1024,
                backupCount=self.logging.backup_count,
                encoding="utf-8",
            )
            handler.setLevel(level)
            handler.setFormatter(formatter)
            if not any(isinstance(h, RotatingFileHandler) and h.baseFilename == handler.baseFilename for h in root.handlers):
                root.addHandler(handler)
            else:
                handler.close()


__all__ = [
    "AppConfig",
    "AuditConfig",
    "LoggingConfig",
    "RunInput",
    "EnrichmentOptions",
    "ValidationOptions",
    "OutputOptions",
    "load_run_input",
    "DEFAULT_PII_PATTERNS",
    "RedactingFormatter",
    "RedactingJsonFormatter",
    "build_redaction_pattern",
]
