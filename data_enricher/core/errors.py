"""Exception taxonomy for enrichment runs.

Only ``ConfigurationError`` and ``StorageError`` terminate a run. Everything
else raised below the pipeline is absorbed at the item or sub-check level.
"""

from __future__ import annotations


class EnricherError(Exception):
    """Base class for all data_enricher errors."""


class ConfigurationError(EnricherError):
    """Invalid or missing run configuration. Fatal before any item is processed."""


class SchemaDefinitionError(ConfigurationError):
    """The caller-supplied schema description cannot be compiled."""


class StorageError(EnricherError):
    """Retrieval or persistence through a storage collaborator failed."""


class AnalyzerError(EnricherError):
    """A single analyzer failed on a single item."""

    def __init__(self, analyzer: str, message: str):
        super().__init__(f"{analyzer}: {message}")
        self.analyzer = analyzer


__all__ = [
    "EnricherError",
    "ConfigurationError",
    "SchemaDefinitionError",
    "StorageError",
    "AnalyzerError",
]
