"""
data_enricher/cli.py

Command line runner: reads the run input, executes one enrichment run against
local storage and prints the run summary as JSON.

Usage:
python -m data_enricher --storage-dir storage
python -m data_enricher --input input.json --log-level DEBUG

Exit codes: 0 success, 1 storage failure, 2 configuration failure.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from data_enricher.core.config import AppConfig
from data_enricher.core.errors import ConfigurationError, StorageError
from data_enricher.core.pipeline import run_enrichment
from data_enricher.storage.local_store import LocalStorage
from data_enricher.utils.observability import metrics_text

log = logging.getLogger("data_enricher")

EXIT_OK = 0
EXIT_STORAGE = 1
EXIT_CONFIG = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="data-enricher", description="Enrich and validate a text training dataset.")
    parser.add_argument("--storage-dir", help="Local storage root (defaults to ENRICHER_STORAGE_DIR or ./storage)")
    parser.add_argument("--input", help="Path to a JSON run input; defaults to the INPUT record in the key-value store")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser


def _load_input_file(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Could not read run input {path}: {e}") from e


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    overrides: Dict[str, Any] = {}
    if args.storage_dir:
        overrides["storage_dir"] = args.storage_dir
    if args.log_level:
        overrides["logging"] = {"log_level": args.log_level}
    try:
        config = AppConfig(**overrides)
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return EXIT_CONFIG

    config.setup_logging()
    storage = LocalStorage(config.storage_dir)

    try:
        if args.input:
            raw = _load_input_file(Path(args.input))
        else:
            raw = storage.open_key_value_store(config.key_value_store).get_value(config.input_key)
        if raw is not None and not isinstance(raw, dict):
            raise ConfigurationError("Run input must be a JSON object")
        result = run_enrichment(raw, config=config, storage=storage)
    except ConfigurationError as e:
        log.error("Configuration error: %s", e)
        return EXIT_CONFIG
    except StorageError as e:
        log.error("Storage error: %s", e)
        return EXIT_STORAGE

    log.debug("Run metrics:\n%s", metrics_text().decode("utf-8"))
    print(json.dumps(result.summary.to_dict(), indent=2))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
