import sys
from pathlib import Path

import pytest


def pytest_configure(config):
    """Ensure the project root (one level above tests/) is on sys.path so
    imports like `from data_enricher.core.config import AppConfig` work during tests.
    """
    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root))


@pytest.fixture
def app_config(tmp_path):
    from data_enricher.core.config import AppConfig

    return AppConfig(
        storage_dir=str(tmp_path / "storage"),
        logging={"log_file_path": None},
        audit={"enabled": True, "audit_dir": str(tmp_path / "audit")},
    )


@pytest.fixture
def storage(app_config):
    from data_enricher.storage.local_store import LocalStorage

    return LocalStorage(app_config.storage_dir)


@pytest.fixture
def make_input():
    """Build a RunInput from camelCase overrides on top of a minimal document."""
    from data_enricher.core.config import load_run_input

    def _make(**overrides):
        raw = {"datasetId": "input"}
        raw.update(overrides)
        return load_run_input(raw)

    return _make
