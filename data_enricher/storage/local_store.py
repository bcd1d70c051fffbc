"""Local on-disk storage for input/output datasets and run metadata.

Layout under the storage root::

    datasets/<name>/000000001.json           one JSON object per item
    key_value_stores/<store>/<KEY>.json      one JSON value per key

Datasets are read in file-name order. Every I/O or decoding failure is
raised as ``StorageError``; callers treat it as fatal.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from data_enricher.core.errors import StorageError

logger = logging.getLogger(__name__)

ITEM_NAME_WIDTH = 9


class Dataset:
    def __init__(self, path: Path, name: str):
        self.path = path
        self.name = name

    def exists(self) -> bool:
        return self.path.is_dir()

    def _item_files(self) -> List[Path]:
        return sorted(p for p in self.path.glob("*.json") if p.is_file())

    def get_items(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Return dataset items in order, at most ``limit`` when given."""
        if not self.exists():
            raise StorageError(f"Dataset '{self.name}' not found at {self.path}")
        files = self._item_files()
        if limit:
            files = files[:limit]
        items: List[Dict[str, Any]] = []
        for f in files:
            try:
                value = json.loads(f.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as e:
                raise StorageError(f"Failed to read dataset item {f}: {e}") from e
            if not isinstance(value, dict):
                raise StorageError(f"Dataset item {f} is not a JSON object")
            items.append(value)
        return items

    def push_items(self, items: Iterable[Dict[str, Any]]) -> int:
        """Append items after any existing ones; returns the number written."""
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            existing = self._item_files()
            seq = int(existing[-1].stem) if existing else 0
            count = 0
            for item in items:
                seq += 1
                target = self.path / f"{seq:0{ITEM_NAME_WIDTH}d}.json"
                target.write_text(json.dumps(item, ensure_ascii=False, indent=2), encoding="utf-8")
                count += 1
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write dataset '{self.name}': {e}") from e
        logger.debug("Pushed %d items to dataset %s", count, self.name)
        return count


class KeyValueStore:
    def __init__(self, path: Path, name: str):
        self.path = path
        self.name = name

    def _key_path(self, key: str) -> Path:
        if not key or "/" in key or "\\" in key:
            raise StorageError(f"Invalid key {key!r}")
        return self.path / f"{key}.json"

    def get_value(self, key: str, default: Any = None) -> Any:
        p = self._key_path(key)
        if not p.exists():
            return default
        try:
            return json.loads(p.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Failed to read key '{key}' from store '{self.name}': {e}") from e

    def set_value(self, key: str, value: Any) -> None:
        p = self._key_path(key)
        try:
            self.path.mkdir(parents=True, exist_ok=True)
            p.write_text(json.dumps(value, ensure_ascii=False, indent=2), encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Failed to write key '{key}' to store '{self.name}': {e}") from e


class LocalStorage:
    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def open_dataset(self, name: str) -> Dataset:
        return Dataset(self.root / "datasets" / name, name)

    def open_key_value_store(self, name: str = "default") -> KeyValueStore:
        return KeyValueStore(self.root / "key_value_stores" / name, name)


__all__ = ["LocalStorage", "Dataset", "KeyValueStore"]
