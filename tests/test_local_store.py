import json

import pytest

from data_enricher.core.errors import StorageError
from data_enricher.storage.local_store import LocalStorage


def test_push_then_read_in_order(tmp_path):
    storage = LocalStorage(tmp_path)
    ds = storage.open_dataset("input")
    assert ds.push_items([{"text": "a"}, {"text": "b"}]) == 2
    assert ds.push_items([{"text": "c"}]) == 1

    files = sorted(p.name for p in (tmp_path / "datasets" / "input").iterdir())
    assert files == ["000000001.json", "000000002.json", "000000003.json"]
    assert [i["text"] for i in ds.get_items()] == ["a", "b", "c"]
    assert [i["text"] for i in ds.get_items(limit=2)] == ["a", "b"]


def test_missing_dataset_is_storage_error(tmp_path):
    with pytest.raises(StorageError, match="not found"):
        LocalStorage(tmp_path).open_dataset("nope").get_items()


def test_malformed_item_is_storage_error(tmp_path):
    ds_dir = tmp_path / "datasets" / "bad"
    ds_dir.mkdir(parents=True)
    (ds_dir / "000000001.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(StorageError, match="Failed to read"):
        LocalStorage(tmp_path).open_dataset("bad").get_items()

    (ds_dir / "000000001.json").write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(StorageError, match="not a JSON object"):
        LocalStorage(tmp_path).open_dataset("bad").get_items()


def test_key_value_store_round_trip(tmp_path):
    kv = LocalStorage(tmp_path).open_key_value_store()
    assert kv.get_value("SUMMARY") is None
    assert kv.get_value("SUMMARY", default={}) == {}
    kv.set_value("SUMMARY", {"outputItems": 2})
    assert json.loads((tmp_path / "key_value_stores" / "default" / "SUMMARY.json").read_text()) == {"outputItems": 2}
    assert kv.get_value("SUMMARY") == {"outputItems": 2}


def test_invalid_key_rejected(tmp_path):
    kv = LocalStorage(tmp_path).open_key_value_store()
    with pytest.raises(StorageError, match="Invalid key"):
        kv.set_value("../escape", 1)


def test_unserializable_value_is_storage_error(tmp_path):
    kv = LocalStorage(tmp_path).open_key_value_store()
    with pytest.raises(StorageError):
        kv.set_value("X", {"bad": object()})
