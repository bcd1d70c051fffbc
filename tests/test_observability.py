import pytest

from data_enricher.utils.observability import (
    count_analyzer_error,
    count_item,
    measure_item,
    metric_value,
    metrics_text,
)


def test_count_item_rejects_unknown_outcome():
    with pytest.raises(ValueError):
        count_item("lost")


def test_counters_and_exposition():
    before = metric_value("enricher_items_total", {"outcome": "skipped"})
    count_item("skipped")
    count_analyzer_error("entities")
    assert metric_value("enricher_items_total", {"outcome": "skipped"}) == before + 1

    text = metrics_text().decode("utf-8")
    assert "enricher_items_total" in text
    assert 'enricher_analyzer_errors_total{analyzer="entities"}' in text


def test_measure_item_observes_failures_too():
    @measure_item
    def explode():
        raise RuntimeError("boom")

    before = metric_value("enricher_item_latency_seconds_count")
    with pytest.raises(RuntimeError):
        explode()
    assert metric_value("enricher_item_latency_seconds_count") == before + 1
