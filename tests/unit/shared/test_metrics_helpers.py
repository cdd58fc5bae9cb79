import pytest

from shared import metrics


def test_counter_is_cached_by_name():
    first = metrics.get_counter("cached_calls_total", "Calls", "unittest")
    second = metrics.get_counter("cached_calls_total", "Calls", "unittest")

    assert first is second
    assert "unittest_cached_calls_total" in metrics._collectors


def test_service_prefix_not_duplicated():
    metrics.get_gauge("unittest_depth", "Depth", "unittest")

    assert "unittest_depth" in metrics._collectors
    assert "unittest_unittest_depth" not in metrics._collectors


def test_invalid_metric_name():
    with pytest.raises(ValueError):
        metrics.get_histogram("Bad-Name", "Nope")


def test_name_reused_with_other_kind():
    metrics.get_counter("unittest_kind_clash_total", "Clash")

    with pytest.raises(ValueError, match="already registered as Counter"):
        metrics.get_gauge("unittest_kind_clash_total", "Clash")


def test_full_name_prefixes_service():
    assert metrics.full_name("commit_seconds", "ingestion") == "ingestion_commit_seconds"
    assert metrics.full_name("commit_seconds") == "commit_seconds"
