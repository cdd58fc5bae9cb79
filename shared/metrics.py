"""Prometheus collector helpers shared by the widget and the ingestion API.

Names are prefixed with the owning service and checked for snake_case.
Collectors live in a module-level cache keyed by full name, so constructing
the same collector twice returns the registered instance rather than
tripping the default registry's duplicate check.
"""

from __future__ import annotations

import re
from typing import TypeVar

from prometheus_client import Counter, Gauge, Histogram
from prometheus_client.metrics import MetricWrapperBase

_NAME_RE = re.compile(r"^[a-z_][a-z0-9_]*$")

_collectors: dict[str, MetricWrapperBase] = {}

M = TypeVar("M", Counter, Gauge, Histogram)


def full_name(name: str, service: str | None = None) -> str:
    if service and not name.startswith(service + "_"):
        name = f"{service}_{name}"
    if not _NAME_RE.match(name):
        raise ValueError(f"Invalid metric name {name!r}: expected snake_case")
    return name


def _collector(kind: type[M], name: str, documentation: str, service, **kwargs) -> M:
    key = full_name(name, service)
    existing = _collectors.get(key)
    if existing is None:
        existing = _collectors[key] = kind(key, documentation, **kwargs)
    elif not isinstance(existing, kind):
        raise ValueError(
            f"Metric {key!r} already registered as {type(existing).__name__}"
        )
    return existing


def get_counter(
    name: str,
    documentation: str,
    service: str | None = None,
    labelnames: tuple[str, ...] = (),
) -> Counter:
    return _collector(Counter, name, documentation, service, labelnames=labelnames)


def get_gauge(name: str, documentation: str, service: str | None = None) -> Gauge:
    return _collector(Gauge, name, documentation, service)


def get_histogram(
    name: str,
    documentation: str,
    service: str | None = None,
    buckets: tuple[float, ...] | None = None,
) -> Histogram:
    if buckets is None:
        return _collector(Histogram, name, documentation, service)
    return _collector(Histogram, name, documentation, service, buckets=buckets)


__all__ = ["full_name", "get_counter", "get_gauge", "get_histogram"]
