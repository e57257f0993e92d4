"""
core_metrics – tiny helpers so services can record counters / histograms
into the in-process Prometheus registry without declaring collectors up
front. Collectors are created lazily on first use; the label set of that
first call is the label set of the metric.
"""

from __future__ import annotations

import threading
from typing import Any, Dict

from prometheus_client import (
    REGISTRY as _PROM_REGISTRY,
    Counter as _pCounter,
    Histogram as _pHistogram,
)

_P_COUNTERS: Dict[str, _pCounter] = {}
_P_HISTOS: Dict[str, _pHistogram] = {}
_LOCK = threading.Lock()


def _label_names(attrs: Dict[str, Any]) -> tuple[str, ...]:
    return tuple(sorted(attrs))


def _str_labels(attrs: Dict[str, Any]) -> Dict[str, str]:
    return {k: str(v) for k, v in attrs.items()}


def counter(name: str, inc: int | float = 1, **attrs: Any) -> None:
    """
    Increment *name* by *inc* (default 1), labelled with *attrs*.
    """
    with _LOCK:
        pc = _P_COUNTERS.get(name)
        if pc is None:
            pc = _pCounter(name, f"Counter for {name}", labelnames=_label_names(attrs), registry=_PROM_REGISTRY)
            _P_COUNTERS[name] = pc
    if attrs:
        pc.labels(**_str_labels(attrs)).inc(inc)
    else:
        pc.inc(inc)


def histogram(name: str, value: float, **attrs: Any) -> None:
    """
    Record *value* in histogram *name*.
    """
    with _LOCK:
        ph = _P_HISTOS.get(name)
        if ph is None:
            ph = _pHistogram(name, f"Histogram for {name}", labelnames=_label_names(attrs), registry=_PROM_REGISTRY)
            _P_HISTOS[name] = ph
    if attrs:
        ph.labels(**_str_labels(attrs)).observe(value)
    else:
        ph.observe(value)


__all__ = ["counter", "histogram"]
