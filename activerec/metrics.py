"""Metric collectors that report nothing to any backend."""

from __future__ import annotations


class NoopMetricTimer:
    """Timer that only tracks which timings are open; nothing is reported."""

    def __init__(self) -> None:
        self.active: set[str] = set()

    def timing(self, name: str) -> None:
        self.active.add(name)

    def finish(self, name: str) -> None:
        self.active.discard(name)


class NoopMetricCount:
    """Counter that keeps totals in memory only; nothing is reported."""

    def __init__(self) -> None:
        self.totals: dict[str, float] = {}

    def inc(self, name: str, val: float) -> None:
        self.totals[name] = self.totals.get(name, 0.0) + val


class NoopMetric:
    """Metric factory returning unreported timers and counters."""

    def timer(self, storage: str, entity: str) -> NoopMetricTimer:
        return NoopMetricTimer()

    def stat_count(self, storage: str, entity: str) -> NoopMetricCount:
        return NoopMetricCount()

    def error_count(self, storage: str, entity: str) -> NoopMetricCount:
        return NoopMetricCount()