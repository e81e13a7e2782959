"""Observability: process-local counters/timers for the enrichment pipeline."""

import time
from contextlib import contextmanager
from typing import Any

import structlog

logger = structlog.get_logger().bind(source="observability")


class Metrics:
    """Dict-based counters and timers; nothing leaves the process."""

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._timers: dict[str, list[float]] = {}

    def counter(self, name: str, value: int = 1):
        self._counters[name] = self._counters.get(name, 0) + value

    def count(self, name: str) -> int:
        return self._counters.get(name, 0)

    @contextmanager
    def timer(self, name: str):
        """Time the enclosed block, including failed attempts."""
        start = time.perf_counter()
        try:
            yield
        finally:
            self._timers.setdefault(name, []).append(time.perf_counter() - start)

    def fallback_rate(self) -> float:
        """Share of enrichments answered by the local heuristics."""
        remote = self.count("enrichment.remote")
        fallback = self.count("enrichment.fallback")
        total = remote + fallback
        return fallback / total if total else 0.0

    def summary(self) -> dict[str, Any]:
        timers = {
            name: {
                "count": len(durations),
                "avg": sum(durations) / len(durations),
                "max": max(durations),
            }
            for name, durations in self._timers.items()
            if durations
        }
        return {
            "counters": dict(self._counters),
            "timers": timers,
            "fallback_rate": round(self.fallback_rate(), 3),
        }

    def reset(self):
        self._counters.clear()
        self._timers.clear()


# Module-level singleton
metrics = Metrics()


def log_run_summary():
    """Log the current metrics summary via structlog."""
    logger.info("run_summary", **metrics.summary())
