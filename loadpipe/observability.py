"""
Metrics for loadpipe.

Counts cache behaviour, acquisitions and passthroughs, and keeps a
bounded duration histogram per loader. Engines record into the global
instance unless given their own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


def _percentile(data: list[float], p: float) -> float | None:
    if not data:
        return None
    sorted_data = sorted(data)
    k = (len(sorted_data) - 1) * p
    f = int(k)
    c = f + 1 if f + 1 < len(sorted_data) else f
    return sorted_data[f] + (k - f) * (sorted_data[c] - sorted_data[f])


@dataclass
class LoadMetrics:
    """Counters and loader timings for resource processing."""

    # Counters
    requests_total: int = 0
    cache_hits: int = 0
    cache_misses: int = 0
    acquisitions: int = 0
    acquisition_failures: int = 0
    passthroughs: int = 0

    # Histograms (simplified as lists)
    loader_durations_ms: dict[str, list[float]] = field(default_factory=dict)

    max_histogram_entries: int = 1000

    def record_request(self, cache_hit: bool) -> None:
        self.requests_total += 1
        if cache_hit:
            self.cache_hits += 1
        else:
            self.cache_misses += 1

    def record_acquisition(self, success: bool) -> None:
        self.acquisitions += 1
        if not success:
            self.acquisition_failures += 1

    def record_passthrough(self) -> None:
        self.passthroughs += 1

    def record_loader(self, name: str, duration_ms: float) -> None:
        histogram = self.loader_durations_ms.setdefault(name, [])
        histogram.append(duration_ms)
        if len(histogram) > self.max_histogram_entries:
            del histogram[: len(histogram) - self.max_histogram_entries]

    def get_stats(self) -> dict[str, Any]:
        """Get summary statistics."""
        return {
            "requests": {
                "total": self.requests_total,
                "cache_hits": self.cache_hits,
                "cache_misses": self.cache_misses,
                "hit_rate": (
                    self.cache_hits / self.requests_total if self.requests_total > 0 else None
                ),
            },
            "acquisitions": {
                "total": self.acquisitions,
                "failed": self.acquisition_failures,
            },
            "passthroughs": self.passthroughs,
            "loaders": {
                name: {
                    "calls": len(durations),
                    "p50": _percentile(durations, 0.5),
                    "p95": _percentile(durations, 0.95),
                    "p99": _percentile(durations, 0.99),
                }
                for name, durations in self.loader_durations_ms.items()
            },
        }

    def reset(self) -> None:
        """Reset all metrics."""
        self.requests_total = 0
        self.cache_hits = 0
        self.cache_misses = 0
        self.acquisitions = 0
        self.acquisition_failures = 0
        self.passthroughs = 0
        self.loader_durations_ms.clear()


_global_metrics = LoadMetrics()


def get_metrics() -> LoadMetrics:
    """Get the global metrics instance."""
    return _global_metrics


def reset_metrics() -> None:
    """Reset global metrics (useful for testing)."""
    _global_metrics.reset()
