"""
URNA v1.0: Operation Metrics.

Lightweight in-memory registry for ledger operations. No
prometheus_client dependency; ``to_prometheus`` renders the registry in
Prometheus text format for whatever process embeds the ledger.
"""

import logging
import threading
import time
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator

logger = logging.getLogger("urna")


@dataclass
class MetricsRegistry:
    """Simple in-memory metrics registry (no external deps)."""

    _counters: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    _hist_count: dict[str, int] = field(default_factory=lambda: defaultdict(int))
    _hist_sum: dict[str, float] = field(default_factory=lambda: defaultdict(float))
    _gauges: dict[str, float] = field(default_factory=lambda: defaultdict(float))
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    # ─── Core metric operations ───────────────────────────────────

    def inc(self, name: str, labels: dict[str, str] | None = None, value: int = 1) -> None:
        """Increment a counter."""
        key = self._key(name, labels)
        with self._lock:
            self._counters[key] += value

    def observe(self, name: str, value: float, labels: dict[str, str] | None = None) -> None:
        """Record a summary observation (count and sum)."""
        key = self._key(name, labels)
        with self._lock:
            self._hist_count[key] += 1
            self._hist_sum[key] += value

    def set_gauge(self, name: str, value: float, labels: dict[str, str] | None = None) -> None:
        """Set a gauge value."""
        key = self._key(name, labels)
        with self._lock:
            self._gauges[key] = value

    def counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        return self._counters.get(self._key(name, labels), 0)

    @contextmanager
    def track(self, operation: str) -> Iterator[None]:
        """Count one ledger operation, its failures and its latency."""
        labels = {"operation": operation}
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            self.inc(
                "urna_operation_errors_total",
                {"operation": operation, "error": type(e).__name__},
            )
            raise
        finally:
            self.inc("urna_operations_total", labels)
            self.observe("urna_operation_duration_seconds", time.perf_counter() - start, labels)

    def _key(self, name: str, labels: dict[str, str] | None = None) -> str:
        if not labels:
            return name
        label_str = ",".join(f'{k}="{v}"' for k, v in sorted(labels.items()))
        return f"{name}{{{label_str}}}"

    # ─── Prometheus rendering ─────────────────────────────────────

    def to_prometheus(self) -> str:
        """Render all metrics in Prometheus text exposition format."""
        lines: list[str] = []

        # Counters
        seen_counter_names: set[str] = set()
        for key, value in sorted(self._counters.items()):
            base_name = key.split("{")[0]
            if base_name not in seen_counter_names:
                lines.append(f"# TYPE {base_name} counter")
                seen_counter_names.add(base_name)
            lines.append(f"{key} {value}")

        # Gauges
        seen_gauge_names: set[str] = set()
        for key, value in sorted(self._gauges.items()):
            base_name = key.split("{")[0]
            if base_name not in seen_gauge_names:
                lines.append(f"# TYPE {base_name} gauge")
                seen_gauge_names.add(base_name)
            lines.append(f"{key} {value:.2f}")

        # Summaries (count + sum)
        seen_hist_names: set[str] = set()
        for key in sorted(self._hist_count):
            base_name = key.split("{")[0]
            if base_name not in seen_hist_names:
                lines.append(f"# TYPE {base_name} summary")
                seen_hist_names.add(base_name)
            count = self._hist_count.get(key, 0)
            total = self._hist_sum.get(key, 0.0)
            if count > 0:
                lines.append(f"{key}_count {count}")
                lines.append(f"{key}_sum {total:.4f}")

        return "\n".join(lines) + "\n"

    def reset(self) -> None:
        """Reset all metrics."""
        with self._lock:
            self._counters.clear()
            self._hist_count.clear()
            self._hist_sum.clear()
            self._gauges.clear()


# Global singleton
metrics = MetricsRegistry()
