"""
profiler - Instrumentation for comparator usage

This module measures how often comparators run, how long they take and
how their outcomes are distributed, including which diagnostic reasons
INVALID results carry. Profiling is opt-in: nothing is recorded unless a
profiler is installed with ``set_active_profiler`` or used directly.
"""

import json
import logging
import time
import threading
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union
from pathlib import Path

from deepcmp._result import Comparison, Ordering


_INVALID = Ordering.INVALID.name


@dataclass
class ComparisonTrace:
    """A sampled comparison, kept for debugging."""
    comparator_name: Optional[str]
    a_repr: str
    b_repr: str
    ordering: Optional[str]
    reason: Optional[str]
    duration_ns: int


@dataclass
class ComparatorStats:
    """Counts and time for one named comparator."""
    name: str
    comparison_count: int = 0
    invalid_count: int = 0
    time_sec: float = 0.0

    @property
    def avg_comparison_ns(self) -> float:
        if not self.comparison_count:
            return 0.0
        return self.time_sec * 1e9 / self.comparison_count


@dataclass
class ProfilerReport:
    """Snapshot of what a ComparisonProfiler has seen."""
    wall_time_sec: float = 0.0
    comparator_time_sec: float = 0.0
    comparison_count: int = 0

    # Keyed by Ordering / Reason name
    outcomes: Dict[str, int] = field(default_factory=dict)
    reasons: Dict[str, int] = field(default_factory=dict)

    # Nearest-rank latencies, nanoseconds
    p50_comparison_ns: float = 0.0
    p95_comparison_ns: float = 0.0
    p99_comparison_ns: float = 0.0
    max_comparison_ns: float = 0.0

    comparators: Dict[str, ComparatorStats] = field(default_factory=dict)
    traces: List[ComparisonTrace] = field(default_factory=list)

    @property
    def comparator_time_pct(self) -> float:
        if self.wall_time_sec <= 0:
            return 0.0
        return self.comparator_time_sec / self.wall_time_sec * 100

    @property
    def avg_comparison_ns(self) -> float:
        if not self.comparison_count:
            return 0.0
        return self.comparator_time_sec * 1e9 / self.comparison_count

    @property
    def invalid_count(self) -> int:
        return self.outcomes.get(_INVALID, 0)

    @property
    def invalid_pct(self) -> float:
        """Share of comparisons that could not be ordered."""
        if not self.comparison_count:
            return 0.0
        return self.invalid_count / self.comparison_count * 100

    def __str__(self) -> str:
        def row(label: str, value: str) -> str:
            return f"  {label + ':':<22}{value}"

        lines = [
            "ComparisonProfiler Report",
            f"{self.comparison_count:,} comparisons in {self.wall_time_sec:.3f} sec "
            f"({self.comparator_time_pct:.1f}% inside comparators)",
            row("Avg per comparison", f"{self.avg_comparison_ns:.0f} ns"),
            row("Invalid", f"{self.invalid_count:,} ({self.invalid_pct:.1f}%)"),
        ]
        for title, counts in (("Outcomes", self.outcomes), ("Reasons", self.reasons)):
            if counts:
                lines.append(f"{title}:")
                lines.extend(row(k, f"{v:,}") for k, v in sorted(counts.items()))
        if self.max_comparison_ns:
            lines.append("Latency:")
            for label in ("p50", "p95", "p99", "max"):
                value = getattr(self, f"{label}_comparison_ns")
                lines.append(row(label.upper(), f"{value:,.0f} ns"))
        for stats in sorted(self.comparators.values(), key=lambda s: -s.comparison_count):
            lines.append(row(
                f"[{stats.name}]",
                f"{stats.comparison_count:,} calls, {stats.invalid_count:,} invalid",
            ))
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, Any]:
        """Machine-readable format."""
        return {
            'wall_time_sec': self.wall_time_sec,
            'comparator_time_sec': self.comparator_time_sec,
            'comparison_count': self.comparison_count,
            'invalid_pct': self.invalid_pct,
            'outcomes': dict(self.outcomes),
            'reasons': dict(self.reasons),
            'latency_ns': {
                'p50': self.p50_comparison_ns,
                'p95': self.p95_comparison_ns,
                'p99': self.p99_comparison_ns,
                'max': self.max_comparison_ns,
            },
            'comparators': {
                name: {'count': s.comparison_count, 'invalid': s.invalid_count}
                for name, s in self.comparators.items()
            },
        }

    def to_json(self, path: Optional[Union[str, Path]] = None) -> str:
        """Export as JSON, optionally writing it to ``path``."""
        text = json.dumps(self.to_dict(), indent=2)
        if path:
            Path(path).write_text(text)
        return text


def _nearest_rank(ordered: Sequence[int], fraction: float) -> float:
    return ordered[min(len(ordered) - 1, int(len(ordered) * fraction))]


class ComparisonProfiler:
    """Measure comparator usage between two points in a program.

    Usage:
        with ComparisonProfiler() as profiler:
            records.sort(key=comparator.sort_key())
        print(profiler.report)

    The context manager installs the profiler as the active one, so every
    ``Comparator`` call inside the block is recorded, and restores the
    previous profiler on exit. ``start``/``stop`` measure without
    installing anything; feed those with ``record_comparison``.
    """

    def __init__(
        self,
        *,
        trace_samples: int = 0,
        track_percentiles: bool = True,
        logger: Optional[logging.Logger] = None,
        log_interval: Optional[float] = None,
        invalid_threshold_pct: Optional[float] = None,
        on_threshold: Optional[Callable[[ProfilerReport], None]] = None,
    ):
        """Initialize profiler.

        Args:
            trace_samples: Number of comparisons to keep as traces
            track_percentiles: Whether to keep latencies for percentiles
            logger: Logger for progress and threshold messages
            log_interval: Seconds between progress messages (requires logger)
            invalid_threshold_pct: Alert once the INVALID share exceeds this
            on_threshold: Called with a report when the alert fires
        """
        self._trace_samples = trace_samples
        self._track_percentiles = track_percentiles
        self._logger = logger
        self._log_interval = log_interval
        self._invalid_threshold_pct = invalid_threshold_pct
        self._on_threshold = on_threshold

        self._lock = threading.Lock()
        self._previous: Optional[ComparisonProfiler] = None
        self._started: Optional[float] = None
        self._stopped: Optional[float] = None
        self._clear()

    def _clear(self) -> None:
        self._count = 0
        self._time_ns = 0
        self._latencies: List[int] = []
        self._outcomes: Counter = Counter()
        self._reasons: Counter = Counter()
        self._per_comparator: Dict[str, ComparatorStats] = {}
        self._traces: List[ComparisonTrace] = []
        self._last_log = time.perf_counter()
        self._alerted = False

    def start(self) -> None:
        """Begin profiling, discarding anything recorded before."""
        with self._lock:
            self._started = time.perf_counter()
            self._stopped = None
            self._clear()

    def stop(self) -> ProfilerReport:
        """End profiling and return the final report."""
        with self._lock:
            self._stopped = time.perf_counter()
            return self._snapshot()

    def reset(self) -> None:
        """Discard recorded comparisons without stopping."""
        with self._lock:
            self._clear()

    @property
    def report(self) -> ProfilerReport:
        """Report as of now, or as of ``stop`` once stopped."""
        with self._lock:
            return self._snapshot()

    def record_comparison(
        self,
        duration_ns: int,
        comparator_name: Optional[str] = None,
        a: Any = None,
        b: Any = None,
        result: Optional[Comparison] = None,
    ) -> None:
        """Record one comparison; instrumented comparators call this."""
        invalid = result is not None and not result.is_valid
        alert = None
        with self._lock:
            self._count += 1
            self._time_ns += duration_ns
            if self._track_percentiles:
                self._latencies.append(duration_ns)
            if result is not None:
                self._outcomes[result.ordering.name] += 1
                if result.reason is not None:
                    self._reasons[result.reason.name] += 1

            if comparator_name:
                stats = self._per_comparator.setdefault(
                    comparator_name, ComparatorStats(comparator_name))
                stats.comparison_count += 1
                stats.time_sec += duration_ns / 1e9
                stats.invalid_count += invalid

            if len(self._traces) < self._trace_samples:
                self._traces.append(ComparisonTrace(
                    comparator_name=comparator_name,
                    a_repr=repr(a)[:100],
                    b_repr=repr(b)[:100],
                    ordering=result.ordering.name if result is not None else None,
                    reason=result.reason.name if result is not None and result.reason else None,
                    duration_ns=duration_ns,
                ))

            self._log_progress()
            if invalid and self._threshold_crossed():
                self._alerted = True
                alert = self._snapshot()

        # Outside the lock so the callback may read the profiler
        if alert is not None:
            if self._logger is not None:
                self._logger.warning(
                    "INVALID comparisons at %.1f%% (threshold %.1f%%)",
                    alert.invalid_pct, self._invalid_threshold_pct,
                )
            if self._on_threshold is not None:
                self._on_threshold(alert)

    def _threshold_crossed(self) -> bool:
        if self._invalid_threshold_pct is None or self._alerted:
            return False
        return self._outcomes[_INVALID] / self._count * 100 > self._invalid_threshold_pct

    def _log_progress(self) -> None:
        if self._logger is None or self._log_interval is None:
            return
        now = time.perf_counter()
        if now - self._last_log < self._log_interval:
            return
        self._last_log = now
        self._logger.info(
            "%d comparisons, %.3f sec in comparators, %d invalid",
            self._count, self._time_ns / 1e9, self._outcomes[_INVALID],
        )

    def _snapshot(self) -> ProfilerReport:
        end = self._stopped if self._stopped is not None else time.perf_counter()
        begin = self._started if self._started is not None else end
        report = ProfilerReport(
            wall_time_sec=end - begin,
            comparator_time_sec=self._time_ns / 1e9,
            comparison_count=self._count,
            outcomes=dict(self._outcomes),
            reasons=dict(self._reasons),
            comparators={
                name: ComparatorStats(s.name, s.comparison_count, s.invalid_count, s.time_sec)
                for name, s in self._per_comparator.items()
            },
            traces=list(self._traces),
        )
        if self._latencies:
            ordered = sorted(self._latencies)
            report.p50_comparison_ns = _nearest_rank(ordered, 0.50)
            report.p95_comparison_ns = _nearest_rank(ordered, 0.95)
            report.p99_comparison_ns = _nearest_rank(ordered, 0.99)
            report.max_comparison_ns = ordered[-1]
        return report

    def __enter__(self) -> 'ComparisonProfiler':
        self._previous = get_active_profiler()
        set_active_profiler(self)
        self.start()
        return self

    def __exit__(self, *args) -> None:
        self.stop()
        set_active_profiler(self._previous)
        self._previous = None


# Process-wide profiler read by Comparator.compare
_active_profiler: Optional[ComparisonProfiler] = None
_profiler_lock = threading.Lock()


def get_active_profiler() -> Optional[ComparisonProfiler]:
    """Get the currently active profiler, if any."""
    with _profiler_lock:
        return _active_profiler


def set_active_profiler(profiler: Optional[ComparisonProfiler]) -> None:
    """Set the active profiler for automatic instrumentation."""
    global _active_profiler
    with _profiler_lock:
        _active_profiler = profiler
