"""
Dispatch Metrics

This module tracks latency and success counts for D-Bus calls issued by the
dispatcher so slow or failing players show up in the debug log.
"""

import threading
from collections import defaultdict
from typing import Any, Dict, List, Optional, Tuple

from mprisctl.core.log import print_and_log, LOG__DEBUG


class DBusMetricsCollector:
    """
    Collects latency samples and success/failure counts per operation.

    Only the most recent ``window_size`` latency samples are kept for each
    operation; counts are cumulative.
    """

    def __init__(self, window_size: int = 100):
        self._window_size = window_size
        self._samples: Dict[str, List[float]] = defaultdict(list)
        self._counts: Dict[str, Tuple[int, int]] = defaultdict(lambda: (0, 0))
        self._lock = threading.Lock()

    def record_operation(self, operation: str, latency: float, success: bool) -> None:
        """
        Record one completed operation.

        Parameters
        ----------
        operation : str
            Type of operation (e.g., 'send_with_reply:Get')
        latency : float
            Latency in seconds
        success : bool
            Whether the operation succeeded
        """
        with self._lock:
            samples = self._samples[operation]
            samples.append(latency)
            while len(samples) > self._window_size:
                samples.pop(0)

            ok, failed = self._counts[operation]
            if success:
                ok += 1
            else:
                failed += 1
            self._counts[operation] = (ok, failed)

    def _statistics(self, operation: str) -> Dict[str, Any]:
        samples = sorted(self._samples.get(operation, []))
        ok, failed = self._counts.get(operation, (0, 0))
        total = ok + failed
        if not samples:
            return {"min": 0.0, "max": 0.0, "avg": 0.0, "count": 0, "errors": failed, "error_rate": 0.0}
        return {
            "min": samples[0],
            "max": samples[-1],
            "avg": sum(samples) / len(samples),
            "count": total,
            "errors": failed,
            "error_rate": failed / total if total else 0.0,
        }

    def get_metrics(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """
        Get statistics for one operation, or for all of them.

        Returns
        -------
        Dict[str, Any]
            Statistics dictionary with ``min``, ``max``, ``avg``, ``count``,
            ``errors`` and ``error_rate``; keyed by operation when
            *operation* is None
        """
        with self._lock:
            if operation is not None:
                return self._statistics(operation)
            return {name: self._statistics(name) for name in self._counts}

    def reset(self) -> None:
        with self._lock:
            self._samples.clear()
            self._counts.clear()

    def log_metrics_summary(self) -> None:
        """Write a one-line summary per operation to the debug log."""
        for name, stats in sorted(self.get_metrics().items()):
            print_and_log(
                f"[DEBUG] {name}: count={stats['count']} errors={stats['errors']} "
                f"avg={stats['avg'] * 1000:.1f}ms max={stats['max'] * 1000:.1f}ms",
                LOG__DEBUG,
            )


# Singleton instance
_metrics_collector = DBusMetricsCollector()


def get_metrics_collector() -> DBusMetricsCollector:
    """Return the process-wide metrics collector."""
    return _metrics_collector


def log_metrics_summary() -> None:
    _metrics_collector.log_metrics_summary()
