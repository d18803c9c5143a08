"""Performance monitoring utilities for the compliance evaluation path."""
import time
import logging
import threading
import functools
from typing import Any, Callable, Dict

logger = logging.getLogger("people-compliance.perf")


def timed(func: Callable) -> Callable:
    """
    Decorator that measures and logs execution time for synchronous functions.

    Usage::

        @timed
        def build_something():
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            logger.debug(
                "function timed",
                extra={
                    "function": func.__qualname__,
                    "duration_ms": duration_ms,
                },
            )
    return wrapper


class PerformanceTracker:
    """
    Thread-safe in-memory counters for compliance evaluations.

    Tracks:
    - Evaluations served and employees evaluated
    - Cumulative, average and slowest evaluation duration
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._evaluations: int = 0
        self._employees_evaluated: int = 0
        self._total_duration_ms: float = 0.0
        self._slowest_ms: float = 0.0

    def record_evaluation(self, duration_ms: float, employee_count: int) -> None:
        """Call once per completed build → filter → summary run."""
        with self._lock:
            self._evaluations += 1
            self._employees_evaluated += employee_count
            self._total_duration_ms += duration_ms
            if duration_ms > self._slowest_ms:
                self._slowest_ms = duration_ms

    def get_metrics(self) -> Dict[str, Any]:
        with self._lock:
            avg = (
                round(self._total_duration_ms / self._evaluations, 2)
                if self._evaluations > 0
                else 0.0
            )
            return {
                "evaluations_processed": self._evaluations,
                "employees_evaluated": self._employees_evaluated,
                "avg_evaluation_duration_ms": avg,
                "slowest_evaluation_ms": round(self._slowest_ms, 2),
            }

    def reset(self) -> None:
        """Reset all counters (useful in tests)."""
        with self._lock:
            self._evaluations = 0
            self._employees_evaluated = 0
            self._total_duration_ms = 0.0
            self._slowest_ms = 0.0


# Module-level singleton — import this instance everywhere else.
tracker = PerformanceTracker()
