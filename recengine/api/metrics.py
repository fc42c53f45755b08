"""Metrics service for tracking recommendation traffic.

Singleton service counting recommendation requests per mode, how many of
them degraded to the popularity fallback, and request latency.
"""

import threading
from collections import Counter
from typing import Dict


class MetricsService:
    """Singleton, thread-safe recommendation metrics."""

    _instance = None
    _lock = threading.Lock()

    def __new__(cls):
        """Create singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = super(MetricsService, cls).__new__(cls)
                    cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        if self._initialized:
            return

        self._lock = threading.Lock()
        self._reset_counters()
        self._initialized = True

    def _reset_counters(self) -> None:
        self._requests_by_mode: Counter = Counter()
        self._fallbacks_by_mode: Counter = Counter()
        self._interaction_count = 0
        self._request_count = 0
        self._total_latency_ms = 0.0
        self._max_latency_ms = 0.0

    def record_recommendation(self, mode: str, latency_ms: float, fell_back: bool) -> None:
        """Record one served recommendation request.

        Args:
            mode: Requested mode (content, collaborative, hybrid, similar, trending)
            latency_ms: Time spent in the engine, in milliseconds
            fell_back: Whether the engine served the popularity fallback
        """
        with self._lock:
            self._request_count += 1
            self._requests_by_mode[mode] += 1
            if fell_back:
                self._fallbacks_by_mode[mode] += 1
            self._total_latency_ms += latency_ms
            self._max_latency_ms = max(self._max_latency_ms, latency_ms)

    def record_interaction(self) -> None:
        with self._lock:
            self._interaction_count += 1

    def get_metrics(self) -> Dict:
        """Snapshot of current metrics."""
        with self._lock:
            avg_latency = (
                self._total_latency_ms / self._request_count
                if self._request_count > 0
                else 0.0
            )
            return {
                "recommendation_count": self._request_count,
                "requests_by_mode": dict(self._requests_by_mode),
                "fallbacks_by_mode": dict(self._fallbacks_by_mode),
                "interaction_count": self._interaction_count,
                "average_latency_ms": round(avg_latency, 2),
                "max_latency_ms": round(self._max_latency_ms, 2),
            }

    def reset(self) -> None:
        """Reset all metrics (useful for testing)."""
        with self._lock:
            self._reset_counters()


# Global singleton instance
metrics_service = MetricsService()
