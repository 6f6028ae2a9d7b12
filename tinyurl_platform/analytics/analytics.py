"""
Redirect metrics for TinyURL Platform.

Responsibilities:
    - Count resolution outcomes (success, not_found, expired)
    - Keep a timestamped log of events
    - Provide summary statistics for the operator endpoint

Attributes:
    counters (Dict[str, int]): event -> count
    events (List[Dict]): [{"timestamp": float, "event": str}, ...]

LLM Prompt Example:
    "Explain how to extend this metrics module to export the same counters
    to Prometheus while preserving the observe() API."
"""

import threading
import time
from typing import Dict, List

from .base import REDIRECT_EVENTS, BaseMetrics

TOTAL_METRIC = "shortener.redirect.total"


class RedirectMetrics(BaseMetrics):
    def __init__(self):
        """Initialize zeroed counters and an empty event log."""
        self.counters: Dict[str, int] = {event: 0 for event in REDIRECT_EVENTS}
        self.events: List[Dict] = []
        self._lock = threading.Lock()

    def observe(self, event: str) -> None:
        """
        Record one resolution outcome.

        Raises:
            ValueError: If `event` is not a known redirect outcome.
        """
        if event not in self.counters:
            raise ValueError(f"Unknown redirect event: {event!r}")
        with self._lock:
            self.counters[event] += 1
            self.events.append({"timestamp": time.time(), "event": event})

    def count(self, event: str) -> int:
        return self.counters.get(event, 0)

    def summary(self) -> Dict:
        """
        Get a summary of all recorded resolutions.

        Returns:
            Dict: For example
                {
                    "shortener.redirect.total": 5,
                    "by_status": {"success": 3, "not_found": 1, "expired": 1},
                    "last_event": 1755835287.5517154
                }
            `last_event` is None when nothing has been observed yet.
        """
        with self._lock:
            by_status = dict(self.counters)
            last = self.events[-1]["timestamp"] if self.events else None
        return {
            TOTAL_METRIC: sum(by_status.values()),
            "by_status": by_status,
            "last_event": last,
        }
