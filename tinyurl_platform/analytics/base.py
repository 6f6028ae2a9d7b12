"""
Abstract Base Class for redirect metrics backends.

Responsibilities:
    - Define the single hook the shortening engine calls after each resolution
    - Support easy substitution (in-memory, Prometheus, StatsD, event stream)

The engine treats `observe` as fire-and-forget: it never reads a return value,
and an exception raised here is logged and discarded by the caller.
"""

from abc import ABC, abstractmethod

__all__ = ["BaseMetrics", "REDIRECT_EVENTS"]

REDIRECT_EVENTS = ("success", "not_found", "expired")


class BaseMetrics(ABC):
    """Abstract base for pluggable metrics backends."""

    @abstractmethod
    def observe(self, event: str) -> None:  # pragma: no cover
        """
        Record the outcome of one resolution.

        Args:
            event (str): One of "success", "not_found", "expired".
        """
        raise NotImplementedError
