"""
Incremental pipeline support.

Stage caches keyed by structural equality of their input, step tracking
for observability, and a cooperative cancellation token.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable
from enum import Enum
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")

_MISSING = object()


class StepRunReason(str, Enum):
    """Why a stage produced its output for an input during a pass."""

    NEW = "new"  # Computed during this pass
    CACHED = "cached"  # Reused from the previous pass or earlier in this pass


class CancellationToken:
    """Cooperative cancellation flag shared between a caller and a pass."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled


class StageCache(Generic[K, V]):
    """Cache for one pipeline stage.

    Entries computed or reused during a pass are carried into the next pass;
    entries not touched by a completed pass are dropped.
    """

    def __init__(self, name: str):
        self.name = name
        self._previous: dict[K, V] = {}
        self._current: dict[K, V] = {}
        self.steps: list[tuple[K, StepRunReason]] = []

    def begin_pass(self) -> None:
        self._previous = self._current
        self._current = {}
        self.steps = []

    def end_pass(self, cancelled: bool = False) -> None:
        if cancelled:
            # Entries the cancelled pass never reached stay available
            self._current = {**self._previous, **self._current}

    def get_or_compute(self, key: K, compute: Callable[[], V]) -> V:
        value = self._current.get(key, _MISSING)
        if value is _MISSING:
            value = self._previous.get(key, _MISSING)
        if value is not _MISSING:
            self._current[key] = value
            self.steps.append((key, StepRunReason.CACHED))
            logger.debug("%s: reusing cached result", self.name)
            return value

        value = compute()
        self._current[key] = value
        self.steps.append((key, StepRunReason.NEW))
        return value

    def record(self, key: K, value: V) -> V:
        """Track an output recomputed every pass; one equal to the previous pass output counts as reused."""
        previous = self._previous.get(key, _MISSING)
        if previous is not _MISSING and previous == value:
            value = previous
            self.steps.append((key, StepRunReason.CACHED))
        else:
            self.steps.append((key, StepRunReason.NEW))
        self._current[key] = value
        return value

    def discard(self, key: K) -> None:
        """Forget a result computed during this pass (e.g. one cut short by cancellation)."""
        self._current.pop(key, None)
        self.steps = [(k, reason) for k, reason in self.steps if k != key]

    def __len__(self) -> int:
        return len(self._current)
