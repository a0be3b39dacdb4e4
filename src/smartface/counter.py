"""Capture counting for a single capture session."""

from __future__ import annotations

import logging
from typing import Callable, Union

from smartface.gate import GateDecision

logger = logging.getLogger(__name__)


class CaptureCounter:
    """Counts accepted frames up to a limit.

    Once ``max_captures`` frames have been accepted, ``try_accept`` returns
    False without evaluating the frame at all. Not thread-safe: a session
    and its counter belong to one caller.

    Args:
        max_captures: Capture limit (>= 0).
    """

    def __init__(self, max_captures: int = 5) -> None:
        self.max_captures = max_captures
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    @property
    def remaining(self) -> int:
        return max(0, self.max_captures - self._count)

    @property
    def is_full(self) -> bool:
        return self._count >= self.max_captures

    def increment(self) -> bool:
        """Record one capture. Returns False (and does nothing) once full."""
        if self.is_full:
            return False
        self._count += 1
        if self.is_full:
            logger.info("Capture limit reached (%d/%d)", self._count, self.max_captures)
        return True

    def try_accept(self, evaluate: Callable[[], Union[GateDecision, bool]]) -> bool:
        """Evaluate a frame and count it if accepted.

        Args:
            evaluate: Zero-argument callable returning the gate decision
                (or a bool). Not called when the limit is already reached.

        Returns:
            True if the frame was accepted and counted.
        """
        if self.is_full:
            return False

        decision = evaluate()
        accepted = decision.accepted if isinstance(decision, GateDecision) else bool(decision)
        if not accepted:
            return False
        return self.increment()

    def reset(self) -> None:
        self._count = 0


__all__ = ["CaptureCounter"]
