"""Debounced full refresh of the shape model."""

from __future__ import annotations

import time
from typing import Callable, Optional


class RefreshScheduler:
    """Arms a single deadline that each new mutation pushes back.

    The host polls :meth:`due` (or calls :meth:`consume`) from its event loop;
    nothing runs on another thread.
    """

    def __init__(
        self, delay_ms: int, *, clock: Callable[[], float] = time.monotonic
    ) -> None:
        self.delay_ms = delay_ms
        self._clock = clock
        self._deadline: Optional[float] = None

    @property
    def is_pending(self) -> bool:
        return self._deadline is not None

    def arm(self) -> None:
        self._deadline = self._clock() + self.delay_ms / 1000.0

    def cancel(self) -> None:
        self._deadline = None

    def due(self) -> bool:
        return self._deadline is not None and self._deadline <= self._clock()

    def consume(self) -> bool:
        """Clear and report an expired deadline."""

        if not self.due():
            return False
        self._deadline = None
        return True


__all__ = ["RefreshScheduler"]
