"""Per-caller concurrency ceiling for pipeline runs.

One :class:`ConcurrencyLimiter` is built per process (the FastAPI lifespan
or the CLI) and handed to :class:`~repograph.pipeline.orchestrator.GraphPipeline`.
The counter table is guarded by a lock so readers never see a partial
update, whichever thread or event loop touches it.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator

from repograph.errors import ConcurrencyLimitError


class ConcurrencyLimiter:
    def __init__(self, max_per_caller: int) -> None:
        if max_per_caller < 1:
            raise ValueError("max_per_caller must be at least 1")
        self.max_per_caller = max_per_caller
        self._lock = threading.Lock()
        self._active: dict[str, int] = {}

    def try_acquire(self, caller_id: str) -> bool:
        """Take a slot for *caller_id*; ``False`` when already at the ceiling."""
        with self._lock:
            current = self._active.get(caller_id, 0)
            if current >= self.max_per_caller:
                return False
            self._active[caller_id] = current + 1
            return True

    def release(self, caller_id: str) -> None:
        with self._lock:
            remaining = self._active.get(caller_id, 0) - 1
            if remaining <= 0:
                self._active.pop(caller_id, None)
            else:
                self._active[caller_id] = remaining

    def in_flight(self, caller_id: str) -> int:
        with self._lock:
            return self._active.get(caller_id, 0)

    @contextmanager
    def slot(self, caller_id: str) -> Iterator[None]:
        """Hold one slot for the duration of the ``with`` block.

        Raises:
            ConcurrencyLimitError: If *caller_id* has no free slot.
        """
        if not self.try_acquire(caller_id):
            raise ConcurrencyLimitError(
                "Too many concurrent parse requests. "
                "Please wait for existing imports to finish."
            )
        try:
            yield
        finally:
            self.release(caller_id)
