"""Progress events and their fire-and-forget delivery.

The pipeline reports ``(stage, progress, detail)`` checkpoints through a
plain callback.  :class:`ProgressReporter` keeps the values monotonic and
shields the run from a failing sink; :class:`ProgressChannel` buffers events
for an async consumer (the SSE endpoint) without ever blocking the producer.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, str], None]

TERMINAL_EVENTS = frozenset({"complete", "error"})


@dataclass
class ProgressEvent:
    """One frame of the progress stream."""

    event: str
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def terminal(self) -> bool:
        return self.event in TERMINAL_EVENTS

    @classmethod
    def progress(cls, stage: str, value: int, detail: str) -> ProgressEvent:
        return cls("progress", {"stage": stage, "progress": value, "detail": detail})

    def to_sse(self) -> str:
        """Format as a single SSE frame (``event:`` + ``data:`` lines)."""
        return f"event: {self.event}\ndata: {json.dumps(self.data)}\n\n"


class ProgressReporter:
    """Wrap a sink so values never decrease and sink errors never propagate."""

    def __init__(self, sink: Optional[ProgressCallback]) -> None:
        self._sink = sink
        self.last = 0

    def __call__(self, stage: str, value: int, detail: str = "") -> None:
        value = max(self.last, min(100, int(value)))
        self.last = value
        if self._sink is None:
            return
        try:
            self._sink(stage, value, detail)
        except Exception:  # noqa: BLE001
            logger.warning("Progress sink raised; event %s/%d dropped", stage, value, exc_info=True)


class ProgressChannel:
    """Bounded buffer between the pipeline task and a streaming consumer.

    ``publish`` never waits.  When the buffer is full, intermediate
    ``progress`` events are dropped; terminal events evict the oldest
    buffered frame so the stream always ends with exactly one of them.
    """

    def __init__(self, maxsize: int = 64) -> None:
        self._queue: asyncio.Queue[ProgressEvent] = asyncio.Queue(maxsize=max(1, maxsize))
        self.dropped = 0

    def publish(self, event: ProgressEvent) -> None:
        try:
            self._queue.put_nowait(event)
            return
        except asyncio.QueueFull:
            if not event.terminal:
                self.dropped += 1
                return
        self._queue.get_nowait()
        self.dropped += 1
        self._queue.put_nowait(event)

    def callback(self) -> ProgressCallback:
        """Return a ``(stage, progress, detail)`` callback feeding this channel."""
        def _on_progress(stage: str, value: int, detail: str) -> None:
            self.publish(ProgressEvent.progress(stage, value, detail))
        return _on_progress

    async def get(self) -> ProgressEvent:
        return await self._queue.get()
