from __future__ import annotations

import queue

from tableside.application.ports.publisher import EventPublisher


class LocalEventPublisher(EventPublisher):
    """In-process publisher; messages wait in a thread-safe queue until drained.

    ``publish`` is called from request worker threads while the store lock is
    held, so it never blocks on socket I/O.
    """

    def __init__(self) -> None:
        self._queue: queue.SimpleQueue[tuple[str, str]] = queue.SimpleQueue()

    def publish(self, channel: str, message: str) -> None:
        self._queue.put((channel, message))

    def get_message(self) -> tuple[str, str] | None:
        try:
            return self._queue.get_nowait()
        except queue.Empty:
            return None
