from __future__ import annotations

from typing import Protocol


class EventPublisher(Protocol):
    """Sink for serialized event envelopes.

    ``channel`` is ``events:{restaurant_id}:{room}``. Implementations are
    called with the restaurant lock held and must not block.
    """

    def publish(self, channel: str, message: str) -> None: ...
