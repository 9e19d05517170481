from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from typing import Any, Generic, TypeVar

E = TypeVar("E")

Handler = Callable[[Any], None]


class Subscription:
    def __init__(self, channel: EventChannel[Any], key: type, handler: Handler) -> None:
        self._channel = channel
        self._key = key
        self._handler = handler
        self.active = True

    def cancel(self) -> None:
        if self.active:
            self._channel._remove(self._key, self._handler)
            self.active = False


class EventChannel(Generic[E]):
    """Synchronous typed observer registry.

    Handlers run in registration order, in-line with ``emit``. Exceptions
    raised by a handler propagate to the emitter.
    """

    def __init__(self, dispatch_key: Callable[[E], type] = type) -> None:
        self._dispatch_key = dispatch_key
        self._handlers: dict[type, list[Handler]] = defaultdict(list)

    def subscribe(self, event_type: type, handler: Handler) -> Subscription:
        self._handlers[event_type].append(handler)
        return Subscription(self, event_type, handler)

    def emit(self, event: E) -> None:
        for handler in list(self._handlers.get(self._dispatch_key(event), ())):
            handler(event)

    def handler_count(self, event_type: type) -> int:
        return len(self._handlers.get(event_type, ()))

    def _remove(self, event_type: type, handler: Handler) -> None:
        handlers = self._handlers.get(event_type)
        if handlers and handler in handlers:
            handlers.remove(handler)
