from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from tableside.application.aggregator import Aggregator
from tableside.application.events.channel import Subscription
from tableside.application.gateway.context import TraceContext, empty_trace_context
from tableside.application.gateway.rooms import channel_name, route_event
from tableside.application.mappers.event_envelope import serialize_event
from tableside.application.mappers.restaurant_mapper import to_restaurant_data_response
from tableside.application.ports.publisher import EventPublisher
from tableside.domain.common.clock import Clock, utcnow
from tableside.domain.events import (
    FinishedOrCancelledOrder,
    NewNotification,
    NewOrder,
    NotificationStatusUpdated,
    OrderItemStatusUpdated,
    OrderStatusUpdated,
    RestaurantDataUpdated,
    RestaurantEvent,
)

logger = logging.getLogger(__name__)

ROUTED_EVENTS: tuple[type, ...] = (
    NotificationStatusUpdated,
    NewOrder,
    OrderStatusUpdated,
    OrderItemStatusUpdated,
    NewNotification,
    FinishedOrCancelledOrder,
    RestaurantDataUpdated,
)


class TransportGateway:
    """Publishes aggregated restaurant events to per-room channels.

    Publishing is best effort: a failing publisher is logged and the state
    change that produced the event stands.
    """

    def __init__(
        self,
        aggregator: Aggregator,
        publisher: EventPublisher,
        trace_context: Callable[[], TraceContext] = empty_trace_context,
        clock: Clock = utcnow,
    ) -> None:
        self._aggregator = aggregator
        self._publisher = publisher
        self._trace_context = trace_context
        self._clock = clock
        self._subscriptions: list[Subscription] = [
            aggregator.subscribe(event_type, self.handle) for event_type in ROUTED_EVENTS
        ]

    def handle(self, tagged: RestaurantEvent) -> None:
        restaurant_id = tagged.restaurant_id

        def restaurant_data() -> dict[str, Any]:
            restaurant = self._aggregator.get_restaurant(restaurant_id)
            return to_restaurant_data_response(restaurant).model_dump(mode="json")

        deliveries = route_event(tagged.event, restaurant_data)
        if not deliveries:
            return

        trace = self._trace_context()
        occurred_at = self._clock()
        for delivery in deliveries:
            channel = channel_name(restaurant_id, delivery.room)
            message = serialize_event(
                event_type=delivery.event_type,
                occurred_at=occurred_at,
                restaurant_id=int(restaurant_id),
                room=delivery.room,
                payload=delivery.payload,
                trace_id=trace.trace_id,
                request_id=trace.request_id,
            )
            try:
                self._publisher.publish(channel, message)
            except Exception:
                logger.exception(
                    "event_publish_failed",
                    extra={"channel": channel, "event_type": delivery.event_type},
                )

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
