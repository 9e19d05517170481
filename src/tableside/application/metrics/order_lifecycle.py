from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import Counter, Histogram

from tableside.application.aggregator import Aggregator
from tableside.application.events.channel import Subscription
from tableside.domain.events import (
    FinishedOrCancelledOrder,
    NewNotification,
    NewOrder,
    OrderItemStatusUpdated,
    OrderStatusUpdated,
    RestaurantEvent,
)
from tableside.domain.order.entities import Order

ORDERS_CREATED_TOTAL = Counter(
    "tableside_orders_created_total",
    "Total number of orders accepted.",
    ["restaurant_id"],
)

ORDER_TRANSITION_TOTAL = Counter(
    "tableside_order_transition_total",
    "Total number of order status transitions.",
    ["from", "to"],
)

ORDER_ITEM_TRANSITION_TOTAL = Counter(
    "tableside_order_item_transition_total",
    "Total number of order item status transitions.",
    ["from", "to"],
)

NOTIFICATIONS_CREATED_TOTAL = Counter(
    "tableside_notifications_created_total",
    "Total number of notifications created by type.",
    ["restaurant_id", "type"],
)

ORDERS_CLOSED_TOTAL = Counter(
    "tableside_orders_closed_total",
    "Total number of orders finished or cancelled.",
    ["restaurant_id", "status"],
)

ORDER_TIME_TO_CLOSE_SECONDS = Histogram(
    "tableside_order_time_to_close_seconds",
    "Time between order creation and its finish or cancellation.",
)


def record_order_created(restaurant_id: int) -> None:
    ORDERS_CREATED_TOTAL.labels(restaurant_id=str(restaurant_id)).inc()


def record_transition(from_status: str, to_status: str) -> None:
    ORDER_TRANSITION_TOTAL.labels(**{"from": from_status, "to": to_status}).inc()


def record_item_transition(from_status: str, to_status: str) -> None:
    ORDER_ITEM_TRANSITION_TOTAL.labels(**{"from": from_status, "to": to_status}).inc()


def record_notification_created(restaurant_id: int, notification_type: str) -> None:
    NOTIFICATIONS_CREATED_TOTAL.labels(
        restaurant_id=str(restaurant_id),
        type=notification_type,
    ).inc()


def record_order_closed(restaurant_id: int, order: Order, now: datetime | None = None) -> None:
    current = now or datetime.now(timezone.utc)
    ORDERS_CLOSED_TOTAL.labels(
        restaurant_id=str(restaurant_id),
        status=order.status.value,
    ).inc()
    ORDER_TIME_TO_CLOSE_SECONDS.observe(max((current - order.created_at).total_seconds(), 0.0))


def _on_new_order(tagged: RestaurantEvent) -> None:
    record_order_created(tagged.restaurant_id)


def _on_order_status_updated(tagged: RestaurantEvent) -> None:
    event = tagged.event
    record_transition(event.prev_status.value, event.new_status.value)


def _on_order_item_status_updated(tagged: RestaurantEvent) -> None:
    event = tagged.event
    record_item_transition(event.prev_status.value, event.new_status.value)


def _on_new_notification(tagged: RestaurantEvent) -> None:
    record_notification_created(tagged.restaurant_id, tagged.event.notification.type.value)


def _on_finished_or_cancelled(tagged: RestaurantEvent) -> None:
    record_order_closed(tagged.restaurant_id, tagged.event.order)


def attach_lifecycle_metrics(aggregator: Aggregator) -> list[Subscription]:
    return [
        aggregator.subscribe(NewOrder, _on_new_order),
        aggregator.subscribe(OrderStatusUpdated, _on_order_status_updated),
        aggregator.subscribe(OrderItemStatusUpdated, _on_order_item_status_updated),
        aggregator.subscribe(NewNotification, _on_new_notification),
        aggregator.subscribe(FinishedOrCancelledOrder, _on_finished_or_cancelled),
    ]
