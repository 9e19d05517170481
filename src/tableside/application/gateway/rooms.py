from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from tableside.application.mappers.notification_mapper import to_notification_response
from tableside.application.mappers.order_mapper import to_order_response
from tableside.domain.common.ids import TableId
from tableside.domain.events import (
    DomainEvent,
    FinishedOrCancelledOrder,
    NewNotification,
    NewOrder,
    NotificationStatusUpdated,
    OrderItemStatusUpdated,
    OrderStatusUpdated,
    RestaurantDataUpdated,
)

USERS = "users"
WAITER = "waiter"
KITCHEN = "kitchen"
ADMIN = "admin"

STAFF_ROOMS: tuple[str, ...] = (USERS, WAITER, KITCHEN, ADMIN)

_TABLE_PREFIX = "table_"


def table_room(table_id: TableId) -> str:
    return f"{_TABLE_PREFIX}{table_id}"


def parse_table_room(room: str) -> TableId | None:
    """Table id of a ``table_<n>`` room, or None for any other room name."""
    if not room.startswith(_TABLE_PREFIX):
        return None
    suffix = room[len(_TABLE_PREFIX):]
    if not suffix.isdigit():
        return None
    return TableId(int(suffix))


def channel_name(restaurant_id: int, room: str) -> str:
    return f"events:{restaurant_id}:{room}"


def parse_channel_name(channel: str) -> tuple[int, str] | None:
    prefix, _, rest = channel.partition(":")
    restaurant_id, _, room = rest.partition(":")
    if prefix != "events" or not restaurant_id.isdigit() or not room:
        return None
    return int(restaurant_id), room


@dataclass(frozen=True)
class Delivery:
    room: str
    event_type: str
    payload: dict[str, Any]


RestaurantDataProvider = Callable[[], dict[str, Any]]


def _order_rooms(origin: TableId) -> tuple[str, ...]:
    return (WAITER, KITCHEN, table_room(origin), ADMIN)


def route_event(
    event: DomainEvent,
    restaurant_data: RestaurantDataProvider,
) -> list[Delivery]:
    """Rooms and client event names an aggregated event is delivered to.

    ``restaurant_data`` is only called for catalog updates, which ship the
    full restaurant document.
    """
    if isinstance(event, NotificationStatusUpdated):
        payload = to_notification_response(event.notification).model_dump(mode="json")
        return [Delivery(WAITER, "notificationStatusUpdate", payload)]

    if isinstance(event, NewNotification):
        payload = to_notification_response(event.notification).model_dump(mode="json")
        return [Delivery(WAITER, "newNotification", payload)]

    if isinstance(event, NewOrder):
        payload = to_order_response(event.order).model_dump(mode="json")
        return [
            Delivery(room, "newOrderCreated", payload) for room in _order_rooms(event.order.origin)
        ]

    if isinstance(event, OrderStatusUpdated):
        payload = to_order_response(event.order).model_dump(mode="json")
        return [Delivery(room, "orderUpdate", payload) for room in _order_rooms(event.order.origin)]

    if isinstance(event, OrderItemStatusUpdated):
        order = event.order
        payload = to_order_response(order).model_dump(mode="json")
        deliveries = [Delivery(room, "orderUpdate", payload) for room in _order_rooms(order.origin)]
        deliveries.append(
            Delivery(
                table_room(order.origin),
                "orderItemStatusUpdate",
                {
                    "orderId": int(order.order_id),
                    "orderItemId": str(event.item.item_id),
                    "dishId": int(event.item.dish.dish_id),
                    "status": event.new_status.value,
                },
            )
        )
        return deliveries

    if isinstance(event, FinishedOrCancelledOrder):
        order = event.order
        payload = {
            "tableId": int(order.origin),
            "orderId": int(order.order_id),
            "status": order.status.value,
        }
        return [
            Delivery(table_room(order.origin), "tableSessionClear", payload),
            Delivery(ADMIN, "tableSessionClear", payload),
        ]

    if isinstance(event, RestaurantDataUpdated):
        payload = restaurant_data()
        return [Delivery(room, "restaurantDataUpdated", payload) for room in STAFF_ROOMS]

    return []
