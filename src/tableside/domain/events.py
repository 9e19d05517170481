from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from tableside.domain.common.ids import RestaurantId, TableId
from tableside.domain.notification.entities import Notification, PaymentMethod
from tableside.domain.order.entities import Order, OrderItem, OrderItemStatus, OrderStatus


@dataclass(frozen=True)
class NewOrder:
    order: Order


@dataclass(frozen=True)
class OrderStatusUpdated:
    order: Order
    new_status: OrderStatus
    prev_status: OrderStatus


@dataclass(frozen=True)
class OrderItemStatusUpdated:
    order: Order
    item: OrderItem
    new_status: OrderItemStatus
    prev_status: OrderItemStatus


@dataclass(frozen=True)
class NotificationStatusUpdated:
    notification: Notification


@dataclass(frozen=True)
class NewNotification:
    notification: Notification


@dataclass(frozen=True)
class FinishedOrCancelledOrder:
    order: Order


@dataclass(frozen=True)
class RestaurantDataUpdated:
    pass


@dataclass(frozen=True)
class AssistanceRequested:
    table_id: TableId


@dataclass(frozen=True)
class CheckRequested:
    table_id: TableId
    payment_method: PaymentMethod


DomainEvent = Union[
    NewOrder,
    OrderStatusUpdated,
    OrderItemStatusUpdated,
    NotificationStatusUpdated,
    NewNotification,
    FinishedOrCancelledOrder,
    RestaurantDataUpdated,
    AssistanceRequested,
    CheckRequested,
]


@dataclass(frozen=True)
class RestaurantEvent:
    restaurant_id: RestaurantId
    event: DomainEvent
