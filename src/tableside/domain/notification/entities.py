from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Union

from tableside.domain.common.ids import NotificationId, OrderId, OrderItemId, TableId


class NotificationType(str, Enum):
    NEW_ORDER = "NEW_ORDER"
    READY_FOR_DELIVERY = "READY_FOR_DELIVERY"
    ORDER_ITEM_CANCELLED = "ORDER_ITEM_CANCELLED"
    NEED_ASSISTANCE = "NEED_ASSISTANCE"
    CHECK_REQUESTED = "CHECK_REQUESTED"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"


@dataclass(frozen=True)
class NewOrderData:
    order_ids: tuple[OrderId, ...]


@dataclass(frozen=True)
class ReadyForDeliveryData:
    order_ids: tuple[OrderId, ...]
    order_item_id: OrderItemId


@dataclass(frozen=True)
class ItemCancelledData:
    order_ids: tuple[OrderId, ...]
    order_item_id: OrderItemId


@dataclass(frozen=True)
class AssistanceData:
    pass


@dataclass(frozen=True)
class CheckRequestedData:
    order_ids: tuple[OrderId, ...]
    payment_method: PaymentMethod


NotificationData = Union[
    NewOrderData,
    ReadyForDeliveryData,
    ItemCancelledData,
    AssistanceData,
    CheckRequestedData,
]

_DATA_TYPES: dict[NotificationType, type] = {
    NotificationType.NEW_ORDER: NewOrderData,
    NotificationType.READY_FOR_DELIVERY: ReadyForDeliveryData,
    NotificationType.ORDER_ITEM_CANCELLED: ItemCancelledData,
    NotificationType.NEED_ASSISTANCE: AssistanceData,
    NotificationType.CHECK_REQUESTED: CheckRequestedData,
}


@dataclass
class Notification:
    notification_id: NotificationId
    created_at: datetime
    origin: TableId
    type: NotificationType
    data: NotificationData
    active: bool = True

    def __post_init__(self) -> None:
        expected = _DATA_TYPES[self.type]
        if not isinstance(self.data, expected):
            raise ValueError(
                f"{self.type.value} notification requires {expected.__name__} extra data"
            )


def extra_data_fields(data: NotificationData) -> dict[str, Any]:
    """Wire shape of the extra data: only the keys this variant carries."""
    fields: dict[str, Any] = {}
    order_ids = getattr(data, "order_ids", None)
    if order_ids is not None:
        fields["orderID"] = [int(order_id) for order_id in order_ids]
    order_item_id = getattr(data, "order_item_id", None)
    if order_item_id is not None:
        fields["orderItemID"] = str(order_item_id)
    payment_method = getattr(data, "payment_method", None)
    if payment_method is not None:
        fields["paymentBy"] = payment_method.value
    return fields
