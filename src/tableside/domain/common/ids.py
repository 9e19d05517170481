from __future__ import annotations

from typing import NewType
from uuid import uuid4

RestaurantId = NewType("RestaurantId", int)
TableId = NewType("TableId", int)
OrderId = NewType("OrderId", int)
DishId = NewType("DishId", int)
CategoryId = NewType("CategoryId", int)
OrderItemId = NewType("OrderItemId", str)
NotificationId = NewType("NotificationId", str)


def new_order_item_id() -> OrderItemId:
    return OrderItemId(uuid4().hex)


def new_notification_id() -> NotificationId:
    return NotificationId(uuid4().hex)
