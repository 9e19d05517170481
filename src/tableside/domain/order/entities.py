from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from tableside.domain.common.ids import DishId, OrderId, OrderItemId, TableId
from tableside.domain.common.money import PriceBreakdown
from tableside.domain.menu.entities import DishOption, Ingredient

NOTE_MAX_LENGTH = 150
MIN_ITEM_AMOUNT = 1
MAX_ITEM_AMOUNT = 10


class OrderStatus(str, Enum):
    INIT = "INIT"
    ORDER_RECEIVED = "ORDER_RECEIVED"
    IN_PROGRESS = "IN_PROGRESS"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    FINISHED = "FINISHED"

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.CANCELLED, OrderStatus.FINISHED)


class OrderItemStatus(str, Enum):
    INIT = "INIT"
    IN_PROGRESS = "IN_PROGRESS"
    PREPARED = "PREPARED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"


def parse_order_status(value: str) -> OrderStatus | None:
    try:
        return OrderStatus(value)
    except ValueError:
        return None


def parse_order_item_status(value: str) -> OrderItemStatus | None:
    try:
        return OrderItemStatus(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class CustomizedDish:
    dish_id: DishId
    removed_ingredients: tuple[Ingredient, ...] = ()
    added_options: tuple[DishOption, ...] = ()


@dataclass
class OrderItem:
    item_id: OrderItemId
    dish: CustomizedDish
    amount: int
    status: OrderItemStatus = OrderItemStatus.INIT
    price: PriceBreakdown | None = None


@dataclass
class Order:
    order_id: OrderId
    created_at: datetime
    origin: TableId
    status: OrderStatus
    items: list[OrderItem]
    note: str = ""
    price: PriceBreakdown | None = None

    def find_item(self, item_id: OrderItemId) -> OrderItem | None:
        for item in self.items:
            if item.item_id == item_id:
                return item
        return None


@dataclass
class DraftOrderItem:
    dish: CustomizedDish
    amount: int
    status: str = OrderItemStatus.INIT.value
    item_id: str | None = None


@dataclass
class DraftOrder:
    """Order as submitted by a table, before id, time and status are assigned.

    Statuses are kept as raw strings so validation can reject values outside
    the enums instead of failing at construction.
    """

    origin: TableId
    items: list[DraftOrderItem] = field(default_factory=list)
    note: str = ""
    status: str = OrderStatus.ORDER_RECEIVED.value
