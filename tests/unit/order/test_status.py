from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from tableside.domain.common.ids import DishId, OrderId, OrderItemId, TableId
from tableside.domain.order.entities import (
    CustomizedDish,
    Order,
    OrderItem,
    OrderItemStatus,
    OrderStatus,
)
from tableside.domain.order.status import derive_order_status

I = OrderItemStatus


def _order(status: OrderStatus, *item_statuses: OrderItemStatus) -> Order:
    return Order(
        order_id=OrderId(0),
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
        origin=TableId(0),
        status=status,
        items=[
            OrderItem(
                item_id=OrderItemId(str(index)),
                dish=CustomizedDish(dish_id=DishId(0)),
                amount=1,
                status=item_status,
            )
            for index, item_status in enumerate(item_statuses)
        ],
    )


@pytest.mark.parametrize(
    ("items", "expected"),
    [
        ((I.CANCELLED, I.CANCELLED), OrderStatus.CANCELLED),
        ((I.IN_PROGRESS, I.DELIVERED), OrderStatus.IN_PROGRESS),
        ((I.DELIVERED, I.DELIVERED), OrderStatus.DELIVERED),
        ((I.DELIVERED, I.CANCELLED), OrderStatus.DELIVERED),
        ((I.DELIVERED, I.INIT), OrderStatus.ORDER_RECEIVED),
        ((I.INIT, I.PREPARED), OrderStatus.ORDER_RECEIVED),
    ],
)
def test_order_status_follows_items(
    items: tuple[OrderItemStatus, ...], expected: OrderStatus
) -> None:
    assert derive_order_status(_order(OrderStatus.ORDER_RECEIVED, *items)) == expected


@pytest.mark.parametrize("terminal", [OrderStatus.FINISHED, OrderStatus.CANCELLED])
def test_terminal_order_status_is_never_overwritten(terminal: OrderStatus) -> None:
    assert derive_order_status(_order(terminal, I.IN_PROGRESS, I.DELIVERED)) == terminal
