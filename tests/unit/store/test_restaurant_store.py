from __future__ import annotations

import sys
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from tableside.application.aggregator import Aggregator
from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.errors import (
    AlreadyInactiveError,
    DuplicateRequestError,
    InvalidStatusError,
    InvalidTableError,
    NotFoundError,
    OrderRejectedError,
    ValidationError,
)
from tableside.domain.common.ids import CategoryId, DishId, OrderId, RestaurantId, TableId
from tableside.domain.events import NewOrder, OrderStatusUpdated
from tableside.domain.menu.entities import Category, Dish, DishOption, DishParams, Ingredient
from tableside.domain.notification.entities import NotificationType
from tableside.domain.order.entities import (
    CustomizedDish,
    DraftOrder,
    DraftOrderItem,
    OrderItemStatus,
    OrderStatus,
)
from tableside.domain.restaurant.entities import RestaurantDetails

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def _restaurant(tables_amount: int = 6) -> RestaurantStore:
    dish = Dish(
        dish_id=DishId(0),
        category_id=CategoryId(0),
        image="pasta.jpg",
        price=Decimal("10.00"),
        discount=Decimal("1.00"),
        params=DishParams(
            title="Pasta",
            description="Fresh pasta",
            quantity="300 g",
            ingredients=(Ingredient(name="cheese", removable=True),),
            options=(DishOption(option="Extra", price=Decimal("2.00"), enabled=True),),
        ),
    )
    return RestaurantStore(
        restaurant_id=RestaurantId(1),
        details=RestaurantDetails(name="Test Kitchen", description="Unit test restaurant"),
        dishes=[dish],
        categories=[Category(category_id=CategoryId(0), title="Mains")],
        tables_amount=tables_amount,
        clock=lambda: NOW,
    )


def _draft(origin: int = 0, amount: int = 2, items: int = 1) -> DraftOrder:
    return DraftOrder(
        origin=TableId(origin),
        items=[
            DraftOrderItem(
                dish=CustomizedDish(
                    dish_id=DishId(0),
                    added_options=(
                        DishOption(option="Extra", price=Decimal("2.00"), enabled=True),
                    ),
                ),
                amount=amount,
                status="DELIVERED",
                item_id="client-chosen",
            )
            for _ in range(items)
        ],
    )


def test_create_order_assigns_increasing_ids_and_unique_item_ids() -> None:
    restaurant = _restaurant()

    orders = [restaurant.create_order(_draft(items=3)) for _ in range(3)]

    assert [order.order_id for order in orders] == [0, 1, 2]
    item_ids = [item.item_id for order in orders for item in order.items]
    assert len(item_ids) == 9
    assert len(set(item_ids)) == 9
    assert "client-chosen" not in item_ids


def test_create_order_prices_items_and_resets_their_status() -> None:
    restaurant = _restaurant()

    order = restaurant.create_order(_draft())

    item = order.items[0]
    assert item.status == OrderItemStatus.INIT
    assert item.price is not None
    assert item.price.price == Decimal("20.00")
    assert item.price.discount == Decimal("2.00")
    assert item.price.extras == Decimal("2.00")
    assert item.price.final_price == Decimal("20.00")
    assert order.price is not None
    assert order.price.final_price == Decimal("20.00")
    assert order.status == OrderStatus.ORDER_RECEIVED
    assert order.created_at == NOW
    assert restaurant.get_tables()[0].active_orders == [order.order_id]


def test_create_order_emits_new_order() -> None:
    restaurant = _restaurant()
    received: list[NewOrder] = []
    restaurant.subscribe(NewOrder, received.append)

    order = restaurant.create_order(_draft())

    assert [event.order for event in received] == [order]


@pytest.mark.parametrize(
    ("draft", "reason"),
    [
        (DraftOrder(origin=TableId(0), items=[]), "EMPTY_ORDER"),
        (_draft(origin=99), "UNKNOWN_TABLE"),
    ],
)
def test_create_order_rejections(draft: DraftOrder, reason: str) -> None:
    restaurant = _restaurant()

    with pytest.raises(OrderRejectedError) as exc_info:
        restaurant.create_order(draft)

    assert exc_info.value.reason == reason


def test_failed_create_order_leaves_state_untouched() -> None:
    restaurant = _restaurant()
    received: list[NewOrder] = []
    restaurant.subscribe(NewOrder, received.append)

    with pytest.raises(ValidationError):
        restaurant.create_order(_draft(amount=11))

    assert restaurant.get_orders() == []
    assert restaurant.get_tables()[0].active_orders == []
    assert received == []


def test_pending_check_request_blocks_new_orders() -> None:
    restaurant = _restaurant()
    Aggregator([restaurant], clock=lambda: NOW)
    restaurant.create_order(_draft(origin=2))

    restaurant.send_check_request(TableId(2), "cash")

    with pytest.raises(OrderRejectedError) as exc_info:
        restaurant.create_order(_draft(origin=2))
    assert exc_info.value.reason == "CHECK_PENDING"
    restaurant.create_order(_draft(origin=3))


def test_update_order_status_errors() -> None:
    restaurant = _restaurant()
    order = restaurant.create_order(_draft())

    with pytest.raises(NotFoundError):
        restaurant.update_order_status(OrderId(42), "FINISHED")
    with pytest.raises(InvalidStatusError):
        restaurant.update_order_status(order.order_id, "PAID")
    assert order.status == OrderStatus.ORDER_RECEIVED


def test_update_order_status_emits_previous_and_new_status() -> None:
    restaurant = _restaurant()
    order = restaurant.create_order(_draft())
    received: list[OrderStatusUpdated] = []
    restaurant.subscribe(OrderStatusUpdated, received.append)

    restaurant.update_order_status(order.order_id, "IN_PROGRESS")

    assert received[0].prev_status == OrderStatus.ORDER_RECEIVED
    assert received[0].new_status == OrderStatus.IN_PROGRESS


def test_update_order_item_status_errors() -> None:
    restaurant = _restaurant()
    order = restaurant.create_order(_draft())

    with pytest.raises(NotFoundError):
        restaurant.update_order_item_status("missing", order, "PREPARED")
    with pytest.raises(InvalidStatusError):
        restaurant.update_order_item_status(order.items[0].item_id, order, "BURNT")
    assert order.items[0].status == OrderItemStatus.INIT


def test_item_transitions_are_permissive() -> None:
    restaurant = _restaurant()
    order = restaurant.create_order(_draft())

    item = restaurant.update_order_item_status(order.items[0].item_id, order, "DELIVERED")

    assert item.status == OrderItemStatus.DELIVERED


def test_finish_order_is_idempotent() -> None:
    restaurant = _restaurant()
    Aggregator([restaurant], clock=lambda: NOW)
    order = restaurant.create_order(_draft())

    restaurant.finish_order(order)
    tables_once = [list(table.active_orders) for table in restaurant.get_tables()]
    active_once = [n.active for n in restaurant.get_notifications()]

    restaurant.finish_order(order)

    assert [list(table.active_orders) for table in restaurant.get_tables()] == tables_once
    assert [n.active for n in restaurant.get_notifications()] == active_once
    assert active_once == [False]


def test_duplicate_assistance_request_guard() -> None:
    restaurant = _restaurant()
    Aggregator([restaurant], clock=lambda: NOW)

    restaurant.send_assistance_request(TableId(5))
    with pytest.raises(DuplicateRequestError):
        restaurant.send_assistance_request(TableId(5))

    [notification] = restaurant.get_notifications()
    assert notification.active
    assert notification.type == NotificationType.NEED_ASSISTANCE

    restaurant.set_notification_inactive(notification.notification_id)
    restaurant.send_assistance_request(TableId(5))

    assert [n.active for n in restaurant.get_notifications()] == [False, True]


def test_requests_for_unknown_tables_fail() -> None:
    restaurant = _restaurant()

    with pytest.raises(InvalidTableError):
        restaurant.send_assistance_request(TableId(42))
    with pytest.raises(InvalidTableError):
        restaurant.send_check_request(TableId(42), "card")
    with pytest.raises(ValidationError):
        restaurant.send_check_request(TableId(1), "bitcoin")


def test_notification_deactivation_errors() -> None:
    restaurant = _restaurant()
    Aggregator([restaurant], clock=lambda: NOW)
    restaurant.send_assistance_request(TableId(1))
    [notification] = restaurant.get_notifications()

    with pytest.raises(NotFoundError):
        restaurant.set_notification_inactive("missing")

    restaurant.set_notification_inactive(notification.notification_id)
    with pytest.raises(AlreadyInactiveError):
        restaurant.set_notification_inactive(notification.notification_id)


def test_table_deletion_guard() -> None:
    restaurant = _restaurant()
    order = restaurant.create_order(_draft(origin=1))

    with pytest.raises(ValidationError):
        restaurant.delete_table(TableId(1))

    restaurant.finish_order(order)
    restaurant.delete_table(TableId(1))

    assert TableId(1) not in [table.table_id for table in restaurant.get_tables()]


def test_get_table_orders() -> None:
    restaurant = _restaurant()
    first = restaurant.create_order(_draft(origin=4))
    restaurant.create_order(_draft(origin=3))

    assert restaurant.get_table_orders(TableId(4)) == [first]
    with pytest.raises(NotFoundError):
        restaurant.get_table_orders(TableId(42))
