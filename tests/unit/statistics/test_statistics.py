from __future__ import annotations

import sys
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[3] / "src"))

from tableside.application.aggregator import Aggregator
from tableside.application.statistics.manager import StatisticsManager
from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.errors import NotFoundError
from tableside.domain.common.ids import CategoryId, DishId, RestaurantId, TableId
from tableside.domain.menu.entities import Dish, DishParams
from tableside.domain.order.entities import CustomizedDish, DraftOrder, DraftOrderItem
from tableside.domain.restaurant.entities import RestaurantDetails

START = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _setup() -> tuple[RestaurantStore, StatisticsManager, FakeClock]:
    clock = FakeClock(START)
    restaurant = RestaurantStore(
        restaurant_id=RestaurantId(3),
        details=RestaurantDetails(name="Stats", description="Statistics tests"),
        dishes=[
            Dish(
                dish_id=DishId(0),
                category_id=CategoryId(0),
                image="",
                price=Decimal("10.00"),
                discount=Decimal("1.00"),
                params=DishParams(title="Pasta", description="", quantity=""),
            ),
            Dish(
                dish_id=DishId(1),
                category_id=CategoryId(0),
                image="",
                price=Decimal("4.00"),
                discount=Decimal("0"),
                params=DishParams(title="Salad", description="", quantity=""),
            ),
        ],
        tables_amount=3,
        clock=clock,
    )
    aggregator = Aggregator([restaurant], clock=clock)
    manager = StatisticsManager(aggregator, clock=clock)
    return restaurant, manager, clock


def _draft(origin: int, dish_id: int, amount: int) -> DraftOrder:
    return DraftOrder(
        origin=TableId(origin),
        items=[DraftOrderItem(dish=CustomizedDish(dish_id=DishId(dish_id)), amount=amount)],
    )


def test_finished_and_cancelled_orders_are_counted() -> None:
    restaurant, manager, _ = _setup()
    finished = restaurant.create_order(_draft(0, 0, 2))
    cancelled = restaurant.create_order(_draft(1, 1, 3))

    restaurant.update_order_status(finished.order_id, "FINISHED")
    restaurant.update_order_status(cancelled.order_id, "CANCELLED")

    for bucket in manager.get_statistics(RestaurantId(3)).snapshot():
        assert bucket.orders.total == 2
        assert bucket.orders.finished == 1
        assert bucket.orders.cancelled == 1
        assert bucket.orders.total_items == 5
        assert bucket.orders.total_turnover == Decimal("18.00")
        assert bucket.dishes == {"Pasta": 2, "Salad": 3}


def test_table_requests_are_counted_by_kind() -> None:
    restaurant, manager, _ = _setup()

    restaurant.send_assistance_request(TableId(0))
    restaurant.send_check_request(TableId(1), "cash")
    restaurant.send_check_request(TableId(2), "card")

    [hourly, daily] = manager.get_statistics(RestaurantId(3)).snapshot()
    for bucket in (hourly, daily):
        assert bucket.notifications.assistance_requests == 1
        assert bucket.notifications.cash_check_requests == 1
        assert bucket.notifications.card_check_requests == 1


def test_buckets_start_with_every_dish_title() -> None:
    _, manager, _ = _setup()

    [hourly, daily] = manager.get_statistics(RestaurantId(3)).snapshot()

    assert hourly.time_frame == "hourly"
    assert daily.time_frame == "daily"
    assert hourly.dishes == {"Pasta": 0, "Salad": 0}
    assert hourly.start_time == START


def test_only_expired_buckets_roll_over() -> None:
    restaurant, manager, clock = _setup()
    restaurant.send_assistance_request(TableId(0))

    clock.now = START + timedelta(hours=1, minutes=1)
    manager.roll_over_expired()

    [hourly, daily] = manager.get_statistics(RestaurantId(3)).snapshot()
    assert hourly.notifications.assistance_requests == 0
    assert hourly.start_time == clock.now
    assert daily.notifications.assistance_requests == 1
    assert daily.start_time == START


def test_unknown_restaurant_statistics() -> None:
    _, manager, _ = _setup()

    with pytest.raises(NotFoundError):
        manager.get_statistics(RestaurantId(99))


def test_closed_manager_stops_counting() -> None:
    restaurant, manager, _ = _setup()

    manager.close()
    restaurant.send_assistance_request(TableId(0))

    [hourly, _] = manager.get_statistics(RestaurantId(3)).snapshot()
    assert hourly.notifications.assistance_requests == 0


def test_snapshot_is_not_changed_by_later_orders() -> None:
    restaurant, manager, _ = _setup()
    statistics = manager.get_statistics(RestaurantId(3))
    before = statistics.snapshot()

    order = restaurant.create_order(_draft(0, 0, 1))
    restaurant.update_order_status(order.order_id, "FINISHED")

    for bucket in before:
        assert bucket.orders.total == 0
        assert bucket.orders.total_turnover == Decimal("0")
        assert bucket.dishes == {"Pasta": 0, "Salad": 0}
    for bucket in statistics.snapshot():
        assert bucket.orders.total == 1
        assert bucket.dishes["Pasta"] == 1
