from __future__ import annotations

import copy
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from decimal import Decimal

from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.clock import Clock, utcnow
from tableside.domain.common.money import ZERO
from tableside.domain.notification.entities import PaymentMethod
from tableside.domain.order.entities import Order, OrderStatus

DEFAULT_TIMEFRAMES: dict[str, timedelta] = {
    "hourly": timedelta(hours=1),
    "daily": timedelta(days=1),
}


@dataclass
class OrderCounters:
    finished: int = 0
    cancelled: int = 0
    total: int = 0
    total_items: int = 0
    total_turnover: Decimal = ZERO


@dataclass
class NotificationCounters:
    assistance_requests: int = 0
    cash_check_requests: int = 0
    card_check_requests: int = 0


@dataclass
class TimeframeBucket:
    time_frame: str
    start_time: datetime
    reset_interval: timedelta
    orders: OrderCounters = field(default_factory=OrderCounters)
    notifications: NotificationCounters = field(default_factory=NotificationCounters)
    dishes: dict[str, int] = field(default_factory=dict)

    def is_expired(self, now: datetime) -> bool:
        return now >= self.start_time + self.reset_interval


def _new_bucket(
    name: str,
    interval: timedelta,
    now: datetime,
    dish_titles: list[str],
) -> TimeframeBucket:
    return TimeframeBucket(
        time_frame=name,
        start_time=now,
        reset_interval=interval,
        dishes={title: 0 for title in dish_titles},
    )


class Statistics:
    """Rolling counters of one restaurant, one bucket per named timeframe.

    Counters only grow during a bucket's lifetime; ``roll_over_expired``
    replaces a bucket with a fresh one once its reset interval has passed.
    """

    def __init__(
        self,
        restaurant: RestaurantStore,
        timeframes: Mapping[str, timedelta] = DEFAULT_TIMEFRAMES,
        clock: Clock = utcnow,
    ) -> None:
        self._restaurant = restaurant
        self._clock = clock
        self._lock = threading.Lock()
        now = clock()
        titles = self._dish_titles()
        self.timeframes: dict[str, TimeframeBucket] = {
            name: _new_bucket(name, interval, now, titles) for name, interval in timeframes.items()
        }

    def _dish_titles(self) -> list[str]:
        return [dish.title for dish in self._restaurant.get_dishes()]

    def on_order_finish(self, order: Order) -> None:
        with self._lock:
            for bucket in self.timeframes.values():
                bucket.orders.total += 1
                if order.status == OrderStatus.CANCELLED:
                    bucket.orders.cancelled += 1
                if order.status == OrderStatus.FINISHED:
                    bucket.orders.finished += 1
                    if order.price is not None:
                        bucket.orders.total_turnover += order.price.final_price

                for item in order.items:
                    bucket.orders.total_items += item.amount
                    dish = self._restaurant.find_dish(item.dish.dish_id)
                    if dish is not None:
                        bucket.dishes[dish.title] = bucket.dishes.get(dish.title, 0) + item.amount

    def on_assistance_request(self) -> None:
        with self._lock:
            for bucket in self.timeframes.values():
                bucket.notifications.assistance_requests += 1

    def on_check_request(self, payment_method: PaymentMethod) -> None:
        with self._lock:
            for bucket in self.timeframes.values():
                if payment_method == PaymentMethod.CASH:
                    bucket.notifications.cash_check_requests += 1
                else:
                    bucket.notifications.card_check_requests += 1

    def roll_over_expired(self, now: datetime | None = None) -> list[str]:
        current = now or self._clock()
        rolled: list[str] = []
        # Read the catalog before taking our lock; the store lock is always taken first.
        titles = self._dish_titles()
        with self._lock:
            for name, bucket in list(self.timeframes.items()):
                if bucket.is_expired(current):
                    self.timeframes[name] = _new_bucket(
                        name, bucket.reset_interval, current, titles
                    )
                    rolled.append(name)
        return rolled

    def snapshot(self) -> list[TimeframeBucket]:
        """Copies of every bucket, taken under the lock; later updates do not show through."""
        with self._lock:
            return [copy.deepcopy(bucket) for bucket in self.timeframes.values()]
