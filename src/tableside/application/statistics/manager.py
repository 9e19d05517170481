from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timedelta

from tableside.application.aggregator import Aggregator
from tableside.application.events.channel import Subscription
from tableside.application.statistics.statistics import DEFAULT_TIMEFRAMES, Statistics
from tableside.domain.common.clock import Clock, utcnow
from tableside.domain.common.errors import NotFoundError
from tableside.domain.common.ids import RestaurantId
from tableside.domain.events import (
    AssistanceRequested,
    CheckRequested,
    FinishedOrCancelledOrder,
    RestaurantEvent,
)

logger = logging.getLogger(__name__)


class StatisticsManager:
    def __init__(
        self,
        aggregator: Aggregator,
        timeframes: Mapping[str, timedelta] = DEFAULT_TIMEFRAMES,
        clock: Clock = utcnow,
    ) -> None:
        self._restaurants: dict[RestaurantId, Statistics] = {
            restaurant.restaurant_id: Statistics(restaurant, timeframes=timeframes, clock=clock)
            for restaurant in aggregator.restaurants
        }
        self._subscriptions: list[Subscription] = [
            aggregator.subscribe(FinishedOrCancelledOrder, self._on_finished_or_cancelled),
            aggregator.subscribe(AssistanceRequested, self._on_assistance_request),
            aggregator.subscribe(CheckRequested, self._on_check_request),
        ]

    def _on_finished_or_cancelled(self, tagged: RestaurantEvent) -> None:
        statistics = self._restaurants.get(tagged.restaurant_id)
        if statistics is not None:
            statistics.on_order_finish(tagged.event.order)

    def _on_assistance_request(self, tagged: RestaurantEvent) -> None:
        statistics = self._restaurants.get(tagged.restaurant_id)
        if statistics is not None:
            statistics.on_assistance_request()

    def _on_check_request(self, tagged: RestaurantEvent) -> None:
        statistics = self._restaurants.get(tagged.restaurant_id)
        if statistics is not None:
            statistics.on_check_request(tagged.event.payment_method)

    def get_statistics(self, restaurant_id: RestaurantId) -> Statistics:
        statistics = self._restaurants.get(restaurant_id)
        if statistics is None:
            raise NotFoundError(
                f"restaurant {restaurant_id} not found",
                details={"restaurantId": restaurant_id},
            )
        return statistics

    def roll_over_expired(self, now: datetime | None = None) -> None:
        for restaurant_id, statistics in self._restaurants.items():
            rolled = statistics.roll_over_expired(now)
            if rolled:
                logger.info(
                    "statistics_rolled_over",
                    extra={"restaurant_id": restaurant_id, "timeframes": rolled},
                )

    def close(self) -> None:
        for subscription in self._subscriptions:
            subscription.cancel()
        self._subscriptions.clear()
