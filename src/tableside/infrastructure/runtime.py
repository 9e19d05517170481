from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta

from tableside.application.aggregator import Aggregator
from tableside.application.events.channel import Subscription
from tableside.application.gateway.context import TraceContext
from tableside.application.gateway.transport import TransportGateway
from tableside.application.metrics.order_lifecycle import attach_lifecycle_metrics
from tableside.application.statistics.manager import StatisticsManager
from tableside.application.statistics.statistics import DEFAULT_TIMEFRAMES
from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.clock import Clock, utcnow
from tableside.infrastructure.messaging.local_publisher import LocalEventPublisher
from tableside.infrastructure.observability.trace_context import current_trace_context

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    aggregator: Aggregator
    statistics: StatisticsManager
    gateway: TransportGateway
    publisher: LocalEventPublisher
    metrics_subscriptions: list[Subscription] = field(default_factory=list)

    def close(self) -> None:
        self.gateway.close()
        self.statistics.close()
        for subscription in self.metrics_subscriptions:
            subscription.cancel()
        self.metrics_subscriptions.clear()


def build_runtime(
    restaurants: Iterable[RestaurantStore],
    timeframes: Mapping[str, timedelta] = DEFAULT_TIMEFRAMES,
    clock: Clock = utcnow,
    trace_context: Callable[[], TraceContext] = current_trace_context,
) -> Runtime:
    # Subscription order fixes delivery order: statistics, then metrics, then sockets.
    aggregator = Aggregator(restaurants, clock=clock)
    statistics = StatisticsManager(aggregator, timeframes=timeframes, clock=clock)
    metrics_subscriptions = attach_lifecycle_metrics(aggregator)
    publisher = LocalEventPublisher()
    gateway = TransportGateway(aggregator, publisher, trace_context=trace_context, clock=clock)

    logger.info(
        "runtime_ready",
        extra={"restaurant_ids": [r.restaurant_id for r in aggregator.restaurants]},
    )
    return Runtime(
        aggregator=aggregator,
        statistics=statistics,
        gateway=gateway,
        publisher=publisher,
        metrics_subscriptions=metrics_subscriptions,
    )
