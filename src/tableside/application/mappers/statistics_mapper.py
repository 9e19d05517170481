from __future__ import annotations

from tableside.application.dto.responses import (
    NotificationCountersResponse,
    OrderCountersResponse,
    StatisticsResponse,
    TimeframeStatisticsResponse,
)
from tableside.application.statistics.statistics import TimeframeBucket
from tableside.domain.common.ids import RestaurantId


def to_timeframe_response(bucket: TimeframeBucket) -> TimeframeStatisticsResponse:
    return TimeframeStatisticsResponse(
        timeFrame=bucket.time_frame,
        startTime=bucket.start_time,
        resetIntervalSeconds=int(bucket.reset_interval.total_seconds()),
        orders=OrderCountersResponse(
            finished=bucket.orders.finished,
            cancelled=bucket.orders.cancelled,
            total=bucket.orders.total,
            totalItems=bucket.orders.total_items,
            totalTurnover=float(bucket.orders.total_turnover),
        ),
        notifications=NotificationCountersResponse(
            assistanceRequests=bucket.notifications.assistance_requests,
            cashCheckRequests=bucket.notifications.cash_check_requests,
            cardCheckRequests=bucket.notifications.card_check_requests,
        ),
        dishes=dict(bucket.dishes),
    )


def to_statistics_response(
    restaurant_id: RestaurantId,
    buckets: list[TimeframeBucket],
) -> StatisticsResponse:
    return StatisticsResponse(
        restaurantId=int(restaurant_id),
        timeframes=[to_timeframe_response(bucket) for bucket in buckets],
    )
