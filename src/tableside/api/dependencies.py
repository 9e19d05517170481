from __future__ import annotations

from fastapi import Request

from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.ids import RestaurantId
from tableside.infrastructure.runtime import Runtime


def get_runtime(request: Request) -> Runtime:
    return request.app.state.runtime


def get_restaurant(restaurant_id: int, request: Request) -> RestaurantStore:
    return get_runtime(request).aggregator.get_restaurant(RestaurantId(restaurant_id))
