from __future__ import annotations

from fastapi import APIRouter, Depends, Request

from tableside.api.authorization import Principal, Role, get_principal, require_role
from tableside.api.dependencies import get_restaurant, get_runtime
from tableside.application.dto.responses import RestaurantDataResponse, StatisticsResponse
from tableside.application.mappers.restaurant_mapper import to_restaurant_data_response
from tableside.application.mappers.statistics_mapper import to_statistics_response
from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.ids import RestaurantId

router = APIRouter()


@router.get("/v1/restaurants/{restaurant_id}", response_model=RestaurantDataResponse)
def get_restaurant_data(
    restaurant: RestaurantStore = Depends(get_restaurant),
) -> RestaurantDataResponse:
    return to_restaurant_data_response(restaurant)


@router.get("/v1/restaurants/{restaurant_id}/statistics", response_model=StatisticsResponse)
def get_statistics(
    restaurant_id: int,
    request: Request,
    restaurant: RestaurantStore = Depends(get_restaurant),
    principal: Principal = Depends(get_principal),
) -> StatisticsResponse:
    require_role(principal, restaurant_id, Role.ADMIN)
    statistics = get_runtime(request).statistics.get_statistics(RestaurantId(restaurant_id))
    return to_statistics_response(restaurant.restaurant_id, statistics.snapshot())
