from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, status

from tableside.api.authorization import (
    PermissionDeniedError,
    Principal,
    Role,
    get_principal,
    has_role,
    has_table_permissions,
    require_role,
    require_table,
)
from tableside.api.dependencies import get_restaurant
from tableside.application.dto.requests import DraftOrderRequest, StatusUpdateRequest
from tableside.application.dto.responses import OrderResponse
from tableside.application.mappers.order_mapper import to_draft_order, to_order_response
from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.ids import OrderId, OrderItemId, TableId

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/v1/restaurants/{restaurant_id}/orders", response_model=list[OrderResponse])
def list_orders(
    restaurant_id: int,
    restaurant: RestaurantStore = Depends(get_restaurant),
    principal: Principal = Depends(get_principal),
) -> list[OrderResponse]:
    require_role(principal, restaurant_id, Role.WAITER, Role.KITCHEN, Role.ADMIN)
    return [to_order_response(order) for order in restaurant.get_orders()]


@router.post(
    "/v1/restaurants/{restaurant_id}/orders",
    response_model=OrderResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_order(
    restaurant_id: int,
    request_dto: DraftOrderRequest,
    restaurant: RestaurantStore = Depends(get_restaurant),
    principal: Principal = Depends(get_principal),
) -> OrderResponse:
    require_table(principal, restaurant_id, request_dto.origin)
    order = restaurant.create_order(to_draft_order(request_dto))
    return to_order_response(order)


@router.get(
    "/v1/restaurants/{restaurant_id}/tables/{table_id}/orders",
    response_model=list[OrderResponse],
)
def list_table_orders(
    restaurant_id: int,
    table_id: int,
    restaurant: RestaurantStore = Depends(get_restaurant),
    principal: Principal = Depends(get_principal),
) -> list[OrderResponse]:
    staff = has_role(principal, restaurant_id, Role.WAITER, Role.KITCHEN, Role.ADMIN)
    seated = has_role(principal, restaurant_id, Role.USER) and has_table_permissions(
        principal, table_id
    )
    if not (staff or seated):
        raise PermissionDeniedError(f"no permission for table {table_id}")
    return [to_order_response(order) for order in restaurant.get_table_orders(TableId(table_id))]


@router.post(
    "/v1/restaurants/{restaurant_id}/orders/{order_id}/status",
    response_model=OrderResponse,
)
def update_order_status(
    restaurant_id: int,
    order_id: int,
    request_dto: StatusUpdateRequest,
    restaurant: RestaurantStore = Depends(get_restaurant),
    principal: Principal = Depends(get_principal),
) -> OrderResponse:
    require_role(principal, restaurant_id, Role.WAITER)
    order = restaurant.update_order_status(OrderId(order_id), request_dto.status)
    logger.info(
        "order_status_updated",
        extra={
            "restaurant_id": restaurant_id,
            "order_id": order_id,
            "status": order.status.value,
        },
    )
    return to_order_response(order)


@router.post(
    "/v1/restaurants/{restaurant_id}/orders/{order_id}/items/{item_id}/status",
    response_model=OrderResponse,
)
def update_order_item_status(
    restaurant_id: int,
    order_id: int,
    item_id: str,
    request_dto: StatusUpdateRequest,
    restaurant: RestaurantStore = Depends(get_restaurant),
    principal: Principal = Depends(get_principal),
) -> OrderResponse:
    require_role(principal, restaurant_id, Role.KITCHEN, Role.WAITER)
    order = restaurant.get_order(OrderId(order_id))
    restaurant.update_order_item_status(OrderItemId(item_id), order, request_dto.status)
    return to_order_response(order)
