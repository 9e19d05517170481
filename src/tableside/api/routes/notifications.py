from __future__ import annotations

from fastapi import APIRouter, Depends, status

from tableside.api.authorization import Principal, Role, get_principal, require_role, require_table
from tableside.api.dependencies import get_restaurant
from tableside.application.dto.requests import CheckRequestRequest
from tableside.application.dto.responses import AckResponse, NotificationResponse
from tableside.application.mappers.notification_mapper import to_notification_response
from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.ids import NotificationId, TableId

router = APIRouter()


@router.get(
    "/v1/restaurants/{restaurant_id}/notifications",
    response_model=list[NotificationResponse],
)
def list_notifications(
    restaurant_id: int,
    restaurant: RestaurantStore = Depends(get_restaurant),
    principal: Principal = Depends(get_principal),
) -> list[NotificationResponse]:
    require_role(principal, restaurant_id, Role.WAITER)
    return [to_notification_response(item) for item in restaurant.get_notifications()]


@router.post(
    "/v1/restaurants/{restaurant_id}/notifications/{notification_id}/deactivate",
    response_model=NotificationResponse,
)
def deactivate_notification(
    restaurant_id: int,
    notification_id: str,
    restaurant: RestaurantStore = Depends(get_restaurant),
    principal: Principal = Depends(get_principal),
) -> NotificationResponse:
    require_role(principal, restaurant_id, Role.WAITER)
    notification = restaurant.set_notification_inactive(NotificationId(notification_id))
    return to_notification_response(notification)


@router.post(
    "/v1/restaurants/{restaurant_id}/tables/{table_id}/assistance-requests",
    response_model=AckResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def request_assistance(
    restaurant_id: int,
    table_id: int,
    restaurant: RestaurantStore = Depends(get_restaurant),
    principal: Principal = Depends(get_principal),
) -> AckResponse:
    require_table(principal, restaurant_id, table_id)
    restaurant.send_assistance_request(TableId(table_id))
    return AckResponse()


@router.post(
    "/v1/restaurants/{restaurant_id}/tables/{table_id}/check-requests",
    response_model=AckResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def request_check(
    restaurant_id: int,
    table_id: int,
    request_dto: CheckRequestRequest,
    restaurant: RestaurantStore = Depends(get_restaurant),
    principal: Principal = Depends(get_principal),
) -> AckResponse:
    require_table(principal, restaurant_id, table_id)
    restaurant.send_check_request(TableId(table_id), request_dto.payment_method)
    return AckResponse()
