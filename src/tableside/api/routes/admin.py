from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Response, status

from tableside.api.authorization import Principal, Role, get_principal, require_role
from tableside.api.dependencies import get_restaurant
from tableside.application.dto.requests import (
    CategoryRequest,
    DishRequest,
    RestaurantDetailsRequest,
)
from tableside.application.dto.responses import (
    CategoryResponse,
    DishResponse,
    RestaurantDataResponse,
    TableResponse,
)
from tableside.application.mappers.restaurant_mapper import (
    to_category_response,
    to_dish_params,
    to_dish_response,
    to_restaurant_data_response,
    to_table_response,
)
from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.ids import CategoryId, DishId, TableId

router = APIRouter(prefix="/v1/restaurants/{restaurant_id}")


def _require_admin(
    restaurant_id: int,
    principal: Principal = Depends(get_principal),
) -> None:
    require_role(principal, restaurant_id, Role.ADMIN)


@router.post(
    "/dishes",
    response_model=DishResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(_require_admin)],
)
def create_dish(
    request_dto: DishRequest,
    restaurant: RestaurantStore = Depends(get_restaurant),
) -> DishResponse:
    dish = restaurant.create_dish(
        category_id=CategoryId(request_dto.category_id),
        image=request_dto.image,
        price=request_dto.price,
        discount=request_dto.discount,
        params=to_dish_params(request_dto.params),
    )
    return to_dish_response(dish)


@router.put(
    "/dishes/{dish_id}",
    response_model=DishResponse,
    dependencies=[Depends(_require_admin)],
)
def update_dish(
    dish_id: int,
    request_dto: DishRequest,
    restaurant: RestaurantStore = Depends(get_restaurant),
) -> DishResponse:
    dish = restaurant.update_dish(
        DishId(dish_id),
        category_id=CategoryId(request_dto.category_id),
        image=request_dto.image,
        price=request_dto.price,
        discount=request_dto.discount,
        params=to_dish_params(request_dto.params),
    )
    return to_dish_response(dish)


@router.post(
    "/categories",
    response_model=CategoryResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(_require_admin)],
)
def create_category(
    request_dto: CategoryRequest,
    restaurant: RestaurantStore = Depends(get_restaurant),
) -> CategoryResponse:
    return to_category_response(restaurant.create_category(request_dto.title))


@router.put(
    "/categories/{category_id}",
    response_model=CategoryResponse,
    dependencies=[Depends(_require_admin)],
)
def update_category(
    category_id: int,
    request_dto: CategoryRequest,
    restaurant: RestaurantStore = Depends(get_restaurant),
) -> CategoryResponse:
    category = restaurant.update_category(CategoryId(category_id), request_dto.title)
    return to_category_response(category)


@router.delete(
    "/categories/{category_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(_require_admin)],
)
def delete_category(
    category_id: int,
    restaurant: RestaurantStore = Depends(get_restaurant),
) -> Response:
    restaurant.delete_category(CategoryId(category_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/tables",
    response_model=TableResponse,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(_require_admin)],
)
def add_table(restaurant: RestaurantStore = Depends(get_restaurant)) -> TableResponse:
    return to_table_response(restaurant.add_table())


@router.delete(
    "/tables/{table_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    dependencies=[Depends(_require_admin)],
)
def delete_table(
    table_id: int,
    restaurant: RestaurantStore = Depends(get_restaurant),
) -> Response:
    restaurant.delete_table(TableId(table_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/details",
    response_model=RestaurantDataResponse,
    dependencies=[Depends(_require_admin)],
)
def set_details(
    request_dto: RestaurantDetailsRequest,
    restaurant: RestaurantStore = Depends(get_restaurant),
) -> RestaurantDataResponse:
    restaurant.set_details(request_dto.name, request_dto.description, request_dto.logo)
    return to_restaurant_data_response(restaurant)


@router.put(
    "/theme",
    response_model=RestaurantDataResponse,
    dependencies=[Depends(_require_admin)],
)
def set_theme(
    theme: dict[str, Any] = Body(...),
    restaurant: RestaurantStore = Depends(get_restaurant),
) -> RestaurantDataResponse:
    restaurant.set_theme(theme)
    return to_restaurant_data_response(restaurant)
