from __future__ import annotations

from tableside.application.dto.requests import DishParamsRequest
from tableside.application.dto.responses import (
    CategoryResponse,
    DishParamsResponse,
    DishResponse,
    RestaurantDataResponse,
    TableResponse,
)
from tableside.application.mappers.order_mapper import (
    to_ingredient,
    to_ingredient_response,
    to_option,
    to_option_response,
)
from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.menu.entities import Category, Dish, DishParams
from tableside.domain.table.entities import Table


def to_dish_response(dish: Dish) -> DishResponse:
    params = dish.params
    return DishResponse(
        id=int(dish.dish_id),
        categoryId=int(dish.category_id),
        image=dish.image,
        price=float(dish.price),
        discount=float(dish.discount),
        params=DishParamsResponse(
            title=params.title,
            description=params.description,
            quantity=params.quantity,
            ingredients=[to_ingredient_response(item) for item in params.ingredients],
            options=[to_option_response(item) for item in params.options],
            available=params.available,
        ),
    )


def to_category_response(category: Category) -> CategoryResponse:
    return CategoryResponse(id=int(category.category_id), title=category.title)


def to_table_response(table: Table) -> TableResponse:
    return TableResponse(
        id=int(table.table_id),
        activeOrders=[int(order_id) for order_id in table.active_orders],
    )


def to_restaurant_data_response(restaurant: RestaurantStore) -> RestaurantDataResponse:
    details = restaurant.details
    return RestaurantDataResponse(
        id=int(restaurant.restaurant_id),
        name=details.name,
        description=details.description,
        logo=details.logo,
        theme=dict(restaurant.theme),
        dishes=[to_dish_response(dish) for dish in restaurant.get_dishes()],
        categories=[to_category_response(category) for category in restaurant.get_categories()],
        tables=[to_table_response(table) for table in restaurant.get_tables()],
    )


def to_dish_params(request: DishParamsRequest) -> DishParams:
    return DishParams(
        title=request.title,
        description=request.description,
        quantity=request.quantity,
        ingredients=tuple(to_ingredient(item) for item in request.ingredients),
        options=tuple(to_option(item) for item in request.options),
        available=request.available,
    )
