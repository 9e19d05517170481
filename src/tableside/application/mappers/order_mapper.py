from __future__ import annotations

from tableside.application.dto.requests import (
    CustomizedDishRequest,
    DishOptionRequest,
    DraftOrderRequest,
    IngredientRequest,
)
from tableside.application.dto.responses import (
    CustomizedDishResponse,
    DishOptionResponse,
    IngredientResponse,
    OrderItemResponse,
    OrderResponse,
    PriceResponse,
)
from tableside.domain.common.ids import DishId, TableId
from tableside.domain.common.money import PriceBreakdown
from tableside.domain.menu.entities import DishOption, Ingredient
from tableside.domain.order.entities import (
    CustomizedDish,
    DraftOrder,
    DraftOrderItem,
    Order,
    OrderItem,
)


def to_price_response(price: PriceBreakdown | None) -> PriceResponse | None:
    if price is None:
        return None
    return PriceResponse(
        price=float(price.price),
        discount=float(price.discount),
        extras=float(price.extras),
        finalPrice=float(price.final_price),
    )


def to_ingredient_response(ingredient: Ingredient) -> IngredientResponse:
    return IngredientResponse(name=ingredient.name, removable=ingredient.removable)


def to_option_response(option: DishOption) -> DishOptionResponse:
    return DishOptionResponse(
        option=option.option,
        price=float(option.price),
        enabled=option.enabled,
    )


def to_order_item_response(item: OrderItem) -> OrderItemResponse:
    return OrderItemResponse(
        id=str(item.item_id),
        dish=CustomizedDishResponse(
            dishId=int(item.dish.dish_id),
            removedIngredients=[
                to_ingredient_response(ingredient) for ingredient in item.dish.removed_ingredients
            ],
            addedOptions=[to_option_response(option) for option in item.dish.added_options],
        ),
        amount=item.amount,
        status=item.status.value,
        price=to_price_response(item.price),
    )


def to_order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        id=int(order.order_id),
        time=order.created_at,
        origin=int(order.origin),
        status=order.status.value,
        note=order.note,
        items=[to_order_item_response(item) for item in order.items],
        price=to_price_response(order.price),
    )


def to_ingredient(request: IngredientRequest) -> Ingredient:
    return Ingredient(name=request.name, removable=request.removable)


def to_option(request: DishOptionRequest) -> DishOption:
    return DishOption(option=request.option, price=request.price, enabled=request.enabled)


def to_customized_dish(request: CustomizedDishRequest) -> CustomizedDish:
    return CustomizedDish(
        dish_id=DishId(request.dish_id),
        removed_ingredients=tuple(to_ingredient(item) for item in request.removed_ingredients),
        added_options=tuple(to_option(item) for item in request.added_options),
    )


def to_draft_order(request: DraftOrderRequest) -> DraftOrder:
    return DraftOrder(
        origin=TableId(request.origin),
        items=[
            DraftOrderItem(
                dish=to_customized_dish(item.dish),
                amount=item.amount,
                status=item.status,
                item_id=item.id,
            )
            for item in request.items
        ],
        note=request.note,
        status=request.status,
    )
