from __future__ import annotations

from collections.abc import Mapping

from tableside.domain.common.errors import ValidationError
from tableside.domain.common.ids import DishId
from tableside.domain.menu.entities import Dish
from tableside.domain.order.entities import (
    MAX_ITEM_AMOUNT,
    MIN_ITEM_AMOUNT,
    NOTE_MAX_LENGTH,
    DraftOrder,
    parse_order_item_status,
    parse_order_status,
)


def validate_order(dishes: Mapping[DishId, Dish], draft: DraftOrder) -> None:
    """Check a draft order against the restaurant catalog.

    Raises ``ValidationError`` on the first violation found; never mutates.
    """
    if len(draft.note) > NOTE_MAX_LENGTH:
        raise ValidationError(f"note must be at most {NOTE_MAX_LENGTH} characters")

    for index, item in enumerate(draft.items):
        if not MIN_ITEM_AMOUNT <= item.amount <= MAX_ITEM_AMOUNT:
            raise ValidationError(
                f"item amount must be between {MIN_ITEM_AMOUNT} and {MAX_ITEM_AMOUNT}",
                details={"item": index, "amount": item.amount},
            )

        dish = dishes.get(item.dish.dish_id)
        if dish is None:
            raise ValidationError(
                f"dish {item.dish.dish_id} does not exist",
                details={"item": index, "dishId": item.dish.dish_id},
            )

        if parse_order_item_status(item.status) is None:
            raise ValidationError(
                f"invalid order item status: {item.status}",
                details={"item": index},
            )

        if parse_order_status(draft.status) is None:
            raise ValidationError(f"invalid order status: {draft.status}")

        for option in item.dish.added_options:
            if not dish.params.is_enabled_option(option.option):
                raise ValidationError(
                    f"option {option.option!r} is not available for dish {dish.dish_id}",
                    details={"item": index, "option": option.option},
                )

        for ingredient in item.dish.removed_ingredients:
            if not dish.params.is_removable_ingredient(ingredient.name):
                raise ValidationError(
                    f"ingredient {ingredient.name!r} cannot be removed from dish {dish.dish_id}",
                    details={"item": index, "ingredient": ingredient.name},
                )
