from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal

from tableside.domain.common.ids import DishId
from tableside.domain.common.money import ZERO, PriceBreakdown
from tableside.domain.menu.entities import Dish
from tableside.domain.order.entities import Order, OrderItem, OrderItemStatus


def _extras(dish: Dish, item: OrderItem) -> Decimal:
    # The dish's current option price wins over anything the client sent.
    extras = ZERO
    for added in item.dish.added_options:
        option = dish.params.find_option(added.option)
        if option is not None:
            extras += option.price
    return extras


def item_total(dish: Dish | None, item: OrderItem) -> PriceBreakdown:
    if dish is None or item.status == OrderItemStatus.CANCELLED:
        return PriceBreakdown.zero()

    return PriceBreakdown.from_components(
        price=dish.price * item.amount,
        discount=dish.discount * item.amount,
        extras=_extras(dish, item),
    )


def order_total(order: Order, dishes: Mapping[DishId, Dish]) -> PriceBreakdown:
    price = ZERO
    discount = ZERO
    extras = ZERO
    for item in order.items:
        breakdown = item_total(dishes.get(item.dish.dish_id), item)
        price += breakdown.price
        discount += breakdown.discount
        extras += breakdown.extras

    return PriceBreakdown.from_components(price=price, discount=discount, extras=extras)
