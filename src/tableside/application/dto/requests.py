from __future__ import annotations

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from tableside.domain.notification.entities import PaymentMethod
from tableside.domain.order.entities import OrderItemStatus, OrderStatus


def _to_camel(value: str) -> str:
    parts = value.split("_")
    return parts[0] + "".join(part.capitalize() for part in parts[1:])


class CamelBaseModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=_to_camel,
        populate_by_name=True,
    )


class IngredientRequest(CamelBaseModel):
    name: str = Field(max_length=50)
    removable: bool


class DishOptionRequest(CamelBaseModel):
    option: str = Field(max_length=30)
    price: Decimal = Field(ge=0)
    enabled: bool


class CustomizedDishRequest(CamelBaseModel):
    dish_id: int
    removed_ingredients: list[IngredientRequest] = Field(default_factory=list, max_length=25)
    added_options: list[DishOptionRequest] = Field(default_factory=list, max_length=25)


class DraftOrderItemRequest(CamelBaseModel):
    # Client ids and prices are accepted for compatibility and ignored.
    id: str | None = None
    dish: CustomizedDishRequest
    amount: int
    status: str = OrderItemStatus.INIT.value
    price: dict[str, Any] | None = None


class DraftOrderRequest(CamelBaseModel):
    origin: int
    status: str = OrderStatus.ORDER_RECEIVED.value
    items: list[DraftOrderItemRequest] = Field(default_factory=list)
    note: str = Field(default="", max_length=150)


class StatusUpdateRequest(CamelBaseModel):
    status: str


class CheckRequestRequest(CamelBaseModel):
    payment_method: PaymentMethod


class DishParamsRequest(CamelBaseModel):
    title: str = Field(min_length=1, max_length=60)
    description: str = Field(max_length=600)
    quantity: str = Field(max_length=30)
    ingredients: list[IngredientRequest] = Field(min_length=1, max_length=30)
    options: list[DishOptionRequest] = Field(default_factory=list, max_length=30)
    available: bool = True


class DishRequest(CamelBaseModel):
    category_id: int = Field(ge=0, le=100)
    image: str = Field(max_length=150)
    price: Decimal = Field(ge=0, le=10000)
    discount: Decimal = Field(ge=0, le=100)
    params: DishParamsRequest


class CategoryRequest(CamelBaseModel):
    title: str


class RestaurantDetailsRequest(CamelBaseModel):
    name: str
    description: str
    logo: str | None = None
