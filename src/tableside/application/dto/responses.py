from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class PriceResponse(BaseModel):
    price: float
    discount: float
    extras: float
    finalPrice: float


class IngredientResponse(BaseModel):
    name: str
    removable: bool


class DishOptionResponse(BaseModel):
    option: str
    price: float
    enabled: bool


class DishParamsResponse(BaseModel):
    title: str
    description: str
    quantity: str
    ingredients: list[IngredientResponse] = Field(default_factory=list)
    options: list[DishOptionResponse] = Field(default_factory=list)
    available: bool


class DishResponse(BaseModel):
    id: int
    categoryId: int
    image: str
    price: float
    discount: float
    params: DishParamsResponse


class CategoryResponse(BaseModel):
    id: int
    title: str


class TableResponse(BaseModel):
    id: int
    activeOrders: list[int] = Field(default_factory=list)


class CustomizedDishResponse(BaseModel):
    dishId: int
    removedIngredients: list[IngredientResponse] = Field(default_factory=list)
    addedOptions: list[DishOptionResponse] = Field(default_factory=list)


class OrderItemResponse(BaseModel):
    id: str
    dish: CustomizedDishResponse
    amount: int
    status: str
    price: PriceResponse | None = None


class OrderResponse(BaseModel):
    id: int
    time: datetime
    origin: int
    status: str
    note: str
    items: list[OrderItemResponse] = Field(default_factory=list)
    price: PriceResponse | None = None


class NotificationResponse(BaseModel):
    id: str
    time: datetime
    origin: int
    type: str
    active: bool
    extraData: dict[str, Any] = Field(default_factory=dict)


class RestaurantDataResponse(BaseModel):
    id: int
    name: str
    description: str
    logo: str
    theme: dict[str, Any] = Field(default_factory=dict)
    dishes: list[DishResponse] = Field(default_factory=list)
    categories: list[CategoryResponse] = Field(default_factory=list)
    tables: list[TableResponse] = Field(default_factory=list)


class OrderCountersResponse(BaseModel):
    finished: int
    cancelled: int
    total: int
    totalItems: int
    totalTurnover: float


class NotificationCountersResponse(BaseModel):
    assistanceRequests: int
    cashCheckRequests: int
    cardCheckRequests: int


class TimeframeStatisticsResponse(BaseModel):
    timeFrame: str
    startTime: datetime
    resetIntervalSeconds: int
    orders: OrderCountersResponse
    notifications: NotificationCountersResponse
    dishes: dict[str, int] = Field(default_factory=dict)


class StatisticsResponse(BaseModel):
    restaurantId: int
    timeframes: list[TimeframeStatisticsResponse] = Field(default_factory=list)


class AckResponse(BaseModel):
    status: str = "ok"
