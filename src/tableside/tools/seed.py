from __future__ import annotations

import argparse
import json
import os
import sys
from decimal import Decimal
from pathlib import Path
from typing import Any, Sequence

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from tableside.application.dto.requests import CamelBaseModel, DishParamsRequest
from tableside.application.mappers.restaurant_mapper import to_dish_params
from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.clock import Clock, utcnow
from tableside.domain.common.ids import CategoryId, DishId, RestaurantId
from tableside.domain.menu.entities import Category, Dish
from tableside.domain.restaurant.entities import RestaurantDetails

SEED_DATA_PATH_ENV = "SEED_DATA_PATH"


class SeedCategory(CamelBaseModel):
    id: int = Field(ge=0)
    title: str


class SeedDish(CamelBaseModel):
    id: int = Field(ge=0)
    category_id: int = Field(ge=0)
    image: str = ""
    price: Decimal = Field(ge=0)
    discount: Decimal = Field(default=Decimal("0"), ge=0)
    params: DishParamsRequest


class SeedRestaurant(CamelBaseModel):
    id: int = Field(ge=0)
    name: str
    description: str
    logo: str = ""
    theme: dict[str, Any] = Field(default_factory=dict)
    tables_amount: int = Field(default=0, ge=0)
    categories: list[SeedCategory] = Field(default_factory=list)
    dishes: list[SeedDish] = Field(default_factory=list)


class SeedData(CamelBaseModel):
    restaurants: list[SeedRestaurant] = Field(default_factory=list)


def _ingredient(name: str, removable: bool) -> dict[str, Any]:
    return {"name": name, "removable": removable}


def _option(option: str, price: str, enabled: bool = True) -> dict[str, Any]:
    return {"option": option, "price": price, "enabled": enabled}


DEMO_SEED: dict[str, Any] = {
    "restaurants": [
        {
            "id": 1,
            "name": "Tableside Bistro",
            "description": "Neighbourhood kitchen with table ordering",
            "logo": "",
            "theme": {"primaryColor": "#b23a48", "secondaryColor": "#fcb9b2"},
            "tablesAmount": 5,
            "categories": [
                {"id": 0, "title": "Mains"},
                {"id": 1, "title": "Salads"},
                {"id": 2, "title": "Desserts"},
            ],
            "dishes": [
                {
                    "id": 0,
                    "categoryId": 0,
                    "image": "margherita.jpg",
                    "price": "14.50",
                    "discount": "0",
                    "params": {
                        "title": "Margherita Pizza",
                        "description": "Tomato, mozzarella, basil",
                        "quantity": "1 pizza",
                        "ingredients": [
                            _ingredient("tomato", False),
                            _ingredient("mozzarella", True),
                            _ingredient("basil", True),
                        ],
                        "options": [
                            _option("extra cheese", "1.50"),
                            _option("truffle oil", "3.00", enabled=False),
                        ],
                        "available": True,
                    },
                },
                {
                    "id": 1,
                    "categoryId": 0,
                    "image": "alfredo.jpg",
                    "price": "16.90",
                    "discount": "1.90",
                    "params": {
                        "title": "Chicken Alfredo",
                        "description": "Fettuccine, creamy parmesan sauce",
                        "quantity": "350 g",
                        "ingredients": [
                            _ingredient("chicken", True),
                            _ingredient("parmesan", True),
                        ],
                        "options": [_option("extra chicken", "2.50")],
                        "available": True,
                    },
                },
                {
                    "id": 2,
                    "categoryId": 1,
                    "image": "caesar.jpg",
                    "price": "9.90",
                    "discount": "0",
                    "params": {
                        "title": "Caesar Salad",
                        "description": "Romaine, croutons, parmesan",
                        "quantity": "250 g",
                        "ingredients": [
                            _ingredient("romaine", False),
                            _ingredient("croutons", True),
                            _ingredient("parmesan", True),
                        ],
                        "options": [_option("grilled chicken", "3.50")],
                        "available": True,
                    },
                },
                {
                    "id": 3,
                    "categoryId": 2,
                    "image": "tiramisu.jpg",
                    "price": "8.50",
                    "discount": "0",
                    "params": {
                        "title": "Tiramisu",
                        "description": "Espresso-soaked ladyfingers",
                        "quantity": "1 slice",
                        "ingredients": [_ingredient("mascarpone", False)],
                        "options": [],
                        "available": False,
                    },
                },
            ],
        }
    ]
}


def load_seed_data(path: str | Path | None = None) -> SeedData:
    if path is None:
        return SeedData.model_validate(DEMO_SEED)
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    return SeedData.model_validate(raw)


def build_restaurant(seed: SeedRestaurant, clock: Clock = utcnow) -> RestaurantStore:
    return RestaurantStore(
        restaurant_id=RestaurantId(seed.id),
        details=RestaurantDetails(name=seed.name, description=seed.description, logo=seed.logo),
        dishes=[
            Dish(
                dish_id=DishId(dish.id),
                category_id=CategoryId(dish.category_id),
                image=dish.image,
                price=dish.price,
                discount=dish.discount,
                params=to_dish_params(dish.params),
            )
            for dish in seed.dishes
        ],
        categories=[
            Category(category_id=CategoryId(category.id), title=category.title)
            for category in seed.categories
        ],
        tables_amount=seed.tables_amount,
        theme=seed.theme,
        clock=clock,
    )


def load_restaurants(
    path: str | Path | None = None,
    clock: Clock = utcnow,
) -> list[RestaurantStore]:
    """Restaurants from ``path`` (or ``SEED_DATA_PATH``); the demo data otherwise."""
    resolved = path if path is not None else os.getenv(SEED_DATA_PATH_ENV) or None
    seed = load_seed_data(resolved)
    ids = [restaurant.id for restaurant in seed.restaurants]
    if len(ids) != len(set(ids)):
        raise ValueError("restaurant ids must be unique")
    return [build_restaurant(restaurant, clock=clock) for restaurant in seed.restaurants]


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Validate restaurant seed data.")
    parser.add_argument(
        "--path",
        default=None,
        help=f"Seed file to validate. Defaults to ${SEED_DATA_PATH_ENV} or the demo data.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    try:
        restaurants = load_restaurants(args.path)
    except (OSError, PydanticValidationError, ValueError) as exc:
        print(f"seed invalid: {exc}")
        return 1

    for restaurant in restaurants:
        print(
            f"restaurant {restaurant.restaurant_id}: {restaurant.details.name} "
            f"({len(restaurant.get_dishes())} dishes, {len(restaurant.get_tables())} tables)"
        )
    print("seed valid")
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
