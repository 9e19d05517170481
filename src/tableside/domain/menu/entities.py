from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from tableside.domain.common.ids import CategoryId, DishId
from tableside.domain.common.money import ZERO

CATEGORY_TITLE_MAX_LENGTH = 30


@dataclass(frozen=True)
class Ingredient:
    name: str
    removable: bool


@dataclass(frozen=True)
class DishOption:
    option: str
    price: Decimal
    enabled: bool

    def __post_init__(self) -> None:
        if self.price < ZERO:
            raise ValueError("option price must be >= 0")


@dataclass(frozen=True)
class DishParams:
    title: str
    description: str
    quantity: str
    ingredients: tuple[Ingredient, ...] = ()
    options: tuple[DishOption, ...] = ()
    available: bool = True

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise ValueError("title must be non-empty")

    def find_option(self, name: str) -> DishOption | None:
        for option in self.options:
            if option.option == name:
                return option
        return None

    def is_enabled_option(self, name: str) -> bool:
        option = self.find_option(name)
        return option is not None and option.enabled

    def is_removable_ingredient(self, name: str) -> bool:
        return any(
            ingredient.name == name and ingredient.removable for ingredient in self.ingredients
        )


@dataclass(frozen=True)
class Dish:
    dish_id: DishId
    category_id: CategoryId
    image: str
    price: Decimal
    discount: Decimal
    params: DishParams = field(
        default_factory=lambda: DishParams(title="Dish", description="", quantity="")
    )

    def __post_init__(self) -> None:
        if self.price < ZERO:
            raise ValueError("price must be >= 0")
        if self.discount < ZERO:
            raise ValueError("discount must be >= 0")
        if self.discount > self.price:
            raise ValueError("discount must not exceed price")

    @property
    def title(self) -> str:
        return self.params.title


@dataclass(frozen=True)
class Category:
    category_id: CategoryId
    title: str

    def __post_init__(self) -> None:
        if not self.title.strip():
            raise ValueError("category title must be non-empty")
        if len(self.title) > CATEGORY_TITLE_MAX_LENGTH:
            raise ValueError(
                f"category title must be at most {CATEGORY_TITLE_MAX_LENGTH} characters"
            )
