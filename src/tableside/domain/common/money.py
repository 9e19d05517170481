from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

ZERO = Decimal("0")


@dataclass(frozen=True)
class PriceBreakdown:
    price: Decimal
    discount: Decimal
    extras: Decimal
    final_price: Decimal

    @classmethod
    def zero(cls) -> PriceBreakdown:
        return cls(price=ZERO, discount=ZERO, extras=ZERO, final_price=ZERO)

    @classmethod
    def from_components(
        cls,
        price: Decimal,
        discount: Decimal,
        extras: Decimal,
    ) -> PriceBreakdown:
        return cls(
            price=price,
            discount=discount,
            extras=extras,
            final_price=price + extras - discount,
        )
