from __future__ import annotations

from dataclasses import dataclass, field

from tableside.domain.common.ids import OrderId, TableId


@dataclass
class Table:
    table_id: TableId
    active_orders: list[OrderId] = field(default_factory=list)

    @property
    def has_active_orders(self) -> bool:
        return bool(self.active_orders)

    def attach_order(self, order_id: OrderId) -> None:
        self.active_orders = [*self.active_orders, order_id]

    def release_order(self, order_id: OrderId) -> None:
        self.active_orders = [active for active in self.active_orders if active != order_id]
