from __future__ import annotations

from tableside.domain.order.entities import Order, OrderItemStatus, OrderStatus


def derive_order_status(order: Order) -> OrderStatus:
    """Order status implied by its item statuses.

    Terminal orders keep their status. Otherwise the order follows its items:
    all cancelled, any in progress, or delivered once nothing is still pending.
    """
    if order.status.is_terminal:
        return order.status

    statuses = [item.status for item in order.items]
    if statuses and all(status == OrderItemStatus.CANCELLED for status in statuses):
        return OrderStatus.CANCELLED
    if OrderItemStatus.IN_PROGRESS in statuses:
        return OrderStatus.IN_PROGRESS
    if OrderItemStatus.DELIVERED in statuses and OrderItemStatus.INIT not in statuses:
        return OrderStatus.DELIVERED
    return order.status
