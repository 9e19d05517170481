from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from decimal import Decimal
from functools import wraps
from typing import Any, TypeVar

from tableside.application.events.channel import EventChannel, Handler, Subscription
from tableside.domain.common.clock import Clock, utcnow
from tableside.domain.common.errors import (
    AlreadyInactiveError,
    DuplicateRequestError,
    InvalidStatusError,
    InvalidTableError,
    NotFoundError,
    OrderRejectedError,
    ValidationError,
)
from tableside.domain.common.ids import (
    CategoryId,
    DishId,
    NotificationId,
    OrderId,
    OrderItemId,
    RestaurantId,
    TableId,
    new_order_item_id,
)
from tableside.domain.events import (
    AssistanceRequested,
    CheckRequested,
    DomainEvent,
    FinishedOrCancelledOrder,
    NewNotification,
    NewOrder,
    NotificationStatusUpdated,
    OrderItemStatusUpdated,
    OrderStatusUpdated,
    RestaurantDataUpdated,
)
from tableside.domain.menu.entities import Category, Dish, DishParams
from tableside.domain.notification.entities import Notification, NotificationType, PaymentMethod
from tableside.domain.order.entities import (
    DraftOrder,
    Order,
    OrderItem,
    OrderItemStatus,
    OrderStatus,
    parse_order_item_status,
    parse_order_status,
)
from tableside.domain.order.pricing import item_total, order_total
from tableside.domain.order.validation import validate_order
from tableside.domain.restaurant.entities import RestaurantDetails
from tableside.domain.table.entities import Table

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])
T = TypeVar("T")


def _synchronized(method: F) -> F:
    @wraps(method)
    def wrapper(self: RestaurantStore, *args: Any, **kwargs: Any) -> Any:
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


def _build(factory: Callable[..., T], **kwargs: Any) -> T:
    try:
        return factory(**kwargs)
    except ValueError as exc:
        raise ValidationError(str(exc)) from exc


class RestaurantStore:
    """Authoritative in-memory state of one restaurant.

    Every successful mutation emits a domain event on ``events`` before the
    call returns; a raised error means nothing was mutated and nothing was
    emitted. The re-entrant lock is held across the mutation and the
    synchronous event cascade, so subscribers may call back into the store.
    """

    def __init__(
        self,
        restaurant_id: RestaurantId,
        details: RestaurantDetails,
        dishes: Iterable[Dish] = (),
        categories: Iterable[Category] = (),
        tables_amount: int = 0,
        theme: dict[str, Any] | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.restaurant_id = restaurant_id
        self._details = details
        self._theme: dict[str, Any] = dict(theme or {})
        self._dishes: dict[DishId, Dish] = {dish.dish_id: dish for dish in dishes}
        self._categories: dict[CategoryId, Category] = {
            category.category_id: category for category in categories
        }
        self._tables: dict[TableId, Table] = {
            TableId(index): Table(table_id=TableId(index)) for index in range(tables_amount)
        }
        self._orders: dict[OrderId, Order] = {}
        self._notifications: dict[NotificationId, Notification] = {}
        self._clock = clock
        self._lock = threading.RLock()
        self.events: EventChannel[DomainEvent] = EventChannel()

    def subscribe(self, event_type: type, handler: Handler) -> Subscription:
        return self.events.subscribe(event_type, handler)

    # Read accessors

    @property
    def details(self) -> RestaurantDetails:
        return self._details

    @property
    def theme(self) -> dict[str, Any]:
        return self._theme

    @_synchronized
    def get_dishes(self) -> list[Dish]:
        return list(self._dishes.values())

    def find_dish(self, dish_id: DishId) -> Dish | None:
        return self._dishes.get(dish_id)

    @_synchronized
    def get_categories(self) -> list[Category]:
        return list(self._categories.values())

    @_synchronized
    def get_tables(self) -> list[Table]:
        return list(self._tables.values())

    @_synchronized
    def get_orders(self) -> list[Order]:
        return list(self._orders.values())

    @_synchronized
    def get_notifications(self) -> list[Notification]:
        return list(self._notifications.values())

    def get_order(self, order_id: OrderId) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise NotFoundError(f"order {order_id} not found", details={"orderId": order_id})
        return order

    @_synchronized
    def get_table_orders(self, table_id: TableId) -> list[Order]:
        table = self._tables.get(table_id)
        if table is None:
            raise NotFoundError(f"table {table_id} not found", details={"tableId": table_id})
        return [
            self._orders[order_id] for order_id in table.active_orders if order_id in self._orders
        ]

    def _has_active_notification(
        self,
        table_id: TableId,
        notification_type: NotificationType,
    ) -> bool:
        return any(
            notification.active
            and notification.origin == table_id
            and notification.type == notification_type
            for notification in self._notifications.values()
        )

    # Orders

    @_synchronized
    def create_order(self, draft: DraftOrder) -> Order:
        if not draft.items:
            raise OrderRejectedError("cannot accept an empty order", reason="EMPTY_ORDER")

        table = self._tables.get(draft.origin)
        if table is None:
            raise OrderRejectedError(
                f"table {draft.origin} does not exist", reason="UNKNOWN_TABLE"
            )

        if self._has_active_notification(draft.origin, NotificationType.CHECK_REQUESTED):
            raise OrderRejectedError(
                f"table {draft.origin} is waiting for the check", reason="CHECK_PENDING"
            )

        validate_order(self._dishes, draft)

        items: list[OrderItem] = []
        for draft_item in draft.items:
            item = OrderItem(
                item_id=new_order_item_id(),
                dish=draft_item.dish,
                amount=draft_item.amount,
                status=OrderItemStatus.INIT,
            )
            item.price = item_total(self._dishes.get(item.dish.dish_id), item)
            items.append(item)

        order = Order(
            order_id=OrderId(max(self._orders, default=-1) + 1),
            created_at=self._clock(),
            origin=draft.origin,
            status=OrderStatus.ORDER_RECEIVED,
            items=items,
            note=draft.note,
        )
        order.price = order_total(order, self._dishes)

        table.attach_order(order.order_id)
        self._orders[order.order_id] = order
        logger.info(
            "order_created",
            extra={
                "restaurant_id": self.restaurant_id,
                "order_id": order.order_id,
                "table_id": order.origin,
            },
        )

        self.events.emit(NewOrder(order=order))
        return order

    @_synchronized
    def update_order_status(self, order_id: OrderId, new_status: str | OrderStatus) -> Order:
        order = self.get_order(order_id)
        status = parse_order_status(new_status)
        if status is None:
            raise InvalidStatusError(f"invalid order status: {new_status}")

        prev_status = order.status
        order.status = status
        self.events.emit(
            OrderStatusUpdated(order=order, new_status=status, prev_status=prev_status)
        )
        return order

    @_synchronized
    def update_order_item_status(
        self,
        item_id: OrderItemId,
        order: Order,
        new_status: str | OrderItemStatus,
    ) -> OrderItem:
        item = order.find_item(item_id)
        if item is None:
            raise NotFoundError(
                f"order item {item_id} not found in order {order.order_id}",
                details={"orderId": order.order_id, "orderItemId": item_id},
            )
        status = parse_order_item_status(new_status)
        if status is None:
            raise InvalidStatusError(f"invalid order item status: {new_status}")

        prev_status = item.status
        item.status = status
        self.events.emit(
            OrderItemStatusUpdated(
                order=order,
                item=item,
                new_status=status,
                prev_status=prev_status,
            )
        )
        return item

    @_synchronized
    def recalculate_prices(self, order: Order) -> None:
        for item in order.items:
            item.price = item_total(self._dishes.get(item.dish.dish_id), item)
        order.price = order_total(order, self._dishes)

    @_synchronized
    def finish_order(self, order: Order) -> None:
        table = self._tables.get(order.origin)
        if table is not None:
            table.release_order(order.order_id)

        for notification in list(self._notifications.values()):
            if notification.active and notification.origin == order.origin:
                self.set_notification_inactive(notification.notification_id)

        logger.info(
            "order_closed",
            extra={
                "restaurant_id": self.restaurant_id,
                "order_id": order.order_id,
                "status": order.status.value,
            },
        )
        self.events.emit(FinishedOrCancelledOrder(order=order))

    # Notifications and table requests

    @_synchronized
    def set_notification_inactive(self, notification_id: NotificationId) -> Notification:
        notification = self._notifications.get(notification_id)
        if notification is None:
            raise NotFoundError(
                f"notification {notification_id} not found",
                details={"notificationId": notification_id},
            )
        if not notification.active:
            raise AlreadyInactiveError(f"notification {notification_id} is already inactive")

        notification.active = False
        self.events.emit(NotificationStatusUpdated(notification=notification))
        return notification

    @_synchronized
    def create_notification(self, notification: Notification) -> Notification:
        self._notifications[notification.notification_id] = notification
        self.events.emit(NewNotification(notification=notification))
        return notification

    def _ensure_request_allowed(
        self,
        table_id: TableId,
        notification_type: NotificationType,
    ) -> None:
        if table_id not in self._tables:
            raise InvalidTableError(
                f"table {table_id} does not exist", details={"tableId": table_id}
            )
        if self._has_active_notification(table_id, notification_type):
            raise DuplicateRequestError(
                f"{notification_type.value} request is already pending for table {table_id}"
            )

    @_synchronized
    def send_assistance_request(self, table_id: TableId) -> None:
        self._ensure_request_allowed(table_id, NotificationType.NEED_ASSISTANCE)
        logger.info(
            "assistance_requested",
            extra={"restaurant_id": self.restaurant_id, "table_id": table_id},
        )
        self.events.emit(AssistanceRequested(table_id=table_id))

    @_synchronized
    def send_check_request(self, table_id: TableId, payment_method: str | PaymentMethod) -> None:
        try:
            method = PaymentMethod(payment_method)
        except ValueError as exc:
            raise ValidationError(f"invalid payment method: {payment_method}") from exc

        self._ensure_request_allowed(table_id, NotificationType.CHECK_REQUESTED)
        logger.info(
            "check_requested",
            extra={
                "restaurant_id": self.restaurant_id,
                "table_id": table_id,
                "payment_method": method.value,
            },
        )
        self.events.emit(CheckRequested(table_id=table_id, payment_method=method))

    # Catalog and administration

    def _data_updated(self, action: str) -> None:
        logger.info(
            "restaurant_data_updated",
            extra={"restaurant_id": self.restaurant_id, "action": action},
        )
        self.events.emit(RestaurantDataUpdated())

    @_synchronized
    def create_dish(
        self,
        category_id: CategoryId,
        image: str,
        price: Decimal,
        discount: Decimal,
        params: DishParams,
    ) -> Dish:
        dish = _build(
            Dish,
            dish_id=DishId(max(self._dishes, default=-1) + 1),
            category_id=category_id,
            image=image,
            price=price,
            discount=discount,
            params=params,
        )
        self._dishes[dish.dish_id] = dish
        self._data_updated("create_dish")
        return dish

    @_synchronized
    def update_dish(
        self,
        dish_id: DishId,
        category_id: CategoryId,
        image: str,
        price: Decimal,
        discount: Decimal,
        params: DishParams,
    ) -> Dish:
        if dish_id not in self._dishes:
            raise NotFoundError(f"dish {dish_id} not found", details={"dishId": dish_id})
        dish = _build(
            Dish,
            dish_id=dish_id,
            category_id=category_id,
            image=image,
            price=price,
            discount=discount,
            params=params,
        )
        self._dishes[dish_id] = dish
        self._data_updated("update_dish")
        return dish

    def _ensure_unique_category_title(self, title: str, exclude: CategoryId | None = None) -> None:
        for category in self._categories.values():
            if category.category_id != exclude and category.title == title:
                raise ValidationError(f"category {title!r} already exists")

    @_synchronized
    def create_category(self, title: str) -> Category:
        category = _build(
            Category,
            category_id=CategoryId(max(self._categories, default=-1) + 1),
            title=title,
        )
        self._ensure_unique_category_title(category.title)
        self._categories[category.category_id] = category
        self._data_updated("create_category")
        return category

    @_synchronized
    def update_category(self, category_id: CategoryId, title: str) -> Category:
        if category_id not in self._categories:
            raise NotFoundError(
                f"category {category_id} not found", details={"categoryId": category_id}
            )
        category = _build(Category, category_id=category_id, title=title)
        self._ensure_unique_category_title(category.title, exclude=category_id)
        self._categories[category_id] = category
        self._data_updated("update_category")
        return category

    @_synchronized
    def delete_category(self, category_id: CategoryId) -> None:
        if category_id not in self._categories:
            raise NotFoundError(
                f"category {category_id} not found", details={"categoryId": category_id}
            )
        del self._categories[category_id]
        self._data_updated("delete_category")

    @_synchronized
    def add_table(self) -> Table:
        table = Table(table_id=TableId(max(self._tables, default=-1) + 1))
        self._tables[table.table_id] = table
        self._data_updated("add_table")
        return table

    @_synchronized
    def delete_table(self, table_id: TableId) -> None:
        table = self._tables.get(table_id)
        if table is None:
            raise NotFoundError(f"table {table_id} not found", details={"tableId": table_id})
        if table.has_active_orders:
            raise ValidationError(
                f"table {table_id} still has active orders",
                details={"activeOrders": list(table.active_orders)},
            )
        del self._tables[table_id]
        self._data_updated("delete_table")

    @_synchronized
    def set_details(
        self,
        name: str,
        description: str,
        logo: str | None = None,
    ) -> RestaurantDetails:
        self._details = _build(
            RestaurantDetails,
            name=name,
            description=description,
            logo=self._details.logo if logo is None else logo,
        )
        self._data_updated("set_details")
        return self._details

    @_synchronized
    def set_theme(self, theme: dict[str, Any]) -> None:
        self._theme = dict(theme)
        self._data_updated("set_theme")
