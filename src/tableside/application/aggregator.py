from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from tableside.application.events.channel import EventChannel, Handler, Subscription
from tableside.application.store.restaurant_store import RestaurantStore
from tableside.domain.common.clock import Clock, utcnow
from tableside.domain.common.errors import NotFoundError
from tableside.domain.common.ids import RestaurantId, TableId, new_notification_id
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
    RestaurantEvent,
)
from tableside.domain.notification.entities import (
    AssistanceData,
    CheckRequestedData,
    ItemCancelledData,
    NewOrderData,
    Notification,
    NotificationData,
    NotificationType,
    ReadyForDeliveryData,
)
from tableside.domain.order.entities import OrderItemStatus, OrderStatus
from tableside.domain.order.status import derive_order_status

logger = logging.getLogger(__name__)

_FORWARDED_EVENTS: tuple[type, ...] = (
    NewOrder,
    OrderStatusUpdated,
    OrderItemStatusUpdated,
    NotificationStatusUpdated,
    NewNotification,
    FinishedOrCancelledOrder,
    RestaurantDataUpdated,
    AssistanceRequested,
    CheckRequested,
)

# Subscribers see these before their follow-up notification or finalization.
_FORWARD_BEFORE_REACTING: frozenset[type] = frozenset({NewOrder, OrderStatusUpdated})


def _restaurant_event_key(tagged: RestaurantEvent) -> type:
    return type(tagged.event)


class Aggregator:
    """Reacts to every restaurant's events and re-emits them tagged with the restaurant id.

    Item status updates and table requests are handled before they are
    re-emitted, so subscribers observe the derived order status, recomputed
    prices and synthesized notification. New orders and order status updates
    are re-emitted first and followed by their notification or finalization.
    """

    def __init__(
        self,
        restaurants: Iterable[RestaurantStore] = (),
        clock: Clock = utcnow,
    ) -> None:
        self._restaurants: dict[RestaurantId, RestaurantStore] = {}
        self._subscriptions: dict[RestaurantId, list[Subscription]] = {}
        self._clock = clock
        self.events: EventChannel[RestaurantEvent] = EventChannel(
            dispatch_key=_restaurant_event_key
        )
        for restaurant in restaurants:
            self.attach(restaurant)

    @property
    def restaurants(self) -> list[RestaurantStore]:
        return list(self._restaurants.values())

    def get_restaurant(self, restaurant_id: RestaurantId) -> RestaurantStore:
        restaurant = self._restaurants.get(restaurant_id)
        if restaurant is None:
            raise NotFoundError(
                f"restaurant {restaurant_id} not found",
                details={"restaurantId": restaurant_id},
            )
        return restaurant

    def subscribe(self, event_type: type, handler: Handler) -> Subscription:
        """Register ``handler(tagged)`` for a domain event type."""
        return self.events.subscribe(event_type, handler)

    def attach(self, restaurant: RestaurantStore) -> None:
        if restaurant.restaurant_id in self._restaurants:
            raise ValueError(f"restaurant {restaurant.restaurant_id} is already attached")

        reactions: dict[type, Callable[[RestaurantStore, DomainEvent], None]] = {
            NewOrder: self._on_new_order,
            OrderStatusUpdated: self._on_order_status_updated,
            OrderItemStatusUpdated: self._on_order_item_status_updated,
            AssistanceRequested: self._on_assistance_requested,
            CheckRequested: self._on_check_requested,
        }

        def make_handler(event_type: type) -> Handler:
            reaction = reactions.get(event_type)
            react_first = event_type not in _FORWARD_BEFORE_REACTING

            def handle(event: DomainEvent) -> None:
                if reaction is not None and react_first:
                    reaction(restaurant, event)
                self.events.emit(
                    RestaurantEvent(restaurant_id=restaurant.restaurant_id, event=event)
                )
                if reaction is not None and not react_first:
                    reaction(restaurant, event)

            return handle

        self._restaurants[restaurant.restaurant_id] = restaurant
        self._subscriptions[restaurant.restaurant_id] = [
            restaurant.subscribe(event_type, make_handler(event_type))
            for event_type in _FORWARDED_EVENTS
        ]

    def detach(self, restaurant_id: RestaurantId) -> None:
        for subscription in self._subscriptions.pop(restaurant_id, []):
            subscription.cancel()
        self._restaurants.pop(restaurant_id, None)

    def _on_new_order(self, restaurant: RestaurantStore, event: NewOrder) -> None:
        order = event.order
        self._send_notification(
            restaurant,
            order.origin,
            NotificationType.NEW_ORDER,
            NewOrderData(order_ids=(order.order_id,)),
        )

    def _on_order_status_updated(
        self,
        restaurant: RestaurantStore,
        event: OrderStatusUpdated,
    ) -> None:
        if event.new_status in (OrderStatus.FINISHED, OrderStatus.CANCELLED):
            restaurant.finish_order(event.order)

    def _on_order_item_status_updated(
        self,
        restaurant: RestaurantStore,
        event: OrderItemStatusUpdated,
    ) -> None:
        order = event.order
        item = event.item
        # Item updates only steer the order status while it is still open.
        order.status = derive_order_status(order)

        if event.new_status == OrderItemStatus.PREPARED:
            self._send_notification(
                restaurant,
                order.origin,
                NotificationType.READY_FOR_DELIVERY,
                ReadyForDeliveryData(order_ids=(order.order_id,), order_item_id=item.item_id),
            )

        if event.new_status == OrderItemStatus.CANCELLED:
            restaurant.recalculate_prices(order)
            self._send_notification(
                restaurant,
                order.origin,
                NotificationType.ORDER_ITEM_CANCELLED,
                ItemCancelledData(order_ids=(order.order_id,), order_item_id=item.item_id),
            )

    def _on_assistance_requested(
        self,
        restaurant: RestaurantStore,
        event: AssistanceRequested,
    ) -> None:
        self._send_notification(
            restaurant,
            event.table_id,
            NotificationType.NEED_ASSISTANCE,
            AssistanceData(),
        )

    def _on_check_requested(self, restaurant: RestaurantStore, event: CheckRequested) -> None:
        order_ids = tuple(order.order_id for order in restaurant.get_table_orders(event.table_id))
        self._send_notification(
            restaurant,
            event.table_id,
            NotificationType.CHECK_REQUESTED,
            CheckRequestedData(order_ids=order_ids, payment_method=event.payment_method),
        )

    def _send_notification(
        self,
        restaurant: RestaurantStore,
        origin: TableId,
        notification_type: NotificationType,
        data: NotificationData,
    ) -> None:
        # The triggering mutation is already committed; a failed notification
        # must not unwind it.
        try:
            notification = Notification(
                notification_id=new_notification_id(),
                created_at=self._clock(),
                origin=origin,
                type=notification_type,
                data=data,
                active=True,
            )
            restaurant.create_notification(notification)
        except Exception:
            logger.exception(
                "notification_synthesis_failed",
                extra={
                    "restaurant_id": restaurant.restaurant_id,
                    "table_id": origin,
                    "notification_type": notification_type.value,
                },
            )
            return

        logger.info(
            "notification_created",
            extra={
                "restaurant_id": restaurant.restaurant_id,
                "table_id": origin,
                "notification_type": notification_type.value,
            },
        )
