from __future__ import annotations

from tableside.application.dto.responses import NotificationResponse
from tableside.domain.notification.entities import Notification, extra_data_fields


def to_notification_response(notification: Notification) -> NotificationResponse:
    return NotificationResponse(
        id=str(notification.notification_id),
        time=notification.created_at,
        origin=int(notification.origin),
        type=notification.type.value,
        active=notification.active,
        extraData=extra_data_fields(notification.data),
    )
