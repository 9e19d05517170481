from __future__ import annotations

import json
from datetime import datetime
from typing import Any
from uuid import uuid4


def serialize_event(
    *,
    event_type: str,
    occurred_at: datetime,
    restaurant_id: int,
    room: str,
    payload: dict[str, Any],
    trace_id: str | None,
    request_id: str | None,
) -> str:
    envelope = {
        "event_id": str(uuid4()),
        "event_type": event_type,
        "occurred_at": occurred_at.isoformat(),
        "request_id": request_id,
        "trace_id": trace_id,
        "restaurant_id": restaurant_id,
        "room": room,
        "payload": payload,
    }
    return json.dumps(envelope, separators=(",", ":"), ensure_ascii=False)
