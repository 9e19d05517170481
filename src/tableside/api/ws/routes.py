from __future__ import annotations

import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from tableside.api.authorization import (
    Principal,
    Role,
    has_role,
    has_table_permissions,
    parse_roles,
)
from tableside.api.ws.manager import ConnectionManager
from tableside.application.gateway.rooms import ADMIN, KITCHEN, USERS, WAITER, parse_table_room
from tableside.domain.common.ids import RestaurantId

router = APIRouter()
logger = logging.getLogger(__name__)

_ROOM_ROLES: dict[str, Role] = {
    USERS: Role.USER,
    WAITER: Role.WAITER,
    KITCHEN: Role.KITCHEN,
    ADMIN: Role.ADMIN,
}


def _parse_int(value: str | None) -> int | None:
    if value is None or not value.strip().isdigit():
        return None
    return int(value)


def can_join_room(principal: Principal, restaurant_id: int, room: str) -> bool:
    table_id = parse_table_room(room)
    if table_id is not None:
        return has_role(principal, restaurant_id, Role.USER) and has_table_permissions(
            principal, table_id
        )
    role = _ROOM_ROLES.get(room)
    if role is None:
        return False
    return has_role(principal, restaurant_id, role)


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket) -> None:
    params = websocket.query_params
    restaurant_id = _parse_int(params.get("restaurant_id"))
    room = params.get("room")
    roles = params.get("role", "")
    if restaurant_id is None or not room:
        await websocket.close(
            code=1008, reason="restaurant_id and room query parameters are required"
        )
        return

    runtime = websocket.app.state.runtime
    if restaurant_id not in {r.restaurant_id for r in runtime.aggregator.restaurants}:
        await websocket.close(code=1008, reason=f"restaurant {restaurant_id} not found")
        return

    principal = Principal(
        roles=parse_roles(roles),
        restaurant_id=restaurant_id,
        table_id=_parse_int(params.get("table_id")),
    )
    if not can_join_room(principal, RestaurantId(restaurant_id), room):
        logger.warning(
            "ws_join_denied",
            extra={"restaurant_id": restaurant_id, "room": room, "roles": roles},
        )
        await websocket.close(code=1008, reason=f"not allowed to join room {room}")
        return

    manager: ConnectionManager = websocket.app.state.ws_manager
    await manager.register(websocket=websocket, restaurant_id=restaurant_id, room=room, roles=roles)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)
    except Exception:
        logger.exception(
            "ws_connection_error",
            extra={"restaurant_id": restaurant_id, "room": room},
        )
        await manager.unregister(websocket)
