from __future__ import annotations

import asyncio
import logging
from collections import defaultdict

from fastapi import WebSocket

logger = logging.getLogger(__name__)

RoomKey = tuple[int, str]


class ConnectionManager:
    """Sockets grouped by ``(restaurant_id, room)``; one room per socket."""

    def __init__(self) -> None:
        self._connections: dict[RoomKey, set[WebSocket]] = defaultdict(set)
        self._socket_to_room: dict[WebSocket, RoomKey] = {}
        self._lock = asyncio.Lock()

    async def register(
        self,
        websocket: WebSocket,
        restaurant_id: int,
        room: str,
        roles: str,
    ) -> None:
        await websocket.accept()
        key = (restaurant_id, room)
        async with self._lock:
            self._connections[key].add(websocket)
            self._socket_to_room[websocket] = key
        logger.info(
            "ws_client_connected",
            extra={"restaurant_id": restaurant_id, "room": room, "roles": roles},
        )

    async def unregister(self, websocket: WebSocket) -> None:
        async with self._lock:
            key = self._socket_to_room.pop(websocket, None)
            if key is None:
                return
            sockets = self._connections.get(key)
            if sockets is not None:
                sockets.discard(websocket)
                if not sockets:
                    self._connections.pop(key, None)
        restaurant_id, room = key
        logger.info(
            "ws_client_disconnected",
            extra={"restaurant_id": restaurant_id, "room": room},
        )

    async def connection_count(self, restaurant_id: int, room: str) -> int:
        async with self._lock:
            return len(self._connections.get((restaurant_id, room), ()))

    async def broadcast(self, restaurant_id: int, room: str, message_json_str: str) -> None:
        async with self._lock:
            targets = list(self._connections.get((restaurant_id, room), set()))

        stale: list[WebSocket] = []
        for websocket in targets:
            try:
                await websocket.send_text(message_json_str)
            except Exception:
                stale.append(websocket)

        for websocket in stale:
            await self.unregister(websocket)
