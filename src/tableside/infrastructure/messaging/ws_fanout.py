from __future__ import annotations

import asyncio
import logging
from typing import Any

from tableside.application.gateway.rooms import parse_channel_name

logger = logging.getLogger(__name__)

_MAX_BATCH = 100


async def start_ws_fanout(app_state: Any) -> None:
    publisher = app_state.runtime.publisher
    logger.info("ws_fanout_started")

    backoff_seconds = 1.0
    while True:
        try:
            while True:
                delivered = 0
                while delivered < _MAX_BATCH:
                    message = publisher.get_message()
                    if message is None:
                        break
                    delivered += 1

                    channel, payload = message
                    parsed = parse_channel_name(channel)
                    if parsed is None:
                        logger.warning("ws_fanout_invalid_channel", extra={"channel": channel})
                        continue

                    restaurant_id, room = parsed
                    await app_state.ws_manager.broadcast(
                        restaurant_id=restaurant_id,
                        room=room,
                        message_json_str=payload,
                    )

                backoff_seconds = 1.0
                if delivered == 0:
                    await asyncio.sleep(0.05)
        except asyncio.CancelledError:
            logger.info("ws_fanout_cancelled")
            raise
        except Exception:
            logger.exception(
                "ws_fanout_error",
                extra={"backoff_seconds": backoff_seconds},
            )
            await asyncio.sleep(backoff_seconds)
            backoff_seconds = min(backoff_seconds * 2, 5.0)
