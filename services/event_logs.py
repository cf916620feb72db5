"""Structured event log: Redis list when REDIS_URL is set, in-process otherwise."""

from __future__ import annotations

import json
import logging
import time
from collections import deque
from typing import Any

from config import Settings, settings as default_settings

logger = logging.getLogger(__name__)

REDIS_EVENT_LOG_KEY = "workspace-chat:event-logs"
MAX_EVENTS = 1000


class EventLogs:
    def __init__(self, settings: Settings | None = None, redis_client=None) -> None:
        self.settings = settings or default_settings
        self._redis = redis_client
        self._recent: deque[dict[str, Any]] = deque(maxlen=MAX_EVENTS)

    def _get_redis(self):
        if self._redis is None and self.settings.redis_url:
            from redis.asyncio import from_url

            self._redis = from_url(self.settings.redis_url, decode_responses=True)
        return self._redis

    async def log_event(
        self, event: str, metadata: dict[str, Any], user_id: int | None = None
    ) -> None:
        record = {
            "event": event,
            "metadata": metadata,
            "userId": user_id,
            "occurredAt": time.time(),
        }
        client = self._get_redis()
        if client is None:
            self._recent.append(record)
            logger.info("Event %s logged for user %s", event, user_id)
            return
        await client.lpush(REDIS_EVENT_LOG_KEY, json.dumps(record))
        await client.ltrim(REDIS_EVENT_LOG_KEY, 0, MAX_EVENTS - 1)

    def recent(self) -> list[dict[str, Any]]:
        """Events kept in-process (only when no Redis is configured)."""
        return list(self._recent)
