"""Anonymous usage telemetry posted to a collector endpoint."""

from __future__ import annotations

import logging
from typing import Any
from uuid import uuid4

import httpx

from config import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class Telemetry:
    """Posts ``{event, distinct_id, properties}`` records; never raises on delivery failure.

    The distinct id is a random per-process value, not tied to any user.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self.settings = settings or default_settings
        self._client = client
        self.distinct_id = str(uuid4())

    def is_configured(self) -> bool:
        return bool(self.settings.telemetry_endpoint) and not self.settings.disable_telemetry

    async def send_telemetry(self, event: str, properties: dict[str, Any]) -> None:
        if not self.is_configured():
            logger.debug("Telemetry disabled, skipping %s", event)
            return
        payload = {
            "event": event,
            "distinct_id": self.distinct_id,
            "properties": properties,
        }
        try:
            if self._client is not None:
                response = await self._client.post(self.settings.telemetry_endpoint, json=payload)
            else:
                async with httpx.AsyncClient(timeout=self.settings.telemetry_timeout) as client:
                    response = await client.post(self.settings.telemetry_endpoint, json=payload)
        except httpx.HTTPError as e:
            logger.warning("Telemetry delivery for %s failed: %s", event, e)
            return
        if response.status_code >= 400:
            logger.warning(
                "Telemetry collector rejected %s: %s", event, response.status_code
            )
