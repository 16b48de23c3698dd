"""
Notification senders.

A sender delivers one event. It may raise; the dispatcher catches and
logs so checkout never sees the failure.
"""

import logging
from typing import Any, Protocol, runtime_checkable

import httpx

from storefront.core.domain import IntegrationException

logger = logging.getLogger(__name__)


@runtime_checkable
class INotificationSender(Protocol):
    async def send(self, event: str, payload: dict[str, Any]) -> None:
        ...


class WebhookNotificationSender:
    """POSTs `{"event": ..., "data": ...}` to a webhook that fans out email and in-app messages."""

    def __init__(self, url: str, timeout: float = 10.0, client: httpx.AsyncClient | None = None):
        self.url = url
        self.timeout = timeout
        self._client = client

    async def send(self, event: str, payload: dict[str, Any]) -> None:
        body = {"event": event, "data": payload}
        try:
            if self._client is not None:
                response = await self._client.post(self.url, json=body, timeout=self.timeout)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=body)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise IntegrationException("notifications", f"Webhook delivery of {event} failed", e) from e
        logger.debug(f"Delivered {event} to webhook ({response.status_code})")


class LoggingNotificationSender:
    """Fallback used when no webhook is configured."""

    async def send(self, event: str, payload: dict[str, Any]) -> None:
        logger.info(f"Notification {event}: {payload}")
