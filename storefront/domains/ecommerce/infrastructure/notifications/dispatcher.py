"""
Background notification dispatcher.

Implements INotificationDispatcher by scheduling each notification as an
asyncio task, so checkout returns without waiting for email or webhooks.
"""

import asyncio
import logging
from typing import Any

from storefront.domains.ecommerce.application.dto import LowStockItem
from storefront.domains.ecommerce.application.ports import INotificationDispatcher
from storefront.domains.ecommerce.domain.entities import DigitalDelivery, Order

from .senders import INotificationSender

logger = logging.getLogger(__name__)

ORDER_CONFIRMED_EVENT = "order.confirmed"
LOW_STOCK_EVENT = "inventory.low_stock"


class BackgroundNotificationDispatcher(INotificationDispatcher):
    """
    Fire-and-forget dispatcher.

    Pending tasks are kept referenced until they finish and can be awaited
    with `drain()` on shutdown.
    """

    def __init__(self, sender: INotificationSender):
        self.sender = sender
        self._tasks: set[asyncio.Task] = set()

    def notify_order_confirmed(
        self,
        order: Order,
        deliveries: list[DigitalDelivery],
        recipient_email: str | None,
    ) -> None:
        payload = {
            "recipient_email": recipient_email,
            "order": order.to_dict(),
            "downloads": [
                {
                    "product_id": str(delivery.product_id),
                    "download_token": delivery.download_token,
                    "file_name": delivery.file_name,
                    "max_downloads": delivery.max_downloads,
                    "expires_at": delivery.expires_at.isoformat() if delivery.expires_at else None,
                }
                for delivery in deliveries
            ],
        }
        self._schedule(ORDER_CONFIRMED_EVENT, payload)

    def notify_low_stock(self, items: list[LowStockItem]) -> None:
        self._schedule(LOW_STOCK_EVENT, {"items": [item.to_dict() for item in items]})

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self) -> None:
        """Wait for every queued notification to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _schedule(self, event: str, payload: dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(self._deliver(event, payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _deliver(self, event: str, payload: dict[str, Any]) -> None:
        try:
            await self.sender.send(event, payload)
        except Exception as e:
            logger.error(f"Notification {event} failed: {e}", exc_info=True)
