"""
Ecommerce Infrastructure Notifications
"""

from .dispatcher import LOW_STOCK_EVENT, ORDER_CONFIRMED_EVENT, BackgroundNotificationDispatcher
from .senders import INotificationSender, LoggingNotificationSender, WebhookNotificationSender

__all__ = [
    "BackgroundNotificationDispatcher",
    "INotificationSender",
    "LoggingNotificationSender",
    "WebhookNotificationSender",
    "LOW_STOCK_EVENT",
    "ORDER_CONFIRMED_EVENT",
]
