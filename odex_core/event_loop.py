"""
Notifier: single-threaded, in-order delivery of order notifications to consumers.

Handlers are called synchronously in registration order. No I/O.
"""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum


class Notification(str, Enum):
    """Consumer-facing notifications. Added/removed carry the order hash; reset carries nothing."""

    MY_ORDER_ADDED = "my_order_added"
    MY_ORDER_REMOVED = "my_order_removed"
    RESET_ORDERS = "reset_orders"


class Notifier:
    """
    Typed publish/subscribe. A notification is fully delivered to every
    handler before publish() returns.
    """

    def __init__(self) -> None:
        self._handlers: dict[Notification, list[Callable[..., None]]] = {n: [] for n in Notification}

    def subscribe(self, notification: Notification | str, handler: Callable[..., None]) -> None:
        """Register a handler for one notification."""
        self._handlers[Notification(notification)].append(handler)

    def unsubscribe(self, notification: Notification | str, handler: Callable[..., None]) -> None:
        handlers = self._handlers[Notification(notification)]
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, notification: Notification, *args: str) -> None:
        """Deliver one notification through all its handlers in order."""
        for h in list(self._handlers[notification]):
            h(*args)

    def order_added(self, order_hash: str) -> None:
        self.publish(Notification.MY_ORDER_ADDED, order_hash)

    def order_removed(self, order_hash: str) -> None:
        self.publish(Notification.MY_ORDER_REMOVED, order_hash)

    def reset(self) -> None:
        self.publish(Notification.RESET_ORDERS)
