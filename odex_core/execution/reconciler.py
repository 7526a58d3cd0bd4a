"""
EventReconciler: keeps the OrderCache in line with the matcher.

Streamed "orders" events are classified and applied one at a time; on every
(re)connect the cache is replaced wholesale with an authoritative snapshot
from the request/response channel. Snapshot-then-stream is what recovers
events missed while disconnected.
"""

from __future__ import annotations

import logging
from typing import Any

from odex_core.event_loop import Notification, Notifier
from odex_core.events import OrderEvent, OrderEventKind
from odex_core.execution.cache import OrderCache
from odex_core.execution.transport import OrderHistoryClient, StreamTransport
from odex_core.execution.types import TrackedOrder, TrackedOrderStatus

logger = logging.getLogger(__name__)

ORDERS_STREAM = "orders"
CONNECTED_EVENT = "connected"

_LIVE_STATUSES = (TrackedOrderStatus.OPEN, TrackedOrderStatus.PARTIAL_FILLED)


def _owner_of(payload: dict[str, Any]) -> str | None:
    return payload.get("originalOrder", {}).get("signed_message", {}).get("address")


class EventReconciler:
    """
    Applies order events for one owner address to an OrderCache and
    publishes my_order_added / my_order_removed / reset_orders.

    Orders of other participants are observed but never retained. Resync is
    not locked against event handling: whatever an event changed during the
    snapshot fetch is overwritten by the snapshot.
    """

    def __init__(
        self,
        transport: StreamTransport,
        history: OrderHistoryClient,
        owner_address: str,
        *,
        cache: OrderCache | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self.transport = transport
        self.history = history
        self.owner_address = owner_address
        self.cache = cache if cache is not None else OrderCache()
        self.notifier = notifier if notifier is not None else Notifier()
        self._started = False
        # Hashes evicted by a terminal event since the last resync; stale replays must not revive them.
        self._terminal: set[str] = set()
        self._resync_generation = 0

    @property
    def started(self) -> bool:
        return self._started

    async def start(self) -> None:
        """Subscribe to the stream and resync now if the transport is already connected."""
        if self._started:
            logger.warning("EventReconciler already started for %s; ignoring", self.owner_address)
            return
        self._started = True
        self.transport.on(ORDERS_STREAM, self.handle_orders_event)
        self.transport.on(CONNECTED_EVENT, self._on_connected)
        logger.info("Tracking orders of %s", self.owner_address)
        # The "connected" event for the current connection has already been missed.
        if self.transport.is_connected():
            await self.resync()

    def stop(self) -> None:
        """Unsubscribe and drop cached state. In-flight resyncs are discarded."""
        if not self._started:
            return
        self.transport.off(ORDERS_STREAM, self.handle_orders_event)
        self.transport.off(CONNECTED_EVENT, self._on_connected)
        self._started = False
        self._resync_generation += 1
        self._terminal.clear()
        self.cache.clear()
        logger.info("Stopped tracking orders of %s", self.owner_address)

    async def _on_connected(self) -> None:
        await self.resync()

    async def resync(self) -> None:
        """Replace the cache with the matcher's current orders and publish reset_orders once."""
        self._resync_generation += 1
        generation = self._resync_generation
        orders = await self.history.fetch_current_orders(self.owner_address)
        if generation != self._resync_generation:
            logger.info("Discarding superseded order snapshot (%d orders)", len(orders))
            return
        mine = [o for o in orders if o.owner == self.owner_address]
        self.cache.replace_all(mine)
        self._terminal.clear()
        logger.info("Order cache resynchronized: %d orders", len(mine))
        self.notifier.reset()

    def handle_orders_event(self, kind: str, payload: Any = None) -> None:
        """Handler for the transport's "orders" stream."""
        self.apply(OrderEvent(kind=kind, payload=payload))

    def apply(self, event: OrderEvent) -> None:
        """
        Classify one event and apply it to the cache. Unknown kinds are ignored.

        Each order inside an event is applied on its own: a malformed or
        foreign order is skipped without dropping the rest of the event.
        Notifications are published only after every cache change is made.
        """
        logger.debug("Order event: kind=%s, payload=%s", event.kind, event.payload)
        kind = event.known_kind
        if kind is None:
            return
        try:
            if kind == OrderEventKind.ORDER_CANCELLED:
                order_hash = event.payload["hash"]
                owner = _owner_of(event.payload)
            elif kind == OrderEventKind.ORDER_ADDED:
                payloads = [event.payload]
            else:
                matches = event.payload["matches"]
                payloads = [matches["takerOrder"], *matches.get("makerOrders", [])]
        except (KeyError, TypeError, AttributeError) as e:
            logger.warning("Skipping malformed %s event: %r", event.kind, e)
            return

        pending: list[tuple[Notification, str]] = []
        if kind == OrderEventKind.ORDER_CANCELLED:
            self._order_cancelled(order_hash, owner, pending)
        else:
            apply_order = self._order_added if kind == OrderEventKind.ORDER_ADDED else self._update_my_order
            for payload in payloads:
                order = self._parse_my_order(payload, event.kind)
                if order is not None:
                    apply_order(order, pending)

        for notification, order_hash in pending:
            self.notifier.publish(notification, order_hash)

    def _parse_my_order(self, payload: Any, kind: str) -> TrackedOrder | None:
        """TrackedOrder for a local-account payload; None for other owners and malformed orders."""
        try:
            if _owner_of(payload) != self.owner_address:
                return None
            return TrackedOrder.from_payload(payload)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            logger.warning("Skipping malformed order in %s event: %r", kind, e)
            return None

    def _order_added(self, order: TrackedOrder, pending: list[tuple[Notification, str]]) -> None:
        if order.status not in _LIVE_STATUSES:
            return
        if order.hash in self._terminal:
            logger.debug("Ignoring stale ORDER_ADDED for closed order %s", order.hash)
            return
        self.cache.upsert(order)
        pending.append((Notification.MY_ORDER_ADDED, order.hash))

    def _order_cancelled(self, order_hash: str, owner: str | None, pending: list[tuple[Notification, str]]) -> None:
        removed = self.cache.remove(order_hash)
        mine = owner == self.owner_address
        # Other participants' cancels are not remembered unless they evicted a cached order.
        if removed or mine:
            self._terminal.add(order_hash)
        if removed and mine:
            pending.append((Notification.MY_ORDER_REMOVED, order_hash))

    def _update_my_order(self, order: TrackedOrder, pending: list[tuple[Notification, str]]) -> None:
        if order.status.is_terminal:
            self.cache.remove(order.hash)
            self._terminal.add(order.hash)
            pending.append((Notification.MY_ORDER_REMOVED, order.hash))
        elif order.hash in self._terminal:
            logger.debug("Ignoring stale match update for closed order %s", order.hash)
        else:
            self.cache.upsert(order)
            pending.append((Notification.MY_ORDER_ADDED, order.hash))
