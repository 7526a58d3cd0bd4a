"""
ExchangeClient: create, sign, submit and track orders for one account.

Flow: intent → OrderBuilder → OrderSigner → transport.send. Independently,
transport events → EventReconciler → OrderCache → consumer notifications.
Cache membership, not submission return values, is authoritative for
"my open orders".
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

import pandas as pd

from odex_core.builder import OrderBuilder
from odex_core.config import ExchangeConfig
from odex_core.event_loop import Notification, Notifier
from odex_core.intent import Side
from odex_core.order import SignedCancel, SignedOrder
from odex_core.signing import OrderSigner, Signer, compute_hash
from odex_core.execution.cache import OrderCache
from odex_core.execution.reconciler import EventReconciler
from odex_core.execution.transport import ExchangeInfo, OrderHistoryClient, StreamTransport
from odex_core.execution.types import SubmitResult, TrackedOrder

logger = logging.getLogger(__name__)

ORDER_KIND = "order"
CANCEL_KIND = "cancel"


@dataclass
class RejectedOrderLog:
    """One entry for an order the matcher rejected."""

    reason: str
    order_hash: str
    envelope: SignedOrder
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class ExchangeClient:
    """
    Client-side order component for one owner address.

    Collaborators are injected: exchange metadata, the opaque signer, the
    streaming transport and the request/response history client. Swap the
    paper implementations for live ones without touching this class.
    """

    def __init__(
        self,
        config: ExchangeConfig,
        exchange: ExchangeInfo,
        signer: Signer,
        transport: StreamTransport,
        history: OrderHistoryClient,
        owner_address: str,
    ) -> None:
        self.config = config
        self.transport = transport
        self.owner_address = owner_address
        self.builder = OrderBuilder(exchange, config)
        self.order_signer = OrderSigner(signer, owner_address, config)
        self._cache = OrderCache()
        self._notifier = Notifier()
        self.reconciler = EventReconciler(
            transport, history, owner_address, cache=self._cache, notifier=self._notifier
        )
        self._rejected_log: list[RejectedOrderLog] = []

    async def create_order(
        self,
        pair: str,
        side: Side | str,
        amount: float,
        price: float,
        matcher: str | None = None,
        expiry_ts: int | None = None,
    ) -> SignedOrder:
        """Build and sign an order. Construction errors are raised before any network call."""
        record = await self.builder.build_order(pair, side, amount, price, matcher, expiry_ts)
        return await self.order_signer.finalize_and_sign(record)

    async def create_cancel(self, order_hash: str) -> SignedCancel:
        return await self.order_signer.build_cancellation(order_hash)

    @staticmethod
    def get_order_hash(envelope: SignedOrder) -> str:
        return compute_hash(envelope)

    async def create_and_send_order(
        self,
        pair: str,
        side: Side | str,
        amount: float,
        price: float,
        matcher: str | None = None,
        expiry_ts: int | None = None,
    ) -> str | None:
        """
        Create, sign and submit an order. Returns its hash, or None if the
        matcher rejected it (see get_rejected_log()).
        """
        signed = await self.create_order(pair, side, amount, price, matcher, expiry_ts)
        order_hash = compute_hash(signed)
        result = await self.transport.send(ORDER_KIND, signed.to_payload())
        if not result.accepted:
            reason = result.error or "rejected"
            self._rejected_log.append(RejectedOrderLog(reason=reason, order_hash=order_hash, envelope=signed))
            logger.info("Order rejected: hash=%s, reason=%s", order_hash, reason)
            return None
        logger.info("Order submitted: hash=%s, pair=%s, side=%s", order_hash, pair, Side.coerce(side).value)
        return order_hash

    async def create_and_send_cancel(self, order_hash: str) -> SubmitResult:
        """Sign and submit a cancellation. The cache changes only when the matcher confirms via events."""
        signed = await self.create_cancel(order_hash)
        result = await self.transport.send(CANCEL_KIND, signed.to_payload())
        logger.info("Cancel submitted: hash=%s, accepted=%s", order_hash, result.accepted)
        return result

    def get_rejected_log(self) -> list[RejectedOrderLog]:
        """Return log of rejected orders for debugging and reporting."""
        return list(self._rejected_log)

    async def track_my_orders(self) -> None:
        """Start the EventReconciler. Calling it again while tracking is a no-op."""
        await self.reconciler.start()

    def stop_tracking(self) -> None:
        self.reconciler.stop()

    @property
    def my_orders(self) -> Mapping[str, TrackedOrder]:
        """Read-only snapshot of the local order cache."""
        return self._cache.snapshot()

    def my_orders_frame(self) -> pd.DataFrame:
        return self._cache.to_frame()

    def subscribe(self, notification: Notification | str, handler: Callable[..., None]) -> None:
        """Register for my_order_added(hash), my_order_removed(hash) or reset_orders()."""
        self._notifier.subscribe(notification, handler)

    def unsubscribe(self, notification: Notification | str, handler: Callable[..., None]) -> None:
        self._notifier.unsubscribe(notification, handler)
