"""
Paper exchange: in-memory matcher, stream and exchange metadata.

No network connection. PaperTransport keeps an order book of accepted
orders, echoes ORDER_ADDED / ORDER_CANCELLED / ORDER_MATCHED events to its
"orders" subscribers, and serves that book as the authoritative snapshot.
PaperExchangeInfo serves static tokens and fees.
"""

from __future__ import annotations

import inspect
import logging
from collections import defaultdict
from typing import Any

from odex_core.events import OrderEventKind
from odex_core.signing import CANCEL_MESSAGE_PREFIX, compute_payload_hash
from odex_core.execution.transport import ExchangeInfo, OrderHistoryClient, StreamHandler, StreamTransport
from odex_core.execution.types import Fees, SubmitResult, Token, TrackedOrder, TrackedOrderStatus

logger = logging.getLogger(__name__)


class PaperExchangeInfo(ExchangeInfo):
    """
    Static exchange metadata.
    tokens: pair id -> (base Token, quote Token); fees: quote symbol -> Fees.
    """

    def __init__(
        self,
        tokens: dict[str, tuple[Token, Token]],
        operator_address: str,
        *,
        fees: dict[str, Fees] | None = None,
        default_fees: Fees | None = None,
    ) -> None:
        self._tokens = dict(tokens)
        self._operator_address = operator_address
        self._fees = dict(fees or {})
        self._default_fees = default_fees or Fees(matcher_fee=0.0)

    async def get_tokens_by_pair(self, pair: str) -> tuple[Token, Token]:
        if pair not in self._tokens:
            raise KeyError(f"unknown pair: {pair}")
        return self._tokens[pair]

    def get_fees(self, quote_symbol: str) -> Fees:
        return self._fees.get(quote_symbol, self._default_fees)

    def get_operator_address(self) -> str:
        return self._operator_address


class PaperTransport(StreamTransport, OrderHistoryClient):
    """
    Paper matcher. Accepted orders rest in an internal book until cancelled
    or filled via fill(). Submissions are recorded in `sent`; reject_next()
    makes the next submission fail with a reason.
    """

    def __init__(self, *, connected: bool = False, echo_events: bool = True) -> None:
        self._connected = connected
        self._echo_events = echo_events
        self._handlers: dict[str, list[StreamHandler]] = defaultdict(list)
        self._book: dict[str, dict[str, Any]] = {}
        self._rejections: list[str] = []
        self.sent: list[tuple[str, dict[str, Any]]] = []

    def is_connected(self) -> bool:
        return self._connected

    def on(self, event: str, handler: StreamHandler) -> None:
        self._handlers[event].append(handler)

    def off(self, event: str, handler: StreamHandler) -> None:
        if handler in self._handlers[event]:
            self._handlers[event].remove(handler)

    async def emit(self, event: str, *args: Any) -> None:
        """Run each handler to completion, in registration order."""
        for h in list(self._handlers[event]):
            result = h(*args)
            if inspect.isawaitable(result):
                await result

    async def connect(self) -> None:
        self._connected = True
        logger.info("PaperTransport: connected")
        await self.emit("connected")

    async def disconnect(self) -> None:
        self._connected = False
        logger.info("PaperTransport: disconnected")
        await self.emit("disconnected")

    def reject_next(self, reason: str) -> None:
        """Queue a rejection for the next send()."""
        self._rejections.append(reason)

    async def send(self, kind: str, envelope: dict[str, Any]) -> SubmitResult:
        self.sent.append((kind, envelope))
        if self._rejections:
            reason = self._rejections.pop(0)
            logger.info("PaperTransport: %s rejected: %s", kind, reason)
            return SubmitResult(accepted=False, error=reason)
        if kind == "order":
            return await self._accept_order(envelope)
        if kind == "cancel":
            return await self._accept_cancel(envelope)
        return SubmitResult(accepted=False, error=f"unknown kind: {kind}")

    async def _accept_order(self, envelope: dict[str, Any]) -> SubmitResult:
        order_hash = compute_payload_hash(envelope)
        payload = {"hash": order_hash, "status": TrackedOrderStatus.OPEN.value, "originalOrder": envelope}
        self._book[order_hash] = payload
        if self._echo_events:
            await self.emit("orders", OrderEventKind.ORDER_ADDED.value, payload)
        return SubmitResult(accepted=True, response={"hash": order_hash})

    async def _accept_cancel(self, envelope: dict[str, Any]) -> SubmitResult:
        message = envelope.get("signed_message", "")
        order_hash = message[len(CANCEL_MESSAGE_PREFIX):] if message.startswith(CANCEL_MESSAGE_PREFIX) else ""
        if order_hash not in self._book:
            return SubmitResult(accepted=False, error=f"order not found: {order_hash}")
        payload = {**self._book.pop(order_hash), "status": TrackedOrderStatus.CANCELLED.value}
        if self._echo_events:
            await self.emit("orders", OrderEventKind.ORDER_CANCELLED.value, payload)
        return SubmitResult(accepted=True, response={"hash": order_hash})

    async def fill(self, order_hash: str, *, partial: bool = False) -> None:
        """Match a resting order as taker: PARTIAL_FILLED keeps it in the book, FILLED removes it."""
        status = TrackedOrderStatus.PARTIAL_FILLED if partial else TrackedOrderStatus.FILLED
        payload = {**self._book[order_hash], "status": status.value}
        if partial:
            self._book[order_hash] = payload
        else:
            del self._book[order_hash]
        matches = {"matches": {"takerOrder": payload, "makerOrders": []}}
        await self.emit("orders", OrderEventKind.ORDER_MATCHED.value, matches)

    def set_book(self, orders: list[dict[str, Any]]) -> None:
        """Replace the server-side book with raw order payloads (e.g. orders placed while offline)."""
        self._book = {o["hash"]: o for o in orders}

    async def fetch_current_orders(self, owner_address: str) -> list[TrackedOrder]:
        orders = [TrackedOrder.from_payload(p) for p in self._book.values()]
        return [o for o in orders if o.owner == owner_address]
