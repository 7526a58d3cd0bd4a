"""
Abstractions over the exchange's external collaborators.

ExchangeInfo: token/pair and fee lookups. StreamTransport: persistent event
stream plus order/cancel submission. OrderHistoryClient: request/response
fallback used for full resynchronization. PaperTransport and
PaperExchangeInfo implement them in memory; real websocket/REST clients
implement the same interfaces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from typing import Any

from odex_core.execution.types import Fees, SubmitResult, Token, TrackedOrder

# A stream handler may be a plain function or a coroutine function.
StreamHandler = Callable[..., "Awaitable[None] | None"]


class ExchangeInfo(ABC):
    """Token and fee metadata. Same interface for paper and live exchanges."""

    @abstractmethod
    async def get_tokens_by_pair(self, pair: str) -> tuple[Token, Token]:
        """Resolve a pair id (e.g. "GBYTE-USDC") to its (base, quote) tokens."""
        ...

    @abstractmethod
    def get_fees(self, quote_symbol: str) -> Fees:
        """Matcher and affiliate fee rates for orders quoted in quote_symbol."""
        ...

    @abstractmethod
    def get_operator_address(self) -> str:
        """Address of the default matcher operator (also the affiliate)."""
        ...


class StreamTransport(ABC):
    """
    Persistent streaming connection to the matcher.

    Events are delivered one at a time in delivery order: emit() runs every
    handler for an event, awaiting coroutine handlers, before returning.
    Reconnect/heartbeat logic belongs to the implementation.
    """

    @abstractmethod
    def is_connected(self) -> bool:
        ...

    @abstractmethod
    def on(self, event: str, handler: StreamHandler) -> None:
        """Register handler for event ("orders", "connected", ...)."""
        ...

    @abstractmethod
    def off(self, event: str, handler: StreamHandler) -> None:
        """Remove a handler registered with on(). Unknown handlers are ignored."""
        ...

    @abstractmethod
    async def emit(self, event: str, *args: Any) -> None:
        ...

    @abstractmethod
    async def send(self, kind: str, envelope: dict[str, Any]) -> SubmitResult:
        """
        Submit a signed envelope ("order" or "cancel"). Returns the matcher's
        accept/reject response; rejection is a normal outcome, not an exception.
        """
        ...


class OrderHistoryClient(ABC):
    """Request/response fallback channel."""

    @abstractmethod
    async def fetch_current_orders(self, owner_address: str) -> list[TrackedOrder]:
        """Authoritative list of the owner's current (open / partially filled) orders."""
        ...
