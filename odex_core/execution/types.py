"""
Execution-layer types: tokens and fees from the exchange, tracked order state,
submission results.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Token:
    """A resolved asset: display symbol, ledger asset id, decimal scale."""

    symbol: str
    asset: str
    decimals: int

    @property
    def multiplier(self) -> int:
        """Ledger units per human unit."""
        return 10 ** self.decimals


@dataclass(frozen=True)
class Fees:
    """Fee rates for a quote asset. affiliate_fee is 0 when no affiliate fee applies."""

    matcher_fee: float
    affiliate_fee: float = 0.0


class TrackedOrderStatus(str, Enum):
    """Server-side status of an order."""

    OPEN = "OPEN"
    PARTIAL_FILLED = "PARTIAL_FILLED"
    FILLED = "FILLED"
    CANCELLED = "CANCELLED"

    @property
    def is_terminal(self) -> bool:
        return self in (TrackedOrderStatus.FILLED, TrackedOrderStatus.CANCELLED)


@dataclass(frozen=True)
class TrackedOrder:
    """
    Last-known state of an order, keyed by its identity hash.

    original_order is the signed order as the matcher echoes it
    ({"signed_message": {...}, ...}); details keeps the remaining payload
    fields (fills, match metadata) untouched.
    """

    hash: str
    status: TrackedOrderStatus
    owner: str
    original_order: dict[str, Any] = field(default_factory=dict)
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> TrackedOrder:
        """
        Parse a matcher order payload.

        Raises KeyError on missing fields and ValueError on an unknown status.
        """
        original = payload["originalOrder"]
        details = {k: v for k, v in payload.items() if k not in ("hash", "status", "originalOrder")}
        return cls(
            hash=payload["hash"],
            status=TrackedOrderStatus(payload["status"]),
            owner=original["signed_message"]["address"],
            original_order=original,
            details=details,
        )


@dataclass(frozen=True)
class SubmitResult:
    """Matcher response to a submitted envelope. Immutable."""

    accepted: bool
    error: str | None = None
    response: Any = None
