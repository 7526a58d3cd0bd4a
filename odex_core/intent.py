"""
OrderIntent: human-level trade intent supplied by the caller.

Immutable and consumed once by the OrderBuilder. Amounts and prices are in
human units; no ledger scaling or precision rules applied yet.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from odex_core.errors import InvalidSideError


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def coerce(cls, value: Side | str) -> Side:
        """Accept a Side or its name in any case; InvalidSideError otherwise."""
        if isinstance(value, Side):
            return value
        if isinstance(value, str):
            try:
                return cls(value.upper())
            except ValueError:
                pass
        raise InvalidSideError(value)


@dataclass(frozen=True)
class OrderIntent:
    """Trade intent: pair, side, amount of base asset, quote-per-base price."""

    pair: str
    side: Side
    amount: float
    price: float
    matcher: str | None = None
    expiry_ts: int | None = None
