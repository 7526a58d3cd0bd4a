"""
Order records and signed envelopes.

Immutable. An OrderRecord is the canonical, signable order in ledger units;
the signer attaches owner, protocol reference and nonce and wraps it in a
SignedOrder. Nothing here talks to the network.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

# Field order of the signed message. Optional fields are omitted when unset.
_MESSAGE_FIELDS = (
    "sell_asset",
    "buy_asset",
    "sell_amount",
    "price",
    "matcher",
    "matcher_fee_asset",
    "matcher_fee",
    "affiliate",
    "affiliate_fee_asset",
    "affiliate_fee",
    "expiry_ts",
    "address",
    "aa",
    "nonce",
)


@dataclass(frozen=True)
class OrderRecord:
    """An order as the matcher sees it. sell_amount and fees are integer ledger units."""

    sell_asset: str
    buy_asset: str
    sell_amount: int
    price: float
    matcher: str
    matcher_fee_asset: str
    matcher_fee: int
    affiliate: str | None = None
    affiliate_fee_asset: str | None = None
    affiliate_fee: int | None = None
    expiry_ts: int | None = None
    # Attached by OrderSigner.finalize_and_sign().
    address: str | None = None
    aa: str | None = None
    nonce: str | None = None

    def to_message(self) -> dict[str, Any]:
        """Signable dict in canonical field order, without unset optional fields."""
        data = asdict(self)
        return {name: data[name] for name in _MESSAGE_FIELDS if data[name] is not None}


@dataclass(frozen=True)
class SignedOrder:
    """Order record plus signature metadata. Its identity is compute_hash(self)."""

    order: OrderRecord
    signature: dict[str, Any] = field(default_factory=dict)
    last_ball_unit: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Wire form sent to the matcher."""
        payload: dict[str, Any] = {"signed_message": self.order.to_message(), **self.signature}
        if self.last_ball_unit is not None:
            payload["last_ball_unit"] = self.last_ball_unit
        return payload


@dataclass(frozen=True)
class SignedCancel:
    """Signed cancellation message for a single order hash."""

    order_hash: str
    message: str
    signature: dict[str, Any] = field(default_factory=dict)
    last_ball_unit: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"signed_message": self.message, **self.signature}
        if self.last_ball_unit is not None:
            payload["last_ball_unit"] = self.last_ball_unit
        return payload
