"""
Order signing and identity hashing.

The signing primitive is opaque (Signer). OrderSigner turns an OrderRecord
into a SignedOrder by attaching owner, protocol reference and a single-use
nonce; compute_hash() derives the identity hash the matcher computes for the
same order. Any change to the hashed fields or their order breaks hash
compatibility with the matcher.
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import secrets
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from odex_core.config import ExchangeConfig
from odex_core.order import OrderRecord, SignedCancel, SignedOrder
from odex_core.precision import hash_price

logger = logging.getLogger(__name__)

# Signing domains: an order signature must never verify as a cancel and vice versa.
ORDER_CONTEXT = "order"
CANCEL_CONTEXT = "cancel"

CANCEL_MESSAGE_PREFIX = "Cancel order "


class Signer(ABC):
    """Opaque signing capability bound to an identity. Failures are fatal, not retried."""

    @abstractmethod
    async def sign(self, payload: dict[str, Any] | str, context: str) -> dict[str, Any]:
        """
        Sign payload within a signing context. Returns signature metadata
        (e.g. authors/authentifiers); may include "last_ball_unit".
        """
        ...


class HmacSigner(Signer):
    """
    Shared-secret signer: HMAC-SHA256 over canonical JSON of (context, payload).

    For paper trading and tests; a matcher verifying real orders needs the
    wallet's signature scheme.
    """

    def __init__(self, secret: str, address: str, *, last_ball_unit: str | None = None) -> None:
        self._secret = secret.encode("utf-8")
        self.address = address
        self.last_ball_unit = last_ball_unit

    async def sign(self, payload: dict[str, Any] | str, context: str) -> dict[str, Any]:
        signing_input = json.dumps(
            {"context": context, "payload": payload}, sort_keys=True, separators=(",", ":")
        ).encode("utf-8")
        digest = hmac.new(self._secret, signing_input, hashlib.sha256).digest()
        metadata: dict[str, Any] = {
            "authors": [
                {"address": self.address, "authentifiers": {"r": base64.b64encode(digest).decode("ascii")}}
            ]
        }
        if self.last_ball_unit is not None:
            metadata["last_ball_unit"] = self.last_ball_unit
        return metadata


def _order_hash(message: Mapping[str, Any], last_ball_unit: str | None) -> str:
    data = (
        f"{message['address']}{message['sell_asset']}{message['buy_asset']}{message['sell_amount']}"
        f"{hash_price(message['price'])}{message.get('nonce') or ''}{last_ball_unit or '-'}"
    )
    return base64.b64encode(hashlib.sha256(data.encode("utf-8")).digest()).decode("ascii")


def compute_hash(envelope: SignedOrder) -> str:
    """Identity hash of a signed order: base64(sha256(concatenated fields))."""
    return _order_hash(envelope.order.to_message(), envelope.last_ball_unit)


def compute_payload_hash(payload: Mapping[str, Any]) -> str:
    """Identity hash of a signed order in wire form ({"signed_message": {...}, ...})."""
    return _order_hash(payload["signed_message"], payload.get("last_ball_unit"))


def new_nonce(num_bytes: int) -> str:
    """Cryptographically random URL-safe nonce."""
    return base64.urlsafe_b64encode(secrets.token_bytes(num_bytes)).decode("ascii").rstrip("=")


class OrderSigner:
    """Finalizes and signs orders and cancellations for one owner address."""

    def __init__(self, signer: Signer, owner_address: str, config: ExchangeConfig) -> None:
        self.signer = signer
        self.owner_address = owner_address
        self.config = config

    async def finalize_and_sign(self, record: OrderRecord) -> SignedOrder:
        order = replace(
            record,
            address=self.owner_address,
            aa=self.config.aa_address,
            nonce=new_nonce(self.config.nonce_bytes),
        )
        metadata = dict(await self.signer.sign(order.to_message(), ORDER_CONTEXT))
        last_ball_unit = metadata.pop("last_ball_unit", None)
        signed = SignedOrder(order=order, signature=metadata, last_ball_unit=last_ball_unit)
        logger.debug("Signed order: nonce=%s, sell_amount=%s, price=%s", order.nonce, order.sell_amount, order.price)
        return signed

    async def build_cancellation(self, order_hash: str) -> SignedCancel:
        message = CANCEL_MESSAGE_PREFIX + order_hash
        metadata = dict(await self.signer.sign(message, CANCEL_CONTEXT))
        last_ball_unit = metadata.pop("last_ball_unit", None)
        return SignedCancel(order_hash=order_hash, message=message, signature=metadata, last_ball_unit=last_ball_unit)
