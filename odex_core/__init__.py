"""
odex-core: client-side order construction, signing and tracking for a
decentralized exchange.

Price precision matches the matcher's rules so signed orders are accepted
and local order hashes equal the server's. Transport, signing and exchange
metadata are injected (see odex_core.execution).
"""

__version__ = "0.1.0"

from odex_core.builder import OrderBuilder
from odex_core.config import ExchangeConfig
from odex_core.errors import InvalidAmountError, InvalidPriceError, InvalidSideError, OrderConstructionError
from odex_core.event_loop import Notification, Notifier
from odex_core.events import OrderEvent, OrderEventKind
from odex_core.intent import OrderIntent, Side
from odex_core.order import OrderRecord, SignedCancel, SignedOrder
from odex_core.signing import HmacSigner, OrderSigner, Signer, compute_hash

__all__ = [
    "ExchangeConfig",
    "OrderBuilder",
    "OrderSigner",
    "Signer",
    "HmacSigner",
    "compute_hash",
    "OrderIntent",
    "Side",
    "OrderRecord",
    "SignedOrder",
    "SignedCancel",
    "OrderEvent",
    "OrderEventKind",
    "Notification",
    "Notifier",
    "OrderConstructionError",
    "InvalidSideError",
    "InvalidAmountError",
    "InvalidPriceError",
]
