"""
OrderCache: the local account's orders, keyed by identity hash.

Owned by the EventReconciler, which is its only writer. Consumers get
read-only snapshots (a mapping or a DataFrame), never the live dict.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from types import MappingProxyType

import pandas as pd

from odex_core.execution.types import TrackedOrder

FRAME_COLUMNS = ["hash", "status", "sell_asset", "buy_asset", "sell_amount", "price", "matcher", "expiry_ts"]


class OrderCache:
    """Mapping hash -> TrackedOrder. Mutable; single writer."""

    def __init__(self) -> None:
        self._orders: dict[str, TrackedOrder] = {}

    def __contains__(self, order_hash: object) -> bool:
        return order_hash in self._orders

    def __len__(self) -> int:
        return len(self._orders)

    def get(self, order_hash: str) -> TrackedOrder | None:
        return self._orders.get(order_hash)

    def hashes(self) -> set[str]:
        return set(self._orders)

    def upsert(self, order: TrackedOrder) -> None:
        """Insert or replace the entry for order.hash."""
        self._orders[order.hash] = order

    def remove(self, order_hash: str) -> bool:
        """Drop an entry. Returns False if it was not cached."""
        return self._orders.pop(order_hash, None) is not None

    def clear(self) -> None:
        self._orders.clear()

    def replace_all(self, orders: Iterable[TrackedOrder]) -> None:
        """Wholesale replace: clear, then repopulate from orders."""
        self._orders.clear()
        for order in orders:
            self._orders[order.hash] = order

    def snapshot(self) -> Mapping[str, TrackedOrder]:
        """Read-only copy of the current contents."""
        return MappingProxyType(dict(self._orders))

    def to_frame(self) -> pd.DataFrame:
        """
        One row per cached order with the signed order's main fields.
        Columns are FRAME_COLUMNS even when the cache is empty.
        """
        if not self._orders:
            return pd.DataFrame(columns=FRAME_COLUMNS)
        rows = []
        for order in self._orders.values():
            message = order.original_order.get("signed_message", {})
            rows.append(
                {
                    "hash": order.hash,
                    "status": order.status.value,
                    "sell_asset": message.get("sell_asset"),
                    "buy_asset": message.get("buy_asset"),
                    "sell_amount": message.get("sell_amount"),
                    "price": message.get("price"),
                    "matcher": message.get("matcher"),
                    "expiry_ts": message.get("expiry_ts"),
                }
            )
        return pd.DataFrame(rows, columns=FRAME_COLUMNS)
