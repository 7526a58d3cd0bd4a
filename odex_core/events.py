"""
Order events pushed by the matcher over the "orders" stream.

Events are immutable data carriers. The EventReconciler reacts to them;
they do not contain business logic.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class OrderEventKind(str, Enum):
    ORDER_ADDED = "ORDER_ADDED"
    ORDER_CANCELLED = "ORDER_CANCELLED"
    ORDER_MATCHED = "ORDER_MATCHED"


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderEvent:
    """
    One streamed event. kind is kept as received so that kinds added to the
    protocol later pass through and are ignored downstream.
    """

    kind: str
    payload: Any = None
    received_at: datetime = field(default_factory=_now)

    @property
    def known_kind(self) -> OrderEventKind | None:
        """The kind as an OrderEventKind, or None if this client does not know it."""
        try:
            return OrderEventKind(self.kind)
        except ValueError:
            return None
