"""
Execution layer: exchange collaborators, order cache, event reconciliation.

ExchangeClient is the entry point; PaperTransport / PaperExchangeInfo run it
without a network, live adapters implement the same transport interfaces.
"""

from odex_core.execution.cache import OrderCache
from odex_core.execution.client import ExchangeClient, RejectedOrderLog
from odex_core.execution.paper import PaperExchangeInfo, PaperTransport
from odex_core.execution.reconciler import EventReconciler
from odex_core.execution.transport import ExchangeInfo, OrderHistoryClient, StreamTransport
from odex_core.execution.types import Fees, SubmitResult, Token, TrackedOrder, TrackedOrderStatus

__all__ = [
    "ExchangeClient",
    "RejectedOrderLog",
    "EventReconciler",
    "OrderCache",
    "ExchangeInfo",
    "StreamTransport",
    "OrderHistoryClient",
    "PaperTransport",
    "PaperExchangeInfo",
    "Fees",
    "SubmitResult",
    "Token",
    "TrackedOrder",
    "TrackedOrderStatus",
]
