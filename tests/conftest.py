"""
Shared fixtures: a paper exchange with one GBYTE/USDC pair and a local owner.
"""

from __future__ import annotations

import pytest

from odex_core import ExchangeConfig, HmacSigner
from odex_core.execution import ExchangeClient, Fees, PaperExchangeInfo, PaperTransport, Token

OWNER = "OWNER_ADDRESS"
OTHER = "OTHER_ADDRESS"
OPERATOR = "OPERATOR_ADDRESS"
AA = "AA_ADDRESS"

GBYTE = Token(symbol="GBYTE", asset="base", decimals=9)
USDC = Token(symbol="USDC", asset="usdc_asset", decimals=2)
TKN = Token(symbol="TKN", asset="tkn", decimals=0)
QT = Token(symbol="QT", asset="qt", decimals=0)


@pytest.fixture
def config() -> ExchangeConfig:
    return ExchangeConfig(aa_address=AA, max_price_precision=6)


@pytest.fixture
def exchange() -> PaperExchangeInfo:
    return PaperExchangeInfo(
        {"GBYTE-USDC": (GBYTE, USDC), "TKN-QT": (TKN, QT)},
        OPERATOR,
        fees={"USDC": Fees(matcher_fee=0.001, affiliate_fee=0.0005)},
    )


@pytest.fixture
def signer() -> HmacSigner:
    return HmacSigner("test-secret", OWNER)


@pytest.fixture
def transport() -> PaperTransport:
    return PaperTransport(connected=False)


@pytest.fixture
def client(config, exchange, signer, transport) -> ExchangeClient:
    return ExchangeClient(config, exchange, signer, transport, transport, OWNER)


@pytest.fixture
def make_order_payload():
    """Factory for matcher order payloads as pushed on the "orders" stream."""

    def _make(order_hash: str, status: str = "OPEN", owner: str = OWNER, **extra) -> dict:
        return {
            "hash": order_hash,
            "status": status,
            "originalOrder": {
                "signed_message": {
                    "address": owner,
                    "sell_asset": "base",
                    "buy_asset": "usdc_asset",
                    "sell_amount": 1_000_000_000,
                    "price": 2.5e-07,
                    "matcher": OPERATOR,
                },
            },
            **extra,
        }

    return _make


@pytest.fixture
def notifications():
    """Records (name, *args) tuples; attach with `notifications.attach(notifier_or_client)`."""

    class _Recorder(list):
        def attach(self, target) -> None:
            target.subscribe("my_order_added", lambda h: self.append(("added", h)))
            target.subscribe("my_order_removed", lambda h: self.append(("removed", h)))
            target.subscribe("reset_orders", lambda: self.append(("reset",)))

    return _Recorder()
