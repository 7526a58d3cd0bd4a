"""
Exchange configuration: matcher-enforced constants and protocol references.

Values are asset/network specific, so they are passed in (or read from the
environment) rather than hardcoded at the call sites.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

# Environment variables read by ExchangeConfig.from_env().
AA_ADDRESS_ENV = "ODEX_AA_ADDRESS"
MAX_PRICE_PRECISION_ENV = "ODEX_MAX_PRICE_PRECISION"
DUST_THRESHOLD_ENV = "ODEX_DUST_THRESHOLD"
BASE_ASSET_ENV = "ODEX_BASE_ASSET"

DEFAULT_MAX_PRICE_PRECISION = 6
DEFAULT_DUST_THRESHOLD = 0.5
DEFAULT_BASE_ASSET = "base"
DEFAULT_NONCE_BYTES = 6


@dataclass(frozen=True)
class ExchangeConfig:
    """
    Settings shared by the builder, signer and reconciler.

    - aa_address: protocol/contract reference embedded in every signed order.
    - max_price_precision: significant digits the matcher accepts for a price.
    - dust_threshold: minimum ledger-unit amount of either order leg.
    - base_asset: identifier of the network's base asset.
    - nonce_bytes: random bytes per order nonce.
    """

    aa_address: str
    max_price_precision: int = DEFAULT_MAX_PRICE_PRECISION
    dust_threshold: float = DEFAULT_DUST_THRESHOLD
    base_asset: str = DEFAULT_BASE_ASSET
    nonce_bytes: int = DEFAULT_NONCE_BYTES

    def __post_init__(self) -> None:
        if not self.aa_address:
            raise ValueError("aa_address is required")
        if not 1 <= self.max_price_precision <= 15:
            raise ValueError(f"max_price_precision must be in 1..15, got {self.max_price_precision}")
        if self.dust_threshold < 0:
            raise ValueError(f"dust_threshold must be >= 0, got {self.dust_threshold}")
        if self.nonce_bytes <= 0:
            raise ValueError(f"nonce_bytes must be positive, got {self.nonce_bytes}")

    @classmethod
    def from_env(cls, **overrides: object) -> ExchangeConfig:
        """Build from ODEX_* environment variables; keyword overrides win."""
        values: dict[str, object] = {}
        if os.environ.get(AA_ADDRESS_ENV):
            values["aa_address"] = os.environ[AA_ADDRESS_ENV]
        if os.environ.get(MAX_PRICE_PRECISION_ENV):
            values["max_price_precision"] = int(os.environ[MAX_PRICE_PRECISION_ENV])
        if os.environ.get(DUST_THRESHOLD_ENV):
            values["dust_threshold"] = float(os.environ[DUST_THRESHOLD_ENV])
        if os.environ.get(BASE_ASSET_ENV):
            values["base_asset"] = os.environ[BASE_ASSET_ENV]
        values.update(overrides)
        if "aa_address" not in values:
            raise ValueError(f"aa_address not configured; set {AA_ADDRESS_ENV}")
        return cls(**values)  # type: ignore[arg-type]
