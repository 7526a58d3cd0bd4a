"""
Tests for price precision: first-asset rule, significant-digit rounding,
side-dependent inversion, and hash rendering.
"""

from decimal import Decimal

import pytest

from odex_core.errors import InvalidPriceError, InvalidSideError
from odex_core.precision import (
    adjust_price_to_allowed_precision,
    drop_excessive_precision,
    get_first_asset,
    hash_price,
    price_in_allowed_precision,
)


# --- first asset ---


def test_first_asset_base_always_first():
    assert get_first_asset("base", "aaa") == "base"
    assert get_first_asset("aaa", "base") == "base"


def test_first_asset_lexicographic():
    assert get_first_asset("tkn", "qt") == "qt"
    assert get_first_asset("qt", "tkn") == "qt"


def test_first_asset_custom_network_base():
    assert get_first_asset("zzz", "aaa", network_base="zzz") == "zzz"


# --- significant digits ---


def test_drop_excessive_precision_mid_magnitude():
    assert drop_excessive_precision(10.123456789, 6) == 10.1235


def test_drop_excessive_precision_small_and_large():
    assert drop_excessive_precision(0.000123456789, 6) == 0.000123457
    assert drop_excessive_precision(123456789.0, 6) == 123457000.0


def test_drop_excessive_precision_ties_round_up():
    # 0.125 is exact in binary; the matcher rounds the tie up, %g would give 0.12
    assert drop_excessive_precision(0.125, 2) == 0.13
    assert drop_excessive_precision(2.5, 1) == 3.0


@pytest.mark.parametrize("price", [0, -1.0, float("nan"), float("inf")])
def test_invalid_price_rejected(price):
    with pytest.raises(InvalidPriceError):
        drop_excessive_precision(price, 6)
    with pytest.raises(InvalidPriceError):
        price_in_allowed_precision("base", "usdc_asset", price, 6)


@pytest.mark.parametrize("price", [10.123456789, 0.000987654321, 31415926.5358, 1 / 3])
@pytest.mark.parametrize("assets", [("base", "usdc_asset"), ("usdc_asset", "base"), ("tkn", "qt")])
def test_normalization_idempotent(price, assets):
    once = price_in_allowed_precision(*assets, price, 6)
    assert price_in_allowed_precision(*assets, once, 6) == once


def test_sell_and_buy_views_are_reciprocal():
    price = 10.123456789
    sell_view = price_in_allowed_precision("base", "usdc_asset", price, 6)
    buy_view = price_in_allowed_precision("usdc_asset", "base", 1 / price, 6)
    assert sell_view == 10.1235
    assert buy_view == 1 / sell_view


def test_reciprocal_branch_rounds_the_inverse():
    # "qt" is first, so a tkn seller's price is rounded on its reciprocal
    result = price_in_allowed_precision("tkn", "qt", 1 / 7, 3)
    assert result == 1 / 7.0


# --- side adjustment ---


def test_adjust_sell_uses_price_as_is():
    assert adjust_price_to_allowed_precision("base", "usdc_asset", "SELL", 10.123456789, 6) == 10.1235


def test_adjust_buy_inverts_and_back():
    result = adjust_price_to_allowed_precision("base", "usdc_asset", "BUY", 10.123456789, 6)
    assert result == pytest.approx(10.1235, rel=1e-12)


def test_adjust_rejects_unknown_side():
    with pytest.raises(InvalidSideError):
        adjust_price_to_allowed_precision("base", "usdc_asset", "HOLD", 1.0, 6)


# --- hash rendering ---


def test_hash_price_plain_numbers():
    assert hash_price(0.1) == "0.1"
    assert hash_price(2.0) == "2"
    assert hash_price(2500000000) == "2500000000"
    assert hash_price(0.000001) == "0.000001"
    assert hash_price(1.0124e-06) == "0.0000010124"


def test_hash_price_uses_shortest_repr_not_binary_expansion():
    assert hash_price(0.1 + 0.2) == "0.3"
    assert hash_price(1 / 3) == "0.333333333333333"


def test_hash_price_exponential_notation():
    assert hash_price(1e-07) == "1e-7"
    assert hash_price(1.5e-08) == "1.5e-8"
    assert hash_price(1e21) == "1e+21"
    assert hash_price(123456789012345678.0) == "123456789012346000"


def test_hash_price_round_half_even():
    assert hash_price(Decimal("1.000000000000005")) == "1"
    assert hash_price("1.000000000000015") == "1.00000000000002"
