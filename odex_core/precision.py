"""
Price precision rules shared with the remote matcher.

Two independent paths live here:

- Canonical precision (float in, float out): a price is kept to at most N
  significant digits, counted on the pair's "first asset". Builder and fee
  arithmetic stay in floats, like the matcher.
- Hash rendering (exact decimals): the string form of a price that goes into
  the order identity hash. Uses its own decimal context so nothing from the
  float path leaks into it.
"""

from __future__ import annotations

import math
from decimal import ROUND_HALF_EVEN, ROUND_HALF_UP, Context, Decimal

from odex_core.config import DEFAULT_BASE_ASSET
from odex_core.errors import InvalidPriceError
from odex_core.intent import Side

# Double precision round-trips 15 significant digits.
HASH_PRECISION = 15

_HASH_CONTEXT = Context(prec=HASH_PRECISION, rounding=ROUND_HALF_EVEN, Emax=308, Emin=-324)
# Wide enough for quantize() to never overflow the coefficient of a rounded float.
_SIGNIFICANT_CONTEXT = Context(prec=40, rounding=ROUND_HALF_UP)

# Decimal exponents outside (EXP_NEG, EXP_POS) render in exponential notation.
_EXP_NEG = -7
_EXP_POS = 21


def _checked_price(price: float) -> float:
    try:
        value = float(price)
    except (TypeError, ValueError):
        raise InvalidPriceError(price) from None
    if not math.isfinite(value) or value <= 0:
        raise InvalidPriceError(price)
    return value


def get_first_asset(sell_asset: str, buy_asset: str, network_base: str = DEFAULT_BASE_ASSET) -> str:
    """The asset precision is anchored to: the network base asset, else the lexically smaller id."""
    if sell_asset == network_base:
        return sell_asset
    if buy_asset == network_base:
        return buy_asset
    return sell_asset if sell_asset < buy_asset else buy_asset


def drop_excessive_precision(price: float, precision: int) -> float:
    """
    Round price to `precision` significant digits.

    Ties are broken away from zero on the exact binary value of the float,
    which is what Number.prototype.toPrecision does on the matcher side.
    Python's %g formatting would round half to even instead.
    """
    value = _checked_price(price)
    exact = Decimal(value)
    exponent = exact.adjusted() - precision + 1
    rounded = exact.quantize(Decimal((0, (1,), exponent)), context=_SIGNIFICANT_CONTEXT)
    return float(rounded)


def price_in_allowed_precision(
    sell_asset: str,
    buy_asset: str,
    price: float,
    precision: int,
    network_base: str = DEFAULT_BASE_ASSET,
) -> float:
    """
    Canonical form of a sell/buy price.

    Precision counts on the first asset: if that is the sell asset the price
    itself is rounded, otherwise its reciprocal is rounded and inverted back.
    """
    value = _checked_price(price)
    if get_first_asset(sell_asset, buy_asset, network_base) == sell_asset:
        return drop_excessive_precision(value, precision)
    return 1 / drop_excessive_precision(1 / value, precision)


def adjust_price_to_allowed_precision(
    base_asset: str,
    quote_asset: str,
    side: Side | str,
    price: float,
    precision: int,
    network_base: str = DEFAULT_BASE_ASSET,
) -> float:
    """
    Canonicalize a quote-per-base price for an order on the given side.

    The matcher quotes from the seller's viewpoint: a SELL sells base at
    `price`, a BUY sells quote at `1 / price`.
    """
    side = Side.coerce(side)
    value = _checked_price(price)
    if side == Side.SELL:
        return price_in_allowed_precision(base_asset, quote_asset, value, precision, network_base)
    adjusted = price_in_allowed_precision(quote_asset, base_asset, 1 / value, precision, network_base)
    return 1 / adjusted


def hash_price(num: float | int | Decimal | str) -> str:
    """
    Render a number the way the matcher renders it inside the order hash.

    Floats are read from their shortest round-trip repr, not their binary
    expansion, then rounded half to even to 15 significant digits.
    """
    if isinstance(num, float):
        if not math.isfinite(num):
            raise InvalidPriceError(num)
        parsed = Decimal(repr(num))
    else:
        parsed = Decimal(num)
    value = _HASH_CONTEXT.plus(parsed)
    if value.is_zero():
        return "0"
    value = value.normalize(_HASH_CONTEXT)
    exponent = value.adjusted()
    if _EXP_NEG < exponent < _EXP_POS:
        return format(value, "f")
    sign, digits, _ = value.as_tuple()
    mantissa = str(digits[0])
    if len(digits) > 1:
        mantissa += "." + "".join(str(d) for d in digits[1:])
    return f"{'-' if sign else ''}{mantissa}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"
