"""
OrderBuilder: turn a human-level trade intent into a signable OrderRecord.

Amount and fee arithmetic stay in floats, as on the matcher; only the
price's significant digits are normalized (see odex_core.precision).
"""

from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING

from odex_core.config import ExchangeConfig
from odex_core.errors import InvalidAmountError, InvalidPriceError
from odex_core.intent import OrderIntent, Side
from odex_core.order import OrderRecord
from odex_core.precision import adjust_price_to_allowed_precision, price_in_allowed_precision

if TYPE_CHECKING:
    from odex_core.execution.transport import ExchangeInfo

logger = logging.getLogger(__name__)


def round_half_up(value: float) -> int:
    """Nearest integer, halves rounded up (Math.round semantics, not banker's rounding)."""
    return math.floor(value + 0.5)


def _positive_finite(value: float) -> bool:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return math.isfinite(number) and number > 0


class OrderBuilder:
    """
    Builds orders for one exchange. Token and fee metadata come from
    ExchangeInfo; precision and dust rules from ExchangeConfig.
    """

    def __init__(self, exchange: ExchangeInfo, config: ExchangeConfig) -> None:
        self.exchange = exchange
        self.config = config

    async def build_order(
        self,
        pair: str,
        side: Side | str,
        amount: float,
        price: float,
        matcher: str | None = None,
        expiry_ts: int | None = None,
    ) -> OrderRecord:
        """Validate the arguments into an OrderIntent and build it."""
        intent = OrderIntent(
            pair=pair,
            side=Side.coerce(side),
            amount=amount,
            price=price,
            matcher=matcher,
            expiry_ts=expiry_ts,
        )
        return await self.build(intent)

    async def build(self, intent: OrderIntent) -> OrderRecord:
        """
        Build the OrderRecord for an intent.

        Raises InvalidSideError, InvalidPriceError or InvalidAmountError
        (including legs below the dust threshold). Nothing is sent.
        """
        side = Side.coerce(intent.side)
        if not _positive_finite(intent.price):
            raise InvalidPriceError(intent.price)
        if not _positive_finite(intent.amount):
            raise InvalidAmountError("order", intent.amount)

        base, quote = await self.exchange.get_tokens_by_pair(intent.pair)
        fees = self.exchange.get_fees(quote.symbol)
        operator = self.exchange.get_operator_address()
        precision = self.config.max_price_precision
        network_base = self.config.base_asset

        price = adjust_price_to_allowed_precision(
            base.asset, quote.asset, side, intent.price, precision, network_base
        )
        amount = float(intent.amount)
        base_amount = amount * base.multiplier
        quote_amount = amount * price * quote.multiplier

        if side == Side.SELL:
            sell_asset, buy_asset = base.asset, quote.asset
            input_amount, output_amount = base_amount, quote_amount
        else:
            sell_asset, buy_asset = quote.asset, base.asset
            input_amount, output_amount = quote_amount, base_amount

        threshold = self.config.dust_threshold
        if input_amount < threshold:
            raise InvalidAmountError("input", input_amount, threshold)
        if output_amount < threshold:
            raise InvalidAmountError("output", output_amount, threshold)

        sell_amount = round_half_up(input_amount)
        buy_amount = round_half_up(output_amount)
        # Store the price the integer legs imply, not the caller's input.
        order_price = price_in_allowed_precision(
            sell_asset, buy_asset, buy_amount / sell_amount, precision, network_base
        )

        # Fees are always paid in the quote asset.
        if sell_asset == quote.asset:
            fee_base = sell_amount
        else:
            fee_base = sell_amount * order_price

        order_matcher = intent.matcher or operator
        affiliate = affiliate_fee_asset = affiliate_fee = None
        if fees.affiliate_fee and order_matcher != operator:
            affiliate = operator
            affiliate_fee_asset = quote.asset
            affiliate_fee = math.ceil(fee_base * fees.affiliate_fee)

        record = OrderRecord(
            sell_asset=sell_asset,
            buy_asset=buy_asset,
            sell_amount=sell_amount,
            price=order_price,
            matcher=order_matcher,
            matcher_fee_asset=quote.asset,
            matcher_fee=math.ceil(fee_base * fees.matcher_fee),
            affiliate=affiliate,
            affiliate_fee_asset=affiliate_fee_asset,
            affiliate_fee=affiliate_fee,
            expiry_ts=intent.expiry_ts,
        )
        logger.debug(
            "Built order: pair=%s, side=%s, sell_amount=%s %s, price=%s, matcher_fee=%s",
            intent.pair,
            side.value,
            sell_amount,
            sell_asset,
            order_price,
            record.matcher_fee,
        )
        return record
