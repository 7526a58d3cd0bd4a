"""
Paper trading example: place, fill and cancel orders against the paper matcher.

Shows: OrderBuilder precision/fees via ExchangeClient, HMAC signing, the
event-driven order cache, notifications, rejected log and resync on reconnect.
"""

from __future__ import annotations

import asyncio
import logging

from odex_core import ExchangeConfig, HmacSigner, Notification
from odex_core.execution import ExchangeClient, Fees, PaperExchangeInfo, PaperTransport, Token

OWNER = "OWNER_ADDRESS"
OPERATOR = "OPERATOR_ADDRESS"


def print_orders(client: ExchangeClient) -> None:
    df = client.my_orders_frame()
    if df.empty:
        print("  (no open orders)")
    else:
        print(df[["hash", "status", "sell_asset", "sell_amount", "price"]].to_string(index=False))


async def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    gbyte = Token(symbol="GBYTE", asset="base", decimals=9)
    usdc = Token(symbol="USDC", asset="usdc_asset", decimals=2)
    exchange = PaperExchangeInfo(
        {"GBYTE-USDC": (gbyte, usdc)},
        OPERATOR,
        fees={"USDC": Fees(matcher_fee=0.001, affiliate_fee=0.0005)},
    )
    config = ExchangeConfig(aa_address="AA_ADDRESS", max_price_precision=6)
    transport = PaperTransport(connected=False)
    client = ExchangeClient(config, exchange, HmacSigner("demo-secret", OWNER), transport, transport, OWNER)

    client.subscribe(Notification.MY_ORDER_ADDED, lambda h: print(f"  [Notify] added {h}"))
    client.subscribe(Notification.MY_ORDER_REMOVED, lambda h: print(f"  [Notify] removed {h}"))
    client.subscribe(Notification.RESET_ORDERS, lambda: print("  [Notify] reset"))

    print("--- Connect and start tracking ---")
    await client.track_my_orders()
    await transport.connect()

    print("\n--- Place a SELL and a BUY ---")
    sell_hash = await client.create_and_send_order("GBYTE-USDC", "SELL", 2.5, 10.123456789)
    buy_hash = await client.create_and_send_order("GBYTE-USDC", "BUY", 2, 25.5)
    print_orders(client)

    print("\n--- Fill the SELL, cancel the BUY ---")
    await transport.fill(sell_hash)
    result = await client.create_and_send_cancel(buy_hash)
    print(f"  Cancel accepted: {result.accepted}")
    print_orders(client)

    print("\n--- Rejected order ---")
    transport.reject_next("insufficient balance")
    await client.create_and_send_order("GBYTE-USDC", "SELL", 1, 10.0)
    for entry in client.get_rejected_log():
        print(f"  Rejected: reason={entry.reason}, hash={entry.order_hash}")

    print("\n--- Reconnect: cache is rebuilt from the matcher's book ---")
    await client.create_and_send_order("GBYTE-USDC", "SELL", 1, 11.0)
    await transport.disconnect()
    await transport.connect()
    print_orders(client)

    client.stop_tracking()


if __name__ == "__main__":
    asyncio.run(main())
