"""
Tests for OrderCache, Notifier and OrderEvent.
"""

import pytest

from odex_core import Notification, Notifier, OrderEvent, OrderEventKind
from odex_core.execution import OrderCache, TrackedOrder, TrackedOrderStatus
from odex_core.execution.cache import FRAME_COLUMNS

from conftest import OWNER


# --- TrackedOrder ---


def test_tracked_order_from_payload(make_order_payload):
    order = TrackedOrder.from_payload(make_order_payload("h1", "PARTIAL_FILLED", fills=[{"amount": 5}]))
    assert order.hash == "h1"
    assert order.status == TrackedOrderStatus.PARTIAL_FILLED
    assert order.owner == OWNER
    assert order.details == {"fills": [{"amount": 5}]}
    assert not order.status.is_terminal


def test_tracked_order_unknown_status(make_order_payload):
    with pytest.raises(ValueError):
        TrackedOrder.from_payload(make_order_payload("h1", "PENDING"))


def test_terminal_statuses():
    assert TrackedOrderStatus.FILLED.is_terminal
    assert TrackedOrderStatus.CANCELLED.is_terminal
    assert not TrackedOrderStatus.OPEN.is_terminal


# --- OrderCache ---


def test_cache_upsert_get_remove(make_order_payload):
    cache = OrderCache()
    order = TrackedOrder.from_payload(make_order_payload("h1"))
    cache.upsert(order)
    assert "h1" in cache
    assert len(cache) == 1
    assert cache.get("h1") is order
    assert cache.remove("h1") is True
    assert cache.remove("h1") is False
    assert cache.get("h1") is None


def test_cache_replace_all_is_wholesale(make_order_payload):
    cache = OrderCache()
    cache.upsert(TrackedOrder.from_payload(make_order_payload("h1")))
    cache.upsert(TrackedOrder.from_payload(make_order_payload("h2")))
    cache.replace_all([TrackedOrder.from_payload(make_order_payload(h)) for h in ("h2", "h3")])
    assert cache.hashes() == {"h2", "h3"}


def test_cache_snapshot_is_read_only_copy(make_order_payload):
    cache = OrderCache()
    cache.upsert(TrackedOrder.from_payload(make_order_payload("h1")))
    snapshot = cache.snapshot()
    with pytest.raises(TypeError):
        snapshot["h2"] = None
    cache.remove("h1")
    assert "h1" in snapshot


def test_cache_to_frame(make_order_payload):
    cache = OrderCache()
    assert list(cache.to_frame().columns) == FRAME_COLUMNS
    assert cache.to_frame().empty
    cache.upsert(TrackedOrder.from_payload(make_order_payload("h1")))
    df = cache.to_frame()
    assert len(df) == 1
    row = df.iloc[0]
    assert row["hash"] == "h1"
    assert row["status"] == "OPEN"
    assert row["sell_amount"] == 1_000_000_000


# --- Notifier ---


def test_notifier_delivers_in_registration_order():
    log = []
    notifier = Notifier()
    notifier.subscribe(Notification.MY_ORDER_ADDED, lambda h: log.append(("a", h)))
    notifier.subscribe("my_order_added", lambda h: log.append(("b", h)))
    notifier.order_added("h1")
    assert log == [("a", "h1"), ("b", "h1")]


def test_notifier_routes_by_notification():
    log = []
    notifier = Notifier()
    notifier.subscribe(Notification.MY_ORDER_REMOVED, log.append)
    notifier.subscribe(Notification.RESET_ORDERS, lambda: log.append("reset"))
    notifier.order_added("h1")
    notifier.order_removed("h2")
    notifier.reset()
    assert log == ["h2", "reset"]


def test_notifier_unsubscribe():
    log = []
    notifier = Notifier()
    notifier.subscribe(Notification.MY_ORDER_ADDED, log.append)
    notifier.unsubscribe(Notification.MY_ORDER_ADDED, log.append)
    notifier.order_added("h1")
    assert log == []


def test_notifier_rejects_unknown_name():
    with pytest.raises(ValueError):
        Notifier().subscribe("order_exploded", print)


# --- OrderEvent ---


def test_order_event_known_kind():
    assert OrderEvent(kind="ORDER_ADDED").known_kind == OrderEventKind.ORDER_ADDED
    assert OrderEvent(kind="ORDER_PENDING").known_kind is None


def test_order_event_immutable():
    event = OrderEvent(kind="ORDER_ADDED", payload={})
    with pytest.raises(AttributeError):
        event.kind = "ORDER_CANCELLED"
