import pytest

from floorsync.errors import OrderNotFound
from floorsync.models import LineItem, OrderStatus
from floorsync.orders import OrderLedger


def test_create_computes_total_from_priced_items() -> None:
    ledger = OrderLedger()

    order = ledger.create(
        3,
        [
            LineItem(price=5, quantity=2, name="Soup"),
            LineItem(price=3, quantity=2, name="Bread"),
            LineItem(quantity=4, name="Water"),
        ],
        device="W1",
    )

    assert order.total == 16
    assert order.status == OrderStatus.PENDING
    assert order.table == 3
    assert order.device == "W1"
    assert order.items[0].model_dump()["name"] == "Soup"


def test_missing_or_zero_quantity_counts_once() -> None:
    ledger = OrderLedger()

    order = ledger.create(1, [LineItem(price=4), LineItem(price=2.5, quantity=0)])

    assert order.total == 6.5


def test_override_total_is_kept() -> None:
    ledger = OrderLedger()

    order = ledger.create(1, [LineItem(price=10, quantity=3)], total=12)

    assert order.total == 12


def test_order_ids_are_unique_and_sequential() -> None:
    ledger = OrderLedger()

    ids = [ledger.create(1, []).id for _ in range(5)]

    assert ids == ["ord_1", "ord_2", "ord_3", "ord_4", "ord_5"]
    assert len(ledger) == 5


def test_add_item_updates_total_only_for_priced_items() -> None:
    ledger = OrderLedger()
    order = ledger.create(1, [LineItem(price=5, quantity=1)])

    ledger.add_item(order.id, LineItem(price=2, quantity=3))
    assert order.total == 11

    ledger.add_item(order.id, LineItem(quantity=5, name="Napkins"))
    assert order.total == 11
    assert len(order.items) == 3

    ledger.add_item(order.id, LineItem(price=1.5))
    assert order.total == 12.5


def test_add_item_to_unknown_order() -> None:
    ledger = OrderLedger()

    with pytest.raises(OrderNotFound) as exc_info:
        ledger.add_item("ord_404", LineItem(price=1))

    assert exc_info.value.payload() == {"message": "Order ord_404 not found", "kind": "order_not_found"}


def test_transition_reports_previous_status() -> None:
    ledger = OrderLedger()
    order = ledger.create(1, [])

    updated, previous = ledger.transition(order.id, OrderStatus.PREPARING)

    assert updated is order
    assert previous == OrderStatus.PENDING
    assert order.status == OrderStatus.PREPARING


def test_transition_accepts_any_edge() -> None:
    ledger = OrderLedger()
    order = ledger.create(1, [])

    ledger.transition(order.id, "ready")
    _, previous = ledger.transition(order.id, "pending")
    assert previous == OrderStatus.READY

    ledger.transition(order.id, OrderStatus.CLOSED)
    _, previous = ledger.transition(order.id, OrderStatus.PREPARING)
    assert previous == OrderStatus.CLOSED
    assert order.status == OrderStatus.PREPARING


def test_transition_unknown_order() -> None:
    ledger = OrderLedger()

    with pytest.raises(OrderNotFound):
        ledger.transition("ord_9", OrderStatus.READY)


def test_query_by_status_keeps_creation_order() -> None:
    ledger = OrderLedger()
    first = ledger.create(1, [])
    second = ledger.create(2, [])
    third = ledger.create(3, [])
    ledger.transition(second.id, OrderStatus.PREPARING)

    pending = ledger.query_by_status(OrderStatus.PENDING)

    assert [o.id for o in pending] == [first.id, third.id]
    assert ledger.query_by_status("ready") == []


def test_remove_is_a_noop_for_unknown_ids() -> None:
    ledger = OrderLedger()
    order = ledger.create(1, [])

    assert ledger.remove(order.id) is order
    assert ledger.remove(order.id) is None
    assert len(ledger) == 0
