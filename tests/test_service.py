from __future__ import annotations

import threading

import pytest

from coffee_service.database import init_db
from coffee_service.repository import OrderRepository
from coffee_service.service import OrderNotFoundError, OrderService, OrderValidationError

ESPRESSO = {"id": 1, "name": "Espresso", "price": 120}


@pytest.fixture()
def service():
    return OrderService(OrderRepository(init_db()))


def test_menu_is_seeded_and_stable(service):
    first = service.list_menu()
    second = service.list_menu()
    assert first == second
    assert [item.name for item in first] == ["Espresso", "Cappuccino", "Latte", "Americano"]
    assert first[0].price == 120


def test_create_order(service):
    record = service.create_order("Ana", [ESPRESSO], 120)
    assert record.id == 1
    assert record.status == "pending"
    assert record.customer_name == "Ana"
    assert record.items == [ESPRESSO]
    assert record.total == 120
    assert record.timestamp
    assert service.list_orders() == [record]


@pytest.mark.parametrize(
    "customer_name, items, total, message",
    [
        (None, [ESPRESSO], 120, "Missing required fields: customerName, items"),
        ("", [ESPRESSO], 120, "Missing required fields: customerName, items"),
        ("   ", [ESPRESSO], 120, "Missing required fields: customerName, items"),
        ("Ana", None, 120, "Missing required fields: customerName, items"),
        ("Ana", "espresso", 120, "Missing required fields: customerName, items"),
        ("Ana", [], 0, "Order must contain at least one item"),
    ],
)
def test_create_order_rejects_invalid_input(service, customer_name, items, total, message):
    with pytest.raises(OrderValidationError, match=message):
        service.create_order(customer_name, items, total)
    assert service.list_orders() == []


@pytest.mark.parametrize("total", [None, -1, "120"])
def test_total_is_stored_as_supplied(service, total):
    record = service.create_order("Ana", [ESPRESSO], total)
    assert record.total == total
    assert service.get_order(record.id).total == total


def test_stored_items_are_isolated_from_caller(service):
    items = [dict(ESPRESSO)]
    record = service.create_order("Ana", items, 120)
    items[0]["price"] = 1
    assert service.get_order(record.id).items[0]["price"] == 120


def test_get_unknown_order(service):
    with pytest.raises(OrderNotFoundError):
        service.get_order(9999)


def test_update_status(service):
    record = service.create_order("Ana", [ESPRESSO], 120)
    updated = service.update_status(record.id, "ready")
    assert updated.status == "ready"
    assert updated.customer_name == record.customer_name
    assert updated.timestamp == record.timestamp
    # No transition graph: any status may follow any other.
    assert service.update_status(record.id, "pending").status == "pending"


def test_update_status_unknown_order_wins_over_invalid_status(service):
    with pytest.raises(OrderNotFoundError):
        service.update_status(9999, "brewed")


def test_update_status_rejects_unknown_value(service):
    record = service.create_order("Ana", [ESPRESSO], 120)
    with pytest.raises(OrderValidationError, match="Invalid status"):
        service.update_status(record.id, "brewed")
    assert service.get_order(record.id).status == "pending"


def test_delete_order(service):
    record = service.create_order("Ana", [ESPRESSO], 120)
    service.delete_order(record.id)
    with pytest.raises(OrderNotFoundError):
        service.get_order(record.id)
    with pytest.raises(OrderNotFoundError):
        service.delete_order(record.id)


def test_ids_are_not_reused_after_delete(service):
    first = service.create_order("Ana", [ESPRESSO], 120)
    second = service.create_order("Ben", [ESPRESSO], 120)
    service.delete_order(first.id)
    third = service.create_order("Cleo", [ESPRESSO], 120)
    assert third.id > second.id
    assert [order.id for order in service.list_orders()] == [second.id, third.id]


def test_concurrent_creates_get_distinct_ids(service):
    def place_orders():
        for _ in range(25):
            service.create_order("Ana", [ESPRESSO], 120)

    threads = [threading.Thread(target=place_orders) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    ids = [order.id for order in service.list_orders()]
    assert len(ids) == 200
    assert len(set(ids)) == 200


def test_separate_stores_are_isolated():
    first = OrderService(OrderRepository(init_db()))
    second = OrderService(OrderRepository(init_db()))
    first.create_order("Ana", [ESPRESSO], 120)
    assert second.list_orders() == []
