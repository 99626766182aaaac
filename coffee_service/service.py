from __future__ import annotations

import logging
from typing import Any, List

from .repository import MenuItemRecord, OrderRecord, OrderRepository

logger = logging.getLogger("coffee-service")

ORDER_STATUSES = ("pending", "preparing", "ready", "completed", "cancelled")


class OrderValidationError(Exception):
    """Raised when an order request is missing fields or carries invalid values."""


class OrderNotFoundError(Exception):
    """Raised when no order exists for the requested id."""


class OrderService:
    def __init__(self, repository: OrderRepository):
        self._repo = repository

    def list_menu(self) -> List[MenuItemRecord]:
        return self._repo.list_menu()

    def create_order(self, customer_name: Any, items: Any, total: Any) -> OrderRecord:
        if not isinstance(customer_name, str) or not customer_name.strip():
            raise OrderValidationError("Missing required fields: customerName, items")
        if items is None or not isinstance(items, (list, tuple)):
            raise OrderValidationError("Missing required fields: customerName, items")
        if len(items) == 0:
            raise OrderValidationError("Order must contain at least one item")

        record = self._repo.create_order(customer_name, list(items), total)
        logger.info(
            "Order created id=%s customer=%s items=%d total=%s",
            record.id,
            record.customer_name,
            len(record.items),
            record.total,
        )
        return record

    def list_orders(self) -> List[OrderRecord]:
        return self._repo.list_orders()

    def get_order(self, order_id: int) -> OrderRecord:
        record = self._repo.get_order(order_id)
        if record is None:
            raise OrderNotFoundError("Order not found")
        return record

    def update_status(self, order_id: int, status: Any) -> OrderRecord:
        # Lookup first: an unknown id is reported before the status is checked.
        self.get_order(order_id)
        if not isinstance(status, str) or status not in ORDER_STATUSES:
            raise OrderValidationError("Invalid status")
        record = self._repo.update_status(order_id, status)
        if record is None:
            raise OrderNotFoundError("Order not found")
        logger.info("Order %s status set to %s", order_id, status)
        return record

    def delete_order(self, order_id: int) -> None:
        if not self._repo.delete_order(order_id):
            raise OrderNotFoundError("Order not found")
        logger.info("Order %s deleted", order_id)
