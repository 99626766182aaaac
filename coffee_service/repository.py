from __future__ import annotations

import copy
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from .database import InMemoryDatabase


@dataclass(frozen=True)
class MenuItemRecord:
    id: int
    name: str
    price: float
    description: str


@dataclass(frozen=True)
class OrderRecord:
    id: int
    customer_name: str
    items: list
    total: float
    timestamp: str
    status: str


class OrderRepository:
    """Data-access layer over the in-memory store."""

    def __init__(self, database: InMemoryDatabase):
        self._db = database

    @contextmanager
    def _connection(self) -> Iterator[InMemoryDatabase]:
        with self._db.lock:
            yield self._db

    def list_menu(self) -> List[MenuItemRecord]:
        with self._connection() as db:
            return [MenuItemRecord(**row) for row in db.menu]

    def create_order(self, customer_name: str, items: list, total: float) -> OrderRecord:
        now = datetime.now(timezone.utc).isoformat()
        with self._connection() as db:
            row = {
                "id": db.next_order_id(),
                "customer_name": customer_name,
                "items": copy.deepcopy(items),
                "total": total,
                "timestamp": now,
                "status": "pending",
            }
            db.orders.append(row)
            return _to_record(row)

    def list_orders(self) -> List[OrderRecord]:
        with self._connection() as db:
            return [_to_record(row) for row in db.orders]

    def get_order(self, order_id: int) -> Optional[OrderRecord]:
        with self._connection() as db:
            row = _find(db, order_id)
            return _to_record(row) if row is not None else None

    def update_status(self, order_id: int, status: str) -> Optional[OrderRecord]:
        with self._connection() as db:
            row = _find(db, order_id)
            if row is None:
                return None
            row["status"] = status
            return _to_record(row)

    def delete_order(self, order_id: int) -> bool:
        with self._connection() as db:
            row = _find(db, order_id)
            if row is None:
                return False
            db.orders.remove(row)
            return True


def _find(db: InMemoryDatabase, order_id: int) -> Optional[dict]:
    for row in db.orders:
        if row["id"] == order_id:
            return row
    return None


def _to_record(row: dict) -> OrderRecord:
    return OrderRecord(
        id=row["id"],
        customer_name=row["customer_name"],
        items=copy.deepcopy(row["items"]),
        total=row["total"],
        timestamp=row["timestamp"],
        status=row["status"],
    )
