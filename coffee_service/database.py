from __future__ import annotations

import threading
from typing import Iterable, List

MENU_SEED = [
    (1, "Espresso", 120, "Strong and bold"),
    (2, "Cappuccino", 150, "Creamy and smooth"),
    (3, "Latte", 160, "Mild and milky"),
    (4, "Americano", 130, "Classic black coffee"),
]


class InMemoryDatabase:
    """Process-lifetime store for the menu catalog and the order collection.

    All access goes through ``lock``; ``next_order_id`` only ever grows, so ids
    of deleted orders are never handed out again.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.menu: List[dict] = []
        self.orders: List[dict] = []
        self._last_order_id = 0

    def next_order_id(self) -> int:
        self._last_order_id += 1
        return self._last_order_id


def init_db(menu: Iterable[tuple] | None = None) -> InMemoryDatabase:
    db = InMemoryDatabase()
    seed_menu(db, MENU_SEED if menu is None else menu)
    return db


def seed_menu(db: InMemoryDatabase, rows: Iterable[tuple]) -> None:
    with db.lock:
        if db.menu:
            return
        db.menu.extend(
            {"id": item_id, "name": name, "price": price, "description": description}
            for item_id, name, price, description in rows
        )
