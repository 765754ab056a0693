"""In-memory stock store for development and testing.

Thread-safe, so races between real threads can be exercised against it. It
can also be switched into an unavailable state, and a competing write can be
scheduled to land between a caller's read and its conditional write.
"""

import threading
from collections.abc import Callable

from commerce.inventory.port import StockRecord, StockStore, StockStoreError


class FakeStockStore(StockStore):
    def __init__(self, stock: dict[str, int] | None = None) -> None:
        self._lock = threading.Lock()
        self._rows: dict[str, tuple[int, int]] = {}
        self.available: bool = True
        self.calls: list[dict] = []
        self._before_next_write: Callable[[], None] | None = None
        for product_id, quantity in (stock or {}).items():
            self.seed(product_id, quantity)

    def configure(self, available: bool) -> None:
        self.available = available

    def seed(self, product_id: str, quantity: int) -> None:
        with self._lock:
            _, revision = self._rows.get(product_id, (0, 0))
            self._rows[product_id] = (quantity, revision + 1)

    def quantity_of(self, product_id: str) -> int | None:
        with self._lock:
            row = self._rows.get(product_id)
        return None if row is None else row[0]

    def interleave(self, action: Callable[[], None]) -> None:
        """Run ``action`` once, right before the next conditional write is checked."""
        self._before_next_write = action

    def read(self, product_id: str) -> StockRecord | None:
        self.calls.append({"method": "read", "product_id": product_id})
        if not self.available:
            raise StockStoreError("stock store unavailable")
        with self._lock:
            row = self._rows.get(product_id)
        if row is None:
            return None
        quantity, revision = row
        return StockRecord(product_id=product_id, quantity=quantity, revision=revision)

    def write_if_current(self, record: StockRecord, quantity: int) -> bool:
        self.calls.append(
            {"method": "write_if_current", "product_id": record.product_id, "quantity": quantity}
        )
        if not self.available:
            raise StockStoreError("stock store unavailable")

        action, self._before_next_write = self._before_next_write, None
        if action is not None:
            action()

        with self._lock:
            current = self._rows.get(record.product_id)
            if current is None or current[1] != record.revision:
                return False
            if quantity < 0:
                raise ValueError("stock cannot go below zero")
            self._rows[record.product_id] = (quantity, record.revision + 1)
            return True
