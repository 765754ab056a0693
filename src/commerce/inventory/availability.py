"""Stock pre-checks used before an item is added or an order is attempted.

These are advisory reads. Only ``InventoryReservation`` takes stock.
"""

from dataclasses import dataclass
from enum import Enum

from commerce.inventory import get_stock_store
from commerce.inventory.port import StockStore


class ShortfallKind(Enum):
    OUT_OF_STOCK = "OUT_OF_STOCK"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"


@dataclass(frozen=True)
class StockAvailability:
    product_id: str
    available: int
    can_fulfill: bool


@dataclass(frozen=True)
class StockShortfall:
    product_id: str
    kind: ShortfallKind
    requested: int
    available: int


def check_availability(product_id: str, quantity: int, store: StockStore | None = None) -> StockAvailability:
    store = store if store is not None else get_stock_store()
    record = store.read(product_id)
    available = record.quantity if record else 0
    return StockAvailability(product_id=product_id, available=available, can_fulfill=available >= quantity)


def validate_items(items, store: StockStore | None = None) -> list[StockShortfall]:
    """Return one shortfall per item whose quantity cannot be served right now.

    ``items`` is any iterable of objects with ``product_id`` and ``quantity``.
    """
    store = store if store is not None else get_stock_store()
    shortfalls = []
    for item in items:
        availability = check_availability(item.product_id, item.quantity, store)
        if availability.can_fulfill:
            continue
        kind = ShortfallKind.OUT_OF_STOCK if availability.available == 0 else ShortfallKind.INSUFFICIENT_STOCK
        shortfalls.append(
            StockShortfall(
                product_id=item.product_id,
                kind=kind,
                requested=item.quantity,
                available=availability.available,
            )
        )
    return shortfalls
