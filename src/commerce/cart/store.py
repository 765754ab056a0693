"""Buyer-side cart: line items plus the subset selected for the next checkout.

The cart lives on the buyer's device. Lines are unique by product and keep
insertion order. Every mutation prunes the selection down to products still
in the cart and writes the whole cart through to the local cache.
"""

from collections.abc import Callable, Iterable
from dataclasses import asdict, dataclass, replace

import structlog

from commerce.catalogue.product import ProductSnapshot
from commerce.inventory.availability import StockAvailability
from commerce.storage.port import CART_KEY, LocalCache

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class LineItem:
    product_id: str
    title: str
    unit_price: float  # frozen when the product was first added
    quantity: int = 1
    cover: str | None = None

    @property
    def line_total(self) -> float:
        return self.unit_price * self.quantity

    @classmethod
    def from_dict(cls, row: dict) -> "LineItem":
        return cls(
            product_id=str(row["product_id"]),
            title=row.get("title", ""),
            unit_price=float(row.get("unit_price", 0.0)),
            quantity=max(1, int(row.get("quantity", 1))),
            cover=row.get("cover"),
        )


def subtotal_of(items: Iterable[LineItem]) -> float:
    return sum(item.line_total for item in items)


class CartStore:
    def __init__(
        self,
        cache: LocalCache,
        stock_check: Callable[[str, int], StockAvailability] | None = None,
    ) -> None:
        self.cache = cache
        self.stock_check = stock_check
        self._lines: dict[str, LineItem] = {}
        self._selection: set[str] = set()

    def load(self) -> None:
        """Restore lines from the local cache. Nothing starts out selected."""
        self._lines = {}
        for row in self.cache.read(CART_KEY):
            try:
                item = LineItem.from_dict(row)
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping unreadable cart row", row=row)
                continue
            self._lines[item.product_id] = item
        self._selection = set()

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def items(self) -> list[LineItem]:
        return list(self._lines.values())

    @property
    def selection(self) -> frozenset[str]:
        return frozenset(self._selection)

    @property
    def count(self) -> int:
        return sum(item.quantity for item in self._lines.values())

    def get(self, product_id: str) -> LineItem | None:
        return self._lines.get(product_id)

    def selected_items(self) -> list[LineItem]:
        return [item for item in self._lines.values() if item.product_id in self._selection]

    def subtotal(self, selected_only: bool = False) -> float:
        return subtotal_of(self.selected_items() if selected_only else self._lines.values())

    # -------------------------------------------------------------------
    # Line mutations
    # -------------------------------------------------------------------
    def add(self, product: ProductSnapshot, quantity: int = 1) -> bool:
        """Add ``quantity`` of ``product``, merging into an existing line.

        Returns False, leaving the cart alone, when a stock check is
        configured and the resulting quantity cannot be served.
        """
        quantity = max(1, quantity)
        existing = self._lines.get(product.product_id)
        wanted = quantity + (existing.quantity if existing else 0)

        if self.stock_check is not None:
            availability = self.stock_check(product.product_id, wanted)
            if not availability.can_fulfill:
                logger.info(
                    "Add to cart refused",
                    product_id=product.product_id,
                    wanted=wanted,
                    available=availability.available,
                )
                return False

        if existing:
            self._lines[product.product_id] = replace(existing, quantity=wanted)
        else:
            self._lines[product.product_id] = LineItem(
                product_id=product.product_id,
                title=product.title,
                unit_price=product.price,
                quantity=quantity,
                cover=product.cover,
            )
        self._selection.add(product.product_id)

        self._changed()
        return True

    def remove(self, product_id: str) -> None:
        self._lines.pop(product_id, None)
        self._changed()

    def remove_many(self, product_ids: Iterable[str]) -> None:
        for product_id in product_ids:
            self._lines.pop(product_id, None)
        self._changed()

    def set_quantity(self, product_id: str, quantity: int) -> None:
        """Set a line's quantity, floored at 1. Unknown products are ignored."""
        existing = self._lines.get(product_id)
        if existing is None:
            return
        self._lines[product_id] = replace(existing, quantity=max(1, quantity))
        self._changed()

    def clear(self) -> None:
        self._lines = {}
        self._changed()

    # -------------------------------------------------------------------
    # Selection
    # -------------------------------------------------------------------
    def toggle_selection(self, product_id: str) -> None:
        if product_id in self._selection:
            self._selection.discard(product_id)
        elif product_id in self._lines:
            self._selection.add(product_id)

    def select_all(self, selected: bool = True) -> None:
        self._selection = set(self._lines) if selected else set()

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def _changed(self) -> None:
        self._selection &= set(self._lines)
        rows = [asdict(item) for item in self._lines.values()]
        try:
            self.cache.write(CART_KEY, rows)
        except OSError as exc:
            logger.warning("Cart could not be written to the local cache", error=str(exc))
