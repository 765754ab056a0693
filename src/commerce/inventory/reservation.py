"""Stock reservation: the atomic check-and-decrement of one product's stock.

Each attempt reads the current record, checks there is enough stock and
writes the decremented count conditionally on the revision it read. Losing
the race to another writer means the read was stale, so the attempt starts
over from a fresh read.
"""

from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from commerce.errors import OutOfStock, StoreFailure
from commerce.inventory import get_stock_store
from commerce.inventory.port import StockStore, StockStoreError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Reservation:
    """Stock taken from a product by a successful reserve call."""

    product_id: str
    quantity: int


class InventoryReservation:
    def __init__(self, store: StockStore | None = None, max_attempts: int = 5) -> None:
        self.store = store if store is not None else get_stock_store()
        self.max_attempts = max_attempts

    def reserve(self, product_id: str, quantity: int) -> Reservation | OutOfStock | StoreFailure:
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        for attempt in range(1, self.max_attempts + 1):
            try:
                record = self.store.read(product_id)
                if record is None or record.quantity < quantity:
                    available = record.quantity if record else 0
                    logger.info(
                        "Stock reservation refused",
                        action="STOCK_RESERVED",
                        status="failed",
                        product_id=product_id,
                        requested=quantity,
                        available=available,
                    )
                    return OutOfStock(product_id=product_id, available=available)

                if self.store.write_if_current(record, record.quantity - quantity):
                    logger.info(
                        "Stock reserved",
                        action="STOCK_RESERVED",
                        product_id=product_id,
                        quantity=quantity,
                        remaining=record.quantity - quantity,
                    )
                    return Reservation(product_id=product_id, quantity=quantity)
            except StockStoreError as exc:
                logger.warning("Stock store unavailable during reservation", product_id=product_id, error=str(exc))
                return StoreFailure(reason=str(exc))

            logger.info("Stock write lost a race", action="STOCK_CONFLICT", product_id=product_id, attempt=attempt)

        return StoreFailure(reason=f"Stock of {product_id} kept changing, gave up after {self.max_attempts} attempts")

    def release(self, reservation: Reservation) -> bool:
        """Give reserved stock back. Returns False if the store would not take it."""
        for _ in range(self.max_attempts):
            try:
                record = self.store.read(reservation.product_id)
                if record is None:
                    logger.error("Cannot release stock of a missing product", product_id=reservation.product_id)
                    return False
                if self.store.write_if_current(record, record.quantity + reservation.quantity):
                    logger.info(
                        "Stock released",
                        action="STOCK_RELEASED",
                        product_id=reservation.product_id,
                        quantity=reservation.quantity,
                    )
                    return True
            except StockStoreError as exc:
                logger.error("Stock release failed", product_id=reservation.product_id, error=str(exc))
                return False

        logger.error("Stock release kept losing races", product_id=reservation.product_id)
        return False
