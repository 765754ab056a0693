"""Stock store backed by the Product aggregate."""

from protean.exceptions import ExpectedVersionError, ObjectNotFoundError

from commerce.catalogue.product import Product
from commerce.domain import commerce
from commerce.inventory.port import StockRecord, StockStore, StockStoreError


class DomainStockStore(StockStore):
    """Reads and conditionally writes ``Product.stock_quantity``.

    The record's revision is the aggregate ``_version``. A save made from a
    stale copy is refused by the repository with ``ExpectedVersionError``,
    whichever client or process wrote in between.
    """

    def __init__(self, domain=commerce) -> None:
        self.domain = domain

    def read(self, product_id: str) -> StockRecord | None:
        with self.domain.domain_context():
            try:
                product = self.domain.repository_for(Product).get(product_id)
            except ObjectNotFoundError:
                return None
            except ConnectionError as exc:
                raise StockStoreError(str(exc)) from exc
            return StockRecord(
                product_id=str(product.id),
                quantity=product.stock_quantity,
                revision=product._version,
            )

    def write_if_current(self, record: StockRecord, quantity: int) -> bool:
        with self.domain.domain_context():
            repo = self.domain.repository_for(Product)
            try:
                product = repo.get(record.product_id)
                if product._version != record.revision:
                    return False
                product.set_stock(quantity)
                repo.add(product)
            except (ExpectedVersionError, ObjectNotFoundError):
                return False
            except ConnectionError as exc:
                raise StockStoreError(str(exc)) from exc
            return True
