"""Catalogue read port: price, title and cover lookup by product id."""

from abc import ABC, abstractmethod

from protean.exceptions import ObjectNotFoundError

from commerce.catalogue.product import Product, ProductSnapshot
from commerce.domain import commerce


class Catalogue(ABC):
    @abstractmethod
    def get(self, product_id: str) -> ProductSnapshot | None:
        """Return the current snapshot of a product, or None if it does not exist."""
        ...

    def get_many(self, product_ids: list[str]) -> list[ProductSnapshot]:
        """Resolve ids in order, skipping ids that no longer exist."""
        snapshots = []
        for product_id in product_ids:
            snapshot = self.get(product_id)
            if snapshot is not None:
                snapshots.append(snapshot)
        return snapshots


class DomainCatalogue(Catalogue):
    """Reads products from the commerce domain's repository."""

    def __init__(self, domain=commerce) -> None:
        self.domain = domain

    def get(self, product_id: str) -> ProductSnapshot | None:
        with self.domain.domain_context():
            try:
                product = self.domain.repository_for(Product).get(product_id)
            except ObjectNotFoundError:
                return None
            return product.snapshot()
