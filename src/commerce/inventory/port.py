"""Stock store port.

The single primitive the reservation logic needs from the remote store is a
per-document conditional write: store a new quantity only if nobody else has
written the document since it was read.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


class StockStoreError(Exception):
    """The stock store could not be reached."""


@dataclass(frozen=True)
class StockRecord:
    """Stock of one product as read, tagged with the revision it was read at."""

    product_id: str
    quantity: int
    revision: int


class StockStore(ABC):
    @abstractmethod
    def read(self, product_id: str) -> StockRecord | None:
        """Return the current stock record, or None for an unknown product."""
        ...

    @abstractmethod
    def write_if_current(self, record: StockRecord, quantity: int) -> bool:
        """Store ``quantity`` if the document is still at ``record.revision``.

        Returns False, without writing, when the document moved on.
        """
        ...
