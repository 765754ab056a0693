"""Local durable cache port (key → JSON array), readable without the network."""

from abc import ABC, abstractmethod

CART_KEY = "cart"
WISHLIST_KEY = "wishlist"


class LocalCache(ABC):
    @abstractmethod
    def read(self, key: str) -> list[dict]:
        """Return the rows stored under ``key``, or an empty list."""
        ...

    @abstractmethod
    def write(self, key: str, rows: list[dict]) -> None:
        """Replace everything stored under ``key``. May raise OSError."""
        ...
