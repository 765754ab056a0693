"""Remote wishlist port and its adapter over the UserAccount document."""

from abc import ABC, abstractmethod

from protean.exceptions import ObjectNotFoundError

from commerce.account.account import UserAccount
from commerce.domain import commerce


class WishlistRemote(ABC):
    @abstractmethod
    def fetch_ids(self, user_id: str) -> list[str]:
        """Return the stored wishlist ids, empty for an unknown user."""
        ...

    @abstractmethod
    def store_ids(self, user_id: str, product_ids: list[str]) -> None:
        """Replace the stored wishlist ids."""
        ...

    @abstractmethod
    def is_suspended(self, user_id: str) -> bool:
        ...


class DomainWishlistRemote(WishlistRemote):
    """Reads and writes ``UserAccount.wishlist_ids``.

    Safe to call from a worker thread: each call enters the domain context
    itself.
    """

    def __init__(self, domain=commerce) -> None:
        self.domain = domain

    def _load(self, user_id):
        return self.domain.repository_for(UserAccount).get(user_id)

    def fetch_ids(self, user_id: str) -> list[str]:
        with self.domain.domain_context():
            try:
                return self._load(user_id).wishlist
            except ObjectNotFoundError:
                return []

    def store_ids(self, user_id: str, product_ids: list[str]) -> None:
        with self.domain.domain_context():
            repo = self.domain.repository_for(UserAccount)
            try:
                account = repo.get(user_id)
            except ObjectNotFoundError:
                account = UserAccount.register(user_id=user_id)
            account.replace_wishlist(product_ids)
            repo.add(account)

    def is_suspended(self, user_id: str) -> bool:
        with self.domain.domain_context():
            try:
                return self._load(user_id).is_banned
            except ObjectNotFoundError:
                return False
