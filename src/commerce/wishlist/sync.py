"""Wishlist sync: keeps the device's wishlist and the account's copy in step.

The local cache holds product snapshots and works signed out. Once a buyer
signs in, the id list on their account is authoritative:

* sign-in with a non-empty remote list replaces the local wishlist with it
  (no merge, the remote list wins);
* sign-in with an empty remote list and a non-empty local one pushes the
  local ids up once;
* every change while signed in writes the full id list in the background,
  a failed write is logged and dropped;
* sign-out reloads whatever the local cache holds.

Remote writes run on a single worker thread, so they land in the order they
were issued and a later write supersedes an earlier one.
"""

from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import asdict

import structlog

from commerce.catalogue.lookup import Catalogue
from commerce.catalogue.product import ProductSnapshot
from commerce.storage.port import WISHLIST_KEY, LocalCache
from commerce.wishlist.remote import WishlistRemote

logger = structlog.get_logger(__name__)


class WishlistSyncEngine:
    def __init__(
        self,
        cache: LocalCache,
        remote: WishlistRemote,
        catalogue: Catalogue,
        executor: ThreadPoolExecutor | None = None,
    ) -> None:
        self.cache = cache
        self.remote = remote
        self.catalogue = catalogue
        self._executor = executor or ThreadPoolExecutor(max_workers=1, thread_name_prefix="wishlist-sync")
        self._pending: list[Future] = []
        self._items: list[ProductSnapshot] = []
        self.user_id: str | None = None

    # -------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------
    @property
    def items(self) -> list[ProductSnapshot]:
        return list(self._items)

    @property
    def ids(self) -> list[str]:
        return [item.product_id for item in self._items]

    @property
    def signed_in(self) -> bool:
        return self.user_id is not None

    def contains(self, product_id: str) -> bool:
        return any(item.product_id == product_id for item in self._items)

    # -------------------------------------------------------------------
    # Authentication transitions
    # -------------------------------------------------------------------
    def load(self) -> None:
        items = []
        for row in self.cache.read(WISHLIST_KEY):
            try:
                items.append(ProductSnapshot.from_dict(row))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping unreadable wishlist row", row=row)
        self._items = items

    def sign_in(self, user_id: str) -> bool:
        """Reconcile with ``user_id``'s remote wishlist. Returns False for suspended accounts."""
        try:
            if self.remote.is_suspended(user_id):
                logger.warning("Suspended account refused", user_id=user_id)
                return False
            remote_ids = self.remote.fetch_ids(user_id)
        except Exception:
            # Offline sign-in: keep the local list, push nothing
            logger.exception("Remote wishlist unavailable at sign-in", user_id=user_id)
            self.user_id = user_id
            return True

        self.user_id = user_id
        if remote_ids:
            self._items = self.catalogue.get_many(remote_ids)
            self._persist_locally()
            logger.info("Wishlist replaced from account", user_id=user_id, count=len(self._items))
        elif self._items:
            self._push_remote()
            logger.info("Local wishlist pushed to account", user_id=user_id, count=len(self._items))
        return True

    def sign_out(self) -> None:
        self.user_id = None
        self.load()

    # -------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------
    def toggle(self, product: ProductSnapshot) -> bool:
        """Add or remove ``product``. Returns True when it is now in the wishlist."""
        if self.contains(product.product_id):
            self._items = [item for item in self._items if item.product_id != product.product_id]
            added = False
        else:
            self._items = [*self._items, product]
            added = True

        self._changed()
        return added

    def clear(self) -> None:
        self._items = []
        self._changed()

    def flush(self, timeout: float | None = None) -> None:
        """Block until every background write issued so far has finished."""
        pending, self._pending = self._pending, []
        wait(pending, timeout=timeout)

    def close(self) -> None:
        self.flush()
        self._executor.shutdown(wait=True)

    # -------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------
    def _changed(self) -> None:
        self._persist_locally()
        if self.signed_in:
            self._push_remote()

    def _persist_locally(self) -> None:
        try:
            self.cache.write(WISHLIST_KEY, [asdict(item) for item in self._items])
        except OSError as exc:
            logger.warning("Wishlist could not be written to the local cache", error=str(exc))

    def _push_remote(self) -> None:
        self._pending = [future for future in self._pending if not future.done()]
        self._pending.append(self._executor.submit(self._write_remote, self.user_id, self.ids))

    def _write_remote(self, user_id: str, product_ids: list[str]) -> None:
        try:
            self.remote.store_ids(user_id, product_ids)
        except Exception:
            logger.exception("Wishlist write failed", action="UPDATE_WISHLIST", status="failed", user_id=user_id)
            return
        logger.info("Wishlist written", action="UPDATE_WISHLIST", user_id=user_id, count=len(product_ids))
