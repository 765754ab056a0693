"""User account document: the remote, authoritative home of a buyer's wishlist."""

import json
from datetime import UTC, datetime
from enum import Enum

from protean.fields import DateTime, Identifier, String, Text

from commerce.account.events import AccountSuspended, WishlistReplaced
from commerce.domain import commerce


class AccountStatus(Enum):
    ACTIVE = "active"
    BANNED = "banned"


@commerce.aggregate
class UserAccount:
    user_id = Identifier(identifier=True)
    email = String(max_length=254)
    display_name = String(max_length=255)
    status = String(choices=AccountStatus, default=AccountStatus.ACTIVE.value)
    wishlist_ids = Text()  # JSON array of product ids
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def register(cls, user_id, email=None, display_name=None):
        now = datetime.now(UTC)
        return cls(
            user_id=user_id,
            email=email,
            display_name=display_name,
            status=AccountStatus.ACTIVE.value,
            wishlist_ids=json.dumps([]),
            created_at=now,
            updated_at=now,
        )

    @property
    def wishlist(self) -> list[str]:
        return json.loads(self.wishlist_ids) if self.wishlist_ids else []

    @property
    def is_banned(self) -> bool:
        return self.status == AccountStatus.BANNED.value

    def replace_wishlist(self, product_ids):
        ids = [str(product_id) for product_id in product_ids]
        self.wishlist_ids = json.dumps(ids)
        self.updated_at = datetime.now(UTC)
        self.raise_(
            WishlistReplaced(
                user_id=str(self.user_id),
                product_ids=self.wishlist_ids,
                item_count=len(ids),
            )
        )

    def suspend(self):
        self.status = AccountStatus.BANNED.value
        self.updated_at = datetime.now(UTC)
        self.raise_(AccountSuspended(user_id=str(self.user_id)))
