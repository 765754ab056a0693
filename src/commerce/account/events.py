"""Domain events for the UserAccount aggregate."""

from protean.fields import Identifier, Integer, Text

from commerce.domain import commerce


@commerce.event(part_of="UserAccount")
class WishlistReplaced:
    __version__ = 1

    user_id = Identifier(required=True)
    product_ids = Text(required=True)  # JSON array
    item_count = Integer(required=True)


@commerce.event(part_of="UserAccount")
class AccountSuspended:
    __version__ = 1

    user_id = Identifier(required=True)
