"""Domain events for the Coupon aggregate."""

from protean.fields import Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Coupon")
class CouponSaved:
    """An admin created or replaced a coupon."""

    __version__ = 1

    code = Identifier(required=True)
    discount_type = String(required=True)
    usage_limit = Integer(required=True)
    expiry_date = String(required=True)


@commerce.event(part_of="Coupon")
class CouponRedeemed:
    """A checkout that used the coupon went through."""

    __version__ = 1

    code = Identifier(required=True)
    used_count = Integer(required=True)
