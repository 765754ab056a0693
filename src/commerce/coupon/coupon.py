"""Coupon aggregate: discount codes keyed by their upper-cased code.

``used_count`` is only ever incremented after a successful checkout, and that
increment is not part of the order's atomic unit. Concurrent checkouts can
therefore push ``used_count`` past ``usage_limit``, so the limit is checked at
validation time rather than enforced as an invariant here.
"""

from datetime import date
from enum import Enum

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String

from commerce.coupon.events import CouponRedeemed, CouponSaved
from commerce.domain import commerce


class DiscountType(Enum):
    PERCENTAGE = "percentage"
    FIXED = "fixed"


def normalize_code(code: str) -> str:
    return code.strip().upper()


@commerce.aggregate
class Coupon:
    code = Identifier(identifier=True)
    discount_type = String(required=True, choices=DiscountType)
    discount_value = Float(required=True, min_value=0.0)
    min_order_value = Float(default=0.0, min_value=0.0)
    usage_limit = Integer(required=True, min_value=0)
    used_count = Integer(default=0, min_value=0)
    expiry_date = String(required=True, max_length=10)  # ISO date YYYY-MM-DD
    is_active = Boolean(default=True)

    @invariant.post
    def expiry_date_must_be_iso(self):
        try:
            date.fromisoformat(self.expiry_date)
        except (TypeError, ValueError):
            raise ValidationError({"expiry_date": ["Expiry date must be an ISO date (YYYY-MM-DD)"]})

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.discount_type == DiscountType.PERCENTAGE.value and self.discount_value > 100:
            raise ValidationError({"discount_value": ["A percentage discount cannot exceed 100"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        code,
        discount_type,
        discount_value,
        usage_limit,
        expiry_date,
        min_order_value=0.0,
        is_active=True,
        used_count=0,
    ):
        coupon = cls(
            code=normalize_code(code),
            discount_type=discount_type,
            discount_value=discount_value,
            min_order_value=min_order_value,
            usage_limit=usage_limit,
            used_count=used_count,
            expiry_date=expiry_date,
            is_active=is_active,
        )
        coupon._announce_saved()
        return coupon

    def revise(self, discount_type, discount_value, usage_limit, expiry_date, min_order_value, is_active):
        """Replace the admin-editable terms; the usage count is kept."""
        with atomic_change(self):
            self.discount_type = discount_type
            self.discount_value = discount_value
            self.usage_limit = usage_limit
            self.expiry_date = expiry_date
            self.min_order_value = min_order_value
            self.is_active = is_active
        self._announce_saved()

    def _announce_saved(self):
        self.raise_(
            CouponSaved(
                code=self.code,
                discount_type=self.discount_type,
                usage_limit=self.usage_limit,
                expiry_date=self.expiry_date,
            )
        )

    # -------------------------------------------------------------------
    # Applicability
    # -------------------------------------------------------------------
    def failed_rules(self, subtotal: float, today: date) -> list[str]:
        """Names of the applicability rules this coupon fails for ``subtotal`` on ``today``."""
        failed = []
        if not self.is_active:
            failed.append("inactive")
        # A coupon is still usable on its expiry day
        if self.expiry_date < today.isoformat():
            failed.append("expired")
        if (self.used_count or 0) >= self.usage_limit:
            failed.append("usage_limit_reached")
        if subtotal < (self.min_order_value or 0.0):
            failed.append("below_min_order_value")
        return failed

    def redeem(self):
        self.used_count = (self.used_count or 0) + 1
        self.raise_(CouponRedeemed(code=self.code, used_count=self.used_count))
