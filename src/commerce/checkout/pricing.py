"""Checkout pricing: subtotal, flat shipping fee and coupon discount."""

from dataclasses import dataclass

from commerce.coupon.validation import AppliedCoupon, compute_discount

FREE_SHIPPING_THRESHOLD = 500000
SHIPPING_FEE = 25000


@dataclass(frozen=True)
class PriceBreakdown:
    subtotal: float
    shipping: float
    discount: float
    total: float
    coupon_code: str | None = None


def shipping_for(subtotal: float) -> float:
    """Flat fee, waived once the subtotal is strictly above the threshold."""
    return 0.0 if subtotal > FREE_SHIPPING_THRESHOLD else float(SHIPPING_FEE)


def price_order(subtotal: float, applied: AppliedCoupon | None = None) -> PriceBreakdown:
    shipping = shipping_for(subtotal)
    discount = compute_discount(applied, subtotal) if applied else 0.0
    return PriceBreakdown(
        subtotal=subtotal,
        shipping=shipping,
        discount=discount,
        total=subtotal + shipping - discount,
        coupon_code=applied.code if applied else None,
    )
