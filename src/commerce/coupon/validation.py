"""Coupon validation and discount math."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

import structlog
from protean.exceptions import ExpectedVersionError, ObjectNotFoundError
from protean.utils.globals import current_domain

from commerce.coupon.coupon import Coupon, DiscountType, normalize_code

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class AppliedCoupon:
    code: str
    discount_type: DiscountType
    discount_value: float


def compute_discount(applied: AppliedCoupon, subtotal: float) -> float:
    """Discount granted by ``applied`` on ``subtotal``.

    A fixed discount is returned as is, even when it exceeds the subtotal.
    """
    if applied.discount_type == DiscountType.PERCENTAGE:
        return subtotal * applied.discount_value / 100
    return applied.discount_value


class CouponValidator:
    def __init__(
        self,
        repository=None,
        today: Callable[[], date] = date.today,
        max_attempts: int = 5,
    ) -> None:
        self._repository = repository
        self.today = today
        self.max_attempts = max_attempts

    @property
    def repository(self):
        return self._repository if self._repository is not None else current_domain.repository_for(Coupon)

    def validate(self, code: str, subtotal: float) -> AppliedCoupon | None:
        """Return the applied coupon if every rule holds, otherwise None.

        The failing rule is logged but never returned, so callers can only
        show a generic message.
        """
        normalized = normalize_code(code or "")
        if not normalized:
            return None

        try:
            coupon = self.repository.get(normalized)
        except ObjectNotFoundError:
            logger.info("Coupon rejected", action="COUPON_REJECTED", code=normalized, rules=["not_found"])
            return None

        failed = coupon.failed_rules(subtotal, self.today())
        if failed:
            logger.info("Coupon rejected", action="COUPON_REJECTED", code=normalized, rules=failed, subtotal=subtotal)
            return None

        return AppliedCoupon(
            code=normalized,
            discount_type=DiscountType(coupon.discount_type),
            discount_value=coupon.discount_value,
        )

    def record_use(self, code: str) -> None:
        """Count one more redemption of ``code``.

        A save that loses to a concurrent redemption is redone from a fresh
        read, so no redemption is dropped. Gives up with ``ExpectedVersionError``
        after ``max_attempts`` lost races.
        """
        normalized = normalize_code(code)
        for attempt in range(1, self.max_attempts + 1):
            repo = self.repository
            coupon = repo.get(normalized)
            coupon.redeem()
            try:
                repo.add(coupon)
            except ExpectedVersionError:
                logger.info(
                    "Coupon use lost a race", action="COUPON_USE", status="retry", code=normalized, attempt=attempt
                )
                if attempt == self.max_attempts:
                    raise
                continue

            logger.info("Coupon used", action="COUPON_USE", code=coupon.code, used_count=coupon.used_count)
            return
