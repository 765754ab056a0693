"""Checkout pipeline: from selected cart lines to a stored order.

1. Check the customer form and the selection.
2. Pre-check stock for every line. This read is advisory, only the
   reservation in step 4 takes stock.
3. Price the selection and apply the coupon, if one was given.
4. Reserve stock and store the order through ``OrderTransaction``.
5. After the order exists: count the coupon use and drop the checked-out
   lines from the cart.

Any failure before step 5 is returned as a typed error and leaves the cart
and its selection exactly as they were.
"""

from collections.abc import Iterable
from dataclasses import dataclass

import structlog
from protean.exceptions import ValidationError

from commerce.cart.store import CartStore, LineItem, subtotal_of
from commerce.checkout.pricing import price_order
from commerce.coupon.validation import CouponValidator
from commerce.errors import CouponRejected, InvalidField, OutOfStock, StoreFailure
from commerce.inventory.availability import validate_items
from commerce.inventory.port import StockStoreError
from commerce.order.draft import CustomerInfo, OrderDraft
from commerce.order.order import Order, PaymentMethod
from commerce.order.transaction import OrderTransaction

logger = structlog.get_logger(__name__)

GUEST_USER_ID = "guest"


@dataclass(frozen=True)
class CheckoutReceipt:
    order_id: str
    total: float


CheckoutResult = CheckoutReceipt | InvalidField | CouponRejected | OutOfStock | StoreFailure


class CheckoutPipeline:
    def __init__(
        self,
        cart: CartStore,
        coupons: CouponValidator | None = None,
        transaction: OrderTransaction | None = None,
    ) -> None:
        self.cart = cart
        self.coupons = coupons if coupons is not None else CouponValidator()
        self.transaction = transaction if transaction is not None else OrderTransaction()

    def checkout(
        self,
        items: Iterable[LineItem],
        customer: CustomerInfo,
        coupon_code: str | None = None,
        user_id: str | None = None,
        payment_method: PaymentMethod | str = PaymentMethod.COD,
    ) -> CheckoutResult:
        items = list(items)

        missing = customer.missing_fields()
        if missing:
            return InvalidField(field=missing[0])
        if not items:
            return InvalidField(field="items", reason="Select at least one item to check out")
        try:
            method = PaymentMethod(payment_method)
        except ValueError:
            return InvalidField(field="payment_method", reason=f"Unknown payment method '{payment_method}'")

        shortfall = self._stock_shortfall(items)
        if shortfall is not None:
            return shortfall

        subtotal = subtotal_of(items)
        applied = None
        if coupon_code and coupon_code.strip():
            applied = self.coupons.validate(coupon_code, subtotal)
            if applied is None:
                return CouponRejected(coupon_code=coupon_code)

        breakdown = price_order(subtotal, applied)
        draft = OrderDraft(
            user_id=user_id or GUEST_USER_ID,
            customer=customer,
            subtotal=breakdown.subtotal,
            shipping=breakdown.shipping,
            discount=breakdown.discount,
            total=breakdown.total,
            coupon_code=breakdown.coupon_code,
            payment_method=method,
        )

        try:
            result = self.transaction.create(draft, items)
        except ValidationError as exc:
            field, reasons = next(iter(exc.messages.items()))
            return InvalidField(field=field, reason=reasons[0] if reasons else "is invalid")

        if not isinstance(result, Order):
            return result

        if applied is not None:
            try:
                self.coupons.record_use(applied.code)
            except Exception:
                logger.exception("Coupon usage could not be recorded", code=applied.code, order_id=str(result.id))

        self.cart.remove_many(item.product_id for item in items)
        return CheckoutReceipt(order_id=str(result.id), total=breakdown.total)

    def _stock_shortfall(self, items: list[LineItem]) -> OutOfStock | StoreFailure | None:
        """Report the first line that current stock cannot serve."""
        try:
            shortfalls = validate_items(items, store=self.transaction.reservation.store)
        except StockStoreError as exc:
            logger.warning("Stock pre-check failed", error=str(exc))
            return StoreFailure(reason=str(exc))
        if not shortfalls:
            return None

        first = shortfalls[0]
        title = next(item.title for item in items if item.product_id == first.product_id)
        logger.info(
            "Checkout stopped by stock pre-check",
            product_id=first.product_id,
            shortfall=first.kind.value,
            requested=first.requested,
            available=first.available,
        )
        return OutOfStock(product_id=first.product_id, title=title, available=first.available)
