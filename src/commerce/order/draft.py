"""Inputs of an order before it exists: who is buying and what was priced."""

from dataclasses import dataclass

from commerce.order.order import Customer, PaymentMethod, PaymentSummary


@dataclass(frozen=True)
class CustomerInfo:
    name: str = ""
    phone: str = ""
    address: str = ""
    email: str | None = None
    note: str | None = None

    REQUIRED_FIELDS = ("name", "phone", "address")

    def missing_fields(self) -> list[str]:
        return [field for field in self.REQUIRED_FIELDS if not (getattr(self, field) or "").strip()]

    def to_customer(self) -> Customer:
        return Customer(
            name=self.name.strip(),
            phone=self.phone.strip(),
            address=self.address.strip(),
            email=self.email or None,
            note=self.note or None,
        )


@dataclass(frozen=True)
class OrderDraft:
    user_id: str
    customer: CustomerInfo
    subtotal: float
    shipping: float
    total: float
    discount: float = 0.0
    coupon_code: str | None = None
    payment_method: PaymentMethod = PaymentMethod.COD

    def payment_summary(self) -> PaymentSummary:
        return PaymentSummary(
            method=self.payment_method.value,
            subtotal=self.subtotal,
            shipping=self.shipping,
            coupon_code=self.coupon_code,
            coupon_discount=self.discount,
            total=self.total,
        )
