"""Order aggregate (CQRS): created once by the order transaction.

Line items, customer details and the payment summary are frozen at creation.
Only the fulfilment status moves afterwards, driven by an admin:

    0 processing → 1 confirmed → 2 shipping → 3 delivered

The UI only ever moves forward, but any step can be set at any time.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from commerce.domain import commerce
from commerce.order.events import OrderPlaced, OrderStatusChanged


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------
class OrderStatus(Enum):
    PROCESSING = "processing"
    CONFIRMED = "confirmed"
    SHIPPING = "shipping"
    DELIVERED = "delivered"


# Index is the status step
STATUS_BY_STEP = (
    OrderStatus.PROCESSING,
    OrderStatus.CONFIRMED,
    OrderStatus.SHIPPING,
    OrderStatus.DELIVERED,
)

FINAL_STEP = len(STATUS_BY_STEP) - 1


class PaymentMethod(Enum):
    COD = "cod"
    ONLINE = "online"


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@commerce.value_object(part_of="Order")
class Customer:
    """Contact and delivery details typed in at checkout."""

    name = String(required=True, max_length=255)
    phone = String(required=True, max_length=30)
    address = String(required=True, max_length=500)
    email = String(max_length=254)
    note = Text()


@commerce.value_object(part_of="Order")
class PaymentSummary:
    """Amounts charged for the order, computed once at checkout.

    ``total`` is not floored at zero: a fixed coupon larger than the
    subtotal yields a negative total.
    """

    method = String(choices=PaymentMethod, default=PaymentMethod.COD.value)
    subtotal = Float(default=0.0)
    shipping = Float(default=0.0)
    coupon_code = String(max_length=50)
    coupon_discount = Float(default=0.0)
    total = Float(default=0.0)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@commerce.entity(part_of="Order")
class OrderItem:
    """A purchased line, with the price it had when it was put in the cart."""

    product_id = Identifier(required=True)
    title = String(required=True, max_length=255)
    cover = String(max_length=1000)
    price_at_purchase = Float(required=True, min_value=0.0)
    quantity = Integer(required=True, min_value=1)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@commerce.aggregate
class Order:
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PROCESSING.value)
    status_step = Integer(default=0, min_value=0, max_value=FINAL_STEP)
    customer = ValueObject(Customer)
    payment = ValueObject(PaymentSummary)
    items = HasMany(OrderItem)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def place(cls, user_id, customer, payment, line_items):
        """Build a new order at step 0 from line items carrying their frozen price."""
        now = datetime.now(UTC)
        order = cls(
            user_id=user_id,
            status=OrderStatus.PROCESSING.value,
            status_step=0,
            customer=customer,
            payment=payment,
            created_at=now,
            updated_at=now,
        )
        for line in line_items:
            order.add_items(
                OrderItem(
                    product_id=line.product_id,
                    title=line.title,
                    cover=line.cover,
                    price_at_purchase=line.unit_price,
                    quantity=line.quantity,
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                user_id=str(user_id),
                item_count=len(order.items),
                total=payment.total,
                coupon_code=payment.coupon_code,
            )
        )
        return order

    def set_status_step(self, step):
        if not 0 <= step <= FINAL_STEP:
            raise ValidationError({"status_step": [f"Status step must be between 0 and {FINAL_STEP}"]})

        previous_step = self.status_step
        self.status_step = step
        self.status = STATUS_BY_STEP[step].value
        self.updated_at = datetime.now(UTC)

        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_step=previous_step,
                status_step=step,
                status=self.status,
            )
        )

    @property
    def is_delivered(self):
        return self.status_step == FINAL_STEP
