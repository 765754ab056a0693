"""Domain events for the Order aggregate."""

from protean.fields import Float, Identifier, Integer, String

from commerce.domain import commerce


@commerce.event(part_of="Order")
class OrderPlaced:
    """Stock for every line was reserved and the order was stored."""

    __version__ = 1

    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    item_count = Integer(required=True)
    total = Float(required=True)
    coupon_code = String()


@commerce.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_step = Integer(required=True)
    status_step = Integer(required=True)
    status = String(required=True)
