"""Read-side queries over stored orders."""

from protean.utils.globals import current_domain

from commerce.order.order import Order


def get_order(order_id: str) -> Order:
    """Load one order with its items. Raises ObjectNotFoundError for unknown ids."""
    return current_domain.repository_for(Order).get(order_id)


def orders_for_user(user_id: str) -> list[Order]:
    """A buyer's orders, newest first."""
    repo = current_domain.repository_for(Order)
    orders = repo._dao.query.filter(user_id=user_id).all().items
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


def all_orders() -> list[Order]:
    """Every order in the store, newest first (back-office listing)."""
    repo = current_domain.repository_for(Order)
    orders = repo._dao.query.all().items
    return sorted(orders, key=lambda order: order.created_at, reverse=True)


def has_purchased(user_id: str, product_id: str) -> bool:
    return any(
        str(item.product_id) == str(product_id) for order in orders_for_user(user_id) for item in order.items
    )
