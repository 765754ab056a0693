"""Commerce back-office API package."""

from commerce.api.routes import account_router, coupon_router, order_router, product_router

__all__ = ["product_router", "coupon_router", "order_router", "account_router"]
