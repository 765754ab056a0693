"""Storefront: the transaction core as seen by one buyer's device.

Wires the cart, the wishlist and checkout together over a local cache and the
remote store, and exposes the calls the UI makes.
"""

from commerce.cart.store import CartStore
from commerce.catalogue.lookup import Catalogue, DomainCatalogue
from commerce.checkout.pipeline import CheckoutPipeline, CheckoutResult
from commerce.coupon.validation import CouponValidator
from commerce.domain import commerce
from commerce.inventory import get_stock_store
from commerce.inventory.availability import check_availability
from commerce.inventory.port import StockStore
from commerce.inventory.reservation import InventoryReservation
from commerce.order.draft import CustomerInfo
from commerce.order.order import PaymentMethod
from commerce.order.transaction import OrderTransaction
from commerce.storage.port import LocalCache
from commerce.wishlist.remote import DomainWishlistRemote, WishlistRemote
from commerce.wishlist.sync import WishlistSyncEngine


class Storefront:
    def __init__(
        self,
        cache: LocalCache,
        stock_store: StockStore | None = None,
        wishlist_remote: WishlistRemote | None = None,
        catalogue: Catalogue | None = None,
        coupons: CouponValidator | None = None,
        check_stock_on_add: bool = True,
        domain=commerce,
    ) -> None:
        self.domain = domain
        self.stock_store = stock_store if stock_store is not None else get_stock_store()

        stock_check = None
        if check_stock_on_add:
            def stock_check(product_id, quantity):
                return check_availability(product_id, quantity, store=self.stock_store)

        self.cart = CartStore(cache, stock_check=stock_check)
        self.wishlist = WishlistSyncEngine(
            cache,
            remote=wishlist_remote if wishlist_remote is not None else DomainWishlistRemote(domain),
            catalogue=catalogue if catalogue is not None else DomainCatalogue(domain),
        )
        self.pipeline = CheckoutPipeline(
            self.cart,
            coupons=coupons,
            transaction=OrderTransaction(InventoryReservation(self.stock_store)),
        )

    def start(self) -> None:
        """Read the cart and wishlist back from the local cache."""
        self.cart.load()
        self.wishlist.load()

    def on_auth_changed(self, user_id: str | None) -> bool:
        """Feed identity-provider transitions in. ``None`` means signed out."""
        if user_id is None:
            self.wishlist.sign_out()
            return True
        return self.wishlist.sign_in(user_id)

    def checkout(
        self,
        customer: CustomerInfo,
        coupon_code: str | None = None,
        payment_method: PaymentMethod | str = PaymentMethod.COD,
    ) -> CheckoutResult:
        with self.domain.domain_context():
            return self.pipeline.checkout(
                self.cart.selected_items(),
                customer,
                coupon_code=coupon_code,
                user_id=self.wishlist.user_id,
                payment_method=payment_method,
            )

    def close(self) -> None:
        self.wishlist.close()
