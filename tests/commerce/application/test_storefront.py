import pytest
from commerce.checkout.pipeline import CheckoutReceipt
from commerce.errors import OutOfStock
from commerce.order.history import get_order, orders_for_user
from commerce.storage.memory_cache import MemoryCache
from commerce.storefront import Storefront
from commerce.wishlist.remote import DomainWishlistRemote


@pytest.fixture()
def storefront(cache):
    front = Storefront(cache)
    front.start()
    yield front
    front.close()


class TestStorefront:
    def test_browse_sign_in_and_check_out(self, storefront, make_product, customer, stock_of):
        book = make_product("P1", stock=3, price=200000.0)
        storefront.cart.add(book, 2)

        assert storefront.on_auth_changed("u1") is True
        result = storefront.checkout(customer)

        assert isinstance(result, CheckoutReceipt)
        assert get_order(result.order_id).user_id == "u1"
        assert [str(o.id) for o in orders_for_user("u1")] == [result.order_id]
        assert stock_of("P1") == 1
        assert storefront.cart.items == []

    def test_add_beyond_stock_is_refused(self, storefront, make_product):
        book = make_product("P1", stock=1)
        assert storefront.cart.add(book) is True
        assert storefront.cart.add(book) is False
        assert storefront.cart.get("P1").quantity == 1

    def test_checkout_failure_keeps_cart(self, storefront, make_product, customer, stock_of):
        cheap = make_product("P1", stock=5)
        scarce = make_product("P2", stock=1)
        storefront.cart.add(cheap)
        storefront.cart.add(scarce)
        storefront.stock_store.write_if_current(storefront.stock_store.read("P2"), 0)

        result = storefront.checkout(customer)

        assert isinstance(result, OutOfStock)
        assert stock_of("P1") == 5
        assert len(storefront.cart.items) == 2

    def test_wishlist_follows_auth_changes(self, storefront, make_product):
        a = make_product("A")
        c = make_product("C")
        DomainWishlistRemote().store_ids("u1", [c.product_id])
        storefront.wishlist.toggle(a)

        storefront.on_auth_changed("u1")
        assert storefront.wishlist.ids == ["C"]

        storefront.on_auth_changed(None)
        assert storefront.wishlist.ids == ["C"]
        assert not storefront.wishlist.signed_in

    def test_state_survives_restart(self, make_product):
        cache = MemoryCache()
        first = Storefront(cache)
        first.start()
        first.cart.add(make_product("P1"), 2)
        first.wishlist.toggle(make_product("P2"))
        first.close()

        second = Storefront(cache)
        second.start()
        assert second.cart.get("P1").quantity == 2
        assert second.wishlist.ids == ["P2"]
        second.close()
