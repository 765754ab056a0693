import pytest
from commerce.catalogue.management import AddProduct
from commerce.catalogue.product import Product
from commerce.coupon.coupon import Coupon
from commerce.inventory import reset_stock_store
from commerce.inventory.fake_store import FakeStockStore
from commerce.order.draft import CustomerInfo
from commerce.storage.memory_cache import MemoryCache
from protean import current_domain
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def commerce_bed():
    from commerce.domain import commerce

    bed = DomainFixture(commerce)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(commerce_bed):
    with commerce_bed.domain_context():
        yield

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()

    reset_stock_store()


@pytest.fixture()
def cache():
    return MemoryCache()


@pytest.fixture()
def fake_stock():
    return FakeStockStore()


@pytest.fixture()
def customer():
    return CustomerInfo(
        name="Nguyễn Văn An",
        phone="0901234567",
        address="12 Lý Thường Kiệt, Hà Nội",
        email="an@example.com",
    )


@pytest.fixture()
def make_product():
    """Store a product and return its snapshot."""

    def _make(product_id, stock=10, price=100000.0, title=None, cover=None):
        current_domain.process(
            AddProduct(
                product_id=product_id,
                title=title or f"Book {product_id}",
                price=price,
                cover=cover,
                stock_quantity=stock,
            ),
            asynchronous=False,
        )
        return current_domain.repository_for(Product).get(product_id).snapshot()

    return _make


@pytest.fixture()
def make_coupon():
    """Store a coupon; keyword arguments override the defaults."""

    def _make(code="SALE10", **overrides):
        terms = {
            "discount_type": "percentage",
            "discount_value": 10,
            "min_order_value": 0,
            "usage_limit": 100,
            "used_count": 0,
            "expiry_date": "2099-12-31",
            "is_active": True,
        }
        terms.update(overrides)
        coupon = Coupon.create(code=code, **terms)
        current_domain.repository_for(Coupon).add(coupon)
        return coupon

    return _make


@pytest.fixture()
def stock_of():
    def _stock_of(product_id):
        return current_domain.repository_for(Product).get(product_id).stock_quantity

    return _stock_of
