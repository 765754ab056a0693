"""Shared BDD fixtures and step definitions for checkout and coupons."""

from dataclasses import replace

import pytest
from commerce.cart.store import CartStore
from commerce.checkout.pipeline import CheckoutPipeline, CheckoutReceipt
from commerce.coupon.validation import CouponValidator
from commerce.inventory.domain_store import DomainStockStore
from commerce.inventory.reservation import InventoryReservation
from commerce.order.draft import CustomerInfo
from commerce.order.history import get_order
from commerce.order.transaction import OrderTransaction
from pytest_bdd import given, parsers, then, when


@pytest.fixture()
def cart(cache):
    return CartStore(cache)


@pytest.fixture()
def products():
    return {}


@pytest.fixture()
def outcome():
    """Container for the result of the last checkout."""
    return {"result": None}


@pytest.fixture()
def pipeline(cart):
    return CheckoutPipeline(
        cart,
        coupons=CouponValidator(),
        transaction=OrderTransaction(InventoryReservation(DomainStockStore())),
    )


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(
    parsers.cfparse('a customer "{name}" with phone "{phone}" and address "{address}"'),
    target_fixture="customer",
)
def a_customer(name, phone, address):
    return CustomerInfo(name=name, phone=phone, address=address)


@given("the customer leaves the address empty", target_fixture="customer")
def customer_without_address(customer):
    return replace(customer, address="")


@given(parsers.cfparse('the product "{product_id}" priced {price:d} with {stock:d} in stock'))
def a_product(make_product, products, product_id, price, stock):
    products[product_id] = make_product(product_id, stock=stock, price=float(price))


@given(parsers.cfparse('the cart holds {quantity:d} of "{product_id}"'))
def cart_holds(cart, products, quantity, product_id):
    cart.add(products[product_id], quantity)


@given(parsers.cfparse('"{product_id}" is deselected'))
def deselect(cart, product_id):
    cart.toggle_selection(product_id)


@given(
    parsers.cfparse(
        'a {kind} coupon "{code}" worth {value:d} with minimum {minimum:d}, limit {limit:d} and {used:d} used'
    )
)
def a_coupon(make_coupon, kind, code, value, minimum, limit, used):
    make_coupon(
        code,
        discount_type=kind,
        discount_value=value,
        min_order_value=minimum,
        usage_limit=limit,
        used_count=used,
    )


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the customer checks out")
def checks_out(pipeline, cart, customer, outcome):
    outcome["result"] = pipeline.checkout(cart.selected_items(), customer, user_id="u1")


@when(parsers.cfparse('the customer checks out with coupon "{code}"'))
def checks_out_with_coupon(pipeline, cart, customer, outcome, code):
    outcome["result"] = pipeline.checkout(cart.selected_items(), customer, coupon_code=code, user_id="u1")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("an order is placed with total {total:d}"))
def order_placed(outcome, total):
    result = outcome["result"]
    assert isinstance(result, CheckoutReceipt), result
    assert result.total == total
    assert get_order(result.order_id).payment.total == total


@then(parsers.cfparse('checkout fails with "{code:w}" for "{product_id}"'))
def checkout_fails_for(outcome, code, product_id):
    assert outcome["result"].code == code
    assert outcome["result"].product_id == product_id


@then(parsers.cfparse('checkout fails with "{code:w}"'))
def checkout_fails(outcome, code):
    assert outcome["result"].code == code


@then(parsers.cfparse('the stock of "{product_id}" is {quantity:d}'))
def stock_is(stock_of, product_id, quantity):
    assert stock_of(product_id) == quantity


@then("the cart is empty")
def cart_is_empty(cart):
    assert cart.items == []


@then(parsers.cfparse("the cart still holds {count:d} lines"))
def cart_holds_lines(cart, count):
    assert len(cart.items) == count


@then(parsers.cfparse("the cart still holds {count:d} line"))
def cart_holds_line(cart, count):
    assert len(cart.items) == count
