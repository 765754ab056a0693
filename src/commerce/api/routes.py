"""FastAPI routes for the commerce back office: products, coupons, orders and accounts."""

from fastapi import APIRouter, Query
from protean.utils.globals import current_domain

from commerce.account.management import SuspendAccount
from commerce.api.schemas import (
    AddProductRequest,
    AvailabilityResponse,
    CouponCodeResponse,
    CustomerResponse,
    OrderItemResponse,
    OrderResponse,
    PaymentResponse,
    ProductIdResponse,
    PurchaseResponse,
    RestockRequest,
    SaveCouponRequest,
    StatusResponse,
    UpdateOrderStatusRequest,
    ValidateCouponRequest,
    ValidateCouponResponse,
)
from commerce.catalogue.management import AddProduct, RestockProduct
from commerce.coupon.management import DeleteCoupon, SaveCoupon
from commerce.coupon.validation import CouponValidator, compute_discount
from commerce.errors import CouponRejected
from commerce.inventory import get_stock_store
from commerce.inventory.availability import check_availability
from commerce.order.history import all_orders, get_order, has_purchased, orders_for_user
from commerce.order.order import Order
from commerce.order.status import UpdateOrderStatus


def _order_response(order: Order) -> OrderResponse:
    return OrderResponse(
        order_id=str(order.id),
        user_id=str(order.user_id),
        status=order.status,
        status_step=order.status_step,
        customer=CustomerResponse(
            name=order.customer.name,
            phone=order.customer.phone,
            address=order.customer.address,
            email=order.customer.email,
            note=order.customer.note,
        ),
        payment=PaymentResponse(
            method=order.payment.method,
            subtotal=order.payment.subtotal,
            shipping=order.payment.shipping,
            coupon_code=order.payment.coupon_code,
            coupon_discount=order.payment.coupon_discount,
            total=order.payment.total,
        ),
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                title=item.title,
                cover=item.cover,
                price_at_purchase=item.price_at_purchase,
                quantity=item.quantity,
            )
            for item in order.items
        ],
        created_at=order.created_at.isoformat() if order.created_at else "",
    )


# ---------------------------------------------------------------------------
# Product Router
# ---------------------------------------------------------------------------
product_router = APIRouter(prefix="/products", tags=["products"])


@product_router.post("", status_code=201, response_model=ProductIdResponse)
async def add_product(body: AddProductRequest) -> ProductIdResponse:
    command = AddProduct(**body.model_dump(exclude_none=True))
    result = current_domain.process(command, asynchronous=False)
    return ProductIdResponse(product_id=result)


@product_router.put("/{product_id}/stock", response_model=StatusResponse)
async def restock_product(product_id: str, body: RestockRequest) -> StatusResponse:
    command = RestockProduct(product_id=product_id, stock_quantity=body.stock_quantity)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@product_router.get("/{product_id}/availability", response_model=AvailabilityResponse)
async def product_availability(product_id: str, quantity: int = Query(default=1, ge=1)) -> AvailabilityResponse:
    availability = check_availability(product_id, quantity, store=get_stock_store())
    return AvailabilityResponse(
        product_id=availability.product_id,
        available=availability.available,
        can_fulfill=availability.can_fulfill,
    )


# ---------------------------------------------------------------------------
# Coupon Router
# ---------------------------------------------------------------------------
coupon_router = APIRouter(prefix="/coupons", tags=["coupons"])


@coupon_router.put("", response_model=CouponCodeResponse)
async def save_coupon(body: SaveCouponRequest) -> CouponCodeResponse:
    command = SaveCoupon(**body.model_dump())
    code = current_domain.process(command, asynchronous=False)
    return CouponCodeResponse(code=code)


@coupon_router.delete("/{code}", response_model=StatusResponse)
async def delete_coupon(code: str) -> StatusResponse:
    current_domain.process(DeleteCoupon(code=code), asynchronous=False)
    return StatusResponse()


@coupon_router.post("/validate", response_model=ValidateCouponResponse)
async def validate_coupon(body: ValidateCouponRequest) -> ValidateCouponResponse:
    applied = CouponValidator().validate(body.code, body.subtotal)
    if applied is None:
        return ValidateCouponResponse(valid=False, message=CouponRejected(coupon_code=body.code).message)
    return ValidateCouponResponse(
        valid=True,
        code=applied.code,
        discount=compute_discount(applied, body.subtotal),
    )


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.get("", response_model=list[OrderResponse])
async def list_orders(user_id: str | None = None) -> list[OrderResponse]:
    orders = orders_for_user(user_id) if user_id else all_orders()
    return [_order_response(order) for order in orders]


@order_router.get("/{order_id}", response_model=OrderResponse)
async def order_detail(order_id: str) -> OrderResponse:
    return _order_response(get_order(order_id))


@order_router.put("/{order_id}/status", response_model=StatusResponse)
async def update_order_status(order_id: str, body: UpdateOrderStatusRequest) -> StatusResponse:
    command = UpdateOrderStatus(order_id=order_id, status_step=body.status_step)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Account Router
# ---------------------------------------------------------------------------
account_router = APIRouter(prefix="/accounts", tags=["accounts"])


@account_router.put("/{user_id}/suspend", response_model=StatusResponse)
async def suspend_account(user_id: str) -> StatusResponse:
    current_domain.process(SuspendAccount(user_id=user_id), asynchronous=False)
    return StatusResponse()


@account_router.get("/{user_id}/purchases/{product_id}", response_model=PurchaseResponse)
async def purchase_check(user_id: str, product_id: str) -> PurchaseResponse:
    return PurchaseResponse(user_id=user_id, product_id=product_id, purchased=has_purchased(user_id, product_id))
