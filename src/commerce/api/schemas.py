"""Pydantic request/response schemas for the commerce back-office API.

These are external contracts, kept apart from the internal protean commands.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------
class AddProductRequest(BaseModel):
    product_id: str | None = None
    title: str
    author: str | None = None
    price: float = Field(ge=0)
    cover: str | None = None
    stock_quantity: int = Field(ge=0, default=0)

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "book-001",
                    "title": "Dế Mèn phiêu lưu ký",
                    "author": "Tô Hoài",
                    "price": 85000,
                    "stock_quantity": 12,
                }
            ]
        }
    }


class RestockRequest(BaseModel):
    stock_quantity: int = Field(ge=0)


class ProductIdResponse(BaseModel):
    product_id: str


class AvailabilityResponse(BaseModel):
    product_id: str
    available: int
    can_fulfill: bool


# ---------------------------------------------------------------------------
# Coupons
# ---------------------------------------------------------------------------
class SaveCouponRequest(BaseModel):
    code: str = Field(min_length=1, max_length=50)
    discount_type: str = Field(pattern="^(percentage|fixed)$")
    discount_value: float = Field(ge=0)
    min_order_value: float = Field(ge=0, default=0)
    usage_limit: int = Field(ge=0)
    expiry_date: str = Field(description="ISO date, YYYY-MM-DD")
    is_active: bool = True

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "sale10",
                    "discount_type": "percentage",
                    "discount_value": 10,
                    "min_order_value": 200000,
                    "usage_limit": 100,
                    "expiry_date": "2026-12-31",
                }
            ]
        }
    }


class CouponCodeResponse(BaseModel):
    code: str


class ValidateCouponRequest(BaseModel):
    code: str
    subtotal: float = Field(ge=0)


class ValidateCouponResponse(BaseModel):
    valid: bool
    code: str | None = None
    discount: float = 0.0
    message: str | None = None


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------
class UpdateOrderStatusRequest(BaseModel):
    status_step: int = Field(ge=0, le=3)


class OrderItemResponse(BaseModel):
    product_id: str
    title: str
    cover: str | None = None
    price_at_purchase: float
    quantity: int


class CustomerResponse(BaseModel):
    name: str
    phone: str
    address: str
    email: str | None = None
    note: str | None = None


class PaymentResponse(BaseModel):
    method: str
    subtotal: float
    shipping: float
    coupon_code: str | None = None
    coupon_discount: float
    total: float


class OrderResponse(BaseModel):
    order_id: str
    user_id: str
    status: str
    status_step: int
    customer: CustomerResponse
    payment: PaymentResponse
    items: list[OrderItemResponse]
    created_at: str


class StatusResponse(BaseModel):
    status: str = "ok"


class PurchaseResponse(BaseModel):
    user_id: str
    product_id: str
    purchased: bool
