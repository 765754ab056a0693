"""Typed failures returned by the transaction core.

Operations the UI has to branch on return either their success value or one
of these variants instead of raising. Every variant carries a stable ``code``
and a ``message`` fit for display.
"""

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class CommerceError:
    code: ClassVar[str] = "ERROR"

    @property
    def message(self) -> str:
        return "Something went wrong"

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


@dataclass(frozen=True)
class InvalidField(CommerceError):
    """A required input is missing or malformed."""

    field: str
    reason: str = "This field is required"

    code: ClassVar[str] = "VALIDATION"

    @property
    def message(self) -> str:
        return f"{self.field}: {self.reason}"


@dataclass(frozen=True)
class CouponRejected(CommerceError):
    """The coupon does not exist or does not apply. Which rule failed is only logged."""

    coupon_code: str

    code: ClassVar[str] = "COUPON_INVALID"

    @property
    def message(self) -> str:
        return "The coupon code is invalid or cannot be applied to this order"


@dataclass(frozen=True)
class OutOfStock(CommerceError):
    product_id: str
    title: str | None = None
    available: int = 0

    code: ClassVar[str] = "OUT_OF_STOCK"

    @property
    def message(self) -> str:
        return f"'{self.title or self.product_id}' does not have enough stock left"


@dataclass(frozen=True)
class StoreFailure(CommerceError):
    """The remote store could not be reached or the write kept losing races."""

    reason: str

    code: ClassVar[str] = "STORE_FAILURE"

    @property
    def message(self) -> str:
        return "The order could not be completed right now, please try again"
