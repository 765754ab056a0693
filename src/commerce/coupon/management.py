"""Coupon administration: save and delete commands and handler."""

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Float, Integer, String
from protean.utils.globals import current_domain

from commerce.coupon.coupon import Coupon, normalize_code
from commerce.domain import commerce


@commerce.command(part_of="Coupon")
class SaveCoupon:
    """Create a coupon, or replace the terms of an existing one with the same code."""

    code = String(required=True, max_length=50)
    discount_type = String(required=True, max_length=20)
    discount_value = Float(required=True, min_value=0.0)
    min_order_value = Float(default=0.0, min_value=0.0)
    usage_limit = Integer(required=True, min_value=0)
    expiry_date = String(required=True, max_length=10)
    is_active = Boolean(default=True)


@commerce.command(part_of="Coupon")
class DeleteCoupon:
    code = String(required=True, max_length=50)


@commerce.command_handler(part_of=Coupon)
class CouponManagementHandler:
    @handle(SaveCoupon)
    def save_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        code = normalize_code(command.code)
        try:
            coupon = repo.get(code)
        except ObjectNotFoundError:
            coupon = Coupon.create(
                code=code,
                discount_type=command.discount_type,
                discount_value=command.discount_value,
                min_order_value=command.min_order_value,
                usage_limit=command.usage_limit,
                expiry_date=command.expiry_date,
                is_active=command.is_active,
            )
        else:
            coupon.revise(
                discount_type=command.discount_type,
                discount_value=command.discount_value,
                usage_limit=command.usage_limit,
                expiry_date=command.expiry_date,
                min_order_value=command.min_order_value,
                is_active=command.is_active,
            )
        repo.add(coupon)
        return code

    @handle(DeleteCoupon)
    def delete_coupon(self, command):
        repo = current_domain.repository_for(Coupon)
        coupon = repo.get(normalize_code(command.code))
        repo._dao.delete(coupon)
