import pytest
from commerce.coupon.coupon import Coupon
from commerce.coupon.management import DeleteCoupon, SaveCoupon
from protean import current_domain
from protean.exceptions import ObjectNotFoundError, ValidationError


def _save(**overrides):
    fields = {
        "code": "welcome",
        "discount_type": "fixed",
        "discount_value": 20000,
        "min_order_value": 100000,
        "usage_limit": 50,
        "expiry_date": "2099-01-01",
    }
    fields.update(overrides)
    return current_domain.process(SaveCoupon(**fields), asynchronous=False)


class TestSaveCoupon:
    def test_creates_coupon_under_upper_cased_code(self):
        assert _save() == "WELCOME"

        coupon = current_domain.repository_for(Coupon).get("WELCOME")
        assert coupon.discount_type == "fixed"
        assert coupon.used_count == 0

    def test_saving_again_revises_terms_and_keeps_usage(self, make_coupon):
        make_coupon("WELCOME", used_count=7)
        _save(code="Welcome", discount_value=30000, usage_limit=80)

        coupon = current_domain.repository_for(Coupon).get("WELCOME")
        assert coupon.discount_value == 30000
        assert coupon.usage_limit == 80
        assert coupon.used_count == 7

    def test_invalid_expiry_rejected(self):
        with pytest.raises(ValidationError):
            _save(expiry_date="soon")


class TestDeleteCoupon:
    def test_delete(self, make_coupon):
        make_coupon("BYE")
        current_domain.process(DeleteCoupon(code="bye"), asynchronous=False)

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Coupon).get("BYE")

    def test_delete_unknown(self):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(DeleteCoupon(code="NOPE"), asynchronous=False)
