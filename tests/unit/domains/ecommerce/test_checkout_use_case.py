"""
Unit tests for CheckoutUseCase against in-memory repositories.
"""

import asyncio
from datetime import timedelta

import pytest

from storefront.core.domain import InsufficientStockException, ValidationException
from storefront.domains.ecommerce.application.dto import AddressInput, BuyerIdentity, CheckoutRequest
from storefront.domains.ecommerce.application.use_cases import CheckoutPolicy
from storefront.domains.ecommerce.domain.entities import CartItem, DiscountType, ShippingMethod
from storefront.domains.ecommerce.domain.exceptions import (
    CartValidationException,
    CouponRedemptionException,
    EmptyCartException,
)
from storefront.domains.ecommerce.domain.value_objects import OrderStatus, ProductStatus, VariantAttributes

BUYER = BuyerIdentity(user_id="user-1", email="ada@example.com")


def shipping_address(**overrides) -> AddressInput:
    values = {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "address1": "1 Main St",
        "city": "Sacramento",
        "state": "ca",
        "zip_code": "95814",
        "country": "us",
    }
    values.update(overrides)
    return AddressInput(**values)


def member_request(**overrides) -> CheckoutRequest:
    values = {"shipping_address": shipping_address(), "buyer": BUYER}
    values.update(overrides)
    return CheckoutRequest(**values)


def guest_request(session_id: str = "sess-1", **overrides) -> CheckoutRequest:
    values = {
        "shipping_address": shipping_address(),
        "session_id": session_id,
        "guest_email": " Guest@Example.com ",
    }
    values.update(overrides)
    return CheckoutRequest(**values)


# ============================================================================
# Happy path
# ============================================================================


@pytest.mark.unit
class TestCheckoutSuccess:
    @pytest.mark.asyncio
    async def test_places_order(self, db, checkout_factory, dispatcher, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=20)
        cart = db.add_cart([CartItem(lamp.id, 2)], user_id=BUYER.user_id)
        use_case, uow = checkout_factory()

        result = await use_case.execute(member_request())

        assert result.total == 11349
        assert result.order_number == "LS2603-00001"
        assert result.status == "pending_payment"
        assert result.tracking_code is None

        order = db.orders[0]
        assert order.id == result.order_id
        assert order.subtotal == 10000
        assert order.shipping_cost == 499
        assert order.tax_amount == 850
        assert order.user_id == BUYER.user_id
        assert order.status == OrderStatus.PENDING_PAYMENT
        assert order.shipping_address.state == "ca"
        assert order.shipping_address.country == "US"
        assert order.billing_address == order.shipping_address
        assert [(item.name, item.quantity, item.line_total) for item in order.items] == [("Lamp", 2, 10000)]

        assert lamp.stock_quantity == 18
        assert lamp.total_sold == 2
        assert db.carts[cart.id].is_empty()
        assert uow.commits == 1
        assert uow.rollbacks == 0

    @pytest.mark.asyncio
    async def test_state_stored_as_typed_and_matched_case_insensitively(self, db, checkout_factory, us_zone):
        db.add_zone(
            name="California",
            countries=["US"],
            states=["CA"],
            methods=[ShippingMethod("standard", "California Standard", 299)],
        )
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=20)
        db.add_cart([CartItem(lamp.id, 1)], user_id=BUYER.user_id)

        await checkout_factory()[0].execute(member_request(shipping_address=shipping_address(state=" California ")))
        db.add_cart([CartItem(lamp.id, 1)], user_id="user-2")
        await checkout_factory()[0].execute(member_request(buyer=BuyerIdentity("user-2")))

        first, second = db.orders
        assert first.shipping_address.state == "California"
        assert first.shipping_cost == 499
        assert second.shipping_address.state == "ca"
        assert (second.shipping_cost, second.shipping_method_label) == (299, "California Standard")

    @pytest.mark.asyncio
    async def test_member_guest_email_is_ignored(self, db, checkout_factory, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=20)
        db.add_cart([CartItem(lamp.id, 1)], user_id=BUYER.user_id)

        await checkout_factory()[0].execute(member_request(guest_email="not-an-email"))

        assert db.orders[0].guest_email is None

    @pytest.mark.asyncio
    async def test_sequence_continues(self, db, checkout_factory, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=20)
        db.add_cart([CartItem(lamp.id, 1)], user_id="user-1")
        db.add_cart([CartItem(lamp.id, 1)], user_id="user-2")

        first = await checkout_factory()[0].execute(member_request())
        second = await checkout_factory()[0].execute(member_request(buyer=BuyerIdentity("user-2")))

        assert first.order_number == "LS2603-00001"
        assert second.order_number == "LS2603-00002"

    @pytest.mark.asyncio
    async def test_guest_checkout(self, db, checkout_factory, dispatcher, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=20)
        db.add_cart([CartItem(lamp.id, 1)], session_id="sess-1")

        result = await checkout_factory()[0].execute(guest_request())

        order = db.orders[0]
        assert order.user_id is None
        assert order.guest_email == "guest@example.com"
        assert len(result.tracking_code) == 12
        assert dispatcher.confirmations[0][2] == "guest@example.com"

    @pytest.mark.asyncio
    async def test_member_cart_preferred_over_session_cart(self, db, checkout_factory, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=20)
        mug = db.add_product(name="Mug", base_price=1200, stock_quantity=20)
        db.add_cart([CartItem(lamp.id, 1)], user_id=BUYER.user_id)
        db.add_cart([CartItem(mug.id, 1)], session_id="sess-1")

        await checkout_factory()[0].execute(member_request(session_id="sess-1"))

        assert [item.name for item in db.orders[0].items] == ["Lamp"]

    @pytest.mark.asyncio
    async def test_separate_billing_address(self, db, checkout_factory, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=20)
        db.add_cart([CartItem(lamp.id, 1)], user_id=BUYER.user_id)
        billing = shipping_address(address1="9 Office Park", city="Reno", state="NV")

        await checkout_factory()[0].execute(member_request(billing_same_as_shipping=False, billing_address=billing))

        order = db.orders[0]
        assert order.billing_address.city == "Reno"
        assert not order.billing_same_as_shipping

    @pytest.mark.asyncio
    async def test_variant_line(self, db, checkout_factory, us_zone):
        shirt = db.add_product(name="Shirt", base_price=2500, stock_quantity=50)
        red = db.add_variant(
            shirt,
            sku="SHIRT-RED",
            attributes=VariantAttributes.from_pairs([("Color", "Red")]),
            price=2700,
            stock_quantity=10,
        )
        db.add_cart([CartItem(shirt.id, 2, red.id)], user_id=BUYER.user_id)

        await checkout_factory()[0].execute(member_request())

        item = db.orders[0].items[0]
        assert item.price == 2700
        assert item.sku == "SHIRT-RED"
        assert item.variant_info == VariantAttributes.from_pairs([("Color", "Red")])
        assert red.stock_quantity == 8
        assert shirt.stock_quantity == 50
        assert shirt.total_sold == 0


# ============================================================================
# Coupons
# ============================================================================


@pytest.mark.unit
class TestCheckoutCoupons:
    @pytest.mark.asyncio
    async def test_coupon_capped_and_redeemed(self, db, checkout_factory, us_zone):
        lamp = db.add_product(name="Lamp", base_price=10000, stock_quantity=5)
        db.add_cart([CartItem(lamp.id, 1)], user_id=BUYER.user_id)
        coupon = db.add_coupon(
            code="SAVE20", discount_type=DiscountType.PERCENTAGE, discount_value=20, max_discount=1000
        )

        result = await checkout_factory()[0].execute(member_request(coupon_code="save20"))

        order = db.orders[0]
        assert order.discount == 1000
        assert order.discount_code == "SAVE20"
        assert result.total == 10000 + 499 + 850 - 1000
        assert coupon.usage_count == 1

    @pytest.mark.asyncio
    async def test_invalid_coupon_does_not_block_checkout(self, db, checkout_factory, us_zone):
        lamp = db.add_product(name="Lamp", base_price=10000, stock_quantity=5)
        db.add_cart([CartItem(lamp.id, 1)], user_id=BUYER.user_id)

        result = await checkout_factory()[0].execute(member_request(coupon_code="BOGUS"))

        assert result.total == 11349
        assert db.orders[0].discount_details is None

    @pytest.mark.asyncio
    async def test_last_coupon_use_goes_to_one_checkout(self, db, checkout_factory, us_zone):
        lamp = db.add_product(name="Lamp", base_price=10000, stock_quantity=5)
        db.add_cart([CartItem(lamp.id, 1)], user_id="user-1")
        db.add_cart([CartItem(lamp.id, 1)], user_id="user-2")
        coupon = db.add_coupon(code="LAST", discount_type=DiscountType.FIXED, discount_value=500, usage_limit=1)

        results = await asyncio.gather(
            checkout_factory()[0].execute(member_request(coupon_code="LAST")),
            checkout_factory()[0].execute(member_request(buyer=BuyerIdentity("user-2"), coupon_code="LAST")),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], CouponRedemptionException)
        assert coupon.usage_count == 1
        assert len(db.orders) == 1
        assert lamp.stock_quantity == 4


# ============================================================================
# Digital products
# ============================================================================


@pytest.mark.unit
class TestCheckoutDigital:
    @pytest.mark.asyncio
    async def test_member_gets_download_grant(self, db, checkout_factory, dispatcher, ebook, fixed_clock):
        db.add_cart([CartItem(ebook.id, 1)], user_id=BUYER.user_id)

        result = await checkout_factory()[0].execute(member_request())

        order = db.orders[0]
        assert order.shipping_method == "digital"
        assert order.shipping_cost == 0
        assert result.total == 1500 + 128

        assert len(db.deliveries) == 1
        grant = db.deliveries[0]
        assert grant.user_id == BUYER.user_id
        assert grant.order_id == order.id
        assert len(grant.download_token) == 64
        assert grant.file_name == "guide.pdf"
        assert grant.expires_at == fixed_clock() + timedelta(days=30)
        assert grant.is_valid(fixed_clock())

        _, deliveries, recipient = dispatcher.confirmations[0]
        assert deliveries == [grant]
        assert recipient == BUYER.email

    @pytest.mark.asyncio
    async def test_guest_digital_order_has_no_grant(self, db, checkout_factory, ebook):
        db.add_cart([CartItem(ebook.id, 1)], session_id="sess-1")

        result = await checkout_factory()[0].execute(guest_request())

        assert result.order_number
        assert db.deliveries == []

    @pytest.mark.asyncio
    async def test_guest_grant_when_enabled(self, db, checkout_factory, ebook):
        db.add_cart([CartItem(ebook.id, 1)], session_id="sess-1")
        use_case, _ = checkout_factory(CheckoutPolicy(guest_digital_delivery_enabled=True))

        await use_case.execute(guest_request())

        assert len(db.deliveries) == 1
        assert db.deliveries[0].guest_email == "guest@example.com"
        assert db.deliveries[0].user_id is None

    @pytest.mark.asyncio
    async def test_mixed_cart_pays_shipping(self, db, checkout_factory, ebook, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=5)
        db.add_cart([CartItem(ebook.id, 1), CartItem(lamp.id, 1)], user_id=BUYER.user_id)

        await checkout_factory()[0].execute(member_request())

        order = db.orders[0]
        assert order.shipping_method == "standard"
        assert order.shipping_cost == 499
        assert len(db.deliveries) == 1


# ============================================================================
# Failures
# ============================================================================


@pytest.mark.unit
class TestCheckoutFailures:
    @pytest.mark.asyncio
    async def test_missing_fields_reported_together(self, checkout_factory):
        request = guest_request(
            shipping_address=shipping_address(first_name=" ", zip_code=None),
            guest_email=None,
        )

        with pytest.raises(ValidationException) as exc_info:
            await checkout_factory()[0].execute(request)

        assert exc_info.value.message == (
            "Shipping first name is required; Shipping ZIP code is required; Email is required for guest checkout"
        )

    @pytest.mark.asyncio
    async def test_guest_email_format_checked(self, db, checkout_factory):
        with pytest.raises(ValidationException) as exc_info:
            await checkout_factory()[0].execute(guest_request(guest_email="guest.example.com"))

        assert exc_info.value.message == "A valid email is required for guest checkout"
        assert db.orders == []

    @pytest.mark.asyncio
    async def test_blank_guest_email_is_missing(self, checkout_factory):
        with pytest.raises(ValidationException, match="^Email is required for guest checkout$"):
            await checkout_factory()[0].execute(guest_request(guest_email="  "))

    @pytest.mark.asyncio
    async def test_billing_address_required_when_different(self, checkout_factory):
        with pytest.raises(ValidationException, match="Billing address is required"):
            await checkout_factory()[0].execute(member_request(billing_same_as_shipping=False))

    @pytest.mark.asyncio
    async def test_missing_shipping_address(self, checkout_factory):
        with pytest.raises(ValidationException, match="Shipping address is required"):
            await checkout_factory()[0].execute(member_request(shipping_address=None))

    @pytest.mark.asyncio
    async def test_no_cart(self, checkout_factory):
        with pytest.raises(EmptyCartException):
            await checkout_factory()[0].execute(member_request())

    @pytest.mark.asyncio
    async def test_empty_cart(self, db, checkout_factory):
        db.add_cart([], user_id=BUYER.user_id)
        with pytest.raises(EmptyCartException):
            await checkout_factory()[0].execute(member_request())

    @pytest.mark.asyncio
    async def test_inactive_product_fails_without_side_effects(self, db, checkout_factory, dispatcher, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=5)
        mug = db.add_product(name="Retired Mug", base_price=900, stock_quantity=5, status=ProductStatus.ARCHIVED)
        cart = db.add_cart([CartItem(lamp.id, 1), CartItem(mug.id, 1)], user_id=BUYER.user_id)
        coupon = db.add_coupon(code="SAVE5", discount_type=DiscountType.FIXED, discount_value=500)

        with pytest.raises(CartValidationException, match="Retired Mug is no longer available"):
            await checkout_factory()[0].execute(member_request(coupon_code="SAVE5"))

        assert db.orders == []
        assert lamp.stock_quantity == 5
        assert coupon.usage_count == 0
        assert len(db.carts[cart.id].items) == 2
        assert dispatcher.confirmations == []

    @pytest.mark.asyncio
    async def test_last_unit_sold_once(self, db, checkout_factory, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=1)
        db.add_cart([CartItem(lamp.id, 1)], user_id="user-1")
        db.add_cart([CartItem(lamp.id, 1)], user_id="user-2")

        results = await asyncio.gather(
            checkout_factory()[0].execute(member_request()),
            checkout_factory()[0].execute(member_request(buyer=BuyerIdentity("user-2"))),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, Exception)]
        assert len(failures) == 1
        assert isinstance(failures[0], (InsufficientStockException, CartValidationException))
        assert lamp.stock_quantity == 0
        assert lamp.total_sold == 1
        assert len(db.orders) == 1

    @pytest.mark.asyncio
    async def test_failed_reservation_rolls_back_earlier_lines(self, db, checkout_factory, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=5)
        mug = db.add_product(name="Mug", base_price=900, stock_quantity=1)
        cart = db.add_cart([CartItem(lamp.id, 2), CartItem(mug.id, 1)], user_id=BUYER.user_id)
        use_case, uow = checkout_factory()

        # Stock of the second line disappears after the cart was resolved
        original = use_case.product_repository.decrement_stock

        async def sell_out_mug_first(product_id, quantity, allow_backorder):
            if product_id == mug.id:
                mug.stock_quantity = 0
            return await original(product_id, quantity, allow_backorder)

        use_case.product_repository.decrement_stock = sell_out_mug_first

        with pytest.raises(InsufficientStockException) as exc_info:
            await use_case.execute(member_request())

        assert exc_info.value.message == "Mug no longer has enough stock (requested 1)"
        assert uow.rollbacks == 1
        assert uow.commits == 0
        assert lamp.stock_quantity == 5
        assert lamp.total_sold == 0
        assert db.orders == []
        assert len(db.carts[cart.id].items) == 2


# ============================================================================
# Notifications
# ============================================================================


@pytest.mark.unit
class TestCheckoutNotifications:
    @pytest.mark.asyncio
    async def test_low_stock_alert(self, db, checkout_factory, dispatcher, us_zone):
        lamp = db.add_product(sku="LAMP", name="Lamp", base_price=5000, stock_quantity=7)
        db.add_cart([CartItem(lamp.id, 3)], user_id=BUYER.user_id)

        await checkout_factory()[0].execute(member_request())

        assert len(dispatcher.low_stock_alerts) == 1
        alert = dispatcher.low_stock_alerts[0][0]
        assert (alert.name, alert.sku, alert.stock_quantity) == ("Lamp", "LAMP", 4)

    @pytest.mark.asyncio
    async def test_no_alert_above_threshold(self, db, checkout_factory, dispatcher, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=20)
        db.add_cart([CartItem(lamp.id, 1)], user_id=BUYER.user_id)

        await checkout_factory()[0].execute(member_request())

        assert dispatcher.low_stock_alerts == []
        assert len(dispatcher.confirmations) == 1

    @pytest.mark.asyncio
    async def test_dispatcher_failure_does_not_fail_checkout(self, db, checkout_factory, dispatcher, us_zone):
        lamp = db.add_product(name="Lamp", base_price=5000, stock_quantity=20)
        db.add_cart([CartItem(lamp.id, 1)], user_id=BUYER.user_id)

        def broken(*args, **kwargs):
            raise RuntimeError("queue full")

        dispatcher.notify_order_confirmed = broken

        result = await checkout_factory()[0].execute(member_request())

        assert result.order_number == "LS2603-00001"
        assert len(db.orders) == 1
