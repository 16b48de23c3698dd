"""
Checkout API Schemas

Pydantic request/response models of the checkout endpoints. Amounts are
integer cents.
"""

from uuid import UUID

from pydantic import BaseModel, Field

from storefront.domains.ecommerce.application.dto import AddressInput, BuyerIdentity, CheckoutRequest


class AddressSchema(BaseModel):
    """Address as sent by the client. Required fields are checked by checkout."""

    first_name: str | None = Field(None, max_length=100)
    last_name: str | None = Field(None, max_length=100)
    company: str | None = Field(None, max_length=200)
    address1: str | None = Field(None, max_length=255)
    address2: str | None = Field(None, max_length=255)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100, description="Country code, upper-cased on save")
    phone: str | None = Field(None, max_length=40)

    def to_input(self) -> AddressInput:
        return AddressInput(**self.model_dump())


class CheckoutRequestSchema(BaseModel):
    shipping_address: AddressSchema | None = None
    billing_address: AddressSchema | None = None
    billing_same_as_shipping: bool = True
    guest_email: str | None = Field(None, max_length=254, description="Required for guests; blank counts as missing")
    shipping_method: str = Field("standard", max_length=50)
    coupon_code: str | None = Field(None, max_length=50)
    customer_note: str | None = Field(None, max_length=1000)
    session_id: str | None = Field(None, max_length=128, description="Anonymous cart session, if not sent as cookie")

    def to_request(self, buyer: BuyerIdentity | None, session_id: str | None) -> CheckoutRequest:
        return CheckoutRequest(
            shipping_address=self.shipping_address.to_input() if self.shipping_address else None,
            billing_address=self.billing_address.to_input() if self.billing_address else None,
            billing_same_as_shipping=self.billing_same_as_shipping,
            buyer=buyer,
            session_id=session_id,
            guest_email=(self.guest_email or "").strip() or None,
            shipping_method=self.shipping_method,
            coupon_code=self.coupon_code,
            customer_note=self.customer_note,
        )


class CheckoutResponseSchema(BaseModel):
    order_id: UUID
    order_number: str
    tracking_code: str | None = None
    total: int
    status: str


class ShippingOptionSchema(BaseModel):
    method_id: str
    label: str
    price: int
    cost: int
    free_threshold: int | None = None
    description: str = ""
    estimated_days: str = ""


class ShippingOptionsResponseSchema(BaseModel):
    zone_id: str | None = None
    zone_name: str | None = None
    uses_legacy_rates: bool = False
    options: list[ShippingOptionSchema] = Field(default_factory=list)


class ValidateCouponRequestSchema(BaseModel):
    code: str = Field(..., min_length=1, max_length=50)
    subtotal: int = Field(..., ge=0, description="Cart subtotal in cents")


class ValidateCouponResponseSchema(BaseModel):
    valid: bool = True
    code: str
    discount_amount: int
    discount_details: dict
    description: str = ""
