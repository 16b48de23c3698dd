"""
Checkout API Routes

FastAPI router for checkout, shipping options and coupon preview.
"""

import logging
from dataclasses import asdict

from fastapi import APIRouter, Depends, Header, Query, Request, status

from storefront.api.dependencies import get_optional_buyer, is_mobile_client
from storefront.config.settings import Settings, get_settings
from storefront.core.domain import AuthorizationException
from storefront.domains.ecommerce.application.dto import BuyerIdentity
from storefront.domains.ecommerce.application.use_cases import (
    CheckoutUseCase,
    GetShippingOptionsRequest,
    GetShippingOptionsUseCase,
    ValidateCouponRequest,
    ValidateCouponUseCase,
)

from .dependencies import get_checkout_use_case, get_shipping_options_use_case, get_validate_coupon_use_case
from .schemas import (
    CheckoutRequestSchema,
    CheckoutResponseSchema,
    ShippingOptionSchema,
    ShippingOptionsResponseSchema,
    ValidateCouponRequestSchema,
    ValidateCouponResponseSchema,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["checkout"])

MOBILE_LOGIN_REQUIRED = "Login required for checkout on mobile"


@router.post("/checkout", response_model=CheckoutResponseSchema, status_code=status.HTTP_201_CREATED)
async def checkout(
    request: Request,
    body: CheckoutRequestSchema,
    x_cart_session: str | None = Header(None),
    buyer: BuyerIdentity | None = Depends(get_optional_buyer),  # noqa: B008
    use_case: CheckoutUseCase = Depends(get_checkout_use_case),  # noqa: B008
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> CheckoutResponseSchema:
    """
    Place an order from the current cart.

    The cart is the buyer's when authenticated, otherwise the anonymous
    session's (cookie, then `x-cart-session` header, then body).
    """
    if buyer is None and settings.REQUIRE_LOGIN_FOR_MOBILE_CHECKOUT and is_mobile_client(request):
        raise AuthorizationException("checkout", MOBILE_LOGIN_REQUIRED)

    session_id = request.cookies.get(settings.CART_SESSION_COOKIE) or x_cart_session or body.session_id
    result = await use_case.execute(body.to_request(buyer, session_id))

    return CheckoutResponseSchema(
        order_id=result.order_id,
        order_number=result.order_number,
        tracking_code=result.tracking_code,
        total=result.total,
        status=result.status,
    )


@router.get("/shipping-zones", response_model=ShippingOptionsResponseSchema)
async def get_shipping_options(
    country: str | None = Query(None, max_length=100),
    state: str | None = Query(None, max_length=100),
    subtotal: int = Query(0, ge=0),
    use_case: GetShippingOptionsUseCase = Depends(get_shipping_options_use_case),  # noqa: B008
) -> ShippingOptionsResponseSchema:
    """Shipping methods available for an address."""
    response = await use_case.execute(GetShippingOptionsRequest(country=country, state=state, subtotal=subtotal))
    return ShippingOptionsResponseSchema(
        zone_id=response.zone_id,
        zone_name=response.zone_name,
        uses_legacy_rates=response.uses_legacy_rates,
        options=[ShippingOptionSchema(**asdict(option)) for option in response.options],
    )


@router.post("/coupons/validate", response_model=ValidateCouponResponseSchema)
async def validate_coupon(
    body: ValidateCouponRequestSchema,
    buyer: BuyerIdentity | None = Depends(get_optional_buyer),  # noqa: B008
    use_case: ValidateCouponUseCase = Depends(get_validate_coupon_use_case),  # noqa: B008
) -> ValidateCouponResponseSchema:
    """Preview a coupon's discount without using it."""
    response = await use_case.execute(ValidateCouponRequest(code=body.code, subtotal=body.subtotal, buyer=buyer))
    return ValidateCouponResponseSchema(
        code=response.code,
        discount_amount=response.discount_amount,
        discount_details=response.discount_details,
        description=response.description,
    )
