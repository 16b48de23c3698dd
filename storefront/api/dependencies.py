"""
Shared FastAPI dependencies: container access and the optional buyer
identity taken from a bearer token.
"""

import logging

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer

from storefront.config.settings import get_settings
from storefront.core.container import DependencyContainer, get_container
from storefront.domains.ecommerce.application.dto import BuyerIdentity
from storefront.services.token_service import TokenService

logger = logging.getLogger(__name__)

_settings = get_settings()

# Guests check out too, so a missing token is not an error
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{_settings.API_V1_STR}/auth/token", auto_error=False)

MOBILE_CLIENT = "mobile"


def get_di_container() -> DependencyContainer:
    """Get Dependency Injection Container singleton."""
    return get_container()


def get_token_service() -> TokenService:
    return TokenService()


async def get_optional_buyer(
    token: str | None = Depends(oauth2_scheme),  # noqa: B008
    token_service: TokenService = Depends(get_token_service),  # noqa: B008
) -> BuyerIdentity | None:
    """
    Authenticated buyer, or None for guests.

    A token that is present but invalid is rejected with 401 rather than
    silently downgraded to a guest checkout.
    """
    if not token:
        return None
    payload = token_service.decode_token(token)
    return BuyerIdentity(user_id=str(payload["sub"]), email=payload.get("email"))


def is_mobile_client(request: Request) -> bool:
    """The mobile app identifies itself with `x-client: mobile` or `?client=mobile`."""
    header = request.headers.get("x-client", "")
    query = request.query_params.get("client", "")
    return MOBILE_CLIENT in (header.lower(), query.lower())
