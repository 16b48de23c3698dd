"""
Access token handling.

Storefront login lives elsewhere; this service only verifies the bearer
tokens it issues and can mint tokens for internal tooling.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from fastapi import HTTPException, status
from jose import JWTError, jwt

from storefront.config.settings import Settings, get_settings


class TokenService:
    """Encode and decode buyer access tokens (JWT, `sub` = user id)."""

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.SECRET_KEY = self.settings.JWT_SECRET_KEY
        self.ALGORITHM = self.settings.JWT_ALGORITHM

    def create_access_token(self, data: dict[str, Any], expires_delta: timedelta | None = None) -> str:
        """
        Create a signed access token.

        Args:
            data: Claims to include (must contain "sub")
            expires_delta: Lifetime, 30 minutes by default
        """
        to_encode = data.copy()
        expire = datetime.now(UTC) + (expires_delta or timedelta(minutes=30))
        to_encode.update({"exp": expire, "type": "access"})
        return jwt.encode(to_encode, self.SECRET_KEY, algorithm=self.ALGORITHM)

    def decode_token(self, token: str) -> dict[str, Any]:
        """
        Decode and verify a token.

        Raises:
            HTTPException: 401 when the signature or expiry is invalid
        """
        try:
            payload = jwt.decode(token, self.SECRET_KEY, algorithms=[self.ALGORITHM])
        except JWTError as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid or expired token",
                headers={"WWW-Authenticate": "Bearer"},
            ) from e
        if not payload.get("sub"):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Token has no subject",
                headers={"WWW-Authenticate": "Bearer"},
            )
        return payload
