"""
Digital Delivery Entity for E-commerce Domain

Tokenized, optionally expiring and download-capped access to the file of
a purchased digital product.
"""

import secrets
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from uuid import UUID

from storefront.core.domain import Entity, StatusEnum, ValidationException

from .product import DigitalFile


class DeliveryStatus(StatusEnum):
    ACTIVE = "active"
    REVOKED = "revoked"
    EXPIRED = "expired"


@dataclass
class DigitalDelivery(Entity[UUID]):
    """
    Download grant for one digital line of an order.

    Owned by a registered user or, for guest orders, by the guest email.
    """

    order_id: UUID | None = None
    product_id: UUID | None = None
    variant_id: UUID | None = None
    user_id: str | None = None
    guest_email: str | None = None
    download_token: str = ""
    download_count: int = 0
    max_downloads: int | None = None
    expires_at: datetime | None = None
    status: DeliveryStatus = DeliveryStatus.ACTIVE
    file_name: str = "download"
    file_url: str = ""

    def __post_init__(self):
        if not self.user_id and not self.guest_email:
            raise ValidationException("A digital delivery needs a user or a guest email", field="owner")

    @classmethod
    def issue(
        cls,
        order_id: UUID,
        product_id: UUID,
        digital_file: DigitalFile,
        variant_id: UUID | None = None,
        user_id: str | None = None,
        guest_email: str | None = None,
        now: datetime | None = None,
    ) -> "DigitalDelivery":
        """Create a fresh grant with a random 64-character hex token."""
        now = now or datetime.now(UTC)
        expires_at = now + timedelta(days=digital_file.expiry_days) if digital_file.expiry_days else None
        return cls(
            order_id=order_id,
            product_id=product_id,
            variant_id=variant_id,
            user_id=user_id,
            guest_email=guest_email,
            download_token=secrets.token_hex(32),
            max_downloads=digital_file.download_limit or None,
            expires_at=expires_at,
            file_name=digital_file.file_name or "download",
            file_url=digital_file.url,
            created_at=now,
            updated_at=now,
        )

    def is_valid(self, now: datetime | None = None) -> bool:
        """True while the grant is active, unexpired and under its download cap."""
        now = now or datetime.now(UTC)
        if self.status != DeliveryStatus.ACTIVE:
            return False
        if self.expires_at and now > self.expires_at:
            return False
        if self.max_downloads is not None and self.download_count >= self.max_downloads:
            return False
        return True
