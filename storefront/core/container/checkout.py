"""
Checkout Domain Container.

Single Responsibility: Wire all checkout dependencies.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from storefront.config.settings import Settings
from storefront.domains.ecommerce.application.services import (
    CartSnapshotResolver,
    CouponValidator,
    OrderPricingEngine,
)
from storefront.domains.ecommerce.application.use_cases import (
    CheckoutPolicy,
    CheckoutUseCase,
    GetShippingOptionsUseCase,
    ValidateCouponUseCase,
)
from storefront.domains.ecommerce.domain.services import PricingService, ShippingZoneMatcher
from storefront.domains.ecommerce.infrastructure.notifications import (
    BackgroundNotificationDispatcher,
    LoggingNotificationSender,
    WebhookNotificationSender,
)
from storefront.domains.ecommerce.infrastructure.repositories import (
    SQLAlchemyCartRepository,
    SQLAlchemyCouponRepository,
    SQLAlchemyDigitalDeliveryRepository,
    SQLAlchemyOrderRepository,
    SQLAlchemyProductRepository,
    SQLAlchemyShippingZoneRepository,
    SQLAlchemyUnitOfWork,
)

logger = logging.getLogger(__name__)


class CheckoutContainer:
    """
    Checkout domain container.

    Stateless services and the notification dispatcher are created once;
    repositories and use cases are built per request on that request's
    session so they share one transaction.
    """

    def __init__(self, settings: Settings):
        """
        Initialize checkout container.

        Args:
            settings: Application settings
        """
        self.settings = settings
        self._dispatcher: BackgroundNotificationDispatcher | None = None

    # ==================== SHARED SERVICES ====================

    def create_pricing_service(self) -> PricingService:
        return PricingService(tax_rate=self.settings.TAX_RATE)

    def create_zone_matcher(self) -> ShippingZoneMatcher:
        return ShippingZoneMatcher(default_country=self.settings.DEFAULT_COUNTRY)

    def create_checkout_policy(self) -> CheckoutPolicy:
        return CheckoutPolicy(
            low_stock_threshold=self.settings.LOW_STOCK_THRESHOLD,
            default_country=self.settings.DEFAULT_COUNTRY,
            order_number_prefix=self.settings.ORDER_NUMBER_PREFIX,
            tracking_code_length=self.settings.TRACKING_CODE_LENGTH,
            guest_digital_delivery_enabled=self.settings.GUEST_DIGITAL_DELIVERY_ENABLED,
        )

    def get_notification_dispatcher(self) -> BackgroundNotificationDispatcher:
        """Get the notification dispatcher (singleton)."""
        if self._dispatcher is None:
            if self.settings.NOTIFICATIONS_WEBHOOK_URL:
                sender = WebhookNotificationSender(
                    self.settings.NOTIFICATIONS_WEBHOOK_URL,
                    timeout=self.settings.NOTIFICATIONS_TIMEOUT,
                )
                logger.info("Notifications will be delivered to the configured webhook")
            else:
                sender = LoggingNotificationSender()
                logger.info("No notification webhook configured, notifications are only logged")
            self._dispatcher = BackgroundNotificationDispatcher(sender)
        return self._dispatcher

    # ==================== REPOSITORIES ====================

    def create_cart_repository(self, db: AsyncSession) -> SQLAlchemyCartRepository:
        return SQLAlchemyCartRepository(session=db)

    def create_product_repository(self, db: AsyncSession) -> SQLAlchemyProductRepository:
        return SQLAlchemyProductRepository(session=db)

    def create_shipping_zone_repository(self, db: AsyncSession) -> SQLAlchemyShippingZoneRepository:
        return SQLAlchemyShippingZoneRepository(session=db, matcher=self.create_zone_matcher())

    def create_coupon_repository(self, db: AsyncSession) -> SQLAlchemyCouponRepository:
        return SQLAlchemyCouponRepository(session=db)

    def create_order_repository(self, db: AsyncSession) -> SQLAlchemyOrderRepository:
        return SQLAlchemyOrderRepository(session=db)

    def create_digital_delivery_repository(self, db: AsyncSession) -> SQLAlchemyDigitalDeliveryRepository:
        return SQLAlchemyDigitalDeliveryRepository(session=db)

    # ==================== USE CASES ====================

    def create_checkout_use_case(self, db: AsyncSession) -> CheckoutUseCase:
        """Create CheckoutUseCase with every repository on the same session."""
        product_repository = self.create_product_repository(db)
        coupon_repository = self.create_coupon_repository(db)
        coupon_validator = CouponValidator(coupon_repository)
        return CheckoutUseCase(
            cart_repository=self.create_cart_repository(db),
            product_repository=product_repository,
            coupon_repository=coupon_repository,
            order_repository=self.create_order_repository(db),
            digital_delivery_repository=self.create_digital_delivery_repository(db),
            unit_of_work=SQLAlchemyUnitOfWork(db),
            snapshot_resolver=CartSnapshotResolver(product_repository),
            pricing_engine=OrderPricingEngine(
                shipping_zone_repository=self.create_shipping_zone_repository(db),
                coupon_validator=coupon_validator,
                pricing_service=self.create_pricing_service(),
                zone_matcher=self.create_zone_matcher(),
            ),
            notification_dispatcher=self.get_notification_dispatcher(),
            policy=self.create_checkout_policy(),
        )

    def create_get_shipping_options_use_case(self, db: AsyncSession) -> GetShippingOptionsUseCase:
        return GetShippingOptionsUseCase(
            shipping_zone_repository=self.create_shipping_zone_repository(db),
            pricing_service=self.create_pricing_service(),
        )

    def create_validate_coupon_use_case(self, db: AsyncSession) -> ValidateCouponUseCase:
        return ValidateCouponUseCase(coupon_validator=CouponValidator(self.create_coupon_repository(db)))
