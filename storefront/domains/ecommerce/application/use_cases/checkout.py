"""
Checkout Use Case

Turns a cart into a pending-payment order: validates input, prices the
order, reserves stock, redeems the coupon, issues download grants and
empties the cart in one transaction, then notifies in the background.
"""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from email_validator import EmailNotValidError, validate_email

from storefront.core.domain import Address, DomainException, InsufficientStockException, ValidationException
from storefront.core.shared.logger import ContextLogger, get_service_logger
from storefront.domains.ecommerce.application.dto import (
    AddressInput,
    CheckoutRequest,
    CheckoutResult,
    LowStockItem,
    PricingResult,
    ResolvedItem,
)
from storefront.domains.ecommerce.application.ports import (
    ICartRepository,
    ICouponRepository,
    IDigitalDeliveryRepository,
    INotificationDispatcher,
    IOrderRepository,
    IProductRepository,
    IUnitOfWork,
)
from storefront.domains.ecommerce.application.services import CartSnapshotResolver, OrderPricingEngine
from storefront.domains.ecommerce.domain.entities import Cart, DigitalDelivery, Order, OrderItem
from storefront.domains.ecommerce.domain.exceptions import CouponRedemptionException, EmptyCartException
from storefront.domains.ecommerce.domain.services import generate_order_number, generate_tracking_code
from storefront.domains.ecommerce.domain.value_objects import OrderStatus, PaymentStatus

FIELD_LABELS = {
    "first_name": "first name",
    "last_name": "last name",
    "address1": "address",
    "city": "city",
    "state": "state",
    "zip_code": "ZIP code",
}


GUEST_EMAIL_REQUIRED = "Email is required for guest checkout"
GUEST_EMAIL_INVALID = "A valid email is required for guest checkout"


@dataclass(frozen=True)
class CheckoutPolicy:
    """Store-level knobs of the checkout flow."""

    low_stock_threshold: int = 5
    default_country: str = "US"
    order_number_prefix: str = "LS"
    tracking_code_length: int = 12
    guest_digital_delivery_enabled: bool = False


class CheckoutUseCase:
    """
    Use Case: Checkout

    Responsibilities:
    - Validate addresses and guest contact before touching storage
    - Resolve the cart against the catalog and price it
    - Create the order, take stock, redeem the coupon, issue download
      grants and clear the cart, all committed together
    - Queue low-stock and confirmation notifications after commit

    Any failure inside the transaction rolls every write back, so a failed
    checkout leaves no order, no stock change and no coupon use behind.
    """

    def __init__(
        self,
        cart_repository: ICartRepository,
        product_repository: IProductRepository,
        coupon_repository: ICouponRepository,
        order_repository: IOrderRepository,
        digital_delivery_repository: IDigitalDeliveryRepository,
        unit_of_work: IUnitOfWork,
        snapshot_resolver: CartSnapshotResolver,
        pricing_engine: OrderPricingEngine,
        notification_dispatcher: INotificationDispatcher,
        policy: CheckoutPolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ):
        """
        Initialize use case with dependencies.

        Args:
            cart_repository: Cart data access
            product_repository: Product and variant data access, owns the stock guard
            coupon_repository: Coupon data access, owns the atomic redeem
            order_repository: Order data access
            digital_delivery_repository: Download grant data access
            unit_of_work: Transaction shared by the repositories above
            snapshot_resolver: Cart to catalog resolution
            pricing_engine: Shipping, tax, discount and total
            notification_dispatcher: Background notifications
            policy: Store-level settings
            clock: Time source
        """
        self.cart_repository = cart_repository
        self.product_repository = product_repository
        self.coupon_repository = coupon_repository
        self.order_repository = order_repository
        self.digital_delivery_repository = digital_delivery_repository
        self.unit_of_work = unit_of_work
        self.snapshot_resolver = snapshot_resolver
        self.pricing_engine = pricing_engine
        self.notification_dispatcher = notification_dispatcher
        self.policy = policy or CheckoutPolicy()
        self._clock = clock or (lambda: datetime.now(UTC))
        self._logger = get_service_logger("checkout")

    async def execute(self, request: CheckoutRequest) -> CheckoutResult:
        """
        Place an order from the buyer's cart.

        Args:
            request: Checkout request

        Returns:
            CheckoutResult of the created order

        Raises:
            ValidationException: Missing address fields or guest email
            EmptyCartException: No cart or no items
            CartValidationException: Unavailable products or not enough stock
            InsufficientStockException: Stock ran out between check and decrement
            CouponRedemptionException: Coupon ran out of uses during checkout
        """
        log = self._logger.with_context(
            user_id=request.buyer.user_id if request.buyer else None,
            session_id=request.session_id,
        )

        self._validate_request(request)

        cart = await self._load_cart(request)
        snapshot = await self.snapshot_resolver.resolve(cart)
        self.snapshot_resolver.raise_for_errors(snapshot)

        shipping_address = request.shipping_address.to_address(self.policy.default_country)
        if request.billing_same_as_shipping:
            billing_address = shipping_address
        else:
            billing_address = request.billing_address.to_address(self.policy.default_country)

        pricing = await self.pricing_engine.price(
            snapshot,
            shipping_address,
            request.shipping_method or "standard",
            request.coupon_code,
            snapshot.is_all_digital,
            request.buyer,
        )

        try:
            order = await self._create_order(request, snapshot.items, pricing, shipping_address, billing_address)
            log = log.with_context(order_number=order.order_number)

            low_stock = await self._reserve_stock(snapshot.items)

            if pricing.coupon is not None:
                await self._redeem_coupon(pricing)

            deliveries = await self._issue_digital_deliveries(order, snapshot.items, request, log)

            cart.clear()
            await self.cart_repository.save(cart)

            await self.unit_of_work.commit()
        except DomainException as e:
            await self.unit_of_work.rollback()
            log.warning(f"Checkout rolled back: {e.message}", code=e.code)
            raise
        except Exception:
            await self.unit_of_work.rollback()
            log.exception("Checkout failed unexpectedly, rolled back")
            raise

        log.info(f"Order {order.order_number} placed", total=order.total, items=len(order.items))

        self._dispatch_notifications(order, deliveries, low_stock, request, log)

        return CheckoutResult(
            order_id=order.id,
            order_number=order.order_number,
            tracking_code=order.tracking_code,
            total=order.total,
            status=order.status.value,
        )

    # ==================== VALIDATION ====================

    def _validate_request(self, request: CheckoutRequest) -> None:
        """Collect every input problem and fail once."""
        errors: list[str] = []

        if request.shipping_address is None:
            errors.append("Shipping address is required")
        else:
            errors.extend(self._address_errors("Shipping", request.shipping_address))

        if request.buyer is None:
            guest_email = (request.guest_email or "").strip()
            if not guest_email:
                errors.append(GUEST_EMAIL_REQUIRED)
            elif not self._is_valid_email(guest_email):
                errors.append(GUEST_EMAIL_INVALID)

        if not request.billing_same_as_shipping:
            if request.billing_address is None:
                errors.append("Billing address is required")
            else:
                errors.extend(self._address_errors("Billing", request.billing_address))

        if errors:
            raise ValidationException("; ".join(errors), details={"errors": errors})

    @staticmethod
    def _is_valid_email(email: str) -> bool:
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            return False
        return True

    @staticmethod
    def _address_errors(kind: str, address: AddressInput) -> list[str]:
        return [f"{kind} {FIELD_LABELS[name]} is required" for name in address.missing_fields()]

    async def _load_cart(self, request: CheckoutRequest) -> Cart:
        cart = None
        if request.buyer is not None:
            cart = await self.cart_repository.find_by_user(request.buyer.user_id)
        if cart is None and request.session_id:
            cart = await self.cart_repository.find_by_session(request.session_id)
        if cart is None or cart.is_empty():
            raise EmptyCartException()
        return cart

    # ==================== TRANSACTION STEPS ====================

    async def _create_order(
        self,
        request: CheckoutRequest,
        items: list[ResolvedItem],
        pricing: PricingResult,
        shipping_address: Address,
        billing_address: Address,
    ) -> Order:
        now = self._clock()
        sequence = await self.order_repository.count_orders() + 1
        is_guest = request.buyer is None

        order = Order(
            order_number=generate_order_number(self.policy.order_number_prefix, sequence, now),
            tracking_code=generate_tracking_code(self.policy.tracking_code_length) if is_guest else None,
            user_id=None if is_guest else request.buyer.user_id,
            guest_email=(request.guest_email or "").strip().lower() if is_guest else None,
            items=[
                OrderItem(
                    product_id=item.product_id,
                    variant_id=item.variant_id,
                    name=item.name,
                    slug=item.slug,
                    sku=item.sku,
                    image=item.image,
                    price=item.price,
                    quantity=item.quantity,
                    variant_info=item.variant_info,
                )
                for item in items
            ],
            shipping_address=shipping_address,
            billing_address=billing_address,
            billing_same_as_shipping=request.billing_same_as_shipping,
            subtotal=pricing.subtotal,
            shipping_cost=pricing.shipping_cost,
            shipping_method=pricing.shipping_method_id,
            shipping_method_label=pricing.shipping_method_label,
            tax_amount=pricing.tax_amount,
            discount=pricing.discount_amount,
            discount_details=pricing.discount_details,
            total=pricing.total,
            status=OrderStatus.PENDING_PAYMENT,
            payment_status=PaymentStatus.PENDING,
            customer_note=(request.customer_note or "").strip(),
            created_at=now,
            updated_at=now,
        )
        return await self.order_repository.create(order)

    async def _reserve_stock(self, items: list[ResolvedItem]) -> list[LowStockItem]:
        """Take stock for every line; returns the lines that crossed the alert threshold."""
        low_stock: list[LowStockItem] = []
        for item in items:
            if item.variant_id is not None:
                new_stock = await self.product_repository.decrement_variant_stock(
                    item.variant_id, item.quantity, item.allow_backorder
                )
            else:
                new_stock = await self.product_repository.decrement_stock(
                    item.product_id, item.quantity, item.allow_backorder
                )

            if new_stock is None:
                raise InsufficientStockException(item.product_id, item.quantity, None, item.display_name)

            if item.variant_id is None:
                await self.product_repository.increment_total_sold(item.product_id, item.quantity)

            if new_stock <= self.policy.low_stock_threshold:
                low_stock.append(LowStockItem(item.display_name, item.sku, new_stock))
        return low_stock

    async def _redeem_coupon(self, pricing: PricingResult) -> None:
        coupon = pricing.coupon
        if await self.coupon_repository.redeem(coupon.id) is None:
            raise CouponRedemptionException(coupon.code)

    async def _issue_digital_deliveries(
        self,
        order: Order,
        items: list[ResolvedItem],
        request: CheckoutRequest,
        log: ContextLogger,
    ) -> list[DigitalDelivery]:
        deliveries: list[DigitalDelivery] = []
        for item in items:
            if not item.is_digital:
                continue
            if item.digital_file is None:
                log.warning(f"Digital product {item.sku} has no file, no download grant issued")
                continue

            if request.buyer is not None:
                owner = {"user_id": request.buyer.user_id}
            elif self.policy.guest_digital_delivery_enabled:
                owner = {"guest_email": order.guest_email}
            else:
                log.warning(f"Guest order, skipping download grant for {item.sku}")
                continue

            delivery = DigitalDelivery.issue(
                order_id=order.id,
                product_id=item.product_id,
                variant_id=item.variant_id,
                digital_file=item.digital_file,
                now=self._clock(),
                **owner,
            )
            deliveries.append(await self.digital_delivery_repository.create(delivery))
        return deliveries

    # ==================== SIDE EFFECTS ====================

    def _dispatch_notifications(
        self,
        order: Order,
        deliveries: list[DigitalDelivery],
        low_stock: list[LowStockItem],
        request: CheckoutRequest,
        log: ContextLogger,
    ) -> None:
        """Queue notifications. The order is committed; nothing here may fail the checkout."""
        if low_stock:
            try:
                self.notification_dispatcher.notify_low_stock(low_stock)
            except Exception:
                log.exception("Could not queue low-stock alert")

        recipient = request.buyer.email if request.buyer else order.guest_email
        try:
            self.notification_dispatcher.notify_order_confirmed(order, deliveries, recipient)
        except Exception:
            log.exception("Could not queue order confirmation")
