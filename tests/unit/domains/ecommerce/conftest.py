"""
In-memory fakes for the checkout flow.

Each FakeSession journals the writes made through its repositories so the
unit of work can undo them on rollback, the same contract the SQLAlchemy
session gives the real repositories. Stock and coupon guards check and
write without yielding in between, like a single conditional UPDATE.
"""

import asyncio
import copy
from collections.abc import Callable
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from storefront.domains.ecommerce.application.dto import LowStockItem
from storefront.domains.ecommerce.application.ports import (
    ICartRepository,
    ICouponRepository,
    IDigitalDeliveryRepository,
    INotificationDispatcher,
    IOrderRepository,
    IProductRepository,
    IShippingZoneRepository,
    IUnitOfWork,
)
from storefront.domains.ecommerce.application.services import (
    CartSnapshotResolver,
    CouponValidator,
    OrderPricingEngine,
)
from storefront.domains.ecommerce.application.use_cases import CheckoutPolicy, CheckoutUseCase
from storefront.domains.ecommerce.domain.entities import (
    Cart,
    CartItem,
    Coupon,
    DigitalDelivery,
    DigitalFile,
    Order,
    Product,
    ProductVariant,
    ShippingMethod,
    ShippingZone,
)
from storefront.domains.ecommerce.domain.services import PricingService, ShippingZoneMatcher
from storefront.domains.ecommerce.domain.value_objects import (
    REDEEMING_PAYMENT_STATUSES,
    ProductStatus,
    ProductType,
)

FIXED_NOW = datetime(2026, 3, 15, 12, 0, tzinfo=UTC)


# ============================================================================
# FAKE STORAGE
# ============================================================================


class FakeDatabase:
    """Committed state shared by every session."""

    def __init__(self):
        self.products: dict[UUID, Product] = {}
        self.variants: dict[UUID, ProductVariant] = {}
        self.carts: dict[UUID, Cart] = {}
        self.zones: list[ShippingZone] = []
        self.coupons: dict[str, Coupon] = {}
        self.orders: list[Order] = []
        self.deliveries: list[DigitalDelivery] = []

    def add_product(self, **kwargs) -> Product:
        kwargs.setdefault("id", uuid4())
        kwargs.setdefault("sku", f"SKU-{len(self.products) + 1}")
        kwargs.setdefault("slug", kwargs["sku"].lower())
        kwargs.setdefault("name", kwargs["sku"])
        kwargs.setdefault("status", ProductStatus.ACTIVE)
        product = Product(**kwargs)
        self.products[product.id] = product
        return product

    def add_variant(self, product: Product, **kwargs) -> ProductVariant:
        kwargs.setdefault("id", uuid4())
        variant = ProductVariant(product_id=product.id, **kwargs)
        self.variants[variant.id] = variant
        return variant

    def add_cart(self, items: list[CartItem], user_id: str | None = None, session_id: str | None = None) -> Cart:
        cart = Cart(id=uuid4(), user_id=user_id, session_id=session_id, items=list(items))
        self.carts[cart.id] = cart
        return cart

    def add_coupon(self, **kwargs) -> Coupon:
        kwargs.setdefault("id", uuid4())
        coupon = Coupon(**kwargs)
        self.coupons[coupon.code] = coupon
        return coupon

    def add_zone(self, **kwargs) -> ShippingZone:
        kwargs.setdefault("id", uuid4())
        zone = ShippingZone(**kwargs)
        self.zones.append(zone)
        return zone


class FakeSession:
    """Per-checkout transaction journal."""

    def __init__(self, db: FakeDatabase):
        self.db = db
        self._undo: list[Callable[[], None]] = []

    def record(self, undo: Callable[[], None]) -> None:
        self._undo.append(undo)

    def discard_journal(self) -> None:
        self._undo.clear()

    def undo_all(self) -> None:
        while self._undo:
            self._undo.pop()()


class FakeUnitOfWork(IUnitOfWork):
    def __init__(self, session: FakeSession):
        self.session = session
        self.commits = 0
        self.rollbacks = 0

    async def commit(self) -> None:
        self.session.discard_journal()
        self.commits += 1

    async def rollback(self) -> None:
        self.session.undo_all()
        self.rollbacks += 1


# ============================================================================
# FAKE REPOSITORIES
# ============================================================================


class FakeCartRepository(ICartRepository):
    def __init__(self, session: FakeSession):
        self.session = session
        self.db = session.db

    async def find_by_user(self, user_id: str) -> Cart | None:
        return self._find(lambda cart: cart.user_id == user_id)

    async def find_by_session(self, session_id: str) -> Cart | None:
        return self._find(lambda cart: cart.session_id == session_id)

    async def save(self, cart: Cart) -> Cart:
        previous = self.db.carts.get(cart.id)
        self.db.carts[cart.id] = copy.deepcopy(cart)
        self.session.record(lambda: self.db.carts.__setitem__(cart.id, previous))
        return cart

    def _find(self, predicate) -> Cart | None:
        for cart in self.db.carts.values():
            if predicate(cart):
                return copy.deepcopy(cart)
        return None


class FakeProductRepository(IProductRepository):
    def __init__(self, session: FakeSession):
        self.session = session
        self.db = session.db
        self.find_calls = 0

    async def find_by_id(self, product_id: UUID) -> Product | None:
        self.find_calls += 1
        await asyncio.sleep(0)
        return self.db.products.get(product_id)

    async def find_variant_by_id(self, variant_id: UUID) -> ProductVariant | None:
        await asyncio.sleep(0)
        return self.db.variants.get(variant_id)

    async def decrement_stock(self, product_id: UUID, quantity: int, allow_backorder: bool) -> int | None:
        await asyncio.sleep(0)
        return self._take(self.db.products[product_id], quantity, allow_backorder)

    async def decrement_variant_stock(self, variant_id: UUID, quantity: int, allow_backorder: bool) -> int | None:
        await asyncio.sleep(0)
        return self._take(self.db.variants[variant_id], quantity, allow_backorder)

    async def increment_total_sold(self, product_id: UUID, quantity: int) -> None:
        product = self.db.products[product_id]
        product.total_sold += quantity
        self.session.record(lambda: setattr(product, "total_sold", product.total_sold - quantity))

    def _take(self, record, quantity: int, allow_backorder: bool) -> int | None:
        if not allow_backorder and record.stock_quantity < quantity:
            return None
        record.stock_quantity -= quantity
        self.session.record(lambda: setattr(record, "stock_quantity", record.stock_quantity + quantity))
        return record.stock_quantity


class FakeShippingZoneRepository(IShippingZoneRepository):
    def __init__(self, session: FakeSession, matcher: ShippingZoneMatcher | None = None):
        self.db = session.db
        self.matcher = matcher or ShippingZoneMatcher()
        self.list_calls = 0

    async def list_active(self) -> list[ShippingZone]:
        self.list_calls += 1
        return [zone for zone in self.db.zones if zone.is_active]

    async def find_zone_for_address(self, country: str | None, state: str | None) -> ShippingZone | None:
        return self.matcher.find_zone_for_address(await self.list_active(), country, state)


class FakeCouponRepository(ICouponRepository):
    def __init__(self, session: FakeSession):
        self.session = session
        self.db = session.db
        self.redeem_calls = 0

    async def find_by_code(self, code: str) -> Coupon | None:
        coupon = self.db.coupons.get(code.strip().upper())
        if coupon is None or not coupon.is_active:
            return None
        return copy.deepcopy(coupon)

    async def save(self, coupon: Coupon) -> Coupon:
        self.db.coupons[coupon.code] = copy.deepcopy(coupon)
        return coupon

    async def redeem(self, coupon_id: UUID) -> int | None:
        self.redeem_calls += 1
        await asyncio.sleep(0)
        coupon = next(c for c in self.db.coupons.values() if c.id == coupon_id)
        if not coupon.has_usage_left():
            return None
        coupon.usage_count += 1
        self.session.record(lambda: setattr(coupon, "usage_count", coupon.usage_count - 1))
        return coupon.usage_count

    async def count_user_redemptions(self, code: str, user_id: str) -> int:
        return sum(
            1
            for order in self.db.orders
            if order.user_id == user_id
            and order.discount_code == code
            and order.payment_status in REDEEMING_PAYMENT_STATUSES
        )


class FakeOrderRepository(IOrderRepository):
    def __init__(self, session: FakeSession):
        self.session = session
        self.db = session.db

    async def create(self, order: Order) -> Order:
        if order.id is None:
            order.id = uuid4()
        self.db.orders.append(order)
        self.session.record(lambda: self.db.orders.remove(order))
        return order

    async def count_orders(self) -> int:
        return len(self.db.orders)


class FakeDigitalDeliveryRepository(IDigitalDeliveryRepository):
    def __init__(self, session: FakeSession):
        self.session = session
        self.db = session.db

    async def create(self, delivery: DigitalDelivery) -> DigitalDelivery:
        if delivery.id is None:
            delivery.id = uuid4()
        self.db.deliveries.append(delivery)
        self.session.record(lambda: self.db.deliveries.remove(delivery))
        return delivery


class RecordingDispatcher(INotificationDispatcher):
    def __init__(self):
        self.confirmations: list[tuple[Order, list[DigitalDelivery], str | None]] = []
        self.low_stock_alerts: list[list[LowStockItem]] = []

    def notify_order_confirmed(self, order, deliveries, recipient_email) -> None:
        self.confirmations.append((order, list(deliveries), recipient_email))

    def notify_low_stock(self, items) -> None:
        self.low_stock_alerts.append(list(items))


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def fake_session(db) -> FakeSession:
    return FakeSession(db)


@pytest.fixture
def product_repository(fake_session) -> FakeProductRepository:
    return FakeProductRepository(fake_session)


@pytest.fixture
def coupon_repository(fake_session) -> FakeCouponRepository:
    return FakeCouponRepository(fake_session)


@pytest.fixture
def zone_repository(fake_session) -> FakeShippingZoneRepository:
    return FakeShippingZoneRepository(fake_session)


@pytest.fixture
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture
def checkout_factory(db, dispatcher, fixed_clock):
    """
    Build a CheckoutUseCase on a fresh FakeSession, like the container does
    per request. Returns (use_case, unit_of_work).
    """

    def build(policy: CheckoutPolicy | None = None) -> tuple[CheckoutUseCase, FakeUnitOfWork]:
        session = FakeSession(db)
        product_repository = FakeProductRepository(session)
        coupon_repository = FakeCouponRepository(session)
        matcher = ShippingZoneMatcher()
        unit_of_work = FakeUnitOfWork(session)
        use_case = CheckoutUseCase(
            cart_repository=FakeCartRepository(session),
            product_repository=product_repository,
            coupon_repository=coupon_repository,
            order_repository=FakeOrderRepository(session),
            digital_delivery_repository=FakeDigitalDeliveryRepository(session),
            unit_of_work=unit_of_work,
            snapshot_resolver=CartSnapshotResolver(product_repository),
            pricing_engine=OrderPricingEngine(
                shipping_zone_repository=FakeShippingZoneRepository(session, matcher),
                coupon_validator=CouponValidator(coupon_repository, clock=fixed_clock),
                pricing_service=PricingService(),
                zone_matcher=matcher,
            ),
            notification_dispatcher=dispatcher,
            policy=policy or CheckoutPolicy(),
            clock=fixed_clock,
        )
        return use_case, unit_of_work

    return build


@pytest.fixture
def us_zone(db) -> ShippingZone:
    """US zone: standard 4.99 without free threshold, express 9.99."""
    return db.add_zone(
        name="United States",
        countries=["US"],
        methods=[
            ShippingMethod("standard", "Standard Shipping", 499),
            ShippingMethod("express", "Express Shipping", 999),
        ],
    )


@pytest.fixture
def ebook(db) -> Product:
    return db.add_product(
        sku="EBOOK-1",
        name="Field Guide eBook",
        base_price=1500,
        stock_quantity=1000,
        product_type=ProductType.DIGITAL,
        digital_file=DigitalFile(url="https://files.example.com/guide.pdf", file_name="guide.pdf", expiry_days=30),
    )
