import inspect
import logging
from decimal import Decimal
from typing import Awaitable, Callable, Iterable

from exceptions.cart import (
    InvalidVariantException,
    ItemNotFoundException,
    ItemUnavailableException,
    SessionClosedException,
)
from models.cart import CartLine, LineKey
from models.catalog import CatalogSnapshot
from models.order import BusinessProfile, ComposedOrder, Customer, Fulfillment, HandoffResult
from models.pricing import LineView, StaleLine
from services.cart import Cart
from services.catalog_sync import CatalogSubscription, CatalogSync
from services.handoff import HandoffChannel
from services.order_composer import OrderComposerService
from services.order_formatter import OrderFormatterService
from services.pricing import PricingService

logger = logging.getLogger(__name__)

SessionListener = Callable[[CatalogSnapshot], None | Awaitable[None]]


class OrderingSession:
    """
    One customer's ordering session for one business.

    Owns the cart and a live catalog subscription. The cart has a single
    writer (this session); catalog updates only replace the snapshot, and
    line prices and staleness are computed from whichever snapshot is
    current when they are read.

    Usage:
        async with OrderingSession(profile, catalog_sync) as session:
            session.add("p1", size_id="large", extra_ids=["cheese"])
            order, result = await session.checkout(customer, MessagingHandoffChannel())
    """

    def __init__(
        self,
        profile: BusinessProfile,
        catalog_sync: CatalogSync,
        on_catalog_change: SessionListener | None = None
    ) -> None:
        self.profile = profile
        self.cart = Cart()
        self._catalog_sync = catalog_sync
        self._on_catalog_change = on_catalog_change
        self._subscription: CatalogSubscription | None = None
        self._closed = False

    async def __aenter__(self) -> "OrderingSession":
        await self.open()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    @property
    def is_open(self) -> bool:
        return self._subscription is not None and not self._closed

    @property
    def snapshot(self) -> CatalogSnapshot:
        if not self.is_open or self._subscription.snapshot is None:
            raise SessionClosedException(self.profile.id)
        return self._subscription.snapshot

    async def open(self) -> "OrderingSession":
        """
        Load the initial catalog and start listening for catalog changes.

        Raises:
            SessionClosedException: Session was already closed
            CatalogNotFoundException / CatalogTransientException: Initial load failed
        """
        if self._closed:
            raise SessionClosedException(self.profile.id)
        if self._subscription is not None:
            return self

        snapshot = await self._catalog_sync.load_snapshot(self.profile.id)
        self._subscription = self._catalog_sync.subscribe(
            self.profile.id, self._handle_catalog_change, initial=snapshot
        )
        logger.info(f"Ordering session opened for business {self.profile.id} (catalog {snapshot.version})")
        return self

    def close(self) -> None:
        """Stop catalog updates and discard the cart. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._subscription is not None:
            self._subscription.unsubscribe()
        self.cart.clear()
        logger.info(f"Ordering session closed for business {self.profile.id}")

    async def aclose(self) -> None:
        """close(), then wait for the catalog subscription's background work to end."""
        self.close()
        if self._subscription is not None:
            await self._subscription.aclose()

    async def _handle_catalog_change(self, snapshot: CatalogSnapshot) -> None:
        stale = PricingService.stale_lines(self.cart.lines, snapshot)
        if stale:
            logger.info(
                f"Catalog {snapshot.version} made {len(stale)} cart line(s) unavailable "
                f"for business {self.profile.id}"
            )
        if self._on_catalog_change is not None:
            result = self._on_catalog_change(snapshot)
            if inspect.isawaitable(result):
                await result

    # Cart operations

    def add(self, item_id: str, size_id: str | None = None, extra_ids: Iterable[str] = ()) -> CartLine:
        """
        Add one unit of an item by id, resolved against the current snapshot.

        Raises:
            ItemNotFoundException: Item is not in the catalog
            ItemUnavailableException: Item is inactive or out of stock
            InvalidVariantException: Unknown size or extra, or an option group rule is broken
        """
        item = self.snapshot.get_item(item_id)
        if item is None:
            raise ItemNotFoundException(item_id)

        reason = item.unavailable_reason
        if reason is not None:
            raise ItemUnavailableException(item_id=item.id, item_name=item.name, reason=reason.value)

        size = None
        if size_id is not None:
            size = item.get_size(size_id)
            if size is None:
                raise InvalidVariantException(item.id, f"size {size_id} is not offered")

        extras = []
        for extra_id in extra_ids:
            extra = item.get_extra(extra_id)
            if extra is None:
                raise InvalidVariantException(item.id, f"extra {extra_id} is not offered")
            extras.append(extra)

        return self.cart.add_line(item, size, extras)

    def increment(self, key: LineKey) -> CartLine | None:
        self._require_open()
        return self.cart.increment_line(key)

    def decrement(self, key: LineKey) -> CartLine | None:
        self._require_open()
        return self.cart.decrement_line(key)

    def remove(self, key: LineKey) -> None:
        self._require_open()
        self.cart.remove_line(key)

    def clear(self) -> None:
        self._require_open()
        self.cart.clear()

    # Reads, always against the current snapshot

    def line_views(self) -> list[LineView]:
        """Every cart line with its state; stale lines are included so they can be shown."""
        lines = self.cart.lines
        results = PricingService.price_cart(lines, self.snapshot)
        return [LineView(line, result) for line, result in zip(lines, results)]

    def stale_lines(self) -> list[StaleLine]:
        return PricingService.stale_lines(self.cart.lines, self.snapshot)

    def total(self) -> Decimal:
        return PricingService.cart_total(self.cart.lines, self.snapshot)

    def total_item_count(self) -> int:
        return self.cart.total_item_count()

    # Checkout

    def compose(
        self,
        customer: Customer,
        notes: str | None = None,
        fulfillment: Fulfillment | None = None
    ) -> ComposedOrder:
        return OrderComposerService.compose(
            self.cart, self.snapshot, self.profile, customer, notes=notes, fulfillment=fulfillment
        )

    def render(self, order: ComposedOrder) -> str:
        return OrderFormatterService.render_message(order, self.profile)

    async def checkout(
        self,
        customer: Customer,
        channel: HandoffChannel,
        notes: str | None = None,
        fulfillment: Fulfillment | None = None
    ) -> tuple[ComposedOrder, HandoffResult]:
        """
        Compose, render and hand off the order, then end the session.

        On any validation or handoff error the cart and the session stay
        as they were, so the customer can fix the input and retry.
        """
        order = self.compose(customer, notes=notes, fulfillment=fulfillment)
        message = self.render(order)
        result = await channel.deliver(order, self.profile, message)

        logger.info(
            f"Checkout complete for business {self.profile.id} via {result.channel.value}: "
            f"{order.item_count} item(s), total {order.grand_total}"
        )
        await self.aclose()
        return order, result

    def _require_open(self) -> None:
        if not self.is_open:
            raise SessionClosedException(self.profile.id)
