import logging
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from enums.line_state import StaleReason
from models.cart import CartLine
from models.catalog import CatalogSnapshot
from models.order import BusinessProfile
from models.pricing import LineResult, PricedLine, StaleLine

logger = logging.getLogger(__name__)

MINOR_UNIT = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    """Round to the currency's minor unit (2 places), half-up."""
    return amount.quantize(MINOR_UNIT, rounding=ROUND_HALF_UP)


class PricingService:
    """
    Pure price calculations over a cart and a catalog snapshot.

    Nothing is cached: every call reads the snapshot it is given, so totals
    always match the catalog version the caller currently holds. `now`
    decides whether time-limited discounts apply and defaults to the
    current UTC time.
    """

    @staticmethod
    def price_line(line: CartLine, snapshot: CatalogSnapshot, now: datetime | None = None) -> LineResult:
        """
        Price one cart line against the snapshot.

        unit_price = round(base + size modifier + sum(extra prices))
        line_total = unit_price * quantity

        base is the discount price while the item's discount runs, the
        regular price otherwise. The unit price is rounded once, from the
        exact sum, never from per-extra roundings; the line total is built
        from the rounded unit price so every line reconciles on a receipt.
        Lines whose item is gone, inactive, sold out, whose chosen size/extras
        are no longer offered or no longer satisfy the item's option groups
        come back as StaleLine.

        Example:
            base 19.99, size +5.00, extras 2.50 + 2.50, quantity 3
            -> unit_price 29.99, line_total 89.97
        """
        item = snapshot.get_item(line.item_id)
        if item is None:
            return PricingService._stale(line, StaleReason.ITEM_REMOVED)

        reason = item.unavailable_reason
        if reason is not None:
            return PricingService._stale(line, reason)

        size = None
        if line.size_id is not None:
            size = item.get_size(line.size_id)
            if size is None:
                return PricingService._stale(line, StaleReason.VARIANT_REMOVED)
        elif item.sizes:
            # Item gained sizes after the line was added, no size was ever chosen
            return PricingService._stale(line, StaleReason.VARIANT_REMOVED)

        extras = []
        for extra_id in line.extra_ids:
            extra = item.get_extra(extra_id)
            if extra is None:
                return PricingService._stale(line, StaleReason.VARIANT_REMOVED)
            extras.append(extra)

        if item.extra_selection_error(line.extra_ids) is not None:
            return PricingService._stale(line, StaleReason.OPTIONS_INVALID)

        base_price = item.effective_base_price(now or datetime.now(timezone.utc))
        raw_unit_price = base_price + (size.price_modifier if size else Decimal("0")) + sum(
            (extra.price for extra in extras), Decimal("0")
        )
        unit_price = round_money(raw_unit_price)

        return PricedLine(
            key=line.key,
            item_id=item.id,
            name=item.name,
            size_name=size.name if size else None,
            extra_names=tuple(extra.name for extra in extras),
            unit_price=unit_price,
            quantity=line.quantity,
            line_total=unit_price * line.quantity,
            discounted=base_price != item.base_price,
        )

    @staticmethod
    def price_cart(lines: Iterable[CartLine], snapshot: CatalogSnapshot, now: datetime | None = None) -> list[LineResult]:
        """Price every line, in cart order. Stale lines are included, flagged."""
        now = now or datetime.now(timezone.utc)
        return [PricingService.price_line(line, snapshot, now) for line in lines]

    @staticmethod
    def priced_lines(lines: Iterable[CartLine], snapshot: CatalogSnapshot, now: datetime | None = None) -> list[PricedLine]:
        return [result for result in PricingService.price_cart(lines, snapshot, now) if isinstance(result, PricedLine)]

    @staticmethod
    def stale_lines(lines: Iterable[CartLine], snapshot: CatalogSnapshot, now: datetime | None = None) -> list[StaleLine]:
        return [result for result in PricingService.price_cart(lines, snapshot, now) if isinstance(result, StaleLine)]

    @staticmethod
    def cart_total(lines: Iterable[CartLine], snapshot: CatalogSnapshot, now: datetime | None = None) -> Decimal:
        """Sum of line totals of all non-stale lines."""
        return sum(
            (priced.line_total for priced in PricingService.priced_lines(lines, snapshot, now)),
            Decimal("0.00")
        )

    @staticmethod
    def delivery_fee(subtotal: Decimal, profile: BusinessProfile) -> Decimal:
        """Delivery fee of the business, waived once the subtotal reaches free_delivery_above."""
        if profile.free_delivery_above and subtotal >= profile.free_delivery_above:
            return Decimal("0.00")
        return round_money(profile.delivery_fee)

    @staticmethod
    def _stale(line: CartLine, reason: StaleReason) -> StaleLine:
        logger.debug(f"Cart line {line.key} is stale: {reason.value}")
        return StaleLine(
            key=line.key,
            item_id=line.item_id,
            item_name=line.item_name,
            quantity=line.quantity,
            reason=reason,
        )
