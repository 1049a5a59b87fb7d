import logging
from datetime import datetime, timezone
from decimal import Decimal

import config
from enums.delivery_type import DeliveryType
from exceptions.order import (
    BelowMinimumOrderException,
    EmptyCartException,
    InvalidPhoneException,
    MissingAddressException,
    MissingNameException,
    MissingTableNumberException,
)
from models.catalog import CatalogSnapshot
from models.pricing import PricedLine
from models.order import BusinessProfile, ComposedOrder, ComposedOrderLine, Customer, Fulfillment
from services.cart import Cart
from services.pricing import PricingService

logger = logging.getLogger(__name__)


def _clean(value: str | None) -> str | None:
    """Trim, and turn blank strings into None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


class OrderComposerService:

    @staticmethod
    def compose(
        cart: Cart,
        snapshot: CatalogSnapshot,
        profile: BusinessProfile,
        customer: Customer,
        notes: str | None = None,
        fulfillment: Fulfillment | None = None,
        now: datetime | None = None
    ) -> ComposedOrder:
        """
        Validate the checkout input and freeze the cart into a ComposedOrder.

        Checks run in a fixed order and the first failure wins:
        name, phone, cart contents, fulfillment details, then the delivery
        minimum. Stale lines are left out of the order; the cart itself is
        not modified. Delivery orders add the business delivery fee, which is
        waived from free_delivery_above on. `now` stamps the order and decides
        which discounts apply.

        Raises:
            MissingNameException: Name is blank after trimming
            InvalidPhoneException: Phone is shorter than MIN_PHONE_LENGTH after trimming
            EmptyCartException: No orderable line (empty cart or only stale lines)
            MissingAddressException: Delivery order without address
            MissingTableNumberException: Table order without table number
            BelowMinimumOrderException: Delivery subtotal below the business minimum
        """
        fulfillment = fulfillment or Fulfillment()
        now = now or datetime.now(timezone.utc)

        name = customer.name.strip()
        if not name:
            raise MissingNameException()

        phone = customer.phone.strip()
        if len(phone) < config.MIN_PHONE_LENGTH:
            raise InvalidPhoneException(phone, config.MIN_PHONE_LENGTH)

        results = PricingService.price_cart(cart.lines, snapshot, now)
        priced = [result for result in results if isinstance(result, PricedLine)]
        if not priced:
            raise EmptyCartException(profile.id, stale_lines=len(results))

        address = _clean(fulfillment.address)
        table_number = _clean(fulfillment.table_number)
        if fulfillment.delivery_type == DeliveryType.DELIVERY and address is None:
            raise MissingAddressException()
        if fulfillment.delivery_type == DeliveryType.TABLE and table_number is None:
            raise MissingTableNumberException()

        lines = tuple(
            ComposedOrderLine(
                item_id=line.item_id,
                name=line.name,
                size_name=line.size_name,
                extra_names=line.extra_names,
                unit_price=line.unit_price,
                quantity=line.quantity,
                line_total=line.line_total,
            )
            for line in priced
        )
        subtotal = sum((line.line_total for line in lines), Decimal("0.00"))

        delivery_fee = Decimal("0.00")
        if fulfillment.delivery_type == DeliveryType.DELIVERY:
            if profile.min_order_amount and subtotal < profile.min_order_amount:
                raise BelowMinimumOrderException(profile.id, subtotal, profile.min_order_amount)
            delivery_fee = PricingService.delivery_fee(subtotal, profile)
        grand_total = subtotal + delivery_fee

        order = ComposedOrder(
            business_id=profile.id,
            business_name=profile.name,
            customer_name=name,
            customer_phone=phone,
            lines=lines,
            notes=_clean(notes),
            subtotal=subtotal,
            delivery_fee=delivery_fee,
            grand_total=grand_total,
            delivery_type=fulfillment.delivery_type,
            address=address if fulfillment.delivery_type == DeliveryType.DELIVERY else None,
            table_number=table_number if fulfillment.delivery_type == DeliveryType.TABLE else None,
            created_at=now,
        )

        excluded = len(results) - len(priced)
        logger.info(
            f"Composed order for business {profile.id}: {len(lines)} line(s), "
            f"subtotal={subtotal}, delivery fee={delivery_fee}, total={grand_total}, stale excluded={excluded}"
        )
        return order
