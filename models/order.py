from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from sqlalchemy import Column, Integer, DateTime, String, Text, Numeric, func, CheckConstraint, Enum as SQLEnum

import config
from enums.delivery_type import DeliveryType
from enums.handoff_channel import HandoffChannelType
from enums.order_status import OrderStatus
from models.base import Base, Money


class Order(Base):
    """Order record for businesses that keep composed orders locally."""
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True, unique=True)
    business_id = Column(String(64), nullable=False, index=True)
    status = Column(SQLEnum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    customer_name = Column(String(200), nullable=False)
    customer_phone = Column(String(32), nullable=False)
    delivery_type = Column(SQLEnum(DeliveryType), nullable=False, default=DeliveryType.PICKUP)
    address = Column(Text, nullable=True)
    table_number = Column(String(32), nullable=True)
    notes = Column(Text, nullable=True)
    delivery_fee = Column(Numeric(12, 2), nullable=False, default=0)
    grand_total = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=func.now())

    # Items Snapshot (JSON)
    # Lines exactly as composed: the record stays valid after the catalog changes
    # Format: [{"itemId": "p1", "name": "Burger", "unitPrice": 45.0, "quantity": 2, "lineTotal": 90.0, ...}]
    items_snapshot = Column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint('grand_total >= 0', name='check_order_grand_total_non_negative'),
    )


class OrderRecordDTO(BaseModel):
    id: int | None = None
    business_id: str | None = None
    status: OrderStatus | None = None
    customer_name: str | None = None
    customer_phone: str | None = None
    delivery_type: DeliveryType | None = None
    address: str | None = None
    table_number: str | None = None
    notes: str | None = None
    delivery_fee: Money | None = None
    grand_total: Money | None = None
    created_at: datetime | None = None
    items_snapshot: str | None = None  # JSON string with the composed lines


class BusinessProfile(BaseModel):
    """Identity of the business an ordering session belongs to."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    messaging_address: str | None = None  # e.g. WhatsApp number, may contain spaces/dashes
    currency_symbol: str = Field(default_factory=lambda: config.CURRENCY_SYMBOL)
    locale: str = Field(default_factory=lambda: config.PRICE_LOCALE)
    # Delivery orders only; 0 disables the rule
    delivery_fee: Money = Field(default=Decimal("0"), ge=0)
    min_order_amount: Money = Field(default=Decimal("0"), ge=0)
    free_delivery_above: Money = Field(default=Decimal("0"), ge=0)

    @field_validator("locale")
    @classmethod
    def _supported_locale(cls, value: str) -> str:
        if value not in config.PRICE_LOCALE_SEPARATORS:
            raise ValueError(f"unsupported locale {value}, expected one of: {', '.join(config.PRICE_LOCALE_SEPARATORS)}")
        return value


class Customer(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = ""
    phone: str = ""


class Fulfillment(BaseModel):
    model_config = ConfigDict(frozen=True)

    delivery_type: DeliveryType = DeliveryType.PICKUP
    address: str | None = None
    table_number: str | None = None


_ORDER_CONFIG = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class ComposedOrderLine(BaseModel):
    model_config = _ORDER_CONFIG

    item_id: str
    name: str
    size_name: str | None = None
    extra_names: tuple[str, ...] = ()
    unit_price: Money
    quantity: int
    line_total: Money


class ComposedOrder(BaseModel):
    """
    Final order, copied by value out of the cart and catalog.

    Immutable once built: clearing the cart or replacing the catalog afterwards
    does not change anything here.
    """
    model_config = _ORDER_CONFIG

    business_id: str
    business_name: str
    customer_name: str
    customer_phone: str
    lines: tuple[ComposedOrderLine, ...] = Field(serialization_alias="items")
    notes: str | None = None
    subtotal: Money  # Sum of line totals
    delivery_fee: Money = Decimal("0.00")
    grand_total: Money  # subtotal + delivery_fee
    delivery_type: DeliveryType = DeliveryType.PICKUP
    address: str | None = None
    table_number: str | None = None
    created_at: datetime

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)

    def to_payload(self) -> dict:
        """JSON body for the order-persistence endpoint (camelCase keys, numeric money)."""
        return self.model_dump(mode="json", by_alias=True)


class HandoffResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel: HandoffChannelType
    reference: str  # Deep link URL, order number or local record id
