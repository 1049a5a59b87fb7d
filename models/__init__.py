"""
Models Package

Pydantic models for catalog snapshots, carts, prices and composed orders,
plus the SQLAlchemy order record. Importing this package registers the
SQLAlchemy tables on Base.metadata.
"""

from models.base import Base, Money
from models.catalog import Size, Extra, Category, CatalogItem, CatalogPayload, CatalogSnapshot
from models.cart import LineKey, CartLine
from models.pricing import PricedLine, StaleLine, LineResult, LineView
from models.order import (
    Order,
    OrderRecordDTO,
    BusinessProfile,
    Customer,
    Fulfillment,
    ComposedOrderLine,
    ComposedOrder,
    HandoffResult,
)

__all__ = [
    'Base',
    'Money',
    'Size',
    'Extra',
    'Category',
    'CatalogItem',
    'CatalogPayload',
    'CatalogSnapshot',
    'LineKey',
    'CartLine',
    'PricedLine',
    'StaleLine',
    'LineResult',
    'LineView',
    'Order',
    'OrderRecordDTO',
    'BusinessProfile',
    'Customer',
    'Fulfillment',
    'ComposedOrderLine',
    'ComposedOrder',
    'HandoffResult',
]
