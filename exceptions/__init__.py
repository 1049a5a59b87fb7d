"""
Custom exceptions for the order composition engine.

Exception Hierarchy:
--------------------
OrderEngineException (base)
├── CatalogException
│   ├── CatalogNotFoundException
│   ├── CatalogTransientException (retryable)
│   └── InvalidCatalogDataException
├── CartException
│   ├── ItemUnavailableException
│   ├── ItemNotFoundException
│   ├── InvalidVariantException
│   └── SessionClosedException
├── OrderValidationException
│   ├── MissingNameException
│   ├── InvalidPhoneException
│   ├── EmptyCartException
│   ├── MissingAddressException
│   ├── MissingTableNumberException
│   └── BelowMinimumOrderException
└── HandoffException
    ├── MissingDestinationException
    └── OrderSubmissionException

Usage:
------
Services raise specific exceptions:
    raise ItemUnavailableException(item_id="p1", item_name="Burger", reason="inactive")

Callers catch and show feedback, the cart is left untouched:
    try:
        session.add("p1")
    except ItemUnavailableException as e:
        show_toast(str(e))
"""

from .base import OrderEngineException
from .catalog import (
    CatalogException,
    CatalogNotFoundException,
    CatalogTransientException,
    InvalidCatalogDataException
)
from .cart import (
    CartException,
    ItemUnavailableException,
    ItemNotFoundException,
    InvalidVariantException,
    SessionClosedException
)
from .order import (
    OrderValidationException,
    MissingNameException,
    InvalidPhoneException,
    EmptyCartException,
    MissingAddressException,
    MissingTableNumberException,
    BelowMinimumOrderException
)
from .handoff import HandoffException, MissingDestinationException, OrderSubmissionException

__all__ = [
    # Base
    'OrderEngineException',

    # Catalog
    'CatalogException',
    'CatalogNotFoundException',
    'CatalogTransientException',
    'InvalidCatalogDataException',

    # Cart
    'CartException',
    'ItemUnavailableException',
    'ItemNotFoundException',
    'InvalidVariantException',
    'SessionClosedException',

    # Order
    'OrderValidationException',
    'MissingNameException',
    'InvalidPhoneException',
    'EmptyCartException',
    'MissingAddressException',
    'MissingTableNumberException',
    'BelowMinimumOrderException',

    # Handoff
    'HandoffException',
    'MissingDestinationException',
    'OrderSubmissionException',
]
