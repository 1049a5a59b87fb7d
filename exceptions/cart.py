"""
Cart-related exceptions.
"""

from .base import OrderEngineException


class CartException(OrderEngineException):
    """Base exception for cart-related errors."""
    pass


class ItemUnavailableException(CartException):
    """Raised when adding an inactive or out-of-stock item to the cart."""

    def __init__(self, item_id: str, item_name: str, reason: str):
        super().__init__(
            f"Item {item_name} ({item_id}) is unavailable: {reason}",
            details={'item_id': item_id, 'reason': reason}
        )
        self.item_id = item_id
        self.item_name = item_name
        self.reason = reason


class ItemNotFoundException(CartException):
    """Raised when an item id is not present in the current catalog snapshot."""

    def __init__(self, item_id: str):
        super().__init__(
            f"Item {item_id} not found in catalog",
            details={'item_id': item_id}
        )
        self.item_id = item_id


class InvalidVariantException(CartException):
    """Raised when a size/extra selection does not match the item's modifiers."""

    def __init__(self, item_id: str, reason: str):
        super().__init__(
            f"Invalid variant for item {item_id}: {reason}",
            details={'item_id': item_id, 'reason': reason}
        )
        self.item_id = item_id
        self.reason = reason


class SessionClosedException(CartException):
    """Raised when an ordering session is used before open() or after close()."""

    def __init__(self, business_id: str):
        super().__init__(
            f"Ordering session for business {business_id} is not open",
            details={'business_id': business_id}
        )
        self.business_id = business_id
