"""
Order validation exceptions raised at compose time.

They block the handoff; the ordering session stays open so the customer
can correct the input.
"""

from .base import OrderEngineException


class OrderValidationException(OrderEngineException):
    """Base exception for compose-time validation failures."""
    pass


class MissingNameException(OrderValidationException):
    """Raised when the customer name is blank."""

    def __init__(self):
        super().__init__("Customer name is required", details={'field': 'name'})


class InvalidPhoneException(OrderValidationException):
    """Raised when the customer phone is shorter than the configured minimum."""

    def __init__(self, phone: str, min_length: int):
        super().__init__(
            f"Customer phone must have at least {min_length} characters",
            details={'field': 'phone', 'length': len(phone), 'min_length': min_length}
        )
        self.min_length = min_length


class EmptyCartException(OrderValidationException):
    """Raised when the cart has no orderable (non-stale) line."""

    def __init__(self, business_id: str, stale_lines: int = 0):
        message = f"Cart is empty for business {business_id}"
        if stale_lines:
            message += f" ({stale_lines} unavailable line(s) excluded)"
        super().__init__(message, details={'business_id': business_id, 'stale_lines': stale_lines})
        self.business_id = business_id
        self.stale_lines = stale_lines


class MissingAddressException(OrderValidationException):
    """Raised when a delivery order has no address."""

    def __init__(self):
        super().__init__("Delivery address is required for delivery orders", details={'field': 'address'})


class MissingTableNumberException(OrderValidationException):
    """Raised when a table order has no table number."""

    def __init__(self):
        super().__init__("Table number is required for table orders", details={'field': 'table_number'})


class BelowMinimumOrderException(OrderValidationException):
    """Raised when a delivery order's subtotal is below the business minimum."""

    def __init__(self, business_id: str, subtotal, min_order_amount):
        super().__init__(
            f"Minimum order amount for delivery is {min_order_amount} (subtotal {subtotal})",
            details={'business_id': business_id, 'subtotal': str(subtotal), 'min_order_amount': str(min_order_amount)}
        )
        self.business_id = business_id
        self.subtotal = subtotal
        self.min_order_amount = min_order_amount
