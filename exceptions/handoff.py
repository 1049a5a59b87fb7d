"""
Handoff-related exceptions.
"""

from .base import OrderEngineException


class HandoffException(OrderEngineException):
    """Base exception for order handoff errors."""
    pass


class MissingDestinationException(HandoffException):
    """Raised when the business has no messaging address configured. Not retried."""

    def __init__(self, business_id: str):
        super().__init__(
            f"No messaging destination configured for business {business_id}",
            details={'business_id': business_id}
        )
        self.business_id = business_id


class OrderSubmissionException(HandoffException):
    """Raised when the order endpoint rejects or fails to receive an order."""

    def __init__(self, business_id: str, reason: str, status_code: int | None = None):
        message = f"Order submission failed for business {business_id}: {reason}"
        details = {'business_id': business_id, 'reason': reason}

        if status_code is not None:
            details['status_code'] = status_code

        super().__init__(message, details)
        self.business_id = business_id
        self.reason = reason
        self.status_code = status_code
