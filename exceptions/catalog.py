"""
Catalog-related exceptions.
"""

from .base import OrderEngineException


class CatalogException(OrderEngineException):
    """Base exception for catalog load/sync errors."""
    retryable = False


class CatalogNotFoundException(CatalogException):
    """Raised when the business or its catalog does not exist."""

    def __init__(self, business_id: str):
        super().__init__(
            f"Catalog for business {business_id} not found",
            details={'business_id': business_id}
        )
        self.business_id = business_id


class CatalogTransientException(CatalogException):
    """Raised on network failures while loading a catalog. Safe to retry."""
    retryable = True

    def __init__(self, business_id: str, reason: str):
        super().__init__(
            f"Temporary failure loading catalog for business {business_id}: {reason}",
            details={'business_id': business_id, 'reason': reason}
        )
        self.business_id = business_id
        self.reason = reason


class InvalidCatalogDataException(CatalogException):
    """Raised when the catalog payload cannot be parsed."""

    def __init__(self, business_id: str, reason: str):
        super().__init__(
            f"Invalid catalog data for business {business_id}: {reason}",
            details={'business_id': business_id, 'reason': reason}
        )
        self.business_id = business_id
        self.reason = reason
