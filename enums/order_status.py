from enum import Enum


class OrderStatus(Enum):
    PENDING = "pending"           # Handed off, not yet accepted by the business
    PREPARING = "preparing"       # Accepted and in preparation
    ON_WAY = "on_way"             # Out for delivery
    DELIVERED = "delivered"       # Completed
    CANCELLED = "cancelled"       # Cancelled by the business
