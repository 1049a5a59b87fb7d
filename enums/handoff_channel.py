from enum import Enum


class HandoffChannelType(str, Enum):
    MESSAGING = "MESSAGING"          # Deep link into a messaging app
    ORDER_ENDPOINT = "ORDER_ENDPOINT"  # POST to the order-creation endpoint
    ORDER_RECORD = "ORDER_RECORD"    # Local order record (SQLAlchemy)
