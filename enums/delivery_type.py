from enum import Enum


class DeliveryType(str, Enum):
    PICKUP = "pickup"
    DELIVERY = "delivery"
    TABLE = "table"       # QR table ordering
