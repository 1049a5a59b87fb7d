from enum import Enum


class LineState(str, Enum):
    """
    Reconciliation state of a cart line against the latest catalog snapshot.

    STALE lines stay visible to the customer but are never priced or ordered.
    """

    ACTIVE = "ACTIVE"
    STALE = "STALE"


class StaleReason(str, Enum):
    ITEM_REMOVED = "ITEM_REMOVED"        # Item no longer in the catalog
    ITEM_INACTIVE = "ITEM_INACTIVE"      # Item deactivated by the business
    OUT_OF_STOCK = "OUT_OF_STOCK"        # Item marked as sold out
    VARIANT_REMOVED = "VARIANT_REMOVED"  # Selected size or extra no longer offered
    OPTIONS_INVALID = "OPTIONS_INVALID"  # Chosen extras break the item's option group rules
