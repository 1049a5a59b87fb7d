from enum import Enum


class VariantKind(str, Enum):
    """
    Which modifiers a catalog item supports.

    Every vertical (fast food, cafe, room service) shares one cart, so the
    cart validates selections against the item's capabilities instead of
    a per-vertical item shape.
    """

    PLAIN = "PLAIN"
    SIZED = "SIZED"
    WITH_EXTRAS = "WITH_EXTRAS"
    SIZED_WITH_EXTRAS = "SIZED_WITH_EXTRAS"

    @property
    def has_sizes(self) -> bool:
        return self in (VariantKind.SIZED, VariantKind.SIZED_WITH_EXTRAS)

    @property
    def has_extras(self) -> bool:
        return self in (VariantKind.WITH_EXTRAS, VariantKind.SIZED_WITH_EXTRAS)
