import logging
from typing import Iterable

from exceptions.cart import InvalidVariantException, ItemUnavailableException
from models.cart import CartLine, LineKey
from models.catalog import CatalogItem, Extra, Size

logger = logging.getLogger(__name__)


class Cart:
    """
    In-memory cart of one ordering session.

    Lines keep insertion order for display. There is exactly one writer (the
    session), so no locking is needed. Catalog changes never modify the cart:
    lines pointing at removed or deactivated items are reported as stale by
    the pricing service and stay here until the customer removes them.
    """

    def __init__(self) -> None:
        self._lines: dict[LineKey, CartLine] = {}

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self):
        return iter(self.lines)

    def get_line(self, key: LineKey) -> CartLine | None:
        return self._lines.get(key)

    def add_line(self, item: CatalogItem, size: Size | None = None, extras: Iterable[Extra] = ()) -> CartLine:
        """
        Add one unit of an item variant.

        A line with the same (item, size, extras) key is incremented instead of
        duplicated. Items with sizes always get one: the default size is used
        when none is given.

        Raises:
            ItemUnavailableException: Item is inactive or out of stock (cart unchanged)
            InvalidVariantException: Size/extras are not offered by the item, or the extras
                break an option group rule (required group empty, too many picks)
        """
        reason = item.unavailable_reason
        if reason is not None:
            logger.info(f"Rejected add of unavailable item {item.id}: {reason.value}")
            raise ItemUnavailableException(item_id=item.id, item_name=item.name, reason=reason.value)

        size = self._resolve_size(item, size)
        extra_ids = self._resolve_extras(item, extras)

        key = LineKey(item.id, size.id if size else None, extra_ids)
        line = self._lines.get(key)
        if line is not None:
            line.quantity += 1
            return line

        line = CartLine(item_id=item.id, item_name=item.name, size_id=key.size_id, extra_ids=extra_ids)
        self._lines[line.key] = line
        return line

    def increment_line(self, key: LineKey) -> CartLine | None:
        line = self._lines.get(key)
        if line is None:
            return None
        line.quantity += 1
        return line

    def decrement_line(self, key: LineKey) -> CartLine | None:
        """Remove one unit. The last unit removes the line. Unknown keys are ignored."""
        line = self._lines.get(key)
        if line is None:
            return None
        if line.quantity <= 1:
            del self._lines[key]
            return None
        line.quantity -= 1
        return line

    def remove_line(self, key: LineKey) -> None:
        self._lines.pop(key, None)

    def clear(self) -> None:
        self._lines.clear()

    def total_item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    @staticmethod
    def _resolve_size(item: CatalogItem, size: Size | None) -> Size | None:
        if not item.variant_kind.has_sizes:
            if size is not None:
                raise InvalidVariantException(item.id, f"item has no sizes, got size {size.id}")
            return None
        if size is None:
            return item.default_size()
        if item.get_size(size.id) is None:
            raise InvalidVariantException(item.id, f"size {size.id} is not offered")
        return size

    @staticmethod
    def _resolve_extras(item: CatalogItem, extras: Iterable[Extra]) -> tuple[str, ...]:
        extra_ids = sorted({extra.id for extra in extras})
        if extra_ids and not item.variant_kind.has_extras:
            raise InvalidVariantException(item.id, "item has no extras")
        unknown = [extra_id for extra_id in extra_ids if item.get_extra(extra_id) is None]
        if unknown:
            raise InvalidVariantException(item.id, f"extras {', '.join(unknown)} are not offered")
        error = item.extra_selection_error(extra_ids)
        if error is not None:
            raise InvalidVariantException(item.id, error)
        return tuple(extra_ids)
