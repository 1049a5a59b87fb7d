# A cart line is one distinct item + variant selection with its quantity. Lines only
# reference catalog items by id: prices and availability are looked up in the latest
# snapshot at read time, never copied into the cart.
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LineKey(NamedTuple):
    """Identity of a cart line. Adding the same key again merges into one line."""
    item_id: str
    size_id: str | None
    extra_ids: tuple[str, ...]


class CartLine(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    item_id: str
    item_name: str  # Display name captured on add, shown while the line is stale
    size_id: str | None = None
    extra_ids: tuple[str, ...] = ()
    quantity: int = Field(default=1, ge=1)

    @field_validator("extra_ids", mode="before")
    @classmethod
    def _sorted_unique(cls, value):
        return tuple(sorted(set(value or ())))

    @property
    def key(self) -> LineKey:
        return LineKey(self.item_id, self.size_id, self.extra_ids)
