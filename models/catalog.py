# A catalog snapshot is the read-only view of everything a business sells at one
# point in time. Snapshots are never patched: Catalog Sync builds a new one on every
# change and swaps it in whole, so readers see either the old catalog or the new one.
from datetime import datetime, timezone
from decimal import Decimal
from typing import Iterable

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PrivateAttr, field_validator, model_validator

from enums.line_state import StaleReason
from enums.selection_type import SelectionType
from enums.variant_kind import VariantKind
from models.base import Money

_CATALOG_CONFIG = ConfigDict(frozen=True, populate_by_name=True, coerce_numbers_to_str=True)


class Size(BaseModel):
    model_config = _CATALOG_CONFIG

    id: str
    name: str
    price_modifier: Money = Field(
        default=Decimal("0"),
        validation_alias=AliasChoices("price_modifier", "priceModifier")
    )
    is_default: bool = Field(default=False, validation_alias=AliasChoices("is_default", "isDefault"))


class Extra(BaseModel):
    model_config = _CATALOG_CONFIG

    id: str
    name: str
    price: Money = Field(default=Decimal("0"), ge=0, validation_alias=AliasChoices("price", "priceModifier"))


class ExtraGroup(BaseModel):
    """
    Named set of extras with selection rules, e.g. "Sos Seçimi" (single, required).

    SINGLE groups accept one extra. MULTIPLE groups accept up to
    max_selections extras (0 or missing means no limit).
    """
    model_config = _CATALOG_CONFIG

    id: str
    name: str
    selection_type: SelectionType = Field(
        default=SelectionType.SINGLE,
        validation_alias=AliasChoices("selection_type", "selectionType")
    )
    is_required: bool = Field(default=False, validation_alias=AliasChoices("is_required", "isRequired"))
    max_selections: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("max_selections", "maxSelections")
    )
    extras: tuple[Extra, ...] = ()

    @field_validator("extras", mode="before")
    @classmethod
    def _missing_as_empty(cls, value):
        return () if value is None else value

    @property
    def limit(self) -> int | None:
        if self.selection_type == SelectionType.SINGLE:
            return 1
        return self.max_selections or None

    def selection_error(self, extra_ids: set[str]) -> str | None:
        chosen = [extra.id for extra in self.extras if extra.id in extra_ids]
        if self.is_required and not chosen:
            return f"group {self.name} requires a selection"
        if self.limit is not None and len(chosen) > self.limit:
            return f"group {self.name} allows at most {self.limit} selection(s), got {len(chosen)}"
        return None


class Category(BaseModel):
    model_config = _CATALOG_CONFIG

    id: str
    name: str


class CatalogItem(BaseModel):
    model_config = _CATALOG_CONFIG

    id: str
    name: str
    base_price: Money = Field(ge=0, validation_alias=AliasChoices("base_price", "basePrice", "price"))
    category_id: str | None = Field(default=None, validation_alias=AliasChoices("category_id", "categoryId"))
    is_active: bool = Field(default=True, validation_alias=AliasChoices("is_active", "isActive"))
    in_stock: bool = Field(default=True, validation_alias=AliasChoices("in_stock", "inStock"))
    image: str | None = Field(default=None, validation_alias=AliasChoices("image", "imageUrl"))
    discount_price: Money | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("discount_price", "discountPrice")
    )
    discount_until: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("discount_until", "discountUntil")
    )
    sizes: tuple[Size, ...] = ()
    extras: tuple[Extra, ...] = ()
    extra_groups: tuple[ExtraGroup, ...] = Field(
        default=(),
        validation_alias=AliasChoices("extra_groups", "extraGroups")
    )

    @field_validator("sizes", "extras", "extra_groups", mode="before")
    @classmethod
    def _missing_as_empty(cls, value):
        return () if value is None else value

    @field_validator("discount_until")
    @classmethod
    def _naive_as_utc(cls, value: datetime | None) -> datetime | None:
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @property
    def all_extras(self) -> tuple[Extra, ...]:
        """Ungrouped extras followed by the extras of every group."""
        return self.extras + tuple(extra for group in self.extra_groups for extra in group.extras)

    @property
    def variant_kind(self) -> VariantKind:
        has_extras = bool(self.all_extras)
        if self.sizes and has_extras:
            return VariantKind.SIZED_WITH_EXTRAS
        if self.sizes:
            return VariantKind.SIZED
        if has_extras:
            return VariantKind.WITH_EXTRAS
        return VariantKind.PLAIN

    @property
    def unavailable_reason(self) -> StaleReason | None:
        """Why the item cannot be sold right now, or None if it can."""
        if not self.is_active:
            return StaleReason.ITEM_INACTIVE
        if not self.in_stock:
            return StaleReason.OUT_OF_STOCK
        return None

    @property
    def is_available(self) -> bool:
        return self.unavailable_reason is None

    def effective_base_price(self, now: datetime) -> Decimal:
        """discount_price while the discount runs (until discount_until), else base_price."""
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        if self.discount_price and self.discount_until and self.discount_until > now:
            return self.discount_price
        return self.base_price

    def get_size(self, size_id: str | None) -> Size | None:
        return next((size for size in self.sizes if size.id == size_id), None)

    def get_extra(self, extra_id: str) -> Extra | None:
        return next((extra for extra in self.all_extras if extra.id == extra_id), None)

    def default_size(self) -> Size | None:
        """The size flagged as default, else the first one. None for unsized items."""
        if not self.sizes:
            return None
        return next((size for size in self.sizes if size.is_default), self.sizes[0])

    def extra_selection_error(self, extra_ids: Iterable[str]) -> str | None:
        """First broken group rule for this extra selection, or None if all groups are satisfied."""
        selected = set(extra_ids)
        for group in self.extra_groups:
            error = group.selection_error(selected)
            if error is not None:
                return error
        return None


class CatalogPayload(BaseModel):
    """
    Shape returned by the catalog endpoint: { categories: [...], products: [...] }.

    Extra groups may be listed once under "extraGroups" and referenced from
    products by "extraGroupIds"; they are attached to each product here.
    """
    model_config = _CATALOG_CONFIG

    categories: tuple[Category, ...] = ()
    products: tuple[CatalogItem, ...] = ()

    @model_validator(mode="before")
    @classmethod
    def _attach_extra_groups(cls, data):
        if not isinstance(data, dict):
            return data
        groups = data.get("extraGroups") or data.get("extra_groups") or []
        groups_by_id = {str(group.get("id")): group for group in groups if isinstance(group, dict)}
        if not groups_by_id:
            return data

        products = []
        for product in data.get("products") or []:
            if isinstance(product, dict) and "extraGroups" not in product and "extra_groups" not in product:
                group_ids = product.get("extraGroupIds") or product.get("extra_group_ids") or []
                product = {
                    **product,
                    "extraGroups": [groups_by_id[str(group_id)] for group_id in group_ids if str(group_id) in groups_by_id],
                }
            products.append(product)
        return {**data, "products": products}

    @field_validator("categories", "products", mode="before")
    @classmethod
    def _missing_as_empty(cls, value):
        return () if value is None else value


class CatalogSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True)

    business_id: str
    version: str
    loaded_at: datetime
    categories: tuple[Category, ...] = ()
    products: tuple[CatalogItem, ...] = ()

    _index: dict[str, CatalogItem] = PrivateAttr(default_factory=dict)

    def model_post_init(self, __context) -> None:
        self._index = {item.id: item for item in self.products}

    def get_item(self, item_id: str) -> CatalogItem | None:
        return self._index.get(item_id)

    def active_products(self) -> list[CatalogItem]:
        return [item for item in self.products if item.is_available]

    def products_in_category(self, category_id: str) -> list[CatalogItem]:
        return [item for item in self.products if item.category_id == category_id]

    def __len__(self) -> int:
        return len(self.products)
