"""
CatalogService / HttpCatalogSource Unit Tests

Snapshot building from raw payloads, and the HTTP source against a local
aiohttp test server.

Run with:
    pytest tests/catalog/unit/test_catalog_service.py -v
"""

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from aiohttp import web
from aiohttp import test_utils

from enums.line_state import StaleReason
from enums.selection_type import SelectionType
from enums.variant_kind import VariantKind
from exceptions.catalog import (
    CatalogNotFoundException,
    CatalogTransientException,
    InvalidCatalogDataException,
)
from services.catalog import CatalogService, HttpCatalogSource


def _menu_app(handler) -> web.Application:
    app = web.Application()
    app.router.add_get("/api/fastfood/public-menu", handler)
    return app


class TestBuildSnapshot:
    """Test CatalogService.build_snapshot()"""

    def test_parses_products_and_categories(self, snapshot):
        assert snapshot.business_id == "biz-1"
        assert len(snapshot) == 4
        assert [category.id for category in snapshot.categories] == ["c1", "c2", "c3"]

        pizza = snapshot.get_item("pizza")
        assert pizza.base_price == Decimal("19.99")
        assert pizza.variant_kind == VariantKind.SIZED_WITH_EXTRAS
        assert pizza.get_size("large").price_modifier == Decimal("5.0")
        assert pizza.default_size().id == "medium"

    def test_plain_item_has_no_variants(self, snapshot):
        burger = snapshot.get_item("burger")
        assert burger.variant_kind == VariantKind.PLAIN
        assert burger.default_size() is None

    def test_availability(self, snapshot):
        assert snapshot.get_item("ayran").unavailable_reason == StaleReason.OUT_OF_STOCK
        assert snapshot.get_item("kunefe").unavailable_reason == StaleReason.ITEM_INACTIVE
        assert [item.id for item in snapshot.active_products()] == ["burger", "pizza"]

    def test_products_in_category(self, snapshot):
        assert [item.id for item in snapshot.products_in_category("c1")] == ["burger", "kunefe"]

    def test_unknown_item_is_none(self, snapshot):
        assert snapshot.get_item("missing") is None

    def test_first_size_is_default_without_flag(self, catalog_payload):
        for size in catalog_payload["products"][1]["sizes"]:
            size.pop("isDefault", None)
        snapshot = CatalogService.build_snapshot("biz-1", catalog_payload)

        assert snapshot.get_item("pizza").default_size().id == "small"

    def test_numeric_ids_become_strings(self):
        snapshot = CatalogService.build_snapshot("biz-1", {"products": [{"id": 7, "name": "Tost", "price": 30}]})

        assert snapshot.get_item("7").name == "Tost"

    def test_null_lists_are_empty(self):
        snapshot = CatalogService.build_snapshot(
            "biz-1",
            {"categories": None, "products": [{"id": "p", "name": "Su", "price": 5, "sizes": None, "extras": None}]}
        )

        assert snapshot.categories == ()
        assert snapshot.get_item("p").variant_kind == VariantKind.PLAIN

    def test_negative_price_is_rejected(self):
        with pytest.raises(InvalidCatalogDataException) as exc_info:
            CatalogService.build_snapshot("biz-1", {"products": [{"id": "p", "name": "X", "price": -1}]})

        assert exc_info.value.business_id == "biz-1"

    def test_missing_price_is_rejected(self):
        with pytest.raises(InvalidCatalogDataException):
            CatalogService.build_snapshot("biz-1", {"products": [{"id": "p", "name": "X"}]})


class TestExtraGroups:
    """Extra groups referenced by id are attached to their products"""

    def test_groups_attached_by_id(self, grouped_snapshot):
        tost = grouped_snapshot.get_item("tost")

        assert [group.id for group in tost.extra_groups] == ["sauce", "toppings"]
        assert tost.extra_groups[0].selection_type == SelectionType.SINGLE
        assert tost.extra_groups[0].is_required is True
        assert tost.extra_groups[1].limit == 2
        assert tost.get_extra("sucuk").price == Decimal("15")
        assert tost.variant_kind == VariantKind.WITH_EXTRAS

    def test_only_referenced_groups(self, grouped_snapshot):
        assert [group.id for group in grouped_snapshot.get_item("wrap").extra_groups] == ["toppings"]

    def test_unknown_group_ids_are_skipped(self, grouped_payload):
        grouped_payload["products"][1]["extraGroupIds"] = ["toppings", "drinks"]
        snapshot = CatalogService.build_snapshot("biz-1", grouped_payload)

        assert [group.id for group in snapshot.get_item("wrap").extra_groups] == ["toppings"]

    def test_inline_groups(self):
        snapshot = CatalogService.build_snapshot("biz-1", {"products": [{
            "id": "p", "name": "Kahve", "price": 50,
            "extraGroups": [{"id": "milk", "name": "Süt", "selectionType": "multiple", "extras": [
                {"id": "oat", "name": "Yulaf", "priceModifier": 8},
            ]}],
        }]})

        group = snapshot.get_item("p").extra_groups[0]
        assert group.is_required is False
        assert group.limit is None

    def test_group_change_changes_version(self, grouped_payload):
        first = CatalogService.build_snapshot("biz-1", grouped_payload)
        grouped_payload["extraGroups"][1]["maxSelections"] = 3
        second = CatalogService.build_snapshot("biz-1", grouped_payload)

        assert first.version != second.version


class TestDiscountFields:
    """discountPrice / discountUntil are read from the payload"""

    def test_parsed(self, catalog_payload):
        catalog_payload["products"][0].update(discountPrice=30, discountUntil="2026-10-31T23:59:59Z")
        burger = CatalogService.build_snapshot("biz-1", catalog_payload).get_item("burger")

        assert burger.discount_price == Decimal("30")
        assert burger.discount_until == datetime(2026, 10, 31, 23, 59, 59, tzinfo=timezone.utc)
        assert burger.effective_base_price(datetime(2026, 10, 18, tzinfo=timezone.utc)) == Decimal("30")
        assert burger.effective_base_price(datetime(2026, 11, 1, tzinfo=timezone.utc)) == Decimal("45.0")

    def test_negative_discount_is_rejected(self, catalog_payload):
        catalog_payload["products"][0]["discountPrice"] = -5

        with pytest.raises(InvalidCatalogDataException):
            CatalogService.build_snapshot("biz-1", catalog_payload)


class TestFingerprint:
    """Snapshot versions are content fingerprints"""

    def test_same_content_same_version(self, catalog_payload):
        first = CatalogService.build_snapshot("biz-1", catalog_payload)
        second = CatalogService.build_snapshot("biz-1", catalog_payload)

        assert first.version == second.version
        assert len(first.version) == 16

    def test_price_change_changes_version(self, catalog_payload):
        first = CatalogService.build_snapshot("biz-1", catalog_payload)
        catalog_payload["products"][0]["price"] = 50.0
        second = CatalogService.build_snapshot("biz-1", catalog_payload)

        assert first.version != second.version


class TestLoadSnapshot:
    """Test CatalogService.load_snapshot() with a fake source"""

    @pytest.mark.asyncio
    async def test_loads_from_source(self, catalog_service, catalog_source):
        snapshot = await catalog_service.load_snapshot("biz-1")

        assert catalog_source.calls == 1
        assert snapshot.get_item("burger") is not None

    @pytest.mark.asyncio
    async def test_source_errors_propagate(self, catalog_service, catalog_source):
        catalog_source.error = CatalogTransientException("biz-1", "timeout")

        with pytest.raises(CatalogTransientException) as exc_info:
            await catalog_service.load_snapshot("biz-1")

        assert exc_info.value.retryable is True


class TestHttpCatalogSource:
    """Test HttpCatalogSource against a local aiohttp server"""

    @pytest.mark.asyncio
    async def test_plain_payload(self, catalog_payload):
        received = {}

        async def handler(request):
            received["businessId"] = request.query.get("businessId")
            return web.json_response(catalog_payload)

        async with test_utils.TestServer(_menu_app(handler)) as server:
            source = HttpCatalogSource(str(server.make_url("/api/fastfood")))
            payload = await source.fetch_catalog("biz-1")

        assert received["businessId"] == "biz-1"
        assert payload["products"][0]["id"] == "burger"

    @pytest.mark.asyncio
    async def test_envelope_is_unwrapped(self, catalog_payload):
        async def handler(request):
            return web.json_response({"success": True, "data": catalog_payload})

        async with test_utils.TestServer(_menu_app(handler)) as server:
            service = CatalogService(HttpCatalogSource(str(server.make_url("/api/fastfood"))))
            snapshot = await service.load_snapshot("biz-1")

        assert len(snapshot) == 4

    @pytest.mark.asyncio
    async def test_unsuccessful_envelope_is_not_found(self):
        async def handler(request):
            return web.json_response({"success": False, "error": "İşletme bulunamadı"})

        async with test_utils.TestServer(_menu_app(handler)) as server:
            source = HttpCatalogSource(str(server.make_url("/api/fastfood")))
            with pytest.raises(CatalogNotFoundException):
                await source.fetch_catalog("biz-1")

    @pytest.mark.asyncio
    async def test_404_is_not_found(self):
        async def handler(request):
            return web.json_response({"error": "not found"}, status=404)

        async with test_utils.TestServer(_menu_app(handler)) as server:
            source = HttpCatalogSource(str(server.make_url("/api/fastfood")))
            with pytest.raises(CatalogNotFoundException) as exc_info:
                await source.fetch_catalog("biz-1")

        assert exc_info.value.retryable is False

    @pytest.mark.asyncio
    async def test_5xx_is_transient(self):
        async def handler(request):
            return web.Response(status=503, text="maintenance")

        async with test_utils.TestServer(_menu_app(handler)) as server:
            source = HttpCatalogSource(str(server.make_url("/api/fastfood")))
            with pytest.raises(CatalogTransientException) as exc_info:
                await source.fetch_catalog("biz-1")

        assert "503" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_non_json_is_invalid(self):
        async def handler(request):
            return web.Response(status=200, text="<html>oops</html>")

        async with test_utils.TestServer(_menu_app(handler)) as server:
            source = HttpCatalogSource(str(server.make_url("/api/fastfood")))
            with pytest.raises(InvalidCatalogDataException):
                await source.fetch_catalog("biz-1")

    @pytest.mark.asyncio
    async def test_json_array_is_invalid(self):
        async def handler(request):
            return web.json_response([1, 2, 3])

        async with test_utils.TestServer(_menu_app(handler)) as server:
            source = HttpCatalogSource(str(server.make_url("/api/fastfood")))
            with pytest.raises(InvalidCatalogDataException):
                await source.fetch_catalog("biz-1")

    @pytest.mark.asyncio
    async def test_connection_error_is_transient(self):
        async def handler(request):
            return web.json_response({})

        server = test_utils.TestServer(_menu_app(handler))
        await server.start_server()
        base_url = str(server.make_url("/api/fastfood"))
        await server.close()

        source = HttpCatalogSource(base_url, timeout=2)
        with pytest.raises(CatalogTransientException) as exc_info:
            await source.fetch_catalog("biz-1")

        assert exc_info.value.retryable is True
