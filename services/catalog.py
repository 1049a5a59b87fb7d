import asyncio
import hashlib
import logging
from datetime import datetime, timezone
from typing import Protocol

import aiohttp
from pydantic import ValidationError

import config
from exceptions.catalog import CatalogNotFoundException, CatalogTransientException, InvalidCatalogDataException
from models.catalog import CatalogPayload, CatalogSnapshot

logger = logging.getLogger(__name__)


class CatalogSource(Protocol):
    """Where catalog data comes from. The catalog storage itself is an external service."""

    async def fetch_catalog(self, business_id: str) -> dict:
        ...


class HttpCatalogSource:
    """
    Reads a business catalog from the public menu endpoint.

    Expected response (optionally wrapped in {"success": true, "data": {...}}):
        {
            "categories": [{"id": "c1", "name": "Burgers"}],
            "products": [{"id": "p1", "name": "Burger", "price": 45.0, "categoryId": "c1",
                          "isActive": true, "inStock": true, "discountPrice": 39.0,
                          "discountUntil": "2026-12-31T23:59:59Z", "sizes": [...], "extras": [...],
                          "extraGroupIds": ["g1"]}],
            "extraGroups": [{"id": "g1", "name": "Sos", "selectionType": "single",
                             "isRequired": true, "extras": [...]}]
        }
    """

    def __init__(self, base_url: str | None = None, *, timeout: float | None = None) -> None:
        self._base_url = (base_url or config.CATALOG_API_URL).rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout or config.HTTP_TIMEOUT_SECONDS)

    async def fetch_catalog(self, business_id: str) -> dict:
        url = f"{self._base_url}/public-menu"
        try:
            async with aiohttp.ClientSession(timeout=self._timeout) as session:
                async with session.get(url, params={"businessId": business_id}) as response:
                    if response.status == 404:
                        raise CatalogNotFoundException(business_id)
                    if response.status >= 500:
                        raise CatalogTransientException(business_id, f"HTTP {response.status}")
                    if response.status != 200:
                        raise InvalidCatalogDataException(business_id, f"unexpected HTTP {response.status}")
                    payload = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise CatalogTransientException(business_id, str(e) or e.__class__.__name__) from e
        except ValueError as e:
            raise InvalidCatalogDataException(business_id, f"response is not JSON: {e}") from e

        if not isinstance(payload, dict):
            raise InvalidCatalogDataException(business_id, "expected a JSON object")

        # Envelope used by the public API routes
        if "success" in payload:
            if not payload["success"]:
                raise CatalogNotFoundException(business_id)
            payload = payload.get("data") or {}

        return payload


class CatalogService:
    """Loads immutable catalog snapshots for a business."""

    def __init__(self, source: CatalogSource | None = None) -> None:
        self.source = source or HttpCatalogSource()

    async def load_snapshot(self, business_id: str) -> CatalogSnapshot:
        """
        Fetch the catalog and build a new snapshot.

        Raises:
            CatalogNotFoundException: Business or catalog does not exist
            CatalogTransientException: Network failure, the caller may retry
            InvalidCatalogDataException: Payload does not match the catalog shape
        """
        payload = await self.source.fetch_catalog(business_id)
        snapshot = self.build_snapshot(business_id, payload)
        logger.info(
            f"Loaded catalog for business {business_id}: "
            f"{len(snapshot.products)} products, {len(snapshot.categories)} categories, version={snapshot.version}"
        )
        return snapshot

    @staticmethod
    def build_snapshot(business_id: str, payload: dict) -> CatalogSnapshot:
        try:
            parsed = CatalogPayload.model_validate(payload)
        except ValidationError as e:
            raise InvalidCatalogDataException(business_id, f"{e.error_count()} invalid field(s)") from e

        return CatalogSnapshot(
            business_id=business_id,
            version=CatalogService.fingerprint(parsed),
            loaded_at=datetime.now(timezone.utc),
            categories=parsed.categories,
            products=parsed.products,
        )

    @staticmethod
    def fingerprint(payload: CatalogPayload) -> str:
        """
        Content version of a catalog.

        Identical catalogs get identical versions, so reloading an unchanged
        catalog is recognisable as a no-op.
        """
        canonical = payload.model_dump_json()
        return hashlib.sha256(canonical.encode("utf-8")).hexdigest()[:16]
