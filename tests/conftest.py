"""
Pytest configuration and fixtures for tests.

This file is automatically loaded by pytest and provides shared fixtures
and configuration for all tests.
"""

import copy
import os
import sys

import pytest

# Add parent directory to Python path so tests can import modules
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Test configuration, set before config.py is imported anywhere
os.environ["RUNTIME_ENVIRONMENT"] = "TEST"
os.environ["DB_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["CURRENCY_SYMBOL"] = "₺"
os.environ["PRICE_LOCALE"] = "tr-TR"
os.environ["MIN_PHONE_LENGTH"] = "10"
os.environ["MESSAGING_PROVIDER_HOST"] = "wa.me"
os.environ["LOG_MASK_SECRETS"] = "true"

from models.order import BusinessProfile, Customer
from services.catalog import CatalogService


# ============================================================================
# Catalog Fixtures
# ============================================================================

BUSINESS_ID = "biz-1"

CATALOG_PAYLOAD = {
    "categories": [
        {"id": "c1", "name": "Burgerler"},
        {"id": "c2", "name": "Pizzalar"},
        {"id": "c3", "name": "İçecekler"},
    ],
    "products": [
        {
            "id": "burger",
            "name": "Burger",
            "price": 45.0,
            "categoryId": "c1",
            "isActive": True,
            "inStock": True,
        },
        {
            "id": "pizza",
            "name": "Pizza",
            "price": 19.99,
            "categoryId": "c2",
            "sizes": [
                {"id": "small", "name": "Küçük", "priceModifier": 0},
                {"id": "medium", "name": "Orta", "priceModifier": 2.5, "isDefault": True},
                {"id": "large", "name": "Büyük", "priceModifier": 5.0},
            ],
            "extras": [
                {"id": "cheese", "name": "Ekstra Peynir", "price": 2.5},
                {"id": "sucuk", "name": "Sucuk", "price": 2.5},
            ],
        },
        {
            "id": "ayran",
            "name": "Ayran",
            "price": 15.0,
            "categoryId": "c3",
            "inStock": False,
        },
        {
            "id": "kunefe",
            "name": "Künefe",
            "price": 80.0,
            "categoryId": "c1",
            "isActive": False,
        },
    ],
}


# Public menu shape: extra groups listed once, products reference them by id
GROUPED_MENU_PAYLOAD = {
    "categories": [{"id": "c1", "name": "Tostlar"}],
    "products": [
        {"id": "tost", "name": "Karışık Tost", "price": 60, "categoryId": "c1", "extraGroupIds": ["sauce", "toppings"]},
        {"id": "wrap", "name": "Tavuk Dürüm", "price": 85, "categoryId": "c1", "extraGroupIds": ["toppings"]},
    ],
    "extraGroups": [
        {
            "id": "sauce",
            "name": "Sos Seçimi",
            "selectionType": "single",
            "isRequired": True,
            "maxSelections": 1,
            "extras": [
                {"id": "ketchup", "groupId": "sauce", "name": "Ketçap", "priceModifier": 0},
                {"id": "mayo", "groupId": "sauce", "name": "Mayonez", "priceModifier": 0},
            ],
        },
        {
            "id": "toppings",
            "name": "Ekstralar",
            "selectionType": "multiple",
            "isRequired": False,
            "maxSelections": 2,
            "extras": [
                {"id": "kasar", "groupId": "toppings", "name": "Kaşar", "priceModifier": 10},
                {"id": "sucuk", "groupId": "toppings", "name": "Sucuk", "priceModifier": 15},
                {"id": "jalapeno", "groupId": "toppings", "name": "Jalapeno", "priceModifier": 5},
            ],
        },
    ],
}


class FakeCatalogSource:
    """In-memory CatalogSource. Mutate `payload` to simulate a catalog edit."""

    def __init__(self, payload: dict):
        self.payload = payload
        self.error: Exception | None = None
        self.calls = 0

    async def fetch_catalog(self, business_id: str) -> dict:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return copy.deepcopy(self.payload)


@pytest.fixture
def catalog_payload():
    """Fresh copy of the test catalog payload."""
    return copy.deepcopy(CATALOG_PAYLOAD)


@pytest.fixture
def snapshot(catalog_payload):
    """Catalog snapshot built from the test payload."""
    return CatalogService.build_snapshot(BUSINESS_ID, catalog_payload)


@pytest.fixture
def grouped_payload():
    """Fresh copy of the menu with option groups."""
    return copy.deepcopy(GROUPED_MENU_PAYLOAD)


@pytest.fixture
def grouped_snapshot(grouped_payload):
    return CatalogService.build_snapshot(BUSINESS_ID, grouped_payload)


@pytest.fixture
def catalog_source(catalog_payload):
    return FakeCatalogSource(catalog_payload)


@pytest.fixture
def catalog_service(catalog_source):
    return CatalogService(source=catalog_source)


# ============================================================================
# Order Fixtures
# ============================================================================

@pytest.fixture
def profile():
    return BusinessProfile(id=BUSINESS_ID, name="Burger House", messaging_address="+90 (532) 123-45-67")


@pytest.fixture
def customer():
    return Customer(name="Ayşe Yılmaz", phone="05321234567")
