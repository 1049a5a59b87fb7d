"""
Tests for the order engine exception hierarchy
"""
from decimal import Decimal

import pytest

from exceptions import (
    BelowMinimumOrderException,
    CartException,
    CatalogException,
    CatalogNotFoundException,
    CatalogTransientException,
    EmptyCartException,
    HandoffException,
    InvalidCatalogDataException,
    InvalidPhoneException,
    ItemUnavailableException,
    MissingDestinationException,
    MissingNameException,
    OrderEngineException,
    OrderSubmissionException,
    OrderValidationException,
    SessionClosedException,
)


class TestOrderEngineException:
    """Test the base exception."""

    def test_str_is_message(self):
        exc = OrderEngineException("Something failed", details={'business_id': 'biz-1'})

        assert str(exc) == "Something failed"
        assert exc.details == {'business_id': 'biz-1'}

    def test_repr_includes_details(self):
        exc = OrderEngineException("Something failed", details={'business_id': 'biz-1'})

        assert repr(exc) == "OrderEngineException('Something failed', business_id=biz-1)"

    def test_repr_without_details(self):
        assert repr(OrderEngineException("Plain")) == "OrderEngineException('Plain')"


class TestFamilies:
    """Every concrete exception belongs to one family."""

    @pytest.mark.parametrize("exc, family", [
        (CatalogNotFoundException("biz-1"), CatalogException),
        (CatalogTransientException("biz-1", "timeout"), CatalogException),
        (InvalidCatalogDataException("biz-1", "bad"), CatalogException),
        (ItemUnavailableException("p1", "Burger", "OUT_OF_STOCK"), CartException),
        (SessionClosedException("biz-1"), CartException),
        (MissingNameException(), OrderValidationException),
        (InvalidPhoneException("0532", 10), OrderValidationException),
        (EmptyCartException("biz-1"), OrderValidationException),
        (BelowMinimumOrderException("biz-1", Decimal("45.00"), Decimal("60")), OrderValidationException),
        (MissingDestinationException("biz-1"), HandoffException),
        (OrderSubmissionException("biz-1", "HTTP 500", status_code=500), HandoffException),
    ])
    def test_family(self, exc, family):
        assert isinstance(exc, family)
        assert isinstance(exc, OrderEngineException)

    def test_only_transient_catalog_errors_are_retryable(self):
        assert CatalogTransientException("biz-1", "timeout").retryable is True
        assert CatalogNotFoundException("biz-1").retryable is False
        assert InvalidCatalogDataException("biz-1", "bad").retryable is False


class TestDetails:
    """Exceptions carry structured context."""

    def test_item_unavailable(self):
        exc = ItemUnavailableException(item_id="p1", item_name="Burger", reason="ITEM_INACTIVE")

        assert exc.item_id == "p1"
        assert "Burger" in str(exc)
        assert exc.details['reason'] == "ITEM_INACTIVE"

    def test_invalid_phone_does_not_echo_number(self):
        exc = InvalidPhoneException("0532", 10)

        assert "0532" not in str(exc)
        assert exc.details == {'field': 'phone', 'length': 4, 'min_length': 10}

    def test_empty_cart_mentions_stale_lines(self):
        assert "2 unavailable" in str(EmptyCartException("biz-1", stale_lines=2))
        assert "unavailable" not in str(EmptyCartException("biz-1"))

    def test_submission_status_code_is_optional(self):
        exc = OrderSubmissionException("biz-1", "connection refused")

        assert exc.status_code is None
        assert 'status_code' not in exc.details

    def test_below_minimum_amounts(self):
        exc = BelowMinimumOrderException("biz-1", Decimal("45.00"), Decimal("60"))

        assert "60" in str(exc)
        assert exc.details == {'business_id': 'biz-1', 'subtotal': '45.00', 'min_order_amount': '60'}
