"""Unit tests for domain exceptions."""

import pytest

from stockledger.core.exceptions import (
    DuplicateSkuError,
    InsufficientStockError,
    InvalidFieldError,
    ItemNotFoundError,
    PersistenceError,
    StockLedgerError,
    UnauthorizedError,
)


class TestStockLedgerError:
    """Tests for base StockLedgerError exception."""

    def test_basic_initialization(self):
        error = StockLedgerError("Something went wrong")
        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "StockLedgerError"
        assert error.details == {}

    def test_with_custom_code(self):
        error = StockLedgerError("Error message", code="CUSTOM_ERROR")
        assert error.code == "CUSTOM_ERROR"

    def test_to_dict(self):
        error = StockLedgerError("Boom", code="X", details={"a": 1})
        assert error.to_dict() == {"error": "X", "message": "Boom", "details": {"a": 1}}


class TestBusinessErrors:
    @pytest.mark.parametrize(
        "error, code",
        [
            (UnauthorizedError("Staff", "CreateItem"), "UNAUTHORIZED"),
            (ItemNotFoundError("UQ999"), "ITEM_NOT_FOUND"),
            (DuplicateSkuError("UQ001"), "DUPLICATE_SKU"),
            (InvalidFieldError("quantity", "must not be negative", -1), "INVALID_FIELD"),
            (InsufficientStockError("UQ001", 5, 2), "INSUFFICIENT_STOCK"),
            (PersistenceError("upsert_item", "disk full"), "PERSISTENCE_ERROR"),
        ],
    )
    def test_codes_and_hierarchy(self, error: StockLedgerError, code: str):
        assert isinstance(error, StockLedgerError)
        assert error.code == code

    def test_unauthorized_details(self):
        error = UnauthorizedError("Staff", "CreateItem")
        assert error.details == {"role": "Staff", "operation": "CreateItem"}
        assert "Staff" in error.message

    def test_insufficient_stock_details(self):
        error = InsufficientStockError("UQ001", requested=5, available=2)
        assert error.details == {"sku": "UQ001", "requested": 5, "available": 2}

    def test_invalid_field_truncates_value(self):
        error = InvalidFieldError("name", "too long", "x" * 500)
        assert len(error.details["value"]) == 100

    def test_invalid_field_without_value(self):
        error = InvalidFieldError("name", "must not be empty")
        assert error.details["value"] is None
