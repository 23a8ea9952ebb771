"""
Domain exceptions for the stock ledger.

Every business outcome the engine can report is a subclass of
StockLedgerError. None of them leaves a state change behind.
"""

from typing import Any


class StockLedgerError(Exception):
    """Base exception for all stock ledger errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class UnauthorizedError(StockLedgerError):
    """Role lacks permission for the requested operation."""

    def __init__(self, role: str, operation: str):
        super().__init__(
            f"Access denied: {role} cannot perform {operation}",
            code="UNAUTHORIZED",
            details={"role": role, "operation": operation},
        )


class ItemNotFoundError(StockLedgerError):
    """SKU does not exist in the catalog."""

    def __init__(self, sku: str):
        super().__init__(
            f"Item not found: {sku}",
            code="ITEM_NOT_FOUND",
            details={"sku": sku},
        )


class DuplicateSkuError(StockLedgerError):
    """SKU already exists on create."""

    def __init__(self, sku: str):
        super().__init__(
            f"Item already exists with SKU: {sku}",
            code="DUPLICATE_SKU",
            details={"sku": sku},
        )


class InvalidFieldError(StockLedgerError):
    """A field violates its sign constraint, or a required text field is empty."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Invalid value for '{field}': {message}",
            code="INVALID_FIELD",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class InsufficientStockError(StockLedgerError):
    """Sell quantity exceeds quantity on hand."""

    def __init__(self, sku: str, requested: int, available: int):
        super().__init__(
            f"Sale exceeds stock for {sku}: requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={"sku": sku, "requested": requested, "available": available},
        )


class PersistenceError(StockLedgerError):
    """The durable store could not be read or written."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Persistence failure during {operation}: {error}",
            code="PERSISTENCE_ERROR",
            details={"operation": operation, "error": error},
        )
