"""
Domain exceptions for the clinic inventory service.

Every failure the engine reports to callers is one of these types; the API
layer maps them onto HTTP status codes.
"""

from typing import Any


class ClinicError(Exception):
    """Base exception for all clinic inventory errors."""

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


# Validation Exceptions
class ValidationError(ClinicError):
    """Input validation failed."""

    def __init__(self, field: str, message: str, value: Any = None):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code="VALIDATION_ERROR",
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class DuplicateItemError(ValidationError):
    """An inventory item with the same name and type already exists."""

    def __init__(self, name: str, item_type: str):
        super().__init__(
            field="name",
            message=f"A {item_type} named '{name}' already exists",
            value=name,
        )
        self.code = "DUPLICATE_ITEM"
        self.details.update({"item_type": item_type})


# Lookup Exceptions
class NotFoundError(ClinicError):
    """Referenced row does not exist."""

    pass


class InventoryItemNotFoundError(NotFoundError):
    """Inventory item not found."""

    def __init__(self, item_ref: int | str, item_type: str | None = None):
        label = item_type or "inventory item"
        super().__init__(
            f"{label.capitalize()} not found: {item_ref}",
            code="ITEM_NOT_FOUND",
            details={"item": item_ref, "item_type": item_type},
        )


class CategoryNotFoundError(NotFoundError):
    """Category not found."""

    def __init__(self, category_id: int):
        super().__init__(
            f"Category not found: {category_id}",
            code="CATEGORY_NOT_FOUND",
            details={"category_id": category_id},
        )


class SupplierNotFoundError(NotFoundError):
    """Supplier not found."""

    def __init__(self, supplier_id: int):
        super().__init__(
            f"Supplier not found: {supplier_id}",
            code="SUPPLIER_NOT_FOUND",
            details={"supplier_id": supplier_id},
        )


class VisitNotFoundError(NotFoundError):
    """Clinic visit not found."""

    def __init__(self, visit_id: int):
        super().__init__(
            f"Clinic visit not found: {visit_id}",
            code="VISIT_NOT_FOUND",
            details={"visit_id": visit_id},
        )


# Consistency Exceptions
class UsageConflictError(ClinicError):
    """Delete blocked because other rows still reference the target."""

    def __init__(self, resource: str, resource_id: int, usage_count: int = 1):
        super().__init__(
            f"{resource.capitalize()} is in use and cannot be deleted",
            code="USAGE_CONFLICT",
            details={
                "resource": resource,
                "resource_id": resource_id,
                "usage_count": usage_count,
            },
        )


class InsufficientStockError(ClinicError):
    """A stock delta would drive the item below zero."""

    def __init__(self, item_name: str, requested: int, available: int):
        super().__init__(
            f"Insufficient stock for '{item_name}': requested {requested}, available {available}",
            code="INSUFFICIENT_STOCK",
            details={
                "item_name": item_name,
                "requested": requested,
                "available": available,
            },
        )


# Storage Exceptions
class StorageError(ClinicError):
    """Base exception for storage operations."""

    pass


class DatabaseError(StorageError):
    """Database operation failed."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Database error during {operation}: {error}",
            code="DATABASE_ERROR",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(ClinicError):
    """Configuration error."""

    pass
