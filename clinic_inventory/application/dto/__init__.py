"""Data Transfer Objects for API layer.

Request DTOs: Validate and parse incoming API requests.
Response DTOs: Structure and serialize API responses.

These are the ONLY contracts between API handlers and use cases.
"""

from clinic_inventory.application.dto.requests import (
    AdjustStockRequest,
    CreateCategoryRequest,
    CreateVisitRequest,
    DispensedLineRequest,
    SaveInventoryItemRequest,
    SaveSupplierRequest,
    UpdateCategoryRequest,
    UpdateVisitRequest,
)
from clinic_inventory.application.dto.responses import (
    ApiResponse,
    CategoryResponse,
    DeleteVisitResponse,
    DispensedItemResponse,
    HealthResponse,
    InventoryItemResponse,
    SupplierResponse,
    TransactionResponse,
    VisitResponse,
)

__all__ = [
    # Requests
    "AdjustStockRequest",
    "CreateCategoryRequest",
    "CreateVisitRequest",
    "DispensedLineRequest",
    "SaveInventoryItemRequest",
    "SaveSupplierRequest",
    "UpdateCategoryRequest",
    "UpdateVisitRequest",
    # Responses
    "ApiResponse",
    "CategoryResponse",
    "DeleteVisitResponse",
    "DispensedItemResponse",
    "HealthResponse",
    "InventoryItemResponse",
    "SupplierResponse",
    "TransactionResponse",
    "VisitResponse",
]
