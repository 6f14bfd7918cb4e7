"""Medicine and supply endpoints.

Both resources share one set of handlers; each router is bound to its
item type, and an id that belongs to the other type is treated as absent.
"""

from fastapi import APIRouter, Depends, Path, Query, status

from clinic_inventory.api.dependencies import (
    get_adjust_stock_use_case,
    get_delete_item_use_case,
    get_item_store,
    get_save_item_use_case,
)
from clinic_inventory.application.dto.requests import AdjustStockRequest, SaveInventoryItemRequest
from clinic_inventory.application.dto.responses import ApiResponse, InventoryItemResponse
from clinic_inventory.application.use_cases import (
    AdjustStockUseCase,
    DeleteInventoryItemUseCase,
    SaveInventoryItemUseCase,
)
from clinic_inventory.core.entities.inventory import ItemType
from clinic_inventory.core.exceptions import InventoryItemNotFoundError
from clinic_inventory.core.interfaces import IInventoryStore


def build_item_router(item_type: ItemType, prefix: str) -> APIRouter:
    """Create the CRUD router for one item type."""
    router = APIRouter(prefix=prefix, tags=[prefix.rsplit("/", 1)[-1]])

    @router.get("", response_model=ApiResponse[list[InventoryItemResponse]])
    async def list_items(
        search: str | None = Query(default=None, description="Substring of name"),
        low_stock: bool = Query(default=False, description="Only items at or below reorder level"),
        limit: int = Query(default=100, ge=1, le=1000),
        offset: int = Query(default=0, ge=0),
        store: IInventoryStore = Depends(get_item_store),
    ) -> ApiResponse[list[InventoryItemResponse]]:
        """List or search items."""
        if search:
            items = await store.search(search, item_type=item_type, limit=limit)
            if low_stock:
                items = [item for item in items if item.is_low_stock]
        else:
            items = await store.list_all(
                item_type=item_type, low_stock_only=low_stock, limit=limit, offset=offset
            )
        return ApiResponse.ok([InventoryItemResponse.model_validate(item) for item in items])

    @router.get("/{item_id}", response_model=ApiResponse[InventoryItemResponse])
    async def get_item(
        item_id: int = Path(..., gt=0),
        store: IInventoryStore = Depends(get_item_store),
    ) -> ApiResponse[InventoryItemResponse]:
        """Get one item by ID."""
        item = await store.get_by_id(item_id)
        if item is None or item.item_type != item_type:
            raise InventoryItemNotFoundError(item_id, item_type.value)
        return ApiResponse.ok(InventoryItemResponse.model_validate(item))

    @router.post(
        "",
        response_model=ApiResponse[InventoryItemResponse],
        status_code=status.HTTP_201_CREATED,
    )
    async def create_item(
        request: SaveInventoryItemRequest,
        use_case: SaveInventoryItemUseCase = Depends(get_save_item_use_case),
    ) -> ApiResponse[InventoryItemResponse]:
        """Create an item; opening stock is logged as a stock_in transaction."""
        item = await use_case.execute(request, item_type)
        return ApiResponse.ok(use_case.to_response(item), message=f"{item_type.value} created")

    @router.put("/{item_id}", response_model=ApiResponse[InventoryItemResponse])
    async def update_item(
        request: SaveInventoryItemRequest,
        item_id: int = Path(..., gt=0),
        use_case: SaveInventoryItemUseCase = Depends(get_save_item_use_case),
    ) -> ApiResponse[InventoryItemResponse]:
        """Update an item; a stock change is logged as an adjustment."""
        item = await use_case.execute(request, item_type, item_id=item_id)
        return ApiResponse.ok(use_case.to_response(item), message=f"{item_type.value} updated")

    @router.delete("/{item_id}", response_model=ApiResponse[None])
    async def delete_item(
        item_id: int = Path(..., gt=0),
        use_case: DeleteInventoryItemUseCase = Depends(get_delete_item_use_case),
    ) -> ApiResponse[None]:
        """Delete an item. Its transaction history is kept."""
        await use_case.execute(item_id, item_type)
        return ApiResponse.ok(message=f"{item_type.value} deleted")

    @router.post("/{item_id}/adjust", response_model=ApiResponse[InventoryItemResponse])
    async def adjust_stock(
        request: AdjustStockRequest,
        item_id: int = Path(..., gt=0),
        use_case: AdjustStockUseCase = Depends(get_adjust_stock_use_case),
    ) -> ApiResponse[InventoryItemResponse]:
        """Apply a manual stock correction."""
        item = await use_case.execute(item_id, item_type, request)
        return ApiResponse.ok(use_case.to_response(item), message="stock adjusted")

    return router


medicines_router = build_item_router(ItemType.MEDICINE, "/api/medicines")
supplies_router = build_item_router(ItemType.SUPPLY, "/api/supplies")
