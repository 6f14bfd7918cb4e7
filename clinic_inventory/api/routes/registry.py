"""Category and supplier endpoints."""

from fastapi import APIRouter, Depends, Path, Query, status

from clinic_inventory.api.dependencies import get_cat_store, get_sup_store
from clinic_inventory.application.dto.requests import (
    CreateCategoryRequest,
    SaveSupplierRequest,
    UpdateCategoryRequest,
)
from clinic_inventory.application.dto.responses import (
    ApiResponse,
    CategoryResponse,
    SupplierResponse,
)
from clinic_inventory.core.entities.inventory import ItemType
from clinic_inventory.core.entities.registry import Category, Supplier
from clinic_inventory.core.exceptions import CategoryNotFoundError, SupplierNotFoundError
from clinic_inventory.core.interfaces import ICategoryStore, ISupplierStore

categories_router = APIRouter(prefix="/api/categories", tags=["categories"])
suppliers_router = APIRouter(prefix="/api/suppliers", tags=["suppliers"])


# --- Categories ---


@categories_router.get("", response_model=ApiResponse[list[CategoryResponse]])
async def list_categories(
    type: ItemType | None = Query(default=None, description="medicine or supply"),
    search: str | None = Query(default=None, description="Substring of name"),
    store: ICategoryStore = Depends(get_cat_store),
) -> ApiResponse[list[CategoryResponse]]:
    """List categories, optionally for one item type."""
    categories = await store.list_categories(item_type=type, search=search)
    return ApiResponse.ok([CategoryResponse.model_validate(c) for c in categories])


@categories_router.get("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def get_category(
    category_id: int = Path(..., gt=0),
    store: ICategoryStore = Depends(get_cat_store),
) -> ApiResponse[CategoryResponse]:
    """Get one category."""
    category = await store.get(category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)
    return ApiResponse.ok(CategoryResponse.model_validate(category))


@categories_router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_category(
    request: CreateCategoryRequest,
    store: ICategoryStore = Depends(get_cat_store),
) -> ApiResponse[CategoryResponse]:
    """Create a category."""
    category = await store.create(Category(name=request.name, item_type=request.item_type))
    return ApiResponse.ok(CategoryResponse.model_validate(category), message="category created")


@categories_router.put("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def update_category(
    request: UpdateCategoryRequest,
    category_id: int = Path(..., gt=0),
    store: ICategoryStore = Depends(get_cat_store),
) -> ApiResponse[CategoryResponse]:
    """Rename a category."""
    category = await store.get(category_id)
    if category is None:
        raise CategoryNotFoundError(category_id)
    category = await store.update(category.model_copy(update={"name": request.name}))
    return ApiResponse.ok(CategoryResponse.model_validate(category), message="category updated")


@categories_router.delete("/{category_id}", response_model=ApiResponse[None])
async def delete_category(
    category_id: int = Path(..., gt=0),
    store: ICategoryStore = Depends(get_cat_store),
) -> ApiResponse[None]:
    """Delete a category that no item references."""
    await store.delete(category_id)
    return ApiResponse.ok(message="category deleted")


# --- Suppliers ---


@suppliers_router.get("", response_model=ApiResponse[list[SupplierResponse]])
async def list_suppliers(
    search: str | None = Query(default=None, description="Substring of name"),
    store: ISupplierStore = Depends(get_sup_store),
) -> ApiResponse[list[SupplierResponse]]:
    """List suppliers."""
    suppliers = await store.list_suppliers(search=search)
    return ApiResponse.ok([SupplierResponse.model_validate(s) for s in suppliers])


@suppliers_router.get("/{supplier_id}", response_model=ApiResponse[SupplierResponse])
async def get_supplier(
    supplier_id: int = Path(..., gt=0),
    store: ISupplierStore = Depends(get_sup_store),
) -> ApiResponse[SupplierResponse]:
    """Get one supplier."""
    supplier = await store.get(supplier_id)
    if supplier is None:
        raise SupplierNotFoundError(supplier_id)
    return ApiResponse.ok(SupplierResponse.model_validate(supplier))


@suppliers_router.post(
    "",
    response_model=ApiResponse[SupplierResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_supplier(
    request: SaveSupplierRequest,
    store: ISupplierStore = Depends(get_sup_store),
) -> ApiResponse[SupplierResponse]:
    """Create a supplier."""
    supplier = await store.create(Supplier(name=request.name, contact=request.contact))
    return ApiResponse.ok(SupplierResponse.model_validate(supplier), message="supplier created")


@suppliers_router.put("/{supplier_id}", response_model=ApiResponse[SupplierResponse])
async def update_supplier(
    request: SaveSupplierRequest,
    supplier_id: int = Path(..., gt=0),
    store: ISupplierStore = Depends(get_sup_store),
) -> ApiResponse[SupplierResponse]:
    """Update a supplier."""
    supplier = await store.update(
        Supplier(id=supplier_id, name=request.name, contact=request.contact)
    )
    return ApiResponse.ok(SupplierResponse.model_validate(supplier), message="supplier updated")


@suppliers_router.delete("/{supplier_id}", response_model=ApiResponse[None])
async def delete_supplier(
    supplier_id: int = Path(..., gt=0),
    store: ISupplierStore = Depends(get_sup_store),
) -> ApiResponse[None]:
    """Delete a supplier that no item references."""
    await store.delete(supplier_id)
    return ApiResponse.ok(message="supplier deleted")
