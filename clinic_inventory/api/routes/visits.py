"""Clinic visit endpoints."""

from fastapi import APIRouter, Depends, Path, Query, status

from clinic_inventory.api.dependencies import (
    get_create_visit_use_case,
    get_delete_visit_use_case,
    get_update_visit_use_case,
    get_vis_store,
)
from clinic_inventory.application.dto.requests import CreateVisitRequest, UpdateVisitRequest
from clinic_inventory.application.dto.responses import (
    ApiResponse,
    DeleteVisitResponse,
    VisitResponse,
)
from clinic_inventory.application.use_cases import (
    CreateVisitUseCase,
    DeleteVisitUseCase,
    UpdateVisitUseCase,
)
from clinic_inventory.core.exceptions import VisitNotFoundError
from clinic_inventory.core.interfaces import IVisitStore

router = APIRouter(prefix="/api/visits", tags=["visits"])


@router.get("", response_model=ApiResponse[list[VisitResponse]])
async def list_visits(
    search: str | None = Query(default=None, description="Substring of patient or diagnosis"),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    store: IVisitStore = Depends(get_vis_store),
) -> ApiResponse[list[VisitResponse]]:
    """List visits, newest first."""
    visits = await store.list_visits(search=search, limit=limit, offset=offset)
    return ApiResponse.ok([VisitResponse.model_validate(v) for v in visits])


@router.get("/{visit_id}", response_model=ApiResponse[VisitResponse])
async def get_visit(
    visit_id: int = Path(..., gt=0),
    store: IVisitStore = Depends(get_vis_store),
) -> ApiResponse[VisitResponse]:
    """Get a visit with its dispensed lines."""
    visit = await store.get_visit(visit_id)
    if visit is None:
        raise VisitNotFoundError(visit_id)
    return ApiResponse.ok(VisitResponse.model_validate(visit))


@router.post(
    "",
    response_model=ApiResponse[VisitResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_visit(
    request: CreateVisitRequest,
    use_case: CreateVisitUseCase = Depends(get_create_visit_use_case),
) -> ApiResponse[VisitResponse]:
    """Record a visit; all dispensed stock is deducted or nothing is."""
    visit = await use_case.execute(request)
    return ApiResponse.ok(use_case.to_response(visit), message="visit recorded")


@router.put("/{visit_id}", response_model=ApiResponse[VisitResponse])
async def update_visit(
    request: UpdateVisitRequest,
    visit_id: int = Path(..., gt=0),
    use_case: UpdateVisitUseCase = Depends(get_update_visit_use_case),
) -> ApiResponse[VisitResponse]:
    """Edit visit metadata."""
    visit = await use_case.execute(visit_id, request)
    return ApiResponse.ok(use_case.to_response(visit), message="visit updated")


@router.delete("/{visit_id}", response_model=ApiResponse[DeleteVisitResponse])
async def delete_visit(
    visit_id: int = Path(..., gt=0),
    actor: str | None = Query(default=None, description="Who is deleting the visit"),
    use_case: DeleteVisitUseCase = Depends(get_delete_visit_use_case),
) -> ApiResponse[DeleteVisitResponse]:
    """Delete a visit and restore the stock it dispensed."""
    outcome = await use_case.execute(visit_id, actor=actor)
    message = "visit deleted"
    if outcome.skipped:
        message += f"; {len(outcome.skipped)} line(s) could not be restored"
    return ApiResponse.ok(use_case.to_response(outcome), message=message)
