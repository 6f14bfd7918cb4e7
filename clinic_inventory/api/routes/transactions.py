"""Read-only stock transaction log endpoints."""

from fastapi import APIRouter, Depends, Query

from clinic_inventory.api.dependencies import get_tx_log
from clinic_inventory.application.dto.responses import ApiResponse, TransactionResponse
from clinic_inventory.core.entities.inventory import ItemType
from clinic_inventory.core.interfaces import ITransactionLog

router = APIRouter(prefix="/api/transactions", tags=["transactions"])


@router.get("", response_model=ApiResponse[list[TransactionResponse]])
async def list_transactions(
    item_id: int | None = Query(default=None, gt=0, description="Only this item"),
    item_type: ItemType | None = Query(default=None, description="medicine or supply"),
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
    log: ITransactionLog = Depends(get_tx_log),
) -> ApiResponse[list[TransactionResponse]]:
    """List stock transactions, newest first."""
    records = await log.list_records(
        item_id=item_id, item_type=item_type, limit=limit, offset=offset
    )
    return ApiResponse.ok([TransactionResponse.model_validate(r) for r in records])
