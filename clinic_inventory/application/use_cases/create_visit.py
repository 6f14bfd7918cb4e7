"""Create Visit Use Case: record a visit and dispense its items atomically."""

from datetime import datetime

from clinic_inventory.application.dto.requests import CreateVisitRequest, DispensedLineRequest
from clinic_inventory.application.dto.responses import VisitResponse
from clinic_inventory.config import get_logger
from clinic_inventory.core.entities.inventory import ItemType
from clinic_inventory.core.entities.visit import ClinicVisit, DispensedItem
from clinic_inventory.core.services import ConsistencyCoordinator

logger = get_logger(__name__)


def _to_line(line: DispensedLineRequest, item_type: ItemType) -> DispensedItem:
    return DispensedItem(
        inventory_item_id=line.item_id,
        item_name=line.name or "",
        item_type=item_type,
        quantity=line.quantity,
    )


class CreateVisitUseCase:
    """Record a clinic visit and deduct everything dispensed during it."""

    def __init__(self, coordinator: ConsistencyCoordinator | None = None):
        self._coordinator = coordinator

    async def _get_coordinator(self) -> ConsistencyCoordinator:
        if self._coordinator is None:
            from clinic_inventory.application.services import get_consistency_coordinator

            self._coordinator = await get_consistency_coordinator()
        return self._coordinator

    async def execute(self, request: CreateVisitRequest) -> ClinicVisit:
        """Execute create visit use case."""
        logger.info(
            "create_visit_started",
            patient_id=request.patient_id,
            medicines=len(request.medicines),
            supplies=len(request.supplies),
        )

        coordinator = await self._get_coordinator()

        visit = ClinicVisit(
            patient_id=request.patient_id,
            diagnosis=request.diagnosis,
            notes=request.notes,
            issued_by=request.issued_by,
            visit_date=request.visit_date or datetime.utcnow(),
        )
        lines = [_to_line(m, ItemType.MEDICINE) for m in request.medicines]
        lines += [_to_line(s, ItemType.SUPPLY) for s in request.supplies]

        return await coordinator.create_visit(visit, lines)

    def to_response(self, visit: ClinicVisit) -> VisitResponse:
        """Convert result to API response."""
        return VisitResponse.model_validate(visit)
