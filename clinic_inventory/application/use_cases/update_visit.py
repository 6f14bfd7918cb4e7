"""Update Visit Use Case: edit visit metadata."""

from clinic_inventory.application.dto.requests import UpdateVisitRequest
from clinic_inventory.application.dto.responses import VisitResponse
from clinic_inventory.core.entities.visit import ClinicVisit
from clinic_inventory.core.services import ConsistencyCoordinator


class UpdateVisitUseCase:
    """Change a visit's patient, diagnosis or notes."""

    def __init__(self, coordinator: ConsistencyCoordinator | None = None):
        self._coordinator = coordinator

    async def _get_coordinator(self) -> ConsistencyCoordinator:
        if self._coordinator is None:
            from clinic_inventory.application.services import get_consistency_coordinator

            self._coordinator = await get_consistency_coordinator()
        return self._coordinator

    async def execute(self, visit_id: int, request: UpdateVisitRequest) -> ClinicVisit:
        coordinator = await self._get_coordinator()
        return await coordinator.update_visit(
            visit_id, **request.model_dump(exclude_unset=True)
        )

    def to_response(self, visit: ClinicVisit) -> VisitResponse:
        return VisitResponse.model_validate(visit)
