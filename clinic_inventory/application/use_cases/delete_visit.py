"""Delete Visit Use Case: retract a visit and restore its stock."""

from clinic_inventory.application.dto.responses import (
    DeleteVisitResponse,
    DispensedItemResponse,
)
from clinic_inventory.config import get_logger
from clinic_inventory.core.services import ConsistencyCoordinator, VisitDeletion

logger = get_logger(__name__)


class DeleteVisitUseCase:
    """Delete a clinic visit, putting dispensed stock back on the shelf."""

    def __init__(self, coordinator: ConsistencyCoordinator | None = None):
        self._coordinator = coordinator

    async def _get_coordinator(self) -> ConsistencyCoordinator:
        if self._coordinator is None:
            from clinic_inventory.application.services import get_consistency_coordinator

            self._coordinator = await get_consistency_coordinator()
        return self._coordinator

    async def execute(self, visit_id: int, actor: str | None = None) -> VisitDeletion:
        """Execute delete visit use case."""
        logger.info("delete_visit_started", visit_id=visit_id)
        coordinator = await self._get_coordinator()
        outcome = await coordinator.delete_visit(visit_id, actor=actor)

        if outcome.skipped:
            logger.warning(
                "delete_visit_partial_restore",
                visit_id=visit_id,
                skipped=[line.item_name for line in outcome.skipped],
            )
        return outcome

    def to_response(self, outcome: VisitDeletion) -> DeleteVisitResponse:
        """Convert result to API response."""
        return DeleteVisitResponse(
            visit_id=outcome.visit.id,  # type: ignore[arg-type]
            restored=[DispensedItemResponse.model_validate(line) for line in outcome.restored],
            skipped=[DispensedItemResponse.model_validate(line) for line in outcome.skipped],
        )
