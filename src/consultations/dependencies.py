"""FastAPI dependencies wiring the consultation services to a store."""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from src.consultations.intake import IntakeService
from src.consultations.query import ConsultationQueryService
from src.consultations.workflow import StatusWorkflowService
from src.database import get_db
from src.repositories.base import ConsultationStore
from src.repositories.consultation import ConsultationRepository


async def get_consultation_store(db: AsyncSession = Depends(get_db)) -> ConsultationStore:
    """Database-backed store. Replaced via ``app.dependency_overrides`` for other backends."""
    return ConsultationRepository(db)


async def get_intake_service(
    store: ConsultationStore = Depends(get_consultation_store),
) -> IntakeService:
    return IntakeService(store)


async def get_workflow_service(
    store: ConsultationStore = Depends(get_consultation_store),
) -> StatusWorkflowService:
    return StatusWorkflowService(store)


async def get_query_service(
    store: ConsultationStore = Depends(get_consultation_store),
) -> ConsultationQueryService:
    return ConsultationQueryService(store)
