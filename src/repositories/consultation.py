"""Consultation repository — SQLAlchemy-backed consultation store."""

from __future__ import annotations

from typing import Any, Optional

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from src.models.base import utcnow
from src.models.consultation import CONTACT_FORM_PROJECT_TYPE, Consultation
from src.repositories.base import translate_db_error
from src.schemas.consultation import ConsultationKind, ConsultationRecord

logger = structlog.get_logger()


class ConsultationRepository:
    """Reads and writes consultation rows.

    Every write commits immediately; a failed statement is rolled back and
    surfaced as PersistenceError.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def insert(self, values: dict[str, Any]) -> ConsultationRecord:
        consultation = Consultation(**values)
        self.db.add(consultation)
        try:
            await self.db.commit()
            await self.db.refresh(consultation)
        except (SQLAlchemyError, OSError) as exc:
            await self._rollback()
            raise translate_db_error(exc) from exc

        return ConsultationRecord.model_validate(consultation)

    async def select(
        self,
        kind: Optional[ConsultationKind] = None,
        status: Optional[str] = None,
    ) -> list[ConsultationRecord]:
        stmt = select(Consultation)

        if kind is ConsultationKind.CONTACT:
            stmt = stmt.where(Consultation.project_type == CONTACT_FORM_PROJECT_TYPE)
        elif kind is ConsultationKind.BOOKING:
            stmt = stmt.where(Consultation.project_type != CONTACT_FORM_PROJECT_TYPE)
        if status:
            stmt = stmt.where(Consultation.status == status)

        stmt = stmt.order_by(Consultation.created_at.desc(), Consultation.id.desc())
        try:
            result = await self.db.execute(stmt)
        except (SQLAlchemyError, OSError) as exc:
            raise translate_db_error(exc) from exc

        return [ConsultationRecord.model_validate(row) for row in result.scalars().all()]

    async def get(self, consultation_id: int) -> Optional[ConsultationRecord]:
        try:
            consultation = await self.db.get(Consultation, consultation_id)
        except (SQLAlchemyError, OSError) as exc:
            raise translate_db_error(exc) from exc

        if consultation is None:
            return None
        return ConsultationRecord.model_validate(consultation)

    async def update(
        self, consultation_id: int, values: dict[str, Any]
    ) -> Optional[ConsultationRecord]:
        """Update one row, returning the new state or None if it does not exist."""
        stmt = (
            update(Consultation)
            .where(Consultation.id == consultation_id)
            .values(**values, updated_at=utcnow())
            .returning(Consultation)
        )
        try:
            result = await self.db.execute(stmt)
            consultation = result.scalar_one_or_none()
            await self.db.commit()
        except (SQLAlchemyError, OSError) as exc:
            await self._rollback()
            raise translate_db_error(exc) from exc

        if consultation is None:
            return None
        return ConsultationRecord.model_validate(consultation)

    async def _rollback(self) -> None:
        try:
            await self.db.rollback()
        except SQLAlchemyError as exc:
            logger.warning("consultation_rollback_failed", error=str(exc))
