"""Read side for the admin dashboard."""

from __future__ import annotations

from typing import Any, Optional

from src.consultations.validation import parse_kind
from src.consultations.workflow import parse_status
from src.errors import NotFoundError
from src.repositories.base import ConsultationStore
from src.schemas.consultation import ConsultationRecord


class ConsultationQueryService:
    def __init__(self, store: ConsultationStore):
        self.store = store

    async def list(
        self,
        kind: Optional[Any] = None,
        status: Optional[Any] = None,
    ) -> list[ConsultationRecord]:
        """All consultations, newest first, optionally filtered.

        ``kind`` partitions records into contact messages and bookings;
        unknown values raise ValidationError.
        """
        parsed_kind = parse_kind(kind) if kind else None
        parsed_status = parse_status(status).value if status else None
        return await self.store.select(kind=parsed_kind, status=parsed_status)

    async def get(self, consultation_id: int) -> ConsultationRecord:
        record = await self.store.get(consultation_id)
        if record is None:
            raise NotFoundError(f"Consultation {consultation_id} not found")
        return record
