"""In-memory consultation store, for local development without PostgreSQL."""

from __future__ import annotations

from typing import Any, Optional

from src.models.base import utcnow
from src.models.consultation import CONTACT_FORM_PROJECT_TYPE
from src.schemas.consultation import ConsultationKind, ConsultationRecord


class InMemoryConsultationStore:
    """Keeps consultations in a dict keyed by id. Not shared between processes."""

    def __init__(self) -> None:
        self._rows: dict[int, ConsultationRecord] = {}
        self._next_id = 1

    async def insert(self, values: dict[str, Any]) -> ConsultationRecord:
        now = utcnow()
        record = ConsultationRecord(
            **{"status": "pending", "source": "website", **values},
            id=self._next_id,
            created_at=now,
            updated_at=now,
        )
        self._rows[record.id] = record
        self._next_id += 1
        return record.model_copy()

    async def select(
        self,
        kind: Optional[ConsultationKind] = None,
        status: Optional[str] = None,
    ) -> list[ConsultationRecord]:
        rows = list(self._rows.values())
        if kind is ConsultationKind.CONTACT:
            rows = [r for r in rows if r.project_type == CONTACT_FORM_PROJECT_TYPE]
        elif kind is ConsultationKind.BOOKING:
            rows = [r for r in rows if r.project_type != CONTACT_FORM_PROJECT_TYPE]
        if status:
            rows = [r for r in rows if r.status == status]

        rows.sort(key=lambda r: (r.created_at, r.id), reverse=True)
        return [r.model_copy() for r in rows]

    async def get(self, consultation_id: int) -> Optional[ConsultationRecord]:
        record = self._rows.get(consultation_id)
        return record.model_copy() if record else None

    async def update(
        self, consultation_id: int, values: dict[str, Any]
    ) -> Optional[ConsultationRecord]:
        record = self._rows.get(consultation_id)
        if record is None:
            return None
        updated = record.model_copy(update={**values, "updated_at": utcnow()})
        self._rows[consultation_id] = updated
        return updated.model_copy()

    def __len__(self) -> int:
        return len(self._rows)
