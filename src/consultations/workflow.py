"""Status workflow — operator status changes and notes."""

from __future__ import annotations

from typing import Any

import structlog

from src.errors import FieldError, NotFoundError, ValidationError
from src.repositories.base import ConsultationStore
from src.schemas.consultation import ConsultationRecord, ConsultationStatus

logger = structlog.get_logger()

NOTES_MAX_LENGTH = 5000


def parse_status(value: Any) -> ConsultationStatus:
    try:
        return ConsultationStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in ConsultationStatus)
        raise ValidationError(
            [FieldError("status", f"Must be one of: {allowed}", value)],
            message="Invalid status",
        ) from None


class StatusWorkflowService:
    """Mutates the status and notes of existing consultations."""

    def __init__(self, store: ConsultationStore):
        self.store = store

    async def set_status(self, consultation_id: int, status: Any) -> ConsultationRecord:
        """Set the status of a consultation.

        The dashboard walks records pending → confirmed → completed, but no
        order is enforced: any valid status may be set on any record,
        including moving backwards.

        Raises:
            ValidationError: status is not one of pending/confirmed/completed
            NotFoundError: no consultation with this id
        """
        new_status = parse_status(status)

        record = await self.store.update(consultation_id, {"status": new_status.value})
        if record is None:
            raise NotFoundError(f"Consultation {consultation_id} not found")

        logger.info(
            "consultation_status_updated",
            consultation_id=consultation_id,
            new_status=new_status.value,
        )
        return record

    async def set_notes(self, consultation_id: int, notes: Any) -> ConsultationRecord:
        """Replace the operator notes. An empty string clears them."""
        if notes is None:
            notes = ""
        if not isinstance(notes, str):
            raise ValidationError([FieldError("notes", "Notes must be a string")])
        if len(notes) > NOTES_MAX_LENGTH:
            raise ValidationError(
                [FieldError("notes", f"Notes must be at most {NOTES_MAX_LENGTH} characters")]
            )

        record = await self.store.update(consultation_id, {"notes": notes})
        if record is None:
            raise NotFoundError(f"Consultation {consultation_id} not found")

        logger.info(
            "consultation_notes_updated",
            consultation_id=consultation_id,
            notes_length=len(notes),
        )
        return record
