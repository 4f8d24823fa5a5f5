"""Intake service — validates and stores new consultations."""

from __future__ import annotations

from typing import Any, Union

import structlog

from src.consultations.validation import validate_submission
from src.models.base import utcnow
from src.models.consultation import CONTACT_FORM_PROJECT_TYPE
from src.repositories.base import ConsultationStore
from src.schemas.consultation import (
    BookingSubmission,
    ConsultationKind,
    ConsultationRecord,
    ConsultationSource,
    ConsultationStatus,
    ContactSubmission,
)

logger = structlog.get_logger()


def contact_values(submission: ContactSubmission) -> dict[str, Any]:
    """Row values for a contact-form message."""
    return {
        "name": submission.name,
        "email": submission.email,
        "phone": submission.phone,
        "address": submission.address,
        "date": utcnow(),
        "project_type": CONTACT_FORM_PROJECT_TYPE,
        "requirements": submission.message,
        "budget": None,
        "preferred_contact_time": None,
        "source": ConsultationSource.CONTACT_FORM.value,
        "status": ConsultationStatus.PENDING.value,
    }


def booking_values(submission: BookingSubmission) -> dict[str, Any]:
    """Row values for a booking request."""
    return {
        "name": submission.name,
        "email": submission.email,
        "phone": submission.phone,
        "address": submission.address,
        "date": submission.date,
        "project_type": submission.project_type,
        "requirements": submission.requirements,
        "budget": submission.budget,
        "preferred_contact_time": submission.preferred_contact_time,
        "source": ConsultationSource.WEBSITE.value,
        "status": ConsultationStatus.PENDING.value,
    }


class IntakeService:
    """Accepts contact messages and bookings.

    One call appends at most one row. A failed insert is not retried; the
    PersistenceError reaches the caller, who has to resubmit.
    """

    def __init__(self, store: ConsultationStore):
        self.store = store

    async def submit(
        self, kind: Union[ConsultationKind, str], payload: Any
    ) -> ConsultationRecord:
        """Validate a submission and persist it with status "pending".

        Args:
            kind: "contact" or "booking"
            payload: Untyped submission body

        Returns:
            The stored consultation

        Raises:
            ValidationError: the payload was rejected, nothing was written
            PersistenceError: the store failed to save a valid payload
        """
        submission = validate_submission(kind, payload)

        if isinstance(submission, ContactSubmission):
            values = contact_values(submission)
        else:
            values = booking_values(submission)

        record = await self.store.insert(values)

        logger.info(
            "consultation_created",
            consultation_id=record.id,
            kind=submission.kind.value,
            source=record.source,
        )
        return record
