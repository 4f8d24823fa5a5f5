"""Consultations API — public intake and the admin dashboard endpoints."""

from typing import Any, Optional

import structlog
from fastapi import APIRouter, Body, Depends, Query

from src.admin.dependencies import require_admin
from src.consultations.dependencies import (
    get_intake_service,
    get_query_service,
    get_workflow_service,
)
from src.consultations.intake import IntakeService
from src.consultations.query import ConsultationQueryService
from src.consultations.workflow import StatusWorkflowService
from src.errors import FieldError, ValidationError
from src.schemas.consultation import ConsultationKind

logger = structlog.get_logger()

router = APIRouter(prefix="/api", tags=["consultations"])


def _body_field(payload: Any, name: str) -> Any:
    if not isinstance(payload, dict):
        raise ValidationError(
            [FieldError("body", "Expected a JSON object")],
            message="Invalid request body",
        )
    if name not in payload:
        raise ValidationError(
            [FieldError(name, "This field is required")],
            message="Missing required fields",
        )
    return payload[name]


@router.post("/contact", status_code=201)
async def submit_contact(
    payload: Any = Body(None),
    intake: IntakeService = Depends(get_intake_service),
) -> dict:
    """Contact-form message from the website."""
    record = await intake.submit(ConsultationKind.CONTACT, payload)
    return {
        "success": True,
        "message": "Message sent successfully",
        "consultation": record.to_response(),
    }


@router.post("/consultations", status_code=201)
async def submit_booking(
    payload: Any = Body(None),
    intake: IntakeService = Depends(get_intake_service),
) -> dict:
    """Booking request from the consultation form."""
    record = await intake.submit(ConsultationKind.BOOKING, payload)
    return {"success": True, "consultation": record.to_response()}


@router.get("/consultations", dependencies=[Depends(require_admin)])
async def list_consultations(
    kind: Optional[str] = Query(None, description="contact or booking"),
    status: Optional[str] = Query(None, description="pending, confirmed or completed"),
    query: ConsultationQueryService = Depends(get_query_service),
) -> dict:
    """List consultations for the dashboard, newest first.

    Returns:
        {"consultations": [...], "total": int}
    """
    records = await query.list(kind=kind, status=status)
    return {
        "consultations": [r.to_response() for r in records],
        "total": len(records),
    }


@router.get("/consultations/{consultation_id}", dependencies=[Depends(require_admin)])
async def get_consultation(
    consultation_id: int,
    query: ConsultationQueryService = Depends(get_query_service),
) -> dict:
    record = await query.get(consultation_id)
    return record.to_response()


@router.patch("/consultations/{consultation_id}/status", dependencies=[Depends(require_admin)])
async def update_consultation_status(
    consultation_id: int,
    payload: Any = Body(None),
    workflow: StatusWorkflowService = Depends(get_workflow_service),
) -> dict:
    status = _body_field(payload, "status")
    record = await workflow.set_status(consultation_id, status)
    return record.to_response()


@router.patch("/consultations/{consultation_id}/notes", dependencies=[Depends(require_admin)])
async def update_consultation_notes(
    consultation_id: int,
    payload: Any = Body(None),
    workflow: StatusWorkflowService = Depends(get_workflow_service),
) -> dict:
    notes = _body_field(payload, "notes")
    record = await workflow.set_notes(consultation_id, notes)
    return record.to_response()
