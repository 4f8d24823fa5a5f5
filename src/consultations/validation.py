"""Shared submission validation for the contact and booking entry points.

Rules run in a fixed order and every rule reports all offending fields
at once:

1. presence of the required fields for the submission kind;
2. length / format checks and date parsing (pydantic models in
   ``src.schemas.consultation``).

Nothing is persisted until a submission passes both steps.
"""

from __future__ import annotations

from typing import Any, Mapping, Union

from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_snake

from src.errors import FieldError, ValidationError
from src.schemas.consultation import BookingSubmission, ConsultationKind, ContactSubmission

Submission = Union[ContactSubmission, BookingSubmission]

REQUIRED_FIELDS: dict[ConsultationKind, tuple[str, ...]] = {
    ConsultationKind.CONTACT: ("name", "email", "phone", "message"),
    ConsultationKind.BOOKING: ("name", "email", "phone", "date", "projectType", "requirements"),
}

SUBMISSION_MODELS: dict[ConsultationKind, type[Submission]] = {
    ConsultationKind.CONTACT: ContactSubmission,
    ConsultationKind.BOOKING: BookingSubmission,
}

# Fields whose rejected input is echoed back for diagnostics.
ECHOED_FIELDS = {"date"}


def parse_kind(value: Any) -> ConsultationKind:
    """Parse a classification value, rejecting unknown ones."""
    try:
        return ConsultationKind(value)
    except ValueError:
        allowed = ", ".join(k.value for k in ConsultationKind)
        raise ValidationError(
            [FieldError("kind", f"Must be one of: {allowed}", value)],
        ) from None


def _is_missing(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _lookup(payload: Mapping[str, Any], field: str) -> Any:
    if field in payload:
        return payload[field]
    return payload.get(to_snake(field))


def missing_fields(kind: ConsultationKind, payload: Mapping[str, Any]) -> list[str]:
    return [f for f in REQUIRED_FIELDS[kind] if _is_missing(_lookup(payload, f))]


def _to_field_errors(exc: PydanticValidationError) -> list[FieldError]:
    errors: list[FieldError] = []
    seen: set[str] = set()
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "body"
        if field in seen:
            continue
        seen.add(field)

        message = err["msg"].removeprefix("Value error, ")
        value = None
        if field in ECHOED_FIELDS:
            message = "Please provide a valid date"
            value = err.get("input")
        errors.append(FieldError(field, message, value))
    return errors


def validate_submission(kind: Union[ConsultationKind, str], payload: Any) -> Submission:
    """Check and normalize an untyped submission payload.

    Args:
        kind: "contact" or "booking"
        payload: Decoded JSON body from the caller

    Returns:
        ContactSubmission or BookingSubmission

    Raises:
        ValidationError: listing every missing or invalid field
    """
    kind = parse_kind(kind)

    if not isinstance(payload, Mapping):
        raise ValidationError(
            [FieldError("body", "Expected a JSON object")],
            message="Invalid request body",
        )

    missing = missing_fields(kind, payload)
    if missing:
        raise ValidationError(
            [FieldError(name, "This field is required") for name in missing],
            message="Missing required fields",
        )

    model = SUBMISSION_MODELS[kind]
    try:
        return model.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise ValidationError(
            _to_field_errors(exc),
            message="Please correct the invalid fields",
        ) from exc
