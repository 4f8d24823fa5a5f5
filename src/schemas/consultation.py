"""Consultation schemas — submissions (tagged by kind) and stored records."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, computed_field, field_validator
from pydantic.alias_generators import to_camel

from src.models.consultation import CONTACT_FORM_PROJECT_TYPE

EMAIL_MAX_LENGTH = 100


class ConsultationKind(str, Enum):
    """Classification of a consultation: contact message or real booking."""

    CONTACT = "contact"
    BOOKING = "booking"


class ConsultationStatus(str, Enum):
    """Lifecycle: pending → confirmed → completed."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"


class ConsultationSource(str, Enum):
    WEBSITE = "website"
    CONTACT_FORM = "contact_form"


def classify(project_type: Optional[str]) -> ConsultationKind:
    if project_type == CONTACT_FORM_PROJECT_TYPE:
        return ConsultationKind.CONTACT
    return ConsultationKind.BOOKING


class _Submission(BaseModel):
    """Fields shared by both submission variants."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    name: str = Field(min_length=2, max_length=100)
    email: EmailStr
    phone: str = Field(min_length=10, max_length=20)
    address: Optional[str] = Field(None, max_length=200)

    @field_validator("email")
    @classmethod
    def _email_length(cls, value: str) -> str:
        if len(value) > EMAIL_MAX_LENGTH:
            raise ValueError(f"Email must be at most {EMAIL_MAX_LENGTH} characters")
        return value

    @field_validator("address", mode="before")
    @classmethod
    def _blank_address_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ContactSubmission(_Submission):
    """Contact-form message. The message doubles as the requirements text."""

    kind: ClassVar[ConsultationKind] = ConsultationKind.CONTACT
    message: str = Field(min_length=10, max_length=1000)


class BookingSubmission(_Submission):
    """Booking request from the consultation form."""

    kind: ClassVar[ConsultationKind] = ConsultationKind.BOOKING
    date: datetime
    project_type: str = Field(min_length=1, max_length=200)
    requirements: str = Field(min_length=10, max_length=1000)
    budget: Optional[str] = None
    preferred_contact_time: Optional[str] = None

    @field_validator("budget", "preferred_contact_time", mode="before")
    @classmethod
    def _blank_is_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("date")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    @field_validator("project_type")
    @classmethod
    def _not_reserved(cls, value: str) -> str:
        if value == CONTACT_FORM_PROJECT_TYPE:
            raise ValueError(f"'{CONTACT_FORM_PROJECT_TYPE}' is reserved for contact messages")
        return value


class ConsultationRecord(BaseModel):
    """A stored consultation as returned to callers."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

    id: int
    name: str
    email: str
    phone: str
    date: datetime
    project_type: str
    requirements: str
    status: str
    address: Optional[str] = None
    budget: Optional[str] = None
    preferred_contact_time: Optional[str] = None
    source: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def kind(self) -> ConsultationKind:
        return classify(self.project_type)

    def to_response(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
