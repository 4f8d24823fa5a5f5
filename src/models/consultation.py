"""Consultation model — contact-form messages and booking requests."""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.models.base import Base, IntIDMixin, TimestampMixin

CONTACT_FORM_PROJECT_TYPE = "Contact Form Message"


class Consultation(Base, IntIDMixin, TimestampMixin):
    __tablename__ = "consultations"

    # Submitter
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    address: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)

    # Request
    date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    project_type: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    requirements: Mapped[str] = mapped_column(Text, nullable=False)
    budget: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    preferred_contact_time: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    source: Mapped[str] = mapped_column(String(50), default="website")

    # Processing
    status: Mapped[str] = mapped_column(String(20), default="pending")  # pending|confirmed|completed
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
