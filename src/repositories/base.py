"""Store protocol and database error translation shared by repositories."""

from __future__ import annotations

from typing import Any, Optional, Protocol

from sqlalchemy.exc import (
    DataError,
    DisconnectionError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    ProgrammingError,
)

from src.errors import PersistenceError
from src.schemas.consultation import ConsultationKind, ConsultationRecord

CONNECTION_MESSAGE = "Unable to connect to the database. Please try again later."
DATA_FORMAT_MESSAGE = "There was a data format issue. Our team has been notified."
CONFLICT_MESSAGE = "The request conflicts with existing data."


class ConsultationStore(Protocol):
    """Persistence surface the consultation services depend on."""

    async def insert(self, values: dict[str, Any]) -> ConsultationRecord: ...

    async def select(
        self,
        kind: Optional[ConsultationKind] = None,
        status: Optional[str] = None,
    ) -> list[ConsultationRecord]: ...

    async def get(self, consultation_id: int) -> Optional[ConsultationRecord]: ...

    async def update(
        self, consultation_id: int, values: dict[str, Any]
    ) -> Optional[ConsultationRecord]: ...


def translate_db_error(exc: BaseException) -> PersistenceError:
    """Map a driver/ORM failure onto a PersistenceError with a safe message."""
    if isinstance(exc, (OperationalError, InterfaceError, DisconnectionError, OSError)):
        message = CONNECTION_MESSAGE
    elif isinstance(exc, (ProgrammingError, DataError)):
        message = DATA_FORMAT_MESSAGE
    elif isinstance(exc, IntegrityError):
        message = CONFLICT_MESSAGE
    else:
        message = None
    return PersistenceError(message, details=str(exc))
