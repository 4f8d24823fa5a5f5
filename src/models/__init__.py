"""SQLAlchemy ORM models."""

from src.models.base import Base
from src.models.consultation import Consultation
from src.models.user import User

__all__ = [
    "Base",
    "Consultation",
    "User",
]
