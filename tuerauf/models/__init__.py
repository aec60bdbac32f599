"""SQLAlchemy ORM models."""

from tuerauf.models.base import Base
from tuerauf.models.user import User

__all__ = ["Base", "User"]
