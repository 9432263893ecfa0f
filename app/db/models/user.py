"""User database model."""
from datetime import datetime, timezone
import uuid

from sqlalchemy import Column, DateTime, String
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from app.db.base import Base


class User(Base):
    """Represents an account taking typing tests."""

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), unique=True, nullable=False, index=True)
    username = Column(String(20), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    first_name = Column(String(30), nullable=False)
    last_name = Column(String(30), nullable=False)

    last_login = Column(DateTime(timezone=True))
    date_of_joining = Column(DateTime(timezone=True), server_default=func.now())

    def mark_login(self, moment: datetime | None = None) -> None:
        """Record a successful sign-in."""

        self.last_login = moment or datetime.now(timezone.utc)
