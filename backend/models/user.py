"""User model definitions."""

import uuid

from sqlalchemy import Column, DateTime, String

from backend.database import Base
from backend.models.clock import utcnow

ROLE_STUDENT = "student"
ROLE_ADMIN = "admin"
ROLES = (ROLE_STUDENT, ROLE_ADMIN)


def new_id() -> str:
    return uuid.uuid4().hex


class User(Base):
    """Represents an application user."""
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    role = Column(String, nullable=False, default=ROLE_STUDENT)  # student/admin
    created_at = Column(DateTime, nullable=False, default=utcnow)
