"""Issue and remark model definitions."""

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from backend.database import Base
from backend.models.clock import utcnow
from backend.models.user import User, new_id

CATEGORIES = ("Electrical", "Water", "Internet", "Infrastructure")

STATUS_OPEN = "Open"
STATUS_IN_PROGRESS = "In Progress"
STATUS_RESOLVED = "Resolved"
STATUSES = (STATUS_OPEN, STATUS_IN_PROGRESS, STATUS_RESOLVED)


class Issue(Base):
    """A reported facility problem owned by the student who filed it."""
    __tablename__ = "issues"

    id = Column(String(32), primary_key=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False)
    status = Column(String, nullable=False, default=STATUS_OPEN)
    image_url = Column(String, nullable=True)
    created_by = Column(String(32), ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    creator = relationship(User, lazy="joined")
    remarks = relationship(
        "Remark",
        order_by="Remark.id",
        lazy="selectin",
        cascade="all",
    )


class Remark(Base):
    """Admin note on an issue. Rows are only ever inserted."""
    __tablename__ = "issue_remarks"

    id = Column(Integer, primary_key=True, autoincrement=True)
    issue_id = Column(String(32), ForeignKey("issues.id"), nullable=False, index=True)
    text = Column(Text, nullable=False)
    added_by = Column(String(32), ForeignKey("users.id"), nullable=False)
    added_at = Column(DateTime, nullable=False, default=utcnow)

    author = relationship(User, lazy="joined")
