from sqlalchemy import (
    Column,
    Integer,
    String,
    DateTime,
    Index,
    func,
)
from sqlalchemy.dialects.postgresql import UUID
from datetime import datetime, timezone
from sqlalchemy.orm import declarative_base

from app.constants import ADDED_EMAIL_TABLE

Base = declarative_base()


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AddedEmail(Base):
    """Email address added to the system by an authenticated user."""

    __tablename__ = ADDED_EMAIL_TABLE

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(
        String, unique=True, nullable=False, comment="Unique email address"
    )  # natural business key
    first_name = Column(String, nullable=True, comment="Optional first name of contact")
    last_name = Column(String, nullable=True, comment="Optional last name of contact")
    created_by = Column(
        UUID(as_uuid=True), nullable=True, comment="UUID of user who added this email"
    )  # owning principal
    created_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        comment="Timestamp when email was added",
    )
    # Never caller-controlled, see app.policies.stamp_updated_at
    updated_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        comment="Timestamp of last modification",
    )

    __table_args__ = (
        Index("idx_added_email_email", email),
        Index("idx_added_email_created_at", created_at.desc()),
        Index("idx_added_email_created_by", created_by),
        {
            "comment": "Tracks email addresses added to the system for user management and analytics"
        },
    )

    def __repr__(self) -> str:
        return f"<AddedEmail id={self.id} email={self.email!r}>"


# Columns the database owns; caller-supplied values are discarded.
SYSTEM_MANAGED_FIELDS = frozenset({"id", "created_at", "updated_at"})
