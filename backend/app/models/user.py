"""
User model for locally synced identities.
"""

from sqlalchemy import Column, String, DateTime, Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship
import uuid
import enum

from app.db.base import Base, utcnow


class UserRole(str, enum.Enum):
    """User role enumeration."""
    ADMIN = "ADMIN"
    CLIENT = "CLIENT"


class User(Base):
    """Local user record, one per identity-provider subject."""

    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4, index=True)
    external_id = Column(String(255), nullable=False, unique=True, index=True)
    email = Column(String(255), nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    role = Column(SQLEnum(UserRole), nullable=False, default=UserRole.CLIENT)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    projects = relationship("Project", back_populates="client")
    invoices = relationship("Invoice", back_populates="client")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
