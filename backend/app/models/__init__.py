"""
Database models.
Import all models here to ensure they're registered with Base.
"""

from app.models.user import User, UserRole
from app.models.project import Project, ProjectStatus
from app.models.milestone import Milestone
from app.models.deliverable import Deliverable
from app.models.invoice import Invoice, InvoiceStatus

__all__ = [
    "User",
    "UserRole",
    "Project",
    "ProjectStatus",
    "Milestone",
    "Deliverable",
    "Invoice",
    "InvoiceStatus",
]
