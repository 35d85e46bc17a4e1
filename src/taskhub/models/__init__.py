"""Model exports.

Import from here: `from src.taskhub.models import User, Task`
"""

from src.taskhub.models.audit import AuditAction, AuditLog, AuditOutcome
from src.taskhub.models.enums import (
    InvitationStatus,
    OrganizationRole,
    TaskCategory,
    TaskPriority,
    TaskStatus,
)
from src.taskhub.models.invitation import Invitation
from src.taskhub.models.organization import Membership, Organization
from src.taskhub.models.task import Task
from src.taskhub.models.user import User

__all__ = [
    # Enums
    "AuditAction",
    "AuditOutcome",
    "InvitationStatus",
    "OrganizationRole",
    "TaskCategory",
    "TaskPriority",
    "TaskStatus",
    # Models
    "AuditLog",
    "Invitation",
    "Membership",
    "Organization",
    "Task",
    "User",
]
