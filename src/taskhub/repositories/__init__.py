"""Repository layer - data access abstraction."""

from src.taskhub.repositories.audit import AuditLogRepository
from src.taskhub.repositories.base import BaseRepository
from src.taskhub.repositories.invitation import InvitationRepository
from src.taskhub.repositories.membership import MembershipRepository
from src.taskhub.repositories.organization import OrganizationRepository
from src.taskhub.repositories.task import TaskRepository
from src.taskhub.repositories.user import UserRepository

__all__ = [
    "AuditLogRepository",
    "BaseRepository",
    "InvitationRepository",
    "MembershipRepository",
    "OrganizationRepository",
    "TaskRepository",
    "UserRepository",
]
