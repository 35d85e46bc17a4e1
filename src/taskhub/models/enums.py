"""Shared enums for models."""

from enum import Enum


class OrganizationRole(str, Enum):
    """Role held by a user inside one organization."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    VIEWER = "VIEWER"


class TaskStatus(str, Enum):
    TODO = "TODO"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class TaskPriority(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    URGENT = "URGENT"


class TaskCategory(str, Enum):
    GENERAL = "GENERAL"
    WORK = "WORK"
    PERSONAL = "PERSONAL"
    URGENT = "URGENT"


class InvitationStatus(str, Enum):
    """Invitation lifecycle status."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    EXPIRED = "EXPIRED"
    REVOKED = "REVOKED"
