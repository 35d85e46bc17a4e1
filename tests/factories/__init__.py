"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, OrganizationFactory, ...
"""

from tests.factories.base import BaseFactory
from tests.factories.organization import MembershipFactory, OrganizationFactory
from tests.factories.task import InvitationFactory, TaskFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    # Base
    "BaseFactory",
    # Organization
    "MembershipFactory",
    "OrganizationFactory",
    # Task
    "InvitationFactory",
    "TaskFactory",
    # User
    "DEFAULT_TEST_PASSWORD",
    "UserFactory",
]
