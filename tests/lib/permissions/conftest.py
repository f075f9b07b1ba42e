"""Shared fixtures and helpers for permissions tests."""

from typing import Optional
from unittest.mock import Mock

import pytest

from dms.lib.dms_permissions import TIER_POLICIES
from dms.models.dms_file import DMSFile
from dms.models.dms_permission import DMSPermission
from dms.models.enums.permission_value import PermissionValue
from dms.models.enums.user_role import UserRole
from dms.models.permission import Permission

OWNER_ID = 2
GROUP_ID = 10


class EntityTestHelper:
    """Helper class to create test entities and user data with consistent properties."""

    @staticmethod
    def create_user_data(user_type: str):
        """Create UserData mock for different user types.

        Args:
            user_type: "admin", "owner", "member", "other_user" or "anonymous". Members belong to group GROUP_ID.

        Returns:
            Mock UserData object or None for anonymous users
        """
        user_configs = {
            "admin": (1, None, [UserRole.admin]),
            "owner": (OWNER_ID, None, []),
            "member": (3, GROUP_ID, []),
            "other_user": (4, None, []),
        }

        if user_type == "anonymous":
            return None

        if user_type not in user_configs:
            raise ValueError(f"Unknown user type: {user_type}")

        user_id, group_id, roles = user_configs[user_type]
        return Mock(user=Mock(id=user_id, group_id=group_id), active_roles=roles)

    @staticmethod
    def create_tier_permission(value: Optional[str]):
        """Create a Permission mock carrying the grant flags of the tier *value*, or None for no tier."""
        tier = PermissionValue.parse(value)
        if tier is None:
            return None

        policy = TIER_POLICIES[tier]
        permission = Mock(spec=Permission)
        permission.name = policy.name
        permission.can_create = policy.can_create
        permission.can_read = policy.can_read
        permission.can_write = policy.can_write
        permission.can_remove = policy.can_remove
        return permission

    @staticmethod
    def create_sharing_record(
        value: Optional[str], user_id: Optional[int] = None, group_id: Optional[int] = None, created_by_id: int = OWNER_ID
    ):
        """Create a DMSPermission mock sharing a document with a user and/or group."""
        record = Mock(spec=DMSPermission)
        record.id = 7
        record.user_id = user_id
        record.group_id = group_id
        record.value = value
        record.permission = EntityTestHelper.create_tier_permission(value)
        record.created_by_id = created_by_id
        return record

    @staticmethod
    def create_dms_file(sharing_records: Optional[list] = None, parent=None, owner_id: int = OWNER_ID):
        """Create a DMSFile mock owned by *owner_id*."""
        dms_file = Mock(spec=DMSFile)
        dms_file.id = 5
        dms_file.created_by_id = owner_id
        dms_file.permissions = sharing_records or []
        dms_file.parent = parent
        return dms_file


@pytest.fixture
def entity_helper():
    """Fixture providing the EntityTestHelper class."""
    return EntityTestHelper
