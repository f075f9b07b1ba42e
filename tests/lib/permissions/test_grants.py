from unittest.mock import Mock

import pytest

from dms.lib.dms_permissions import DMS_FILE_OBJECT, DMS_PERMISSION_OBJECT, META_FILE_OBJECT, create_permissions
from dms.lib.permissions.actions import Action
from dms.lib.permissions.grants import collect_permissions, held_permissions, object_matches
from dms.models.permission import Permission
from dms.models.user import User

from tests.helpers.constants import (
    CREATE_PERMISSION_NAME,
    FULL_PERMISSION_NAME,
    META_PERMISSION_NAME,
    PARENT_PERMISSION_NAME,
    PERM_FULL_PERMISSION_NAME,
    READ_PERMISSION_NAME,
    SELF_PERMISSION_NAME,
    WRITE_PERMISSION_NAME,
)


def names(permissions):
    return {permission.name for permission in permissions}


@pytest.fixture
def provisioned(session):
    permissions = create_permissions(session)
    session.commit()
    return permissions


@pytest.fixture
def grouped_user(provisioned):
    user = Mock(spec=User)
    user.permissions = [provisioned["read"], provisioned["self"]]
    user.group = Mock(permissions=[provisioned["write"], provisioned["self"], provisioned["create"]])
    return user


@pytest.mark.parametrize(
    "permission_object, object_name, matches",
    [
        (DMS_FILE_OBJECT, DMS_FILE_OBJECT, True),
        ("dms.models.*", DMS_FILE_OBJECT, True),
        ("dms.models.*", META_FILE_OBJECT, True),
        ("dms.*", DMS_PERMISSION_OBJECT, True),
        (META_FILE_OBJECT, DMS_FILE_OBJECT, False),
        ("dms.models.dms_file.*", META_FILE_OBJECT, False),
        ("dms.models.dms_file.DMS", DMS_FILE_OBJECT, False),
    ],
)
def test_object_matches(permission_object, object_name, matches):
    assert object_matches(permission_object, object_name) is matches


def test_held_permissions_include_group_permissions_once(grouped_user):
    held = held_permissions(grouped_user)

    assert [permission.name for permission in held] == [
        READ_PERMISSION_NAME,
        SELF_PERMISSION_NAME,
        WRITE_PERMISSION_NAME,
        CREATE_PERMISSION_NAME,
    ]


def test_held_permissions_without_group(provisioned):
    user = Mock(spec=User)
    user.permissions = [provisioned["full"]]
    user.group = None

    assert held_permissions(user) == [provisioned["full"]]


def test_collect_read_permissions_on_documents(grouped_user):
    granting = collect_permissions(grouped_user, DMS_FILE_OBJECT, Action.READ)

    assert names(granting) == {READ_PERMISSION_NAME, SELF_PERMISSION_NAME, WRITE_PERMISSION_NAME}


def test_collect_create_permissions_matches_package_wildcard(grouped_user):
    granting = collect_permissions(grouped_user, META_FILE_OBJECT, Action.CREATE)

    assert names(granting) == {CREATE_PERMISSION_NAME}


def test_collect_permissions_returns_conditions_untouched(grouped_user, provisioned):
    granting = collect_permissions(grouped_user, DMS_FILE_OBJECT, Action.REMOVE)

    by_name = {permission.name: permission for permission in granting}
    assert set(by_name) == {SELF_PERMISSION_NAME, WRITE_PERMISSION_NAME}
    assert by_name[SELF_PERMISSION_NAME].condition == "self.created_by = ?"
    assert by_name[WRITE_PERMISSION_NAME].condition == provisioned["write"].condition


def test_collect_permissions_for_full_bundle_holder(session, provisioned):
    user = User(username="bundle-holder", is_active=True)
    for key in ("full", "self", "create", "parent", "meta", "perm_full"):
        user.add_permission(provisioned[key])
    session.add(user)
    session.commit()

    assert names(collect_permissions(user, DMS_FILE_OBJECT, Action.CREATE)) == {
        FULL_PERMISSION_NAME,
        CREATE_PERMISSION_NAME,
    }
    assert names(collect_permissions(user, DMS_FILE_OBJECT, Action.READ)) == {
        FULL_PERMISSION_NAME,
        SELF_PERMISSION_NAME,
        PARENT_PERMISSION_NAME,
    }
    assert names(collect_permissions(user, META_FILE_OBJECT, Action.CREATE)) == {
        CREATE_PERMISSION_NAME,
        META_PERMISSION_NAME,
    }
    assert names(collect_permissions(user, DMS_PERMISSION_OBJECT, Action.WRITE)) == {PERM_FULL_PERMISSION_NAME}


def test_collect_permissions_without_matching_grant(provisioned):
    user = Mock(spec=User)
    user.permissions = [Permission(name="perm.other", object="other.Model", can_read=True)]
    user.group = None

    assert collect_permissions(user, DMS_FILE_OBJECT, Action.READ) == []
