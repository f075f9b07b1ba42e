"""Tests for document sharing record permissions module."""

import pytest

from dms.lib.permissions.actions import Action
from dms.lib.permissions.dms_permission import has_permission, holds_full_share

ALL_ACTIONS = [Action.CREATE, Action.READ, Action.WRITE, Action.REMOVE]
MANAGING_ACTIONS = [Action.CREATE, Action.WRITE, Action.REMOVE]


def sharing_record_on(entity_helper, file_records, value="READ", user_id=99, group_id=None, created_by_id=2):
    record = entity_helper.create_sharing_record(value, user_id=user_id, group_id=group_id, created_by_id=created_by_id)
    record.file = entity_helper.create_dms_file(file_records)
    return record


@pytest.mark.parametrize("action", ALL_ACTIONS)
def test_creator_may_manage_sharing_record(entity_helper, action):
    record = sharing_record_on(entity_helper, [], created_by_id=4)

    assert has_permission(entity_helper.create_user_data("other_user"), record, action).permitted


@pytest.mark.parametrize("action", ALL_ACTIONS)
def test_admin_may_manage_sharing_record(entity_helper, action):
    record = sharing_record_on(entity_helper, [])

    assert has_permission(entity_helper.create_user_data("admin"), record, action).permitted


@pytest.mark.parametrize("action", ALL_ACTIONS)
def test_user_shared_with_at_full_tier_may_manage_sharing_record(entity_helper, action):
    record = sharing_record_on(entity_helper, [], value="FULL", user_id=4)

    assert has_permission(entity_helper.create_user_data("other_user"), record, action).permitted


@pytest.mark.parametrize("action", ALL_ACTIONS)
def test_group_shared_with_at_full_tier_may_manage_sharing_record(entity_helper, action):
    record = sharing_record_on(entity_helper, [], value="FULL", user_id=None, group_id=10)

    assert has_permission(entity_helper.create_user_data("member"), record, action).permitted


@pytest.mark.parametrize("action", MANAGING_ACTIONS)
@pytest.mark.parametrize("value", ["WRITE", "READ", None])
def test_user_shared_with_below_full_tier_may_not_manage_sharing_record(entity_helper, action, value):
    record = sharing_record_on(entity_helper, [], value=value, user_id=4)
    record.file.permissions = [record]

    result = has_permission(entity_helper.create_user_data("other_user"), record, action)

    assert not result.permitted


@pytest.mark.parametrize("action", MANAGING_ACTIONS)
def test_full_access_holder_may_not_manage_sharing_record_of_others(entity_helper, action):
    record = sharing_record_on(entity_helper, [entity_helper.create_sharing_record("FULL", user_id=4)])

    result = has_permission(entity_helper.create_user_data("other_user"), record, action)

    assert not result.permitted
    assert result.http_code == 403


@pytest.mark.parametrize("action", MANAGING_ACTIONS)
def test_document_owner_may_not_manage_sharing_record_of_others(entity_helper, action):
    record = sharing_record_on(entity_helper, [], created_by_id=4)

    result = has_permission(entity_helper.create_user_data("owner"), record, action)

    assert not result.permitted
    assert result.http_code == 403


def test_document_owner_may_read_sharing_record(entity_helper):
    record = sharing_record_on(entity_helper, [], created_by_id=4)

    assert has_permission(entity_helper.create_user_data("owner"), record, Action.READ).permitted


def test_read_access_holder_may_read_sharing_record(entity_helper):
    record = sharing_record_on(entity_helper, [entity_helper.create_sharing_record("READ", user_id=4)])

    assert has_permission(entity_helper.create_user_data("other_user"), record, Action.READ).permitted


def test_sharing_record_of_hidden_document_is_hidden(entity_helper):
    record = sharing_record_on(entity_helper, [])

    result = has_permission(entity_helper.create_user_data("other_user"), record, Action.READ)

    assert not result.permitted
    assert result.http_code == 404
    assert "sharing record" in result.message


def test_anonymous_user_must_authenticate(entity_helper):
    record = sharing_record_on(entity_helper, [])

    result = has_permission(None, record, Action.READ)

    assert not result.permitted
    assert result.http_code == 401


def test_full_share_ignores_unrelated_group(entity_helper):
    record = sharing_record_on(entity_helper, [], value="FULL", user_id=None, group_id=11)

    assert not holds_full_share(entity_helper.create_user_data("member"), record)


def test_full_share_ignores_missing_group(entity_helper):
    record = sharing_record_on(entity_helper, [], value="FULL", user_id=None, group_id=None)

    assert not holds_full_share(entity_helper.create_user_data("other_user"), record)
