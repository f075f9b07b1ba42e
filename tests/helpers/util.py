from typing import Any, Optional

from fastapi import HTTPException
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from dms.lib.authentication import get_current_user
from dms.lib.authorization import require_current_user
from dms.lib.dms_permissions import TIER_POLICIES, provision_permission
from dms.lib.types.authentication import UserData
from dms.models.dms_file import DMSFile
from dms.models.dms_permission import DMSPermission
from dms.models.enums.permission_value import PermissionValue
from dms.models.group import Group
from dms.models.user import User

from tests.helpers.constants import TEST_DMS_FILE


def fetch_user(db: Session, username: str) -> User:
    return db.query(User).filter(User.username == username).one()


def fetch_group(db: Session, code: str) -> Group:
    return db.query(Group).filter(Group.code == code).one()


def acting_as(db: Session, username: Optional[str]) -> dict:
    """
    Dependency overrides authenticating requests as *username*, or as an anonymous user when it is ``None``.
    """

    def override_current_user():
        if username is None:
            return None

        user = fetch_user(db, username)
        return UserData(user, user.roles)

    def override_require_user():
        if username is None:
            raise HTTPException(status_code=401, detail="Could not validate credentials")

        user = fetch_user(db, username)
        return UserData(user, user.roles)

    return {get_current_user: override_current_user, require_current_user: override_require_user}


def create_dms_file(client: TestClient, update: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    file_payload = {"fileName": TEST_DMS_FILE["file_name"], "isDirectory": TEST_DMS_FILE["is_directory"]}
    if update is not None:
        file_payload.update(update)

    response = client.post("/api/v1/dms-files/", json=file_payload)
    assert response.status_code == 200, f"Could not create document: {response.text}"
    return response.json()


def create_dms_permission(client: TestClient, file_id: int, update: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    permission_payload = {"fileId": file_id, "value": "FULL"}
    if update is not None:
        permission_payload.update(update)

    response = client.post("/api/v1/dms-permissions/", json=permission_payload)
    assert response.status_code == 200, f"Could not create sharing record: {response.text}"
    return response.json()


def change_file_ownership(db: Session, file_id: int, username: str) -> None:
    item = db.query(DMSFile).filter(DMSFile.id == file_id).one()
    owner = fetch_user(db, username)
    item.created_by_id = owner.id
    item.modified_by_id = owner.id
    db.add(item)
    db.commit()


def share_file(
    db: Session, file_id: int, value: Optional[str], username: Optional[str] = None, code: Optional[str] = None
) -> int:
    """
    Insert a sharing record directly, without granting permissions to its holders, and return its ID.

    The record references the tier permission of *value*, as a saved record would.
    """
    tier = PermissionValue.parse(value)
    record = DMSPermission(
        file_id=file_id,
        user_id=fetch_user(db, username).id if username else None,
        group_id=fetch_group(db, code).id if code else None,
        value=value,
        permission=provision_permission(db, TIER_POLICIES[tier]) if tier is not None else None,
    )
    db.add(record)
    db.commit()
    return record.id
