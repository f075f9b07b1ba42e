"""
Provisioning of the document management permissions and propagation of sharing records.

Every permission is keyed by name and shared by all users and groups holding it. Provisioning is an upsert: the row
is created on first use and its predicate, parameters and grant flags are reset to the policy below each time it is
resolved. None of the functions here commit; callers own the transaction so that a provisioning run or a sharing
save is applied atomically.
"""

import logging
from dataclasses import dataclass
from typing import Optional, TypeVar

from sqlalchemy.orm import Session

from dms.db.base import Base
from dms.lib.exceptions import InvalidPermissionError
from dms.lib.logging.context import logging_context, save_to_logging_context
from dms.models.dms_file import DMSFile
from dms.models.dms_permission import DMSPermission
from dms.models.enums.permission_value import PermissionValue
from dms.models.group import Group
from dms.models.meta_file import MetaFile
from dms.models.permission import Permission
from dms.models.user import User

logger = logging.getLogger(__name__)


def qualified_name(model: type) -> str:
    """Fully qualified name of a model class, as stored on ``Permission.object``."""
    return f"{model.__module__}.{model.__name__}"


DMS_FILE_OBJECT = qualified_name(DMSFile)
DMS_PERMISSION_OBJECT = qualified_name(DMSPermission)
DMS_MODELS_OBJECT = f"{DMSFile.__module__.rsplit('.', 1)[0]}.*"
META_FILE_OBJECT = qualified_name(MetaFile)

ACCESS_CONDITION_PARAMS = "__user__, __user__.group"


def _file_access_condition(subject: str, flag: str) -> str:
    return (
        f"{subject} = ANY(SELECT x.id FROM DMSFile x "
        "LEFT JOIN x.permissions x_permissions "
        "LEFT JOIN x_permissions.user x_permissions_user "
        "LEFT JOIN x_permissions.group x_permissions_group "
        "LEFT JOIN x_permissions.permission x_permissions_permission "
        "WHERE (x_permissions_user = ? OR x_permissions_group = ?) "
        f"AND x_permissions_permission.{flag} = true)"
    )


@dataclass(frozen=True)
class PermissionPolicy:
    name: str
    can_create: bool
    can_read: bool
    can_write: bool
    can_remove: bool
    condition: Optional[str] = None
    condition_params: Optional[str] = None
    object_name: str = DMS_FILE_OBJECT


FULL = PermissionPolicy(
    "perm.dms.file.__full__",
    can_create=True,
    can_read=True,
    can_write=True,
    can_remove=True,
    condition=_file_access_condition("self.id", "can_create"),
    condition_params=ACCESS_CONDITION_PARAMS,
)
WRITE = PermissionPolicy(
    "perm.dms.file.__write__",
    can_create=False,
    can_read=True,
    can_write=True,
    can_remove=True,
    condition=_file_access_condition("self.id", "can_write"),
    condition_params=ACCESS_CONDITION_PARAMS,
)
READ = PermissionPolicy(
    "perm.dms.file.__read__",
    can_create=False,
    can_read=True,
    can_write=False,
    can_remove=False,
    condition=_file_access_condition("self.id", "can_read"),
    condition_params=ACCESS_CONDITION_PARAMS,
)
PARENT = PermissionPolicy(
    "perm.dms.file.__parent__",
    can_create=False,
    can_read=True,
    can_write=False,
    can_remove=False,
    condition=_file_access_condition("self.parent", "can_read"),
    condition_params=ACCESS_CONDITION_PARAMS,
)
SELF = PermissionPolicy(
    "perm.dms.file.__self__",
    can_create=False,
    can_read=True,
    can_write=True,
    can_remove=True,
    condition="self.created_by = ?",
    condition_params="__user__",
)
CREATE = PermissionPolicy(
    "perm.dms.__create__",
    can_create=True,
    can_read=False,
    can_write=False,
    can_remove=False,
    object_name=DMS_MODELS_OBJECT,
)
META = PermissionPolicy(
    "perm.meta.file.__create__",
    can_create=True,
    can_read=False,
    can_write=False,
    can_remove=False,
    object_name=META_FILE_OBJECT,
)
PERM_FULL = PermissionPolicy(
    "perm.dms.perm.__full__",
    can_create=True,
    can_read=True,
    can_write=True,
    can_remove=True,
    condition="self.created_by = ? OR ((self.user = ? OR self.group = ?) AND self.value = 'FULL')",
    condition_params="__user__, __user__, __user__.group",
    object_name=DMS_PERMISSION_OBJECT,
)

# Provisioning order of the permissions.
POLICIES: dict[str, PermissionPolicy] = {
    "full": FULL,
    "write": WRITE,
    "read": READ,
    "parent": PARENT,
    "self": SELF,
    "create": CREATE,
    "meta": META,
    "perm_full": PERM_FULL,
}

TIER_POLICIES: dict[PermissionValue, PermissionPolicy] = {
    PermissionValue.full: FULL,
    PermissionValue.write: WRITE,
    PermissionValue.read: READ,
}

# Granted alongside the tier permission of every sharing record.
AUXILIARY_POLICIES: tuple[PermissionPolicy, ...] = (SELF, CREATE, PARENT, META, PERM_FULL)


def find_or_create(
    db: Session,
    name: str,
    condition: Optional[str] = None,
    condition_params: Optional[str] = None,
    object_name: str = DMS_FILE_OBJECT,
) -> Permission:
    """
    Find the permission named *name*, creating it for *object_name* if it does not exist yet.

    The object of an existing permission is left alone. Its condition and condition parameters are always replaced,
    including being cleared when none are given.

    :param db: An active database session
    :param name: The unique permission name
    :param condition: The row filter predicate, if any
    :param condition_params: The expressions bound to the predicate placeholders, if any
    :param object_name: The model the permission applies to when it has to be created
    :return: The persistent permission
    """
    permission = db.query(Permission).filter(Permission.name == name).one_or_none()

    if permission is None:
        permission = Permission(name=name, object=object_name)
        db.add(permission)
        db.flush()
        logger.debug(msg=f"Created permission {name}.", extra=logging_context())

    permission.condition = condition
    permission.condition_params = condition_params

    return permission


def provision_permission(db: Session, policy: PermissionPolicy) -> Permission:
    """
    Upsert the permission described by *policy*, resetting its grant flags to the policy values.
    """
    permission = find_or_create(
        db,
        policy.name,
        condition=policy.condition,
        condition_params=policy.condition_params,
        object_name=policy.object_name,
    )
    permission.can_create = policy.can_create
    permission.can_read = policy.can_read
    permission.can_write = policy.can_write
    permission.can_remove = policy.can_remove

    return permission


def create_permissions(db: Session) -> dict[str, Permission]:
    """
    Provision every document management permission.

    :param db: An active database session. Changes are flushed but not committed.
    :return: The provisioned permissions, keyed by policy key
    """
    logger.info(msg="Provisioning document management permissions.", extra=logging_context())

    permissions = {key: provision_permission(db, policy) for key, policy in POLICIES.items()}
    db.flush()

    save_to_logging_context({"provisioned_permissions": [p.name for p in permissions.values()]})
    logger.info(msg="Provisioned document management permissions.", extra=logging_context())
    return permissions


ModelT = TypeVar("ModelT", bound=Base)


def _resolve(
    db: Session, related: Optional[ModelT], model: type[ModelT], related_id: Optional[int]
) -> Optional[ModelT]:
    # A transient record may carry only the foreign key of a related row.
    if related is not None or related_id is None:
        return related

    return db.get(model, related_id)


def save_dms_permission(db: Session, entity: DMSPermission) -> DMSPermission:
    """
    Save a document sharing record, granting its tier to the user and group it names.

    When the record's value is a known tier, the tier permission and the auxiliary permissions every sharer needs
    (own files, creation of documents and uploads, browsing parents, managing sharing records) are attached to the
    record's user and group, and the tier permission is stored on the record. Records with any other value are saved
    as they are.

    :param db: An active database session. Changes are flushed but not committed.
    :param entity: The sharing record to save
    :return: The saved sharing record
    :raises InvalidPermissionError: If the record does not reference an existing file. Nothing is written.
    """
    file = _resolve(db, entity.file, DMSFile, entity.file_id)
    if file is None:
        logger.info(msg="Refused to save a sharing record without a target file.", extra=logging_context())
        raise InvalidPermissionError("Invalid permission")

    # Provisioning flushes, so the record must be in the session before its relationships change.
    db.add(entity)
    entity.file = file
    user = _resolve(db, entity.user, User, entity.user_id)
    group = _resolve(db, entity.group, Group, entity.group_id)

    tier = PermissionValue.parse(entity.value)
    if isinstance(entity.value, PermissionValue):
        entity.value = entity.value.value

    save_to_logging_context(
        {
            "dms_file": file.id,
            "shared_with_user": user.id if user is not None else None,
            "shared_with_group": group.id if group is not None else None,
            "sharing_tier": tier.value if tier is not None else None,
        }
    )

    if tier is None:
        logger.debug(
            msg="Sharing record has no access tier; saving without granting permissions.", extra=logging_context()
        )
        return _save(db, entity)

    permission = provision_permission(db, TIER_POLICIES[tier])
    bundle = [permission, *(provision_permission(db, policy) for policy in AUXILIARY_POLICIES)]

    for holder in (user, group):
        if holder is None:
            continue

        for granted in bundle:
            holder.add_permission(granted)

    entity.permission = permission

    logger.info(msg="Granted sharing permissions.", extra=logging_context())
    return _save(db, entity)


def remove_dms_permission(db: Session, entity: DMSPermission) -> None:
    """
    Delete a document sharing record.

    Permissions granted when the record was saved stay attached to its user and group; the file access predicates
    stop matching once the record is gone.
    """
    save_to_logging_context({"removed_sharing_record": entity.id})
    db.delete(entity)
    db.flush()


def _save(db: Session, entity: DMSPermission) -> DMSPermission:
    db.add(entity)
    db.flush()
    return entity
