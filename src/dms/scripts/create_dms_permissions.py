"""
Provision the document management permissions.

Creates any missing permission and resets the predicate, parameters and grant flags of every one of them to the
built-in policy. All eight permissions are written in a single transaction.

    python -m dms.scripts.create_dms_permissions --commit
"""

import logging

import click
from sqlalchemy.orm import Session

from dms.lib.dms_permissions import create_permissions
from dms.scripts.environment import script_environment, with_database_session

logger = logging.getLogger(__name__)


@script_environment.command()
@with_database_session
def create_dms_permissions(db: Session):
    permissions = create_permissions(db)

    for key, permission in permissions.items():
        click.echo(
            f"{key:<10} {permission.name:<28} "
            f"C={permission.can_create:d} R={permission.can_read:d} W={permission.can_write:d} D={permission.can_remove:d}"
        )

    logger.info(f"Provisioned {len(permissions)} permissions")


if __name__ == "__main__":
    script_environment()
