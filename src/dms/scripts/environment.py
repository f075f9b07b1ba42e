"""
Shared setup of the command line scripts.

Scripts are click commands attached to the :py:func:`script_environment` group and decorated with
:py:func:`with_database_session`, which owns their transaction::

    @script_environment.command()
    @with_database_session
    def some_script(db):
        ...

    if __name__ == "__main__":
        script_environment()
"""

import enum
import logging
import time
from functools import wraps

import click
from sqlalchemy.orm import Session, configure_mappers

from dms import deps
from dms.lib.logging.canonical import log_script
from dms.models import *  # noqa: F403

logger = logging.getLogger(__name__)


@enum.unique
class DatabaseSessionAction(enum.Enum):
    """
    What happens to the changes made by a script once it has run without error.
    """

    DRY_RUN = "rollback"
    PROMPT = "prompt"
    COMMIT = "commit"


@click.group()
def script_environment():
    """
    Command group of the DMS scripts.

    Logging is configured when the ``dms`` package is imported. Mappers are configured here so that backref
    attributes exist before any script touches the models.
    """
    logging.getLogger("__main__").setLevel(logging.INFO)

    configure_mappers()


def _finish_transaction(db: Session, action: DatabaseSessionAction, succeeded: bool) -> bool:
    if not succeeded:
        commit = False
    elif action is DatabaseSessionAction.PROMPT:
        commit = click.confirm("Commit all changes?")
    else:
        commit = action is DatabaseSessionAction.COMMIT

    if commit:
        logger.info("Committing all changes")
        db.commit()
    else:
        logger.info("Rolling back all changes; the database will not be modified")
        db.rollback()

    return commit


def with_database_session(command=None, *, pass_action: bool = False):
    """
    Provide a click *command* with a database session as its ``db`` keyword argument.

    The command gains the mutually exclusive ``--dry-run`` (the default), ``--prompt`` and ``--commit`` options that
    decide whether its changes are rolled back, committed after confirmation, or committed. Changes of a command that
    raises are always rolled back. With *pass_action*, the selected :py:class:`DatabaseSessionAction` is passed on as
    the ``action`` keyword argument.
    """

    def decorator(command):
        @click.option(
            "--dry-run",
            "action",
            help="Only go through the motions of changing the database (default)",
            flag_value=DatabaseSessionAction.DRY_RUN,
            type=DatabaseSessionAction,
            default=True,
        )
        @click.option(
            "--prompt",
            "action",
            help="Ask if changes to the database should be saved",
            flag_value=DatabaseSessionAction.PROMPT,
            type=DatabaseSessionAction,
        )
        @click.option(
            "--commit",
            "action",
            help="Save changes to the database",
            flag_value=DatabaseSessionAction.COMMIT,
            type=DatabaseSessionAction,
        )
        @wraps(command)
        def decorated(*args, action, **kwargs):
            start = time.time_ns()
            db = next(deps.get_db())

            kwargs["db"] = db
            if pass_action:
                kwargs["action"] = action

            succeeded = False
            try:
                command(*args, **kwargs)
                succeeded = True
            except Exception as error:
                logger.error(f"Aborting with error: {error}")
                raise
            finally:
                _finish_transaction(db, action, succeeded)
                db.close()
                log_script(command.__name__, action.value, succeeded, start)

        return decorated

    return decorator(command) if command else decorator
