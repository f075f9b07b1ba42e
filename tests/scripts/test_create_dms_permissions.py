from unittest.mock import patch

from click.testing import CliRunner

from dms.models.permission import Permission
from dms.scripts.create_dms_permissions import create_dms_permissions  # noqa: F401
from dms.scripts.environment import script_environment

from tests.helpers.constants import FULL_PERMISSION_NAME


def run_script(session, *args):
    runner = CliRunner()
    with patch("dms.deps.get_db", return_value=iter([session])):
        return runner.invoke(script_environment, ["create-dms-permissions", *args])


def test_create_dms_permissions_commits(session):
    result = run_script(session, "--commit")

    assert result.exit_code == 0, result.output
    assert FULL_PERMISSION_NAME in result.output
    assert session.query(Permission).count() == 8


def test_create_dms_permissions_dry_run_by_default(session):
    result = run_script(session)

    assert result.exit_code == 0, result.output
    assert session.query(Permission).count() == 0


def test_create_dms_permissions_writes_canonical_line(session):
    with patch("dms.scripts.environment.log_script") as log_script:
        result = run_script(session, "--commit")

    assert result.exit_code == 0, result.output
    log_script.assert_called_once()
    script, action, succeeded, _ = log_script.call_args.args
    assert (script, action, succeeded) == ("create_dms_permissions", "commit", True)
