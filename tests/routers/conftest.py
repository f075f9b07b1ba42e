import pytest
from fastapi.testclient import TestClient

from dms.deps import get_db
from dms.models.enums.user_role import UserRole
from dms.models.group import Group
from dms.models.role import Role
from dms.models.user import User
from dms.server_main import app

from tests.helpers.constants import ADMIN_USER, EXTRA_GROUP, EXTRA_USER, TEST_GROUP, TEST_USER
from tests.helpers.util import acting_as


@pytest.fixture
def setup_router_db(session):
    """Set up the database with the users and groups documents are shared with.

    The extra user is a member of the test group. The test user and the admin belong to no group.
    """
    db = session
    group = Group(**TEST_GROUP)
    db.add(group)
    db.add(Group(**EXTRA_GROUP))
    db.add(User(**TEST_USER))
    db.add(User(**EXTRA_USER, group=group))
    db.add(User(**ADMIN_USER, role_objs=[Role(name=UserRole.admin)]))
    db.commit()


@pytest.fixture()
def app_(session):
    def override_get_db():
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides.update(acting_as(session, TEST_USER["username"]))

    yield app

    app.dependency_overrides.clear()


@pytest.fixture()
def client(app_):
    with TestClient(app=app_, base_url="http://testserver") as tc:
        yield tc
