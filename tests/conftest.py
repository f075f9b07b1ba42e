import logging  # noqa: F401

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from dms.db.base import Base
from dms.models import *  # noqa: F403
from dms.models.dms_file import DMSFile
from dms.models.enums.user_role import UserRole
from dms.models.group import Group
from dms.models.role import Role
from dms.models.user import User

from tests.helpers.constants import ADMIN_USER, EXTRA_GROUP, EXTRA_USER, TEST_DMS_FILE, TEST_GROUP, TEST_USER


@pytest.fixture()
def session():
    # Un-comment this line to log all database queries:
    # logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    engine = create_engine(
        "sqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()

    Base.metadata.create_all(bind=engine)

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def setup_lib_db(session):
    """
    Sets up the lib test db with two groups, a user in the first group, a user without a group and an admin.
    """
    db = session
    group = Group(**TEST_GROUP)
    db.add(group)
    db.add(Group(**EXTRA_GROUP))
    db.add(User(**TEST_USER, group=group))
    db.add(User(**EXTRA_USER))
    db.add(User(**ADMIN_USER, role_objs=[Role(name=UserRole.admin)]))
    db.commit()


@pytest.fixture
def test_user(session, setup_lib_db):
    return session.query(User).filter(User.username == TEST_USER["username"]).one()


@pytest.fixture
def extra_user(session, setup_lib_db):
    return session.query(User).filter(User.username == EXTRA_USER["username"]).one()


@pytest.fixture
def test_group(session, setup_lib_db):
    return session.query(Group).filter(Group.code == TEST_GROUP["code"]).one()


@pytest.fixture
def extra_group(session, setup_lib_db):
    return session.query(Group).filter(Group.code == EXTRA_GROUP["code"]).one()


@pytest.fixture
def dms_file(session, extra_user):
    item = DMSFile(**TEST_DMS_FILE, created_by=extra_user, modified_by=extra_user)
    session.add(item)
    session.commit()
    return item

