import os

# Ensure JWT_SECRET exists before importing app.main (it calls require_jwt_secret() at import time).
os.environ.setdefault("JWT_SECRET", "test_jwt_secret")
# Keep app.core.database off Postgres; every test overrides get_db anyway.
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

from contextlib import contextmanager

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.base import Base
from app.core import config as app_config
from app.core.security import hash_password

# Import models so they register with SQLAlchemy metadata.
from app.models.user import User  # noqa: F401
from app.models.refresh_token import RefreshToken  # noqa: F401
from app.models.organization import Organization  # noqa: F401
from app.models.membership import Membership  # noqa: F401
from app.models.invite import Invite  # noqa: F401
from app.models.project import Project  # noqa: F401
from app.models.board_column import BoardColumn  # noqa: F401
from app.models.task import Task  # noqa: F401
from app.models.label import Label  # noqa: F401
from app.models.task_label import TaskLabel  # noqa: F401
from app.models.comment import Comment  # noqa: F401
from app.models.audit_log import AuditLog  # noqa: F401

from app.core.database import get_db
from app.dependencies.auth import get_current_user

TEST_PASSWORD = "longenough1"


@pytest.fixture(scope="session")
def db_engine():
    # In-memory SQLite for fast, isolated tests.
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture()
def db_session(db_engine):
    # Important: because we use an in-memory SQLite DB with StaticPool, the DB
    # persists across tests. Reset schema per test to avoid cross-test coupling.
    Base.metadata.drop_all(bind=db_engine)
    Base.metadata.create_all(bind=db_engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def _reset_mutable_settings():
    """
    Tests sometimes tweak global settings (app_config.settings.*). Because that object is
    process-global, we must restore values after each test to avoid cross-test coupling.
    """
    keys = [
        "PASSWORD_MIN_LENGTH",
        "PASSWORD_MAX_LENGTH",
        "INVITE_EXPIRE_DAYS",
        "WEB_ORIGIN",
    ]
    original = {k: getattr(app_config.settings, k) for k in keys}
    try:
        yield
    finally:
        for k, v in original.items():
            setattr(app_config.settings, k, v)


@pytest.fixture()
def app(db_session):
    import app.main as main

    fastapi_app = main.app

    def override_get_db():
        yield db_session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    yield fastapi_app
    fastapi_app.dependency_overrides.clear()


@pytest.fixture()
def users(db_session):
    """
    Two distinct users for membership / isolation tests.
    """
    user_a = User(email="a@b.com", password_hash=hash_password(TEST_PASSWORD))
    user_b = User(email="other@example.com", password_hash=hash_password(TEST_PASSWORD))
    db_session.add_all([user_a, user_b])
    db_session.commit()
    db_session.refresh(user_a)
    db_session.refresh(user_b)
    return user_a, user_b


@pytest.fixture()
def anon_client(app):
    """
    Client that goes through the real bearer guard (no user override).
    """
    with TestClient(app) as c:
        yield c


@pytest.fixture()
def client(app, users):
    """
    Default client authenticated as user_a.
    """
    user_a, _ = users
    app.dependency_overrides[get_current_user] = lambda: user_a
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture()
def client_for(app):
    """
    Context manager to create a client authenticated as an arbitrary user.

    Usage:
        with client_for(user) as c:
            ...
    """

    @contextmanager
    def _client_for(user: User):
        app.dependency_overrides[get_current_user] = lambda: user
        with TestClient(app) as c:
            yield c
        app.dependency_overrides.pop(get_current_user, None)

    return _client_for


@pytest.fixture()
def auth_headers(app):
    """
    Real bearer headers for `user`, minted by the app's own issuer.
    """

    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {app.state.access_tokens.issue(user.id)}"}

    return _auth_headers
