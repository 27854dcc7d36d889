import os
import tempfile
from pathlib import Path
from uuid import uuid4

# Settings are read at import time, so point them at a throwaway database first
os.environ["DATABASE_URL"] = f"sqlite:///{Path(tempfile.mkdtemp(prefix='shiftbook-')) / 'default.db'}"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from shiftbook.core.database import Base, build_engine, get_db
from shiftbook.main import app
from shiftbook.models.booking import Booking  # noqa: F401
from shiftbook.models.profile import Profile
from shiftbook.models.shift_template import ShiftTemplate  # noqa: F401
from shiftbook.routers.auth import create_access_token
from shiftbook.services.authorization import Principal, Role, resolve_role


@pytest.fixture
def engine(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'shiftbook.db'}")
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def worker():
    return Principal(user_id=uuid4(), role=Role.worker)

@pytest.fixture
def other_worker():
    return Principal(user_id=uuid4(), role=Role.worker)

@pytest.fixture
def admin():
    return Principal(user_id=uuid4(), role=Role.admin)

@pytest.fixture
def super_admin():
    return Principal(user_id=uuid4(), role=Role.super_admin)


@pytest.fixture
def make_profile(session_factory):
    """Store a profile and return the Principal it resolves to."""
    def _make(role=None, email=None, full_name=None):
        profile_id = uuid4()
        with session_factory() as s:
            s.add(Profile(
                profile_id=profile_id,
                email=email or f"{profile_id.hex[:8]}@example.com",
                full_name=full_name,
                role=role,
            ))
            s.commit()
        return Principal(user_id=profile_id, role=resolve_role(role))
    return _make


@pytest.fixture
def client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(principal):
        token = create_access_token({"sub": str(principal.user_id)})
        return {"Authorization": f"Bearer {token}"}
    return _headers
