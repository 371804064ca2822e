from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leave_desk.core.config import Settings, get_settings
from leave_desk.core.security import create_access_token, hash_password
from leave_desk.db import get_session
from leave_desk.main import app
from leave_desk.models import Base, LeaveType, User

ADMIN_EMAIL = "admin@college.edu"
PASSWORD = "Str0ng!Pass"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        environment="development",
        jwt_secret="test-secret",
        admin_email=ADMIN_EMAIL,
        frontend_url="http://frontend.test",
        local_upload_root=str(tmp_path / "uploads"),
        storage_backend="local",
        smtp_host="",
        smtp_from="",
        faculty_load_url="",
    )


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield sessionmaker(bind=engine, autoflush=False)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    with session_factory() as session:
        yield session


@pytest.fixture
def client(session_factory, settings):
    def _get_session():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_settings] = lambda: settings
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session_factory):
    def _make(email="faculty@college.edu", department="cse", gender="female", subjects=None, full_name="Asha Rao"):
        with session_factory() as session:
            user = User(
                email=email,
                password_hash=hash_password(PASSWORD),
                full_name=full_name,
                phone_no="9876543210",
                age=30,
                gender=gender,
                department=department,
                subjects=subjects or ["maths"],
            )
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    return _make


@pytest.fixture
def make_leave_type(session_factory):
    def _make(name="Casual", max_days=5, requires_attachment=False):
        with session_factory() as session:
            leave_type = LeaveType(name=name, max_days=max_days, requires_attachment=requires_attachment, applications=0)
            session.add(leave_type)
            session.commit()
            session.refresh(leave_type)
            session.expunge(leave_type)
            return leave_type

    return _make


@pytest.fixture
def auth_headers(settings):
    def _headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_access_token(str(user.id), settings)}"}

    return _headers


@pytest.fixture
def faculty(make_user):
    return make_user()


@pytest.fixture
def admin(make_user):
    return make_user(email=ADMIN_EMAIL, full_name="Admin User", department="it")


@pytest.fixture
def faculty_headers(faculty, auth_headers):
    return auth_headers(faculty)


@pytest.fixture
def admin_headers(admin, auth_headers):
    return auth_headers(admin)
