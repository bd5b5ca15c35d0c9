"""
Integration test fixtures. Overrides get_db for API tests with in-memory DB.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

PASSWORD = "testpass123"


@pytest.fixture
def session_factory():
    """In-memory engine shared by every request (StaticPool) with all tables created."""
    from api.config import Base
    import api.models  # noqa: F401
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def override_get_db(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    return _get_db


@pytest.fixture
def api_client(override_get_db):
    """FastAPI TestClient with in-memory DB override."""
    from fastapi.testclient import TestClient
    from api.api import app
    from api.config import get_db
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def accounts(session_factory):
    """
    admin, two tutors and two students, as plain dicts (uid, email, role).
    Sam: Physics -> Tom, Maths -> Mia. Bob: Maths -> Mia.
    """
    from api.services.user_service import UserService
    db = session_factory()
    try:
        users = UserService(db)

        def _create(key, **kwargs):
            result = users.create_user(password=PASSWORD, **kwargs)
            assert result.ok, result.message
            u = result.value
            return key, {"uid": u.uid, "email": u.email, "role": u.role, "name": u.name}

        out = dict([
            _create("admin", name="Ada Admin", email="admin@example.com", role="admin"),
            _create("tutor", name="Tom Tutor", email="tom@example.com", role="tutor",
                    timezone="Asia/Tokyo", subjects=["Physics"]),
            _create("tutor2", name="Mia Maths", email="mia@example.com", role="tutor", subjects=["Maths"]),
        ])
        out.update([
            _create("student", name="Sam Student", email="sam@example.com", role="student",
                    timezone="America/New_York",
                    assignments=[
                        {"subject": "Physics", "tutor_id": out["tutor"]["uid"]},
                        {"subject": "Maths", "tutor_id": out["tutor2"]["uid"]},
                    ]),
            _create("student2", name="Bob Brown", email="bob@example.com", role="student",
                    assignments=[{"subject": "Maths", "tutor_id": out["tutor2"]["uid"]}]),
        ])
        return out
    finally:
        db.close()


@pytest.fixture
def login(api_client):
    """Log the shared client in as one of the seeded accounts (replaces the cookie)."""
    def _login(account):
        response = api_client.post("/auth/login", json={"email": account["email"], "password": PASSWORD})
        assert response.status_code == 200, response.text
        return api_client

    return _login
