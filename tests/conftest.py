"""
Pytest configuration and shared fixtures for the test suite.
Ensures proper Python path and provides common fixtures for unit and integration tests.
"""
import os
import sys
import tempfile
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Keep the app's import-time engine and log files away from real data.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("LOG_DIR", str(Path(tempfile.gettempdir()) / "backoffice-test-logs"))
os.environ.setdefault("SECRET_KEY", "test-secret")

# Add project root and src to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))
src_path = project_root / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    """In-memory SQLite engine; StaticPool so every session sees the same database."""
    return create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest.fixture
def db_session(in_memory_engine):
    """Create an in-memory database session with every table created."""
    from api.config import Base
    import api.models  # noqa: F401
    Base.metadata.create_all(in_memory_engine)
    SessionLocal = sessionmaker(bind=in_memory_engine)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def seeded(db_session):
    """
    Two tutors and one student:
    student S has Physics -> tutor T and Maths -> tutor T2.
    """
    from api.services.user_service import UserService
    users = UserService(db_session)
    admin = users.create_user(name="Ada Admin", email="admin@example.com", password="pw", role="admin").value
    tutor = users.create_user(
        name="Tom Tutor", email="tom@example.com", password="pw", role="tutor",
        timezone="Asia/Tokyo", subjects=["Physics"],
    ).value
    tutor2 = users.create_user(
        name="Mia Maths", email="mia@example.com", password="pw", role="tutor", subjects=["Maths"],
    ).value
    student = users.create_user(
        name="Sam Student", email="sam@example.com", password="pw", role="student",
        timezone="America/New_York",
        assignments=[
            {"subject": "Physics", "tutor_id": tutor.uid},
            {"subject": "Maths", "tutor_id": tutor2.uid},
        ],
    ).value
    return {"admin": admin, "tutor": tutor, "tutor2": tutor2, "student": student}
