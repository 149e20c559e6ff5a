"""
Pytest configuration and fixtures
Every test gets a fresh in-memory SQLite database
"""
import pytest
import os
import sys
from pathlib import Path
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add src to path
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

# Set test environment variables before importing
os.environ["ENV"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-integration-tests-only-min-32-chars"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CORS_ORIGINS"] = "http://localhost:3000"
os.environ["BCRYPT_ROUNDS"] = "4"  # Fast hashing in tests
os.environ["LOG_LEVEL"] = "WARNING"  # Reduce log noise in tests

# Import after setting env vars
from aib_hub.db import (  # noqa: E402
    Base,
    get_db,
    User,
    Profile,
    Creator,
    Job,
    CreatorStatus,
    MembershipTier,
    UserRole,
)
from aib_hub.auth import get_password_hash  # noqa: E402
from aib_hub.api_server import app  # noqa: E402

TEST_PASSWORD = "testpassword123"


@pytest.fixture(scope="function")
def test_engine():
    """In-memory SQLite engine shared by every connection of one test"""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Session:
    """Create a database session for each test and route the app's get_db to it"""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    session = TestingSessionLocal()

    def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db

    yield session

    session.close()
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def client(db_session):
    """Create test client"""
    return TestClient(app)


@pytest.fixture(scope="function")
def make_creator(db_session: Session):
    """Factory inserting creator rows directly (APPROVED BASE by default)"""
    def _make_creator(full_name="Creator", city="Indore", **fields):
        creator = Creator(
            full_name=full_name,
            city=city,
            email=fields.pop("email", None),
            skills=fields.pop("skills", []),
            purchased_tags=fields.pop("purchased_tags", []),
            bio=fields.pop("bio", ""),
            experience=fields.pop("experience", ""),
            whatsapp=fields.pop("whatsapp", ""),
            is_featured=fields.pop("is_featured", False),
            tier=fields.pop("tier", MembershipTier.BASE.value),
            status=fields.pop("status", CreatorStatus.APPROVED.value),
            **fields,
        )
        db_session.add(creator)
        db_session.commit()
        db_session.refresh(creator)
        return creator

    return _make_creator


@pytest.fixture(scope="function")
def make_job(db_session: Session):
    """Factory inserting job rows directly"""
    def _make_job(title="Video Editor Needed", city="Indore", **fields):
        job = Job(
            title=title,
            city=city,
            required_skills=fields.pop("required_skills", ["Premiere Pro"]),
            description=fields.pop("description", "Edit a product launch video"),
            budget=fields.pop("budget", "₹5,000 / Project"),
            company=fields.pop("company", "Acme Studio"),
            contact_email=fields.pop("contact_email", "client@example.com"),
            **fields,
        )
        db_session.add(job)
        db_session.commit()
        db_session.refresh(job)
        return job

    return _make_job


def _make_user(db_session: Session, email: str, role: str, full_name: str = "Test User", city: str = "Indore"):
    user = User(
        email=email,
        hashed_password=get_password_hash(TEST_PASSWORD),
        full_name=full_name,
        city=city,
        is_active=True,
    )
    db_session.add(user)
    db_session.flush()
    db_session.add(Profile(id=user.id, role=role))
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def test_user(db_session: Session, make_creator):
    """Creator account with a linked, approved creator profile"""
    user = _make_user(db_session, "test@example.com", UserRole.CREATOR.value)
    make_creator(full_name="Test User", city="Indore", linked_user_id=user.id, email=user.email)
    return user


@pytest.fixture(scope="function")
def admin_user(db_session: Session):
    return _make_user(db_session, "admin@example.com", UserRole.ADMIN.value, full_name="Admin")


def login(client: TestClient, email: str, password: str = TEST_PASSWORD) -> dict:
    """Log in and return bearer headers"""
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, f"Login failed: {response.text}"
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


@pytest.fixture(scope="function")
def auth_headers(client, test_user):
    """Get authentication headers for the creator account"""
    return login(client, test_user.email)


@pytest.fixture(scope="function")
def authenticated_client(client, auth_headers):
    """Create authenticated test client"""
    client.headers.update(auth_headers)
    return client


@pytest.fixture(scope="function")
def admin_client(db_session, admin_user):
    """Separate client signed in as admin"""
    admin = TestClient(app)
    admin.headers.update(login(admin, admin_user.email))
    return admin


@pytest.fixture(scope="function")
def login_as(client):
    """Log the shared client in as another account; returns bearer headers"""
    def _login_as(email: str, password: str = TEST_PASSWORD) -> dict:
        return login(client, email, password)

    return _login_as


@pytest.fixture(scope="function")
def make_user(db_session: Session):
    """Factory for accounts with a profiles row but no creator row"""
    def _make(email: str, role: str = UserRole.CREATOR.value, **fields):
        return _make_user(db_session, email, role, **fields)

    return _make
