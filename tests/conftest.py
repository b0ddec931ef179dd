"""
Test configuration for the diagnostics portal backend.

The environment is prepared before the application is imported so settings,
the password context and the app are built for tests.
"""
import os

os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["BCRYPT_ROUNDS"] = "4"
for _name in ("BOOTSTRAP_ADMIN_EMAIL", "BOOTSTRAP_ADMIN_PHONE", "BOOTSTRAP_ADMIN_PASSWORD"):
    os.environ[_name] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from aarogya.database import Base, get_db
from aarogya.main import app
from aarogya.auth.models import ApprovalStatus, User, UserRole
from aarogya.core.security import create_access_token, hash_password
from aarogya.doctors.models import DoctorProfile
from aarogya.labs.models import LabProfile
from aarogya.patients.models import PatientProfile

# Create test database engine
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

# Create test session factory
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

ADMIN_PASSWORD = "Admin@123"


@pytest.fixture(scope="function")
def db():
    """
    Create a fresh database for each test.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """
    Create a test client with a test database session.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as client:
        yield client

    app.dependency_overrides = {}


@pytest.fixture
def make_user(db):
    """Insert a user and its role profile directly, bypassing registration."""
    counter = {"n": 0}

    def _make_user(role=UserRole.PATIENT, approval_status=None, password="secret123", **fields):
        counter["n"] += 1
        n = counter["n"]
        role = UserRole(role)
        if approval_status is None:
            approval_status = ApprovalStatus.APPROVED if role in (UserRole.PATIENT, UserRole.ADMIN) else ApprovalStatus.PENDING
        user = User(
            name=fields.pop("name", f"User {n}"),
            email=fields.pop("email", f"user{n}@example.com"),
            phone=fields.pop("phone", f"90000000{n:02d}"),
            password_hash=hash_password(password),
            role=role,
            approval_status=ApprovalStatus(approval_status),
        )
        db.add(user)
        db.flush()
        if role == UserRole.DOCTOR:
            db.add(DoctorProfile(user_id=user.id, specialization=fields.get("specialization", "Cardiology")))
        elif role == UserRole.LAB:
            db.add(LabProfile(user_id=user.id, address=fields.get("address", "12 Lab Road")))
        elif role == UserRole.PATIENT:
            db.add(PatientProfile(user_id=user.id, age=fields.get("age", 30), gender=fields.get("gender", "female")))
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.ADMIN, name="Admin", email="admin@aarogya.com", phone="0000000000", password=ADMIN_PASSWORD)


@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD


@pytest.fixture
def auth_headers():
    """Build the Authorization header for a user row."""
    def _auth_headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token(user.id, user.role)}"}
    return _auth_headers


@pytest.fixture
def admin_headers(admin, auth_headers):
    return auth_headers(admin)
