"""
Tests for role-scoped login and admin login.
"""
import pytest

from aarogya.auth.exceptions import AccountNotFoundException, ResourceNotFoundException, ValidationException
from aarogya.auth.models import ApprovalStatus, UserRole
from aarogya.auth.service import login_user
from aarogya.core.security import decode_access_token


def login(client, phone, password="secret123", role="patient"):
    return client.post("/api/auth/login", json={"phone": phone, "password": password, "role": role})


def test_login_returns_token_and_user(client, make_user):
    user = make_user(UserRole.PATIENT, phone="9876543210")

    response = login(client, "9876543210")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["id"] == user.id
    assert data["user"]["age"] == 30
    assert decode_access_token(data["token"]).id == user.id


def test_approved_doctor_can_login(client, make_user):
    make_user(UserRole.DOCTOR, ApprovalStatus.APPROVED, phone="9123456780")

    response = login(client, "9123456780", role="doctor")

    assert response.status_code == 200
    assert response.json()["data"]["user"]["specialization"] == "Cardiology"


@pytest.mark.parametrize("role", ["doctor", "lab"])
def test_pending_account_is_refused(client, make_user, role):
    make_user(role, ApprovalStatus.PENDING, phone="9123456780")

    response = login(client, "9123456780", role=role)

    assert response.status_code == 403
    assert response.json()["error"] == "pending_approval"


@pytest.mark.parametrize("role", ["doctor", "lab"])
def test_rejected_account_is_refused(client, make_user, role):
    make_user(role, ApprovalStatus.REJECTED, phone="9123456780")

    response = login(client, "9123456780", role=role)

    assert response.status_code == 403
    assert response.json()["error"] == "rejected"


def test_pending_status_is_reported_before_password_check(client, make_user):
    make_user(UserRole.LAB, ApprovalStatus.PENDING, phone="9123456780")

    response = login(client, "9123456780", password="wrong-password", role="lab")

    assert response.json()["error"] == "pending_approval"


def test_wrong_role_is_reported_as_unknown_account(client, make_user):
    make_user(UserRole.PATIENT, phone="9876543210")

    wrong_role = login(client, "9876543210", role="doctor")
    unknown_phone = login(client, "1111111111", role="doctor")

    assert wrong_role.status_code == 401
    assert wrong_role.json()["error"] == "not_found"
    assert wrong_role.json() == unknown_phone.json()


def test_blank_password_is_checked_against_the_hash(client, make_user):
    make_user(UserRole.PATIENT, phone="9876543210")

    response = login(client, "9876543210", password="   ")

    assert response.status_code == 401
    assert response.json()["error"] == "invalid_credentials"


def test_empty_password_is_a_validation_error(db, make_user):
    make_user(UserRole.PATIENT, phone="9876543210")

    with pytest.raises(ValidationException):
        login_user(db, "9876543210", "", UserRole.PATIENT)


def test_unknown_account_is_a_not_found_with_401():
    exc = AccountNotFoundException()

    assert isinstance(exc, ResourceNotFoundException)
    assert exc.status_code == 401
    assert exc.error == "not_found"
    assert ResourceNotFoundException().status_code == 404


def test_wrong_password_is_invalid_credentials(client, make_user):
    make_user(UserRole.PATIENT, phone="9876543210")

    response = login(client, "9876543210", password="wrong-password")

    assert response.status_code == 401
    assert response.json()["error"] == "invalid_credentials"


def test_login_as_admin_role_is_refused(db, client, admin, admin_password):
    response = login(client, admin.phone, password=admin_password, role="admin")

    assert response.status_code == 400
    assert response.json()["error"] == "validation_error"

    with pytest.raises(ValidationException):
        login_user(db, admin.phone, admin_password, UserRole.ADMIN)


def test_doctor_flow_from_registration_to_login(client, admin_headers):
    registration = client.post("/api/auth/register", json={
        "name": "Dr. Vikram Shah",
        "email": "vikram@example.com",
        "phone": "9123456780",
        "password": "secret123",
        "role": "doctor",
        "specialization": "Cardiology",
    })
    user_id = registration.json()["data"]["user"]["id"]

    assert login(client, "9123456780", role="doctor").json()["error"] == "pending_approval"

    approval = client.put(f"/api/admin/approvals/{user_id}/approve", headers=admin_headers)
    assert approval.status_code == 200
    assert "token" not in approval.json()["data"]

    response = login(client, "9123456780", role="doctor")
    assert response.status_code == 200
    identity = decode_access_token(response.json()["data"]["token"])
    assert identity.id == user_id
    assert identity.role == UserRole.DOCTOR


def test_admin_login(client, admin, admin_password):
    response = client.post("/api/auth/admin/login", json={"username": "Admin", "password": admin_password})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["role"] == "admin"
    assert decode_access_token(data["token"]).role == UserRole.ADMIN


@pytest.mark.parametrize("username, password", [
    ("Admin", "wrong-password"),
    ("Nobody", "Admin@123"),
])
def test_admin_login_failures_look_the_same(client, admin, username, password):
    response = client.post("/api/auth/admin/login", json={"username": username, "password": password})

    assert response.status_code == 401
    assert response.json()["error"] == "invalid_credentials"
    assert response.json()["message"] == "Invalid admin credentials"


def test_non_admin_cannot_use_admin_login(client, make_user):
    make_user(UserRole.PATIENT, name="Asha")

    response = client.post("/api/auth/admin/login", json={"username": "Asha", "password": "secret123"})

    assert response.status_code == 401
