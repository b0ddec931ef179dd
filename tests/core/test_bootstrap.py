"""
Tests for admin seeding.
"""
import pytest

from aarogya.auth.models import ApprovalStatus, User, UserRole
from aarogya.core import bootstrap
from aarogya.core.bootstrap import admin_exists, bootstrap_admin_if_needed, create_or_reset_admin
from aarogya.core.security import verify_password


def test_create_admin(db):
    assert not admin_exists(db)

    admin = create_or_reset_admin(db, "Admin", "admin@aarogya.com", "0000000000", "Admin@123")

    assert admin.role == UserRole.ADMIN
    assert admin.approval_status == ApprovalStatus.APPROVED
    assert verify_password("Admin@123", admin.password_hash)
    assert admin_exists(db)


def test_create_admin_twice_resets_password(db):
    first = create_or_reset_admin(db, "Admin", "admin@aarogya.com", "0000000000", "Admin@123")
    second = create_or_reset_admin(db, "Admin", "admin@aarogya.com", "0000000000", "NewPass@456")

    assert first.id == second.id
    assert db.query(User).filter(User.role == UserRole.ADMIN).count() == 1
    assert verify_password("NewPass@456", second.password_hash)
    assert not verify_password("Admin@123", second.password_hash)


def test_create_admin_refuses_taken_phone(db, make_user):
    make_user(UserRole.PATIENT, phone="0000000000")

    with pytest.raises(ValueError):
        create_or_reset_admin(db, "Admin", "admin@aarogya.com", "0000000000", "Admin@123")
    assert not admin_exists(db)


def test_bootstrap_skipped_without_credentials(db):
    bootstrap_admin_if_needed(db)

    assert not admin_exists(db)


def test_bootstrap_uses_configured_credentials(db, monkeypatch):
    monkeypatch.setattr(bootstrap.settings, "bootstrap_admin_email", "root@aarogya.com")
    monkeypatch.setattr(bootstrap.settings, "bootstrap_admin_phone", "0000000001")
    monkeypatch.setattr(bootstrap.settings, "bootstrap_admin_password", "Root@123")

    bootstrap_admin_if_needed(db)

    admin = db.query(User).filter(User.role == UserRole.ADMIN).one()
    assert admin.name == bootstrap.settings.bootstrap_admin_name
    assert admin.email == "root@aarogya.com"
