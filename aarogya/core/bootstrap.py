"""
Bootstrap utilities for admin accounts.

Admins never self-register: they are seeded from settings at startup or
created with the ``create_admin.py`` script.
"""
import logging
from typing import Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..config import settings
from ..auth.models import ApprovalStatus, User, UserRole
from .security import hash_password

logger = logging.getLogger(__name__)


def admin_exists(db: Session) -> bool:
    """
    Check if any admin user exists in the database.

    Args:
        db: Database session

    Returns:
        bool: True if at least one admin exists, False otherwise
    """
    return db.query(User).filter(User.role == UserRole.ADMIN).count() > 0


def create_or_reset_admin(db: Session, name: str, email: str, phone: str, password: str) -> User:
    """
    Create an admin account, or reset the password of the admin with that name.

    Args:
        db: Database session
        name: Admin login name
        email: Admin email (must not belong to another user)
        phone: Admin phone (must not belong to another user)
        password: Plain text password

    Returns:
        User: The created or updated admin

    Raises:
        ValueError: If the email or phone belongs to a different account
    """
    admin = db.query(User).filter(User.role == UserRole.ADMIN, User.name == name).first()
    try:
        if admin:
            admin.password_hash = hash_password(password)
            logger.info(f"Admin password reset: {admin.id}")
        else:
            clash = db.query(User).filter(or_(User.email == email, User.phone == phone)).first()
            if clash:
                raise ValueError(f"Email {email} or phone {phone} already belongs to another account")
            admin = User(
                name=name,
                email=email,
                phone=phone,
                password_hash=hash_password(password),
                role=UserRole.ADMIN,
                approval_status=ApprovalStatus.APPROVED,  # Admins are always approved
            )
            db.add(admin)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(admin)
    return admin


def create_bootstrap_admin(db: Session) -> Optional[User]:
    """
    Create the first admin user from settings.

    Args:
        db: Database session

    Returns:
        The created admin, or None if credentials are not configured or creation failed
    """
    if not (settings.bootstrap_admin_email and settings.bootstrap_admin_phone and settings.bootstrap_admin_password):
        logger.warning("Bootstrap admin credentials not provided in environment variables")
        return None

    try:
        admin = create_or_reset_admin(
            db,
            name=settings.bootstrap_admin_name,
            email=settings.bootstrap_admin_email,
            phone=settings.bootstrap_admin_phone,
            password=settings.bootstrap_admin_password,
        )
    except ValueError as e:
        logger.warning(f"Bootstrap failed: {e}")
        return None

    logger.info(f"Bootstrap admin created successfully: {admin.name} (ID: {admin.id})")
    return admin


def bootstrap_admin_if_needed(db: Session) -> None:
    """
    Check if admin exists and create bootstrap admin if needed.
    This function should be called during application startup.

    Args:
        db: Database session
    """
    if admin_exists(db):
        logger.info("Admin users found. Bootstrap not needed.")
        return

    logger.info("No admin users found. Attempting bootstrap admin creation...")
    if create_bootstrap_admin(db) is None:
        logger.info(
            "To create the first admin, set BOOTSTRAP_ADMIN_EMAIL, BOOTSTRAP_ADMIN_PHONE and "
            "BOOTSTRAP_ADMIN_PASSWORD or run create_admin.py"
        )
