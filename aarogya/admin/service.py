"""
Approval workflow service - admin decisions on doctor and lab accounts.

This module lists accounts awaiting approval, moves them from pending to
approved or rejected, and reports account counts for the admin dashboard.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..auth.exceptions import ConflictException, ResourceNotFoundException, ValidationException
from ..auth.models import APPROVAL_REQUIRED_ROLES, ApprovalStatus, User, UserRole
from ..auth.service import serialize_user

# Set up logging
logger = logging.getLogger(__name__)


def list_pending_approvals(db: Session) -> List[Dict[str, Any]]:
    """
    Get doctor and lab accounts awaiting approval, newest first.

    Args:
        db: Database session

    Returns:
        List of public users merged with their role fields
    """
    users = (
        db.query(User)
        .filter(User.role.in_(APPROVAL_REQUIRED_ROLES), User.approval_status == ApprovalStatus.PENDING)
        .order_by(User.created_at.desc())
        .all()
    )
    return [serialize_user(user) for user in users]


def list_users(
    db: Session,
    role: Optional[UserRole] = None,
    approval_status: Optional[ApprovalStatus] = None,
) -> List[Dict[str, Any]]:
    """
    Get all non-admin accounts, newest first, with optional filters.

    Raises:
        ValidationException: If asked to list admins
    """
    if role == UserRole.ADMIN:
        raise ValidationException("Admin accounts are not listed")

    query = db.query(User).filter(User.role != UserRole.ADMIN)
    if role:
        query = query.filter(User.role == role)
    if approval_status:
        query = query.filter(User.approval_status == approval_status)
    return [serialize_user(user) for user in query.order_by(User.created_at.desc()).all()]


def _decide(db: Session, user_id: str, decision: ApprovalStatus) -> Dict[str, Any]:
    user = (
        db.query(User)
        .filter(User.id == user_id, User.role.in_(APPROVAL_REQUIRED_ROLES))
        .first()
    )
    if not user:
        raise ResourceNotFoundException("User not found or cannot be approved")

    if user.approval_status != ApprovalStatus.PENDING:
        raise ConflictException(f"User is already {user.approval_status.value}")

    user.approval_status = decision
    try:
        db.commit()
    except Exception:
        db.rollback()
        logger.exception(f"Failed to record {decision.value} for {user_id}")
        raise

    db.refresh(user)
    logger.info(f"User {user.id} ({user.role.value}) {decision.value}")
    return serialize_user(user)


def approve_user(db: Session, user_id: str) -> Dict[str, Any]:
    """
    Approve a pending doctor or lab. No token is issued; the user logs in afterwards.

    Raises:
        ResourceNotFoundException: If no doctor/lab has that id
        ConflictException: If the account is not pending
    """
    return _decide(db, user_id, ApprovalStatus.APPROVED)


def reject_user(db: Session, user_id: str) -> Dict[str, Any]:
    """
    Reject a pending doctor or lab.

    Raises:
        ResourceNotFoundException: If no doctor/lab has that id
        ConflictException: If the account is not pending
    """
    return _decide(db, user_id, ApprovalStatus.REJECTED)


def get_dashboard_stats(db: Session) -> Dict[str, int]:
    """Account counts for the admin dashboard."""
    counts = dict(
        db.query(User.role, func.count(User.id))
        .filter(User.role != UserRole.ADMIN)
        .group_by(User.role)
        .all()
    )
    pending = (
        db.query(func.count(User.id))
        .filter(User.role.in_(APPROVAL_REQUIRED_ROLES), User.approval_status == ApprovalStatus.PENDING)
        .scalar()
    )
    return {
        "totalUsers": sum(counts.values()),
        "pendingApprovals": pending or 0,
        "doctors": counts.get(UserRole.DOCTOR, 0),
        "labs": counts.get(UserRole.LAB, 0),
        "patients": counts.get(UserRole.PATIENT, 0),
    }
