"""
Admin routes: approval workflow, user listing and dashboard statistics.

Every route here is guarded by ``require_admin`` at include time.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth.models import ApprovalStatus, UserRole
from ..core.responses import success_response
from .service import approve_user, get_dashboard_stats, list_pending_approvals, list_users, reject_user

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/approvals/pending", summary="List Doctor/Lab Accounts Awaiting Approval")
def pending_approvals_route(db: Session = Depends(get_db)):
    """Get pending doctor and lab registrations, newest first."""
    return success_response({"users": list_pending_approvals(db)})


@router.put("/approvals/{user_id}/approve", summary="Approve Doctor/Lab Account")
def approve_user_route(user_id: str, db: Session = Depends(get_db)):
    """
    Approve a pending doctor or lab registration.

    The user is not logged in by this call; they sign in with their own credentials.
    """
    user = approve_user(db, user_id)
    return success_response({"user": user}, "User approved successfully")


@router.put("/approvals/{user_id}/reject", summary="Reject Doctor/Lab Account")
def reject_user_route(user_id: str, db: Session = Depends(get_db)):
    """Reject a pending doctor or lab registration."""
    user = reject_user(db, user_id)
    return success_response({"user": user}, "User rejected successfully")


@router.get("/users", summary="List Non-Admin Users")
def list_users_route(
    role: Optional[UserRole] = Query(None, description="Filter by role"),
    approval_status: Optional[ApprovalStatus] = Query(None, description="Filter by approval status"),
    db: Session = Depends(get_db),
):
    return success_response({"users": list_users(db, role=role, approval_status=approval_status)})


@router.get("/dashboard/stats", summary="Admin Dashboard Statistics")
def dashboard_stats_route(db: Session = Depends(get_db)):
    return success_response(get_dashboard_stats(db))
