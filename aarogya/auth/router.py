"""
Authentication routes for the diagnostics portal.
"""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..core.responses import success_response
from ..core.security import TokenIdentity
from .dependencies import get_current_identity
from .schemas import AdminLogin, ProfileUpdate, RegistrationRequest, UserLogin
from .service import admin_login, get_profile, login_user, register_user, update_profile

# Set up logging
logger = logging.getLogger(__name__)

router = APIRouter()

PENDING_APPROVAL_MESSAGE = (
    "Your account is pending approval. You will be able to login once approved by admin."
)


def _session_payload(result: dict) -> dict:
    data = {"user": result["user"]}
    if result.get("token"):
        data["token"] = result["token"]
    return data


@router.post("/register", status_code=status.HTTP_201_CREATED, summary="Self-Registration (Patient, Doctor or Lab)")
def register_route(payload: RegistrationRequest, db: Session = Depends(get_db)):
    """
    Registration endpoint.

    Patients are approved immediately and receive a token. Doctors and labs
    are created pending admin approval and receive no token.

    Args:
        payload: Registration data discriminated by role
        db: Database session

    Returns:
        Envelope with the created user and, for patients, a token
    """
    result = register_user(db, **payload.model_dump())
    if result["token"] is None:
        return success_response(_session_payload(result), PENDING_APPROVAL_MESSAGE)
    return success_response(_session_payload(result))


@router.post("/login", summary="User Login")
def login_route(credentials: UserLogin, db: Session = Depends(get_db)):
    """
    Role-scoped login endpoint.

    Pending and rejected doctor/lab accounts are refused with distinct errors
    so the client can tell the user whether to wait or contact support.
    """
    result = login_user(db, credentials.phone, credentials.password, credentials.role)
    return success_response(_session_payload(result))


@router.post("/admin/login", summary="Admin Login")
def admin_login_route(credentials: AdminLogin, db: Session = Depends(get_db)):
    result = admin_login(db, credentials.username, credentials.password)
    return success_response(_session_payload(result))


@router.get("/profile", summary="Get Current User Profile")
def get_profile_route(
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_identity),
):
    """Get the caller's own user record merged with their role fields."""
    return success_response({"user": get_profile(db, identity)})


@router.put("/profile", summary="Update Current User Profile")
def update_profile_route(
    changes: ProfileUpdate,
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(get_current_identity),
):
    """
    Update the caller's name, phone and role-specific fields.

    Only fields present in the request body are changed.
    """
    user = update_profile(db, identity, changes.model_dump(exclude_unset=True))
    return success_response({"user": user})
