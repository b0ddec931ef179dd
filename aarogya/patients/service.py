"""
Patient lookup service for doctors and patients.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..auth.exceptions import PermissionDeniedException, ResourceNotFoundException, ValidationException
from ..auth.models import User, UserRole, isoformat_utc
from ..core.security import TokenIdentity
from .models import PatientProfile

# Set up logging
logger = logging.getLogger(__name__)


def serialize_patient(profile: PatientProfile) -> Dict[str, Any]:
    user = profile.user
    return {
        "id": profile.id,
        "user_id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "age": profile.age,
        "gender": profile.gender,
        "created_at": isoformat_utc(profile.created_at),
    }


def _like_pattern(query: str) -> str:
    escaped = query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def search_patients(db: Session, query: str) -> List[Dict[str, Any]]:
    """
    Search patients by name, email or phone (case-insensitive substring).

    Args:
        db: Database session
        query: Search text

    Returns:
        List of patients ordered by name

    Raises:
        ValidationException: If the query is empty
    """
    query = (query or "").strip()
    if not query:
        raise ValidationException("Search query is required")

    pattern = _like_pattern(query)
    profiles = (
        db.query(PatientProfile)
        .join(User, PatientProfile.user_id == User.id)
        .filter(
            User.role == UserRole.PATIENT,
            or_(
                User.name.ilike(pattern, escape="\\"),
                User.email.ilike(pattern, escape="\\"),
                User.phone.ilike(pattern, escape="\\"),
            ),
        )
        .order_by(User.name.asc())
        .all()
    )
    return [serialize_patient(profile) for profile in profiles]


def get_patient(db: Session, identity: TokenIdentity, patient_id: str) -> Dict[str, Any]:
    """
    Get a patient profile by its id.

    Doctors may read any patient; a patient may only read their own profile.

    Raises:
        ResourceNotFoundException: If no patient profile has that id
        PermissionDeniedException: If a patient asks for someone else's profile
    """
    profile = db.get(PatientProfile, patient_id)
    if not profile:
        raise ResourceNotFoundException("Patient not found")

    if identity.role == UserRole.PATIENT and profile.user_id != identity.id:
        logger.warning(f"Patient {identity.id} denied access to patient profile {patient_id}")
        raise PermissionDeniedException()

    return serialize_patient(profile)
