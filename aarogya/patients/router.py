"""
Patient routes - search for doctors and profile lookup.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..database import get_db
from ..auth.dependencies import require_doctor, require_doctor_or_patient
from ..core.responses import success_response
from ..core.security import TokenIdentity
from .service import get_patient, search_patients

router = APIRouter()


@router.get("/search", summary="Search Patients (Doctors Only)")
def search_patients_route(
    query: str = Query("", description="Name, email or phone fragment"),
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(require_doctor),
):
    return success_response(search_patients(db, query))


@router.get("/{patient_id}", summary="Get Patient Details")
def get_patient_route(
    patient_id: str,
    db: Session = Depends(get_db),
    identity: TokenIdentity = Depends(require_doctor_or_patient),
):
    """
    Get a patient profile.

    Doctors can view any patient; patients can only view themselves.
    """
    return success_response(get_patient(db, identity, patient_id))
