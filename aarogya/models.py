"""
Import every ORM model so the declarative registry is complete before use.
"""
from .auth.models import User, UserRole, ApprovalStatus  # noqa: F401
from .doctors.models import DoctorProfile  # noqa: F401
from .labs.models import LabProfile  # noqa: F401
from .patients.models import PatientProfile  # noqa: F401
from .database import Base  # noqa: F401
