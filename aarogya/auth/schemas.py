"""
Account Schemas - Pydantic models for request validation.

Role-specific attributes are modelled as a tagged union discriminated by
``role`` so each registration variant carries exactly its own fields.
"""
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, TypeAdapter

from .models import UserRole


# Role-specific field sets
class PatientFields(BaseModel):
    """Patient demographics: age and gender."""
    role: Literal["patient"]
    age: Optional[int] = Field(None, ge=0, le=150, description="Patient's age in years")
    gender: Optional[str] = Field(None, max_length=50, description="Patient's gender")


class DoctorFields(BaseModel):
    """Doctor professional information."""
    role: Literal["doctor"]
    specialization: Optional[str] = Field(None, max_length=255, description="Doctor's medical specialization")


class LabFields(BaseModel):
    """Diagnostic lab location."""
    role: Literal["lab"]
    address: Optional[str] = Field(None, max_length=512, description="Lab's street address")


RoleFields = Annotated[Union[PatientFields, DoctorFields, LabFields], Field(discriminator="role")]

role_fields_adapter = TypeAdapter(RoleFields)


class RegistrationBase(BaseModel):
    """
    Fields common to every self-registration

    Fields:
    - name: Full name
    - email: Unique email address
    - phone: Unique phone number
    - password: Plain text password (hashed before storage)
    """
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    phone: str = Field(..., min_length=1, max_length=32)
    password: str = Field(..., min_length=1)


class PatientRegistration(RegistrationBase, PatientFields):
    """Patient self-registration; approved immediately."""


class DoctorRegistration(RegistrationBase, DoctorFields):
    """Doctor registration; pending until an admin decides."""


class LabRegistration(RegistrationBase, LabFields):
    """Lab registration; pending until an admin decides."""


RegistrationRequest = Annotated[
    Union[PatientRegistration, DoctorRegistration, LabRegistration],
    Field(discriminator="role"),
]


class UserLogin(BaseModel):
    """
    User Login Schema - role-scoped login

    Fields:
    - phone: Account phone number
    - password: Plain text password
    - role: Role the user signs in as
    """
    phone: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    role: UserRole


class AdminLogin(BaseModel):
    """Admin Login Schema - admins sign in with their name."""
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    """
    Profile Update Schema - fields a user may change on their own account

    Only the role-specific fields that match the caller's role are accepted;
    email and role cannot be changed.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    phone: Optional[str] = Field(None, min_length=1, max_length=32)
    specialization: Optional[str] = Field(None, max_length=255)
    address: Optional[str] = Field(None, max_length=512)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = Field(None, max_length=50)
