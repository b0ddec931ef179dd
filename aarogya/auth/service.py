"""
Account lifecycle service: registration, login, admin login and profile access.
"""
import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from pydantic import ValidationError
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.security import TokenIdentity, create_access_token, hash_password, verify_password
from ..doctors.models import DoctorProfile
from ..labs.models import LabProfile
from ..patients.models import PatientProfile
from .exceptions import (
    AccountNotFoundException,
    AccountRejectedException,
    ConflictException,
    InvalidCredentialsException,
    PendingApprovalException,
    ResourceNotFoundException,
    ValidationException,
)
from .models import (
    APPROVAL_REQUIRED_ROLES,
    SELF_REGISTRATION_ROLES,
    ApprovalStatus,
    User,
    UserRole,
    isoformat_utc,
)
from .schemas import DoctorFields, LabFields, PatientFields, role_fields_adapter

# Set up logging
logger = logging.getLogger(__name__)

# Role-specific fields a user may change on their own profile
UPDATABLE_ROLE_FIELDS = {
    UserRole.PATIENT: {"age", "gender"},
    UserRole.DOCTOR: {"specialization"},
    UserRole.LAB: {"address"},
    UserRole.ADMIN: set(),
}

UPDATABLE_USER_FIELDS = {"name", "phone"}


def role_profile_fields(user: User) -> Dict[str, Any]:
    """
    Get the role-specific fields of a user as a flat dict.

    Args:
        user: User with its profile relationship loaded

    Returns:
        Dict with the fields of the user's role variant (empty for admins)
    """
    profile = user.role_profile
    if user.role == UserRole.DOCTOR:
        return {"specialization": profile.specialization if profile else None}
    if user.role == UserRole.LAB:
        return {"address": profile.address if profile else None}
    if user.role == UserRole.PATIENT:
        return {
            "age": profile.age if profile else None,
            "gender": profile.gender if profile else None,
        }
    if user.role == UserRole.ADMIN:
        return {}
    raise ValueError(f"Unhandled role: {user.role}")


def serialize_user(user: User) -> Dict[str, Any]:
    """Public representation of a user merged with its role fields. Never includes the hash."""
    data = {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "phone": user.phone,
        "role": user.role.value,
        "approval_status": user.approval_status.value,
        "created_at": isoformat_utc(user.created_at),
        "updated_at": isoformat_utc(user.updated_at),
    }
    data.update(role_profile_fields(user))
    return data


def _require_fields(**fields: Any) -> None:
    missing = [
        name for name, value in fields.items()
        if value is None or (isinstance(value, str) and not value.strip())
    ]
    if missing:
        raise ValidationException(f"Missing required fields: {', '.join(missing)}")


def _require_present(**fields: Any) -> None:
    missing = [name for name, value in fields.items() if value is None or value == ""]
    if missing:
        raise ValidationException(f"Missing required fields: {', '.join(missing)}")


def _parse_role(role: Union[UserRole, str], allowed: Iterable[UserRole]) -> UserRole:
    try:
        parsed = UserRole(role)
    except ValueError:
        raise ValidationException(f"Invalid role: {role}")
    if parsed not in allowed:
        raise ValidationException(f"Role '{parsed.value}' is not allowed here")
    return parsed


def _format_validation_error(exc: ValidationError) -> str:
    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error["loc"][1:]) or "payload"
        parts.append(f"{location}: {error['msg']}")
    return "; ".join(parts)


def parse_role_fields(role: UserRole, role_fields: Mapping[str, Any]) -> Union[PatientFields, DoctorFields, LabFields]:
    """
    Validate the role-specific registration fields into their tagged variant.

    Raises:
        ValidationException: If a field has the wrong type or value
    """
    try:
        return role_fields_adapter.validate_python({**role_fields, "role": role.value})
    except ValidationError as e:
        raise ValidationException(_format_validation_error(e))


def build_role_profile(user_id: str, fields: Union[PatientFields, DoctorFields, LabFields]):
    """Create the extension row matching a role variant."""
    if isinstance(fields, DoctorFields):
        return DoctorProfile(user_id=user_id, specialization=fields.specialization)
    if isinstance(fields, LabFields):
        return LabProfile(user_id=user_id, address=fields.address)
    if isinstance(fields, PatientFields):
        return PatientProfile(user_id=user_id, age=fields.age, gender=fields.gender)
    raise ValueError(f"Unhandled role fields: {type(fields).__name__}")


def initial_approval_status(role: UserRole) -> ApprovalStatus:
    """Patients are approved on registration; doctors and labs wait for an admin."""
    if role in APPROVAL_REQUIRED_ROLES:
        return ApprovalStatus.PENDING
    return ApprovalStatus.APPROVED


def register_user(
    db: Session,
    name: str,
    email: str,
    phone: str,
    password: str,
    role: Union[UserRole, str],
    **role_fields: Any,
) -> Dict[str, Any]:
    """
    Register a new patient, doctor or lab account.

    The user row and its role profile are written in one transaction. A token
    is issued only when the account is approved on creation (patients).

    Args:
        db: Database session
        name: Full name
        email: Email address (unique)
        phone: Phone number (unique)
        password: Plain text password
        role: patient, doctor or lab
        **role_fields: specialization (doctor), address (lab), age/gender (patient)

    Returns:
        Dict with the public user and a token (None while approval is pending)

    Raises:
        ValidationException: If required fields are missing or malformed
        ConflictException: If the email or phone is already registered
    """
    _require_fields(name=name, email=email, phone=phone, password=password, role=role)
    role = _parse_role(role, SELF_REGISTRATION_ROLES)
    fields = parse_role_fields(role, role_fields)

    logger.info(f"Registration attempt for phone {phone} as {role.value}")

    existing_user = db.query(User).filter(or_(User.email == email, User.phone == phone)).first()
    if existing_user:
        logger.warning(f"Registration failed: email or phone already registered ({phone})")
        raise ConflictException()

    user = User(
        name=name,
        email=email,
        phone=phone,
        password_hash=hash_password(password),
        role=role,
        approval_status=initial_approval_status(role),
    )

    try:
        db.add(user)
        db.flush()
        db.add(build_role_profile(user.id, fields))
        db.commit()
    except IntegrityError:
        # A concurrent registration won the unique index
        db.rollback()
        logger.warning(f"Registration failed: unique constraint violated for {phone}")
        raise ConflictException()
    except Exception:
        db.rollback()
        logger.exception(f"Registration failed for {phone}; transaction rolled back")
        raise

    db.refresh(user)
    logger.info(f"Account created: {user.id} ({role.value}, {user.approval_status.value})")

    token = None
    if user.approval_status == ApprovalStatus.APPROVED:
        token = create_access_token(user.id, user.role)

    return {"user": serialize_user(user), "token": token}


def login_user(
    db: Session,
    phone: str,
    password: str,
    role: Union[UserRole, str],
) -> Dict[str, Any]:
    """
    Authenticate a patient, doctor or lab and generate an access token.

    The lookup is keyed by (phone, role): the right phone with the wrong role
    is reported exactly like an unknown phone.

    Args:
        db: Database session
        phone: Account phone number
        password: Plain text password
        role: Role the user signs in as

    Returns:
        Dict with the public user and an access token

    Raises:
        ValidationException: If fields are missing or role is admin
        AccountNotFoundException: If no account matches (phone, role)
        PendingApprovalException: If a doctor/lab account awaits approval
        AccountRejectedException: If a doctor/lab account was rejected
        InvalidCredentialsException: If the password does not match
    """
    _require_present(phone=phone, password=password, role=role)
    if role in (UserRole.ADMIN, UserRole.ADMIN.value):
        raise ValidationException("Administrators must sign in through the admin login")
    role = _parse_role(role, SELF_REGISTRATION_ROLES)

    user = db.query(User).filter(User.phone == phone, User.role == role).first()
    if not user:
        logger.warning(f"Login failed: no {role.value} account for {phone}")
        raise AccountNotFoundException()

    if user.role in APPROVAL_REQUIRED_ROLES and user.approval_status != ApprovalStatus.APPROVED:
        logger.warning(f"Login refused: account {user.id} is {user.approval_status.value}")
        if user.approval_status == ApprovalStatus.REJECTED:
            raise AccountRejectedException()
        raise PendingApprovalException()

    if not verify_password(password, user.password_hash):
        logger.warning(f"Login failed: invalid credentials for {user.id}")
        raise InvalidCredentialsException()

    logger.info(f"Login successful: User {user.id} ({role.value})")
    return {
        "user": serialize_user(user),
        "token": create_access_token(user.id, user.role),
    }


def admin_login(db: Session, username: str, password: str) -> Dict[str, Any]:
    """
    Authenticate an administrator by name.

    Unknown names and wrong passwords fail identically.

    Raises:
        ValidationException: If username or password is missing
        InvalidCredentialsException: If the credentials do not match an admin
    """
    if not username or not password:
        raise ValidationException("Username and password are required")

    admin = db.query(User).filter(User.role == UserRole.ADMIN, User.name == username).first()
    if not admin or not verify_password(password, admin.password_hash):
        logger.warning(f"Admin login failed for '{username}'")
        raise InvalidCredentialsException("Invalid admin credentials")

    logger.info(f"Admin login successful: {admin.id}")
    return {
        "user": serialize_user(admin),
        "token": create_access_token(admin.id, admin.role),
    }


def phone_in_use(db: Session, phone: str, exclude_user_id: str) -> bool:
    return db.query(User).filter(User.phone == phone, User.id != exclude_user_id).first() is not None


def get_user_or_404(db: Session, user_id: str) -> User:
    user = db.get(User, user_id)
    if not user:
        raise ResourceNotFoundException("User not found")
    return user


def get_profile(db: Session, identity: TokenIdentity) -> Dict[str, Any]:
    """
    Get the caller's own profile.

    Raises:
        ResourceNotFoundException: If the account no longer exists
    """
    return serialize_user(get_user_or_404(db, identity.id))


def update_profile(db: Session, identity: TokenIdentity, changes: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Update the caller's own user row and role profile in one transaction.

    Args:
        db: Database session
        identity: Verified token identity of the caller
        changes: Fields to change (name, phone and the caller's role fields)

    Returns:
        Dict with the updated public user

    Raises:
        ValidationException: If a field does not apply to the caller's role or is emptied
        ConflictException: If the new phone belongs to another account
        ResourceNotFoundException: If the account no longer exists
    """
    user = get_user_or_404(db, identity.id)

    role_fields_allowed = UPDATABLE_ROLE_FIELDS[user.role]
    not_applicable = set(changes) - UPDATABLE_USER_FIELDS - role_fields_allowed
    if not_applicable:
        raise ValidationException(
            f"Fields not applicable to role {user.role.value}: {', '.join(sorted(not_applicable))}"
        )
    for field in UPDATABLE_USER_FIELDS & set(changes):
        value = changes[field]
        if value is None or not str(value).strip():
            raise ValidationException(f"{field} cannot be empty")

    phone = changes.get("phone")
    if phone and phone != user.phone:
        if phone_in_use(db, phone, user.id):
            raise ConflictException("Phone number already in use")

    role_changes = {key: value for key, value in changes.items() if key in role_fields_allowed}

    try:
        for field in UPDATABLE_USER_FIELDS & set(changes):
            setattr(user, field, changes[field])

        if role_changes:
            profile = user.role_profile
            if profile is None:
                profile = build_role_profile(user.id, parse_role_fields(user.role, role_changes))
                db.add(profile)
            else:
                for field, value in role_changes.items():
                    setattr(profile, field, value)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise ConflictException("Phone number already in use")
    except Exception:
        db.rollback()
        logger.exception(f"Profile update failed for {user.id}; transaction rolled back")
        raise

    db.refresh(user)
    logger.info(f"Profile updated: {user.id} ({', '.join(sorted(changes)) or 'no changes'})")
    return serialize_user(user)
