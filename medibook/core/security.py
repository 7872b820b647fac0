from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi.security import HTTPBearer
from pydantic import BaseModel, ConfigDict, Field
from enum import Enum

from .config import settings

# Password hashing
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

# Bearer scheme; missing headers are reported by the auth dependencies
security = HTTPBearer(auto_error=False)


class UserRole(str, Enum):
    DOCTOR = "doctor"
    PATIENT = "patient"


class TokenPayload(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    sub: Optional[str] = None
    role: Optional[UserRole] = None
    doctor_id: Optional[int] = Field(default=None, alias="doctorId")
    patient_id: Optional[int] = Field(default=None, alias="patientId")
    iat: Optional[int] = None
    exp: Optional[int] = None

    @property
    def subject_id(self) -> Optional[int]:
        """Identifier of the authenticated doctor or patient."""
        if self.role == UserRole.DOCTOR:
            return self.doctor_id
        if self.role == UserRole.PATIENT:
            return self.patient_id
        return None


# Password utilities
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a plain password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Generate password hash."""
    return pwd_context.hash(password)


# JWT utilities
def create_access_token(
    subject_id: int,
    role: UserRole,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a signed session token for a doctor or patient.

    The payload carries ``doctorId`` or ``patientId`` depending on the role,
    alongside the standard ``sub``, ``iat`` and ``exp`` claims.
    """
    issued_at = datetime.now(timezone.utc)
    if expires_delta:
        expire = issued_at + expires_delta
    else:
        expire = issued_at + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    id_claim = "doctorId" if role == UserRole.DOCTOR else "patientId"
    to_encode = {
        "sub": str(subject_id),
        "role": role.value,
        id_claim: subject_id,
        "iat": issued_at,
        "exp": expire,
    }

    encoded_jwt = jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )
    return encoded_jwt


def verify_token(token: str) -> Optional[TokenPayload]:
    """Verify and decode JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

        return TokenPayload(**payload)

    except (JWTError, ValueError):
        return None
