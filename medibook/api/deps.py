from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from typing import Optional

from ..core.config import Settings, get_settings
from ..core.database import get_db
from ..core.exceptions import AuthenticationError, AuthorizationError
from ..core.security import security, verify_token, TokenPayload, UserRole
from ..services.appointment_service import AppointmentService
from ..services.auth_service import AuthService
from ..services.doctor_service import DoctorService
from ..services.notification_service import NotificationService


async def get_current_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> TokenPayload:
    """Extract and verify the session token from the Authorization header."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access denied")

    token_payload = verify_token(credentials.credentials)
    if not token_payload or token_payload.subject_id is None:
        raise AuthorizationError("Invalid token")

    return token_payload


async def get_current_doctor_token(
    token_payload: TokenPayload = Depends(get_current_token)
) -> TokenPayload:
    """Require a doctor session."""
    if token_payload.role != UserRole.DOCTOR:
        raise AuthorizationError("Doctor access required")
    return token_payload


# Service dependencies
def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    return AuthService(db)


def get_doctor_service(db: Session = Depends(get_db)) -> DoctorService:
    return DoctorService(db)


def get_appointment_service(db: Session = Depends(get_db)) -> AppointmentService:
    return AppointmentService(db)


def get_notification_service(
    settings: Settings = Depends(get_settings)
) -> NotificationService:
    return NotificationService(settings)
