from typing import Optional

from .common import CamelModel
from .doctor import DoctorResponse
from .patient import PatientResponse


class UserLogin(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(CamelModel):
    success: bool = True
    message: str
    token: str
    doctor: Optional[DoctorResponse] = None
    patient: Optional[PatientResponse] = None
