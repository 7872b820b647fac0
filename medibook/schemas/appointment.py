from pydantic import EmailStr, Field
from typing import Optional

from .common import CamelModel


class AppointmentCreate(CamelModel):
    doctor_id: int
    patient_id: int
    patient_name: str = Field(..., min_length=1)
    patient_email: EmailStr
    time_slot: str = Field(..., min_length=1)


class AppointmentCancel(CamelModel):
    appointment_id: Optional[int] = None


class AppointmentResponse(CamelModel):
    id: int
    doctor_id: int
    patient_id: int
    patient_name: str
    patient_email: EmailStr
    time_slot: str
    status: str


class AppointmentBookedResponse(CamelModel):
    message: str
    appointment: AppointmentResponse
