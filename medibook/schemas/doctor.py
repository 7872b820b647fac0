from pydantic import EmailStr, Field
from typing import List, Optional

from .common import CamelModel


class AvailabilitySlot(CamelModel):
    day: str = Field(..., min_length=1)
    start_time: str = Field(..., min_length=1)
    end_time: str = Field(..., min_length=1)
    location: str = "Office"


class DoctorRegister(CamelModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    password: str = Field(..., min_length=1)
    specialty: str = Field(..., min_length=1)
    experience: int = Field(..., gt=0)
    location: str = Field(..., min_length=1)
    availability: List[AvailabilitySlot]


class DoctorResponse(CamelModel):
    id: int
    name: str
    email: EmailStr
    specialty: str
    experience: int
    location: str
    availability: List[AvailabilitySlot] = []


class DoctorRegisterResponse(CamelModel):
    message: str
    doctor: DoctorResponse


class SetAvailabilityRequest(CamelModel):
    doctor_id: Optional[int] = None
    availability: Optional[List[AvailabilitySlot]] = None


class DoctorAvailability(CamelModel):
    id: int
    availability: List[AvailabilitySlot]


class SetAvailabilityResponse(CamelModel):
    message: str
    doctor: DoctorAvailability


class AvailabilityResponse(CamelModel):
    message: str
    availability: List[AvailabilitySlot]


class DoctorSearchFilters(CamelModel):
    specialty: Optional[str] = None
    location: Optional[str] = None
    name: Optional[str] = None


class DoctorSearchResponse(CamelModel):
    message: str
    doctors: List[DoctorResponse]
