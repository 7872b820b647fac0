from fastapi import APIRouter, Depends

from ..deps import get_current_token, get_current_doctor_token, get_doctor_service
from ...core.security import TokenPayload
from ...services.doctor_service import DoctorService
from ...schemas.doctor import (
    AvailabilityResponse, AvailabilitySlot, DoctorAvailability, DoctorResponse,
    DoctorSearchFilters, DoctorSearchResponse, SetAvailabilityRequest,
    SetAvailabilityResponse
)

router = APIRouter(tags=["Doctors"])


@router.get("/doctor/{doctor_id}", response_model=AvailabilityResponse)
def get_availability(
    doctor_id: int,
    _: TokenPayload = Depends(get_current_token),
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    """Get a doctor's availability."""
    availability = doctor_service.get_availability(doctor_id)
    return AvailabilityResponse(
        message="Availability fetched successfully.",
        availability=[AvailabilitySlot.model_validate(slot) for slot in availability],
    )


@router.post("/setAvailability", response_model=SetAvailabilityResponse)
def set_availability(
    request: SetAvailabilityRequest,
    token: TokenPayload = Depends(get_current_doctor_token),
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    """Replace the authenticated doctor's availability."""
    doctor = doctor_service.set_availability(request, token)
    return SetAvailabilityResponse(
        message="Availability updated successfully!",
        doctor=DoctorAvailability.model_validate(doctor),
    )


@router.get("/searchDoctors", response_model=DoctorSearchResponse)
def search_doctors(
    filters: DoctorSearchFilters = Depends(),
    doctor_service: DoctorService = Depends(get_doctor_service)
):
    """List doctors, optionally filtered by specialty, location or name."""
    doctors = doctor_service.search(filters)
    return DoctorSearchResponse(
        message="Doctors fetched successfully.",
        doctors=[DoctorResponse.model_validate(doctor) for doctor in doctors],
    )
