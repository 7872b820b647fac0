from fastapi import APIRouter, Depends, status

from ..deps import get_auth_service
from ...services.auth_service import AuthService
from ...schemas.auth import UserLogin, LoginResponse
from ...schemas.doctor import DoctorRegister, DoctorRegisterResponse, DoctorResponse
from ...schemas.patient import PatientRegister, PatientRegisterResponse, PatientResponse

router = APIRouter(tags=["Authentication"])


@router.post(
    "/registerDoctor",
    response_model=DoctorRegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_doctor(
    doctor_data: DoctorRegister,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Register a new doctor."""
    doctor = auth_service.register_doctor(doctor_data)
    return DoctorRegisterResponse(
        message="Doctor registered successfully!",
        doctor=DoctorResponse.model_validate(doctor),
    )


@router.post(
    "/registerPatient",
    response_model=PatientRegisterResponse,
    status_code=status.HTTP_201_CREATED,
)
def register_patient(
    patient_data: PatientRegister,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Register a new patient."""
    patient = auth_service.register_patient(patient_data)
    return PatientRegisterResponse(
        message="Patient registered successfully!",
        patient=PatientResponse.model_validate(patient),
    )


@router.post("/loginDoctor", response_model=LoginResponse, response_model_exclude_none=True)
def login_doctor(
    login_data: UserLogin,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Authenticate a doctor and return a session token."""
    return auth_service.login_doctor(login_data)


@router.post("/loginPatient", response_model=LoginResponse, response_model_exclude_none=True)
def login_patient(
    login_data: UserLogin,
    auth_service: AuthService = Depends(get_auth_service)
):
    """Authenticate a patient and return a session token."""
    return auth_service.login_patient(login_data)
