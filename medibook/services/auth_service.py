import logging
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .base import BaseService
from ..models import Availability, Doctor, Patient
from ..core.exceptions import AuthenticationError, ConflictError, ValidationError
from ..core.security import verify_password, get_password_hash, create_access_token, UserRole
from ..schemas.auth import UserLogin, LoginResponse
from ..schemas.doctor import DoctorRegister, DoctorResponse
from ..schemas.patient import PatientRegister, PatientResponse

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    """Accounts are keyed by the lowercased address, on registration and login alike."""
    return email.strip().lower()


class AuthService(BaseService):
    def register_doctor(self, doctor_data: DoctorRegister) -> Doctor:
        """Register a new doctor together with the initial availability."""
        email = normalize_email(doctor_data.email)
        if self._email_taken(Doctor, email):
            raise ConflictError("Doctor with this email already exists.")

        doctor = Doctor(
            name=doctor_data.name,
            email=email,
            password_hash=get_password_hash(doctor_data.password),
            specialty=doctor_data.specialty,
            experience=doctor_data.experience,
            location=doctor_data.location,
            availability=[
                Availability(position=index, **slot.model_dump())
                for index, slot in enumerate(doctor_data.availability)
            ],
        )
        self._save(doctor, "Doctor with this email already exists.")

        logger.info(f"Registered doctor {doctor.id} ({doctor.email})")
        return doctor

    def register_patient(self, patient_data: PatientRegister) -> Patient:
        """Register a new patient."""
        email = normalize_email(patient_data.email)
        if self._email_taken(Patient, email):
            raise ConflictError("Patient with this email already exists.")

        patient = Patient(
            name=patient_data.name,
            email=email,
            password_hash=get_password_hash(patient_data.password),
            age=patient_data.age,
            gender=patient_data.gender,
            phone=patient_data.phone,
            address=patient_data.address,
            appointment_ids=[],
        )
        self._save(patient, "Patient with this email already exists.")

        logger.info(f"Registered patient {patient.id} ({patient.email})")
        return patient

    def login_doctor(self, login_data: UserLogin) -> LoginResponse:
        """Authenticate a doctor and issue a session token."""
        doctor = self._authenticate(Doctor, login_data, "Doctor not found.")
        token = create_access_token(doctor.id, UserRole.DOCTOR)

        logger.info(f"Doctor {doctor.id} logged in")
        return LoginResponse(
            message="Doctor logged in successfully!",
            token=token,
            doctor=DoctorResponse.model_validate(doctor),
        )

    def login_patient(self, login_data: UserLogin) -> LoginResponse:
        """Authenticate a patient and issue a session token."""
        patient = self._authenticate(Patient, login_data, "Patient not found.")
        token = create_access_token(patient.id, UserRole.PATIENT)

        logger.info(f"Patient {patient.id} logged in")
        return LoginResponse(
            message="Patient logged in successfully!",
            token=token,
            patient=PatientResponse.model_validate(patient),
        )

    def _authenticate(self, model, login_data: UserLogin, not_found: str):
        if not login_data.email or not login_data.password:
            raise ValidationError("Email and password required.")

        try:
            account = self.db.query(model).filter(model.email == normalize_email(login_data.email)).first()
        except SQLAlchemyError as e:
            raise self._database_failure(e, "logging in")

        if not account:
            raise AuthenticationError(not_found)

        if not verify_password(login_data.password, account.password_hash):
            logger.warning(f"Failed login for {model.__name__.lower()} {account.id}")
            raise AuthenticationError("Invalid password.")

        return account

    def _email_taken(self, model, email: str) -> bool:
        try:
            return self.db.query(model.id).filter(model.email == email).first() is not None
        except SQLAlchemyError as e:
            raise self._database_failure(e, "checking email")

    def _save(self, account, conflict_message: str):
        """Persist a new account; the unique email index settles registration races."""
        try:
            self.db.add(account)
            self.db.commit()
            self.db.refresh(account)
        except IntegrityError:
            self.db.rollback()
            raise ConflictError(conflict_message)
        except SQLAlchemyError as e:
            raise self._database_failure(e, "registering account")
