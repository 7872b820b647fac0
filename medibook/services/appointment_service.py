import logging
from dataclasses import dataclass
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .base import BaseService
from ..models import Appointment, AppointmentStatus, Doctor, Patient
from ..core.exceptions import (
    AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from ..core.security import TokenPayload, UserRole
from ..schemas.appointment import AppointmentCancel, AppointmentCreate, AppointmentResponse

logger = logging.getLogger(__name__)

# Row lock on the patient that leaves foreign key checks from other inserts unblocked
PATIENT_ROW_LOCK = {"key_share": True}


@dataclass
class CancelledAppointment:
    """What is left to notify once an appointment row is gone."""
    appointment_id: int
    patient_email: str
    time_slot: str


class AppointmentService(BaseService):
    def book(self, appointment_data: AppointmentCreate) -> AppointmentResponse:
        """Book a doctor's time slot for a patient.

        The insert is unconditional: the unique (doctor_id, time_slot)
        constraint rejects a second booking of the same slot, including one
        racing in from a concurrent request. The patient's back-reference is
        updated in the same transaction.
        """
        try:
            doctor = self.db.get(Doctor, appointment_data.doctor_id)
            patient = self.db.get(Patient, appointment_data.patient_id)
        except SQLAlchemyError as e:
            raise self._database_failure(e, "loading booking participants")

        if not doctor:
            raise NotFoundError("Doctor not found.")
        if not patient:
            raise NotFoundError("Patient not found.")

        appointment = Appointment(
            doctor_id=doctor.id,
            patient_id=patient.id,
            time_slot=appointment_data.time_slot,
            status=AppointmentStatus.BOOKED.value,
        )

        try:
            self.db.add(appointment)
            self.db.flush()
            self._lock_patient(patient)
            patient.appointment_ids.append(appointment.id)
            self.db.commit()
            self.db.refresh(appointment)
        except IntegrityError:
            self.db.rollback()
            logger.info(
                f"Rejected booking of doctor {appointment_data.doctor_id} slot "
                f"'{appointment_data.time_slot}': already booked"
            )
            raise ConflictError("Time slot already booked!")
        except SQLAlchemyError as e:
            raise self._database_failure(e, "booking appointment")

        logger.info(
            f"Booked appointment {appointment.id}: doctor {doctor.id}, "
            f"patient {patient.id}, slot '{appointment.time_slot}'"
        )
        return AppointmentResponse(
            id=appointment.id,
            doctor_id=appointment.doctor_id,
            patient_id=appointment.patient_id,
            patient_name=patient.name,
            patient_email=patient.email,
            time_slot=appointment.time_slot,
            status=appointment.status,
        )

    def cancel(self, cancel_data: AppointmentCancel, token: TokenPayload) -> CancelledAppointment:
        """Delete an appointment and detach it from its patient in one transaction."""
        if cancel_data.appointment_id is None:
            raise ValidationError("Appointment ID required.")

        try:
            appointment = self.db.get(Appointment, cancel_data.appointment_id)
        except SQLAlchemyError as e:
            raise self._database_failure(e, f"loading appointment {cancel_data.appointment_id}")

        if not appointment:
            raise NotFoundError("Appointment not found.")

        self._check_owner(appointment, token)

        try:
            patient = self.db.get(Patient, appointment.patient_id)
            cancelled = CancelledAppointment(
                appointment_id=appointment.id,
                patient_email=patient.email,
                time_slot=appointment.time_slot,
            )

            self.db.delete(appointment)
            self.db.flush()
            self._lock_patient(patient)
            self._detach(patient, cancelled.appointment_id)
            self.db.commit()
        except SQLAlchemyError as e:
            raise self._database_failure(e, f"cancelling appointment {cancel_data.appointment_id}")

        logger.info(f"Cancelled appointment {cancelled.appointment_id} (slot '{cancelled.time_slot}')")
        return cancelled

    def _check_owner(self, appointment: Appointment, token: TokenPayload) -> None:
        if token.role == UserRole.PATIENT and token.patient_id == appointment.patient_id:
            return
        if token.role == UserRole.DOCTOR and token.doctor_id == appointment.doctor_id:
            return

        logger.warning(
            f"Token {token.role.value}:{token.subject_id} tried to cancel appointment {appointment.id}"
        )
        raise AuthorizationError("Not authorized to cancel this appointment.")

    def _lock_patient(self, patient: Patient) -> None:
        """Reload the patient row for writing, once this transaction holds a write.

        Concurrent bookings for the same patient then append to the latest
        back-reference list instead of a stale copy. The appointment insert
        already holds a KEY SHARE lock on the patient row through its foreign
        key, so the lock taken here must not conflict with KEY SHARE (FOR NO
        KEY UPDATE on PostgreSQL); a plain FOR UPDATE would deadlock two such
        bookings against each other.
        """
        self.db.refresh(patient, with_for_update=PATIENT_ROW_LOCK)

    def _detach(self, patient: Patient, appointment_id: int) -> None:
        """Remove an appointment from the patient's back-reference list."""
        if appointment_id in patient.appointment_ids:
            patient.appointment_ids.remove(appointment_id)
        self.db.flush()
