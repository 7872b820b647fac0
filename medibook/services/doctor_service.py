import logging
from typing import List
from sqlalchemy.exc import SQLAlchemyError

from .base import BaseService
from ..models import Availability, Doctor
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.security import TokenPayload, UserRole
from ..schemas.doctor import DoctorSearchFilters, SetAvailabilityRequest

logger = logging.getLogger(__name__)


class DoctorService(BaseService):
    def get_doctor(self, doctor_id: int) -> Doctor:
        try:
            doctor = self.db.get(Doctor, doctor_id)
        except SQLAlchemyError as e:
            raise self._database_failure(e, f"loading doctor {doctor_id}")

        if not doctor:
            raise NotFoundError("Doctor not found.")
        return doctor

    def get_availability(self, doctor_id: int) -> List[Availability]:
        return list(self.get_doctor(doctor_id).availability)

    def set_availability(self, request: SetAvailabilityRequest, token: TokenPayload) -> Doctor:
        """Replace a doctor's whole availability list.

        Only the doctor named in the token may edit their own schedule.
        """
        if request.doctor_id is None or request.availability is None:
            raise ValidationError("Invalid request format.")

        if token.role != UserRole.DOCTOR or token.doctor_id != request.doctor_id:
            logger.warning(
                f"Token {token.role.value}:{token.subject_id} tried to edit availability of doctor {request.doctor_id}"
            )
            raise AuthorizationError("Not authorized to modify this doctor's availability.")

        doctor = self.get_doctor(request.doctor_id)

        try:
            doctor.availability = [
                Availability(position=index, **slot.model_dump())
                for index, slot in enumerate(request.availability)
            ]
            self.db.commit()
            self.db.refresh(doctor)
        except SQLAlchemyError as e:
            raise self._database_failure(e, f"updating availability of doctor {doctor.id}")

        logger.info(f"Doctor {doctor.id} set {len(doctor.availability)} availability entries")
        return doctor

    def search(self, filters: DoctorSearchFilters) -> List[Doctor]:
        """List doctors, optionally narrowed by specialty, location and name."""
        query = self.db.query(Doctor)
        if filters.specialty:
            query = query.filter(Doctor.specialty.ilike(f"%{filters.specialty}%"))
        if filters.location:
            query = query.filter(Doctor.location.ilike(f"%{filters.location}%"))
        if filters.name:
            query = query.filter(Doctor.name.ilike(f"%{filters.name}%"))

        try:
            return query.order_by(Doctor.id).all()
        except SQLAlchemyError as e:
            raise self._database_failure(e, "searching doctors")
