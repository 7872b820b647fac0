from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from enum import Enum

from ..core.database import Base


class AppointmentStatus(str, Enum):
    BOOKED = "Booked"


class Appointment(Base):
    __tablename__ = "appointments"
    __table_args__ = (
        # A doctor's slot can only be held once; the insert itself reports
        # the conflict
        UniqueConstraint("doctor_id", "time_slot", name="uq_appointments_doctor_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)

    # Relationships
    doctor_id = Column(Integer, ForeignKey("doctors.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("patients.id"), nullable=False, index=True)

    # Appointment details
    time_slot = Column(String(100), nullable=False)
    status = Column(String(20), nullable=False, default=AppointmentStatus.BOOKED.value)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    patient = relationship("Patient", back_populates="appointments")
    doctor = relationship("Doctor", back_populates="appointments")

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, slot='{self.time_slot}')>"
