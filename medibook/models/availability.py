from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship

from ..core.database import Base


class Availability(Base):
    """One consultation window offered by a doctor."""
    __tablename__ = "availability"

    id = Column(Integer, primary_key=True)
    doctor_id = Column(Integer, ForeignKey("doctors.id", ondelete="CASCADE"), nullable=False, index=True)

    # Order of the entry within the doctor's list
    position = Column(Integer, nullable=False, default=0)

    day = Column(String(20), nullable=False)
    start_time = Column(String(20), nullable=False)
    end_time = Column(String(20), nullable=False)
    location = Column(String(255), nullable=False, default="Office")

    doctor = relationship("Doctor", back_populates="availability")

    def __repr__(self):
        return f"<Availability(doctor_id={self.doctor_id}, day='{self.day}', {self.start_time}-{self.end_time})>"
