from .availability import Availability
from .doctor import Doctor
from .patient import Patient
from .appointment import Appointment, AppointmentStatus

__all__ = ["Availability", "Doctor", "Patient", "Appointment", "AppointmentStatus"]
