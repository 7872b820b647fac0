from fastapi import APIRouter, BackgroundTasks, Depends, status

from ..deps import get_appointment_service, get_current_token, get_notification_service
from ...core.security import TokenPayload
from ...services.appointment_service import AppointmentService
from ...services.notification_service import NotificationService
from ...schemas.appointment import (
    AppointmentBookedResponse, AppointmentCancel, AppointmentCreate
)
from ...schemas.common import MessageResponse

router = APIRouter(tags=["Appointments"])


@router.post(
    "/bookAppointment",
    response_model=AppointmentBookedResponse,
    status_code=status.HTTP_201_CREATED,
)
def book_appointment(
    appointment_data: AppointmentCreate,
    background_tasks: BackgroundTasks,
    appointment_service: AppointmentService = Depends(get_appointment_service),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Book a time slot with a doctor."""
    appointment = appointment_service.book(appointment_data)

    background_tasks.add_task(
        notifier.send_booking_confirmation,
        appointment_data.patient_email,
        appointment_data.patient_name,
        appointment.time_slot,
    )

    return AppointmentBookedResponse(
        message="Appointment booked successfully!",
        appointment=appointment,
    )


@router.post("/cancelAppointment", response_model=MessageResponse)
def cancel_appointment(
    cancel_data: AppointmentCancel,
    background_tasks: BackgroundTasks,
    token: TokenPayload = Depends(get_current_token),
    appointment_service: AppointmentService = Depends(get_appointment_service),
    notifier: NotificationService = Depends(get_notification_service)
):
    """Cancel an appointment owned by the caller."""
    cancelled = appointment_service.cancel(cancel_data, token)

    background_tasks.add_task(
        notifier.send_cancellation_notice,
        cancelled.patient_email,
        cancelled.time_slot,
    )

    return MessageResponse(message="Appointment cancelled successfully!")
