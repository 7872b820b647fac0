from concurrent.futures import ThreadPoolExecutor

from fastapi import HTTPException
from sqlalchemy import select
from sqlalchemy.dialects import postgresql

from medibook.core.database import SessionLocal
from medibook.models import Appointment, Patient
from medibook.schemas.appointment import AppointmentCreate
from medibook.services.appointment_service import AppointmentService
from tests.conftest import register_doctor, register_patient

ATTEMPTS = 8


def attempt_booking(payload: AppointmentCreate):
    """Book through a private session, as a separate request would."""
    session = SessionLocal()
    try:
        AppointmentService(session).book(payload)
        return 201
    except HTTPException as exc:
        return exc.status_code
    finally:
        session.close()


class TestConcurrentBooking:

    def test_exactly_one_of_many_identical_bookings_succeeds(self, client, db):
        doctor = register_doctor(client)
        patient = register_patient(client)
        payload = AppointmentCreate(
            doctor_id=doctor["id"],
            patient_id=patient["id"],
            patient_name="Bob",
            patient_email="b@x.com",
            time_slot="Mon-09:00",
        )

        with ThreadPoolExecutor(max_workers=ATTEMPTS) as pool:
            results = list(pool.map(attempt_booking, [payload] * ATTEMPTS))

        assert results.count(201) == 1
        assert results.count(400) == ATTEMPTS - 1

        appointments = db.query(Appointment).all()
        assert len(appointments) == 1
        assert db.get(Patient, patient["id"]).appointment_ids == [appointments[0].id]

    def test_distinct_slots_book_concurrently(self, client, db):
        doctor = register_doctor(client)
        patient = register_patient(client)
        payloads = [
            AppointmentCreate(
                doctor_id=doctor["id"],
                patient_id=patient["id"],
                patient_name="Bob",
                patient_email="b@x.com",
                time_slot=f"Mon-{9 + index:02d}:00",
            )
            for index in range(4)
        ]

        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(attempt_booking, payloads))

        assert results == [201] * 4
        appointment_ids = sorted(appointment.id for appointment in db.query(Appointment).all())
        assert len(appointment_ids) == 4
        assert sorted(db.get(Patient, patient["id"]).appointment_ids) == appointment_ids

    def test_patient_lock_leaves_foreign_key_checks_unblocked(self, client, db, monkeypatch):
        """Bookings lock the patient with FOR NO KEY UPDATE, which does not
        conflict with the KEY SHARE lock other appointment inserts hold."""
        doctor = register_doctor(client)
        patient = register_patient(client)
        locks = []
        refresh = db.refresh

        def recording_refresh(instance, *args, **kwargs):
            if kwargs.get("with_for_update"):
                locks.append(kwargs["with_for_update"])
            return refresh(instance, *args, **kwargs)

        monkeypatch.setattr(db, "refresh", recording_refresh)
        AppointmentService(db).book(AppointmentCreate(
            doctor_id=doctor["id"],
            patient_id=patient["id"],
            patient_name="Bob",
            patient_email="b@x.com",
            time_slot="Mon-09:00",
        ))

        assert len(locks) == 1
        statement = select(Patient).with_for_update(**locks[0])
        compiled = str(statement.compile(dialect=postgresql.dialect()))
        assert compiled.endswith("FOR NO KEY UPDATE")
