import pytest
from jose import jwt

from medibook.core.config import settings
from medibook.models import Doctor, Patient
from tests.conftest import (
    doctor_data, patient_data, register_doctor, register_patient
)


class TestRegistration:

    def test_register_doctor(self, client):
        """Registering a doctor returns the sanitized record."""
        response = client.post("/api/registerDoctor", json=doctor_data)
        assert response.status_code == 201

        data = response.json()
        assert data["message"] == "Doctor registered successfully!"
        doctor = data["doctor"]
        assert doctor["name"] == "Dr. A"
        assert doctor["email"] == "a@x.com"
        assert doctor["specialty"] == "Cardio"
        assert doctor["experience"] == 5
        assert doctor["availability"] == [
            {"day": "Mon", "startTime": "09:00", "endTime": "10:00", "location": "Office"}
        ]
        assert "password" not in doctor
        assert "passwordHash" not in doctor

    def test_register_patient(self, client):
        response = client.post("/api/registerPatient", json=patient_data)
        assert response.status_code == 201

        data = response.json()
        assert data["message"] == "Patient registered successfully!"
        assert data["patient"]["email"] == "b@x.com"
        assert "password" not in data["patient"]
        assert "passwordHash" not in data["patient"]

    def test_password_is_stored_hashed(self, client, db):
        register_doctor(client)

        doctor = db.query(Doctor).filter(Doctor.email == "a@x.com").one()
        assert doctor.password_hash != "pw"
        assert doctor.password_hash.startswith("$2")

    def test_register_duplicate_doctor_email(self, client, db):
        """A second registration with the same email is rejected."""
        register_doctor(client)

        response = client.post(
            "/api/registerDoctor",
            json={**doctor_data, "name": "Dr. Impostor", "specialty": "Derma"}
        )
        assert response.status_code == 400
        assert response.json()["message"] == "Doctor with this email already exists."

        doctors = db.query(Doctor).filter(Doctor.email == "a@x.com").all()
        assert len(doctors) == 1
        assert doctors[0].name == "Dr. A"
        assert doctors[0].specialty == "Cardio"

    def test_register_duplicate_patient_email(self, client, db):
        register_patient(client)

        response = client.post("/api/registerPatient", json={**patient_data, "name": "Other"})
        assert response.status_code == 400
        assert response.json()["message"] == "Patient with this email already exists."
        assert db.query(Patient).count() == 1

    def test_register_email_differing_only_in_case(self, client, db):
        register_patient(client)

        response = client.post("/api/registerPatient", json={**patient_data, "email": "B@X.com"})
        assert response.status_code == 400
        assert response.json()["message"] == "Patient with this email already exists."
        assert db.query(Patient).count() == 1

    @pytest.mark.parametrize("field", ["name", "email", "password", "specialty", "experience", "location", "availability"])
    def test_register_doctor_missing_field(self, client, db, field):
        payload = {key: value for key, value in doctor_data.items() if key != field}

        response = client.post("/api/registerDoctor", json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == "All fields are required."
        assert db.query(Doctor).count() == 0

    @pytest.mark.parametrize("field, value", [("name", ""), ("experience", 0), ("location", "   ")])
    def test_register_doctor_falsy_field(self, client, field, value):
        response = client.post("/api/registerDoctor", json={**doctor_data, field: value})
        assert response.status_code == 400
        assert response.json()["message"] == "All fields are required."

    def test_register_patient_missing_field(self, client):
        payload = {key: value for key, value in patient_data.items() if key != "phone"}

        response = client.post("/api/registerPatient", json=payload)
        assert response.status_code == 400
        assert response.json()["message"] == "All fields are required."

    def test_register_doctor_with_empty_availability(self, client):
        response = client.post("/api/registerDoctor", json={**doctor_data, "availability": []})
        assert response.status_code == 201
        assert response.json()["doctor"]["availability"] == []


class TestLogin:

    def test_login_doctor_success(self, client):
        """A correct password yields a token carrying the doctor's id and role."""
        doctor = register_doctor(client)

        response = client.post("/api/loginDoctor", json={"email": "a@x.com", "password": "pw"})
        assert response.status_code == 200

        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Doctor logged in successfully!"
        assert "password" not in data["doctor"]
        assert "patient" not in data

        claims = jwt.decode(data["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert claims["doctorId"] == doctor["id"]
        assert claims["role"] == "doctor"
        assert claims["sub"] == str(doctor["id"])
        assert claims["exp"] - claims["iat"] == settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

    def test_login_patient_success(self, client):
        patient = register_patient(client)

        response = client.post("/api/loginPatient", json={"email": "b@x.com", "password": "secret"})
        assert response.status_code == 200

        data = response.json()
        assert data["message"] == "Patient logged in successfully!"
        assert data["patient"]["id"] == patient["id"]
        assert "password" not in data["patient"]

        claims = jwt.decode(data["token"], settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        assert claims["patientId"] == patient["id"]
        assert claims["role"] == "patient"
        assert "doctorId" not in claims

    def test_login_wrong_password(self, client):
        register_doctor(client)

        response = client.post("/api/loginDoctor", json={"email": "a@x.com", "password": "wrong"})
        assert response.status_code == 401
        assert response.json()["message"] == "Invalid password."

    def test_login_unknown_email(self, client):
        response = client.post("/api/loginPatient", json={"email": "nobody@x.com", "password": "pw"})
        assert response.status_code == 401
        assert response.json()["message"] == "Patient not found."

    def test_doctor_cannot_log_in_as_patient(self, client):
        register_doctor(client)

        response = client.post("/api/loginPatient", json={"email": "a@x.com", "password": "pw"})
        assert response.status_code == 401

    def test_login_missing_fields(self, client):
        response = client.post("/api/loginDoctor", json={"email": "a@x.com"})
        assert response.status_code == 400
        assert response.json()["message"] == "Email and password required."

    def test_login_with_mixed_case_email(self, client):
        """An account logs in with the exact address it registered with."""
        patient = register_patient(client, email="Bob@Example.COM")
        doctor = register_doctor(client, email="Dr@Clinic.ORG")

        response = client.post("/api/loginPatient", json={"email": "Bob@Example.COM", "password": "secret"})
        assert response.status_code == 200
        assert response.json()["patient"]["id"] == patient["id"]

        response = client.post("/api/loginDoctor", json={"email": "dr@clinic.org", "password": "pw"})
        assert response.status_code == 200
        assert response.json()["doctor"]["id"] == doctor["id"]


if __name__ == "__main__":
    pytest.main([__file__])
