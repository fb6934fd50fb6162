import pytest
from datetime import date, timedelta

from clinic_scheduler.models import User

def upcoming(weekday):
    """A date at least a week ahead falling on the given weekday (0 = Monday)."""
    start = date.today() + timedelta(days=7)
    return (start + timedelta(days=(weekday - start.weekday()) % 7)).isoformat()

TUESDAY = upcoming(1)
SATURDAY = upcoming(5)

class TestService:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "ok"

    def test_info_reports_clinic_hours(self, client):
        data = client.get("/api/v1/info").json()
        assert data["clinic_hours"] == {
            "start_time": "10:00",
            "end_time": "17:00",
            "lunch_start": "12:00",
            "lunch_end": "14:00"
        }
        assert data["slot_minutes"] == 30

    def test_unknown_route(self, client):
        response = client.get("/api/v1/nowhere")
        assert response.status_code == 404
        assert response.json()["error"] == "NotFound"

    def test_unauthenticated_request(self, client):
        response = client.get("/api/v1/patients/doctors")
        assert response.status_code in (401, 403)

    def test_invalid_token(self, client):
        headers = {"Authorization": "Bearer invalid-token"}
        response = client.get("/api/v1/patients/doctors", headers=headers)
        assert response.status_code == 401

class TestPatientEndpoints:

    def test_list_doctors_only_approved(self, client, make_doctor, make_patient, auth_headers):
        make_doctor("approved@example.com")
        make_doctor("pending@example.com", approved=False)
        headers = auth_headers(make_patient())

        response = client.get("/api/v1/patients/doctors", headers=headers)
        assert response.status_code == 200
        assert [d["email"] for d in response.json()] == ["approved@example.com"]

    def test_time_slots(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        headers = auth_headers(make_patient())

        response = client.get(
            f"/api/v1/patients/doctors/{doctor.user_id}/time-slots",
            params={"date": TUESDAY},
            headers=headers
        )
        assert response.status_code == 200
        slots = response.json()
        assert len(slots) == 10
        assert slots[0] == {"time": "10:00 AM", "available": True}
        assert slots[-1]["time"] == "4:30 PM"

    def test_availability(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        headers = auth_headers(make_patient())

        response = client.get(
            f"/api/v1/patients/doctors/{doctor.user_id}/availability",
            params={"date": TUESDAY},
            headers=headers
        )
        assert response.status_code == 200
        assert response.json() == {
            "start_time": "10:00",
            "end_time": "17:00",
            "lunch_start": "12:00",
            "lunch_end": "14:00"
        }

    def test_weekend_has_no_availability(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        headers = auth_headers(make_patient())

        response = client.get(
            f"/api/v1/patients/doctors/{doctor.user_id}/availability",
            params={"date": SATURDAY},
            headers=headers
        )
        assert response.status_code == 404
        assert response.json()["error"] == "NoAvailability"

    def test_book_appointment(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        headers = auth_headers(make_patient())

        response = client.post(
            "/api/v1/patients/appointments",
            json={"doctor_id": doctor.user_id, "date": TUESDAY, "time_slot": "10:30 AM"},
            headers=headers
        )
        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "pending"
        assert data["time_slot"] == "10:30 AM"
        assert data["date"] == TUESDAY

        listed = client.get("/api/v1/patients/appointments", headers=headers).json()
        assert [a["id"] for a in listed] == [data["id"]]

    def test_slot_conflict(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        booking = {"doctor_id": doctor.user_id, "date": TUESDAY, "time_slot": "3:00 PM"}

        first = client.post(
            "/api/v1/patients/appointments",
            json=booking,
            headers=auth_headers(make_patient("first@example.com"))
        )
        assert first.status_code == 201

        second = client.post(
            "/api/v1/patients/appointments",
            json=booking,
            headers=auth_headers(make_patient("second@example.com"))
        )
        assert second.status_code == 409
        assert second.json()["error"] == "SlotAlreadyBooked"

    def test_past_date(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        yesterday = (date.today() - timedelta(days=1)).isoformat()

        response = client.post(
            "/api/v1/patients/appointments",
            json={"doctor_id": doctor.user_id, "date": yesterday, "time_slot": "10:00 AM"},
            headers=auth_headers(make_patient())
        )
        assert response.status_code == 400
        assert response.json() == {
            "error": "PastDateBooking",
            "message": "Cannot book an appointment in the past"
        }

    def test_impossible_iso_date(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        headers = auth_headers(make_patient())

        response = client.post(
            "/api/v1/patients/appointments",
            json={"doctor_id": doctor.user_id, "date": "2030-13-01", "time_slot": "10:00 AM"},
            headers=headers
        )
        assert response.status_code == 400
        assert response.json()["error"] == "InvalidDate"
        assert client.get("/api/v1/patients/appointments", headers=headers).json() == []

    def test_doctor_cannot_use_patient_endpoints(self, client, make_doctor, auth_headers):
        doctor = make_doctor()
        response = client.get("/api/v1/patients/appointments", headers=auth_headers(doctor.user))
        assert response.status_code == 403

class TestAppointmentLifecycle:

    def test_accept_then_cancel(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        doctor_headers = auth_headers(doctor.user)
        patient_headers = auth_headers(make_patient())

        booked = client.post(
            "/api/v1/patients/appointments",
            json={"doctor_id": doctor.user_id, "date": TUESDAY, "time_slot": "11:00 AM"},
            headers=patient_headers
        ).json()

        accepted = client.put(
            f"/api/v1/doctors/appointments/{booked['id']}",
            json={"status": "accepted"},
            headers=doctor_headers
        )
        assert accepted.status_code == 200
        assert accepted.json()["status"] == "accepted"

        cancelled = client.put(
            f"/api/v1/patients/appointments/{booked['id']}/cancel",
            headers=patient_headers
        )
        assert cancelled.status_code == 200
        assert cancelled.json()["status"] == "cancelled"

        again = client.put(
            f"/api/v1/doctors/appointments/{booked['id']}",
            json={"status": "completed"},
            headers=doctor_headers
        )
        assert again.status_code == 400
        assert again.json()["error"] == "InvalidStatusTransition"

    def test_doctor_manages_overrides(self, client, make_doctor, auth_headers):
        headers = auth_headers(make_doctor().user)

        created = client.post(
            "/api/v1/doctors/availability",
            json={"date": SATURDAY, "is_enabled": True},
            headers=headers
        )
        assert created.status_code == 200
        override = created.json()
        assert override["working_hours"]["start_time"] == "10:00"

        toggled = client.put(f"/api/v1/doctors/availability/{override['id']}/toggle", headers=headers)
        assert toggled.json()["is_enabled"] is False

        removed = client.delete(f"/api/v1/doctors/availability/{override['id']}", headers=headers)
        assert removed.status_code == 200
        assert client.get("/api/v1/doctors/availability", headers=headers).json() == []

    def test_doctor_enables_weekday(self, client, make_doctor, auth_headers):
        headers = auth_headers(make_doctor().user)

        response = client.put(
            "/api/v1/doctors/weekly-availability/saturday",
            json={"is_enabled": True},
            headers=headers
        )
        assert response.status_code == 200
        assert response.json()["is_enabled"] is True

        invalid = client.put(
            "/api/v1/doctors/weekly-availability/someday",
            json={"is_enabled": True},
            headers=headers
        )
        assert invalid.status_code == 400
        assert invalid.json()["error"] == "InvalidWeekday"

    @pytest.mark.parametrize("working_hours", [
        {"start_time": "ten", "end_time": "17:00", "lunch_start": "12:00", "lunch_end": "14:00"},
        {"start_time": "17:00", "end_time": "10:00", "lunch_start": "12:00", "lunch_end": "14:00"},
        {"start_time": "10:00", "end_time": "17:00", "lunch_start": "16:00", "lunch_end": "18:00"},
    ])
    def test_invalid_override_hours_are_rejected(self, client, make_doctor, auth_headers, working_hours):
        headers = auth_headers(make_doctor().user)

        response = client.post(
            "/api/v1/doctors/availability",
            json={"date": SATURDAY, "is_enabled": True, "working_hours": working_hours},
            headers=headers
        )
        assert response.status_code == 422
        assert client.get("/api/v1/doctors/availability", headers=headers).json() == []

    def test_custom_override_hours(self, client, make_doctor, auth_headers):
        headers = auth_headers(make_doctor().user)
        working_hours = {"start_time": "09:00", "end_time": "12:00", "lunch_start": "10:00", "lunch_end": "10:30"}

        created = client.post(
            "/api/v1/doctors/availability",
            json={"date": SATURDAY, "is_enabled": True, "working_hours": working_hours},
            headers=headers
        )
        assert created.status_code == 200
        assert created.json()["working_hours"] == working_hours

        slots = client.get("/api/v1/doctors/time-slots", params={"date": SATURDAY}, headers=headers).json()
        assert [slot["time"] for slot in slots] == [
            "9:00 AM", "9:30 AM", "10:30 AM", "11:00 AM", "11:30 AM"
        ]

    def test_doctor_previews_open_slots(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        headers = auth_headers(doctor.user)
        client.post(
            "/api/v1/patients/appointments",
            json={"doctor_id": doctor.user_id, "date": TUESDAY, "time_slot": "10:00 AM"},
            headers=auth_headers(make_patient())
        )

        response = client.get("/api/v1/doctors/time-slots", params={"date": TUESDAY}, headers=headers)
        assert response.status_code == 200
        times = [slot["time"] for slot in response.json()]
        assert len(times) == 9
        assert "10:00 AM" not in times

        closed = client.get("/api/v1/doctors/time-slots", params={"date": SATURDAY}, headers=headers)
        assert closed.status_code == 404
        assert closed.json()["error"] == "NoAvailability"

    def test_patient_cannot_preview_doctor_slots(self, client, make_patient, auth_headers):
        response = client.get(
            "/api/v1/doctors/time-slots",
            params={"date": TUESDAY},
            headers=auth_headers(make_patient())
        )
        assert response.status_code == 403

    def test_listings_name_both_parties(self, client, make_doctor, make_patient, auth_headers):
        doctor = make_doctor(name="Dr. Grey")
        patient = make_patient(email="jo@example.com", name="Jo Patient")
        client.post(
            "/api/v1/patients/appointments",
            json={"doctor_id": doctor.user_id, "date": TUESDAY, "time_slot": "2:00 PM"},
            headers=auth_headers(patient)
        )

        for path, user in (
            ("/api/v1/doctors/appointments", doctor.user),
            ("/api/v1/patients/appointments", patient),
        ):
            [appointment] = client.get(path, headers=auth_headers(user)).json()
            assert appointment["patient_name"] == "Jo Patient"
            assert appointment["patient_email"] == "jo@example.com"
            assert appointment["doctor_name"] == "Dr. Grey"
            assert appointment["doctor_email"] == "doctor@example.com"

class TestAdminEndpoints:

    def test_create_and_approve_doctor(self, client, make_admin, auth_headers):
        headers = auth_headers(make_admin())

        created = client.post(
            "/api/v1/admin/doctors",
            json={
                "email": "new.doctor@example.com",
                "name": "Dr. New",
                "specialization": "Cardiologist"
            },
            headers=headers
        )
        assert created.status_code == 201
        doctor = created.json()
        assert doctor["is_approved"] is False

        approved = client.put(f"/api/v1/admin/doctors/{doctor['user_id']}/approve", headers=headers)
        assert approved.status_code == 200
        assert approved.json()["is_approved"] is True

    def test_new_doctor_has_weekly_schedule(self, client, make_admin, auth_headers, db):

        created = client.post(
            "/api/v1/admin/doctors",
            json={
                "email": "scheduled@example.com",
                "name": "Dr. Scheduled",
                "specialization": "Neurologist"
            },
            headers=auth_headers(make_admin())
        ).json()
        doctor_user = db.query(User).filter(User.id == created["user_id"]).first()

        response = client.get("/api/v1/doctors/weekly-availability", headers=auth_headers(doctor_user))
        assert response.status_code == 200
        schedule = response.json()
        assert list(schedule) == [
            "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"
        ]
        assert schedule["friday"]["is_enabled"] is True
        assert schedule["sunday"]["is_enabled"] is False

    def test_admin_deletes_appointment(self, client, make_admin, make_doctor, make_patient, auth_headers):
        doctor = make_doctor()
        booked = client.post(
            "/api/v1/patients/appointments",
            json={"doctor_id": doctor.user_id, "date": TUESDAY, "time_slot": "2:30 PM"},
            headers=auth_headers(make_patient())
        ).json()
        headers = auth_headers(make_admin())

        assert client.get(f"/api/v1/appointments/{booked['id']}", headers=headers).status_code == 200
        assert client.delete(f"/api/v1/appointments/{booked['id']}", headers=headers).status_code == 200

        missing = client.get(f"/api/v1/appointments/{booked['id']}", headers=headers)
        assert missing.status_code == 404
        assert missing.json()["error"] == "AppointmentNotFound"

    def test_patient_cannot_use_admin_endpoints(self, client, make_patient, auth_headers):
        response = client.get("/api/v1/appointments", headers=auth_headers(make_patient()))
        assert response.status_code == 403
