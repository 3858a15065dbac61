"""
AyurCare Backend — Clinic & Booking Tests
==========================================

What we test:
    ✅ Practitioner and service directories show active rows by name
    ✅ Slot availability excludes pending/confirmed bookings only
    ✅ Booking creates a pending appointment with practitioner and service
    ✅ Double booking → 409, also when two requests race for the slot;
       cancelled appointments free the slot
    ✅ Unknown slot label and past dates → 400
    ✅ "My appointments" is per user, soonest first
    ✅ ClinicService.book_appointment validation against a mocked session
"""

import asyncio
import uuid
from datetime import date, timedelta
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from ayurcare.config import settings
from ayurcare.exceptions import ConflictError, ValidationError
from ayurcare.models import Practitioner, Service
from ayurcare.schemas.clinic import AppointmentCreate
from ayurcare.services.clinic_service import ClinicService
from conftest import next_week, sign_up


def booking(practitioner, service, on_date=None, time="10:00", notes=""):
    return {
        "practitioner_id": str(practitioner.id),
        "service_id": str(service.id),
        "appointment_date": (on_date or next_week()).isoformat(),
        "appointment_time": time,
        "notes": notes,
    }


class TestDirectory:

    @pytest.mark.asyncio
    async def test_practitioners_listed_by_name(self, test_client, db_session, practitioner):
        db_session.add_all(
            [
                Practitioner(name="Dr. Arjun Rao", specialization="Nadi Pariksha"),
                Practitioner(name="Dr. Zoya Khan", specialization="Rasayana", is_active=False),
            ]
        )
        await db_session.commit()

        response = await test_client.get("/api/practitioners")

        assert response.status_code == 200
        assert [p["name"] for p in response.json()] == ["Dr. Arjun Rao", "Dr. Meera Iyer"]

    @pytest.mark.asyncio
    async def test_get_practitioner(self, test_client, practitioner):
        response = await test_client.get(f"/api/practitioners/{practitioner.id}")

        assert response.status_code == 200
        assert response.json()["specialization"] == "Panchakarma"

    @pytest.mark.asyncio
    async def test_unknown_practitioner_is_404(self, test_client):
        response = await test_client.get(f"/api/practitioners/{uuid.uuid4()}")
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_services_listed(self, test_client, service):
        response = await test_client.get("/api/services")

        body = response.json()
        assert [s["name"] for s in body] == ["Abhyanga Massage"]
        assert Decimal(body[0]["price"]) == Decimal("45.00")
        assert body[0]["duration_minutes"] == 60

    @pytest.mark.asyncio
    async def test_time_slots(self, test_client):
        response = await test_client.get("/api/time-slots")

        assert response.status_code == 200
        assert response.json() == settings.time_slots
        assert "09:00" in response.json()


class TestBooking:

    @pytest.mark.asyncio
    async def test_booking_requires_sign_in(self, test_client, practitioner, service):
        response = await test_client.post("/api/appointments", json=booking(practitioner, service))
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_book_appointment(self, test_client, customer, practitioner, service):
        response = await test_client.post(
            "/api/appointments",
            headers=customer["headers"],
            json=booking(practitioner, service, notes="Lower back pain"),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["appointment_time"] == "10:00"
        assert body["notes"] == "Lower back pain"
        assert body["practitioner"]["name"] == "Dr. Meera Iyer"
        assert body["service"]["name"] == "Abhyanga Massage"

    @pytest.mark.asyncio
    async def test_double_booking_is_conflict(self, test_client, customer, practitioner, service):
        first = await test_client.post(
            "/api/appointments", headers=customer["headers"], json=booking(practitioner, service)
        )
        other = await sign_up(test_client, "other@example.com", name="Other")
        second = await test_client.post(
            "/api/appointments", headers=other["headers"], json=booking(practitioner, service)
        )

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"] == "conflict"

    @pytest.mark.asyncio
    async def test_cancelled_booking_frees_the_slot(
        self, test_client, customer, admin, practitioner, service
    ):
        first = await test_client.post(
            "/api/appointments", headers=customer["headers"], json=booking(practitioner, service)
        )
        await test_client.patch(
            f"/api/admin/appointments/{first.json()['id']}/status",
            headers=admin["headers"],
            json={"status": "cancelled"},
        )

        again = await test_client.post(
            "/api/appointments", headers=customer["headers"], json=booking(practitioner, service)
        )
        assert again.status_code == 201

    @pytest.mark.asyncio
    async def test_simultaneous_bookings_get_one_slot(
        self, test_client, customer, practitioner, service
    ):
        other = await sign_up(test_client, "other@example.com", name="Other")

        responses = await asyncio.gather(
            test_client.post(
                "/api/appointments", headers=customer["headers"], json=booking(practitioner, service)
            ),
            test_client.post(
                "/api/appointments", headers=other["headers"], json=booking(practitioner, service)
            ),
        )

        assert sorted(r.status_code for r in responses) == [201, 409]
        held = [
            *(await test_client.get("/api/appointments", headers=customer["headers"])).json(),
            *(await test_client.get("/api/appointments", headers=other["headers"])).json(),
        ]
        assert len(held) == 1

    @pytest.mark.asyncio
    async def test_unknown_slot_is_rejected(self, test_client, customer, practitioner, service):
        response = await test_client.post(
            "/api/appointments",
            headers=customer["headers"],
            json=booking(practitioner, service, time="08:15"),
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "appointment_time"

    @pytest.mark.asyncio
    async def test_past_date_is_rejected(self, test_client, customer, practitioner, service):
        response = await test_client.post(
            "/api/appointments",
            headers=customer["headers"],
            json=booking(practitioner, service, on_date=date.today() - timedelta(days=3)),
        )

        assert response.status_code == 400
        assert response.json()["details"]["field"] == "appointment_date"

    @pytest.mark.asyncio
    async def test_missing_service_is_rejected(self, test_client, customer, practitioner, service):
        body = booking(practitioner, service)
        del body["service_id"]

        response = await test_client.post("/api/appointments", headers=customer["headers"], json=body)

        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_inactive_practitioner_cannot_be_booked(
        self, test_client, customer, db_session, service
    ):
        retired = Practitioner(name="Dr. Retired", specialization="Dravyaguna", is_active=False)
        db_session.add(retired)
        await db_session.commit()

        response = await test_client.post(
            "/api/appointments", headers=customer["headers"], json=booking(retired, service)
        )
        assert response.status_code == 404


class TestAvailability:

    @pytest.mark.asyncio
    async def test_free_day_has_every_slot(self, test_client, practitioner):
        response = await test_client.get(
            f"/api/practitioners/{practitioner.id}/slots",
            params={"date": next_week().isoformat()},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["available"] == settings.time_slots
        assert body["time_slots"] == settings.time_slots

    @pytest.mark.asyncio
    async def test_booked_slot_is_removed(self, test_client, customer, practitioner, service):
        await test_client.post(
            "/api/appointments",
            headers=customer["headers"],
            json=booking(practitioner, service, time="11:00"),
        )

        body = (
            await test_client.get(
                f"/api/practitioners/{practitioner.id}/slots",
                params={"date": next_week().isoformat()},
            )
        ).json()

        assert "11:00" not in body["available"]
        assert len(body["available"]) == len(settings.time_slots) - 1

    @pytest.mark.asyncio
    async def test_date_is_required(self, test_client, practitioner):
        response = await test_client.get(f"/api/practitioners/{practitioner.id}/slots")
        assert response.status_code == 400


class TestMyAppointments:

    @pytest.mark.asyncio
    async def test_soonest_first_and_private(self, test_client, customer, practitioner, service):
        later = next_week() + timedelta(days=2)
        await test_client.post(
            "/api/appointments", headers=customer["headers"], json=booking(practitioner, service, on_date=later)
        )
        await test_client.post(
            "/api/appointments", headers=customer["headers"], json=booking(practitioner, service)
        )
        other = await sign_up(test_client, "other@example.com", name="Other")

        mine = (await test_client.get("/api/appointments", headers=customer["headers"])).json()
        theirs = (await test_client.get("/api/appointments", headers=other["headers"])).json()

        assert [a["appointment_date"] for a in mine] == [next_week().isoformat(), later.isoformat()]
        assert theirs == []


class TestClinicServiceUnit:

    def setup_method(self):
        self.service = ClinicService()
        self.user = MagicMock()
        self.user.id = uuid.uuid4()

    @pytest.mark.asyncio
    async def test_rejects_slot_before_touching_database(self, mock_db_session):
        data = AppointmentCreate(
            practitioner_id=uuid.uuid4(),
            service_id=uuid.uuid4(),
            appointment_date=next_week(),
            appointment_time="23:30",
        )

        with pytest.raises(ValidationError):
            await self.service.book_appointment(mock_db_session, self.user, data)

        mock_db_session.get.assert_not_called()
        mock_db_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_rejects_past_date(self, mock_db_session):
        data = AppointmentCreate(
            practitioner_id=uuid.uuid4(),
            service_id=uuid.uuid4(),
            appointment_date=date.today() - timedelta(days=3),
            appointment_time=settings.time_slots[0],
        )

        with pytest.raises(ValidationError) as exc_info:
            await self.service.book_appointment(mock_db_session, self.user, data)

        assert exc_info.value.field == "appointment_date"

    @pytest.mark.asyncio
    async def test_losing_a_slot_race_is_conflict(self, mock_db_session):
        practitioner = Practitioner(id=uuid.uuid4(), name="Dr. Meera Iyer", specialization="Panchakarma", is_active=True)
        service = Service(id=uuid.uuid4(), name="Shirodhara", price=Decimal("50.00"), duration_minutes=45, is_active=True)
        mock_db_session.get.side_effect = [practitioner, service]
        no_bookings = MagicMock()
        no_bookings.scalars.return_value.all.return_value = []
        mock_db_session.execute.return_value = no_bookings
        mock_db_session.flush.side_effect = IntegrityError(
            "INSERT INTO appointments", {}, Exception("UNIQUE constraint failed")
        )
        data = AppointmentCreate(
            practitioner_id=practitioner.id,
            service_id=service.id,
            appointment_date=next_week(),
            appointment_time=settings.time_slots[0],
        )

        with pytest.raises(ConflictError) as exc_info:
            await self.service.book_appointment(mock_db_session, self.user, data)

        assert exc_info.value.context["appointment_time"] == settings.time_slots[0]
