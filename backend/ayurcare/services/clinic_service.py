"""
AyurCare Backend — Clinic Service
==================================

What:  Practitioner and service directories, slot availability, booking,
       the user's appointment list, and the admin clinic screens.
Who:   Called by the /api/practitioners, /api/services, /api/appointments
       and /api/admin/{practitioners,services,appointments} routes.

Booking Rules:
    1. Time must be one of the configured fixed slots (settings.time_slots)
    2. Date must be today or later (UTC calendar date)
    3. Practitioner and service must exist and be active
    4. The (practitioner, date, time) slot must not be held by another
       pending or confirmed appointment
    5. New appointments start as 'pending'

    Rule 4 is read first for a friendly 409, and enforced by the partial
    unique index uq_appointments_active_slot when two requests race. Moving
    an appointment back to pending or confirmed goes through the same check.
"""

import logging
from datetime import date, datetime, timezone
from typing import List, Optional, Set, Type, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.config import settings
from ayurcare.exceptions import ConflictError, NotFoundError, ValidationError
from ayurcare.models.clinic import (
    ACTIVE_APPOINTMENT_STATUSES,
    APPOINTMENT_PENDING,
    Appointment,
    Practitioner,
    Service,
)
from ayurcare.models.user import User
from ayurcare.schemas.clinic import (
    AdminAppointmentResponse,
    AppointmentCreate,
    AppointmentResponse,
    PractitionerCreate,
    PractitionerResponse,
    PractitionerUpdate,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
    SlotAvailability,
)
from ayurcare.services import apply_partial_update

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", Practitioner, Service)


def _today() -> date:
    return datetime.now(timezone.utc).date()


def _slot_taken(practitioner_id: UUID, on_date: date, slot: str) -> ConflictError:
    return ConflictError(
        message="This time slot is already booked. Please choose another time.",
        context={
            "practitioner_id": str(practitioner_id),
            "appointment_date": on_date.isoformat(),
            "appointment_time": slot,
        },
    )


class ClinicService:

    # ── Public directory ──────────────────────────────────────────────────

    async def list_practitioners(self, db: AsyncSession) -> List[PractitionerResponse]:
        result = await db.execute(
            select(Practitioner)
            .where(Practitioner.is_active.is_(True))
            .order_by(Practitioner.name)
        )
        return [PractitionerResponse.model_validate(p) for p in result.scalars().all()]

    async def get_practitioner(self, db: AsyncSession, practitioner_id: UUID) -> PractitionerResponse:
        practitioner = await self._get_active(db, Practitioner, practitioner_id, "practitioner")
        return PractitionerResponse.model_validate(practitioner)

    async def list_services(self, db: AsyncSession) -> List[ServiceResponse]:
        result = await db.execute(
            select(Service)
            .where(Service.is_active.is_(True))
            .order_by(Service.name)
        )
        return [ServiceResponse.model_validate(s) for s in result.scalars().all()]

    # ── Booking ───────────────────────────────────────────────────────────

    async def available_slots(
        self,
        db: AsyncSession,
        practitioner_id: UUID,
        on_date: date,
    ) -> SlotAvailability:
        await self._get_active(db, Practitioner, practitioner_id, "practitioner")
        taken = await self._taken_slots(db, practitioner_id, on_date)
        slots = settings.time_slots
        return SlotAvailability(
            practitioner_id=practitioner_id,
            date=on_date,
            time_slots=slots,
            available=[slot for slot in slots if slot not in taken],
        )

    async def book_appointment(
        self,
        db: AsyncSession,
        user: User,
        data: AppointmentCreate,
    ) -> AppointmentResponse:
        """
        Raises:
            ValidationError: slot not offered or date in the past (→ 400)
            NotFoundError:   practitioner/service missing or inactive (→ 404)
            ConflictError:   slot already booked (→ 409)
        """
        if data.appointment_time not in settings.time_slots:
            raise ValidationError(
                message=(
                    f"'{data.appointment_time}' is not an available time slot. "
                    f"Choose one of: {', '.join(settings.time_slots)}"
                ),
                field="appointment_time",
            )
        if data.appointment_date < _today():
            raise ValidationError(
                message="Appointments cannot be booked in the past",
                field="appointment_date",
            )

        practitioner = await self._get_active(db, Practitioner, data.practitioner_id, "practitioner")
        service = await self._get_active(db, Service, data.service_id, "service")

        taken = await self._taken_slots(db, practitioner.id, data.appointment_date)
        if data.appointment_time in taken:
            raise _slot_taken(practitioner.id, data.appointment_date, data.appointment_time)

        appointment = Appointment(
            user_id=user.id,
            practitioner_id=practitioner.id,
            practitioner=practitioner,
            service_id=service.id,
            service=service,
            appointment_date=data.appointment_date,
            appointment_time=data.appointment_time,
            notes=data.notes,
            status=APPOINTMENT_PENDING,
        )
        db.add(appointment)
        try:
            await db.flush()
        except IntegrityError as e:
            # A concurrent booking took the slot after our read
            logger.info("Slot race lost for practitioner %s: %s", data.practitioner_id, type(e).__name__)
            raise _slot_taken(data.practitioner_id, data.appointment_date, data.appointment_time) from e
        logger.info(
            "Appointment %s booked by user %s with practitioner %s on %s %s",
            appointment.id,
            user.id,
            practitioner.id,
            data.appointment_date,
            data.appointment_time,
        )
        return AppointmentResponse.model_validate(appointment)

    async def list_my_appointments(self, db: AsyncSession, user: User) -> List[AppointmentResponse]:
        result = await db.execute(
            select(Appointment)
            .where(Appointment.user_id == user.id)
            .order_by(Appointment.appointment_date.asc(), Appointment.appointment_time.asc())
        )
        return [AppointmentResponse.model_validate(a) for a in result.scalars().all()]

    # ── Admin: practitioners ──────────────────────────────────────────────

    async def list_all_practitioners(self, db: AsyncSession) -> List[PractitionerResponse]:
        result = await db.execute(select(Practitioner).order_by(Practitioner.name))
        return [PractitionerResponse.model_validate(p) for p in result.scalars().all()]

    async def create_practitioner(self, db: AsyncSession, data: PractitionerCreate) -> PractitionerResponse:
        practitioner = Practitioner(**data.model_dump())
        db.add(practitioner)
        await db.flush()
        logger.info("Practitioner %s created", practitioner.id)
        return PractitionerResponse.model_validate(practitioner)

    async def update_practitioner(
        self,
        db: AsyncSession,
        practitioner_id: UUID,
        data: PractitionerUpdate,
    ) -> PractitionerResponse:
        practitioner = await self._get_any(db, Practitioner, practitioner_id, "practitioner")
        apply_partial_update(
            practitioner,
            data.model_dump(exclude_unset=True),
            required=("name", "specialization", "is_active"),
        )
        await db.flush()
        return PractitionerResponse.model_validate(practitioner)

    async def delete_practitioner(self, db: AsyncSession, practitioner_id: UUID) -> None:
        practitioner = await self._get_any(db, Practitioner, practitioner_id, "practitioner")
        await db.delete(practitioner)
        await db.flush()
        logger.info("Practitioner %s deleted", practitioner_id)

    # ── Admin: services ───────────────────────────────────────────────────

    async def list_all_services(self, db: AsyncSession) -> List[ServiceResponse]:
        result = await db.execute(select(Service).order_by(Service.name))
        return [ServiceResponse.model_validate(s) for s in result.scalars().all()]

    async def create_service(self, db: AsyncSession, data: ServiceCreate) -> ServiceResponse:
        service = Service(**data.model_dump())
        db.add(service)
        await db.flush()
        logger.info("Service %s created", service.id)
        return ServiceResponse.model_validate(service)

    async def update_service(
        self,
        db: AsyncSession,
        service_id: UUID,
        data: ServiceUpdate,
    ) -> ServiceResponse:
        service = await self._get_any(db, Service, service_id, "service")
        apply_partial_update(
            service,
            data.model_dump(exclude_unset=True),
            required=("name", "price", "duration_minutes", "is_active"),
        )
        await db.flush()
        return ServiceResponse.model_validate(service)

    async def delete_service(self, db: AsyncSession, service_id: UUID) -> None:
        service = await self._get_any(db, Service, service_id, "service")
        await db.delete(service)
        await db.flush()
        logger.info("Service %s deleted", service_id)

    # ── Admin: appointments ───────────────────────────────────────────────

    async def list_all_appointments(self, db: AsyncSession) -> List[AdminAppointmentResponse]:
        """
        Every appointment, latest date first, with practitioner and service
        names from the join and the booking user's name from a second
        lookup merged in memory.
        """
        result = await db.execute(
            select(Appointment).order_by(
                Appointment.appointment_date.desc(),
                Appointment.appointment_time.desc(),
            )
        )
        appointments = list(result.scalars().all())

        user_ids = {a.user_id for a in appointments}
        names = {}
        if user_ids:
            profile_rows = await db.execute(
                select(User.id, User.name).where(User.id.in_(user_ids))
            )
            names = {row.id: row.name for row in profile_rows}

        return [
            AdminAppointmentResponse(
                id=a.id,
                user_id=a.user_id,
                user_name=names.get(a.user_id),
                practitioner_name=a.practitioner.name if a.practitioner else None,
                service_name=a.service.name if a.service else None,
                appointment_date=a.appointment_date,
                appointment_time=a.appointment_time,
                notes=a.notes,
                status=a.status,
                created_at=a.created_at,
            )
            for a in appointments
        ]

    async def update_appointment_status(
        self,
        db: AsyncSession,
        appointment_id: UUID,
        status: str,
    ) -> AppointmentResponse:
        """
        Raises:
            NotFoundError: unknown appointment (→ 404)
            ConflictError: reactivating an appointment whose slot was re-booked (→ 409)
        """
        appointment = await db.get(Appointment, appointment_id)
        if appointment is None:
            raise NotFoundError(resource="appointment", resource_id=str(appointment_id))

        slot = (appointment.practitioner_id, appointment.appointment_date, appointment.appointment_time)
        reactivating = (
            status in ACTIVE_APPOINTMENT_STATUSES
            and appointment.status not in ACTIVE_APPOINTMENT_STATUSES
        )
        if reactivating:
            taken = await self._taken_slots(db, slot[0], slot[1], exclude_id=appointment.id)
            if slot[2] in taken:
                raise _slot_taken(*slot)

        appointment.status = status
        try:
            await db.flush()
        except IntegrityError as e:
            raise _slot_taken(*slot) from e
        logger.info("Appointment %s status → %s", appointment_id, status)
        return AppointmentResponse.model_validate(appointment)

    # ── Helpers ───────────────────────────────────────────────────────────

    async def _taken_slots(
        self,
        db: AsyncSession,
        practitioner_id: UUID,
        on_date: date,
        exclude_id: Optional[UUID] = None,
    ) -> Set[str]:
        query = select(Appointment.appointment_time).where(
            Appointment.practitioner_id == practitioner_id,
            Appointment.appointment_date == on_date,
            Appointment.status.in_(ACTIVE_APPOINTMENT_STATUSES),
        )
        if exclude_id is not None:
            query = query.where(Appointment.id != exclude_id)
        result = await db.execute(query)
        return set(result.scalars().all())

    async def _get_any(self, db: AsyncSession, model: Type[ModelT], row_id: UUID, resource: str) -> ModelT:
        row = await db.get(model, row_id)
        if row is None:
            raise NotFoundError(resource=resource, resource_id=str(row_id))
        return row

    async def _get_active(self, db: AsyncSession, model: Type[ModelT], row_id: UUID, resource: str) -> ModelT:
        row = await self._get_any(db, model, row_id, resource)
        if not row.is_active:
            raise NotFoundError(resource=resource, resource_id=str(row_id))
        return row


# ── Singleton Instance ────────────────────────────────────────────────────
clinic_service = ClinicService()
