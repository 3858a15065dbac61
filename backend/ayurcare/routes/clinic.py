"""
AyurCare Backend — Clinic Route Handlers
=========================================

What:  Practitioner directory, services, slot availability and booking.

    GET  /api/practitioners
    GET  /api/practitioners/{id}
    GET  /api/practitioners/{id}/slots?date=YYYY-MM-DD
    GET  /api/services
    GET  /api/time-slots
    POST /api/appointments          (signed in)
    GET  /api/appointments          (signed in, my appointments)
"""

from datetime import date
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.config import settings
from ayurcare.database import get_db_session
from ayurcare.dependencies import get_current_user
from ayurcare.models.user import User
from ayurcare.schemas.clinic import (
    AppointmentCreate,
    AppointmentResponse,
    PractitionerResponse,
    ServiceResponse,
    SlotAvailability,
)
from ayurcare.schemas.common import ErrorResponse
from ayurcare.services.clinic_service import clinic_service

router = APIRouter(prefix="/api", tags=["Clinic"])


@router.get(
    "/practitioners",
    response_model=List[PractitionerResponse],
    summary="Active practitioners, by name",
)
async def list_practitioners(
    db: AsyncSession = Depends(get_db_session),
) -> List[PractitionerResponse]:
    return await clinic_service.list_practitioners(db)


@router.get(
    "/practitioners/{practitioner_id}",
    response_model=PractitionerResponse,
    responses={404: {"description": "Practitioner not found", "model": ErrorResponse}},
    summary="Get a practitioner",
)
async def get_practitioner(
    practitioner_id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> PractitionerResponse:
    return await clinic_service.get_practitioner(db, practitioner_id)


@router.get(
    "/practitioners/{practitioner_id}/slots",
    response_model=SlotAvailability,
    responses={404: {"description": "Practitioner not found", "model": ErrorResponse}},
    summary="Free booking slots for a practitioner on a date",
)
async def get_available_slots(
    practitioner_id: UUID,
    on_date: date = Query(alias="date", description="Calendar date (YYYY-MM-DD)"),
    db: AsyncSession = Depends(get_db_session),
) -> SlotAvailability:
    return await clinic_service.available_slots(db, practitioner_id, on_date)


@router.get(
    "/services",
    response_model=List[ServiceResponse],
    summary="Active services, by name",
)
async def list_services(db: AsyncSession = Depends(get_db_session)) -> List[ServiceResponse]:
    return await clinic_service.list_services(db)


@router.get("/time-slots", response_model=List[str], summary="Fixed daily booking slots")
async def list_time_slots() -> List[str]:
    return settings.time_slots


@router.post(
    "/appointments",
    status_code=201,
    response_model=AppointmentResponse,
    responses={
        201: {"description": "Appointment booked (pending)", "model": AppointmentResponse},
        400: {"description": "Invalid slot or past date", "model": ErrorResponse},
        401: {"description": "Not signed in", "model": ErrorResponse},
        404: {"description": "Practitioner or service not found", "model": ErrorResponse},
        409: {"description": "Slot already booked", "model": ErrorResponse},
    },
    summary="Book an appointment",
)
async def book_appointment(
    body: AppointmentCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> AppointmentResponse:
    return await clinic_service.book_appointment(db, user, body)


@router.get(
    "/appointments",
    response_model=List[AppointmentResponse],
    responses={401: {"description": "Not signed in", "model": ErrorResponse}},
    summary="My appointments, soonest first",
)
async def list_my_appointments(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db_session),
) -> List[AppointmentResponse]:
    return await clinic_service.list_my_appointments(db, user)
