"""
AyurCare Backend — Clinic Schemas
==================================

What:  Practitioners, services, booking requests and appointment views.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

AppointmentStatus = Literal["pending", "confirmed", "completed", "cancelled"]


# ══════════════════════════════════════════════════════════════════════════
# Practitioners
# ══════════════════════════════════════════════════════════════════════════


class PractitionerResponse(BaseModel):
    id: uuid.UUID
    name: str
    specialization: str
    bio: Optional[str] = None
    image_url: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool

    model_config = {"from_attributes": True}


class PractitionerCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    specialization: str = Field(min_length=1, max_length=200)
    bio: Optional[str] = None
    image_url: Optional[str] = Field(default=None, max_length=500)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)
    is_active: bool = True

    model_config = {"str_strip_whitespace": True}


class PractitionerUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    specialization: Optional[str] = Field(default=None, min_length=1, max_length=200)
    bio: Optional[str] = None
    image_url: Optional[str] = Field(default=None, max_length=500)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)
    is_active: Optional[bool] = None

    model_config = {"str_strip_whitespace": True}


# ══════════════════════════════════════════════════════════════════════════
# Services
# ══════════════════════════════════════════════════════════════════════════


class ServiceResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: Optional[str] = None
    price: Decimal
    duration_minutes: int
    is_active: bool

    model_config = {"from_attributes": True}


class ServiceCreate(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    duration_minutes: int = Field(default=30, ge=5, le=480)
    is_active: bool = True

    model_config = {"str_strip_whitespace": True}


class ServiceUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    duration_minutes: Optional[int] = Field(default=None, ge=5, le=480)
    is_active: Optional[bool] = None

    model_config = {"str_strip_whitespace": True}


# ══════════════════════════════════════════════════════════════════════════
# Booking
# ══════════════════════════════════════════════════════════════════════════


class SlotAvailability(BaseModel):
    """Slots for one practitioner on one day."""
    practitioner_id: uuid.UUID
    date: date
    time_slots: List[str] = Field(description="Every slot offered by the clinic")
    available: List[str] = Field(description="Slots not held by a pending/confirmed booking")


class AppointmentCreate(BaseModel):
    """
    Booking request from the practitioner page.

    Missing date, time or service is rejected with 400 before the service
    runs ("Please select a date, time, and service").
    """
    practitioner_id: uuid.UUID
    service_id: uuid.UUID
    appointment_date: date
    appointment_time: str = Field(min_length=5, max_length=5, description="HH:MM slot")
    notes: str = Field(default="", max_length=2000)


class AppointmentPractitioner(BaseModel):
    id: uuid.UUID
    name: str
    specialization: str
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


class AppointmentService(BaseModel):
    id: uuid.UUID
    name: str
    price: Decimal
    duration_minutes: int

    model_config = {"from_attributes": True}


class AppointmentResponse(BaseModel):
    id: uuid.UUID
    appointment_date: date
    appointment_time: str
    notes: str
    status: str
    created_at: datetime
    practitioner: Optional[AppointmentPractitioner] = None
    service: Optional[AppointmentService] = None

    model_config = {"from_attributes": True}


class AdminAppointmentResponse(BaseModel):
    """Admin table row: names only, with the booking user's profile merged in."""
    id: uuid.UUID
    user_id: uuid.UUID
    user_name: Optional[str] = None
    practitioner_name: Optional[str] = None
    service_name: Optional[str] = None
    appointment_date: date
    appointment_time: str
    notes: str
    status: str
    created_at: datetime


class AppointmentStatusUpdate(BaseModel):
    status: AppointmentStatus
