"""
AyurCare Backend — Admin Route Handlers
========================================

What:  Back-office endpoints behind the `admin` role, mounted at /api/admin.

    products         GET, POST, PATCH /{id}, DELETE /{id}
    orders           GET, PATCH /{id}/delivery-status
    users            GET (with each user's orders)
    practitioners    GET, POST, PATCH /{id}, DELETE /{id}
    services         GET, POST, PATCH /{id}, DELETE /{id}
    appointments     GET, PATCH /{id}/status
    blogs            GET, POST, PATCH /{id}, DELETE /{id}

Who:   Every route carries the router-level `require_admin` dependency, so a
       missing token answers 401 and a non-admin token answers 403 before any
       handler runs.
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ayurcare.database import get_db_session
from ayurcare.dependencies import require_admin
from ayurcare.models.user import User
from ayurcare.schemas.blog import BlogCreate, BlogResponse, BlogUpdate
from ayurcare.schemas.catalog import ProductCreate, ProductResponse, ProductUpdate
from ayurcare.schemas.clinic import (
    AdminAppointmentResponse,
    AppointmentResponse,
    AppointmentStatusUpdate,
    PractitionerCreate,
    PractitionerResponse,
    PractitionerUpdate,
    ServiceCreate,
    ServiceResponse,
    ServiceUpdate,
)
from ayurcare.schemas.common import ErrorResponse
from ayurcare.schemas.order import AdminOrderResponse, DeliveryStatusUpdate, OrderResponse
from ayurcare.schemas.user import AdminUserResponse
from ayurcare.services.blog_service import blog_service
from ayurcare.services.catalog_service import catalog_service
from ayurcare.services.clinic_service import clinic_service
from ayurcare.services.order_service import order_service
from ayurcare.services.user_service import user_service

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)],
    responses={
        401: {"description": "Not signed in", "model": ErrorResponse},
        403: {"description": "Admin access required", "model": ErrorResponse},
    },
)

_NOT_FOUND = {404: {"description": "Not found", "model": ErrorResponse}}


# ── Products ──────────────────────────────────────────────────────────────

@router.get("/products", response_model=List[ProductResponse], summary="All products")
async def list_products(db: AsyncSession = Depends(get_db_session)) -> List[ProductResponse]:
    return await catalog_service.list_all_products(db)


@router.post("/products", status_code=201, response_model=ProductResponse, summary="Create a product")
async def create_product(
    body: ProductCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    return await catalog_service.create_product(db, body)


@router.patch(
    "/products/{product_id}",
    response_model=ProductResponse,
    responses=_NOT_FOUND,
    summary="Update a product",
)
async def update_product(
    product_id: UUID,
    body: ProductUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ProductResponse:
    return await catalog_service.update_product(db, product_id, body)


@router.delete("/products/{product_id}", status_code=204, responses=_NOT_FOUND, summary="Delete a product")
async def delete_product(product_id: UUID, db: AsyncSession = Depends(get_db_session)) -> None:
    await catalog_service.delete_product(db, product_id)


# ── Orders ────────────────────────────────────────────────────────────────

@router.get("/orders", response_model=List[AdminOrderResponse], summary="All orders, newest first")
async def list_orders(db: AsyncSession = Depends(get_db_session)) -> List[AdminOrderResponse]:
    return await order_service.list_all_orders(db)


@router.patch(
    "/orders/{order_id}/delivery-status",
    response_model=OrderResponse,
    responses=_NOT_FOUND,
    summary="Move an order to processing, shipped or delivered",
)
async def update_delivery_status(
    order_id: UUID,
    body: DeliveryStatusUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> OrderResponse:
    return await order_service.update_delivery_status(db, order_id, body.delivery_status)


# ── Users ─────────────────────────────────────────────────────────────────

@router.get("/users", response_model=List[AdminUserResponse], summary="All users with their orders")
async def list_users(db: AsyncSession = Depends(get_db_session)) -> List[AdminUserResponse]:
    return await user_service.list_users_with_orders(db)


# ── Practitioners ─────────────────────────────────────────────────────────

@router.get("/practitioners", response_model=List[PractitionerResponse], summary="All practitioners")
async def list_practitioners(db: AsyncSession = Depends(get_db_session)) -> List[PractitionerResponse]:
    return await clinic_service.list_all_practitioners(db)


@router.post(
    "/practitioners",
    status_code=201,
    response_model=PractitionerResponse,
    summary="Add a practitioner",
)
async def create_practitioner(
    body: PractitionerCreate,
    db: AsyncSession = Depends(get_db_session),
) -> PractitionerResponse:
    return await clinic_service.create_practitioner(db, body)


@router.patch(
    "/practitioners/{practitioner_id}",
    response_model=PractitionerResponse,
    responses=_NOT_FOUND,
    summary="Update a practitioner",
)
async def update_practitioner(
    practitioner_id: UUID,
    body: PractitionerUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> PractitionerResponse:
    return await clinic_service.update_practitioner(db, practitioner_id, body)


@router.delete(
    "/practitioners/{practitioner_id}",
    status_code=204,
    responses=_NOT_FOUND,
    summary="Delete a practitioner",
)
async def delete_practitioner(practitioner_id: UUID, db: AsyncSession = Depends(get_db_session)) -> None:
    await clinic_service.delete_practitioner(db, practitioner_id)


# ── Services ──────────────────────────────────────────────────────────────

@router.get("/services", response_model=List[ServiceResponse], summary="All services")
async def list_services(db: AsyncSession = Depends(get_db_session)) -> List[ServiceResponse]:
    return await clinic_service.list_all_services(db)


@router.post("/services", status_code=201, response_model=ServiceResponse, summary="Add a service")
async def create_service(
    body: ServiceCreate,
    db: AsyncSession = Depends(get_db_session),
) -> ServiceResponse:
    return await clinic_service.create_service(db, body)


@router.patch(
    "/services/{service_id}",
    response_model=ServiceResponse,
    responses=_NOT_FOUND,
    summary="Update a service",
)
async def update_service(
    service_id: UUID,
    body: ServiceUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> ServiceResponse:
    return await clinic_service.update_service(db, service_id, body)


@router.delete("/services/{service_id}", status_code=204, responses=_NOT_FOUND, summary="Delete a service")
async def delete_service(service_id: UUID, db: AsyncSession = Depends(get_db_session)) -> None:
    await clinic_service.delete_service(db, service_id)


# ── Appointments ──────────────────────────────────────────────────────────

@router.get(
    "/appointments",
    response_model=List[AdminAppointmentResponse],
    summary="All appointments, latest date first",
)
async def list_appointments(db: AsyncSession = Depends(get_db_session)) -> List[AdminAppointmentResponse]:
    return await clinic_service.list_all_appointments(db)


@router.patch(
    "/appointments/{appointment_id}/status",
    response_model=AppointmentResponse,
    responses=_NOT_FOUND,
    summary="Confirm, complete or cancel an appointment",
)
async def update_appointment_status(
    appointment_id: UUID,
    body: AppointmentStatusUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> AppointmentResponse:
    return await clinic_service.update_appointment_status(db, appointment_id, body.status)


# ── Blogs ─────────────────────────────────────────────────────────────────

@router.get("/blogs", response_model=List[BlogResponse], summary="All posts, drafts included")
async def list_blogs(db: AsyncSession = Depends(get_db_session)) -> List[BlogResponse]:
    return await blog_service.list_all(db)


@router.post("/blogs", status_code=201, response_model=BlogResponse, summary="Write a post")
async def create_blog(
    body: BlogCreate,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    return await blog_service.create(db, admin, body)


@router.patch("/blogs/{blog_id}", response_model=BlogResponse, responses=_NOT_FOUND, summary="Edit a post")
async def update_blog(
    blog_id: UUID,
    body: BlogUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> BlogResponse:
    return await blog_service.update(db, blog_id, body)


@router.delete("/blogs/{blog_id}", status_code=204, responses=_NOT_FOUND, summary="Delete a post")
async def delete_blog(blog_id: UUID, db: AsyncSession = Depends(get_db_session)) -> None:
    await blog_service.delete(db, blog_id)
