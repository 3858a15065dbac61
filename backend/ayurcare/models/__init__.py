"""
ORM models. Importing this package registers every table with
`Base.metadata` (used by Alembic autogenerate and the test suite).
"""

from ayurcare.models.user import ROLE_ADMIN, User, UserRole
from ayurcare.models.catalog import CartItem, Product
from ayurcare.models.order import Order, OrderItem
from ayurcare.models.clinic import Appointment, Practitioner, Service
from ayurcare.models.blog import Blog

__all__ = [
    "ROLE_ADMIN",
    "User",
    "UserRole",
    "Product",
    "CartItem",
    "Order",
    "OrderItem",
    "Practitioner",
    "Service",
    "Appointment",
    "Blog",
]
