# Services package init
"""
AyurCare Backend — Services Layer
==================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
How:   Stateless service singletons receive the request's AsyncSession and the
       signed-in user for each call, run the queries, and return Pydantic
       response models.

Service Inventory:
    - AuthService:    sign-up, sign-in, profile
    - CatalogService: public catalogue and admin product management
    - CartService:    per-user cart lines
    - OrderService:   checkout, order history, reorder, admin delivery status
    - ClinicService:  practitioners, services, slots, appointments
    - BlogService:    published posts and admin post management
    - UserService:    admin user listing with order history
"""

from typing import Any, Dict, Iterable

from ayurcare.exceptions import ValidationError


def apply_partial_update(
    instance: Any,
    changes: Dict[str, Any],
    required: Iterable[str] = (),
) -> None:
    """
    Copies fields from a PATCH body onto an ORM instance.

    `changes` is `model_dump(exclude_unset=True)`, so only fields sent by
    the client are written. Explicit nulls are rejected for columns listed
    in `required`.
    """
    required = set(required)
    for field, value in changes.items():
        if value is None and field in required:
            raise ValidationError(message=f"'{field}' cannot be empty", field=field)
        setattr(instance, field, value)
