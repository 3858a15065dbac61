"""
AyurCare Backend — Application Package Initializer
===================================================

What: Marks the `ayurcare` directory as a Python package.
Who:  Imported by uvicorn (`ayurcare.main:app`), Alembic and pytest.

Architecture Note:
    The backend follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Storefront, clinic, blog rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes read the request and pick the status code, services own the
    queries and the ownership/role checks, models describe tables and
    schemas describe the JSON contract.
"""

__version__ = "1.0.0"
