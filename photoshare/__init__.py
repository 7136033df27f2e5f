"""
PhotoShare Backend - Application Package Initializer
====================================================

What: Marks the `photoshare` directory as a Python package.
Who:  Imported by uvicorn (`photoshare.main:app`), Alembic, and pytest.

Architecture Note:
    The backend keeps the same layered shape for every resource:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← toggles, fan-out, access checks
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the session beyond passing it along; services raise
    typed exceptions from `photoshare.exceptions` and the handlers in
    `photoshare.main` turn them into localized JSON errors.
"""

__version__ = "1.0.0"
