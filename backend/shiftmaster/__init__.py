"""
ShiftMaster Backend — Application Package
===========================================

What:  REST API gateway for the ShiftMaster workforce-scheduling application.
How:   FastAPI app (`shiftmaster.main:app`) backed by async SQLAlchemy.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │     Services (Reporting Logic)      │  ← windows, dispatch, assembly
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
