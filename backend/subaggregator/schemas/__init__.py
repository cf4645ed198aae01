"""Pydantic Schemas — request/response records for API endpoints.

Invariants:
    - Schemas check types at the system boundary; business rules live in core/

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
