"""Pydantic Schemas — request validation for API endpoints.

Invariants:
    - Schemas validate at the system boundary (request bodies)
    - Responses are built by the projector, not by response_model

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
