"""Pydantic Schemas — passive record shapes and request/response validation.

Invariants:
    - Field names mirror the external relational schema (never renamed)
    - Schemas validate at system boundary (provider payloads, API requests)

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence mirrors
"""
