"""Schemas — request/response validation and the GraphQL type system.

Invariants:
    - Pydantic schemas validate at the REST boundary (parsed request bodies, responses)
    - Strawberry types define the GraphQL boundary; neither exposes password hashes

Design Decisions:
    - Separate from models: schemas are API contracts, models are persistence
"""
