"""Core Layer — pure logic, no IO, no async, no DB.

Invariants:
    - No module in core/ imports from services/, api/, infrastructure/, or db/
    - All functions are pure and deterministic (token timestamps aside)

Design Decisions:
    - Functional core separated from the FastAPI/SQLAlchemy shell
"""
