"""Chirp Application Package — users, tweets, and GraphQL over one FastAPI app.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
