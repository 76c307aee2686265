"""API Layer — request pipeline, routes, and error handlers.

Invariants:
    - Routes mounted explicitly in main.create_app (no auto-discovery)
    - All error responses share the ChirpError envelope

Design Decisions:
    - Thin routes delegate to services/ for anything beyond a single query
"""
