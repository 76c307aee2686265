"""Services Layer — account and tweet operations used by the route groups.

Invariants:
    - Services take an AsyncSession explicitly (no hidden global DB handle)
    - Services raise ChirpError subclasses; routes never build error bodies
"""
