"""Infrastructure Layer — database, authentication strategy, and logging.

Invariants:
    - Infrastructure never imports from api/
    - All database failures mapped to DatabaseError

Design Decisions:
    - The session manager owns connection state; routes only see sessions
"""
