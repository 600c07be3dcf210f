"""Infrastructure Layer - database sessions and cross-cutting concerns.

Invariants:
    - Infrastructure never imports core/ domain logic beyond the error types
    - All SQLAlchemy exceptions mapped to DatabaseError
"""
