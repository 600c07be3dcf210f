"""Services Layer - stores, lifecycle controller, chat service.

Invariants:
    - Services orchestrate IO around the pure functions in core/
    - Stores are injected; nothing here reaches for a module-level store
"""
