"""Ezidcode Core Application Package - chat classifier and core lifecycle engine.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
