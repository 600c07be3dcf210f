"""Boundary Protocols - contracts between core and shell.

Invariants:
    - Core NEVER imports from shell - dependency arrows point inward only
    - All IO operations accessed through Protocol types
    - Implementations provided by shell via dependency injection
      (SqlCoreStore, InMemoryCoreStore)
    - load_* return snapshots: mutating them has no effect until saved
    - save_state persists cores and commands together (one phase = one write)

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Async in Protocol: boundary methods are async because implementations do IO,
      but core pure functions that USE these records are never async themselves
"""

from typing import Protocol

from app.core.records import CoreInstance, StrategicCommand, SystemConfig


class CoreStore(Protocol):
    """Contract for core / command / config persistence - implemented by shell."""
    async def load_cores(self) -> list[CoreInstance]: ...
    async def save_cores(self, cores: list[CoreInstance]) -> None: ...
    async def load_commands(self) -> list[StrategicCommand]: ...
    async def save_commands(self, commands: list[StrategicCommand]) -> None: ...
    async def save_state(
        self, cores: list[CoreInstance], commands: list[StrategicCommand],
    ) -> None: ...
    async def load_config(self) -> SystemConfig: ...
    async def save_config(self, updates: dict) -> SystemConfig: ...
    async def get_live_prime_core(self) -> CoreInstance | None: ...
