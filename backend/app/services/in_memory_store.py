"""In-Memory Core Store - CoreStore implementation backed by Python lists.

Invariants:
    - Loads and saves deep-copy, so callers never share mutable records with the store
    - Same replace-all and shallow-merge semantics as SqlCoreStore
"""

import copy

from app.core.core_lifecycle import find_live_prime
from app.core.domain_types import DEFAULT_GUEST_WORD_LIMIT
from app.core.records import CoreInstance, StrategicCommand, SystemConfig


class InMemoryCoreStore:
    """Process-local store for tests and single-shot demos."""

    def __init__(
        self,
        cores: list[CoreInstance] | None = None,
        commands: list[StrategicCommand] | None = None,
        config: SystemConfig | None = None,
        default_guest_word_limit: int = DEFAULT_GUEST_WORD_LIMIT,
    ):
        self._cores = copy.deepcopy(cores or [])
        self._commands = copy.deepcopy(commands or [])
        self._config = copy.deepcopy(config)
        self._default_guest_word_limit = default_guest_word_limit

    async def load_cores(self) -> list[CoreInstance]:
        return copy.deepcopy(self._cores)

    async def save_cores(self, cores: list[CoreInstance]) -> None:
        self._cores = copy.deepcopy(cores)

    async def load_commands(self) -> list[StrategicCommand]:
        return copy.deepcopy(self._commands)

    async def save_commands(self, commands: list[StrategicCommand]) -> None:
        self._commands = copy.deepcopy(commands)

    async def save_state(
        self, cores: list[CoreInstance], commands: list[StrategicCommand],
    ) -> None:
        self._cores = copy.deepcopy(cores)
        self._commands = copy.deepcopy(commands)

    async def load_config(self) -> SystemConfig:
        if self._config is None:
            return SystemConfig(guest_word_limit=self._default_guest_word_limit)
        return copy.deepcopy(self._config)

    async def save_config(self, updates: dict) -> SystemConfig:
        self._config = (await self.load_config()).merged(updates)
        return copy.deepcopy(self._config)

    async def get_live_prime_core(self) -> CoreInstance | None:
        return copy.deepcopy(find_live_prime(self._cores))
