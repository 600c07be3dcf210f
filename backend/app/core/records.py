"""Domain Records - plain dataclasses for cores, commands, and system config.

Invariants:
    - Records are pure data: no IO, no ORM coupling
    - capabilities / target_capabilities are ordered and duplicate-free
    - logs is append-only (only record_phase in core_lifecycle appends)
    - SystemConfig.guest_word_limit >= 0

Design Decisions:
    - Dataclasses over ORM rows: the controller and classifier run unchanged
      against the in-memory store and the SQL store
"""

from dataclasses import dataclass, field, fields
from datetime import datetime, timezone

from app.core.domain_types import (
    CommandId, CommandStatus, CoreId, CoreStatus, CoreType, Progress,
    DEFAULT_GUEST_WORD_LIMIT,
)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class CoreInstance:
    """One simulated AI core."""

    id: CoreId
    type: CoreType
    status: CoreStatus
    version: str
    capabilities: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=utc_now)
    last_active: datetime = field(default_factory=utc_now)

    @property
    def is_live(self) -> bool:
        return self.type == CoreType.PRIME and self.status == CoreStatus.ACTIVE


@dataclass
class StrategicCommand:
    """An admin instruction driving one clone/promote pipeline."""

    id: CommandId
    command: str
    issued_by: str
    issued_at: datetime = field(default_factory=utc_now)
    status: CommandStatus = CommandStatus.PENDING
    target_capabilities: list[str] = field(default_factory=list)
    progress: Progress = Progress(0)
    logs: list[str] = field(default_factory=list)


@dataclass
class SystemConfig:
    """Singleton runtime configuration, editable from the admin console."""

    guest_word_limit: int = DEFAULT_GUEST_WORD_LIMIT
    allowed_languages: list[str] = field(default_factory=lambda: ["all"])
    maintenance_mode: bool = False
    custom_settings: dict[str, str | int | float | bool] = field(default_factory=dict)

    def merged(self, updates: dict) -> "SystemConfig":
        """Shallow-merge a partial update. Unknown keys are ignored."""
        known = {f.name for f in fields(self)}
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in updates.items() if k in known})
        if values["guest_word_limit"] < 0:
            raise ValueError("guest_word_limit must be >= 0")
        return SystemConfig(**values)

    def to_dict(self) -> dict:
        return {f.name: getattr(self, f.name) for f in fields(self)}
