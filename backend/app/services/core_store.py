"""SQL Core Store - CoreStore implementation over the async SQLAlchemy session manager.

Invariants:
    - One DB session per call; save_state writes cores and commands in one commit
    - save_cores / save_commands are replace-all: rows missing from the list are deleted
    - load_* return detached dataclass snapshots ordered by creation / issue time
    - load_config never writes; a missing row yields the default SystemConfig
    - Datetimes read back from SQLite (naive) are tagged as UTC

Design Decisions:
    - Takes the DatabaseSessionManager (not a request session): the lifecycle
      controller keeps writing after the request that started it has returned
"""

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.core_lifecycle import recover_interrupted, seed_prime_core
from app.core.domain_types import (
    CommandStatus, CoreStatus, CoreType, DEFAULT_GUEST_WORD_LIMIT,
)
from app.core.records import CoreInstance, StrategicCommand, SystemConfig, utc_now
from app.core.repository_protocols import CoreStore
from app.infrastructure.database import DatabaseSessionManager
from app.models.core_instance import CoreInstanceRow
from app.models.strategic_command import StrategicCommandRow
from app.models.system_config import SINGLETON_ID, SystemConfigRow

logger = logging.getLogger(__name__)


class SqlCoreStore:
    """Persists cores, commands, and the config singleton through SQLAlchemy."""

    def __init__(
        self,
        db: DatabaseSessionManager,
        default_guest_word_limit: int = DEFAULT_GUEST_WORD_LIMIT,
    ):
        self._db = db
        self._default_guest_word_limit = default_guest_word_limit

    # --- Cores ----------------------------------------------------------------

    async def load_cores(self) -> list[CoreInstance]:
        async with self._db.session() as db:
            result = await db.execute(
                select(CoreInstanceRow).order_by(
                    CoreInstanceRow.created_at, CoreInstanceRow.id,
                ),
            )
            return [_row_to_core(row) for row in result.scalars().all()]

    async def save_cores(self, cores: list[CoreInstance]) -> None:
        async with self._db.session() as db:
            await _write_cores(db, cores)
            await db.commit()

    async def get_live_prime_core(self) -> CoreInstance | None:
        async with self._db.session() as db:
            result = await db.execute(
                select(CoreInstanceRow)
                .where(
                    CoreInstanceRow.type == CoreType.PRIME.value,
                    CoreInstanceRow.status == CoreStatus.ACTIVE.value,
                )
                .order_by(CoreInstanceRow.created_at)
                .limit(1),
            )
            row = result.scalar_one_or_none()
            return _row_to_core(row) if row else None

    # --- Commands -------------------------------------------------------------

    async def load_commands(self) -> list[StrategicCommand]:
        async with self._db.session() as db:
            result = await db.execute(
                select(StrategicCommandRow).order_by(
                    StrategicCommandRow.issued_at, StrategicCommandRow.id,
                ),
            )
            return [_row_to_command(row) for row in result.scalars().all()]

    async def save_commands(self, commands: list[StrategicCommand]) -> None:
        async with self._db.session() as db:
            await _write_commands(db, commands)
            await db.commit()

    async def save_state(
        self, cores: list[CoreInstance], commands: list[StrategicCommand],
    ) -> None:
        """Persist one pipeline phase: cores and commands in a single commit."""
        async with self._db.session() as db:
            await _write_cores(db, cores)
            await _write_commands(db, commands)
            await db.commit()

    # --- Config ---------------------------------------------------------------

    async def load_config(self) -> SystemConfig:
        async with self._db.session() as db:
            row = await db.get(SystemConfigRow, SINGLETON_ID)
            if row is None:
                return self._default_config()
            return _row_to_config(row)

    async def save_config(self, updates: dict) -> SystemConfig:
        """Shallow-merge `updates` into the stored config and return the result."""
        async with self._db.session() as db:
            row = await db.get(SystemConfigRow, SINGLETON_ID)
            current = _row_to_config(row) if row else self._default_config()
            merged = current.merged(updates)
            await db.merge(SystemConfigRow(id=SINGLETON_ID, **merged.to_dict()))
            await db.commit()
            return merged

    def _default_config(self) -> SystemConfig:
        return SystemConfig(guest_word_limit=self._default_guest_word_limit)


async def seed_defaults(store: CoreStore, now: datetime | None = None) -> bool:
    """Create the initial prime core when the store has none. Returns True if seeded.

    Also persists the config singleton so later merges start from a stored row.
    """
    await store.save_config({})
    cores = await store.load_cores()
    if cores:
        return False
    await store.save_cores([seed_prime_core(now or utc_now())])
    logger.info("Seeded initial prime core")
    return True


RESTART_FAILURE_REASON = "interrupted by restart"


async def recover_interrupted_pipelines(
    store: CoreStore, now: datetime | None = None,
) -> bool:
    """Roll back pipelines a previous process never finished. Returns True if it wrote.

    Must run before any controller accepts commands.
    """
    cores, commands = await store.load_cores(), await store.load_commands()
    cores, changed = recover_interrupted(
        cores, commands, RESTART_FAILURE_REASON, now or utc_now(),
    )
    if not changed:
        return False
    await store.save_state(cores, commands)
    logger.warning("Rolled back pipelines interrupted by the previous shutdown")
    return True


# --- Row <-> record conversion --------------------------------------------------

def _aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


async def _write_cores(db: AsyncSession, cores: list[CoreInstance]) -> None:
    ids = [c.id for c in cores]
    await db.execute(delete(CoreInstanceRow).where(CoreInstanceRow.id.not_in(ids)))
    for core in cores:
        await db.merge(_core_to_row(core))


async def _write_commands(db: AsyncSession, commands: list[StrategicCommand]) -> None:
    ids = [c.id for c in commands]
    await db.execute(
        delete(StrategicCommandRow).where(StrategicCommandRow.id.not_in(ids)),
    )
    for command in commands:
        await db.merge(_command_to_row(command))


def _core_to_row(core: CoreInstance) -> CoreInstanceRow:
    return CoreInstanceRow(
        id=core.id,
        type=core.type.value,
        status=core.status.value,
        version=core.version,
        capabilities=list(core.capabilities),
        created_at=core.created_at,
        last_active=core.last_active,
    )


def _row_to_core(row: CoreInstanceRow) -> CoreInstance:
    return CoreInstance(
        id=row.id,
        type=CoreType(row.type),
        status=CoreStatus(row.status),
        version=row.version,
        capabilities=list(row.capabilities or []),
        created_at=_aware(row.created_at),
        last_active=_aware(row.last_active),
    )


def _command_to_row(command: StrategicCommand) -> StrategicCommandRow:
    return StrategicCommandRow(
        id=command.id,
        command=command.command,
        issued_by=command.issued_by,
        issued_at=command.issued_at,
        status=command.status.value,
        target_capabilities=list(command.target_capabilities),
        progress=command.progress,
        logs=list(command.logs),
    )


def _row_to_command(row: StrategicCommandRow) -> StrategicCommand:
    return StrategicCommand(
        id=row.id,
        command=row.command,
        issued_by=row.issued_by,
        issued_at=_aware(row.issued_at),
        status=CommandStatus(row.status),
        target_capabilities=list(row.target_capabilities or []),
        progress=row.progress,
        logs=list(row.logs or []),
    )


def _row_to_config(row: SystemConfigRow) -> SystemConfig:
    return SystemConfig(
        guest_word_limit=row.guest_word_limit,
        allowed_languages=list(row.allowed_languages or []),
        maintenance_mode=row.maintenance_mode,
        custom_settings=dict(row.custom_settings or {}),
    )
