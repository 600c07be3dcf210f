"""Core Lifecycle - pure transitions for the clone/analyze/learn/test/promote pipeline.

Invariants:
    - All functions are PURE: no IO, no async, no clock reads (callers pass `now`)
    - Mutations on unknown ids are silent no-ops
    - Capability lists stay duplicate-free (add-if-absent)
    - promote_clone leaves at most one (prime, active) core
    - promote_clone validates the version before touching any core
    - record_phase appends exactly one timestamped log line
    - recover_interrupted leaves no clone and no in-flight command behind

Design Decisions:
    - Functions mutate the records they are handed: the controller loads a
      snapshot, applies one phase, then persists the snapshot in one store call
    - PIPELINE_PHASES is the single source for status/progress/log per phase
"""

from dataclasses import dataclass
from datetime import datetime
from uuid import uuid4

from app.core.domain_types import (
    CommandId, CommandStatus, CoreId, CoreStatus, CoreType, Progress,
    IN_FLIGHT_COMMAND_STATUSES, INITIAL_CORE_CAPABILITIES, INITIAL_CORE_VERSION,
    PRIME_CORE_ID, RETIRED_CORE_STATUSES,
)
from app.core.errors import MalformedVersionError
from app.core.records import CoreInstance, StrategicCommand


# --- Phase table --------------------------------------------------------------

@dataclass(frozen=True)
class PhaseStep:
    name: str
    status: CommandStatus
    progress: Progress
    log_message: str


PHASE_CLONE = PhaseStep(
    "clone", CommandStatus.PROCESSING, Progress(10),
    "Phase 1: Creating clone core...",
)
PHASE_ANALYZE = PhaseStep(
    "analyze", CommandStatus.PROCESSING, Progress(30),
    "Phase 2: Analyzing strategic command...",
)
PHASE_LEARN = PhaseStep(
    "learn", CommandStatus.PROCESSING, Progress(60),
    "Phase 3: Clone core learning new capabilities...",
)
PHASE_TEST = PhaseStep(
    "test", CommandStatus.TESTING, Progress(80),
    "Phase 4: Internal testing initiated...",
)
PHASE_PROMOTE = PhaseStep(
    "promote", CommandStatus.COMPLETED, Progress(100),
    "Phase 5: Clone promoted to Prime. Old core deleted. Upgrade complete!",
)

PIPELINE_PHASES: tuple[PhaseStep, ...] = (
    PHASE_CLONE, PHASE_ANALYZE, PHASE_LEARN, PHASE_TEST, PHASE_PROMOTE,
)


# --- Capability triggers ------------------------------------------------------

_CAPABILITY_TRIGGERS: tuple[tuple[tuple[str, ...], tuple[str, ...]], ...] = (
    (("video",), ("Video Generation", "3D Rendering", "Physics Simulation")),
    (
        ("aplikasi", "application"),
        ("Code Generation", "Full-stack Development", "Database Design"),
    ),
)


def extract_target_capabilities(command_text: str) -> list[str]:
    """Capabilities requested by a command, in trigger order, without duplicates."""
    lowered = command_text.lower()
    capabilities: list[str] = []
    for triggers, granted in _CAPABILITY_TRIGGERS:
        if any(trigger in lowered for trigger in triggers):
            for capability in granted:
                if capability not in capabilities:
                    capabilities.append(capability)
    return capabilities


# --- Core queries / mutations -------------------------------------------------

def new_core_id(core_type: CoreType) -> CoreId:
    return CoreId(f"core-{core_type.value}-{uuid4().hex[:12]}")


def seed_prime_core(now: datetime) -> CoreInstance:
    """The initial live core created when the store has no cores."""
    return CoreInstance(
        id=PRIME_CORE_ID,
        type=CoreType.PRIME,
        status=CoreStatus.ACTIVE,
        version=INITIAL_CORE_VERSION,
        capabilities=list(INITIAL_CORE_CAPABILITIES),
        created_at=now,
        last_active=now,
    )


def find_core(cores: list[CoreInstance], core_id: str) -> CoreInstance | None:
    return next((c for c in cores if c.id == core_id), None)


def find_live_prime(cores: list[CoreInstance]) -> CoreInstance | None:
    """The (prime, active) core, if any."""
    return next((c for c in cores if c.is_live), None)


def make_clone(
    source: CoreInstance, now: datetime, clone_id: CoreId | None = None,
) -> CoreInstance:
    """Clone in `upgrading` status with the source's version and capabilities."""
    return CoreInstance(
        id=clone_id or new_core_id(CoreType.CLONE),
        type=CoreType.CLONE,
        status=CoreStatus.UPGRADING,
        version=source.version,
        capabilities=list(source.capabilities),
        created_at=now,
        last_active=now,
    )


def set_core_status(
    cores: list[CoreInstance], core_id: str, status: CoreStatus, now: datetime,
) -> None:
    core = find_core(cores, core_id)
    if core is None:
        return
    core.status = status
    core.last_active = now


def add_capability(core: CoreInstance, capability: str) -> bool:
    """Add-if-absent. Returns True when the capability was new."""
    if capability in core.capabilities:
        return False
    core.capabilities.append(capability)
    return True


def bump_minor_version(version: str) -> str:
    """1.0.0 -> 1.1.0. Major and patch segments are kept verbatim."""
    parts = version.split(".")
    if len(parts) != 3 or not parts[1].isdigit():
        raise MalformedVersionError(version)
    parts[1] = str(int(parts[1]) + 1)
    return ".".join(parts)


def promote_clone(
    cores: list[CoreInstance], clone_id: str, now: datetime,
) -> CoreInstance | None:
    """Retire every live prime and make the clone the live prime.

    Raises MalformedVersionError before any mutation if the clone's version
    cannot be bumped. Returns None (and mutates nothing) for an unknown clone.
    """
    clone = find_core(cores, clone_id)
    if clone is None:
        return None
    next_version = bump_minor_version(clone.version)

    for core in cores:
        if core.is_live:
            core.status = CoreStatus.DELETED
            core.last_active = now

    clone.type = CoreType.PRIME
    clone.status = CoreStatus.ACTIVE
    clone.version = next_version
    clone.last_active = now
    return clone


def sweep_retired(cores: list[CoreInstance]) -> list[CoreInstance]:
    """Drop deleted and hibernating cores."""
    return [c for c in cores if c.status not in RETIRED_CORE_STATUSES]


def discard_clone(
    cores: list[CoreInstance], clone_id: str | None, source_id: str | None, now: datetime,
) -> list[CoreInstance]:
    """Undo an unfinished pipeline: drop the clone, wake the hibernated source.

    The source only returns to active when no other live prime exists.
    """
    remaining = [c for c in cores if c.id != clone_id]
    source = find_core(remaining, source_id) if source_id else None
    if (
        source is not None
        and source.status == CoreStatus.HIBERNATING
        and find_live_prime(remaining) is None
    ):
        source.status = CoreStatus.ACTIVE
        source.last_active = now
    return remaining


# --- Commands -----------------------------------------------------------------

def new_command(
    command_text: str, issued_by: str, now: datetime,
    command_id: CommandId | None = None,
) -> StrategicCommand:
    """A pending command whose first log line records its receipt."""
    return StrategicCommand(
        id=command_id or CommandId(f"cmd-{uuid4().hex[:12]}"),
        command=command_text,
        issued_by=issued_by,
        issued_at=now,
        status=CommandStatus.PENDING,
        target_capabilities=[],
        progress=Progress(0),
        logs=[f"Command received: {command_text}"],
    )


def find_command(
    commands: list[StrategicCommand], command_id: str,
) -> StrategicCommand | None:
    return next((c for c in commands if c.id == command_id), None)


def format_log_line(message: str, now: datetime) -> str:
    return f"[{now.isoformat()}] {message}"


def record_phase(
    command: StrategicCommand,
    status: CommandStatus,
    progress: Progress,
    message: str,
    now: datetime,
) -> None:
    command.status = status
    command.progress = progress
    command.logs.append(format_log_line(message, now))


def apply_phase_step(command: StrategicCommand, step: PhaseStep, now: datetime) -> None:
    record_phase(command, step.status, step.progress, step.log_message, now)


def fail_command(command: StrategicCommand, reason: str, now: datetime) -> None:
    """Terminal `failed` transition. Progress keeps its last value."""
    record_phase(
        command, CommandStatus.FAILED, command.progress,
        f"Pipeline failed: {reason}", now,
    )


# --- Restart recovery ---------------------------------------------------------

def recover_interrupted(
    cores: list[CoreInstance],
    commands: list[StrategicCommand],
    reason: str,
    now: datetime,
) -> tuple[list[CoreInstance], bool]:
    """Undo pipelines that a previous process left half-done.

    Clones are dropped. When no live prime remains, the most recently active
    hibernating prime is woken. Retired cores are then swept and every
    pending/processing/testing command is failed with `reason`.
    Returns the surviving cores and whether anything changed.
    """
    remaining = [c for c in cores if c.type != CoreType.CLONE]
    changed = len(remaining) != len(cores)

    if find_live_prime(remaining) is None:
        sleeping = [
            c for c in remaining
            if c.type == CoreType.PRIME and c.status == CoreStatus.HIBERNATING
        ]
        if sleeping:
            woken = max(sleeping, key=lambda c: c.last_active)
            woken.status = CoreStatus.ACTIVE
            woken.last_active = now
            changed = True

    if find_live_prime(remaining) is not None:
        swept = sweep_retired(remaining)
        changed = changed or len(swept) != len(remaining)
        remaining = swept

    for command in commands:
        if command.status in IN_FLIGHT_COMMAND_STATUSES:
            fail_command(command, reason, now)
            changed = True

    return remaining, changed
