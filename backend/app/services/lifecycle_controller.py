"""Lifecycle Controller - runs the five-phase core upgrade pipeline per strategic command.

Invariants:
    - submit_command returns the pending record before any phase runs
    - One pipeline in flight at a time (promotion lock held across all five phases);
      queued pipelines start in submission order
    - Every load-modify-save of cores/commands happens under the state lock, so
      a submit never interleaves with a phase write
    - Each phase appends exactly one log line and persists in one store call
    - Cancellation is checked before every phase fires. Once the promote phase
      starts the token is sealed and further cancel requests are refused
    - Every exit short of promotion rolls back: no live core, malformed version,
      vanished clone or command, operator cancel, shutdown, unexpected error.
      The command ends `failed` (when its record still exists) and an unfinished
      clone is discarded with its source prime woken, so one live prime survives

Design Decisions:
    - asyncio tasks + PhaseTimer over chained callbacks: tests step virtual time
    - Store injected (CoreStore protocol): SQL in the app, in-memory in unit tests
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from app.core.core_lifecycle import (
    PHASE_ANALYZE, PHASE_CLONE, PHASE_LEARN, PHASE_PROMOTE, PHASE_TEST,
    PhaseStep,
    add_capability,
    apply_phase_step,
    discard_clone,
    extract_target_capabilities,
    fail_command,
    find_command,
    find_core,
    find_live_prime,
    make_clone,
    new_command,
    promote_clone,
    set_core_status,
    sweep_retired,
)
from app.core.domain_types import CoreStatus
from app.core.errors import MalformedVersionError
from app.core.records import CoreInstance, StrategicCommand, utc_now
from app.core.repository_protocols import CoreStore
from app.services.phase_timer import AsyncioPhaseTimer, PhaseTimer

logger = logging.getLogger(__name__)

DEFAULT_CANCEL_REASON = "cancelled by operator"
SHUTDOWN_REASON = "interrupted by shutdown"


class CancellationToken:
    """Per-pipeline cancel flag, read by the pipeline before each phase.

    Sealed when the pipeline commits to promotion; cancel() then returns False.
    """

    def __init__(self):
        self._reason: str | None = None
        self._sealed = False

    def cancel(self, reason: str = DEFAULT_CANCEL_REASON) -> bool:
        if self._sealed:
            return False
        if self._reason is None:
            self._reason = reason
        return True

    def seal(self) -> None:
        self._sealed = True

    @property
    def cancelled(self) -> bool:
        return self._reason is not None

    @property
    def reason(self) -> str | None:
        return self._reason


class _PipelineAborted(Exception):
    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class _CommandVanished(Exception):
    pass


@dataclass
class _PipelineRun:
    command_id: str
    token: CancellationToken
    clone_id: str | None = None
    source_id: str | None = None
    started: bool = False


class LifecycleController:
    """Owns the pipeline tasks. One instance per application."""

    def __init__(
        self,
        store: CoreStore,
        timer: PhaseTimer | None = None,
        phase_delay_ms: int = 2000,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._store = store
        self._timer = timer or AsyncioPhaseTimer()
        self._phase_delay_ms = phase_delay_ms
        self._clock = clock
        self._promotion_lock = asyncio.Lock()
        self._state_lock = asyncio.Lock()
        self._tasks: dict[str, asyncio.Task] = {}
        self._tokens: dict[str, CancellationToken] = {}

    # --- Public API -----------------------------------------------------------

    async def submit_command(self, text: str, issued_by: str) -> StrategicCommand:
        """Persist a pending command and start its pipeline in the background."""
        async with self._state_lock:
            command = new_command(text, issued_by, self._clock())
            commands = await self._store.load_commands()
            commands.append(command)
            await self._store.save_commands(commands)

        logger.info(
            f"Command received from {issued_by}",
            extra={"command_id": command.id, "phase": "submit", "progress": 0},
        )
        self._start_pipeline(command.id)
        return command

    def cancel_command(self, command_id: str, reason: str = DEFAULT_CANCEL_REASON) -> bool:
        """Request cancellation.

        False when the command has no pipeline in flight or its promote phase
        has already started.
        """
        token = self._tokens.get(command_id)
        if token is None or not token.cancel(reason):
            return False
        logger.info("Cancellation requested", extra={"command_id": command_id})
        return True

    def is_running(self, command_id: str) -> bool:
        return command_id in self._tasks

    async def list_cores(self) -> list[CoreInstance]:
        return await self._store.load_cores()

    async def list_commands(self) -> list[StrategicCommand]:
        return await self._store.load_commands()

    async def get_command(self, command_id: str) -> StrategicCommand | None:
        return find_command(await self._store.load_commands(), command_id)

    async def wait_for_idle(self) -> None:
        """Wait until every submitted pipeline has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks.values()), return_exceptions=True)
            await asyncio.sleep(0)

    async def shutdown(self) -> None:
        """Cancel in-flight pipeline tasks (application shutdown)."""
        tasks = list(self._tasks.values())
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        if tasks:
            logger.info(f"Stopped {len(tasks)} in-flight pipeline(s)")

    # --- Task bookkeeping -----------------------------------------------------

    def _start_pipeline(self, command_id: str) -> None:
        token = CancellationToken()
        self._tokens[command_id] = token
        task = asyncio.create_task(
            self._run_pipeline(_PipelineRun(command_id, token)),
            name=f"pipeline-{command_id}",
        )
        self._tasks[command_id] = task
        task.add_done_callback(lambda t: self._forget(command_id, t))

    def _forget(self, command_id: str, task: asyncio.Task) -> None:
        self._tasks.pop(command_id, None)
        self._tokens.pop(command_id, None)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                f"Pipeline crashed: {exc}",
                extra={"command_id": command_id},
                exc_info=exc,
            )

    # --- Pipeline -------------------------------------------------------------

    async def _run_pipeline(self, run: _PipelineRun) -> None:
        try:
            async with self._promotion_lock:
                run.started = True
                try:
                    await self._run_phases(run)
                except _PipelineAborted as abort:
                    await self._fail(run, abort.reason)
                except _CommandVanished:
                    await self._fail(run, "command record vanished")
                except asyncio.CancelledError:
                    await self._fail(run, SHUTDOWN_REASON)
                    raise
                except Exception as e:
                    logger.error(
                        f"Pipeline crashed: {e}",
                        extra={"command_id": run.command_id, "core_id": run.clone_id},
                        exc_info=True,
                    )
                    await self._fail(run, f"internal error: {e}")
        except asyncio.CancelledError:
            # Cancelled while queued behind another pipeline.
            if not run.started:
                await self._fail(run, SHUTDOWN_REASON)
            raise

    async def _run_phases(self, run: _PipelineRun) -> None:
        self._check_cancelled(run)
        await self._clone_phase(run)
        for phase in (self._analyze_phase, self._learn_phase, self._test_phase):
            await self._await_next_phase(run)
            await phase(run)
        await self._await_next_phase(run)
        run.token.seal()
        await self._promote_phase(run)

    async def _await_next_phase(self, run: _PipelineRun) -> None:
        await self._timer.wait(self._phase_delay_ms)
        self._check_cancelled(run)

    def _check_cancelled(self, run: _PipelineRun) -> None:
        if run.token.cancelled:
            raise _PipelineAborted(run.token.reason or DEFAULT_CANCEL_REASON)

    async def _clone_phase(self, run: _PipelineRun) -> None:
        async with self._state_lock:
            cores, commands = await self._load_state()
            command = self._require_command(commands, run)
            live = find_live_prime(cores)
            if live is None:
                raise _PipelineAborted("no live prime core available")

            now = self._clock()
            clone = make_clone(live, now)
            cores.append(clone)
            set_core_status(cores, live.id, CoreStatus.HIBERNATING, now)
            apply_phase_step(command, PHASE_CLONE, now)
            run.clone_id, run.source_id = clone.id, live.id
            await self._store.save_state(cores, commands)

        self._log_phase(run, PHASE_CLONE, core_id=clone.id)

    async def _analyze_phase(self, run: _PipelineRun) -> None:
        async with self._state_lock:
            commands = await self._store.load_commands()
            command = self._require_command(commands, run)
            command.target_capabilities = extract_target_capabilities(command.command)
            apply_phase_step(command, PHASE_ANALYZE, self._clock())
            await self._store.save_commands(commands)
        self._log_phase(run, PHASE_ANALYZE)

    async def _learn_phase(self, run: _PipelineRun) -> None:
        async with self._state_lock:
            cores, commands = await self._load_state()
            command = self._require_command(commands, run)
            now = self._clock()
            clone = find_core(cores, run.clone_id)
            if clone is not None:
                for capability in command.target_capabilities:
                    add_capability(clone, capability)
                clone.last_active = now
            apply_phase_step(command, PHASE_LEARN, now)
            await self._store.save_state(cores, commands)
        self._log_phase(run, PHASE_LEARN, core_id=run.clone_id)

    async def _test_phase(self, run: _PipelineRun) -> None:
        async with self._state_lock:
            cores, commands = await self._load_state()
            command = self._require_command(commands, run)
            now = self._clock()
            set_core_status(cores, run.clone_id, CoreStatus.TESTING, now)
            apply_phase_step(command, PHASE_TEST, now)
            await self._store.save_state(cores, commands)
        self._log_phase(run, PHASE_TEST, core_id=run.clone_id)

    async def _promote_phase(self, run: _PipelineRun) -> None:
        async with self._state_lock:
            cores, commands = await self._load_state()
            command = self._require_command(commands, run)
            now = self._clock()
            try:
                promoted = promote_clone(cores, run.clone_id, now)
            except MalformedVersionError as e:
                raise _PipelineAborted(e.message)
            if promoted is None:
                raise _PipelineAborted(f"clone core '{run.clone_id}' no longer exists")

            cores = sweep_retired(cores)
            apply_phase_step(command, PHASE_PROMOTE, now)
            await self._store.save_state(cores, commands)

        run.clone_id = None
        self._log_phase(run, PHASE_PROMOTE, core_id=promoted.id)
        logger.info(
            f"Core {promoted.id} promoted to prime at version {promoted.version}",
            extra={"command_id": run.command_id, "core_id": promoted.id},
        )

    async def _fail(self, run: _PipelineRun, reason: str) -> None:
        async with self._state_lock:
            cores, commands = await self._load_state()
            now = self._clock()
            if run.clone_id is not None:
                cores = discard_clone(cores, run.clone_id, run.source_id, now)
            command = find_command(commands, run.command_id)
            if command is not None:
                fail_command(command, reason, now)
            await self._store.save_state(cores, commands)

        logger.warning(
            f"Pipeline failed: {reason}",
            extra={"command_id": run.command_id, "core_id": run.clone_id},
        )

    # --- Helpers --------------------------------------------------------------

    async def _load_state(self) -> tuple[list[CoreInstance], list[StrategicCommand]]:
        return await self._store.load_cores(), await self._store.load_commands()

    @staticmethod
    def _require_command(
        commands: list[StrategicCommand], run: _PipelineRun,
    ) -> StrategicCommand:
        command = find_command(commands, run.command_id)
        if command is None:
            raise _CommandVanished(run.command_id)
        return command

    @staticmethod
    def _log_phase(run: _PipelineRun, step: PhaseStep, core_id: str | None = None) -> None:
        logger.info(
            f"Phase {step.name} complete",
            extra={
                "command_id": run.command_id,
                "core_id": core_id,
                "phase": step.name,
                "progress": step.progress,
            },
        )
