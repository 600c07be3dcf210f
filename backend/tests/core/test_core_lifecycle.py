"""Core lifecycle tests - pure transitions of the upgrade pipeline.

Tests cover:
    - Capability extraction from command text (triggers, union, order)
    - Clone creation copies version/capabilities without aliasing
    - add_capability is add-if-absent
    - Version bump: minor +1, malformed versions rejected
    - Promotion: single live prime, validation before mutation, unknown id no-op
    - Sweep removes deleted/hibernating cores
    - discard_clone restores the hibernated source
    - Command logs: one timestamped line per phase
    - Restart recovery drops clones, wakes a prime, fails in-flight commands
"""

from datetime import datetime, timezone

import pytest

from app.core.core_lifecycle import (
    PIPELINE_PHASES,
    add_capability,
    apply_phase_step,
    bump_minor_version,
    discard_clone,
    extract_target_capabilities,
    fail_command,
    find_live_prime,
    make_clone,
    new_command,
    promote_clone,
    recover_interrupted,
    seed_prime_core,
    set_core_status,
    sweep_retired,
)
from app.core.domain_types import CommandStatus, CoreStatus, CoreType
from app.core.errors import MalformedVersionError
from app.core.records import CoreInstance

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
LATER = datetime(2026, 10, 19, 12, 5, tzinfo=timezone.utc)


def _prime(version: str = "1.0.0") -> CoreInstance:
    core = seed_prime_core(NOW)
    core.version = version
    return core


# --- Capability extraction ----------------------------------------------------

def test_video_trigger_adds_three_capabilities():
    caps = extract_target_capabilities("Develop capability to create photorealistic videos")
    assert caps == ["Video Generation", "3D Rendering", "Physics Simulation"]


@pytest.mark.parametrize("text", ["Buat aplikasi mobile", "Build an Application backend"])
def test_application_triggers(text):
    assert extract_target_capabilities(text) == [
        "Code Generation", "Full-stack Development", "Database Design",
    ]


def test_multiple_triggers_accumulate():
    caps = extract_target_capabilities("video editing application")
    assert len(caps) == 6
    assert caps[0] == "Video Generation"
    assert caps[3] == "Code Generation"


def test_both_application_keywords_do_not_duplicate():
    caps = extract_target_capabilities("aplikasi application")
    assert len(caps) == len(set(caps)) == 3


def test_no_trigger_yields_no_capabilities():
    assert extract_target_capabilities("improve response tone") == []


# --- Clone / capabilities -----------------------------------------------------

def test_make_clone_copies_version_and_capabilities():
    prime = _prime("1.4.2")
    clone = make_clone(prime, LATER)
    assert clone.type == CoreType.CLONE
    assert clone.status == CoreStatus.UPGRADING
    assert clone.version == "1.4.2"
    assert clone.capabilities == prime.capabilities
    assert clone.id != prime.id
    assert clone.id.startswith("core-clone-")


def test_clone_capabilities_are_not_aliased():
    prime = _prime()
    clone = make_clone(prime, LATER)
    add_capability(clone, "Video Generation")
    assert "Video Generation" not in prime.capabilities


def test_add_capability_is_idempotent():
    core = _prime()
    assert add_capability(core, "Video Generation") is True
    assert add_capability(core, "Video Generation") is False
    assert core.capabilities.count("Video Generation") == 1


def test_set_core_status_unknown_id_is_noop():
    cores = [_prime()]
    set_core_status(cores, "core-missing", CoreStatus.DELETED, LATER)
    assert cores[0].status == CoreStatus.ACTIVE


def test_set_core_status_touches_last_active():
    cores = [_prime()]
    set_core_status(cores, cores[0].id, CoreStatus.HIBERNATING, LATER)
    assert cores[0].status == CoreStatus.HIBERNATING
    assert cores[0].last_active == LATER


# --- Version bump -------------------------------------------------------------

@pytest.mark.parametrize("before, after", [
    ("1.0.0", "1.1.0"),
    ("1.1.0", "1.2.0"),
    ("2.9.7", "2.10.7"),
])
def test_bump_minor_version(before, after):
    assert bump_minor_version(before) == after


@pytest.mark.parametrize("version", ["1.x.0", "1.0", "1.-1.0", "", "1..0", "a.b.c.d"])
def test_bump_rejects_malformed_versions(version):
    with pytest.raises(MalformedVersionError) as exc:
        bump_minor_version(version)
    assert exc.value.code == "MALFORMED_VERSION"


# --- Promotion ----------------------------------------------------------------

def test_promote_clone_replaces_live_prime():
    prime = _prime()
    clone = make_clone(prime, NOW)
    cores = [prime, clone]

    promoted = promote_clone(cores, clone.id, LATER)

    assert promoted is clone
    assert prime.status == CoreStatus.DELETED
    assert clone.type == CoreType.PRIME
    assert clone.status == CoreStatus.ACTIVE
    assert clone.version == "1.1.0"
    assert [c for c in cores if c.is_live] == [clone]


def test_promote_with_malformed_version_mutates_nothing():
    prime = _prime()
    clone = make_clone(prime, NOW)
    clone.version = "1.beta.0"
    cores = [prime, clone]

    with pytest.raises(MalformedVersionError):
        promote_clone(cores, clone.id, LATER)

    assert prime.status == CoreStatus.ACTIVE
    assert clone.type == CoreType.CLONE


def test_promote_unknown_clone_is_noop():
    prime = _prime()
    cores = [prime]
    assert promote_clone(cores, "core-clone-missing", LATER) is None
    assert prime.is_live


def test_sweep_removes_deleted_and_hibernating():
    live = _prime()
    deleted = make_clone(live, NOW)
    deleted.status = CoreStatus.DELETED
    sleeping = make_clone(live, NOW)
    sleeping.status = CoreStatus.HIBERNATING
    testing = make_clone(live, NOW)
    testing.status = CoreStatus.TESTING

    remaining = sweep_retired([live, deleted, sleeping, testing])

    assert remaining == [live, testing]


def test_full_promotion_cycle_leaves_single_live_prime():
    prime = _prime()
    clone = make_clone(prime, NOW)
    cores = [prime, clone]
    set_core_status(cores, prime.id, CoreStatus.HIBERNATING, NOW)

    promote_clone(cores, clone.id, LATER)
    cores = sweep_retired(cores)

    assert len(cores) == 1
    assert find_live_prime(cores) is clone


def test_discard_clone_wakes_hibernated_source():
    prime = _prime()
    clone = make_clone(prime, NOW)
    cores = [prime, clone]
    set_core_status(cores, prime.id, CoreStatus.HIBERNATING, NOW)

    remaining = discard_clone(cores, clone.id, prime.id, LATER)

    assert remaining == [prime]
    assert prime.is_live


def test_discard_clone_keeps_source_asleep_when_another_prime_is_live():
    sleeping = _prime()
    sleeping.status = CoreStatus.HIBERNATING
    other = make_clone(sleeping, NOW)
    other.type, other.status = CoreType.PRIME, CoreStatus.ACTIVE

    discard_clone([sleeping, other], None, sleeping.id, LATER)

    assert sleeping.status == CoreStatus.HIBERNATING


# --- Commands -----------------------------------------------------------------

def test_new_command_is_pending_with_receipt_log():
    command = new_command("make videos", "Father", NOW)
    assert command.status == CommandStatus.PENDING
    assert command.progress == 0
    assert command.logs == ["Command received: make videos"]
    assert command.id.startswith("cmd-")


def test_each_phase_appends_one_timestamped_line():
    command = new_command("make videos", "Father", NOW)
    for step in PIPELINE_PHASES:
        apply_phase_step(command, step, LATER)

    assert command.status == CommandStatus.COMPLETED
    assert command.progress == 100
    assert len(command.logs) == 1 + len(PIPELINE_PHASES)
    assert all(line.startswith(f"[{LATER.isoformat()}] ") for line in command.logs[1:])


def test_phase_table_progress_is_increasing():
    progress = [step.progress for step in PIPELINE_PHASES]
    assert progress == [10, 30, 60, 80, 100]
    assert [s.status for s in PIPELINE_PHASES] == [
        CommandStatus.PROCESSING, CommandStatus.PROCESSING, CommandStatus.PROCESSING,
        CommandStatus.TESTING, CommandStatus.COMPLETED,
    ]


def test_fail_command_keeps_progress():
    command = new_command("x", "Father", NOW)
    apply_phase_step(command, PIPELINE_PHASES[0], NOW)
    fail_command(command, "cancelled by operator", LATER)
    assert command.status == CommandStatus.FAILED
    assert command.progress == 10
    assert command.logs[-1].endswith("Pipeline failed: cancelled by operator")


# --- Restart recovery ---------------------------------------------------------

def test_recover_rolls_back_half_done_pipeline():
    prime = _prime()
    clone = make_clone(prime, NOW)
    cores = [prime, clone]
    set_core_status(cores, prime.id, CoreStatus.HIBERNATING, NOW)
    running = new_command("make videos", "Father", NOW)
    apply_phase_step(running, PIPELINE_PHASES[0], NOW)
    queued = new_command("build an app", "Father", NOW)
    done = new_command("done", "Father", NOW)
    for step in PIPELINE_PHASES:
        apply_phase_step(done, step, NOW)
    commands = [running, queued, done]

    remaining, changed = recover_interrupted(cores, commands, "interrupted by restart", LATER)

    assert changed is True
    assert remaining == [prime]
    assert prime.is_live
    assert prime.last_active == LATER
    assert running.status == queued.status == CommandStatus.FAILED
    assert running.progress == 10
    assert running.logs[-1].endswith("Pipeline failed: interrupted by restart")
    assert done.status == CommandStatus.COMPLETED


def test_recover_wakes_most_recent_hibernating_prime():
    older, newer = _prime(), _prime()
    newer.id = "core-prime-newer"
    older.status = newer.status = CoreStatus.HIBERNATING
    newer.last_active = LATER

    remaining, _ = recover_interrupted([older, newer], [], "restart", LATER)

    assert remaining == [newer]
    assert newer.is_live


def test_recover_sweeps_leftovers_beside_a_live_prime():
    live = _prime()
    asleep = _prime()
    asleep.id, asleep.status = "core-prime-old", CoreStatus.HIBERNATING

    remaining, changed = recover_interrupted([live, asleep], [], "restart", LATER)

    assert changed is True
    assert remaining == [live]


def test_recover_on_clean_state_changes_nothing():
    prime = _prime()
    done = new_command("done", "Father", NOW)
    fail_command(done, "cancelled by operator", NOW)

    remaining, changed = recover_interrupted([prime], [done], "restart", LATER)

    assert changed is False
    assert remaining == [prime]
    assert prime.last_active == NOW
