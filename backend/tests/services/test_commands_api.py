"""Strategic Commands API - submit, poll, list, cancel.

Invariants:
    - POST returns 202 with the pending record before any phase runs
    - Polling after the pipeline finishes shows completed/100 with 6 log lines
    - Unknown id -> 404; cancel without a pipeline in flight -> 409

Design Decisions:
    - Client fixture uses zero phase delay; tests call wait_for_idle() before polling
    - Cancel-in-flight swaps in a controller on a ManualPhaseTimer so the
      pipeline is parked between phases when the cancel lands
"""

import asyncio

from app.main import app
from app.services.lifecycle_controller import LifecycleController
from app.services.phase_timer import ManualPhaseTimer

VIDEO_COMMAND = "Develop capability to create photorealistic videos"


async def test_submit_returns_202_pending(client):
    res = await client.post("/api/v1/commands", json={"command": VIDEO_COMMAND})

    assert res.status_code == 202
    body = res.json()
    assert body["status"] == "pending"
    assert body["progress"] == 0
    assert body["issued_by"] == "Father"
    assert body["logs"] == [f"Command received: {VIDEO_COMMAND}"]
    assert body["id"].startswith("cmd-")

    await app.state.controller.wait_for_idle()


async def test_command_completes_and_is_pollable(client):
    res = await client.post(
        "/api/v1/commands", json={"command": VIDEO_COMMAND, "issued_by": "Admin"},
    )
    command_id = res.json()["id"]
    await app.state.controller.wait_for_idle()

    res = await client.get(f"/api/v1/commands/{command_id}")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "completed"
    assert body["progress"] == 100
    assert body["issued_by"] == "Admin"
    assert len(body["logs"]) == 6
    assert body["target_capabilities"] == [
        "Video Generation", "3D Rendering", "Physics Simulation",
    ]


async def test_list_commands(client):
    await client.post("/api/v1/commands", json={"command": "first"})
    await client.post("/api/v1/commands", json={"command": "second"})
    await app.state.controller.wait_for_idle()

    res = await client.get("/api/v1/commands")
    assert res.status_code == 200
    assert [c["command"] for c in res.json()] == ["first", "second"]


async def test_command_text_is_stripped(client):
    res = await client.post("/api/v1/commands", json={"command": "  make it faster  "})
    assert res.json()["command"] == "make it faster"
    await app.state.controller.wait_for_idle()


async def test_blank_command_rejected(client):
    res = await client.post("/api/v1/commands", json={"command": "   "})
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_get_unknown_command_returns_404(client):
    res = await client.get("/api/v1/commands/cmd-missing")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "RESOURCE_NOT_FOUND"


async def test_cancel_unknown_command_returns_404(client):
    res = await client.post("/api/v1/commands/cmd-missing/cancel")
    assert res.status_code == 404


async def test_cancel_finished_command_returns_409(client):
    res = await client.post("/api/v1/commands", json={"command": "make it faster"})
    command_id = res.json()["id"]
    await app.state.controller.wait_for_idle()

    res = await client.post(f"/api/v1/commands/{command_id}/cancel")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "PIPELINE_NOT_RUNNING"


async def test_cancel_in_flight_command_fails_it(client, seeded_sql_store):
    timer = ManualPhaseTimer()
    controller = LifecycleController(seeded_sql_store, timer=timer, phase_delay_ms=2000)
    app.state.controller = controller

    res = await client.post("/api/v1/commands", json={"command": VIDEO_COMMAND})
    command_id = res.json()["id"]

    res = await client.post(
        f"/api/v1/commands/{command_id}/cancel", json={"reason": "wrong target"},
    )
    assert res.status_code == 202
    assert res.json()["command_id"] == command_id

    for _ in range(200):
        if not controller.is_running(command_id):
            break
        await timer.advance(2000)
        await asyncio.sleep(0.01)

    body = (await client.get(f"/api/v1/commands/{command_id}")).json()
    assert body["status"] == "failed"
    assert body["logs"][-1].endswith("Pipeline failed: wrong target")

    cores = (await client.get("/api/v1/cores")).json()
    assert len(cores) == 1
    assert cores[0]["status"] == "active"
    assert cores[0]["version"] == "1.0.0"
    await controller.shutdown()
