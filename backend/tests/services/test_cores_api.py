"""Core Instances API - list and live-core lookup."""

from app.main import app


async def test_list_cores_returns_seeded_prime(client):
    res = await client.get("/api/v1/cores")
    assert res.status_code == 200
    [core] = res.json()
    assert core["id"] == "core-prime-001"
    assert core["type"] == "prime"
    assert core["status"] == "active"
    assert core["version"] == "1.0.0"
    assert len(core["capabilities"]) == 4


async def test_live_core_after_upgrade(client):
    await client.post("/api/v1/commands", json={"command": "Buat aplikasi kasir"})
    await app.state.controller.wait_for_idle()

    res = await client.get("/api/v1/cores/live")
    assert res.status_code == 200
    body = res.json()
    assert body["id"] != "core-prime-001"
    assert body["version"] == "1.1.0"
    assert "Full-stack Development" in body["capabilities"]


async def test_no_live_core_returns_409(client, seeded_sql_store):
    await seeded_sql_store.save_cores([])

    res = await client.get("/api/v1/cores/live")
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "NO_LIVE_CORE"
