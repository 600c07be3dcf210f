"""Chat API - classifier replies, guest truncation, validation."""


async def test_authenticated_reply(client):
    res = await client.post(
        "/api/v1/chat", json={"message": "Who are you", "is_authenticated": True},
    )
    assert res.status_code == 200
    body = res.json()
    assert body["response"].startswith("I am Ezidcode AI")
    assert body["word_limit_reached"] is False
    assert body["word_count"] == len(body["response"].split())


async def test_guest_reply_respects_configured_limit(client):
    await client.patch("/api/v1/config", json={"guest_word_limit": 5})

    res = await client.post("/api/v1/chat", json={"message": "Who are you"})
    body = res.json()
    assert body["word_limit_reached"] is True
    assert body["response"].startswith("I am Ezidcode AI, an...")
    assert "[5 word limit reached." in body["response"]


async def test_guest_short_reply_not_truncated(client):
    res = await client.post("/api/v1/chat", json={"message": "hello"})
    body = res.json()
    assert body["word_limit_reached"] is False
    assert "word limit reached" not in body["response"]


async def test_indonesian_message_gets_indonesian_reply(client):
    res = await client.post(
        "/api/v1/chat", json={"message": "siapa kamu?", "is_authenticated": True},
    )
    assert res.json()["response"].startswith("Saya adalah Ezidcode AI")


async def test_empty_message_is_accepted(client):
    res = await client.post("/api/v1/chat", json={"message": ""})
    assert res.status_code == 200
    assert 'your message: "".' in res.json()["response"]


async def test_missing_message_rejected(client):
    res = await client.post("/api/v1/chat", json={})
    assert res.status_code == 400
    assert res.json()["error"]["details"][0]["field"].endswith("message")
