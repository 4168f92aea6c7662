import pytest


@pytest.mark.asyncio
async def test_message_notification_lifecycle(client, alice_headers, bob_headers, bob_id):
    await client.post("/api/v1/messages", json={"to_user_id": bob_id, "content": "gg"}, headers=alice_headers)

    [notification] = (await client.get("/api/v1/notifications", headers=bob_headers)).json()
    assert notification["category"] == "message"
    assert notification["title"] == "New message from Alice Liddell"
    assert notification["read"] is False

    forbidden = await client.post(f"/api/v1/notifications/{notification['id']}/read", headers=alice_headers)
    assert forbidden.status_code == 403

    marked = await client.post(f"/api/v1/notifications/{notification['id']}/read", headers=bob_headers)
    assert marked.json()["read"] is True

    unread = (await client.get("/api/v1/notifications", params={"unread_only": True}, headers=bob_headers)).json()
    assert unread == []

    deleted = await client.delete(f"/api/v1/notifications/{notification['id']}", headers=bob_headers)
    assert deleted.status_code == 204
    assert (await client.get("/api/v1/notifications", headers=bob_headers)).json() == []
