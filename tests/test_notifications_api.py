async def test_broadcast_counts_recipients(client, factory):
    await factory.teacher()
    await factory.teacher()
    await factory.student()

    response = await client.post("/api/v1/notifications/broadcast", json={
        "title": "Mid-term break",
        "message": "School resumes on Monday.",
        "target_audience": "Teacher",
        "priority": "High"
    })
    assert response.status_code == 201
    body = response.json()
    assert body["is_broadcast"] is True
    assert body["recipients"] == 2

    everyone = (await client.post("/api/v1/notifications/broadcast", json={
        "title": "Sports day", "message": "Friday", "target_audience": "All"
    })).json()
    assert everyone["recipients"] == 3


async def test_read_tracking(client):
    for title, audience in (("One", "All"), ("Two", "Parent"), ("Three", "Teacher")):
        await client.post("/api/v1/notifications/", json={
            "title": title, "message": "...", "target_audience": audience
        })

    count = (await client.get("/api/v1/notifications/unread-count", params={"reader_id": 5, "audience": "Parent"})).json()
    assert count["unread_count"] == 2

    listing = (await client.get("/api/v1/notifications/", params={"audience": "Parent"})).json()
    first_id = listing["items"][0]["id"]
    response = await client.put(f"/api/v1/notifications/{first_id}/read", json={"reader_id": 5})
    assert response.status_code == 200
    # Marking twice is harmless
    await client.put(f"/api/v1/notifications/{first_id}/read", json={"reader_id": 5})

    count = (await client.get("/api/v1/notifications/unread-count", params={"reader_id": 5, "audience": "Parent"})).json()
    assert count["unread_count"] == 1

    response = await client.put("/api/v1/notifications/mark-all-read", json={"reader_id": 5})
    assert response.json()["marked"] == 2

    count = (await client.get("/api/v1/notifications/unread-count", params={"reader_id": 5})).json()
    assert count["unread_count"] == 0


async def test_deleted_notification_is_gone(client):
    created = (await client.post("/api/v1/notifications/", json={"title": "Typo", "message": "oops"})).json()
    assert (await client.delete(f"/api/v1/notifications/{created['id']}")).status_code == 200
    assert (await client.get(f"/api/v1/notifications/{created['id']}")).status_code == 404
    response = await client.put(f"/api/v1/notifications/{created['id']}/read", json={"reader_id": 1})
    assert response.status_code == 404
