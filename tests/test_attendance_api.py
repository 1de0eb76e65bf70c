async def test_mark_and_remark_attendance(client, factory):
    klass = await factory.klass()
    ada = await factory.student(class_id=klass["id"])
    tunde = await factory.student(class_id=klass["id"])

    response = await client.post("/api/v1/attendance/", json={
        "class_id": klass["id"],
        "date": "2024-10-07",
        "records": [
            {"student_id": ada["id"], "status": "Present"},
            {"student_id": tunde["id"], "status": "Absent", "remarks": "Sick"},
        ]
    })
    assert response.status_code == 200
    summary = response.json()["summary"]
    assert (summary["Present"], summary["Absent"], summary["attendance_rate"]) == (1, 1, 50.0)

    # Marking the same day again overwrites the earlier record
    await client.post("/api/v1/attendance/", json={
        "class_id": klass["id"],
        "date": "2024-10-07",
        "records": [{"student_id": tunde["id"], "status": "Late"}]
    })
    await client.post("/api/v1/attendance/", json={
        "class_id": klass["id"],
        "date": "2024-10-08",
        "records": [{"student_id": tunde["id"], "status": "Absent"}]
    })

    body = (await client.get(f"/api/v1/attendance/student/{tunde['id']}")).json()
    assert body["summary"]["total_days"] == 2
    assert [r["status"] for r in body["records"]] == ["Absent", "Late"]

    body = (await client.get(f"/api/v1/attendance/class/{klass['id']}", params={"date": "2024-10-07"})).json()
    assert body["summary"]["total_days"] == 2
    assert body["summary"]["attendance_rate"] == 100.0


async def test_attendance_for_student_outside_class(client, factory):
    klass = await factory.klass()
    outsider = await factory.student()
    response = await client.post("/api/v1/attendance/", json={
        "class_id": klass["id"],
        "date": "2024-10-07",
        "records": [{"student_id": outsider["id"], "status": "Present"}]
    })
    assert response.status_code == 400


async def test_attendance_for_unknown_class(client):
    response = await client.post("/api/v1/attendance/", json={
        "class_id": 42,
        "date": "2024-10-07",
        "records": [{"student_id": 1, "status": "Present"}]
    })
    assert response.status_code == 404
