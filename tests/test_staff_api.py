async def test_department_teacher_count_and_delete_guard(client, factory):
    department = (await client.post("/api/v1/departments/", json={"name": "Sciences", "code": "SCI"})).json()
    teacher = await factory.teacher(department_id=department["id"])

    listing = (await client.get("/api/v1/departments/")).json()
    assert listing["items"][0]["teacher_count"] == 1

    response = await client.delete(f"/api/v1/departments/{department['id']}")
    assert response.status_code == 409

    await client.put(f"/api/v1/teachers/{teacher['id']}", json={"status": "Inactive"})
    response = await client.delete(f"/api/v1/departments/{department['id']}")
    assert response.status_code == 200


async def test_duplicate_department_code(client):
    await client.post("/api/v1/departments/", json={"name": "Arts", "code": "ART"})
    response = await client.post("/api/v1/departments/", json={"name": "Arts 2", "code": "ART"})
    assert response.status_code == 409


async def test_teacher_in_unknown_department(client, factory):
    response = await client.post("/api/v1/teachers/", json={
        "employee_id": "EMP-X", "first_name": "A", "last_name": "B", "department_id": 42
    })
    assert response.status_code == 404


async def test_teacher_assignments(client, factory):
    klass = await factory.klass(name="SS 1")
    teacher = await factory.teacher()
    subject = await factory.subject(name="Mathematics", code="MTH")
    await factory.assignment(subject["id"], klass["id"], teacher["id"])

    duplicate = await client.post("/api/v1/subjects/assignments", json={
        "subject_id": subject["id"], "class_id": klass["id"], "teacher_id": teacher["id"]
    })
    assert duplicate.status_code == 409

    body = (await client.get(f"/api/v1/teachers/{teacher['id']}/assignments")).json()
    assert body["total"] == 1
    assert body["assignments"][0]["subject_name"] == "Mathematics"
    assert body["assignments"][0]["term"] == "First Term"

    subjects = (await client.get(f"/api/v1/classes/{klass['id']}/subjects")).json()
    assert subjects["subjects"][0]["teacher_id"] == teacher["id"]


async def test_health(client):
    response = await client.get("/health/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert "X-Process-Time" in response.headers
