async def test_create_student_takes_level_from_class(client, factory):
    klass = await factory.klass(name="JSS 1A", level="JSS1")
    student = await factory.student(class_id=klass["id"])
    assert student["level"] == "JSS1"
    assert student["status"] == "Active"
    assert student["academic_year"] == "2024/2025"
    assert student["message"] == "Student created successfully"


async def test_duplicate_admission_number_conflicts(client, factory):
    await factory.student(admission_number="ADM-1")
    response = await client.post("/api/v1/students/", json={
        "first_name": "Other", "last_name": "Person", "admission_number": "ADM-1"
    })
    assert response.status_code == 409
    assert response.json()["detail"]["field"] == "admission_number"


async def test_student_in_missing_class_is_not_found(client):
    response = await client.post("/api/v1/students/", json={
        "first_name": "No", "last_name": "Class", "admission_number": "ADM-9", "class_id": 999
    })
    assert response.status_code == 404


async def test_list_filters_and_search(client, factory):
    klass = await factory.klass()
    await factory.student(class_id=klass["id"], first_name="Amaka")
    await factory.student(class_id=klass["id"], first_name="Bola")
    await factory.student(first_name="Chinedu")

    response = await client.get("/api/v1/students/", params={"class_id": klass["id"]})
    body = response.json()
    assert body["total"] == 2
    assert body["meta"]["total_pages"] == 1

    response = await client.get("/api/v1/students/", params={"search": "amak"})
    assert [s["first_name"] for s in response.json()["items"]] == ["Amaka"]


async def test_update_and_delete(client, factory):
    student = await factory.student()
    response = await client.put(f"/api/v1/students/{student['id']}", json={"other_name": "Ngozi"})
    assert response.status_code == 200
    assert response.json()["other_name"] == "Ngozi"

    response = await client.delete(f"/api/v1/students/{student['id']}")
    assert response.status_code == 200
    response = await client.get(f"/api/v1/students/{student['id']}")
    assert response.status_code == 404


async def test_promotion_batch(client, factory):
    jss1 = await factory.klass(name="JSS 1", level="JSS1")
    jss2 = await factory.klass(name="JSS 2", level="JSS2")
    promoted = await factory.student(class_id=jss1["id"])
    repeated = await factory.student(class_id=jss1["id"])
    transferred = await factory.student(class_id=jss1["id"])

    response = await client.post("/api/v1/students/promote", json={
        "to_academic_year": "2025/2026",
        "to_class_id": jss2["id"],
        "promoted_by": 1,
        "students": [
            {"student_id": promoted["id"], "promotion_status": "Promoted"},
            {"student_id": repeated["id"], "promotion_status": "Repeated"},
            {"student_id": transferred["id"], "promotion_status": "Transferred"},
        ]
    })
    assert response.status_code == 200
    body = response.json()
    assert body["processed"] == 3
    assert body["summary"] == {"Promoted": 1, "Repeated": 1, "Transferred": 1}

    moved = (await client.get(f"/api/v1/students/{promoted['id']}")).json()
    assert moved["class_id"] == jss2["id"]
    assert moved["level"] == "JSS2"
    assert moved["academic_year"] == "2025/2026"
    assert moved["promotions"][0]["promotion_status"] == "Promoted"

    stayed = (await client.get(f"/api/v1/students/{repeated['id']}")).json()
    assert stayed["class_id"] == jss1["id"]

    left = (await client.get(f"/api/v1/students/{transferred['id']}")).json()
    assert left["status"] == "Transferred"

    response = await client.get(f"/api/v1/students/by-class/{jss1['id']}")
    assert [s["id"] for s in response.json()["students"]] == [repeated["id"]]


async def test_promotion_needs_target_class(client, factory):
    student = await factory.student()
    response = await client.post("/api/v1/students/promote", json={
        "to_academic_year": "2025/2026",
        "students": [{"student_id": student["id"], "promotion_status": "Promoted"}]
    })
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "to_class_id"


async def test_class_delete_blocked_by_enrolled_students(client, factory):
    klass = await factory.klass()
    student = await factory.student(class_id=klass["id"])

    response = await client.delete(f"/api/v1/classes/{klass['id']}")
    assert response.status_code == 409

    await client.delete(f"/api/v1/students/{student['id']}")
    response = await client.delete(f"/api/v1/classes/{klass['id']}")
    assert response.status_code == 200


async def test_class_statistics(client, factory):
    klass = await factory.klass(capacity=30)
    await factory.student(class_id=klass["id"], gender="Female")
    await factory.student(class_id=klass["id"], gender="Female")
    await factory.student(class_id=klass["id"], gender="Male")

    stats = (await client.get(f"/api/v1/classes/{klass['id']}/statistics")).json()
    assert stats["total_students"] == 3
    assert stats["by_gender"] == {"Female": 2, "Male": 1}
    assert stats["available_seats"] == 27
    assert stats["average_score"] is None


async def test_parent_links(client, factory):
    student = await factory.student()
    parent = (await client.post("/api/v1/parents/", json={
        "first_name": "Ife", "last_name": "Adeyemi", "phone": "08030000000"
    })).json()

    response = await client.post(f"/api/v1/parents/{parent['id']}/link", json={
        "student_id": student["id"], "relationship_type": "Mother"
    })
    assert response.status_code == 201
    again = await client.post(f"/api/v1/parents/{parent['id']}/link", json={"student_id": student["id"]})
    assert again.status_code == 409

    children = (await client.get(f"/api/v1/parents/{parent['id']}/children")).json()
    assert children["total"] == 1
    assert children["children"][0]["parent_id"] == parent["id"]
    assert children["children"][0]["relationship_type"] == "Mother"

    response = await client.delete(f"/api/v1/parents/{parent['id']}/link/{student['id']}")
    assert response.status_code == 200
    children = (await client.get(f"/api/v1/parents/{parent['id']}/children")).json()
    assert children["total"] == 0
