import pytest


@pytest.fixture
async def sheet(factory):
    klass = await factory.klass(name="JSS 3")
    students = [await factory.student(class_id=klass["id"]) for _ in range(4)]
    teacher = await factory.teacher()
    subject = await factory.subject(name="English", code="ENG")
    assignment = await factory.assignment(subject["id"], klass["id"], teacher["id"])
    return {"class": klass, "students": students, "assignment": assignment, "subject": subject}


MARKS = [(18, 17, 50), (15, 15, 40), (14, 16, 40), (10, 10, 20)]  # 85, 70, 70, 40


def score_payload(sheet, marks=MARKS):
    return {
        "subject_assignment_id": sheet["assignment"]["id"],
        "entered_by": 7,
        "scores": [
            {"student_id": student["id"], "ca1": ca1, "ca2": ca2, "exam": exam}
            for student, (ca1, ca2, exam) in zip(sheet["students"], marks)
        ]
    }


async def test_save_scores_computes_totals_and_statistics(client, sheet):
    response = await client.post("/api/v1/results/scores", json=score_payload(sheet))
    assert response.status_code == 200
    assert response.json()["statistics"] == {"average": 66.25, "minimum": 40, "maximum": 85, "count": 4}

    body = (await client.get(f"/api/v1/results/scores/{sheet['assignment']['id']}")).json()
    by_student = {row["student_id"]: row for row in body["scores"]}
    first = by_student[sheet["students"][0]["id"]]
    assert (first["total"], first["grade"], first["remark"], first["status"]) == (85, "A", "Excellent", "Draft")
    assert [row["position"] for row in body["scores"]] == [1, 2, 3, 4]


async def test_out_of_range_score_is_rejected(client, sheet):
    payload = score_payload(sheet, [(25, 10, 40)] + MARKS[1:])
    response = await client.post("/api/v1/results/scores", json=payload)
    assert response.status_code == 422
    assert response.json()["detail"]["field"] == "ca1"

    body = (await client.get(f"/api/v1/results/scores/{sheet['assignment']['id']}")).json()
    assert body["scores"] == []


@pytest.mark.parametrize("mark", ["nan", "inf", "-inf"])
async def test_non_finite_mark_is_rejected(client, sheet, mark):
    payload = score_payload(sheet)
    payload["scores"][0]["ca1"] = mark
    response = await client.post("/api/v1/results/scores", json=payload)
    assert response.status_code == 422

    body = (await client.get(f"/api/v1/results/scores/{sheet['assignment']['id']}")).json()
    assert body["scores"] == []


async def test_score_for_student_outside_class(client, factory, sheet):
    outsider = await factory.student()
    response = await client.post("/api/v1/results/scores", json={
        "subject_assignment_id": sheet["assignment"]["id"],
        "scores": [{"student_id": outsider["id"], "ca1": 10, "ca2": 10, "exam": 30}]
    })
    assert response.status_code == 400


async def test_submit_requires_every_student(client, sheet):
    payload = score_payload(sheet)
    payload["scores"] = payload["scores"][:3]
    await client.post("/api/v1/results/scores", json=payload)

    response = await client.post(f"/api/v1/results/submit/{sheet['assignment']['id']}")
    assert response.status_code == 400

    await client.post("/api/v1/results/scores", json=score_payload(sheet))
    response = await client.post(f"/api/v1/results/submit/{sheet['assignment']['id']}")
    assert response.status_code == 200
    assert response.json()["submitted"] == 4


async def test_submitted_scores_are_locked_until_rejected(client, sheet):
    await client.post("/api/v1/results/scores", json=score_payload(sheet))
    await client.post(f"/api/v1/results/submit/{sheet['assignment']['id']}")

    response = await client.post("/api/v1/results/scores", json=score_payload(sheet))
    assert response.status_code == 400

    response = await client.post(
        f"/api/v1/results/scores/{sheet['assignment']['id']}/reject",
        json={"reason": "Exam marks look swapped"}
    )
    assert response.json()["rejected"] == 4

    response = await client.post("/api/v1/results/scores", json=score_payload(sheet))
    assert response.status_code == 200


async def test_compile_ranks_by_average_and_approval_flow(client, sheet):
    await client.post("/api/v1/results/scores", json=score_payload(sheet))
    await client.post(f"/api/v1/results/submit/{sheet['assignment']['id']}")

    response = await client.post("/api/v1/results/compile", json={"class_id": sheet["class"]["id"], "compiled_by": 3})
    assert response.status_code == 200
    compiled = response.json()
    assert compiled["class_average"] == 66.25
    assert [row["position"] for row in compiled["results"]] == [1, 2, 3, 4]
    assert compiled["results"][0]["position_label"] == "1st"
    # Tied averages follow the class list
    assert [row["student_id"] for row in compiled["results"]] == [s["id"] for s in sheet["students"]]

    pending = (await client.get("/api/v1/results/pending-approvals")).json()
    assert pending["total"] == 4
    result_id = pending["items"][0]["id"]

    response = await client.post(f"/api/v1/results/approve/{result_id}", json={"action": "approve", "approved_by": 1})
    assert response.status_code == 200
    assert response.json()["status"] == "Approved"

    again = await client.post(f"/api/v1/results/approve/{result_id}", json={"action": "approve"})
    assert again.status_code == 404

    other_id = pending["items"][1]["id"]
    missing_reason = await client.post(f"/api/v1/results/approve/{other_id}", json={"action": "reject"})
    assert missing_reason.status_code == 422
    rejected = await client.post(
        f"/api/v1/results/approve/{other_id}",
        json={"action": "reject", "rejection_reason": "Recheck attendance"}
    )
    assert rejected.json()["status"] == "Rejected"

    student_id = sheet["students"][0]["id"]
    results = (await client.get(f"/api/v1/results/student/{student_id}")).json()
    assert results["results"][0]["average_score"] == 85
    assert results["results"][0]["subjects"][0]["subject"] == "English"


async def test_compile_without_submitted_scores(client, sheet):
    await client.post("/api/v1/results/scores", json=score_payload(sheet))
    response = await client.post("/api/v1/results/compile", json={"class_id": sheet["class"]["id"]})
    assert response.status_code == 400


async def test_broadsheet_counts_submitted_scores(client, sheet):
    url = f"/api/v1/results/broadsheet/{sheet['class']['id']}"
    await client.post("/api/v1/results/scores", json=score_payload(sheet))
    drafts = (await client.get(url)).json()
    assert all(row["scores"] == {} for row in drafts["students"])
    assert drafts["subjects"][0]["count"] == 0

    await client.post(f"/api/v1/results/submit/{sheet['assignment']['id']}")
    body = (await client.get(url)).json()
    assert [s["code"] for s in body["subjects"]] == ["ENG"]
    assert body["subjects"][0]["average"] == 66.25
    assert body["students"][0]["scores"] == {"ENG": 85}
    assert [row["position"] for row in body["students"]] == [1, 2, 3, 4]
    assert body["class_average"] == 66.25


async def test_recompile_drops_students_who_left(client, sheet):
    await client.post("/api/v1/results/scores", json=score_payload(sheet))
    await client.post(f"/api/v1/results/submit/{sheet['assignment']['id']}")
    await client.post("/api/v1/results/compile", json={"class_id": sheet["class"]["id"]})

    top = sheet["students"][0]
    response = await client.put(f"/api/v1/students/{top['id']}", json={"status": "Inactive"})
    assert response.status_code == 200

    compiled = (await client.post("/api/v1/results/compile", json={"class_id": sheet["class"]["id"]})).json()
    assert compiled["total_students"] == 3
    assert [row["position"] for row in compiled["results"]] == [1, 2, 3]

    pending = (await client.get("/api/v1/results/pending-approvals")).json()
    assert pending["total"] == 3
    assert top["id"] not in [row["student_id"] for row in pending["items"]]
    assert {row["total_students"] for row in pending["items"]} == {3}
    assert [row["position"] for row in pending["items"]] == [1, 2, 3]

    results = (await client.get(f"/api/v1/results/student/{top['id']}")).json()
    assert results["results"] == []
