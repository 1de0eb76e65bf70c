from datetime import date

import pytest

from academy.services.payment_service import PaymentService

from .conftest import money


@pytest.fixture
async def billed_student(factory):
    klass = await factory.klass(name="SS 2")
    await factory.fee_structure(klass["id"], tuition_fee=150000, development_levy=50000)
    return await factory.student(class_id=klass["id"])


async def pay(client, student_id, amount, method, **extra):
    return await client.post("/api/v1/payments/", json={
        "student_id": student_id, "amount": amount, "payment_method": method, **extra
    })


async def test_fee_structure_total_is_sum_of_components(client, factory):
    klass = await factory.klass()
    structure = await factory.fee_structure(klass["id"], tuition_fee=100000, books_fee=15000, exam_fee=5000)
    assert money(structure["total_fee"]) == 120000

    response = await client.put(f"/api/v1/fees/structures/{structure['id']}", json={"books_fee": 20000})
    assert money(response.json()["total_fee"]) == 125000


async def test_cash_is_verified_and_reduces_balance(client, billed_student):
    response = await pay(client, billed_student["id"], 120000, "Cash", recorded_by=2)
    assert response.status_code == 201
    body = response.json()
    assert body["status"] == "Verified"
    assert money(body["balance"]["balance"]) == 80000
    assert body["balance"]["status"] == "Partial"
    assert body["receipt_number"] == f"GRA{date.today():%Y%m%d}0001"


async def test_bank_transfer_waits_for_verification(client, billed_student):
    await pay(client, billed_student["id"], 120000, "Cash")
    response = await pay(client, billed_student["id"], 50000, "Bank Transfer", transaction_reference="TRX-1")
    body = response.json()
    assert body["status"] == "Pending"
    assert body["receipt_number"].endswith("0002")
    assert money(body["balance"]["balance"]) == 80000
    assert money(body["balance"]["total_pending"]) == 50000

    response = await client.post(f"/api/v1/payments/verify/{body['id']}", json={"action": "verify", "verified_by": 1})
    assert response.status_code == 200
    assert response.json()["status"] == "Verified"

    balance = (await client.get(f"/api/v1/payments/student/{billed_student['id']}/balance")).json()
    assert money(balance["balance"]) == 30000

    again = await client.post(f"/api/v1/payments/verify/{body['id']}", json={"action": "verify"})
    assert again.status_code == 404


async def test_rejecting_payment_records_reason(client, billed_student):
    pending = (await pay(client, billed_student["id"], 50000, "POS", notes="Desk 2")).json()
    response = await client.post(
        f"/api/v1/payments/verify/{pending['id']}",
        json={"action": "reject", "reason": "Terminal reversed the charge"}
    )
    body = response.json()
    assert body["status"] == "Rejected"
    assert body["notes"] == "Desk 2\nRejection reason: Terminal reversed the charge"

    balance = (await client.get(f"/api/v1/payments/student/{billed_student['id']}/balance")).json()
    assert money(balance["balance"]) == 200000
    assert balance["status"] == "Unpaid"


async def test_reject_requires_reason(client, billed_student):
    pending = (await pay(client, billed_student["id"], 50000, "Cheque")).json()
    response = await client.post(f"/api/v1/payments/verify/{pending['id']}", json={"action": "reject"})
    assert response.status_code == 422


async def test_overpayment_is_refused(client, billed_student):
    await pay(client, billed_student["id"], 120000, "Cash")
    response = await pay(client, billed_student["id"], 90000, "Cash")
    assert response.status_code == 400


async def test_balance_reads_are_idempotent(client, billed_student):
    await pay(client, billed_student["id"], 120000, "Cash")
    url = f"/api/v1/payments/student/{billed_student['id']}/balance"
    first = (await client.get(url)).json()
    second = (await client.get(url)).json()
    assert first == second


async def test_payment_for_unknown_student(client):
    response = await pay(client, 999, 1000, "Cash")
    assert response.status_code == 404


async def test_scholarship_discount(client, billed_student):
    scholarship = (await client.post("/api/v1/fees/scholarships", json={
        "name": "Merit Award", "scholarship_type": "Percentage", "value": 10
    })).json()
    response = await client.post(
        f"/api/v1/fees/scholarships/{scholarship['id']}/award",
        json={"student_id": billed_student["id"]}
    )
    assert response.status_code == 201

    balance = (await client.get(f"/api/v1/payments/student/{billed_student['id']}/balance")).json()
    assert money(balance["discount"]) == 20000
    assert money(balance["balance"]) == 180000


async def test_debtors_history_and_reports(client, factory, billed_student):
    paid_up = await factory.student(class_id=billed_student["class_id"])
    await pay(client, paid_up["id"], 200000, "Cash")
    await pay(client, billed_student["id"], 50000, "Cash")
    await pay(client, billed_student["id"], 10000, "Online Payment")

    debtors = (await client.get("/api/v1/payments/debtors")).json()
    assert [d["student_id"] for d in debtors["items"]] == [billed_student["id"]]
    assert money(debtors["items"][0]["balance"]) == 150000

    history = (await client.get(f"/api/v1/payments/student/{billed_student['id']}/history")).json()
    assert len(history["payments"]) == 2
    assert money(history["totals"]["Pending"]) == 10000

    report = (await client.get("/api/v1/payments/reports")).json()
    assert report["expected"] == 400000
    assert report["collected"] == 250000
    assert report["pending"] == 10000
    assert report["outstanding"] == 150000
    assert report["by_method"]["Cash"]["count"] == 2

    listing = (await client.get("/api/v1/payments/", params={"status": "Pending"})).json()
    assert listing["total"] == 1


async def test_taken_receipt_number_is_retried(client, billed_student, monkeypatch):
    first = (await pay(client, billed_student["id"], 1000, "Cash")).json()
    generate = PaymentService.generate_receipt_number
    handed_out = []

    async def stale_then_fresh(self, on=None):
        # Simulates another desk saving the same number first
        number = first["receipt_number"] if not handed_out else await generate(self, on)
        handed_out.append(number)
        return number

    monkeypatch.setattr(PaymentService, "generate_receipt_number", stale_then_fresh)
    response = await pay(client, billed_student["id"], 2000, "Cash")
    assert response.status_code == 201
    assert response.json()["receipt_number"] == f"GRA{date.today():%Y%m%d}0002"
    assert len(handed_out) == 2

    history = (await client.get(f"/api/v1/payments/student/{billed_student['id']}/history")).json()
    assert len(history["payments"]) == 2


async def test_receipt_number_gives_up_after_repeated_collisions(client, billed_student, monkeypatch):
    first = (await pay(client, billed_student["id"], 1000, "Cash")).json()

    async def always_taken(self, on=None):
        return first["receipt_number"]

    monkeypatch.setattr(PaymentService, "generate_receipt_number", always_taken)
    response = await pay(client, billed_student["id"], 2000, "Cash")
    assert response.status_code == 409


async def test_receipt_numbers_continue_after_highest(client, billed_student):
    numbers = [
        (await pay(client, billed_student["id"], 1000, "Cash")).json()["receipt_number"]
        for _ in range(3)
    ]
    assert [n[-4:] for n in numbers] == ["0001", "0002", "0003"]
