# academy/routers/payments.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..models.fee_management import Payment
from ..schemas.fee_schemas import PaymentCreate, PaymentVerifyRequest
from ..services.fee_calculator import PaymentMethod, PaymentStatus
from ..services.payment_service import PaymentService
from ..utils.pagination import Paginator, PaginationParams

router = APIRouter(prefix="/api/v1/payments", tags=["Payments"])


def format_payment(payment: Payment) -> dict:
    return {
        "id": payment.id,
        "student_id": payment.student_id,
        "amount": payment.amount,
        "payment_type": payment.payment_type,
        "payment_method": payment.payment_method,
        "term": payment.term,
        "academic_year": payment.academic_year,
        "transaction_reference": payment.transaction_reference,
        "receipt_number": payment.receipt_number,
        "notes": payment.notes,
        "status": payment.status,
        "recorded_by": payment.recorded_by,
        "verified_by": payment.verified_by,
        "verified_date": payment.verified_date.isoformat() if payment.verified_date else None,
        "created_at": payment.created_at.isoformat() if payment.created_at else None,
    }


@router.get("/", response_model=dict)
async def get_payments(
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    student_id: Optional[int] = Query(None),
    payment_status: Optional[PaymentStatus] = Query(None, alias="status"),
    payment_method: Optional[PaymentMethod] = Query(None),
    term: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    result = await service.get_paginated(
        page=pagination.page,
        size=pagination.size,
        order_by="created_at",
        sort="desc",
        student_id=student_id,
        status=payment_status.value if payment_status else None,
        payment_method=payment_method.value if payment_method else None,
        term=term,
        academic_year=academic_year
    )
    return Paginator.from_result(result, format_payment)


@router.post("/", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_payment(
    request: PaymentCreate,
    db: AsyncSession = Depends(get_db)
):
    """Record a payment and return the student's updated balance"""
    service = PaymentService(db)
    result = await service.create_payment(request)
    payment = result["payment"]
    return {
        **format_payment(payment),
        "balance": result["balance"],
        "message": "Payment recorded successfully" if payment.status == PaymentStatus.VERIFIED.value
        else "Payment recorded and awaiting verification"
    }


@router.get("/debtors", response_model=dict)
async def get_debtors(
    class_id: Optional[int] = Query(None),
    term: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    debtors = await service.get_debtors(class_id, term, academic_year)
    return {"items": debtors, "total": len(debtors)}


@router.get("/reports", response_model=dict)
async def get_payment_reports(
    term: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    return await service.get_reports(term, academic_year)


@router.get("/student/{student_id}/history", response_model=dict)
async def get_payment_history(
    student_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    history = await service.get_history(student_id)
    return {**history, "payments": [format_payment(p) for p in history["payments"]]}


@router.get("/student/{student_id}/balance", response_model=dict)
async def get_student_balance(
    student_id: int,
    term: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    return await service.get_balance(student_id, term, academic_year)


@router.post("/verify/{payment_id}", response_model=dict)
async def verify_payment(
    payment_id: int,
    request: PaymentVerifyRequest,
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    payment = await service.verify_payment(payment_id, request)
    return {**format_payment(payment), "message": f"Payment {payment.status.lower()} successfully"}


@router.get("/{payment_id}", response_model=dict)
async def get_payment(
    payment_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = PaymentService(db)
    return format_payment(await service.get_or_404(payment_id))
