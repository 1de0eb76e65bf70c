# academy/services/payment_service.py
"""Fee payments: recording, verification, balances and reports."""
from typing import List, Optional, Dict, Any
from collections import defaultdict
from datetime import date, datetime, timezone
from decimal import Decimal
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from .base_service import BaseService
from .fee_calculator import (
    ZERO, FeeBalance, PaymentStatus, compute_balance, initial_status, to_decimal
)
from .fee_service import FeeStructureService, ScholarshipService
from ..core.cache import cache_manager
from ..core.config import settings
from ..core.exceptions import BadRequestError, ConflictError, NotFoundError
from ..models.class_model import ClassModel
from ..models.fee_management import FeeStructure, Payment
from ..models.student import Student
from ..schemas.fee_schemas import PaymentCreate, PaymentVerifyRequest

logger = logging.getLogger(__name__)

# Two payments recorded at once can draw the same receipt number
RECEIPT_ATTEMPTS = 3


class PaymentService(BaseService[Payment]):
    resource_name = "Payment"

    def __init__(self, db: AsyncSession):
        super().__init__(Payment, db)
        self.structures = FeeStructureService(db)
        self.scholarships = ScholarshipService(db)

    async def _get_student(self, student_id: int) -> Student:
        stmt = select(Student).where(Student.id == student_id, Student.is_deleted == False)
        student = (await self.db.execute(stmt)).scalar_one_or_none()
        if not student:
            raise NotFoundError("Student", student_id)
        return student

    async def _payments_for(self, student_id: int, term: str, academic_year: str) -> List[Payment]:
        stmt = select(Payment).where(
            Payment.student_id == student_id,
            Payment.term == term,
            Payment.academic_year == academic_year,
            Payment.is_deleted == False
        )
        return (await self.db.execute(stmt)).scalars().all()

    async def _invalidate_reports(self):
        await cache_manager.delete_pattern("payment_reports")

    async def generate_receipt_number(self, on: Optional[date] = None) -> str:
        """<prefix><YYYYMMDD><NNNN>, numbered per day after the highest one issued"""
        stamp = f"{settings.receipt_prefix}{(on or date.today()).strftime('%Y%m%d')}"
        stmt = select(func.max(Payment.receipt_number)).where(Payment.receipt_number.like(f"{stamp}%"))
        last = (await self.db.execute(stmt)).scalar()
        sequence = int(last[len(stamp):]) + 1 if last else 1
        return f"{stamp}{sequence:04d}"

    async def get_balance(
        self,
        student_id: int,
        term: Optional[str] = None,
        academic_year: Optional[str] = None
    ) -> Dict[str, Any]:
        """Fee balance of a student for a term.

        Required is the fee structure total of the student's class less awarded
        scholarships; only Verified payments count against it.
        """
        student = await self._get_student(student_id)
        term = term or settings.default_term
        academic_year = academic_year or settings.default_academic_year

        structure = None
        if student.class_id:
            structure = await self.structures.find(student.class_id, term, academic_year)
        required = to_decimal(structure.total_fee) if structure else ZERO
        discount = await self.scholarships.discount_for(student.id, term, academic_year, required) if structure else ZERO
        balance = compute_balance(required, await self._payments_for(student.id, term, academic_year), discount)

        return {
            "student_id": student.id,
            "student_name": student.full_name,
            "class_id": student.class_id,
            "term": term,
            "academic_year": academic_year,
            "fee_structure_id": structure.id if structure else None,
            **balance.model_dump(),
        }

    async def create_payment(self, request: PaymentCreate) -> Dict[str, Any]:
        """Record a payment. Cash is verified on entry; other methods wait for verification."""
        student = await self._get_student(request.student_id)
        term = request.term or settings.default_term
        academic_year = request.academic_year or settings.default_academic_year
        status = initial_status(request.payment_method)

        if not settings.allow_overpayment and student.class_id:
            current = await self.get_balance(student.id, term, academic_year)
            outstanding = to_decimal(current["balance"])
            if current["fee_structure_id"] and request.amount > outstanding:
                raise BadRequestError(
                    f"Payment of {request.amount} exceeds the outstanding balance of {outstanding}"
                )

        # A rollback expires loaded rows, so keep plain values
        student_id = student.id
        fields = dict(
            student_id=student_id,
            amount=request.amount,
            payment_type=request.payment_type.value,
            term=term,
            academic_year=academic_year,
            payment_method=request.payment_method.value,
            transaction_reference=request.transaction_reference,
            notes=request.notes,
            recorded_by=request.recorded_by,
            status=status.value,
        )
        if status == PaymentStatus.VERIFIED:
            fields["verified_by"] = request.recorded_by
            fields["verified_date"] = datetime.now(timezone.utc)

        for attempt in range(1, RECEIPT_ATTEMPTS + 1):
            receipt_number = await self.generate_receipt_number()
            payment = Payment(receipt_number=receipt_number, **fields)
            self.db.add(payment)
            try:
                await self._commit()
                break
            except ConflictError:
                if attempt == RECEIPT_ATTEMPTS:
                    raise
                logger.warning(f"Receipt number {receipt_number} was taken, retrying")

        await self.db.refresh(payment)
        await self._invalidate_reports()
        logger.info(
            f"Payment {payment.receipt_number} recorded: {payment.amount} by {payment.payment_method} "
            f"for student {student_id} ({payment.status})"
        )
        return {
            "payment": payment,
            "balance": await self.get_balance(student_id, term, academic_year),
        }

    async def verify_payment(self, payment_id: int, request: PaymentVerifyRequest) -> Payment:
        """Verify or reject a Pending payment; anything else is not found"""
        stmt = select(Payment).where(
            Payment.id == payment_id,
            Payment.status == PaymentStatus.PENDING.value,
            Payment.is_deleted == False
        )
        payment = (await self.db.execute(stmt)).scalar_one_or_none()
        if not payment:
            raise NotFoundError("Payment", message="Payment not found or already processed")

        payment.verified_by = request.verified_by
        payment.verified_date = datetime.now(timezone.utc)
        if request.action == "verify":
            payment.status = PaymentStatus.VERIFIED.value
        else:
            payment.status = PaymentStatus.REJECTED.value
            note = f"Rejection reason: {request.reason}"
            payment.notes = f"{payment.notes}\n{note}" if payment.notes else note

        await self.db.commit()
        await self.db.refresh(payment)
        await self._invalidate_reports()
        logger.info(f"Payment {payment.receipt_number} {payment.status.lower()} by {request.verified_by}")
        return payment

    async def get_history(self, student_id: int) -> Dict[str, Any]:
        student = await self._get_student(student_id)
        stmt = select(Payment).where(
            Payment.student_id == student_id,
            Payment.is_deleted == False
        ).order_by(Payment.created_at.desc(), Payment.id.desc())
        payments = (await self.db.execute(stmt)).scalars().all()
        by_status: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        for payment in payments:
            by_status[payment.status] += to_decimal(payment.amount)
        return {
            "student_id": student.id,
            "student_name": student.full_name,
            "payments": payments,
            "totals": {status.value: by_status[status.value] for status in PaymentStatus},
        }

    async def get_debtors(
        self,
        class_id: Optional[int] = None,
        term: Optional[str] = None,
        academic_year: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Active students with an outstanding balance, largest first"""
        term = term or settings.default_term
        academic_year = academic_year or settings.default_academic_year

        stmt = select(FeeStructure).where(
            FeeStructure.term == term,
            FeeStructure.academic_year == academic_year,
            FeeStructure.is_deleted == False
        )
        if class_id is not None:
            stmt = stmt.where(FeeStructure.class_id == class_id)
        structures = {s.class_id: s for s in (await self.db.execute(stmt)).scalars().all()}
        if not structures:
            return []

        stmt = (
            select(Student, ClassModel.name)
            .join(ClassModel, ClassModel.id == Student.class_id)
            .where(
                Student.class_id.in_(list(structures)),
                Student.is_deleted == False,
                Student.status == "Active"
            )
        )
        students = (await self.db.execute(stmt)).all()

        stmt = select(Payment).where(
            Payment.student_id.in_([student.id for student, _ in students]),
            Payment.term == term,
            Payment.academic_year == academic_year,
            Payment.is_deleted == False
        )
        payments: Dict[int, List[Payment]] = defaultdict(list)
        for payment in (await self.db.execute(stmt)).scalars().all():
            payments[payment.student_id].append(payment)

        debtors = []
        for student, class_name in students:
            required = to_decimal(structures[student.class_id].total_fee)
            discount = await self.scholarships.discount_for(student.id, term, academic_year, required)
            balance: FeeBalance = compute_balance(required, payments[student.id], discount)
            if balance.balance > ZERO:
                debtors.append({
                    "student_id": student.id,
                    "student_name": student.full_name,
                    "admission_number": student.admission_number,
                    "class_id": student.class_id,
                    "class_name": class_name,
                    **balance.model_dump(),
                })
        debtors.sort(key=lambda item: Decimal(str(item["balance"])), reverse=True)
        return debtors

    async def get_reports(self, term: Optional[str] = None, academic_year: Optional[str] = None) -> Dict[str, Any]:
        """Collection summary for a term, cached until a payment changes"""
        term = term or settings.default_term
        academic_year = academic_year or settings.default_academic_year
        cache_key = cache_manager.make_key("payment_reports", term, academic_year)
        cached = await cache_manager.get(cache_key)
        if cached is not None:
            return cached

        base = (Payment.term == term, Payment.academic_year == academic_year, Payment.is_deleted == False)

        def grouped(column):
            return (
                select(column, func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
                .where(*base)
                .group_by(column)
            )

        by_status = {
            key: {"count": count, "amount": float(to_decimal(amount))}
            for key, count, amount in (await self.db.execute(grouped(Payment.status))).all()
        }
        verified = base + (Payment.status == PaymentStatus.VERIFIED.value,)
        by_method = {
            key: {"count": count, "amount": float(to_decimal(amount))}
            for key, count, amount in (await self.db.execute(
                select(Payment.payment_method, func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
                .where(*verified)
                .group_by(Payment.payment_method)
            )).all()
        }
        by_type = {
            key: {"count": count, "amount": float(to_decimal(amount))}
            for key, count, amount in (await self.db.execute(
                select(Payment.payment_type, func.count(Payment.id), func.coalesce(func.sum(Payment.amount), 0))
                .where(*verified)
                .group_by(Payment.payment_type)
            )).all()
        }

        stmt = (
            select(FeeStructure.total_fee, func.count(Student.id))
            .join(Student, Student.class_id == FeeStructure.class_id)
            .where(
                FeeStructure.term == term,
                FeeStructure.academic_year == academic_year,
                FeeStructure.is_deleted == False,
                Student.is_deleted == False,
                Student.status == "Active"
            )
            .group_by(FeeStructure.id, FeeStructure.total_fee)
        )
        expected = sum(
            (to_decimal(total) * count for total, count in (await self.db.execute(stmt)).all()),
            ZERO
        )
        collected = to_decimal(by_status.get(PaymentStatus.VERIFIED.value, {}).get("amount", 0))
        pending = to_decimal(by_status.get(PaymentStatus.PENDING.value, {}).get("amount", 0))

        report = {
            "term": term,
            "academic_year": academic_year,
            "expected": float(expected),
            "collected": float(collected),
            "pending": float(pending),
            "outstanding": float(max(expected - collected, ZERO)),
            "collection_rate": round(float(collected / expected * 100), 2) if expected else 0.0,
            "by_status": by_status,
            "by_method": by_method,
            "by_type": by_type,
        }
        await cache_manager.set(cache_key, report)
        return report
