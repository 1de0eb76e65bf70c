# academy/services/fee_service.py
from typing import List, Optional, Dict, Any
from decimal import Decimal
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
from .base_service import BaseService
from .fee_calculator import ZERO, apply_scholarship, to_decimal
from ..core.config import settings
from ..core.exceptions import ConflictError, NotFoundError
from ..models.class_model import ClassModel
from ..models.fee_management import FEE_COMPONENTS, FeeStructure, Scholarship, ScholarshipAward
from ..models.student import Student

logger = logging.getLogger(__name__)


def component_total(values: Dict[str, Any]) -> Decimal:
    return sum((to_decimal(values.get(name) or 0) for name in FEE_COMPONENTS), ZERO)


class FeeStructureService(BaseService[FeeStructure]):
    resource_name = "Fee structure"

    def __init__(self, db: AsyncSession):
        super().__init__(FeeStructure, db)

    async def create(self, obj_in: Dict[str, Any]) -> FeeStructure:
        """Create a class fee structure; total_fee is the sum of its components"""
        stmt = select(ClassModel.id).where(ClassModel.id == obj_in["class_id"], ClassModel.is_deleted == False)
        if (await self.db.execute(stmt)).scalar_one_or_none() is None:
            raise NotFoundError("Class", obj_in["class_id"])

        obj_in["term"] = obj_in.get("term") or settings.default_term
        obj_in["academic_year"] = obj_in.get("academic_year") or settings.default_academic_year
        if await self.find(obj_in["class_id"], obj_in["term"], obj_in["academic_year"]):
            raise ConflictError("Fee structure already exists for this class and term")

        obj_in["total_fee"] = component_total(obj_in)
        structure = await super().create(obj_in)
        logger.info(
            f"Fee structure for class {structure.class_id} ({structure.term} {structure.academic_year}) "
            f"created: {structure.total_fee}"
        )
        return structure

    async def update(self, id: int, obj_in: Dict[str, Any]) -> Optional[FeeStructure]:
        structure = await self.get(id)
        if not structure:
            return None
        for key, value in obj_in.items():
            setattr(structure, key, value)
        structure.total_fee = component_total({name: getattr(structure, name) for name in FEE_COMPONENTS})
        await self._commit()
        await self.db.refresh(structure)
        return structure

    async def find(self, class_id: int, term: str, academic_year: str) -> Optional[FeeStructure]:
        stmt = select(FeeStructure).where(
            FeeStructure.class_id == class_id,
            FeeStructure.term == term,
            FeeStructure.academic_year == academic_year,
            FeeStructure.is_deleted == False
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()


class ScholarshipService(BaseService[Scholarship]):
    resource_name = "Scholarship"

    def __init__(self, db: AsyncSession):
        super().__init__(Scholarship, db)

    async def create(self, obj_in: Dict[str, Any]) -> Scholarship:
        obj_in["academic_year"] = obj_in.get("academic_year") or settings.default_academic_year
        return await super().create(obj_in)

    async def get_awards(self, scholarship_id: int) -> List[Dict[str, Any]]:
        stmt = (
            select(ScholarshipAward, Student)
            .join(Student, Student.id == ScholarshipAward.student_id)
            .where(ScholarshipAward.scholarship_id == scholarship_id, ScholarshipAward.is_deleted == False)
            .order_by(ScholarshipAward.id)
        )
        return [
            {
                "id": award.id,
                "student_id": student.id,
                "student_name": student.full_name,
                "term": award.term,
                "academic_year": award.academic_year,
            }
            for award, student in (await self.db.execute(stmt)).all()
        ]

    async def award(self, scholarship_id: int, student_id: int, term: Optional[str], academic_year: Optional[str]) -> ScholarshipAward:
        scholarship = await self.get_or_404(scholarship_id)
        if scholarship.status != "Active":
            raise ConflictError("Scholarship is not active")
        stmt = select(Student.id).where(Student.id == student_id, Student.is_deleted == False)
        if (await self.db.execute(stmt)).scalar_one_or_none() is None:
            raise NotFoundError("Student", student_id)

        award = ScholarshipAward(
            scholarship_id=scholarship_id,
            student_id=student_id,
            term=term or settings.default_term,
            academic_year=academic_year or settings.default_academic_year
        )
        self.db.add(award)
        await self._commit()
        await self.db.refresh(award)
        logger.info(f"Scholarship {scholarship_id} awarded to student {student_id} ({award.term} {award.academic_year})")
        return award

    async def discount_for(self, student_id: int, term: str, academic_year: str, total: Decimal) -> Decimal:
        """Combined scholarship discount on a fee total, capped at the total"""
        stmt = (
            select(Scholarship)
            .join(ScholarshipAward, ScholarshipAward.scholarship_id == Scholarship.id)
            .where(
                ScholarshipAward.student_id == student_id,
                ScholarshipAward.term == term,
                ScholarshipAward.academic_year == academic_year,
                ScholarshipAward.is_deleted == False,
                Scholarship.is_deleted == False
            )
        )
        scholarships = (await self.db.execute(stmt)).scalars().all()
        discount = sum(
            (apply_scholarship(total, s.scholarship_type, s.value) for s in scholarships),
            ZERO
        )
        return min(discount, to_decimal(total))
