# academy/services/student_service.py
from typing import List, Optional, Dict, Any
from datetime import date
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, or_
from .base_service import BaseService
from ..core.config import settings
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..models.student import Student, StudentPromotion
from ..models.class_model import ClassModel
from ..schemas.student_schemas import PromotionRequest, PromotionStatus, StudentStatus

logger = logging.getLogger(__name__)


class StudentService(BaseService[Student]):
    resource_name = "Student"

    def __init__(self, db: AsyncSession):
        super().__init__(Student, db)

    async def get_by_admission_number(self, admission_number: str) -> Optional[Student]:
        """Get student by admission number"""
        stmt = select(self.model).where(
            self.model.admission_number == admission_number,
            self.model.is_deleted == False
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_class(self, class_id: int, active_only: bool = True) -> List[Student]:
        """Get students enrolled in a class, ordered by name"""
        stmt = select(self.model).where(
            self.model.class_id == class_id,
            self.model.is_deleted == False
        )
        if active_only:
            stmt = stmt.where(self.model.status == StudentStatus.ACTIVE.value)
        stmt = stmt.order_by(self.model.last_name, self.model.first_name)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_students_paginated(
        self,
        page: int = 1,
        size: int = 20,
        class_id: Optional[int] = None,
        status: Optional[str] = None,
        search: Optional[str] = None
    ) -> Dict[str, Any]:
        conditions = []
        if search:
            pattern = f"%{search}%"
            conditions.append(or_(
                self.model.first_name.ilike(pattern),
                self.model.last_name.ilike(pattern),
                self.model.admission_number.ilike(pattern),
            ))
        return await self.get_paginated(
            page=page,
            size=size,
            order_by="last_name",
            conditions=conditions,
            class_id=class_id,
            status=status,
        )

    async def _get_class(self, class_id: int) -> ClassModel:
        stmt = select(ClassModel).where(ClassModel.id == class_id, ClassModel.is_deleted == False)
        result = await self.db.execute(stmt)
        class_obj = result.scalar_one_or_none()
        if not class_obj:
            raise NotFoundError("Class", class_id)
        return class_obj

    async def create(self, obj_in: Dict[str, Any]) -> Student:
        """Create new student; the class's level is used when none is given"""
        if await self.get_by_admission_number(obj_in["admission_number"]):
            raise ConflictError("Admission number already exists", field="admission_number")

        if obj_in.get("class_id"):
            class_obj = await self._get_class(obj_in["class_id"])
            if not obj_in.get("level"):
                obj_in["level"] = class_obj.level

        obj_in.setdefault("academic_year", None)
        if not obj_in["academic_year"]:
            obj_in["academic_year"] = settings.default_academic_year
        if not obj_in.get("admission_date"):
            obj_in["admission_date"] = date.today()

        student = await super().create(obj_in)
        logger.info(f"Student {student.admission_number} created (id={student.id})")
        return student

    async def update(self, id: int, obj_in: Dict[str, Any]) -> Optional[Student]:
        if obj_in.get("class_id"):
            await self._get_class(obj_in["class_id"])
        if obj_in.get("admission_number"):
            existing = await self.get_by_admission_number(obj_in["admission_number"])
            if existing and existing.id != id:
                raise ConflictError("Admission number already exists", field="admission_number")
        return await super().update(id, obj_in)

    async def promote(self, request: PromotionRequest) -> Dict[str, Any]:
        """Apply a batch of promotion decisions and record each one.

        Promoted moves the student to the target class and academic year,
        Transferred marks the student as transferred, Repeated keeps the class
        but moves the academic year on. The batch is all-or-nothing.
        """
        summary = {status.value: 0 for status in PromotionStatus}
        records = []
        today = date.today()

        for entry in request.students:
            student = await self.get(entry.student_id)
            if not student:
                raise NotFoundError("Student", entry.student_id)

            from_class_id = student.class_id
            from_year = student.academic_year
            to_class_id = from_class_id

            if entry.promotion_status == PromotionStatus.PROMOTED:
                to_class_id = entry.to_class_id or request.to_class_id
                if not to_class_id:
                    raise ValidationError(
                        f"Target class is required to promote student {student.id}", field="to_class_id"
                    )
                target = await self._get_class(to_class_id)
                student.class_id = target.id
                student.level = target.level
                student.academic_year = request.to_academic_year
            elif entry.promotion_status == PromotionStatus.TRANSFERRED:
                to_class_id = None
                student.status = StudentStatus.TRANSFERRED.value
            else:
                student.academic_year = request.to_academic_year

            records.append(StudentPromotion(
                student_id=student.id,
                from_class_id=from_class_id,
                to_class_id=to_class_id,
                from_academic_year=from_year,
                to_academic_year=request.to_academic_year,
                promotion_status=entry.promotion_status.value,
                promoted_by=request.promoted_by,
                promotion_date=today,
            ))
            summary[entry.promotion_status.value] += 1

        self.db.add_all(records)
        await self.db.commit()
        logger.info(
            f"Promotion batch to {request.to_academic_year}: "
            + ", ".join(f"{k}={v}" for k, v in summary.items())
        )
        return {"processed": len(records), "summary": summary}

    async def get_promotion_history(self, student_id: int) -> List[StudentPromotion]:
        stmt = select(StudentPromotion).where(
            StudentPromotion.student_id == student_id,
            StudentPromotion.is_deleted == False
        ).order_by(StudentPromotion.id)
        result = await self.db.execute(stmt)
        return result.scalars().all()
