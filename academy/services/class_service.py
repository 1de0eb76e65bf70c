# academy/services/class_service.py
from typing import List, Dict, Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging
from .base_service import BaseService
from ..core.config import settings
from ..core.exceptions import ConflictError, NotFoundError
from ..models.class_model import ClassModel
from ..models.student import Student
from ..models.teacher import Teacher
from ..models.subject import Subject, SubjectAssignment
from ..models.results import CompiledResult

logger = logging.getLogger(__name__)


class ClassService(BaseService[ClassModel]):
    resource_name = "Class"

    def __init__(self, db: AsyncSession):
        super().__init__(ClassModel, db)

    async def _check_teacher(self, teacher_id: Optional[int]):
        if teacher_id is None:
            return
        stmt = select(Teacher.id).where(Teacher.id == teacher_id, Teacher.is_deleted == False)
        if (await self.db.execute(stmt)).scalar_one_or_none() is None:
            raise NotFoundError("Teacher", teacher_id)

    async def create(self, obj_in: Dict[str, Any]) -> ClassModel:
        await self._check_teacher(obj_in.get("class_teacher_id"))
        if not obj_in.get("academic_year"):
            obj_in["academic_year"] = settings.default_academic_year
        class_obj = await super().create(obj_in)
        logger.info(f"Class {class_obj.name} ({class_obj.academic_year}) created")
        return class_obj

    async def update(self, id: int, obj_in: Dict[str, Any]) -> Optional[ClassModel]:
        await self._check_teacher(obj_in.get("class_teacher_id"))
        return await super().update(id, obj_in)

    async def get_by_level(self, level: str) -> List[ClassModel]:
        stmt = select(self.model).where(
            self.model.level == level,
            self.model.is_deleted == False
        ).order_by(self.model.name)
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def active_student_count(self, class_id: int) -> int:
        students = BaseService(Student, self.db)
        return await students.get_active_count(class_id=class_id, status="Active")

    async def delete(self, class_id: int) -> None:
        """Soft delete; refused while active students are enrolled"""
        await self.get_or_404(class_id)
        count = await self.active_student_count(class_id)
        if count:
            raise ConflictError(f"Cannot delete class with {count} enrolled student(s)")
        await self.soft_delete(class_id)
        logger.info(f"Class {class_id} deleted")

    async def get_subjects(
        self,
        class_id: int,
        term: Optional[str] = None,
        academic_year: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """Subjects taught in a class with the assigned teacher"""
        await self.get_or_404(class_id)
        stmt = (
            select(SubjectAssignment, Subject, Teacher)
            .join(Subject, Subject.id == SubjectAssignment.subject_id)
            .join(Teacher, Teacher.id == SubjectAssignment.teacher_id)
            .where(
                SubjectAssignment.class_id == class_id,
                SubjectAssignment.is_deleted == False
            )
            .order_by(Subject.name)
        )
        if term:
            stmt = stmt.where(SubjectAssignment.term == term)
        if academic_year:
            stmt = stmt.where(SubjectAssignment.academic_year == academic_year)
        result = await self.db.execute(stmt)
        return [
            {
                "assignment_id": assignment.id,
                "subject_id": subject.id,
                "subject_name": subject.name,
                "subject_code": subject.code,
                "is_core": subject.is_core,
                "teacher_id": teacher.id,
                "teacher_name": teacher.full_name,
                "term": assignment.term,
                "academic_year": assignment.academic_year,
            }
            for assignment, subject, teacher in result.all()
        ]

    async def get_statistics(self, class_id: int) -> Dict[str, Any]:
        class_obj = await self.get_or_404(class_id)

        gender_stmt = (
            select(Student.gender, func.count(Student.id))
            .where(
                Student.class_id == class_id,
                Student.is_deleted == False,
                Student.status == "Active"
            )
            .group_by(Student.gender)
        )
        by_gender = {(gender or "Unspecified"): count for gender, count in (await self.db.execute(gender_stmt)).all()}
        total = sum(by_gender.values())

        subject_stmt = select(func.count(func.distinct(SubjectAssignment.subject_id))).where(
            SubjectAssignment.class_id == class_id,
            SubjectAssignment.is_deleted == False
        )
        subject_count = (await self.db.execute(subject_stmt)).scalar()

        result_stmt = select(func.avg(CompiledResult.average_score)).where(
            CompiledResult.class_id == class_id,
            CompiledResult.is_deleted == False
        )
        average = (await self.db.execute(result_stmt)).scalar()

        return {
            "class_id": class_obj.id,
            "class_name": class_obj.name,
            "total_students": total,
            "by_gender": by_gender,
            "capacity": class_obj.capacity,
            "available_seats": max((class_obj.capacity or 0) - total, 0),
            "subject_count": subject_count,
            "average_score": round(average, 2) if average is not None else None,
        }
