# academy/services/teacher_service.py
from typing import List, Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
from .base_service import BaseService
from ..core.exceptions import ConflictError, NotFoundError
from ..models.teacher import Teacher
from ..models.department import Department
from ..models.subject import Subject, SubjectAssignment
from ..models.class_model import ClassModel

logger = logging.getLogger(__name__)


class TeacherService(BaseService[Teacher]):
    resource_name = "Teacher"

    def __init__(self, db: AsyncSession):
        super().__init__(Teacher, db)

    async def get_by_employee_id(self, employee_id: str) -> Optional[Teacher]:
        stmt = select(self.model).where(
            self.model.employee_id == employee_id,
            self.model.is_deleted == False
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def _check_department(self, department_id: Optional[int]):
        if department_id is None:
            return
        stmt = select(Department.id).where(Department.id == department_id, Department.is_deleted == False)
        if (await self.db.execute(stmt)).scalar_one_or_none() is None:
            raise NotFoundError("Department", department_id)

    async def create(self, obj_in: Dict[str, Any]) -> Teacher:
        if await self.get_by_employee_id(obj_in["employee_id"]):
            raise ConflictError("Employee ID already exists", field="employee_id")
        await self._check_department(obj_in.get("department_id"))
        teacher = await super().create(obj_in)
        logger.info(f"Teacher {teacher.employee_id} created (id={teacher.id})")
        return teacher

    async def update(self, id: int, obj_in: Dict[str, Any]) -> Optional[Teacher]:
        await self._check_department(obj_in.get("department_id"))
        return await super().update(id, obj_in)

    async def get_assignments(self, teacher_id: int) -> List[Dict[str, Any]]:
        """Subjects and classes a teacher is assigned to"""
        stmt = (
            select(SubjectAssignment, Subject, ClassModel)
            .join(Subject, Subject.id == SubjectAssignment.subject_id)
            .join(ClassModel, ClassModel.id == SubjectAssignment.class_id)
            .where(
                SubjectAssignment.teacher_id == teacher_id,
                SubjectAssignment.is_deleted == False
            )
            .order_by(SubjectAssignment.academic_year, SubjectAssignment.term, ClassModel.name)
        )
        result = await self.db.execute(stmt)
        return [
            {
                "id": assignment.id,
                "subject_id": subject.id,
                "subject_name": subject.name,
                "subject_code": subject.code,
                "class_id": class_obj.id,
                "class_name": class_obj.name,
                "term": assignment.term,
                "academic_year": assignment.academic_year,
                "status": assignment.status,
            }
            for assignment, subject, class_obj in result.all()
        ]
