# academy/services/subject_service.py
from typing import List, Dict, Any, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
from .base_service import BaseService
from ..core.config import settings
from ..core.exceptions import ConflictError, NotFoundError
from ..models.subject import Subject, SubjectAssignment
from ..models.class_model import ClassModel
from ..models.teacher import Teacher

logger = logging.getLogger(__name__)


class SubjectService(BaseService[Subject]):
    resource_name = "Subject"

    def __init__(self, db: AsyncSession):
        super().__init__(Subject, db)

    async def get_by_code(self, code: str) -> Optional[Subject]:
        stmt = select(self.model).where(self.model.code == code, self.model.is_deleted == False)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def create(self, obj_in: Dict[str, Any]) -> Subject:
        if await self.get_by_code(obj_in["code"]):
            raise ConflictError("Subject code already exists", field="code")
        return await super().create(obj_in)


class SubjectAssignmentService(BaseService[SubjectAssignment]):
    resource_name = "Subject assignment"

    def __init__(self, db: AsyncSession):
        super().__init__(SubjectAssignment, db)

    async def _require(self, model, id: int, name: str):
        stmt = select(model.id).where(model.id == id, model.is_deleted == False)
        if (await self.db.execute(stmt)).scalar_one_or_none() is None:
            raise NotFoundError(name, id)

    async def list_assignments(self, **filters) -> List[Dict[str, Any]]:
        stmt = (
            select(SubjectAssignment, Subject, ClassModel, Teacher)
            .join(Subject, Subject.id == SubjectAssignment.subject_id)
            .join(ClassModel, ClassModel.id == SubjectAssignment.class_id)
            .join(Teacher, Teacher.id == SubjectAssignment.teacher_id)
            .where(SubjectAssignment.is_deleted == False)
            .order_by(ClassModel.name, Subject.name)
        )
        for key, value in filters.items():
            if value is not None:
                stmt = stmt.where(getattr(SubjectAssignment, key) == value)
        result = await self.db.execute(stmt)
        return [
            {
                "id": assignment.id,
                "subject_id": subject.id,
                "subject_name": subject.name,
                "class_id": class_obj.id,
                "class_name": class_obj.name,
                "teacher_id": teacher.id,
                "teacher_name": teacher.full_name,
                "term": assignment.term,
                "academic_year": assignment.academic_year,
                "status": assignment.status,
            }
            for assignment, subject, class_obj, teacher in result.all()
        ]

    async def create(self, obj_in: Dict[str, Any]) -> SubjectAssignment:
        """Assign a teacher to a subject for one class and term"""
        await self._require(Subject, obj_in["subject_id"], "Subject")
        await self._require(ClassModel, obj_in["class_id"], "Class")
        await self._require(Teacher, obj_in["teacher_id"], "Teacher")
        obj_in["term"] = obj_in.get("term") or settings.default_term
        obj_in["academic_year"] = obj_in.get("academic_year") or settings.default_academic_year

        stmt = select(SubjectAssignment).where(
            SubjectAssignment.subject_id == obj_in["subject_id"],
            SubjectAssignment.class_id == obj_in["class_id"],
            SubjectAssignment.term == obj_in["term"],
            SubjectAssignment.academic_year == obj_in["academic_year"]
        )
        existing = (await self.db.execute(stmt)).scalar_one_or_none()
        if existing and not existing.is_deleted:
            raise ConflictError("Subject is already assigned to this class for the term")

        if existing:
            # Revive the deleted row so earlier scores stay attached
            existing.is_deleted = False
            existing.teacher_id = obj_in["teacher_id"]
            existing.status = "Active"
            await self._commit()
            await self.db.refresh(existing)
            assignment = existing
        else:
            assignment = await super().create(obj_in)
        logger.info(
            f"Subject {assignment.subject_id} assigned to teacher {assignment.teacher_id} "
            f"for class {assignment.class_id} ({assignment.term} {assignment.academic_year})"
        )
        return assignment

    async def update(self, id: int, obj_in: Dict[str, Any]) -> Optional[SubjectAssignment]:
        if obj_in.get("teacher_id") is not None:
            await self._require(Teacher, obj_in["teacher_id"], "Teacher")
        return await super().update(id, obj_in)
