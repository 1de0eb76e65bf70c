# academy/services/parent_service.py
from typing import List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging
from .base_service import BaseService
from ..core.exceptions import ConflictError, NotFoundError
from ..models.parent import Parent, ParentStudentLink
from ..models.student import Student

logger = logging.getLogger(__name__)


class ParentService(BaseService[Parent]):
    resource_name = "Parent"

    def __init__(self, db: AsyncSession):
        super().__init__(Parent, db)

    async def _get_link(self, parent_id: int, student_id: int):
        stmt = select(ParentStudentLink).where(
            ParentStudentLink.parent_id == parent_id,
            ParentStudentLink.student_id == student_id
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def get_children(self, parent_id: int) -> List[Dict[str, Any]]:
        await self.get_or_404(parent_id)
        stmt = (
            select(Student, ParentStudentLink.relationship_type)
            .join(ParentStudentLink, ParentStudentLink.student_id == Student.id)
            .where(
                ParentStudentLink.parent_id == parent_id,
                ParentStudentLink.is_deleted == False,
                Student.is_deleted == False
            )
            .order_by(Student.first_name)
        )
        result = await self.db.execute(stmt)
        return [{"student": student, "relationship_type": rel} for student, rel in result.all()]

    async def link_student(self, parent_id: int, student_id: int, relationship_type: str) -> ParentStudentLink:
        """Attach a student to a parent; the first parent becomes the primary contact"""
        await self.get_or_404(parent_id)
        student = (await self.db.execute(
            select(Student).where(Student.id == student_id, Student.is_deleted == False)
        )).scalar_one_or_none()
        if not student:
            raise NotFoundError("Student", student_id)

        link = await self._get_link(parent_id, student_id)
        if link and not link.is_deleted:
            raise ConflictError("Student is already linked to this parent")
        if link:
            link.is_deleted = False
            link.relationship_type = relationship_type
        else:
            link = ParentStudentLink(
                parent_id=parent_id,
                student_id=student_id,
                relationship_type=relationship_type
            )
            self.db.add(link)

        if student.parent_id is None:
            student.parent_id = parent_id

        await self.db.commit()
        await self.db.refresh(link)
        logger.info(f"Student {student_id} linked to parent {parent_id}")
        return link

    async def unlink_student(self, parent_id: int, student_id: int) -> None:
        link = await self._get_link(parent_id, student_id)
        if not link or link.is_deleted:
            raise NotFoundError("Parent-student link", message="Student is not linked to this parent")
        link.is_deleted = True

        student = (await self.db.execute(select(Student).where(Student.id == student_id))).scalar_one_or_none()
        if student and student.parent_id == parent_id:
            student.parent_id = None

        await self.db.commit()
        logger.info(f"Student {student_id} unlinked from parent {parent_id}")
