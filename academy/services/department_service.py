# academy/services/department_service.py
from typing import List, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
import logging
from .base_service import BaseService
from ..core.exceptions import ConflictError
from ..models.department import Department
from ..models.teacher import Teacher

logger = logging.getLogger(__name__)


class DepartmentService(BaseService[Department]):
    resource_name = "Department"

    def __init__(self, db: AsyncSession):
        super().__init__(Department, db)

    async def list_with_teacher_counts(self) -> List[Dict[str, Any]]:
        """All departments with the number of active teachers in each"""
        teacher_count = (
            select(func.count(Teacher.id))
            .where(
                Teacher.department_id == Department.id,
                Teacher.is_deleted == False,
                Teacher.status == "Active"
            )
            .correlate(Department)
            .scalar_subquery()
        )
        stmt = (
            select(Department, teacher_count.label("teacher_count"))
            .where(Department.is_deleted == False)
            .order_by(Department.name)
        )
        result = await self.db.execute(stmt)
        return [{"department": dept, "teacher_count": count} for dept, count in result.all()]

    async def active_teacher_count(self, department_id: int) -> int:
        stmt = select(func.count(Teacher.id)).where(
            Teacher.department_id == department_id,
            Teacher.is_deleted == False,
            Teacher.status == "Active"
        )
        result = await self.db.execute(stmt)
        return result.scalar()

    async def delete(self, department_id: int) -> None:
        """Soft delete; refused while active teachers belong to the department"""
        await self.get_or_404(department_id)
        count = await self.active_teacher_count(department_id)
        if count:
            raise ConflictError(f"Cannot delete department with {count} assigned teacher(s)")
        await self.soft_delete(department_id)
        logger.info(f"Department {department_id} deleted")
