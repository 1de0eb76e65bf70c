# academy/services/attendance_service.py
from typing import List, Optional, Dict, Any
from datetime import date
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from .base_service import BaseService
from ..core.exceptions import BadRequestError, NotFoundError
from ..models.attendance import Attendance, AttendanceStatus
from ..models.class_model import ClassModel
from ..models.student import Student
from ..schemas.attendance_schemas import AttendanceMarkRequest

logger = logging.getLogger(__name__)


def summarize(records: List[Attendance]) -> Dict[str, Any]:
    counts = {status.value: 0 for status in AttendanceStatus}
    for record in records:
        counts[record.status] = counts.get(record.status, 0) + 1
    total = len(records)
    attended = counts[AttendanceStatus.PRESENT.value] + counts[AttendanceStatus.LATE.value]
    return {
        "total_days": total,
        **counts,
        "attendance_rate": round(attended / total * 100, 2) if total else 0.0,
    }


class AttendanceService(BaseService[Attendance]):
    resource_name = "Attendance"

    def __init__(self, db: AsyncSession):
        super().__init__(Attendance, db)

    async def mark_attendance(self, request: AttendanceMarkRequest) -> Dict[str, Any]:
        """Record one day's attendance for a class; re-marking a day overwrites it"""
        stmt = select(ClassModel.id).where(ClassModel.id == request.class_id, ClassModel.is_deleted == False)
        if (await self.db.execute(stmt)).scalar_one_or_none() is None:
            raise NotFoundError("Class", request.class_id)

        student_ids = [record.student_id for record in request.records]
        stmt = select(Student.id).where(
            Student.id.in_(student_ids),
            Student.class_id == request.class_id,
            Student.is_deleted == False
        )
        enrolled = set((await self.db.execute(stmt)).scalars().all())
        missing = sorted(set(student_ids) - enrolled)
        if missing:
            raise BadRequestError(f"Students {missing} are not enrolled in class {request.class_id}")

        stmt = select(Attendance).where(
            Attendance.student_id.in_(student_ids),
            Attendance.date == request.date
        )
        existing = {record.student_id: record for record in (await self.db.execute(stmt)).scalars().all()}

        for entry in request.records:
            record = existing.get(entry.student_id)
            if not record:
                record = Attendance(student_id=entry.student_id, date=request.date)
                self.db.add(record)
                existing[entry.student_id] = record
            record.class_id = request.class_id
            record.status = entry.status.value
            record.remarks = entry.remarks
            record.marked_by = request.marked_by
            record.is_deleted = False

        await self._commit()
        logger.info(f"Attendance marked for class {request.class_id} on {request.date} ({len(request.records)} students)")
        return {
            "class_id": request.class_id,
            "date": request.date.isoformat(),
            "marked": len(request.records),
            "summary": summarize([existing[sid] for sid in student_ids]),
        }

    async def get_student_attendance(
        self,
        student_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> Dict[str, Any]:
        stmt = select(Student).where(Student.id == student_id, Student.is_deleted == False)
        student = (await self.db.execute(stmt)).scalar_one_or_none()
        if not student:
            raise NotFoundError("Student", student_id)

        stmt = select(Attendance).where(
            Attendance.student_id == student_id,
            Attendance.is_deleted == False
        ).order_by(Attendance.date.desc())
        if start_date:
            stmt = stmt.where(Attendance.date >= start_date)
        if end_date:
            stmt = stmt.where(Attendance.date <= end_date)
        records = (await self.db.execute(stmt)).scalars().all()
        return {
            "student_id": student.id,
            "student_name": student.full_name,
            "summary": summarize(records),
            "records": records,
        }

    async def get_class_attendance(self, class_id: int, on: Optional[date] = None) -> Dict[str, Any]:
        stmt = select(ClassModel).where(ClassModel.id == class_id, ClassModel.is_deleted == False)
        class_obj = (await self.db.execute(stmt)).scalar_one_or_none()
        if not class_obj:
            raise NotFoundError("Class", class_id)

        stmt = (
            select(Attendance, Student)
            .join(Student, Student.id == Attendance.student_id)
            .where(Attendance.class_id == class_id, Attendance.is_deleted == False)
            .order_by(Attendance.date.desc(), Student.last_name)
        )
        if on:
            stmt = stmt.where(Attendance.date == on)
        rows = (await self.db.execute(stmt)).all()
        return {
            "class_id": class_obj.id,
            "class_name": class_obj.name,
            "date": on.isoformat() if on else None,
            "summary": summarize([record for record, _ in rows]),
            "records": [
                {"record": record, "student_name": student.full_name}
                for record, student in rows
            ],
        }
