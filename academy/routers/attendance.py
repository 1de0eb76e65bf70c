# academy/routers/attendance.py
from typing import Optional
from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..models.attendance import Attendance
from ..schemas.attendance_schemas import AttendanceMarkRequest
from ..services.attendance_service import AttendanceService

router = APIRouter(prefix="/api/v1/attendance", tags=["Attendance"])


def format_record(record: Attendance) -> dict:
    return {
        "id": record.id,
        "student_id": record.student_id,
        "class_id": record.class_id,
        "date": record.date.isoformat(),
        "status": record.status,
        "remarks": record.remarks,
    }


@router.post("/", response_model=dict)
async def mark_attendance(
    request: AttendanceMarkRequest,
    db: AsyncSession = Depends(get_db)
):
    service = AttendanceService(db)
    result = await service.mark_attendance(request)
    return {**result, "message": "Attendance marked successfully"}


@router.get("/student/{student_id}", response_model=dict)
async def get_student_attendance(
    student_id: int,
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = AttendanceService(db)
    result = await service.get_student_attendance(student_id, start_date, end_date)
    return {**result, "records": [format_record(r) for r in result["records"]]}


@router.get("/class/{class_id}", response_model=dict)
async def get_class_attendance(
    class_id: int,
    on: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db)
):
    service = AttendanceService(db)
    result = await service.get_class_attendance(class_id, on)
    return {
        **result,
        "records": [
            {**format_record(row["record"]), "student_name": row["student_name"]}
            for row in result["records"]
        ]
    }
