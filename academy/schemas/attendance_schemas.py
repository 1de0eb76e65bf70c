# academy/schemas/attendance_schemas.py
from typing import List, Optional
from datetime import date
from pydantic import BaseModel, Field

from ..models.attendance import AttendanceStatus


class AttendanceRecord(BaseModel):
    student_id: int
    status: AttendanceStatus
    remarks: Optional[str] = None


class AttendanceMarkRequest(BaseModel):
    class_id: int
    date: date
    marked_by: Optional[int] = None
    records: List[AttendanceRecord] = Field(..., min_length=1)
