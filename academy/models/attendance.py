# academy/models/attendance.py
from sqlalchemy import Column, String, Integer, Date, Text, ForeignKey, UniqueConstraint
from .base import Base
import enum


class AttendanceStatus(str, enum.Enum):
    PRESENT = "Present"
    ABSENT = "Absent"
    LATE = "Late"


class Attendance(Base):
    __tablename__ = "attendances"

    # Foreign Keys
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)

    date = Column(Date, nullable=False, index=True)
    status = Column(String(10), nullable=False)
    remarks = Column(Text)
    marked_by = Column(Integer)

    __table_args__ = (
        UniqueConstraint("student_id", "date", name="uq_attendance_student_date"),
    )
