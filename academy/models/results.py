# academy/models/results.py
from sqlalchemy import Column, String, Integer, Float, Date, Text, ForeignKey, UniqueConstraint
from .base import Base
import enum


class ScoreStatus(str, enum.Enum):
    DRAFT = "Draft"
    SUBMITTED = "Submitted"
    REJECTED = "Rejected"


class ResultStatus(str, enum.Enum):
    SUBMITTED = "Submitted"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class Score(Base):
    __tablename__ = "scores"

    # Foreign Keys
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    subject_assignment_id = Column(Integer, ForeignKey("subject_assignments.id"), nullable=False, index=True)

    # Marks
    ca1 = Column(Float, default=0, nullable=False)
    ca2 = Column(Float, default=0, nullable=False)
    exam = Column(Float, default=0, nullable=False)
    total = Column(Float, default=0, nullable=False)
    grade = Column(String(2))
    remark = Column(String(20))

    # Class statistics for the assignment, refreshed on every save
    class_average = Column(Float)
    class_min = Column(Float)
    class_max = Column(Float)

    entered_by = Column(Integer)
    status = Column(String(20), default=ScoreStatus.DRAFT.value, nullable=False, index=True)
    rejection_reason = Column(Text)

    __table_args__ = (
        UniqueConstraint("student_id", "subject_assignment_id", name="uq_score_student_assignment"),
    )


class CompiledResult(Base):
    __tablename__ = "compiled_results"

    # Foreign Keys
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)

    term = Column(String(20), nullable=False)
    academic_year = Column(String(10), nullable=False)

    # Aggregates
    total_score = Column(Float, default=0, nullable=False)
    average_score = Column(Float, default=0, nullable=False)
    subjects_offered = Column(Integer, default=0, nullable=False)
    grade = Column(String(2))
    class_average = Column(Float)
    position = Column(Integer)
    total_students = Column(Integer)

    # Attendance
    times_present = Column(Integer, default=0)
    times_absent = Column(Integer, default=0)

    # Comments
    class_teacher_comment = Column(Text)
    principal_comment = Column(Text)

    # Approval workflow
    compiled_by = Column(Integer)
    status = Column(String(20), default=ResultStatus.SUBMITTED.value, nullable=False, index=True)
    approved_by = Column(Integer)
    approved_date = Column(Date)
    rejection_reason = Column(Text)

    __table_args__ = (
        UniqueConstraint("student_id", "class_id", "term", "academic_year", name="uq_compiled_result"),
    )
