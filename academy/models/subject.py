# academy/models/subject.py
from sqlalchemy import Column, String, Integer, Boolean, Text, ForeignKey, UniqueConstraint
from .base import Base


class Subject(Base):
    __tablename__ = "subjects"

    name = Column(String(100), nullable=False)
    code = Column(String(20), nullable=False, unique=True, index=True)
    category = Column(String(20), default="General", nullable=False)
    department = Column(String(100))
    description = Column(Text)
    is_core = Column(Boolean, default=False, nullable=False)
    status = Column(String(20), default="Active", nullable=False)


class SubjectAssignment(Base):
    """A teacher taking a subject with one class for one term."""
    __tablename__ = "subject_assignments"

    subject_id = Column(Integer, ForeignKey("subjects.id"), nullable=False, index=True)
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=False, index=True)
    term = Column(String(20), nullable=False)
    academic_year = Column(String(10), nullable=False)
    status = Column(String(20), default="Active", nullable=False)

    __table_args__ = (
        UniqueConstraint("subject_id", "class_id", "term", "academic_year", name="uq_subject_assignment"),
    )
