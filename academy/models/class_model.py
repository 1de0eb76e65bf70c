# academy/models/class_model.py
from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from .base import Base


class ClassModel(Base):
    __tablename__ = "classes"

    # Foreign Keys
    class_teacher_id = Column(Integer, ForeignKey("teachers.id"), nullable=True, index=True)

    # Class Information
    name = Column(String(50), nullable=False, index=True)
    level = Column(String(20), nullable=False, index=True)
    section = Column(String(10))
    category = Column(String(20), default="Secondary", nullable=False)
    capacity = Column(Integer, default=40)
    academic_year = Column(String(10), nullable=False)
    status = Column(String(20), default="Active", nullable=False)

    __table_args__ = (
        UniqueConstraint("name", "academic_year", name="uq_class_identity"),
    )
