# academy/models/teacher.py
from sqlalchemy import Column, String, Integer, Boolean, ForeignKey
from .base import Base


class Teacher(Base):
    __tablename__ = "teachers"

    # Foreign Keys
    department_id = Column(Integer, ForeignKey("departments.id"), nullable=True, index=True)

    # Basic Information
    employee_id = Column(String(20), nullable=False, unique=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    other_name = Column(String(50))
    email = Column(String(100), index=True)
    phone = Column(String(20))
    gender = Column(String(10))

    # Professional Information
    qualification = Column(String(200))
    specialization = Column(String(200))
    is_class_teacher = Column(Boolean, default=False, nullable=False)

    status = Column(String(20), default="Active", nullable=False)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"
