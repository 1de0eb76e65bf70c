# academy/models/student.py
from sqlalchemy import Column, String, Integer, Date, ForeignKey
from .base import Base


class Student(Base):
    __tablename__ = "students"

    # Foreign Keys
    class_id = Column(Integer, ForeignKey("classes.id"), nullable=True, index=True)
    parent_id = Column(Integer, ForeignKey("parents.id"), nullable=True, index=True)

    # Basic Information
    admission_number = Column(String(20), nullable=False, unique=True, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    other_name = Column(String(50))
    gender = Column(String(10))
    date_of_birth = Column(Date)

    # Academic Information
    level = Column(String(20))
    status = Column(String(20), default="Active", nullable=False, index=True)
    academic_year = Column(String(10), nullable=False)
    admission_date = Column(Date)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class StudentPromotion(Base):
    __tablename__ = "student_promotions"

    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    from_class_id = Column(Integer, ForeignKey("classes.id"), nullable=True)
    to_class_id = Column(Integer, ForeignKey("classes.id"), nullable=True)
    from_academic_year = Column(String(10))
    to_academic_year = Column(String(10), nullable=False)
    promotion_status = Column(String(20), nullable=False)
    promoted_by = Column(Integer)
    promotion_date = Column(Date, nullable=False)
