# academy/models/parent.py
from sqlalchemy import Column, String, Integer, ForeignKey, UniqueConstraint
from .base import Base


class Parent(Base):
    __tablename__ = "parents"

    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(100), index=True)
    phone = Column(String(20), nullable=False)
    alternate_phone = Column(String(20))
    address = Column(String(500))
    occupation = Column(String(100))
    status = Column(String(20), default="Active", nullable=False)


class ParentStudentLink(Base):
    __tablename__ = "parent_student_links"

    parent_id = Column(Integer, ForeignKey("parents.id"), nullable=False, index=True)
    student_id = Column(Integer, ForeignKey("students.id"), nullable=False, index=True)
    relationship_type = Column(String(30), default="Guardian")

    __table_args__ = (
        UniqueConstraint("parent_id", "student_id", name="uq_parent_student"),
    )
