# academy/models/department.py
from sqlalchemy import Column, String, Integer, Text
from .base import Base


class Department(Base):
    __tablename__ = "departments"

    name = Column(String(100), nullable=False)
    code = Column(String(20), nullable=False, unique=True, index=True)
    head_of_department_id = Column(Integer, nullable=True)
    description = Column(Text)
    status = Column(String(20), default="Active", nullable=False)
