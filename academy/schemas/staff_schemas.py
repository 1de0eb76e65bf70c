# academy/schemas/staff_schemas.py
"""Request bodies for teachers, departments and parents."""
from typing import Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class RecordStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class TeacherCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    employee_id: str = Field(..., min_length=1, max_length=20)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    other_name: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    gender: Optional[str] = Field(default=None, max_length=10)
    qualification: Optional[str] = Field(default=None, max_length=200)
    specialization: Optional[str] = Field(default=None, max_length=200)
    department_id: Optional[int] = None
    is_class_teacher: bool = False
    status: RecordStatus = RecordStatus.ACTIVE


class TeacherUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    employee_id: Optional[str] = Field(default=None, min_length=1, max_length=20)
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    other_name: Optional[str] = Field(default=None, max_length=50)
    email: Optional[str] = Field(default=None, max_length=100)
    phone: Optional[str] = Field(default=None, max_length=20)
    gender: Optional[str] = Field(default=None, max_length=10)
    qualification: Optional[str] = Field(default=None, max_length=200)
    specialization: Optional[str] = Field(default=None, max_length=200)
    department_id: Optional[int] = None
    is_class_teacher: Optional[bool] = None
    status: Optional[RecordStatus] = None


class DepartmentCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=20)
    head_of_department_id: Optional[int] = None
    description: Optional[str] = None
    status: RecordStatus = RecordStatus.ACTIVE


class DepartmentUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    code: Optional[str] = Field(default=None, min_length=1, max_length=20)
    head_of_department_id: Optional[int] = None
    description: Optional[str] = None
    status: Optional[RecordStatus] = None


class ParentCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone: str = Field(..., min_length=1, max_length=20)
    email: Optional[str] = Field(default=None, max_length=100)
    alternate_phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    occupation: Optional[str] = Field(default=None, max_length=100)
    status: RecordStatus = RecordStatus.ACTIVE


class ParentUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    phone: Optional[str] = Field(default=None, min_length=1, max_length=20)
    email: Optional[str] = Field(default=None, max_length=100)
    alternate_phone: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=500)
    occupation: Optional[str] = Field(default=None, max_length=100)
    status: Optional[RecordStatus] = None


class ParentLinkRequest(BaseModel):
    student_id: int
    relationship_type: str = Field(default="Guardian", max_length=30)
