# academy/schemas/class_schemas.py
from typing import Optional
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class ClassCategory(str, Enum):
    PRIMARY = "Primary"
    SECONDARY = "Secondary"


class SubjectCategory(str, Enum):
    GENERAL = "General"
    SCIENCE = "Science"
    ARTS = "Arts"
    COMMERCIAL = "Commercial"


class ClassCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str = Field(..., min_length=1, max_length=50)
    level: str = Field(..., min_length=1, max_length=20)
    section: Optional[str] = Field(default=None, max_length=10)
    category: ClassCategory = ClassCategory.SECONDARY
    capacity: int = Field(default=40, ge=1)
    class_teacher_id: Optional[int] = None
    academic_year: Optional[str] = Field(default=None, max_length=10)
    status: str = Field(default="Active", max_length=20)


class ClassUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    level: Optional[str] = Field(default=None, min_length=1, max_length=20)
    section: Optional[str] = Field(default=None, max_length=10)
    category: Optional[ClassCategory] = None
    capacity: Optional[int] = Field(default=None, ge=1)
    class_teacher_id: Optional[int] = None
    academic_year: Optional[str] = Field(default=None, max_length=10)
    status: Optional[str] = Field(default=None, max_length=20)


class SubjectCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str = Field(..., min_length=1, max_length=100)
    code: str = Field(..., min_length=1, max_length=20)
    category: SubjectCategory = SubjectCategory.GENERAL
    department: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    is_core: bool = False
    status: str = Field(default="Active", max_length=20)


class SubjectUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    code: Optional[str] = Field(default=None, min_length=1, max_length=20)
    category: Optional[SubjectCategory] = None
    department: Optional[str] = Field(default=None, max_length=100)
    description: Optional[str] = None
    is_core: Optional[bool] = None
    status: Optional[str] = Field(default=None, max_length=20)


class SubjectAssignmentCreate(BaseModel):
    subject_id: int
    class_id: int
    teacher_id: int
    term: Optional[str] = Field(default=None, max_length=20)
    academic_year: Optional[str] = Field(default=None, max_length=10)


class SubjectAssignmentUpdate(BaseModel):
    teacher_id: Optional[int] = None
    status: Optional[str] = Field(default=None, max_length=20)
