# academy/schemas/student_schemas.py
from typing import List, Optional
from datetime import date
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field


class StudentStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    GRADUATED = "Graduated"
    TRANSFERRED = "Transferred"


class PromotionStatus(str, Enum):
    PROMOTED = "Promoted"
    REPEATED = "Repeated"
    TRANSFERRED = "Transferred"


class StudentBase(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    other_name: Optional[str] = Field(default=None, max_length=50)
    class_id: Optional[int] = None
    parent_id: Optional[int] = None
    level: Optional[str] = Field(default=None, max_length=20)
    gender: Optional[str] = Field(default=None, max_length=10)
    date_of_birth: Optional[date] = None
    admission_date: Optional[date] = None


class StudentCreate(StudentBase):
    admission_number: str = Field(..., min_length=1, max_length=20)
    academic_year: Optional[str] = Field(default=None, max_length=10)
    status: StudentStatus = StudentStatus.ACTIVE


class StudentUpdate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=50)
    other_name: Optional[str] = Field(default=None, max_length=50)
    admission_number: Optional[str] = Field(default=None, min_length=1, max_length=20)
    class_id: Optional[int] = None
    parent_id: Optional[int] = None
    level: Optional[str] = Field(default=None, max_length=20)
    gender: Optional[str] = Field(default=None, max_length=10)
    date_of_birth: Optional[date] = None
    admission_date: Optional[date] = None
    academic_year: Optional[str] = Field(default=None, max_length=10)
    status: Optional[StudentStatus] = None


class PromotionEntry(BaseModel):
    student_id: int
    promotion_status: PromotionStatus
    to_class_id: Optional[int] = None


class PromotionRequest(BaseModel):
    """Batch promotion; an entry without ``to_class_id`` uses the request's."""
    to_academic_year: str = Field(..., min_length=1, max_length=10)
    to_class_id: Optional[int] = None
    promoted_by: Optional[int] = None
    students: List[PromotionEntry] = Field(..., min_length=1)
