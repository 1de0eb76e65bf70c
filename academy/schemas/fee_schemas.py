# academy/schemas/fee_schemas.py
from typing import Literal, Optional
from decimal import Decimal
from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models.fee_management import PaymentType
from ..services.fee_calculator import PaymentMethod, ScholarshipType


class FeeStructureCreate(BaseModel):
    class_id: int
    term: Optional[str] = Field(default=None, max_length=20)
    academic_year: Optional[str] = Field(default=None, max_length=10)
    tuition_fee: Decimal = Field(default=Decimal("0"), ge=0)
    development_levy: Decimal = Field(default=Decimal("0"), ge=0)
    sports_fee: Decimal = Field(default=Decimal("0"), ge=0)
    exam_fee: Decimal = Field(default=Decimal("0"), ge=0)
    books_fee: Decimal = Field(default=Decimal("0"), ge=0)
    uniform_fee: Decimal = Field(default=Decimal("0"), ge=0)
    transport_fee: Decimal = Field(default=Decimal("0"), ge=0)


class FeeStructureUpdate(BaseModel):
    tuition_fee: Optional[Decimal] = Field(default=None, ge=0)
    development_levy: Optional[Decimal] = Field(default=None, ge=0)
    sports_fee: Optional[Decimal] = Field(default=None, ge=0)
    exam_fee: Optional[Decimal] = Field(default=None, ge=0)
    books_fee: Optional[Decimal] = Field(default=None, ge=0)
    uniform_fee: Optional[Decimal] = Field(default=None, ge=0)
    transport_fee: Optional[Decimal] = Field(default=None, ge=0)
    status: Optional[str] = Field(default=None, max_length=20)


class ScholarshipCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    name: str = Field(..., min_length=1, max_length=100)
    scholarship_type: ScholarshipType
    value: Decimal = Field(..., gt=0)
    description: Optional[str] = None
    eligibility_criteria: Optional[str] = None
    total_budget: Optional[Decimal] = Field(default=None, ge=0)
    academic_year: Optional[str] = Field(default=None, max_length=10)
    status: str = Field(default="Active", max_length=20)

    @model_validator(mode="after")
    def percentage_at_most_100(self):
        if self.scholarship_type == ScholarshipType.PERCENTAGE and self.value > 100:
            raise ValueError("percentage scholarships cannot exceed 100")
        return self


class ScholarshipUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    value: Optional[Decimal] = Field(default=None, gt=0)
    description: Optional[str] = None
    eligibility_criteria: Optional[str] = None
    total_budget: Optional[Decimal] = Field(default=None, ge=0)
    status: Optional[str] = Field(default=None, max_length=20)


class ScholarshipAwardRequest(BaseModel):
    student_id: int
    term: Optional[str] = Field(default=None, max_length=20)
    academic_year: Optional[str] = Field(default=None, max_length=10)


class PaymentCreate(BaseModel):
    student_id: int
    amount: Decimal = Field(..., gt=0)
    payment_method: PaymentMethod
    payment_type: PaymentType = PaymentType.SCHOOL_FEES
    term: Optional[str] = Field(default=None, max_length=20)
    academic_year: Optional[str] = Field(default=None, max_length=10)
    transaction_reference: Optional[str] = Field(default=None, max_length=100)
    notes: Optional[str] = None
    recorded_by: Optional[int] = None


class PaymentVerifyRequest(BaseModel):
    action: Literal["verify", "reject"]
    verified_by: Optional[int] = None
    reason: Optional[str] = None

    @model_validator(mode="after")
    def reason_required_for_reject(self):
        if self.action == "reject" and not self.reason:
            raise ValueError("reason is required when rejecting a payment")
        return self
