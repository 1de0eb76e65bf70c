# academy/schemas/result_schemas.py
from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator


class ScoreEntry(BaseModel):
    student_id: int
    ca1: float = Field(0, allow_inf_nan=False)
    ca2: float = Field(0, allow_inf_nan=False)
    exam: float = Field(0, allow_inf_nan=False)


class ScoreUpsertRequest(BaseModel):
    subject_assignment_id: int
    entered_by: Optional[int] = None
    scores: List[ScoreEntry] = Field(..., min_length=1)


class ScoreRejectRequest(BaseModel):
    reason: str = Field(..., min_length=1)


class CompileRequest(BaseModel):
    class_id: int
    term: Optional[str] = Field(default=None, max_length=20)
    academic_year: Optional[str] = Field(default=None, max_length=10)
    compiled_by: Optional[int] = None
    class_teacher_comment: Optional[str] = None


class ApprovalRequest(BaseModel):
    action: Literal["approve", "reject"]
    approved_by: Optional[int] = None
    rejection_reason: Optional[str] = None

    @model_validator(mode="after")
    def reason_required_for_reject(self):
        if self.action == "reject" and not self.rejection_reason:
            raise ValueError("rejection_reason is required when rejecting a result")
        return self
