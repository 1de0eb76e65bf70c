# academy/routers/results.py
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..schemas.result_schemas import (
    ApprovalRequest, CompileRequest, ScoreRejectRequest, ScoreUpsertRequest
)
from ..services.result_service import ResultService, format_compiled_result

router = APIRouter(prefix="/api/v1/results", tags=["Results"])


@router.post("/scores", response_model=dict)
async def save_scores(
    request: ScoreUpsertRequest,
    db: AsyncSession = Depends(get_db)
):
    """Save Draft scores; totals, grades and class statistics are computed here"""
    service = ResultService(db)
    result = await service.upsert_scores(request)
    return {**result, "message": "Scores saved successfully"}


@router.get("/scores/{assignment_id}", response_model=dict)
async def get_scores(
    assignment_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ResultService(db)
    return await service.get_scores(assignment_id)


@router.post("/submit/{assignment_id}", response_model=dict)
async def submit_scores(
    assignment_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ResultService(db)
    count = await service.submit_scores(assignment_id)
    return {"submitted": count, "message": "Scores submitted successfully"}


@router.post("/scores/{assignment_id}/reject", response_model=dict)
async def reject_scores(
    assignment_id: int,
    request: ScoreRejectRequest,
    db: AsyncSession = Depends(get_db)
):
    service = ResultService(db)
    count = await service.reject_scores(assignment_id, request.reason)
    return {"rejected": count, "message": "Scores returned to the subject teacher"}


@router.post("/compile", response_model=dict)
async def compile_results(
    request: CompileRequest,
    db: AsyncSession = Depends(get_db)
):
    service = ResultService(db)
    result = await service.compile_results(request)
    return {**result, "message": f"Results compiled for {result['total_students']} student(s)"}


@router.get("/student/{student_id}", response_model=dict)
async def get_student_results(
    student_id: int,
    term: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = ResultService(db)
    results = await service.get_student_results(student_id, term, academic_year)
    return {"student_id": student_id, "results": results, "total": len(results)}


@router.get("/pending-approvals", response_model=dict)
async def get_pending_approvals(
    class_id: Optional[int] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = ResultService(db)
    pending = await service.get_pending_approvals(class_id)
    return {"items": pending, "total": len(pending)}


@router.post("/approve/{result_id}", response_model=dict)
async def approve_result(
    result_id: int,
    request: ApprovalRequest,
    db: AsyncSession = Depends(get_db)
):
    service = ResultService(db)
    result = await service.approve_result(result_id, request)
    return {**format_compiled_result(result), "message": f"Result {result.status.lower()} successfully"}


@router.get("/broadsheet/{class_id}", response_model=dict)
async def get_broadsheet(
    class_id: int,
    term: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = ResultService(db)
    return await service.get_broadsheet(class_id, term, academic_year)
