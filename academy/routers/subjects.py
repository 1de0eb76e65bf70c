# academy/routers/subjects.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models.subject import Subject, SubjectAssignment
from ..schemas.class_schemas import (
    SubjectAssignmentCreate, SubjectAssignmentUpdate, SubjectCreate, SubjectUpdate
)
from ..services.subject_service import SubjectAssignmentService, SubjectService
from ..utils.pagination import Paginator, PaginationParams

router = APIRouter(prefix="/api/v1/subjects", tags=["Subjects"])


def format_subject(subject: Subject) -> dict:
    return {
        "id": subject.id,
        "name": subject.name,
        "code": subject.code,
        "category": subject.category,
        "department": subject.department,
        "description": subject.description,
        "is_core": subject.is_core,
        "status": subject.status,
    }


def format_assignment(assignment: SubjectAssignment) -> dict:
    return {
        "id": assignment.id,
        "subject_id": assignment.subject_id,
        "class_id": assignment.class_id,
        "teacher_id": assignment.teacher_id,
        "term": assignment.term,
        "academic_year": assignment.academic_year,
        "status": assignment.status,
    }


@router.get("/", response_model=dict)
async def get_subjects(
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    category: Optional[str] = Query(None),
    is_core: Optional[bool] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = SubjectService(db)
    result = await service.get_paginated(
        page=pagination.page,
        size=pagination.size,
        order_by="name",
        category=category,
        is_core=is_core
    )
    return Paginator.from_result(result, format_subject)


@router.post("/", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_subject(
    subject_data: SubjectCreate,
    db: AsyncSession = Depends(get_db)
):
    service = SubjectService(db)
    subject = await service.create(subject_data.model_dump())
    return {**format_subject(subject), "message": "Subject created successfully"}


# Assignment routes are declared before /{subject_id} so the literal path wins

@router.get("/assignments", response_model=dict)
async def get_assignments(
    class_id: Optional[int] = Query(None),
    teacher_id: Optional[int] = Query(None),
    term: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = SubjectAssignmentService(db)
    assignments = await service.list_assignments(
        class_id=class_id,
        teacher_id=teacher_id,
        term=term,
        academic_year=academic_year
    )
    return {"items": assignments, "total": len(assignments)}


@router.post("/assignments", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_assignment(
    assignment_data: SubjectAssignmentCreate,
    db: AsyncSession = Depends(get_db)
):
    service = SubjectAssignmentService(db)
    assignment = await service.create(assignment_data.model_dump())
    return {**format_assignment(assignment), "message": "Subject assigned successfully"}


@router.put("/assignments/{assignment_id}", response_model=dict)
async def update_assignment(
    assignment_id: int,
    assignment_data: SubjectAssignmentUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = SubjectAssignmentService(db)
    assignment = await service.update(assignment_id, assignment_data.model_dump(exclude_unset=True))
    if not assignment:
        raise NotFoundError("Subject assignment", assignment_id)
    return {**format_assignment(assignment), "message": "Assignment updated successfully"}


@router.delete("/assignments/{assignment_id}", response_model=dict)
async def delete_assignment(
    assignment_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = SubjectAssignmentService(db)
    if not await service.soft_delete(assignment_id):
        raise NotFoundError("Subject assignment", assignment_id)
    return {"message": "Assignment deleted successfully"}


@router.get("/{subject_id}", response_model=dict)
async def get_subject(
    subject_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = SubjectService(db)
    return format_subject(await service.get_or_404(subject_id))


@router.put("/{subject_id}", response_model=dict)
async def update_subject(
    subject_id: int,
    subject_data: SubjectUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = SubjectService(db)
    subject = await service.update(subject_id, subject_data.model_dump(exclude_unset=True))
    if not subject:
        raise NotFoundError("Subject", subject_id)
    return {**format_subject(subject), "message": "Subject updated successfully"}


@router.delete("/{subject_id}", response_model=dict)
async def delete_subject(
    subject_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = SubjectService(db)
    if not await service.soft_delete(subject_id):
        raise NotFoundError("Subject", subject_id)
    return {"message": "Subject deleted successfully"}
