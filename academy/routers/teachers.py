# academy/routers/teachers.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models.teacher import Teacher
from ..schemas.staff_schemas import TeacherCreate, TeacherUpdate
from ..services.teacher_service import TeacherService
from ..utils.pagination import Paginator, PaginationParams

router = APIRouter(prefix="/api/v1/teachers", tags=["Teachers"])


def format_teacher(teacher: Teacher) -> dict:
    return {
        "id": teacher.id,
        "employee_id": teacher.employee_id,
        "first_name": teacher.first_name,
        "last_name": teacher.last_name,
        "other_name": teacher.other_name,
        "full_name": teacher.full_name,
        "email": teacher.email,
        "phone": teacher.phone,
        "gender": teacher.gender,
        "qualification": teacher.qualification,
        "specialization": teacher.specialization,
        "department_id": teacher.department_id,
        "is_class_teacher": teacher.is_class_teacher,
        "status": teacher.status,
    }


@router.get("/", response_model=dict)
async def get_teachers(
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    department_id: Optional[int] = Query(None),
    teacher_status: Optional[str] = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db)
):
    service = TeacherService(db)
    result = await service.get_paginated(
        page=pagination.page,
        size=pagination.size,
        order_by="last_name",
        department_id=department_id,
        status=teacher_status
    )
    return Paginator.from_result(result, format_teacher)


@router.post("/", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_teacher(
    teacher_data: TeacherCreate,
    db: AsyncSession = Depends(get_db)
):
    service = TeacherService(db)
    teacher = await service.create(teacher_data.model_dump())
    return {**format_teacher(teacher), "message": "Teacher created successfully"}


@router.get("/{teacher_id}", response_model=dict)
async def get_teacher(
    teacher_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = TeacherService(db)
    return format_teacher(await service.get_or_404(teacher_id))


@router.get("/{teacher_id}/assignments", response_model=dict)
async def get_teacher_assignments(
    teacher_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Subjects and classes the teacher takes"""
    service = TeacherService(db)
    await service.get_or_404(teacher_id)
    assignments = await service.get_assignments(teacher_id)
    return {"teacher_id": teacher_id, "assignments": assignments, "total": len(assignments)}


@router.put("/{teacher_id}", response_model=dict)
async def update_teacher(
    teacher_id: int,
    teacher_data: TeacherUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = TeacherService(db)
    teacher = await service.update(teacher_id, teacher_data.model_dump(exclude_unset=True))
    if not teacher:
        raise NotFoundError("Teacher", teacher_id)
    return {**format_teacher(teacher), "message": "Teacher updated successfully"}


@router.delete("/{teacher_id}", response_model=dict)
async def delete_teacher(
    teacher_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = TeacherService(db)
    if not await service.soft_delete(teacher_id):
        raise NotFoundError("Teacher", teacher_id)
    return {"message": "Teacher deleted successfully"}
