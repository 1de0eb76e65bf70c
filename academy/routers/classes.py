# academy/routers/classes.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models.class_model import ClassModel
from ..schemas.class_schemas import ClassCreate, ClassUpdate
from ..services.class_service import ClassService
from ..services.student_service import StudentService
from ..utils.pagination import Paginator, PaginationParams
from .students import format_student

router = APIRouter(prefix="/api/v1/classes", tags=["Classes"])


def format_class(class_obj: ClassModel) -> dict:
    return {
        "id": class_obj.id,
        "name": class_obj.name,
        "level": class_obj.level,
        "section": class_obj.section,
        "category": class_obj.category,
        "capacity": class_obj.capacity,
        "class_teacher_id": class_obj.class_teacher_id,
        "academic_year": class_obj.academic_year,
        "status": class_obj.status,
    }


@router.get("/", response_model=dict)
async def get_classes(
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    academic_year: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = ClassService(db)
    result = await service.get_paginated(
        page=pagination.page,
        size=pagination.size,
        order_by="name",
        academic_year=academic_year,
        category=category
    )
    return Paginator.from_result(result, format_class)


@router.post("/", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_class(
    class_data: ClassCreate,
    db: AsyncSession = Depends(get_db)
):
    service = ClassService(db)
    class_obj = await service.create(class_data.model_dump())
    return {**format_class(class_obj), "message": "Class created successfully"}


@router.get("/by-level/{level}", response_model=dict)
async def get_classes_by_level(
    level: str,
    db: AsyncSession = Depends(get_db)
):
    service = ClassService(db)
    classes = await service.get_by_level(level)
    return {"level": level, "classes": [format_class(c) for c in classes], "total": len(classes)}


@router.get("/{class_id}", response_model=dict)
async def get_class(
    class_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ClassService(db)
    class_obj = await service.get_or_404(class_id)
    return {**format_class(class_obj), "student_count": await service.active_student_count(class_id)}


@router.get("/{class_id}/students", response_model=dict)
async def get_class_students(
    class_id: int,
    db: AsyncSession = Depends(get_db)
):
    await ClassService(db).get_or_404(class_id)
    students = await StudentService(db).get_by_class(class_id)
    return {"class_id": class_id, "students": [format_student(s) for s in students], "total": len(students)}


@router.get("/{class_id}/subjects", response_model=dict)
async def get_class_subjects(
    class_id: int,
    term: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = ClassService(db)
    subjects = await service.get_subjects(class_id, term, academic_year)
    return {"class_id": class_id, "subjects": subjects, "total": len(subjects)}


@router.get("/{class_id}/statistics", response_model=dict)
async def get_class_statistics(
    class_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ClassService(db)
    return await service.get_statistics(class_id)


@router.put("/{class_id}", response_model=dict)
async def update_class(
    class_id: int,
    class_data: ClassUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = ClassService(db)
    class_obj = await service.update(class_id, class_data.model_dump(exclude_unset=True))
    if not class_obj:
        raise NotFoundError("Class", class_id)
    return {**format_class(class_obj), "message": "Class updated successfully"}


@router.delete("/{class_id}", response_model=dict)
async def delete_class(
    class_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ClassService(db)
    await service.delete(class_id)
    return {"message": "Class deleted successfully"}
