# academy/routers/students.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models.student import Student
from ..schemas.student_schemas import PromotionRequest, StudentCreate, StudentStatus, StudentUpdate
from ..services.student_service import StudentService
from ..utils.pagination import Paginator, PaginationParams

router = APIRouter(prefix="/api/v1/students", tags=["Students"])


def format_student(student: Student) -> dict:
    return {
        "id": student.id,
        "admission_number": student.admission_number,
        "first_name": student.first_name,
        "last_name": student.last_name,
        "other_name": student.other_name,
        "full_name": student.full_name,
        "class_id": student.class_id,
        "parent_id": student.parent_id,
        "level": student.level,
        "gender": student.gender,
        "date_of_birth": student.date_of_birth.isoformat() if student.date_of_birth else None,
        "status": student.status,
        "academic_year": student.academic_year,
        "admission_date": student.admission_date.isoformat() if student.admission_date else None,
        "created_at": student.created_at.isoformat() if student.created_at else None,
        "updated_at": student.updated_at.isoformat() if student.updated_at else None,
    }


@router.get("/", response_model=dict)
async def get_students(
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    class_id: Optional[int] = Query(None),
    student_status: Optional[StudentStatus] = Query(None, alias="status"),
    search: Optional[str] = Query(None, min_length=1),
    db: AsyncSession = Depends(get_db)
):
    """Get paginated students with filtering"""
    service = StudentService(db)
    result = await service.get_students_paginated(
        page=pagination.page,
        size=pagination.size,
        class_id=class_id,
        status=student_status.value if student_status else None,
        search=search
    )
    return Paginator.from_result(result, format_student)


@router.post("/", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_student(
    student_data: StudentCreate,
    db: AsyncSession = Depends(get_db)
):
    service = StudentService(db)
    student = await service.create(student_data.model_dump())
    return {
        **format_student(student),
        "message": "Student created successfully"
    }


@router.get("/by-class/{class_id}", response_model=dict)
async def get_students_by_class(
    class_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Active students of a class"""
    service = StudentService(db)
    students = await service.get_by_class(class_id)
    return {
        "class_id": class_id,
        "students": [format_student(student) for student in students],
        "total": len(students)
    }


@router.post("/promote", response_model=dict)
async def promote_students(
    request: PromotionRequest,
    db: AsyncSession = Depends(get_db)
):
    service = StudentService(db)
    result = await service.promote(request)
    return {
        **result,
        "message": f"{result['processed']} student(s) processed successfully"
    }


@router.get("/{student_id}", response_model=dict)
async def get_student(
    student_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = StudentService(db)
    student = await service.get_or_404(student_id)
    promotions = await service.get_promotion_history(student_id)
    return {
        **format_student(student),
        "promotions": [
            {
                "from_class_id": p.from_class_id,
                "to_class_id": p.to_class_id,
                "from_academic_year": p.from_academic_year,
                "to_academic_year": p.to_academic_year,
                "promotion_status": p.promotion_status,
                "promotion_date": p.promotion_date.isoformat(),
            }
            for p in promotions
        ]
    }


@router.put("/{student_id}", response_model=dict)
async def update_student(
    student_id: int,
    student_data: StudentUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = StudentService(db)
    student = await service.update(student_id, student_data.model_dump(exclude_unset=True))
    if not student:
        raise NotFoundError("Student", student_id)
    return {
        **format_student(student),
        "message": "Student updated successfully"
    }


@router.delete("/{student_id}", response_model=dict)
async def delete_student(
    student_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = StudentService(db)
    if not await service.soft_delete(student_id):
        raise NotFoundError("Student", student_id)
    return {"message": "Student deleted successfully"}
