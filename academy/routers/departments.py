# academy/routers/departments.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models.department import Department
from ..schemas.staff_schemas import DepartmentCreate, DepartmentUpdate
from ..services.department_service import DepartmentService

router = APIRouter(prefix="/api/v1/departments", tags=["Departments"])


def format_department(department: Department, teacher_count: int = None) -> dict:
    data = {
        "id": department.id,
        "name": department.name,
        "code": department.code,
        "head_of_department_id": department.head_of_department_id,
        "description": department.description,
        "status": department.status,
    }
    if teacher_count is not None:
        data["teacher_count"] = teacher_count
    return data


@router.get("/", response_model=dict)
async def get_departments(db: AsyncSession = Depends(get_db)):
    """All departments with their active teacher count"""
    service = DepartmentService(db)
    rows = await service.list_with_teacher_counts()
    return {
        "items": [format_department(row["department"], row["teacher_count"]) for row in rows],
        "total": len(rows)
    }


@router.post("/", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_department(
    department_data: DepartmentCreate,
    db: AsyncSession = Depends(get_db)
):
    service = DepartmentService(db)
    department = await service.create(department_data.model_dump())
    return {**format_department(department), "message": "Department created successfully"}


@router.get("/{department_id}", response_model=dict)
async def get_department(
    department_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = DepartmentService(db)
    department = await service.get_or_404(department_id)
    return format_department(department, await service.active_teacher_count(department_id))


@router.put("/{department_id}", response_model=dict)
async def update_department(
    department_id: int,
    department_data: DepartmentUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = DepartmentService(db)
    department = await service.update(department_id, department_data.model_dump(exclude_unset=True))
    if not department:
        raise NotFoundError("Department", department_id)
    return {**format_department(department), "message": "Department updated successfully"}


@router.delete("/{department_id}", response_model=dict)
async def delete_department(
    department_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = DepartmentService(db)
    await service.delete(department_id)
    return {"message": "Department deleted successfully"}
