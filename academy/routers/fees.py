# academy/routers/fees.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models.fee_management import FEE_COMPONENTS, FeeStructure, Scholarship
from ..schemas.fee_schemas import (
    FeeStructureCreate, FeeStructureUpdate, ScholarshipAwardRequest,
    ScholarshipCreate, ScholarshipUpdate
)
from ..services.fee_service import FeeStructureService, ScholarshipService
from ..utils.pagination import Paginator, PaginationParams

router = APIRouter(prefix="/api/v1/fees", tags=["Fee Management"])


def format_structure(structure: FeeStructure) -> dict:
    return {
        "id": structure.id,
        "class_id": structure.class_id,
        "term": structure.term,
        "academic_year": structure.academic_year,
        **{name: getattr(structure, name) for name in FEE_COMPONENTS},
        "total_fee": structure.total_fee,
        "status": structure.status,
    }


def format_scholarship(scholarship: Scholarship) -> dict:
    return {
        "id": scholarship.id,
        "name": scholarship.name,
        "scholarship_type": scholarship.scholarship_type,
        "value": scholarship.value,
        "description": scholarship.description,
        "eligibility_criteria": scholarship.eligibility_criteria,
        "total_budget": scholarship.total_budget,
        "academic_year": scholarship.academic_year,
        "status": scholarship.status,
    }


# Fee structures

@router.get("/structures", response_model=dict)
async def get_fee_structures(
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    class_id: Optional[int] = Query(None),
    term: Optional[str] = Query(None),
    academic_year: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = FeeStructureService(db)
    result = await service.get_paginated(
        page=pagination.page,
        size=pagination.size,
        class_id=class_id,
        term=term,
        academic_year=academic_year
    )
    return Paginator.from_result(result, format_structure)


@router.post("/structures", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_fee_structure(
    structure_data: FeeStructureCreate,
    db: AsyncSession = Depends(get_db)
):
    service = FeeStructureService(db)
    structure = await service.create(structure_data.model_dump())
    return {**format_structure(structure), "message": "Fee structure created successfully"}


@router.get("/structures/{structure_id}", response_model=dict)
async def get_fee_structure(
    structure_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = FeeStructureService(db)
    return format_structure(await service.get_or_404(structure_id))


@router.put("/structures/{structure_id}", response_model=dict)
async def update_fee_structure(
    structure_id: int,
    structure_data: FeeStructureUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = FeeStructureService(db)
    structure = await service.update(structure_id, structure_data.model_dump(exclude_unset=True))
    if not structure:
        raise NotFoundError("Fee structure", structure_id)
    return {**format_structure(structure), "message": "Fee structure updated successfully"}


@router.delete("/structures/{structure_id}", response_model=dict)
async def delete_fee_structure(
    structure_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = FeeStructureService(db)
    if not await service.soft_delete(structure_id):
        raise NotFoundError("Fee structure", structure_id)
    return {"message": "Fee structure deleted successfully"}


# Scholarships

@router.get("/scholarships", response_model=dict)
async def get_scholarships(
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    academic_year: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = ScholarshipService(db)
    result = await service.get_paginated(
        page=pagination.page,
        size=pagination.size,
        order_by="name",
        academic_year=academic_year
    )
    return Paginator.from_result(result, format_scholarship)


@router.post("/scholarships", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_scholarship(
    scholarship_data: ScholarshipCreate,
    db: AsyncSession = Depends(get_db)
):
    service = ScholarshipService(db)
    scholarship = await service.create(scholarship_data.model_dump())
    return {**format_scholarship(scholarship), "message": "Scholarship created successfully"}


@router.get("/scholarships/{scholarship_id}", response_model=dict)
async def get_scholarship(
    scholarship_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ScholarshipService(db)
    scholarship = await service.get_or_404(scholarship_id)
    return {**format_scholarship(scholarship), "awards": await service.get_awards(scholarship_id)}


@router.put("/scholarships/{scholarship_id}", response_model=dict)
async def update_scholarship(
    scholarship_id: int,
    scholarship_data: ScholarshipUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = ScholarshipService(db)
    scholarship = await service.update(scholarship_id, scholarship_data.model_dump(exclude_unset=True))
    if not scholarship:
        raise NotFoundError("Scholarship", scholarship_id)
    return {**format_scholarship(scholarship), "message": "Scholarship updated successfully"}


@router.delete("/scholarships/{scholarship_id}", response_model=dict)
async def delete_scholarship(
    scholarship_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ScholarshipService(db)
    if not await service.soft_delete(scholarship_id):
        raise NotFoundError("Scholarship", scholarship_id)
    return {"message": "Scholarship deleted successfully"}


@router.post("/scholarships/{scholarship_id}/award", response_model=dict, status_code=status.HTTP_201_CREATED)
async def award_scholarship(
    scholarship_id: int,
    request: ScholarshipAwardRequest,
    db: AsyncSession = Depends(get_db)
):
    service = ScholarshipService(db)
    award = await service.award(scholarship_id, request.student_id, request.term, request.academic_year)
    return {
        "id": award.id,
        "scholarship_id": award.scholarship_id,
        "student_id": award.student_id,
        "term": award.term,
        "academic_year": award.academic_year,
        "message": "Scholarship awarded successfully"
    }
