# academy/routers/parents.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models.parent import Parent
from ..schemas.staff_schemas import ParentCreate, ParentLinkRequest, ParentUpdate
from ..services.parent_service import ParentService
from ..utils.pagination import Paginator, PaginationParams
from .students import format_student

router = APIRouter(prefix="/api/v1/parents", tags=["Parents"])


def format_parent(parent: Parent) -> dict:
    return {
        "id": parent.id,
        "first_name": parent.first_name,
        "last_name": parent.last_name,
        "email": parent.email,
        "phone": parent.phone,
        "alternate_phone": parent.alternate_phone,
        "address": parent.address,
        "occupation": parent.occupation,
        "status": parent.status,
    }


@router.get("/", response_model=dict)
async def get_parents(
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    db: AsyncSession = Depends(get_db)
):
    service = ParentService(db)
    result = await service.get_paginated(page=pagination.page, size=pagination.size, order_by="last_name")
    return Paginator.from_result(result, format_parent)


@router.post("/", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_parent(
    parent_data: ParentCreate,
    db: AsyncSession = Depends(get_db)
):
    service = ParentService(db)
    parent = await service.create(parent_data.model_dump())
    return {**format_parent(parent), "message": "Parent created successfully"}


@router.get("/{parent_id}", response_model=dict)
async def get_parent(
    parent_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ParentService(db)
    return format_parent(await service.get_or_404(parent_id))


@router.get("/{parent_id}/children", response_model=dict)
async def get_children(
    parent_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ParentService(db)
    children = await service.get_children(parent_id)
    return {
        "parent_id": parent_id,
        "children": [
            {**format_student(child["student"]), "relationship_type": child["relationship_type"]}
            for child in children
        ],
        "total": len(children)
    }


@router.post("/{parent_id}/link", response_model=dict, status_code=status.HTTP_201_CREATED)
async def link_student(
    parent_id: int,
    request: ParentLinkRequest,
    db: AsyncSession = Depends(get_db)
):
    service = ParentService(db)
    link = await service.link_student(parent_id, request.student_id, request.relationship_type)
    return {
        "id": link.id,
        "parent_id": link.parent_id,
        "student_id": link.student_id,
        "relationship_type": link.relationship_type,
        "message": "Student linked successfully"
    }


@router.delete("/{parent_id}/link/{student_id}", response_model=dict)
async def unlink_student(
    parent_id: int,
    student_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ParentService(db)
    await service.unlink_student(parent_id, student_id)
    return {"message": "Student unlinked successfully"}


@router.put("/{parent_id}", response_model=dict)
async def update_parent(
    parent_id: int,
    parent_data: ParentUpdate,
    db: AsyncSession = Depends(get_db)
):
    service = ParentService(db)
    parent = await service.update(parent_id, parent_data.model_dump(exclude_unset=True))
    if not parent:
        raise NotFoundError("Parent", parent_id)
    return {**format_parent(parent), "message": "Parent updated successfully"}


@router.delete("/{parent_id}", response_model=dict)
async def delete_parent(
    parent_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = ParentService(db)
    if not await service.soft_delete(parent_id):
        raise NotFoundError("Parent", parent_id)
    return {"message": "Parent deleted successfully"}
