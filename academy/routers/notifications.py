# academy/routers/notifications.py
from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.exceptions import NotFoundError
from ..models.notification import Notification, TargetAudience
from ..schemas.notification_schemas import NotificationCreate, ReadReceipt
from ..services.notification_service import NotificationService
from ..utils.pagination import Paginator, PaginationParams

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


def format_notification(notification: Notification) -> dict:
    return {
        "id": notification.id,
        "title": notification.title,
        "message": notification.message,
        "notification_type": notification.notification_type,
        "priority": notification.priority,
        "target_audience": notification.target_audience,
        "is_broadcast": notification.is_broadcast,
        "created_by": notification.created_by,
        "created_at": notification.created_at.isoformat() if notification.created_at else None,
    }


@router.get("/", response_model=dict)
async def get_notifications(
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    audience: Optional[TargetAudience] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    result = await service.get_notifications_paginated(
        page=pagination.page,
        size=pagination.size,
        audience=audience.value if audience else None
    )
    return Paginator.from_result(result, format_notification)


@router.post("/", response_model=dict, status_code=status.HTTP_201_CREATED)
async def create_notification(
    notification_data: NotificationCreate,
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    notification = await service.create(notification_data.model_dump())
    return {**format_notification(notification), "message": "Notification created successfully"}


@router.post("/broadcast", response_model=dict, status_code=status.HTTP_201_CREATED)
async def broadcast_notification(
    notification_data: NotificationCreate,
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    result = await service.broadcast(notification_data.model_dump())
    return {
        **format_notification(result["notification"]),
        "recipients": result["recipients"],
        "message": f"Notification broadcast to {result['recipients']} recipient(s)"
    }


@router.put("/mark-all-read", response_model=dict)
async def mark_all_read(
    receipt: ReadReceipt,
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    count = await service.mark_all_read(
        receipt.reader_id,
        receipt.target_audience.value if receipt.target_audience else None
    )
    return {"marked": count, "message": f"{count} notification(s) marked as read"}


@router.get("/unread-count", response_model=dict)
async def get_unread_count(
    reader_id: int = Query(...),
    audience: Optional[TargetAudience] = Query(None),
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    count = await service.unread_count(reader_id, audience.value if audience else None)
    return {"reader_id": reader_id, "unread_count": count}


@router.get("/{notification_id}", response_model=dict)
async def get_notification(
    notification_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    return format_notification(await service.get_or_404(notification_id))


@router.put("/{notification_id}/read", response_model=dict)
async def mark_notification_read(
    notification_id: int,
    receipt: ReadReceipt,
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    read = await service.mark_read(notification_id, receipt.reader_id)
    return {
        "notification_id": notification_id,
        "reader_id": read.reader_id,
        "read_at": read.read_at.isoformat() if read.read_at else None,
        "message": "Notification marked as read"
    }


@router.delete("/{notification_id}", response_model=dict)
async def delete_notification(
    notification_id: int,
    db: AsyncSession = Depends(get_db)
):
    service = NotificationService(db)
    if not await service.soft_delete(notification_id):
        raise NotFoundError("Notification", notification_id)
    return {"message": "Notification deleted successfully"}
