# academy/services/notification_service.py
from typing import List, Optional, Dict, Any
import logging
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_
from .base_service import BaseService
from ..models.notification import Notification, NotificationRead, TargetAudience
from ..models.parent import Parent
from ..models.student import Student
from ..models.teacher import Teacher

logger = logging.getLogger(__name__)


class NotificationService(BaseService[Notification]):
    resource_name = "Notification"

    def __init__(self, db: AsyncSession):
        super().__init__(Notification, db)

    def _visible_to(self, audience: Optional[str]):
        """Notifications addressed to an audience, including those sent to All"""
        if audience is None:
            return Notification.is_deleted == False
        return (Notification.is_deleted == False) & or_(
            Notification.target_audience == TargetAudience.ALL.value,
            Notification.target_audience == audience
        )

    async def get_notifications_paginated(
        self,
        page: int = 1,
        size: int = 20,
        audience: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.get_paginated(
            page=page,
            size=size,
            order_by="created_at",
            sort="desc",
            conditions=[self._visible_to(audience)]
        )

    async def _count_active(self, model) -> int:
        stmt = select(func.count(model.id)).where(model.is_deleted == False, model.status == "Active")
        return (await self.db.execute(stmt)).scalar()

    async def count_recipients(self, audience: str) -> int:
        """Active parents, teachers or students the audience reaches"""
        targets = {
            TargetAudience.PARENT.value: [Parent],
            TargetAudience.TEACHER.value: [Teacher],
            TargetAudience.STUDENTS.value: [Student],
            TargetAudience.ALL.value: [Parent, Teacher, Student],
        }
        total = 0
        for model in targets.get(audience, []):
            total += await self._count_active(model)
        return total

    async def broadcast(self, obj_in: Dict[str, Any]) -> Dict[str, Any]:
        notification = await self.create({**obj_in, "is_broadcast": True})
        recipients = await self.count_recipients(notification.target_audience)
        logger.info(
            f"Broadcast {notification.id} '{notification.title}' sent to "
            f"{notification.target_audience} ({recipients} recipients)"
        )
        return {"notification": notification, "recipients": recipients}

    async def mark_read(self, notification_id: int, reader_id: int) -> NotificationRead:
        """Record that a reader has seen a notification; repeat calls are no-ops"""
        await self.get_or_404(notification_id)
        stmt = select(NotificationRead).where(
            NotificationRead.notification_id == notification_id,
            NotificationRead.reader_id == reader_id
        )
        receipt = (await self.db.execute(stmt)).scalar_one_or_none()
        if receipt:
            return receipt
        receipt = NotificationRead(notification_id=notification_id, reader_id=reader_id)
        self.db.add(receipt)
        await self._commit()
        await self.db.refresh(receipt)
        return receipt

    async def _unread_ids(self, reader_id: int, audience: Optional[str]) -> List[int]:
        read_ids = select(NotificationRead.notification_id).where(NotificationRead.reader_id == reader_id)
        stmt = select(Notification.id).where(
            self._visible_to(audience),
            Notification.id.not_in(read_ids)
        )
        return (await self.db.execute(stmt)).scalars().all()

    async def mark_all_read(self, reader_id: int, audience: Optional[str] = None) -> int:
        unread = await self._unread_ids(reader_id, audience)
        self.db.add_all([NotificationRead(notification_id=nid, reader_id=reader_id) for nid in unread])
        await self._commit()
        logger.info(f"Reader {reader_id} marked {len(unread)} notification(s) read")
        return len(unread)

    async def unread_count(self, reader_id: int, audience: Optional[str] = None) -> int:
        return len(await self._unread_ids(reader_id, audience))
