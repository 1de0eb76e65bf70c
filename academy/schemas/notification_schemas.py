# academy/schemas/notification_schemas.py
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field

from ..models.notification import NotificationPriority, NotificationType, TargetAudience


class NotificationCreate(BaseModel):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    notification_type: NotificationType = NotificationType.INFO
    priority: NotificationPriority = NotificationPriority.MEDIUM
    target_audience: TargetAudience = TargetAudience.ALL
    created_by: Optional[int] = None


class ReadReceipt(BaseModel):
    reader_id: int
    target_audience: Optional[TargetAudience] = None
