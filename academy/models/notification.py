# academy/models/notification.py
from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, ForeignKey, UniqueConstraint, func
from .base import Base
import enum


class NotificationType(str, enum.Enum):
    INFO = "Info"
    WARNING = "Warning"
    SUCCESS = "Success"
    ERROR = "Error"


class NotificationPriority(str, enum.Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    URGENT = "Urgent"


class TargetAudience(str, enum.Enum):
    ALL = "All"
    ADMIN = "Admin"
    TEACHER = "Teacher"
    ACCOUNTANT = "Accountant"
    PARENT = "Parent"
    STUDENTS = "Students"


class Notification(Base):
    __tablename__ = "notifications"

    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    notification_type = Column(String(20), default=NotificationType.INFO.value, nullable=False)
    priority = Column(String(20), default=NotificationPriority.MEDIUM.value, nullable=False)
    target_audience = Column(String(20), default=TargetAudience.ALL.value, nullable=False, index=True)
    is_broadcast = Column(Boolean, default=False, nullable=False)
    created_by = Column(Integer)


class NotificationRead(Base):
    __tablename__ = "notification_reads"

    notification_id = Column(Integer, ForeignKey("notifications.id"), nullable=False, index=True)
    reader_id = Column(Integer, nullable=False, index=True)
    read_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        UniqueConstraint("notification_id", "reader_id", name="uq_notification_reader"),
    )
