# academy/models/__init__.py
"""Import all models here, if needed for Alembic migration."""
from .base import Base

from .department import Department
from .teacher import Teacher
from .parent import Parent, ParentStudentLink
from .class_model import ClassModel
from .student import Student, StudentPromotion
from .subject import Subject, SubjectAssignment
from .results import Score, CompiledResult, ScoreStatus, ResultStatus
from .fee_management import FeeStructure, Scholarship, ScholarshipAward, Payment, PaymentType
from .attendance import Attendance, AttendanceStatus
from .notification import (
    Notification, NotificationRead, NotificationType,
    NotificationPriority, TargetAudience
)

# This ensures all models are loaded when importing models
__all__ = [
    "Base",
    "Department",
    "Teacher",
    "Parent",
    "ParentStudentLink",
    "ClassModel",
    "Student",
    "StudentPromotion",
    "Subject",
    "SubjectAssignment",
    "Score",
    "CompiledResult",
    "ScoreStatus",
    "ResultStatus",
    "FeeStructure",
    "Scholarship",
    "ScholarshipAward",
    "Payment",
    "PaymentType",
    "Attendance",
    "AttendanceStatus",
    "Notification",
    "NotificationRead",
    "NotificationType",
    "NotificationPriority",
    "TargetAudience",
]
