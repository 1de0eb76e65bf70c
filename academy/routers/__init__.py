from . import (
    attendance, classes, departments, fees, health, notifications,
    parents, payments, results, students, subjects, teachers
)

__all__ = [
    "attendance",
    "classes",
    "departments",
    "fees",
    "health",
    "notifications",
    "parents",
    "payments",
    "results",
    "students",
    "subjects",
    "teachers"
]
