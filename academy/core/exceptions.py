# academy/core/exceptions.py
"""Custom exceptions for the Academy application."""
from fastapi import HTTPException
from typing import Any, Dict, Optional


class AcademyException(HTTPException):
    """Base exception for Academy application."""
    def __init__(
        self,
        status_code: int,
        detail: Any,
        headers: Optional[Dict[str, Any]] = None
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)


class NotFoundError(AcademyException):
    """Resource not found."""
    def __init__(self, resource: str, id: Any = None, message: Optional[str] = None):
        if message is None:
            message = f"{resource} not found"
            if id is not None:
                message += f" with id: {id}"
        super().__init__(status_code=404, detail=message)


class BadRequestError(AcademyException):
    """Request is well-formed but cannot be processed in the current state."""
    def __init__(self, message: str = "Bad request"):
        super().__init__(status_code=400, detail=message)


class ConflictError(AcademyException):
    """Duplicate data or a business rule blocking the change."""
    def __init__(self, message: str, field: Optional[str] = None):
        detail = {"error": "Conflict", "message": message}
        if field:
            detail["field"] = field
        super().__init__(status_code=409, detail=detail)


class ValidationError(AcademyException):
    """Input passed schema validation but breaks a business rule."""
    def __init__(self, message: str, field: Optional[str] = None):
        detail = {"error": "Validation Error", "message": message}
        if field:
            detail["field"] = field
        super().__init__(status_code=422, detail=detail)


class DatabaseError(AcademyException):
    """Exception raised for database errors."""
    def __init__(self, message: str):
        super().__init__(
            status_code=500,
            detail={
                "error": "Database Error",
                "message": message
            }
        )
