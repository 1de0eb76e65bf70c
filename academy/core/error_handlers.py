from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import logging

from .exceptions import ValidationError
from ..services.grading import ScoreOutOfRange

logger = logging.getLogger(__name__)

async def score_out_of_range_handler(request: Request, exc: ScoreOutOfRange):
    """Reject scores above their maximum or below zero"""
    logger.warning(f"Score rejected: {exc} - Path: {request.url.path}")
    error = ValidationError(str(exc), field=exc.field)
    return JSONResponse(status_code=error.status_code, content={"detail": error.detail})

async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.error(f"Unexpected error: {str(exc)} - Path: {request.url.path}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "type": "InternalError"}
    )

def add_error_handlers(app: FastAPI):
    app.add_exception_handler(ScoreOutOfRange, score_out_of_range_handler)
    app.add_exception_handler(Exception, general_exception_handler)
