from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import time

from .core.config import settings
from .core.database import close_db_connections, create_tables
from .core.cache import cache_manager
from .core.error_handlers import add_error_handlers
from .core.logging import setup_logging

# Import all routers
from .routers import (
    health, students, teachers, departments, parents, classes, subjects,
    results, fees, payments, attendance, notifications
)

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting Academy API ({settings.environment})")

    if settings.auto_create_tables:
        await create_tables()

    # Initialize cache
    await cache_manager.initialize()
    logger.info("Cache initialized" if settings.cache_enabled else "Cache disabled")

    yield

    logger.info("Shutting down Academy API")
    await cache_manager.close()
    await close_db_connections()
    logger.info("Shutdown complete")

app = FastAPI(
    title="Academy API - School Management",
    description="Students, staff, results, fees and messaging for a single school",
    version=settings.app_version,
    lifespan=lifespan
)

@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)
    logger.info(f"{request.method} {request.url.path} - {response.status_code} - {process_time:.3f}s")
    return response

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600,
)

add_error_handlers(app)

# Include all routers
app.include_router(health.router)
app.include_router(students.router)
app.include_router(teachers.router)
app.include_router(departments.router)
app.include_router(parents.router)
app.include_router(classes.router)
app.include_router(subjects.router)
app.include_router(results.router)
app.include_router(fees.router)
app.include_router(payments.router)
app.include_router(attendance.router)
app.include_router(notifications.router)

@app.get("/")
async def root():
    return {
        "message": "Academy API",
        "version": settings.app_version,
        "docs": "/docs",
        "status": "active"
    }

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
