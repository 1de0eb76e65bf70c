# academy/core/logging.py
"""Logging configuration."""
import logging
import sys
from .config import settings

def setup_logging():
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    # Driver chatter stays at WARNING unless explicitly debugging
    if settings.log_level.upper() != "DEBUG":
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
        # Requests are already logged by the timing middleware
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
