"""
Logging Configuration

Centralized logging using loguru with structured output.
"""

import sys
from pathlib import Path

from loguru import logger

from config import get_settings

settings = get_settings()

# Remove default handler
logger.remove()

# Add console handler with custom format
logger.add(
    sys.stderr,
    format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{extra[component]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | <level>{message}</level>",
    level=settings.log_level,
    colorize=True,
)

# Add file handler for persistent logs
if settings.log_to_file:
    logger.add(
        str(Path(settings.log_dir) / "profiling_{time:YYYY-MM-DD}.log"),
        rotation="10 MB",
        retention="7 days",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {extra[component]}:{function}:{line} | {message}",
        level=settings.log_level,
    )

logger.configure(extra={"component": "app"})


def get_logger(name: str):
    """Get a logger with a specific name for component identification."""
    return logger.bind(component=name)


# Pre-configured loggers for different components
upload_logger = get_logger("upload")
profiling_logger = get_logger("profiling")
insights_logger = get_logger("insights")
cache_logger = get_logger("cache")
