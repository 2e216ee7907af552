"""Logging setup using Loguru."""

from __future__ import annotations
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

from .config import settings

DEV_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)

PROD_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {name}:{function}:{line} | {message}"


def setup_logging(
    level: Optional[str] = None,
    log_file: Optional[Union[str, Path]] = None,
    rotation: str = "10 MB",
    retention: str = "7 days",
) -> None:
    """Replace loguru's default sink with the application sinks.

    Args:
        level: Log level. Defaults to ``LOG_LEVEL``.
        log_file: Optional file sink. Defaults to ``LOG_FILE`` when set.
        rotation: Rotation policy for the file sink.
        retention: Retention policy for rotated files.
    """
    logger.remove()

    level = (level or settings.log_level).upper()
    log_file = log_file or settings.log_file or None
    dev = settings.is_development

    logger.add(
        sys.stderr,
        level=level,
        format=DEV_FORMAT if dev else PROD_FORMAT,
        colorize=dev,
        diagnose=dev,
        catch=True,
    )

    if log_file:
        logger.add(
            Path(log_file).expanduser(),
            level=level,
            format=PROD_FORMAT,
            rotation=rotation,
            retention=retention,
            diagnose=False,
            catch=True,
        )
