"""Central logging configuration using loguru."""

from __future__ import annotations

import sys
from pathlib import Path

from loguru import logger

from ideastack.config import IdeastackSettings

_LOGGER_CONFIGURED = False


def configure_logging(settings: IdeastackSettings, level: str = "INFO") -> None:
    """Route logs to stderr and a rotating file only once."""

    global _LOGGER_CONFIGURED
    if _LOGGER_CONFIGURED:
        return

    log_dir: Path = settings.paths.logs_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        sink=sys.stderr,
        level=level,
        colorize=True,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | "
        "<cyan>{extra[context]}</cyan> | {message}",
    )
    logger.add(
        log_dir / "ideastack.log",
        level="DEBUG",
        rotation="1 week",
        retention=4,
        compression="zip",
        enqueue=True,
        backtrace=True,
        diagnose=False,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | {extra[context]} | {thread.name} | {message}",
    )
    logger.configure(extra={"context": "ideastack"})

    _LOGGER_CONFIGURED = True


def get_logger(name: str | None = None):
    return logger.bind(context=name or "ideastack")
