"""Loguru sinks and structured-context helpers."""

from __future__ import annotations

import os
import sys
import time
from contextlib import contextmanager
from typing import Any, Iterator

from loguru import logger

from ..config.settings import Settings, get_settings

# run_id and step are always present in ``extra``; see configure_logging.
_LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[run_id]}</cyan> | "
    "<magenta>{extra[step]}</magenta> | "
    "{message}"
)
_VERBOSE_TEXT_ENV = "RCA_TAXONOMY_VERBOSE_TEXT_LOGS"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def configure_logging(settings: Settings | None = None, level: str = "INFO") -> None:
    """Replace all loguru sinks with stderr plus a rotating file under ``logs_dir``."""

    log_file = (settings or get_settings()).log_file
    log_file.parent.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.configure(extra={"run_id": "-", "step": "-"})
    logger.add(sys.stderr, level=level, format=_LOG_FORMAT, enqueue=True, backtrace=False, diagnose=False)
    logger.add(
        log_file,
        level=level,
        format=_LOG_FORMAT,
        enqueue=True,
        rotation="10 MB",
        retention="14 days",
    )


def verbose_text_logging_enabled() -> bool:
    """Whether label and definition text may appear in debug logs."""

    return os.getenv(_VERBOSE_TEXT_ENV, "").strip().lower() in _TRUTHY


def get_logger(**context: Any):
    return logger.bind(**context)


@contextmanager
def logging_context(**context: Any) -> Iterator[Any]:
    """Attach ``context`` to every record emitted inside the block, from any module."""

    with logger.contextualize(**context):
        yield logger


@contextmanager
def log_timing(step: str, *, logger_=logger) -> Iterator[None]:
    """Log how long the block took, in seconds, once it exits."""

    started = time.perf_counter()
    try:
        yield
    finally:
        logger_.info("Step timing", step=step, seconds=round(time.perf_counter() - started, 6))


__all__ = [
    "configure_logging",
    "get_logger",
    "logging_context",
    "log_timing",
    "verbose_text_logging_enabled",
]
