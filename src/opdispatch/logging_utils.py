"""Runtime logging helpers."""

from __future__ import annotations

import inspect
import logging
import os
import sys
from logging import Handler
from typing import Literal

from loguru import logger
from rich import get_console
from rich.logging import RichHandler

LogProfile = Literal["default", "repl"]

_DEFAULT_FORMAT = "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<6} | {name}:{function}:{line} | {message}"
_CONFIGURED: tuple[LogProfile, bool] | None = None


class InterceptHandler(logging.Handler):
    """Handler that forwards stdlib logging messages to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = inspect.currentframe(), 0
        while frame:
            filename = frame.f_code.co_filename
            is_logging = filename == logging.__file__
            is_frozen = "importlib" in filename and "_bootstrap" in filename
            if depth > 0 and not (is_logging or is_frozen):
                break
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def _build_repl_handler() -> Handler:
    return RichHandler(
        console=get_console(),
        show_level=True,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )


def parse_log_filter(value: str | None = None) -> tuple[str, dict[str | None, str | int | bool]]:
    """Parse an OPDISPATCH_LOG_FILTER value.

    Format: "level" or "level,module=level,module=false"
    Examples:
        - "info" - global INFO level
        - "debug,opdispatch.core=debug" - global DEBUG, dispatch engine at DEBUG
        - "info,opdispatch.eval=false" - global INFO, evaluator silenced

    Returns:
        (global_level, module_filter_dict)
    """
    raw = value if value is not None else os.getenv("OPDISPATCH_LOG_FILTER", "warning")
    parts = [p.strip() for p in raw.lower().split(",") if p.strip()]

    filter_dict: dict[str | None, str | int | bool] = {}
    global_level = "warning"

    for part in parts:
        if "=" in part:
            module, level = (s.strip() for s in part.split("=", 1))
            filter_dict[module] = False if level == "false" else level.upper()
        else:
            global_level = part

    return global_level, filter_dict


def configure_logging(*, profile: LogProfile = "default", trace: bool = False) -> None:
    """Configure process-level logging once per profile and trace setting.

    ``trace`` lowers the global level to DEBUG so dispatch decisions are
    visible, unless the filter already names a level.
    """
    global _CONFIGURED
    if (profile, trace) == _CONFIGURED:
        return

    global_level, module_filter = parse_log_filter()
    if trace and "OPDISPATCH_LOG_FILTER" not in os.environ:
        global_level = "debug"

    # Per-module levels may be lower than the global one; the filter decides
    module_filter.setdefault("", global_level.upper())

    logger.remove()

    if profile == "repl":
        logger.add(
            _build_repl_handler(),
            level=0,
            format="{message}",
            backtrace=False,
            diagnose=False,
            filter=module_filter,
        )
    else:
        logger.add(
            sys.stderr,
            level=0,
            format=_DEFAULT_FORMAT,
            backtrace=False,
            diagnose=False,
            filter=module_filter,
        )

    root_logger = logging.getLogger()
    if not any(isinstance(h, InterceptHandler) for h in root_logger.handlers):
        root_logger.addHandler(InterceptHandler())

    _CONFIGURED = (profile, trace)
