"""
Logging Configuration Module.

This module provides centralized logging configuration for the ueai-agent
package. Library code only obtains loggers through ``get_logger``; the hosting
application decides when to call ``setup_logging``.

Features:
- Configurable log levels per module
- Console and optional file logging
- Simple, detailed, and JSON line formats
"""

import logging
from pathlib import Path
from typing import Optional, Union

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FORMAT = "detailed"
LOG_FILE_NAME = "ueai_agent.log"


# Line formats selectable through UEAI_AGENT_LOG_FORMAT
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"

JSON_FORMAT = (
    '{"timestamp": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", '
    '"module": "%(filename)s", "function": "%(funcName)s", "line": %(lineno)d, '
    '"message": "%(message)s"}'
)


# Per-logger levels applied by setup_logging
MODULE_LOG_LEVELS = {
    # ueai_agent packages
    "ueai_agent.agent_core": "DEBUG",
    "ueai_agent.agent_core.policy": "DEBUG",
    "ueai_agent.agent_core.session": "DEBUG",
    "ueai_agent.agent_core.decision": "INFO",
    "ueai_agent.agent_core.service": "DEBUG",
    "ueai_agent.core": "INFO",
    # Third-party libraries
    "logfire": "WARNING",
    "opentelemetry": "WARNING",
    "urllib3": "WARNING",
}


def format_for(log_format: str) -> str:
    """Map a format name (simple, detailed, json) to its format string."""
    if log_format == "json":
        return JSON_FORMAT
    if log_format == "simple":
        return SIMPLE_FORMAT
    return DETAILED_FORMAT


def _attach(
    root: logging.Logger, handler: logging.Handler, level: Union[str, int], formatter: logging.Formatter
) -> None:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    root.addHandler(handler)


def setup_logging(
    log_level: Optional[str] = None,
    log_format: Optional[str] = None,
    enable_file: bool = False,
    log_file_dir: str = "logs",
) -> None:
    """
    Install console (and optionally file) handlers on the root logger.

    Calling it again replaces the handlers it installed before. Levels from
    ``MODULE_LOG_LEVELS`` are applied on every call.

    Args:
        log_level: Console level name; defaults to ``DEFAULT_LOG_LEVEL``
        log_format: One of simple, detailed, json; defaults to ``DEFAULT_LOG_FORMAT``
        enable_file: Also write every record to ``<log_file_dir>/ueai_agent.log``
        log_file_dir: Created on demand when file logging is on
    """
    level = (log_level or DEFAULT_LOG_LEVEL).upper()
    fmt = log_format or DEFAULT_LOG_FORMAT
    formatter = logging.Formatter(format_for(fmt), datefmt="%Y-%m-%d %H:%M:%S")

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for existing in list(root.handlers):
        root.removeHandler(existing)

    _attach(root, logging.StreamHandler(), level, formatter)
    if enable_file:
        log_dir = Path(log_file_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        # the file always receives DEBUG, the console level only filters the terminal
        _attach(root, logging.FileHandler(log_dir / LOG_FILE_NAME), logging.DEBUG, formatter)

    for name, module_level in MODULE_LOG_LEVELS.items():
        logging.getLogger(name).setLevel(module_level)

    root.info(f"Logging configured: level={level}, format={fmt}, file_logging={enable_file}")


def get_logger(name: str) -> logging.Logger:
    """Return the named logger; modules pass ``__name__``."""
    return logging.getLogger(name)
