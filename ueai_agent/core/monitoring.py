"""
Monitoring and Tracing Configuration Module.

This module provides optional integration with Pydantic Logfire. When enabled,
session lifecycle events (creation, approvals, terminal decisions) are sent as
structured Logfire events alongside the regular standard-library logs.

Logfire is only configured on request through ``initialize_logfire``; nothing
happens at import time.
"""

import logging
from typing import Any, Optional

from .config import LogfireConfig, Settings

logger = logging.getLogger(__name__)

_logfire_active = False


def initialize_logfire(settings: Optional[Settings] = None) -> bool:
    """
    Initialize Pydantic Logfire for monitoring and tracing.

    Args:
        settings: Settings to read the Logfire group from. A fresh ``Settings``
            is loaded from the environment when omitted.

    Returns:
        True when Logfire was configured.
    """
    global _logfire_active

    config: LogfireConfig = (settings or Settings()).logfire
    if not config.enabled:
        logger.info("Logfire monitoring is disabled. Set LOGFIRE_ENABLED=true to enable.")
        return False

    if not config.token:
        logger.warning(
            "Logfire is enabled but LOGFIRE_TOKEN is not set. "
            "Monitoring will not work. Set LOGFIRE_TOKEN to enable Logfire."
        )
        return False

    try:
        import logfire

        logfire.configure(
            token=config.token,
            service_name=config.service_name,
            environment=config.environment,
        )
    except Exception as e:
        logger.error(f"Failed to initialize Logfire: {e}", exc_info=True)
        return False

    _logfire_active = True
    logger.info(
        f"Logfire monitoring initialized: service={config.service_name}, environment={config.environment}"
    )
    return True


def log_session_event(event: str, session_id: str, **attributes: Any) -> None:
    """
    Record a session lifecycle event in Logfire when monitoring is active.

    Args:
        event: Short event name, e.g. "Session created"
        session_id: The session the event belongs to
        attributes: Extra structured attributes
    """
    if not _logfire_active:
        return
    try:
        import logfire

        logfire.info(event, session_id=session_id, **attributes)
    except Exception:
        logger.debug(f"Could not log session event to Logfire: {event} session_id={session_id}")
