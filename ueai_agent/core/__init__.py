"""
Core utilities and configuration for ueai-agent.

This package provides shared functionality: settings, logging configuration
and optional Logfire monitoring.
"""

from ueai_agent.core.logging_config import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
