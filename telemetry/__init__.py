"""
Telemetry module for structured logging.

This module provides:
- JSONFormatter for structured JSON log output
- setup_logging to install it on the root logger
- session_event to tag log records with a session event code
"""

from telemetry.service import (
    JSONFormatter,
    setup_logging,
    session_event,
)

__all__ = [
    "JSONFormatter",
    "setup_logging",
    "session_event",
]
