"""
Structured logging for the cookie session service.

Session events (insecure secret, invalid token, failed cookie removal) are
logged as JSON records carrying an ``event`` field so that operators can
alert on them from their log pipeline.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, Optional, Dict


class JSONFormatter(logging.Formatter):
    """
    Custom log formatter that outputs logs in JSON format.
    
    Each log entry contains:
    - timestamp: ISO 8601 formatted UTC timestamp
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - message: The log message
    - logger: Name of the logger that produced the entry
    
    Additional fields can be included via the 'extra_data' attribute
    on the log record.
    """
    
    def format(self, record: logging.LogRecord) -> str:
        """
        Format a log record as a JSON string.
        
        Args:
            record: The log record to format
            
        Returns:
            JSON-formatted string containing the log entry
        """
        log_data: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        
        if record.module:
            log_data["module"] = record.module
        if record.funcName and record.funcName != "<module>":
            log_data["function"] = record.funcName
        if record.lineno:
            log_data["line"] = record.lineno
        
        # Include any extra data attached to the record
        if hasattr(record, "extra_data") and record.extra_data:
            log_data.update(record.extra_data)
        
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        
        if record.stack_info:
            log_data["stack_trace"] = record.stack_info
        
        return json.dumps(log_data, default=str)


def setup_logging(settings: Optional[Any] = None) -> logging.Logger:
    """
    Configure structured JSON logging on the root logger.
    
    Args:
        settings: Application settings providing log_level
        
    Returns:
        The service logger
    """
    log_level_str = "INFO"
    if settings and hasattr(settings, "log_level"):
        log_level_str = settings.log_level
    
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)
    
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    
    # Remove existing handlers to avoid duplicate logs
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    
    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)
    stdout_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(stdout_handler)
    
    logger = logging.getLogger("telemetry")
    logger.info("Structured logging configured", extra={
        "extra_data": {"log_level": log_level_str}
    })
    return logger


def session_event(event: Any, **fields: Any) -> Dict[str, Any]:
    """
    Build the ``extra`` mapping for a session event log record.
    
    Args:
        event: An ErrorCode (or plain string) naming the event
        **fields: Additional context for the record
        
    Returns:
        A dict suitable for the ``extra`` argument of a logging call
    """
    return {"extra_data": {"event": getattr(event, "value", event), **fields}}
