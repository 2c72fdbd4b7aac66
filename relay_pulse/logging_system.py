# relay_pulse/logging_system.py
"""
Structured logging for the relay actuator.

Provides:
- Event severity and category classification
- Structured log entries (JSON and plain text)
- Console logging on stderr, kept apart from progress output on stdout
- Optional rotating JSON log files
- Thread-safe logger factory
"""

import json
import logging
import logging.handlers
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

__all__ = [
    "EventSeverity",
    "EventCategory",
    "LogEntry",
    "JSONFormatter",
    "RelayLogger",
    "configure_logging",
    "get_logger",
]

# ----------------------------------------------------------------
# Event Classification
# ----------------------------------------------------------------


class EventSeverity(Enum):
    """
    Event severity levels.

    Lower number = higher severity
    """

    CRITICAL = 1  # Relay left in unknown state
    ERROR = 3  # Transaction or connection failure
    WARNING = 4
    NOTICE = 5  # Relay commanded on/off
    INFO = 6
    DEBUG = 7  # Wire-level detail


class EventCategory(Enum):
    """Event categories."""

    PROCESS = "process"  # Actuation steps
    COMMUNICATION = "communication"  # Serial/Modbus events
    SYSTEM = "system"  # Startup, configuration


# Map Python logging levels to severity
LOGGING_TO_SEVERITY = {
    logging.CRITICAL: EventSeverity.CRITICAL,
    logging.ERROR: EventSeverity.ERROR,
    logging.WARNING: EventSeverity.WARNING,
    logging.INFO: EventSeverity.INFO,
    logging.DEBUG: EventSeverity.DEBUG,
}

SEVERITY_TO_LOGGING = {
    EventSeverity.CRITICAL: logging.CRITICAL,
    EventSeverity.ERROR: logging.ERROR,
    EventSeverity.WARNING: logging.WARNING,
    EventSeverity.NOTICE: logging.INFO,
    EventSeverity.INFO: logging.INFO,
    EventSeverity.DEBUG: logging.DEBUG,
}


# ----------------------------------------------------------------
# Structured Log Entry
# ----------------------------------------------------------------


@dataclass
class LogEntry:
    """Structured log entry."""

    wall_time: float
    severity: EventSeverity
    category: EventCategory
    message: str

    device: str = ""  # e.g. "slave-255@/dev/rs485"
    component: str = ""  # Logger name
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialisation."""
        entry_dict = {
            "wall_time": self.wall_time,
            "severity": self.severity.name,
            "category": self.category.value,
            "message": self.message,
        }

        if self.device:
            entry_dict["device"] = self.device
        if self.component:
            entry_dict["component"] = self.component
        if self.data:
            entry_dict["data"] = json.dumps(self.data)

        return entry_dict

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    def to_human_readable(self) -> str:
        severity_str = f"[{self.severity.name:8s}]"
        device_str = f"{self.device}:" if self.device else ""
        category_str = f"{self.category.value}:"

        return f"{severity_str} {device_str}{category_str} {self.message}"


# ----------------------------------------------------------------
# JSON Formatter for Python logging
# ----------------------------------------------------------------


class JSONFormatter(logging.Formatter):
    """Format log records as JSON lines."""

    def __init__(self, device: str = ""):
        super().__init__()
        self.device = device

    def format(self, record: logging.LogRecord) -> str:
        severity = LOGGING_TO_SEVERITY.get(record.levelno, EventSeverity.INFO)

        log_entry = LogEntry(
            wall_time=record.created,
            severity=severity,
            category=getattr(record, "category", EventCategory.SYSTEM),
            message=record.getMessage(),
            device=self.device,
            component=record.name,
        )

        if record.exc_info:
            log_entry.data["exception"] = self.formatException(record.exc_info)

        return log_entry.to_json()


# ----------------------------------------------------------------
# Relay Logger
# ----------------------------------------------------------------


class RelayLogger:
    """
    Wraps Python's logging with event classification.

    Console output goes to stderr; JSON file output is enabled when a
    log directory is configured.
    """

    def __init__(
        self,
        name: str,
        device: str = "",
        log_dir: Path | None = None,
        console_level: int = logging.WARNING,
        enable_console: bool = True,
    ):
        """
        Initialise relay logger.

        Args:
            name: Logger name (typically module name)
            device: Device context for every entry
            log_dir: Directory for JSON log files (None = no file logging)
            console_level: Minimum level written to stderr
            enable_console: Enable console output
        """
        self.name = name
        self.device = device
        self.log_dir = log_dir

        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        self.logger.handlers.clear()
        self._console_handler: logging.Handler | None = None
        self._json_handler: logging.Handler | None = None

        if enable_console:
            self._add_console_handler(console_level)

        if log_dir:
            self._add_json_handler()

    def _add_console_handler(self, level: int) -> None:
        handler = logging.StreamHandler()  # stderr
        handler.setLevel(level)
        handler.setFormatter(
            logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        )
        self.logger.addHandler(handler)
        self._console_handler = handler

    def _add_json_handler(self) -> None:
        """Add JSON file handler with rotation."""
        if not self.log_dir or self._json_handler:
            return

        self.log_dir.mkdir(parents=True, exist_ok=True)
        log_file = self.log_dir / "relay_pulse.json.log"

        # Rotating file handler (1MB max, 3 backups)
        handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=1024 * 1024,
            backupCount=3,
        )
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(JSONFormatter(device=self.device))
        self.logger.addHandler(handler)
        self._json_handler = handler

    def reconfigure(self, log_dir: Path | None, console_level: int) -> None:
        """Apply new global settings to an existing logger."""
        if self._console_handler:
            self._console_handler.setLevel(console_level)

        if log_dir and log_dir != self.log_dir:
            if self._json_handler:
                self.logger.removeHandler(self._json_handler)
                self._json_handler.close()
                self._json_handler = None
            self.log_dir = log_dir
            self._add_json_handler()

    # ----------------------------------------------------------------
    # Standard logging methods
    # ----------------------------------------------------------------

    def debug(self, message: str, **kwargs) -> None:
        self.logger.debug(message, **kwargs)

    def info(self, message: str, **kwargs) -> None:
        self.logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self.logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs) -> None:
        self.logger.error(message, **kwargs)

    def critical(self, message: str, **kwargs) -> None:
        self.logger.critical(message, **kwargs)

    def exception(self, message: str, **kwargs) -> None:
        self.logger.exception(message, **kwargs)

    # ----------------------------------------------------------------
    # Structured events
    # ----------------------------------------------------------------

    def log_event(
        self,
        severity: EventSeverity,
        category: EventCategory,
        message: str,
        **kwargs,
    ) -> LogEntry:
        """
        Log a classified event.

        Args:
            severity: Event severity level
            category: Event category
            message: Event message
            **kwargs: Extra LogEntry fields (device, data)

        Returns:
            LogEntry that was created
        """
        device = kwargs.pop("device", self.device)

        entry = LogEntry(
            wall_time=time.time(),
            severity=severity,
            category=category,
            message=message,
            device=device,
            component=self.name,
            **kwargs,
        )

        self.logger.log(
            SEVERITY_TO_LOGGING.get(severity, logging.INFO),
            entry.to_human_readable(),
            extra={"category": category},
        )
        return entry


# ----------------------------------------------------------------
# Global logger factory
# ----------------------------------------------------------------

_loggers: dict[str, RelayLogger] = {}
_loggers_lock = threading.Lock()
_default_log_dir: Path | None = None
_default_console_level: int = logging.WARNING


def configure_logging(
    log_dir: Path | str | None = None,
    console_level: int = logging.WARNING,
) -> None:
    """
    Configure global logging settings.

    Applies to loggers created before and after this call.

    Args:
        log_dir: Directory for JSON log files
        console_level: Minimum level written to stderr
    """
    global _default_log_dir, _default_console_level

    if log_dir:
        _default_log_dir = Path(log_dir)
        _default_log_dir.mkdir(parents=True, exist_ok=True)

    _default_console_level = console_level

    with _loggers_lock:
        for relay_logger in _loggers.values():
            relay_logger.reconfigure(_default_log_dir, _default_console_level)


def get_logger(name: str, device: str = "", **kwargs) -> RelayLogger:
    """
    Get or create a relay logger.

    Args:
        name: Logger name (typically __name__)
        device: Device context
        **kwargs: Additional RelayLogger arguments

    Returns:
        RelayLogger instance
    """
    logger_key = f"{name}:{device}"

    with _loggers_lock:
        if logger_key not in _loggers:
            if "log_dir" not in kwargs and _default_log_dir:
                kwargs["log_dir"] = _default_log_dir
            kwargs.setdefault("console_level", _default_console_level)

            _loggers[logger_key] = RelayLogger(name, device, **kwargs)

        return _loggers[logger_key]
