"""
Event sinks for distribution milestones.

Components report what happened as a named event with keyword fields
instead of formatting log lines themselves, so callers can route events
to logging or capture them in tests.
"""

import logging
from typing import Any, Protocol

logger = logging.getLogger("stellar_reward_bot")


class EventSink(Protocol):
    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None: ...


class LoggingEventSink:
    """Render events as ``name key=value ...`` log records."""

    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def emit(self, event: str, level: int = logging.INFO, **fields: Any) -> None:
        if not self.log.isEnabledFor(level):
            return
        details = " ".join(f"{key}={value}" for key, value in fields.items())
        message = f"{event} {details}" if details else event
        self.log.log(level, message, extra={"event": event, "fields": fields})
