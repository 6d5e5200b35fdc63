"""
Store Event Logger

Every write to the store is logged locally as a structured event.
This provides:
1. Traceability of what changed and when
2. Debugging capability when a saved state looks wrong

The event logger is just another store observer. It is called
synchronously, so a log line always precedes the matching save.
"""

import logging
from collections.abc import Callable
from typing import Optional

import structlog

from petspend.models.events import StoreEvent


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """
    Configure structlog on top of the standard library logger.

    Safe to call more than once; the last call wins. Existing
    root handlers are kept.
    """
    logging.basicConfig(format="%(message)s")
    logging.getLogger().setLevel(level.upper())

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


configure_logging()


class StoreEventLogger:
    """
    Logs store events.

    Usage:
        event_logger = StoreEventLogger()
        unsubscribe = event_logger.attach(store)
    """

    def __init__(self, logger: Optional[structlog.stdlib.BoundLogger] = None):
        self._logger = logger or structlog.get_logger("petspend.events")
        self.events_logged = 0

    def __call__(self, event: StoreEvent) -> None:
        self._logger.info("store_event", **event.to_log_dict())
        self.events_logged += 1

    def attach(self, store) -> Callable[[], None]:
        """Subscribe to a PetStore; returns the unsubscribe callable."""
        return store.subscribe(self)
