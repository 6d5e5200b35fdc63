"""Structured logging of store events."""

from petspend.audit.logger import StoreEventLogger, configure_logging

__all__ = ["StoreEventLogger", "configure_logging"]
