"""Mail and calendar service adapters."""

from .base import EventSink, MessageSource

__all__ = ["EventSink", "MessageSource"]
