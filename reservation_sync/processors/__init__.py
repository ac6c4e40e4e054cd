"""Reservation processors."""

from .base import BaseProcessor
from .selector import MessageSelector
from .reservation import ReservationProcessor

__all__ = ["BaseProcessor", "MessageSelector", "ReservationProcessor"]
