"""Handlers acting on extracted reservations."""

from .event_creator import EventCreator

__all__ = ["EventCreator"]
