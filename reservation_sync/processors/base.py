"""
Abstract base class for batch processors.
"""

from abc import ABC, abstractmethod


class BaseProcessor(ABC):
    """Abstract processor interface for one scheduled run."""

    @abstractmethod
    def process(self) -> dict:
        """
        Run one batch to completion.

        Returns:
            Processing statistics dict
        """
        pass
