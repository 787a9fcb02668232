"""Time operations abstraction for testing.

Chain synchronization pauses between steps; routing those pauses through
this ABC keeps tests from actually sleeping.
"""

from abc import ABC, abstractmethod


class Time(ABC):
    """Abstract time operations for dependency injection."""

    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Sleep for specified number of seconds."""
        ...
