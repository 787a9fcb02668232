"""User-facing progress output."""

from abc import ABC, abstractmethod

import click

from prtrain.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing progress output.

    Core components report through ctx.feedback instead of printing, so tests
    can assert on what a user would have seen.

    Usage:
        ctx.feedback.info("Pushing changes to remote origin...")
        ctx.feedback.success("All changes pushed ✓")
        ctx.feedback.error("Could not find branch with index 7")
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message."""


class InteractiveFeedback(UserFeedback):
    """Feedback written to stderr with click styling."""

    def info(self, message: str) -> None:
        user_output(message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))
