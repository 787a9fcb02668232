"""Error taxonomy for pr-train.

Every error a user can act on derives from PrTrainError and carries the exit
code the CLI terminates with plus an optional remediation hint.
"""


class PrTrainError(Exception):
    """Base class for errors reported to the user without a stack trace."""

    exit_code: int = 1

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class NotARepositoryError(PrTrainError):
    """The working directory is not inside a git repository."""


class ConfigurationError(PrTrainError):
    """The train config is missing, malformed, or does not cover the current branch."""


class BranchNotFoundError(PrTrainError):
    """A branch-switch token did not resolve to a branch of the train."""

    exit_code = 3


class RemoteConfigurationError(PrTrainError):
    """Remote URL or GitHub credential key missing or unusable."""

    exit_code = 4


class MissingInputError(PrTrainError):
    """Required interactive input was not provided."""

    exit_code = 5


class ConflictError(PrTrainError):
    """A merge or rebase stopped on content conflicts."""

    def __init__(self, message: str, conflicts: tuple[str, ...]) -> None:
        super().__init__(
            message,
            hint="Resolve the conflicts, commit, and run pr-train again.",
        )
        self.conflicts = conflicts


class ChainSyncError(PrTrainError):
    """A merge or rebase failed again after the lock-wait retry."""


class HostApiError(PrTrainError):
    """GitHub rejected a pull request create or update call."""


class BaseBranchMissingError(HostApiError):
    """GitHub rejected a pull request because its base branch is not on the remote."""


class UserDeclined(Exception):
    """The user answered no to a confirmation prompt. Not a failure."""
