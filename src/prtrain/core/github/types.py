"""Type definitions for GitHub operations."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class GitHubRepo:
    """A repository on GitHub, addressed as owner/name."""

    owner: str
    name: str

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class PullRequestPayload:
    """Fields sent when creating a pull request."""

    head: str
    base: str
    title: str
    body: str
    draft: bool


@dataclass(frozen=True)
class PullRequest:
    """Pull request as returned by the GitHub API."""

    number: int
    title: str
    body: str
    html_url: str


class GitHubApiError(RuntimeError):
    """A GitHub API call that returned an error response.

    response holds the decoded JSON error document when GitHub sent one.
    """

    def __init__(self, message: str, response: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.response: dict[str, Any] = response if response is not None else {}
        self.errors: list[dict[str, Any]] = field_errors(self.response)

    @property
    def is_invalid_base(self) -> bool:
        """True when GitHub rejected the request because the base ref does not exist."""
        return any(
            err.get("field") == "base" and err.get("code") == "invalid" for err in self.errors
        )


def field_errors(response: dict[str, Any]) -> list[dict[str, Any]]:
    errors = response.get("errors")
    if not isinstance(errors, list):
        return []
    return [err for err in errors if isinstance(err, dict)]


