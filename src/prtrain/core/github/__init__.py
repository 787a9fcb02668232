"""GitHub operations subpackage."""

from prtrain.core.github.abc import GitHub
from prtrain.core.github.real import RealGitHub
from prtrain.core.github.types import (
    GitHubApiError,
    GitHubRepo,
    PullRequest,
    PullRequestPayload,
)

__all__ = [
    "GitHub",
    "GitHubApiError",
    "GitHubRepo",
    "PullRequest",
    "PullRequestPayload",
    "RealGitHub",
]
