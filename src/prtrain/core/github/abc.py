"""Abstract base class for GitHub operations."""

from abc import ABC, abstractmethod

from prtrain.core.github.types import GitHubRepo, PullRequest, PullRequestPayload


class GitHub(ABC):
    """Abstract interface for GitHub pull request operations.

    All implementations (real and fake) must implement this interface.
    """

    @abstractmethod
    def find_pull_request(self, repo: GitHubRepo, head_branch: str) -> PullRequest | None:
        """Find the open pull request whose head is head_branch.

        Args:
            repo: Repository to search
            head_branch: Branch name in repo (without owner prefix)

        Returns:
            The first matching pull request, or None if there is none
        """
        ...

    @abstractmethod
    def create_pull_request(self, repo: GitHubRepo, payload: PullRequestPayload) -> PullRequest:
        """Create a pull request.

        Raises:
            GitHubApiError: If GitHub rejects the request
        """
        ...

    @abstractmethod
    def update_pull_request(
        self, repo: GitHubRepo, number: int, *, title: str, body: str
    ) -> PullRequest:
        """Replace title and body of an existing pull request.

        Raises:
            GitHubApiError: If GitHub rejects the request
        """
        ...
