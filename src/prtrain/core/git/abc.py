"""High-level git operations interface.

This module provides a clean abstraction over git subprocess calls, making the
train logic testable without a real repository.

Architecture:
- Git: Abstract base class defining the interface
- RealGit: Production implementation using subprocess
- FakeGit (tests/fakes/git.py): In-memory implementation for tests
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path


class GitCommandError(RuntimeError):
    """A merge or rebase that git refused to complete.

    conflicts lists the paths left unmerged in the working tree. An empty
    tuple means git failed for an operational reason (index lock, dirty tree)
    rather than a content conflict.
    """

    def __init__(self, message: str, conflicts: tuple[str, ...] = ()) -> None:
        super().__init__(message)
        self.conflicts = conflicts


@dataclass(frozen=True)
class CommitMessage:
    """Subject and body of a single commit."""

    subject: str
    body: str


class Git(ABC):
    """Abstract interface for git operations.

    All implementations (real and fake) must implement this interface.
    This interface contains ONLY runtime operations - no test setup methods.
    """

    @abstractmethod
    def get_repository_root(self, cwd: Path) -> Path | None:
        """Get the top-level directory of the repository containing cwd.

        Returns:
            Repository root, or None if cwd is not inside a git repository
        """
        ...

    @abstractmethod
    def get_current_branch(self, cwd: Path) -> str | None:
        """Get the currently checked-out branch (None when HEAD is detached)."""
        ...

    @abstractmethod
    def list_local_branches(self, cwd: Path) -> list[str]:
        """List all local branch names in the repository."""
        ...

    @abstractmethod
    def checkout_branch(self, cwd: Path, branch: str) -> None:
        """Checkout a branch in the given directory."""
        ...

    @abstractmethod
    def create_branch(self, cwd: Path, branch_name: str, start_point: str) -> None:
        """Create a new branch without checking it out.

        Args:
            cwd: Working directory to run command in
            branch_name: Name of the branch to create
            start_point: Commit/branch to base the new branch on
        """
        ...

    @abstractmethod
    def merge(self, cwd: Path, ref: str) -> None:
        """Merge ref into the checked-out branch.

        Raises:
            GitCommandError: If the merge fails; conflicts lists unmerged paths
        """
        ...

    @abstractmethod
    def rebase(self, cwd: Path, ref: str) -> None:
        """Rebase the checked-out branch onto ref.

        Raises:
            GitCommandError: If the rebase fails; conflicts lists unmerged paths
        """
        ...

    @abstractmethod
    def is_ancestor(self, cwd: Path, ancestor: str, descendant: str) -> bool:
        """Check whether ancestor is reachable from descendant."""
        ...

    @abstractmethod
    def list_merged_branches(self, cwd: Path, base: str) -> list[str]:
        """List local branches whose tips are already merged into base."""
        ...

    @abstractmethod
    def push(self, cwd: Path, remote: str, branches: list[str], *, force: bool) -> None:
        """Push branches to remote in a single git push invocation.

        Args:
            cwd: Working directory to run command in
            remote: Remote name (e.g., "origin")
            branches: Branch names to push
            force: Pass --force to git push
        """
        ...

    @abstractmethod
    def get_remote_url(self, cwd: Path, remote: str) -> str | None:
        """Get the configured URL of a remote, or None if not configured."""
        ...

    @abstractmethod
    def get_last_commit_message(self, cwd: Path, branch: str) -> CommitMessage:
        """Get subject and body of the most recent commit on branch."""
        ...
