"""Fake git operations for testing.

FakeGit is an in-memory implementation that accepts pre-configured state
in its constructor. Construct instances directly with keyword arguments.
"""

from pathlib import Path

from prtrain.core.git.abc import CommitMessage, Git, GitCommandError


class FakeGit(Git):
    """In-memory fake implementation of git operations.

    State Management:
    -----------------
    This class has NO public setup methods. All state is provided via constructor
    using keyword arguments with sensible defaults.

    Merges and rebases record the source as contained in the target, so a
    second synchronization of the same train finds nothing to do.

    Mutation Tracking:
    -----------------
    checkouts, merges, rebases, pushes and created_branches expose what was
    done, in order, for assertions.
    """

    def __init__(
        self,
        *,
        repository_root: Path | None = None,
        current_branch: str | None = None,
        local_branches: list[str] | None = None,
        contained: set[tuple[str, str]] | None = None,
        merged_branches: dict[str, list[str]] | None = None,
        integration_failures: dict[str, list[GitCommandError]] | None = None,
        push_error: RuntimeError | None = None,
        remote_urls: dict[str, str] | None = None,
        commit_messages: dict[str, CommitMessage] | None = None,
    ) -> None:
        """Create FakeGit with pre-configured state.

        Args:
            repository_root: Root returned for any cwd (None means "not a repo")
            current_branch: Branch checked out at the start
            local_branches: Existing local branches
            contained: (ancestor, descendant) pairs for which is_ancestor is True
            merged_branches: Mapping of base branch -> branches merged into it
            integration_failures: Mapping of target branch -> errors raised by
                successive merge/rebase attempts on it, consumed in order
            push_error: Error raised by push
            remote_urls: Mapping of remote name -> URL
            commit_messages: Mapping of branch -> latest commit message
        """
        self._repository_root = repository_root
        self._current_branch = current_branch
        self._local_branches = list(local_branches or [])
        self._contained = set(contained or set())
        self._merged_branches = merged_branches or {}
        self._integration_failures = {
            target: list(errors) for target, errors in (integration_failures or {}).items()
        }
        self._push_error = push_error
        self._remote_urls = remote_urls or {}
        self._commit_messages = commit_messages or {}

        self._checkouts: list[str] = []
        self._merges: list[tuple[str, str]] = []
        self._rebases: list[tuple[str, str]] = []
        self._pushes: list[tuple[str, list[str], bool]] = []
        self._created_branches: list[tuple[str, str]] = []

    @property
    def current_branch(self) -> str | None:
        return self._current_branch

    @property
    def checkouts(self) -> list[str]:
        return self._checkouts

    @property
    def merges(self) -> list[tuple[str, str]]:
        """(source, target) pairs merged, in order."""
        return self._merges

    @property
    def rebases(self) -> list[tuple[str, str]]:
        """(onto, branch) pairs rebased, in order."""
        return self._rebases

    @property
    def pushes(self) -> list[tuple[str, list[str], bool]]:
        """(remote, branches, force) for every push call."""
        return self._pushes

    @property
    def created_branches(self) -> list[tuple[str, str]]:
        """(branch, start_point) for every created branch."""
        return self._created_branches

    def get_repository_root(self, cwd: Path) -> Path | None:
        return self._repository_root

    def get_current_branch(self, cwd: Path) -> str | None:
        return self._current_branch

    def list_local_branches(self, cwd: Path) -> list[str]:
        return list(self._local_branches)

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        self._checkouts.append(branch)
        self._current_branch = branch

    def create_branch(self, cwd: Path, branch_name: str, start_point: str) -> None:
        self._created_branches.append((branch_name, start_point))
        self._local_branches.append(branch_name)
        self._contained.add((start_point, branch_name))

    def merge(self, cwd: Path, ref: str) -> None:
        target = self._require_current_branch()
        self._raise_scripted_failure(target)
        self._merges.append((ref, target))
        self._contained.add((ref, target))

    def rebase(self, cwd: Path, ref: str) -> None:
        target = self._require_current_branch()
        self._raise_scripted_failure(target)
        self._rebases.append((ref, target))
        self._contained.add((ref, target))

    def is_ancestor(self, cwd: Path, ancestor: str, descendant: str) -> bool:
        return (ancestor, descendant) in self._contained

    def list_merged_branches(self, cwd: Path, base: str) -> list[str]:
        return list(self._merged_branches.get(base, []))

    def push(self, cwd: Path, remote: str, branches: list[str], *, force: bool) -> None:
        if self._push_error is not None:
            raise self._push_error
        self._pushes.append((remote, list(branches), force))

    def get_remote_url(self, cwd: Path, remote: str) -> str | None:
        return self._remote_urls.get(remote)

    def get_last_commit_message(self, cwd: Path, branch: str) -> CommitMessage:
        return self._commit_messages.get(branch, CommitMessage(subject=branch, body=""))

    def _require_current_branch(self) -> str:
        if self._current_branch is None:
            raise GitCommandError("HEAD is detached")
        return self._current_branch

    def _raise_scripted_failure(self, target: str) -> None:
        errors = self._integration_failures.get(target)
        if errors:
            raise errors.pop(0)
