"""Production Git implementation using subprocess.

This module provides the real Git implementation that executes actual git
commands via subprocess.
"""

import subprocess
from pathlib import Path

from prtrain.core.git.abc import CommitMessage, Git, GitCommandError
from prtrain.core.subprocess import run_subprocess_with_context


class RealGit(Git):
    """Production implementation using subprocess.

    All git operations execute actual git commands via subprocess.
    """

    def get_repository_root(self, cwd: Path) -> Path | None:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        return Path(result.stdout.strip())

    def get_current_branch(self, cwd: Path) -> str | None:
        result = subprocess.run(
            ["git", "rev-parse", "--abbrev-ref", "HEAD"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None

        branch = result.stdout.strip()
        if branch == "HEAD":
            return None

        return branch

    def list_local_branches(self, cwd: Path) -> list[str]:
        result = run_subprocess_with_context(
            ["git", "branch", "--format=%(refname:short)"],
            operation_context="list local branches",
            cwd=cwd,
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def checkout_branch(self, cwd: Path, branch: str) -> None:
        run_subprocess_with_context(
            ["git", "checkout", branch],
            operation_context=f"checkout branch '{branch}'",
            cwd=cwd,
        )

    def create_branch(self, cwd: Path, branch_name: str, start_point: str) -> None:
        run_subprocess_with_context(
            ["git", "branch", branch_name, start_point],
            operation_context=f"create branch '{branch_name}' from '{start_point}'",
            cwd=cwd,
        )

    def merge(self, cwd: Path, ref: str) -> None:
        self._run_integration(cwd, ["git", "merge", "--no-edit", ref], f"merge '{ref}'")

    def rebase(self, cwd: Path, ref: str) -> None:
        self._run_integration(cwd, ["git", "rebase", ref], f"rebase onto '{ref}'")

    def _run_integration(self, cwd: Path, cmd: list[str], description: str) -> None:
        # Merge and rebase failures are classified by the unmerged paths they leave behind
        result = subprocess.run(cmd, cwd=cwd, capture_output=True, text=True, check=False)
        if result.returncode == 0:
            return

        message = f"Failed to {description}"
        output = (result.stderr or result.stdout).strip()
        if output:
            message += f"\n{output}"
        raise GitCommandError(message, conflicts=tuple(self._get_conflicted_paths(cwd)))

    def _get_conflicted_paths(self, cwd: Path) -> list[str]:
        result = subprocess.run(
            ["git", "diff", "--name-only", "--diff-filter=U"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return []
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def is_ancestor(self, cwd: Path, ancestor: str, descendant: str) -> bool:
        result = subprocess.run(
            ["git", "merge-base", "--is-ancestor", ancestor, descendant],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        # Exit code 0 means ancestor, 1 means not; anything else is a real error
        if result.returncode in (0, 1):
            return result.returncode == 0
        raise RuntimeError(
            f"Failed to check whether '{ancestor}' is an ancestor of '{descendant}'\n"
            f"{result.stderr.strip()}"
        )

    def list_merged_branches(self, cwd: Path, base: str) -> list[str]:
        result = run_subprocess_with_context(
            ["git", "branch", "--merged", base, "--format=%(refname:short)"],
            operation_context=f"list branches merged into '{base}'",
            cwd=cwd,
        )
        return [line.strip() for line in result.stdout.splitlines() if line.strip()]

    def push(self, cwd: Path, remote: str, branches: list[str], *, force: bool) -> None:
        cmd = ["git", "push"]
        if force:
            cmd.append("--force")
        cmd.append(remote)
        cmd.extend(branches)
        run_subprocess_with_context(
            cmd,
            operation_context=f"push {len(branches)} branch(es) to '{remote}'",
            cwd=cwd,
        )

    def get_remote_url(self, cwd: Path, remote: str) -> str | None:
        result = subprocess.run(
            ["git", "config", "--get", f"remote.{remote}.url"],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
        if result.returncode != 0:
            return None
        url = result.stdout.strip()
        return url or None

    def get_last_commit_message(self, cwd: Path, branch: str) -> CommitMessage:
        subject = run_subprocess_with_context(
            ["git", "log", "--format=%s", "-n", "1", branch],
            operation_context=f"read last commit subject of '{branch}'",
            cwd=cwd,
        )
        body = run_subprocess_with_context(
            ["git", "log", "--format=%b", "-n", "1", branch],
            operation_context=f"read last commit body of '{branch}'",
            cwd=cwd,
        )
        return CommitMessage(subject=subject.stdout.strip(), body=body.stdout.strip())
