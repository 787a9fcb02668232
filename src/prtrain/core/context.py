"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from prtrain.core.git.abc import Git
from prtrain.core.git.real import RealGit
from prtrain.core.github.abc import GitHub
from prtrain.core.github.real import RealGitHub
from prtrain.core.time.abc import Time
from prtrain.core.time.real import RealTime
from prtrain.core.user_feedback import InteractiveFeedback, UserFeedback

GITHUB_KEY_FILE_NAME = ".pr-train"


@dataclass(frozen=True)
class PrTrainContext:
    """Immutable context holding all dependencies for pr-train operations.

    Created at CLI entry point and threaded through the application.
    Frozen to prevent accidental modification at runtime.

    Note: github is None when no GitHub key file was found. Only PR creation
    needs it, so that is where its absence is reported.
    """

    git: Git
    github: GitHub | None
    time: Time
    feedback: UserFeedback
    cwd: Path  # Current working directory at CLI invocation


def github_key_path() -> Path:
    return Path.home() / GITHUB_KEY_FILE_NAME


def read_github_key(path: Path) -> str | None:
    """Read the GitHub API token from the key file.

    Returns:
        The trimmed token, or None if the file is missing or empty
    """
    if not path.exists():
        return None
    token = path.read_text(encoding="utf-8").strip()
    return token or None


def create_context(cwd: Path | None = None) -> PrTrainContext:
    """Create production context with real implementations.

    Called at CLI entry point to create the context for the entire
    command execution.
    """
    resolved_cwd = cwd if cwd is not None else Path.cwd()

    token = read_github_key(github_key_path())
    github: GitHub | None = RealGitHub(token, resolved_cwd) if token is not None else None

    return PrTrainContext(
        git=RealGit(),
        github=github,
        time=RealTime(),
        feedback=InteractiveFeedback(),
        cwd=resolved_cwd,
    )
