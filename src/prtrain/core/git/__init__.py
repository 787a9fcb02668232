"""Git operations subpackage.

This subpackage provides abstractions over git operations with support for
testing via fakes.
"""

from prtrain.core.git.abc import Git, GitCommandError
from prtrain.core.git.real import RealGit

__all__ = ["Git", "GitCommandError", "RealGit"]
