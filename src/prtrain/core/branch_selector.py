"""Resolve a branch-switch token and check the branch out."""

from pathlib import Path

from prtrain.core.context import PrTrainContext
from prtrain.core.errors import BranchNotFoundError
from prtrain.core.options import COMBINED_TOKEN


def resolve_target(token: str, branches: list[str], combined: str | None) -> str | None:
    """Map a token to a train branch.

    "combined" selects the combined branch; a non-negative integer selects the
    branch at that index. Anything else, or an index out of range, resolves
    to None.
    """
    if token == COMBINED_TOKEN:
        return combined
    if not (token.isascii() and token.isdigit()):
        return None
    index = int(token)
    if index >= len(branches):
        return None
    return branches[index]


def switch_to_branch(
    ctx: PrTrainContext,
    repo_root: Path,
    token: str,
    branches: list[str],
    combined: str | None,
) -> str:
    """Check out the branch selected by token.

    Raises:
        BranchNotFoundError: If token does not resolve to a branch
    """
    target = resolve_target(token, branches, combined)
    if target is None:
        raise BranchNotFoundError(f"Could not find branch with index {token}")

    ctx.git.checkout_branch(repo_root, target)
    ctx.feedback.info(f"Switched to branch {target}")
    return target
