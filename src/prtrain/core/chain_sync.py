"""Propagate changes through a train, one adjacent pair at a time.

For every pair (branches[i], branches[i + 1]) the later branch is checked out
and the earlier one is merged into it (or it is rebased onto the earlier
one). Pairs are processed strictly left to right; each step depends on the
checkout left by the previous one.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from prtrain.core.context import PrTrainContext
from prtrain.core.errors import ChainSyncError, ConflictError
from prtrain.core.git.abc import GitCommandError

logger = logging.getLogger(__name__)

# Pause after each successful step so the next checkout does not race git's index lock
MERGE_STEP_DELAY_SECONDS = 0.5
# Pause before retrying a step that failed without conflicts
MERGE_STEP_DELAY_WAIT_FOR_LOCK_SECONDS = 1.5

StepAction = Literal["merged", "rebased", "skipped"]


@dataclass(frozen=True)
class ChainStep:
    """Outcome of synchronizing one adjacent pair."""

    source: str
    target: str
    action: StepAction


def synchronize_chain(
    ctx: PrTrainContext,
    repo_root: Path,
    branches: list[str],
    *,
    rebase: bool,
    return_to: str,
) -> list[ChainStep]:
    """Merge (or rebase) every branch of the train into its successor.

    A pair whose target already contains its source is skipped, so running
    this twice without new commits performs no merges or rebases.

    On success the checkout is returned to return_to. A failing step raises
    and leaves the working tree on the branch that failed.

    Raises:
        ConflictError: If a step stops on content conflicts
        ChainSyncError: If a step fails twice without conflicts
    """
    steps: list[ChainStep] = []
    checked_out = False

    for source, target in zip(branches, branches[1:]):
        if ctx.git.is_ancestor(repo_root, source, target):
            logger.debug("%s already contains %s, skipping", target, source)
            steps.append(ChainStep(source=source, target=target, action="skipped"))
            continue

        checked_out = True
        _combine_branches(ctx, repo_root, source, target, rebase=rebase)
        steps.append(
            ChainStep(source=source, target=target, action="rebased" if rebase else "merged")
        )
        ctx.time.sleep(MERGE_STEP_DELAY_SECONDS)

    if checked_out:
        ctx.git.checkout_branch(repo_root, return_to)

    return steps


def _combine_branches(
    ctx: PrTrainContext, repo_root: Path, source: str, target: str, *, rebase: bool
) -> None:
    if rebase:
        description = f"rebasing {target} onto branch {source}"
    else:
        description = f"merging {source} into branch {target}"

    try:
        _integrate(ctx, repo_root, source, target, rebase=rebase)
    except GitCommandError as e:
        if e.conflicts:
            raise _conflict_error(description, e) from e

        # No conflicts: most likely a transient lock. Wait and try exactly once more.
        logger.debug("%s failed without conflicts, retrying: %s", description, e)
        ctx.time.sleep(MERGE_STEP_DELAY_WAIT_FOR_LOCK_SECONDS)
        try:
            _integrate(ctx, repo_root, source, target, rebase=rebase)
        except GitCommandError as retry_error:
            if retry_error.conflicts:
                raise _conflict_error(description, retry_error) from retry_error
            raise ChainSyncError(f"Failed {description}:\n{retry_error}") from retry_error

    ctx.feedback.info(f"{description}... ✓")


def _integrate(
    ctx: PrTrainContext, repo_root: Path, source: str, target: str, *, rebase: bool
) -> None:
    ctx.git.checkout_branch(repo_root, target)
    if rebase:
        ctx.git.rebase(repo_root, source)
    else:
        ctx.git.merge(repo_root, source)


def _conflict_error(description: str, error: GitCommandError) -> ConflictError:
    files = "\n".join(f"  {path}" for path in error.conflicts)
    return ConflictError(f"Conflict while {description}:\n{files}", error.conflicts)
