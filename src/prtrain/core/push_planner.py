"""Decide which train branches to push and push them in one batch."""

from dataclasses import dataclass
from pathlib import Path

from prtrain.core.context import PrTrainContext
from prtrain.core.options import RunOptions


@dataclass(frozen=True)
class PushPlan:
    """Branches selected for pushing, in train order, and those left out."""

    to_push: list[str]
    excluded: list[str]


def select_branches_to_push(
    ctx: PrTrainContext,
    repo_root: Path,
    branches: list[str],
    base_branch: str,
    *,
    push_merged: bool,
) -> PushPlan:
    """Select branches to push, dropping ones already merged into base_branch.

    With push_merged every branch is selected.
    """
    if push_merged:
        return PushPlan(to_push=list(branches), excluded=[])

    merged = set(ctx.git.list_merged_branches(repo_root, base_branch))
    return PushPlan(
        to_push=[b for b in branches if b not in merged],
        excluded=[b for b in branches if b in merged],
    )


def push_train(
    ctx: PrTrainContext, repo_root: Path, branches: list[str], options: RunOptions
) -> PushPlan:
    """Push the train's unmerged branches (all of them with --push-merged).

    A failing push propagates; it is not retried.
    """
    plan = select_branches_to_push(
        ctx,
        repo_root,
        branches,
        options.base_branch,
        push_merged=options.push_merged,
    )
    if plan.excluded:
        ctx.feedback.info(f"Not pushing already merged branches: {', '.join(plan.excluded)}")

    if not plan.to_push:
        ctx.feedback.info("Nothing to push.")
        return plan

    ctx.feedback.info(f"Pushing changes to remote {options.remote}...")
    ctx.git.push(repo_root, options.remote, plan.to_push, force=options.force)
    ctx.feedback.success("All changes pushed ✓")
    return plan
