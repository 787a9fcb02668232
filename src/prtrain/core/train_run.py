"""Orchestration of a single pr-train invocation.

Control flow:
1. Locate the repository, config and the train of the current branch
2. Create the combined branch locally if it does not exist yet
3. Short-circuit for --new-branch or a branch-switch token
4. List the train (and stop with --list)
5. Synchronize the chain
6. With --create-prs, collect the combined PR title and confirmation
7. Push (always before creating PRs so their branches exist remotely)
8. Create/update pull requests
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from prtrain.core.branch_selector import switch_to_branch
from prtrain.core.chain_sync import ChainStep, synchronize_chain
from prtrain.core.context import PrTrainContext
from prtrain.core.errors import ConfigurationError, NotARepositoryError, UserDeclined
from prtrain.core.navigation import PullRequestRecord
from prtrain.core.options import RunOptions, RunRequest, resolve_run_options
from prtrain.core.pr_reconciler import (
    PullRequestDraft,
    describe_pull_requests,
    reconcile_pull_requests,
    require_github,
    resolve_github_repo,
)
from prtrain.core.push_planner import PushPlan, push_train
from prtrain.core.train_config import (
    Train,
    check_branch_insertion,
    combined_branch,
    config_path,
    insert_branch_after,
    load_train_config,
    ordered_branches,
    resolve_current_train,
    write_init_template,
)

# Asks the user for the combined branch PR title; None or "" means no answer
CombinedTitlePrompt = Callable[[], str | None]
# Shows the PRs about to be created/updated and returns whether to proceed
ConfirmPullRequests = Callable[[list[PullRequestDraft]], bool]


@dataclass
class RunResult:
    """What a run did, for callers that want more than the exit code."""

    train: Train
    options: RunOptions
    switched_to: str | None = None
    created_branch: str | None = None
    steps: list[ChainStep] = field(default_factory=list)
    push_plan: PushPlan | None = None
    pull_requests: list[PullRequestRecord] = field(default_factory=list)


def discover_repo_root(ctx: PrTrainContext) -> Path:
    repo_root = ctx.git.get_repository_root(ctx.cwd)
    if repo_root is None:
        raise NotARepositoryError("Not a git repo")
    return repo_root


def run_train(
    ctx: PrTrainContext,
    request: RunRequest,
    *,
    prompt_combined_title: CombinedTitlePrompt,
    confirm: ConfirmPullRequests,
) -> RunResult:
    """Execute one invocation described by request.

    Raises:
        PrTrainError: Subclasses for every user-actionable failure
        UserDeclined: If the user declines the PR confirmation
    """
    repo_root = discover_repo_root(ctx)

    if request.create_prs:
        # Fail on a missing key before anything is mutated
        require_github(ctx)

    current = ctx.git.get_current_branch(repo_root)
    if current is None:
        raise ConfigurationError("HEAD is detached; check out a train branch first.")

    path = config_path(repo_root)
    config = load_train_config(path)
    train = resolve_current_train(current, config)
    if train is None:
        raise ConfigurationError(f"Current branch {current} is not a train branch.")

    options = resolve_run_options(request, config.prs)
    result = RunResult(train=train, options=options)
    branches = ordered_branches(train)
    combined = combined_branch(train)

    if options.new_branch is not None:
        # Reject before any branch is created
        check_branch_insertion(train, current, options.new_branch)

    _ensure_combined_branch_exists(ctx, repo_root, branches, combined)

    if options.new_branch is not None:
        ctx.git.create_branch(repo_root, options.new_branch, current)
        insert_branch_after(path, train.key, current, options.new_branch)
        ctx.git.checkout_branch(repo_root, options.new_branch)
        ctx.feedback.success(
            f"Created branch {options.new_branch} after {current} in train {train.key}"
        )
        result.created_branch = options.new_branch
        return result

    if options.switch_token is not None:
        result.switched_to = switch_to_branch(
            ctx, repo_root, options.switch_token, branches, combined
        )
        return result

    ctx.feedback.info("I've found these partial branches:")
    for branch in branches:
        suffix = " (combined)" if branch == combined else ""
        ctx.feedback.info(f" -> {branch}{suffix}")
    ctx.feedback.info("")
    if options.list_only:
        return result

    result.steps = synchronize_chain(
        ctx, repo_root, branches, rebase=options.rebase, return_to=current
    )

    if not options.create_prs:
        if options.should_push:
            result.push_plan = push_train(ctx, repo_root, branches, options)
        return result

    github = require_github(ctx)
    github_repo = resolve_github_repo(ctx, repo_root, options.remote)
    combined_title = prompt_combined_title() if combined is not None else None
    drafts = describe_pull_requests(
        ctx, repo_root, branches, combined, combined_title, options.base_branch
    )
    if not confirm(drafts):
        raise UserDeclined()

    result.push_plan = push_train(ctx, repo_root, branches, options)
    result.pull_requests = reconcile_pull_requests(
        ctx, github, github_repo, drafts, combined, options
    )
    return result


def _ensure_combined_branch_exists(
    ctx: PrTrainContext, repo_root: Path, branches: list[str], combined: str | None
) -> None:
    if combined is None or len(branches) < 2:
        return
    if combined in ctx.git.list_local_branches(repo_root):
        return

    # The combined branch is last, so its predecessor already holds every other branch
    start_point = branches[-2]
    ctx.git.create_branch(repo_root, combined, start_point)
    ctx.feedback.info(f"Created combined branch {combined} from {start_point}")


def init_config(ctx: PrTrainContext) -> Path:
    """Write an example .pr-train.yml at the repository root.

    Raises:
        NotARepositoryError: If not inside a git repository
        ConfigurationError: If the config file already exists
    """
    path = config_path(discover_repo_root(ctx))
    try:
        write_init_template(path)
    except FileExistsError as e:
        raise ConfigurationError(f"{path.name} already exists") from e
    return path
