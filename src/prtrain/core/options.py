"""Invocation request and the resolved options threaded through every component."""

from dataclasses import dataclass

from prtrain.core.train_config import PrsOptions

DEFAULT_REMOTE = "origin"
DEFAULT_BASE_BRANCH = "master"

# Token accepted by the branch selector in place of an index
COMBINED_TOKEN = "combined"


@dataclass(frozen=True)
class RunRequest:
    """What the user asked for on the command line.

    base_branch, draft and remote are None when the flag was not given; they
    are filled in from the config file by resolve_run_options.
    """

    rebase: bool = False
    push: bool = False
    push_merged: bool = False
    force: bool = False
    create_prs: bool = False
    list_only: bool = False
    draft: bool | None = None
    remote: str | None = None
    base_branch: str | None = None
    switch_token: str | None = None
    new_branch: str | None = None


@dataclass(frozen=True)
class RunOptions:
    """Immutable, fully resolved options of a single pr-train invocation.

    Built once from the request and the config file, then passed explicitly
    to the synchronizer, push planner and PR reconciler.
    """

    rebase: bool = False
    push: bool = False
    push_merged: bool = False
    force: bool = False
    create_prs: bool = False
    list_only: bool = False
    draft: bool = False
    print_urls: bool = False
    remote: str = DEFAULT_REMOTE
    base_branch: str = DEFAULT_BASE_BRANCH
    switch_token: str | None = None
    new_branch: str | None = None

    @property
    def should_push(self) -> bool:
        return self.push or self.push_merged


def resolve_run_options(request: RunRequest, prs: PrsOptions) -> RunOptions:
    """Apply precedence: command-line flag, then config file, then built-in default."""
    if request.base_branch is not None:
        base_branch = request.base_branch
    elif prs.main_branch_name is not None:
        base_branch = prs.main_branch_name
    else:
        base_branch = DEFAULT_BASE_BRANCH

    return RunOptions(
        rebase=request.rebase,
        push=request.push,
        push_merged=request.push_merged,
        force=request.force,
        create_prs=request.create_prs,
        list_only=request.list_only,
        draft=request.draft if request.draft is not None else prs.draft_by_default,
        print_urls=prs.print_urls,
        remote=request.remote if request.remote is not None else DEFAULT_REMOTE,
        base_branch=base_branch,
        switch_token=request.switch_token,
        new_branch=request.new_branch,
    )
