"""Create or update one pull request per train branch and cross-link them.

Reconciliation runs in two passes over the train, strictly in order:

1. Ensure existence: find the open PR for each branch or create it.
2. Synchronize navigation: rewrite the navigation block of every PR.

The second pass needs the PR numbers of every branch, including those created
after it in pass 1, which is why the passes cannot be merged.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from prtrain.core.context import PrTrainContext
from prtrain.core.errors import (
    BaseBranchMissingError,
    HostApiError,
    MissingInputError,
    RemoteConfigurationError,
)
from prtrain.core.github.abc import GitHub
from prtrain.core.github.parsing import parse_github_remote_url
from prtrain.core.github.types import GitHubApiError, GitHubRepo, PullRequestPayload
from prtrain.core.navigation import PullRequestRecord, render_navigation, upsert_navigation
from prtrain.core.options import RunOptions

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PullRequestDraft:
    """What a branch's PR should look like if it has to be created."""

    branch: str
    base: str
    title: str
    body: str


def require_github(ctx: PrTrainContext) -> GitHub:
    if ctx.github is None:
        raise RemoteConfigurationError(
            '"$HOME/.pr-train" not found.',
            hint="Make sure the file exists and contains your GitHub API key.",
        )
    return ctx.github


def resolve_github_repo(ctx: PrTrainContext, repo_root: Path, remote: str) -> GitHubRepo:
    """Find owner/repo of the GitHub repository behind remote.

    Raises:
        RemoteConfigurationError: If the remote has no URL or it is not a GitHub URL
    """
    remote_url = ctx.git.get_remote_url(repo_root, remote)
    if remote_url is None:
        raise RemoteConfigurationError(f"URL for remote {remote} not found in your git config.")

    repo = parse_github_remote_url(remote_url)
    if repo is None:
        raise RemoteConfigurationError(f"I could not parse your remote {remote} repo URL.")
    return repo


def pr_base_for(
    index: int, branch: str, branches: list[str], base_branch: str, combined: str | None
) -> str:
    """Base of the PR for branches[index].

    The first branch and the combined branch target base_branch; every other
    branch targets its predecessor in the train.
    """
    if index == 0 or branch == combined:
        return base_branch
    return branches[index - 1]


def describe_pull_requests(
    ctx: PrTrainContext,
    repo_root: Path,
    branches: list[str],
    combined: str | None,
    combined_title: str | None,
    base_branch: str,
) -> list[PullRequestDraft]:
    """Derive base, title and body for every branch's PR.

    Regular branches take title and body from their latest commit. The
    combined branch uses combined_title and an empty body.

    Raises:
        MissingInputError: If the train has a combined branch and no title was given
    """
    if combined is not None and not combined_title:
        raise MissingInputError(
            "Cannot continue.",
            hint="I need to know what the title of your combined branch PR should be.",
        )

    drafts: list[PullRequestDraft] = []
    for index, branch in enumerate(branches):
        if branch == combined:
            title, body = combined_title or "", ""
        else:
            message = ctx.git.get_last_commit_message(repo_root, branch)
            title, body = message.subject, message.body
        drafts.append(
            PullRequestDraft(
                branch=branch,
                base=pr_base_for(index, branch, branches, base_branch, combined),
                title=title,
                body=body,
            )
        )
    return drafts


def ensure_pull_requests(
    ctx: PrTrainContext,
    github: GitHub,
    repo: GitHubRepo,
    drafts: list[PullRequestDraft],
    *,
    draft: bool,
) -> list[PullRequestRecord]:
    """Pass 1: find or create a PR for every branch, in train order.

    Existing PRs are recorded as they are on GitHub; their title and body
    are not touched here.

    Raises:
        BaseBranchMissingError: If GitHub rejects a PR because its base is not pushed
        HostApiError: For any other GitHub failure
    """
    records: list[PullRequestRecord] = []
    for pr_draft in drafts:
        try:
            existing = github.find_pull_request(repo, pr_draft.branch)
        except GitHubApiError as e:
            raise HostApiError(str(e)) from e

        if existing is not None:
            ctx.feedback.info(f"PR for branch {pr_draft.branch} already exists: #{existing.number}")
            records.append(
                PullRequestRecord(
                    branch=pr_draft.branch,
                    title=existing.title,
                    body=existing.body,
                    number=existing.number,
                    is_preexisting=True,
                    html_url=existing.html_url,
                )
            )
            continue

        payload = PullRequestPayload(
            head=pr_draft.branch,
            base=pr_draft.base,
            title=pr_draft.title,
            body=pr_draft.body,
            draft=draft,
        )
        try:
            created = github.create_pull_request(repo, payload)
        except GitHubApiError as e:
            if e.is_invalid_base:
                raise BaseBranchMissingError(
                    f"Base branch '{pr_draft.base}' of branch '{pr_draft.branch}' "
                    "does not exist on the remote.",
                    hint="Did you forget to push it?",
                ) from e
            raise HostApiError(str(e)) from e

        ctx.feedback.success(f"Created PR #{created.number} for branch {pr_draft.branch} ✓")
        records.append(
            PullRequestRecord(
                branch=pr_draft.branch,
                title=created.title,
                body=created.body,
                number=created.number,
                is_preexisting=False,
                html_url=created.html_url,
            )
        )
    return records


def update_navigation(
    ctx: PrTrainContext,
    github: GitHub,
    repo: GitHubRepo,
    records: list[PullRequestRecord],
    combined: str | None,
) -> list[PullRequestRecord]:
    """Pass 2: splice a fresh navigation block into every PR body.

    Titles are re-sent unchanged; only the navigation block of the body changes.

    Raises:
        HostApiError: If GitHub rejects an update
    """
    updated: list[PullRequestRecord] = []
    for record in records:
        navigation = render_navigation(records, record.branch, combined)
        new_body = upsert_navigation(navigation, record.body)
        try:
            response = github.update_pull_request(
                repo, record.number, title=record.title, body=new_body
            )
        except GitHubApiError as e:
            raise HostApiError(str(e)) from e

        ctx.feedback.info(f"Updated PR #{record.number} for branch {record.branch} ✓")
        updated.append(
            PullRequestRecord(
                branch=record.branch,
                title=record.title,
                body=new_body,
                number=record.number,
                is_preexisting=record.is_preexisting,
                html_url=response.html_url or record.html_url,
            )
        )
    return updated


def reconcile_pull_requests(
    ctx: PrTrainContext,
    github: GitHub,
    repo: GitHubRepo,
    drafts: list[PullRequestDraft],
    combined: str | None,
    options: RunOptions,
) -> list[PullRequestRecord]:
    """Run both passes for an already described train."""
    logger.debug("Reconciling %d pull requests in %s", len(drafts), repo.full_name)

    records = ensure_pull_requests(ctx, github, repo, drafts, draft=options.draft)
    records = update_navigation(ctx, github, repo, records, combined)

    if options.print_urls:
        for record in records:
            ctx.feedback.info(f"  {record.branch}: {record.html_url}")
    return records
