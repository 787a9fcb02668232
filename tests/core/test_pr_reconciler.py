"""Tests for creating pull requests and keeping their navigation in sync."""

from pathlib import Path

import pytest

from prtrain.core.errors import (
    BaseBranchMissingError,
    HostApiError,
    MissingInputError,
    RemoteConfigurationError,
)
from prtrain.core.git.abc import CommitMessage
from prtrain.core.github.types import GitHubApiError, GitHubRepo, PullRequest
from prtrain.core.navigation import NAVIGATION_START
from prtrain.core.options import RunOptions
from prtrain.core.pr_reconciler import (
    PullRequestDraft,
    describe_pull_requests,
    pr_base_for,
    reconcile_pull_requests,
    require_github,
    resolve_github_repo,
)
from tests.fakes.context import create_test_context
from tests.fakes.git import FakeGit
from tests.fakes.github import FakeGitHub
from tests.fakes.user_feedback import FakeUserFeedback

REPO = Path("/repo")
GITHUB_REPO = GitHubRepo(owner="acme", name="widgets")


def _drafts(*branches_and_bases: tuple[str, str]) -> list[PullRequestDraft]:
    return [
        PullRequestDraft(branch=branch, base=base, title=f"{branch} title", body=f"{branch} body")
        for branch, base in branches_and_bases
    ]


def test_pr_bases_follow_the_chain() -> None:
    branches = ["x", "y", "z"]

    bases = [pr_base_for(i, b, branches, "main", None) for i, b in enumerate(branches)]

    assert bases == ["main", "x", "y"]


def test_combined_branch_targets_base_branch() -> None:
    branches = ["x", "y", "z"]

    bases = [pr_base_for(i, b, branches, "main", "z") for i, b in enumerate(branches)]

    assert bases == ["main", "x", "main"]


def test_describe_uses_last_commit_message() -> None:
    git = FakeGit(
        repository_root=REPO,
        commit_messages={
            "x": CommitMessage(subject="Add parser", body="Details"),
            "y": CommitMessage(subject="Use parser", body=""),
        },
    )
    ctx = create_test_context(git=git)

    drafts = describe_pull_requests(ctx, REPO, ["x", "y", "xy"], "xy", "Parser rollout", "main")

    assert drafts == [
        PullRequestDraft(branch="x", base="main", title="Add parser", body="Details"),
        PullRequestDraft(branch="y", base="x", title="Use parser", body=""),
        PullRequestDraft(branch="xy", base="main", title="Parser rollout", body=""),
    ]


@pytest.mark.parametrize("title", [None, ""])
def test_combined_title_is_required(title: str | None) -> None:
    ctx = create_test_context(git=FakeGit(repository_root=REPO))

    with pytest.raises(MissingInputError) as exc_info:
        describe_pull_requests(ctx, REPO, ["x", "xy"], "xy", title, "main")

    assert exc_info.value.exit_code == 5


def test_require_github_without_key_file() -> None:
    ctx = create_test_context(without_github=True)

    with pytest.raises(RemoteConfigurationError, match=r"\.pr-train"):
        require_github(ctx)


def test_resolve_github_repo_from_remote_url() -> None:
    git = FakeGit(remote_urls={"origin": "git@github.com:acme/widgets.git"})
    ctx = create_test_context(git=git)

    assert resolve_github_repo(ctx, REPO, "origin") == GITHUB_REPO


def test_resolve_github_repo_missing_remote() -> None:
    ctx = create_test_context(git=FakeGit())

    with pytest.raises(RemoteConfigurationError, match="upstream"):
        resolve_github_repo(ctx, REPO, "upstream")


def test_resolve_github_repo_non_github_remote() -> None:
    git = FakeGit(remote_urls={"origin": "https://gitlab.com/acme/widgets.git"})
    ctx = create_test_context(git=git)

    with pytest.raises(RemoteConfigurationError, match="could not parse"):
        resolve_github_repo(ctx, REPO, "origin")


def test_creates_missing_prs_and_links_them() -> None:
    github = FakeGitHub(next_number=101)
    ctx = create_test_context(github=github)
    drafts = _drafts(("x", "main"), ("y", "x"), ("z", "y"))

    records = reconcile_pull_requests(
        ctx, github, GITHUB_REPO, drafts, None, RunOptions(create_prs=True, draft=True)
    )

    assert [(p.head, p.base, p.draft) for p in github.created] == [
        ("x", "main", True),
        ("y", "x", True),
        ("z", "y", True),
    ]
    assert [r.number for r in records] == [101, 102, 103]
    assert [r.is_preexisting for r in records] == [False, False, False]

    # First PR's navigation already knows about PRs created after it
    first_body = github.pull_requests["x"].body
    assert first_body.startswith("x body\n\n" + NAVIGATION_START)
    assert "👉 #101 (x title) 👈 **YOU ARE HERE**" in first_body
    assert "#103 (z title)" in first_body
    assert [number for number, _, _ in github.updated] == [101, 102, 103]


def test_existing_pr_keeps_title_and_body_text() -> None:
    existing = PullRequest(
        number=7,
        title="Hand-edited title",
        body="Reviewer notes",
        html_url="https://github.com/acme/widgets/pull/7",
    )
    github = FakeGitHub(pull_requests={"x": existing}, next_number=8)
    feedback = FakeUserFeedback()
    ctx = create_test_context(github=github, feedback=feedback)

    records = reconcile_pull_requests(
        ctx, github, GITHUB_REPO, _drafts(("x", "main"), ("y", "x")), None, RunOptions()
    )

    assert [p.head for p in github.created] == ["y"]
    assert records[0].is_preexisting is True
    updated_x = github.pull_requests["x"]
    assert updated_x.title == "Hand-edited title"
    assert updated_x.body.startswith("Reviewer notes\n\n")
    assert "#8 (y title)" in updated_x.body
    assert "already exists: #7" in feedback.text


def test_rerun_replaces_navigation_instead_of_appending() -> None:
    github = FakeGitHub()
    ctx = create_test_context(github=github)
    drafts = _drafts(("x", "main"), ("y", "x"))

    reconcile_pull_requests(ctx, github, GITHUB_REPO, drafts, None, RunOptions())
    bodies = {branch: pr.body for branch, pr in github.pull_requests.items()}
    reconcile_pull_requests(ctx, github, GITHUB_REPO, drafts, None, RunOptions())

    assert len(github.created) == 2
    assert {branch: pr.body for branch, pr in github.pull_requests.items()} == bodies
    assert github.pull_requests["y"].body.count(NAVIGATION_START) == 1


def test_combined_pr_is_labelled() -> None:
    github = FakeGitHub(next_number=1)
    ctx = create_test_context(github=github)

    reconcile_pull_requests(
        ctx, github, GITHUB_REPO, _drafts(("x", "main"), ("xc", "main")), "xc", RunOptions()
    )

    assert "👉 #2 **[combined branch]** (xc title)" in github.pull_requests["xc"].body


def test_missing_base_branch_is_reported() -> None:
    error = GitHubApiError(
        "Validation Failed",
        {"message": "Validation Failed", "errors": [{"field": "base", "code": "invalid"}]},
    )
    github = FakeGitHub(create_errors={"y": error})
    ctx = create_test_context(github=github)

    with pytest.raises(BaseBranchMissingError) as exc_info:
        reconcile_pull_requests(
            ctx, github, GITHUB_REPO, _drafts(("x", "main"), ("y", "x")), None, RunOptions()
        )

    assert "'x'" in exc_info.value.message
    assert exc_info.value.hint == "Did you forget to push it?"
    # Pass 2 never ran
    assert github.updated == []


def test_other_api_failures_are_host_errors() -> None:
    github = FakeGitHub(create_errors={"x": GitHubApiError("Bad credentials")})
    ctx = create_test_context(github=github)

    with pytest.raises(HostApiError, match="Bad credentials"):
        reconcile_pull_requests(
            ctx, github, GITHUB_REPO, _drafts(("x", "main")), None, RunOptions()
        )


def test_print_urls_lists_every_pr() -> None:
    github = FakeGitHub(next_number=5)
    feedback = FakeUserFeedback()
    ctx = create_test_context(github=github, feedback=feedback)

    reconcile_pull_requests(
        ctx, github, GITHUB_REPO, _drafts(("x", "main")), None, RunOptions(print_urls=True)
    )

    assert "x: https://github.com/acme/widgets/pull/5" in feedback.text
