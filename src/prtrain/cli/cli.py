import logging

import click

from prtrain.cli.error_boundary import cli_error_boundary
from prtrain.cli.output import user_output
from prtrain.core.context import PrTrainContext, create_context
from prtrain.core.options import RunRequest
from prtrain.core.pr_reconciler import PullRequestDraft
from prtrain.core.train_run import init_config, run_train

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

EPILOG = """\b
Switching branches:
  `pr-train <index>` switches to the branch with index <index> (e.g. 0 or 5).
  `pr-train combined` switches to the combined branch.

\b
Creating GitHub PRs:
  `pr-train -p --create-prs` creates GitHub PRs for all branches in your train,
  each with a "table of contents" linking the others. Put your GitHub access
  token in `$HOME/.pr-train` first.
"""


def _prompt_combined_title() -> str | None:
    user_output()
    user_output('Now I will need to know what to call your "combined" branch PR in GitHub.')
    title = click.prompt(
        click.style("Combined branch PR title", bold=True),
        default="",
        show_default=False,
        err=True,
    )
    return title.strip() or None


def _confirm_pull_requests(drafts: list[PullRequestDraft], *, assume_yes: bool) -> bool:
    user_output()
    user_output("This will create (or update) PRs for the following branches:")
    for draft in drafts:
        user_output(f"  -> {click.style(draft.branch, fg='green')} ({draft.title})")
    user_output()
    if assume_yes:
        return True
    return click.confirm(click.style("Shall we do this?", bold=True), err=True)


@click.command("pr-train", context_settings=CONTEXT_SETTINGS, epilog=EPILOG)
@click.version_option(package_name="pr-train")
@click.argument("branch_index", required=False)
@click.option("--init", "init", is_flag=True, help="Create a .pr-train.yml with an example config.")
@click.option("-p", "--push", is_flag=True, help="Push changes.")
@click.option("--list", "list_only", is_flag=True, help="List branches in current train.")
@click.option("-r", "--rebase", is_flag=True, help="Rebase branches rather than merging them.")
@click.option("-f", "--force", is_flag=True, help="Force push to remote.")
@click.option(
    "--push-merged",
    is_flag=True,
    help="Push all branches, including those already merged into the base branch.",
)
@click.option("--remote", default=None, help='Remote to push to. Defaults to "origin".')
@click.option(
    "-c", "--create-prs", is_flag=True, help="Create GitHub PRs from your train branches."
)
@click.option(
    "--draft/--no-draft",
    default=None,
    help="Create new PRs as drafts. Defaults to prs.draft-by-default from the config.",
)
@click.option(
    "-b",
    "--base",
    "base_branch",
    default=None,
    help="Base branch for the first PR. Defaults to prs.main-branch-name or master.",
)
@click.option(
    "--new-branch",
    default=None,
    metavar="NAME",
    help=(
        "Create NAME from the current branch and insert it after it in the train. "
        "Rewrites .pr-train.yml without its comments."
    ),
)
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation before creating PRs.")
@click.option("--debug", is_flag=True, help="Log git and gh commands to stderr.")
@click.pass_context
@cli_error_boundary
def cli(
    click_ctx: click.Context,
    branch_index: str | None,
    init: bool,
    push: bool,
    list_only: bool,
    rebase: bool,
    force: bool,
    push_merged: bool,
    remote: str | None,
    create_prs: bool,
    draft: bool | None,
    base_branch: str | None,
    new_branch: str | None,
    yes: bool,
    debug: bool,
) -> None:
    """Keep a train of dependent branches merged into each other.

    Each branch of the current train is merged into the next one (or rebased
    onto it with -r); optionally the branches are pushed and GitHub PRs are
    created or updated for them.
    """
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if click_ctx.obj is None:
        click_ctx.obj = create_context()
    ctx: PrTrainContext = click_ctx.obj

    if init:
        path = init_config(ctx)
        user_output(f'Created a "{path.name}" file. Please make sure it\'s gitignored.')
        return

    request = RunRequest(
        rebase=rebase,
        push=push,
        push_merged=push_merged,
        force=force,
        create_prs=create_prs,
        list_only=list_only,
        draft=draft,
        remote=remote,
        base_branch=base_branch,
        switch_token=branch_index,
        new_branch=new_branch,
    )
    run_train(
        ctx,
        request,
        prompt_combined_title=_prompt_combined_title,
        confirm=lambda drafts: _confirm_pull_requests(drafts, assume_yes=yes),
    )


def main() -> None:
    """CLI entry point used by the `pr-train` console script."""
    cli()
