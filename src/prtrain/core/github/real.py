"""Production implementation of GitHub operations using the gh CLI.

Requests go through `gh api` so authentication, proxies and GitHub Enterprise
hosts are handled by gh. The token read from the user's key file is passed
as GH_TOKEN.
"""

import json
import logging
import os
import subprocess
from dataclasses import asdict
from pathlib import Path
from typing import Any

from prtrain.core.github.abc import GitHub
from prtrain.core.github.parsing import (
    parse_error_response,
    parse_pull_request,
    parse_pull_request_list,
)
from prtrain.core.github.types import GitHubApiError, GitHubRepo, PullRequest, PullRequestPayload

logger = logging.getLogger(__name__)


class RealGitHub(GitHub):
    """Production implementation using gh CLI.

    All GitHub operations execute actual gh commands via subprocess.
    """

    def __init__(self, token: str, cwd: Path) -> None:
        """Initialize RealGitHub.

        Args:
            token: GitHub API token exported to gh as GH_TOKEN
            cwd: Working directory for gh invocations
        """
        self._token = token
        self._cwd = cwd

    def find_pull_request(self, repo: GitHubRepo, head_branch: str) -> PullRequest | None:
        stdout = self._run_gh_api(
            [
                "-X",
                "GET",
                f"repos/{repo.full_name}/pulls",
                "-f",
                f"head={repo.owner}:{head_branch}",
                "-f",
                "state=open",
            ],
            operation_context=f"look up pull request for '{head_branch}'",
        )
        prs = parse_pull_request_list(stdout)
        if not prs:
            return None
        return prs[0]

    def create_pull_request(self, repo: GitHubRepo, payload: PullRequestPayload) -> PullRequest:
        stdout = self._run_gh_api(
            ["-X", "POST", f"repos/{repo.full_name}/pulls", "--input", "-"],
            operation_context=f"create pull request for '{payload.head}'",
            body=asdict(payload),
        )
        return parse_pull_request(json.loads(stdout))

    def update_pull_request(
        self, repo: GitHubRepo, number: int, *, title: str, body: str
    ) -> PullRequest:
        stdout = self._run_gh_api(
            ["-X", "PATCH", f"repos/{repo.full_name}/pulls/{number}", "--input", "-"],
            operation_context=f"update pull request #{number}",
            body={"title": title, "body": body},
        )
        return parse_pull_request(json.loads(stdout))

    def _run_gh_api(
        self,
        args: list[str],
        *,
        operation_context: str,
        body: dict[str, Any] | None = None,
    ) -> str:
        cmd = ["gh", "api", *args]
        logger.debug("$ %s", " ".join(cmd))

        env = dict(os.environ)
        env["GH_TOKEN"] = self._token

        try:
            result = subprocess.run(
                cmd,
                cwd=self._cwd,
                input=json.dumps(body) if body is not None else None,
                capture_output=True,
                text=True,
                encoding="utf-8",
                env=env,
                check=False,
            )
        except FileNotFoundError as e:
            raise GitHubApiError(
                f"Command not found while trying to {operation_context}: gh"
            ) from e

        if result.returncode != 0:
            # gh prints the API error document on stdout and a summary on stderr
            response = parse_error_response(result.stdout)
            error_msg = f"Failed to {operation_context}"
            if result.stderr.strip():
                error_msg += f": {result.stderr.strip()}"
            if response is not None:
                error_msg += f"\n{json.dumps(response, indent=2)}"
            raise GitHubApiError(error_msg, response)

        return result.stdout
