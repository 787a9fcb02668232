"""Parsing helpers for GitHub remote URLs and API responses."""

import json
import re
from typing import Any

from prtrain.core.github.types import GitHubRepo, PullRequest

# Matches git@github.com:owner/repo.git, https://github.com/owner/repo(.git),
# and ssh://git@github.com/owner/repo.git
_REMOTE_URL_PATTERN = re.compile(r"github\.com[/:]([^/\s]+)/([^/\s]+?)(?:\.git)?/?$")


def parse_github_remote_url(url: str) -> GitHubRepo | None:
    """Parse owner and repository name from a GitHub remote URL.

    Example:
        >>> parse_github_remote_url("git@github.com:acme/widgets.git")
        GitHubRepo(owner='acme', name='widgets')
    """
    match = _REMOTE_URL_PATTERN.search(url.strip())
    if match is None:
        return None
    return GitHubRepo(owner=match.group(1), name=match.group(2))


def parse_pull_request(data: dict[str, Any]) -> PullRequest:
    """Convert a REST API pull request object into a PullRequest."""
    return PullRequest(
        number=int(data["number"]),
        title=data.get("title") or "",
        body=data.get("body") or "",
        html_url=data.get("html_url") or "",
    )


def parse_pull_request_list(json_str: str) -> list[PullRequest]:
    """Parse the JSON array returned by GET /repos/{owner}/{repo}/pulls."""
    data = json.loads(json_str)
    if not isinstance(data, list):
        return []
    return [parse_pull_request(item) for item in data]


def parse_error_response(json_str: str) -> dict[str, Any] | None:
    """Decode the JSON error document gh prints on a failed API call.

    Returns None when the output is not a JSON object.
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict):
        return None
    return data
