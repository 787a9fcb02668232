"""Navigation block embedded in every pull request body of a train.

The block lists every PR of the train in order and marks the one it is
embedded in:

    <pr-train-toc>

    #### PR chain:
    #101 (Add parser)
    👉 #102 (Use parser in CLI) 👈 **YOU ARE HERE**
    #103 **[combined branch]** (Parser rollout)

    </pr-train-toc>

The block is regenerated on every run and spliced into the body by replacing
whatever sits between the delimiters, so repeated runs never stack copies.
"""

from collections.abc import Sequence
from dataclasses import dataclass

NAVIGATION_START = "<pr-train-toc>"
NAVIGATION_END = "</pr-train-toc>"


@dataclass(frozen=True)
class PullRequestRecord:
    """A train branch and the pull request found or created for it."""

    branch: str
    title: str
    body: str
    number: int
    is_preexisting: bool
    html_url: str = ""


def render_navigation(
    records: Sequence[PullRequestRecord], current_branch: str, combined_branch: str | None
) -> str:
    """Render the navigation block as seen from current_branch's PR."""
    lines = [NAVIGATION_START, "", "#### PR chain:"]
    for record in records:
        is_current = record.branch == current_branch
        row = "👉 " if is_current else ""
        row += f"#{record.number}"
        row += " **[combined branch]** " if record.branch == combined_branch else " "
        row += f"({record.title.strip()})"
        if is_current:
            row += " 👈 **YOU ARE HERE**"
        lines.append(row)
    lines.extend(["", NAVIGATION_END])
    return "\n".join(lines)


def upsert_navigation(navigation: str, body: str) -> str:
    """Splice navigation into body.

    The last complete block in body is replaced in place; otherwise the block
    is appended after a blank line. Applying the same block twice yields the
    same body. A start delimiter without a matching end delimiter is left
    alone as ordinary text.
    """
    span = _last_block_span(body)
    if span is not None:
        start, end = span
        return body[:start] + navigation + body[end:]
    if not body.strip():
        return navigation
    return body.rstrip("\n") + "\n\n" + navigation


def _last_block_span(body: str) -> tuple[int, int] | None:
    end = body.rfind(NAVIGATION_END)
    if end == -1:
        return None
    start = body.rfind(NAVIGATION_START, 0, end)
    if start == -1:
        return None
    return start, end + len(NAVIGATION_END)
