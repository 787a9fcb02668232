"""Keep trains of dependent branches in sync and mirrored into GitHub PRs."""
