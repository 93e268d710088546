"""Pull request creation through the GitHub command line tool."""

from __future__ import annotations

import subprocess

from darkfactory.releaser import GitError


class PRCreator:
    """Creates GitHub pull requests for the current branch."""

    def create(self, title: str, body: str) -> str:
        """Create a pull request and return its URL."""
        try:
            completed = subprocess.run(
                ["gh", "pr", "create", "--title", title, "--body", body],
                capture_output=True,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise GitError(f"create pull request: {exc}") from exc
        if completed.returncode != 0:
            detail = completed.stderr.strip() or f"exit status {completed.returncode}"
            raise GitError(f"create pull request: {detail}")
        return completed.stdout.strip()