"""Git branch operations run through the git command line."""

from __future__ import annotations

import subprocess

from darkfactory.releaser import GitError


def _git(action: str, *args: str) -> str:
    try:
        completed = subprocess.run(
            ["git", *args],
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise GitError(f"{action}: {exc}") from exc
    if completed.returncode != 0:
        detail = completed.stderr.strip() or f"exit status {completed.returncode}"
        raise GitError(f"{action}: {detail}")
    return completed.stdout


class Brancher:
    """Creates, switches and pushes branches of the repository in the working directory."""

    def create_and_switch(self, name: str) -> None:
        """Create a new branch and switch to it."""
        _git("create and switch to branch", "checkout", "-b", name)

    def push(self, name: str) -> None:
        """Push a branch to origin and set it as upstream."""
        _git("push branch to remote", "push", "-u", "origin", name)

    def switch(self, name: str) -> None:
        """Switch to an existing branch."""
        _git("switch to branch", "checkout", name)

    def current_branch(self) -> str:
        """Return the name of the current branch."""
        return _git("get current branch", "rev-parse", "--abbrev-ref", "HEAD").strip()