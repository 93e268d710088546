"""Git commit, tag, release and file-move operations for completed prompts."""

from __future__ import annotations

import enum
import os
import subprocess
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Sequence

from darkfactory.semver import (
    InvalidVersionError,
    SemanticVersionNumber,
    parse_semantic_version_number,
)

CHANGELOG_PATH = "CHANGELOG.md"
FIRST_VERSION = "v0.1.0"
COMPLETED_COMMIT_MESSAGE = "move prompt to completed"


class GitError(Exception):
    """Raised when a git operation fails."""


class VersionBump(enum.Enum):
    """Which part of the version a release increments."""

    PATCH = "patch"
    MINOR = "minor"


@contextmanager
def _step(action: str) -> Iterator[None]:
    try:
        yield
    except (GitError, OSError) as exc:
        raise GitError(f"{action}: {exc}") from exc


def _git(*args: str, cwd: str | os.PathLike[str] | None = None) -> str:
    try:
        completed = subprocess.run(
            ["git", *args],
            cwd=cwd,
            capture_output=True,
            text=True,
            check=False,
        )
    except OSError as exc:
        raise GitError(f"run git: {exc}") from exc
    if completed.returncode != 0:
        detail = completed.stderr.strip() or completed.stdout.strip()
        raise GitError(detail or f"git {args[0]} exited with status {completed.returncode}")
    return completed.stdout


def _repository_root() -> Path:
    return Path(_git("rev-parse", "--show-toplevel").strip())


def _add_all() -> None:
    with _step("open git repository"):
        _repository_root()
    with _step("add all files"):
        _git("add", "-A")


def _commit(message: str) -> None:
    with _step("open git repository"):
        _repository_root()
    with _step("create commit"):
        _git("commit", "-m", message)


def _tag(tag: str) -> None:
    with _step("open git repository"):
        _repository_root()
    with _step("get HEAD"):
        _git("rev-parse", "--verify", "HEAD")
    with _step("create tag"):
        _git("tag", tag)


def _push() -> None:
    with _step("push to remote"):
        _git("push")


def _push_tag(tag: str) -> None:
    try:
        parse_semantic_version_number(tag)
    except InvalidVersionError as exc:
        raise GitError(f"invalid tag format: {exc}") from exc
    with _step("push tag to remote"):
        _git("push", "origin", tag)


def _parse_tag(name: str) -> SemanticVersionNumber | None:
    try:
        return parse_semantic_version_number(name)
    except InvalidVersionError:
        return None


def get_next_version(bump: VersionBump) -> str:
    """Return the next version after the highest vX.Y.Z tag, or v0.1.0 if none exists."""
    with _step("open git repository"):
        _repository_root()
    with _step("get tags"):
        output = _git("tag", "--list")

    versions = [
        version
        for version in (_parse_tag(name) for name in output.split())
        if version is not None
    ]
    if not versions:
        return FIRST_VERSION

    latest = max(versions)
    next_version = latest.bump_minor() if bump is VersionBump.MINOR else latest.bump_patch()
    return str(next_version)


def process_unreleased_section(
    lines: Sequence[str], entry: str, version: str
) -> tuple[list[str], bool]:
    """Rename "## Unreleased" headings to the version and add the entry below them."""
    result: list[str] = []
    found = False
    skip = False
    following = [*lines[1:], None]

    for line, next_line in zip(lines, following):
        if skip:
            skip = False
            continue
        if not line.startswith("## Unreleased"):
            result.append(line)
            continue

        found = True
        result.append("## " + version)
        if next_line is not None and next_line.startswith("###"):
            result.extend([next_line, "- " + entry])
            skip = True
        else:
            result.extend(["", "### Added", "- " + entry])

    return result, found


def find_insert_index(lines: Sequence[str]) -> int | None:
    """Return where a new version section belongs, or None if there is no place."""
    for index, (previous, line) in enumerate(zip(lines, lines[1:]), start=1):
        if line == "" and (previous.startswith("#") or "Semantic Versioning" in previous):
            return index + 1

    for index, line in enumerate(lines):
        if line == "":
            return index + 1

    return None


def insert_new_version_section(lines: Sequence[str], entry: str, version: str) -> list[str]:
    """Insert a fresh version section holding the entry; unchanged if nowhere fits."""
    index = find_insert_index(lines)
    if index is None:
        return list(lines)
    section = ["## " + version, "", "### Added", "- " + entry, ""]
    return [*lines[:index], *section, *lines[index:]]


def update_changelog(entry: str, version: str) -> None:
    """Add the entry to CHANGELOG.md under the given version."""
    path = Path(CHANGELOG_PATH)
    with _step("read changelog"):
        content = path.read_text(encoding="utf-8", errors="surrogateescape")

    lines = content.split("\n")
    result, found = process_unreleased_section(lines, entry, version)
    if not found:
        result = insert_new_version_section(lines, entry, version)

    with _step("write changelog"):
        with path.open("w", encoding="utf-8", errors="surrogateescape", newline="") as handle:
            handle.write("\n".join(result))


def commit_and_release(changelog_entry: str, bump: VersionBump) -> None:
    """Stage everything, update the changelog, commit, tag and push the release."""
    with _step("git add"):
        _add_all()
    with _step("get next version"):
        next_version = get_next_version(bump)
    with _step("update changelog"):
        update_changelog(changelog_entry, next_version)
    with _step("git add changelog"):
        _add_all()
    with _step("git commit"):
        _commit("release " + next_version)
    with _step("git tag"):
        _tag(next_version)
    with _step("git push"):
        _push()
    with _step("git push tag"):
        _push_tag(next_version)


def commit_completed_file(path: str | os.PathLike[str]) -> None:
    """Stage all changes and commit them; do nothing when there is nothing to commit."""
    with _step("open git repository"):
        _repository_root()
    with _step("get status before add"):
        before = _git("status", "--porcelain")
    with _step("add all changes"):
        _git("add", "-A")
    with _step("get status after add"):
        after = _git("status", "--porcelain")

    if not before.strip() and not after.strip():
        return
    _commit(COMPLETED_COMMIT_MESSAGE)


def _rename(old_path: str | os.PathLike[str], new_path: str | os.PathLike[str]) -> None:
    with _step("rename file"):
        os.rename(old_path, new_path)


def move_file(old_path: str | os.PathLike[str], new_path: str | os.PathLike[str]) -> None:
    """Move a file and stage the move in git; a plain rename outside a repository."""
    try:
        root = os.path.realpath(_repository_root())
    except GitError:
        _rename(old_path, new_path)
        return

    old_rel = os.path.relpath(os.path.realpath(old_path), root)
    new_rel = os.path.relpath(os.path.realpath(new_path), root)

    _rename(old_path, new_path)

    # Staging is best effort: the file has already moved.
    try:
        _git("rm", "--cached", "--quiet", "--", old_rel, cwd=root)
        _git("add", "--", new_rel, cwd=root)
    except GitError:
        return


class Releaser:
    """Git commit, tag and push operations on the repository in the working directory."""

    def get_next_version(self, bump: VersionBump) -> str:
        """Return the next version for the given bump."""
        return get_next_version(bump)

    def commit_and_release(self, title: str, bump: VersionBump) -> None:
        """Perform the full release workflow with title as the changelog entry."""
        commit_and_release(title, bump)

    def commit_completed_file(self, path: str | os.PathLike[str]) -> None:
        """Commit a completed prompt file."""
        commit_completed_file(path)

    def commit_only(self, message: str) -> None:
        """Stage everything and commit, without versioning, tagging or pushing."""
        with _step("git add"):
            _add_all()
        with _step("git commit"):
            _commit(message)

    def has_changelog(self) -> bool:
        """Return True if CHANGELOG.md exists in the working directory."""
        return Path(CHANGELOG_PATH).exists()

    def move_file(self, old_path: str | os.PathLike[str], new_path: str | os.PathLike[str]) -> None:
        """Move a file, preserving git history where possible."""
        move_file(old_path, new_path)