# darkfactory

This library provides the parts of a prompt-processing workflow. It runs
prompts inside a Docker container. It then commits, versions and releases the
resulting changes with git.

## Installation

```
pip install .
```

To install the test dependencies as well:

```
pip install ".[test]"
```

Some features call external tools, which must be on your `PATH` when you use them:

| Feature | Tool |
| --- | --- |
| git features | `git` |
| pull request creation | `gh` |
| prompt execution | `docker` |

## Configuration

`darkfactory.config.Loader().load()` reads `.dark-factory.yaml` from the
current directory. You can pass another path to `Loader(path)`.

- Keys found in the file replace the values from `darkfactory.config.defaults()`.
- The merged `Config` is then validated.
- If the file is missing, `load()` returns the defaults unchanged.

```yaml
workflow: pr              # "direct" (default) or "pr"
inboxDir: prompts
queueDir: prompts
completedDir: prompts/completed
logDir: prompts/log
containerImage: example/prompt-runner:latest
debounceMs: 500           # must be positive
serverPort: 0             # 0 means disabled; otherwise 1-65535
```

Validation has these rules:

- `completedDir` must differ from both `queueDir` and `inboxDir`.
- None of the directory names or the image may be empty.

An unreadable, unparsable or invalid file raises `darkfactory.config.ConfigError`.

`Config.validate()` and `Workflow.validate()` raise the same error when called
directly. The known workflows are `Workflow.DIRECT` and `Workflow.PR`.

## Semantic versions

```python
from darkfactory.semver import parse_semantic_version_number

v = parse_semantic_version_number("v0.2.25")
str(v.bump_patch())   # "v0.2.26"
str(v.bump_minor())   # "v0.3.0"
v.less(parse_semantic_version_number("v0.10.0"))   # True
```

A tag that is not exactly of the form `vX.Y.Z` raises `InvalidVersionError`.
`SemanticVersionNumber` values compare numerically, not as strings.

## Releasing

Run these from the root of a git repository. Failures raise
`darkfactory.releaser.GitError`.

```python
from darkfactory.releaser import Releaser, VersionBump

releaser = Releaser()
releaser.get_next_version(VersionBump.PATCH)   # "v0.1.0" when there are no vX.Y.Z tags
releaser.commit_and_release("Add feature", VersionBump.MINOR)
```

`commit_and_release` does the whole release, in this order:

1. Stages everything.
2. Picks the next version from the highest `vX.Y.Z` tag.
3. Writes the entry into `CHANGELOG.md`:
   - Each `## Unreleased` heading becomes the new version.
   - If there is no such heading, a new version section is inserted.
4. Commits as `release vX.Y.Z`.
5. Tags the commit.
6. Pushes the branch and the tag.

For projects without a changelog, use `commit_only(message)`. It stages
everything and commits, with no tag and no push. Use `has_changelog()` to tell
the two cases apart.

Two helpers deal with moved files:

- `move_file(old, new)` renames a file and stages the move. Outside a git repository, it falls back to a plain rename.
- `commit_completed_file(path)` stages all changes and commits them as `move prompt to completed`. It commits only if something changed.

The same operations are available as module-level functions in
`darkfactory.releaser`. These include the changelog helpers
`update_changelog`, `process_unreleased_section`, `insert_new_version_section`
and `find_insert_index`.

## Branches and pull requests

```python
from darkfactory.brancher import Brancher
from darkfactory.pr_creator import PRCreator

brancher = Brancher()
brancher.current_branch()
brancher.create_and_switch("feature-x")
brancher.push("feature-x")
url = PRCreator().create("Feature X", "Automated change")
```

Both classes raise `GitError` when the underlying command fails.

## Running a prompt

```python
from darkfactory.executor import DockerExecutor

DockerExecutor("example/prompt-runner:latest").execute(
    "# Task\n\nDo something.", "prompts/log/001-task.log", "task-001"
)
```

The container is set up as follows:

- The prompt is written to a temporary file. That file is mounted read-only at `/tmp/prompt.md`.
- The current directory is mounted at `/workspace`.
- `~/.claude-yolo` and `~/go/pkg` from your home directory are mounted into the container.

The container's output goes both to the terminal and to the log file. The log
file's directory is created if needed, and an existing log file is truncated.

`execute` raises `ExecutorError` in two cases:

- the log file cannot be prepared;
- the container exits with a non-zero status.

## What this package does not do

This is a library only. It has no command-line program. It also has none of
the following:

- a queue of prompt files or an inbox to take them from;
- a watcher for new prompts;
- a loop that processes prompts one after another;
- an HTTP status server.

You call the pieces above from your own code.