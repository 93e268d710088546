"""Configuration for the prompt factory: defaults, validation and file loading."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

import yaml

CONFIG_FILE_NAME = ".dark-factory.yaml"


class ConfigError(Exception):
    """Raised when configuration cannot be read, parsed or validated."""


class Workflow(str):
    """How prompts are processed; one of the values in AVAILABLE_WORKFLOWS."""

    DIRECT: Workflow
    PR: Workflow

    def validate(self) -> None:
        """Raise ConfigError unless this is a known workflow."""
        if self not in AVAILABLE_WORKFLOWS:
            raise ConfigError(f"unknown workflow '{self}'")


Workflow.DIRECT = Workflow("direct")
Workflow.PR = Workflow("pr")

AVAILABLE_WORKFLOWS: tuple[Workflow, ...] = (Workflow.DIRECT, Workflow.PR)


@dataclass(frozen=True)
class Config:
    """The factory configuration."""

    workflow: Workflow = Workflow.DIRECT
    inbox_dir: str = "prompts"
    queue_dir: str = "prompts"
    completed_dir: str = "prompts/completed"
    log_dir: str = "prompts/log"
    container_image: str = "docker.io/bborbe/claude-yolo:v0.0.7"
    debounce_ms: int = 500
    server_port: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.workflow, Workflow):
            object.__setattr__(self, "workflow", Workflow(self.workflow))

    def _problems(self) -> Iterator[tuple[str, str]]:
        try:
            self.workflow.validate()
        except ConfigError as exc:
            yield "workflow", str(exc)
        for name, value in (
            ("inboxDir", self.inbox_dir),
            ("queueDir", self.queue_dir),
            ("completedDir", self.completed_dir),
            ("logDir", self.log_dir),
            ("containerImage", self.container_image),
        ):
            if not value:
                yield name, "must not be empty"
        if self.debounce_ms <= 0:
            yield "debounceMs", f"debounceMs must be positive, got {self.debounce_ms}"
        if not 0 <= self.server_port <= 65535:
            yield (
                "serverPort",
                f"serverPort must be 0 (disabled) or 1-65535, got {self.server_port}",
            )
        if self.completed_dir == self.queue_dir:
            yield "completedDir", "completedDir cannot equal queueDir"
        elif self.completed_dir == self.inbox_dir:
            yield "completedDir", "completedDir cannot equal inboxDir"

    def validate(self) -> None:
        """Raise ConfigError for the first invalid field."""
        problem = next(self._problems(), None)
        if problem is not None:
            name, message = problem
            raise ConfigError(f"{name}: {message}")


def defaults() -> Config:
    """Return a Config holding every default value."""
    return Config()


_YAML_FIELDS: dict[str, tuple[str, type]] = {
    "workflow": ("workflow", str),
    "inboxDir": ("inbox_dir", str),
    "queueDir": ("queue_dir", str),
    "completedDir": ("completed_dir", str),
    "logDir": ("log_dir", str),
    "containerImage": ("container_image", str),
    "debounceMs": ("debounce_ms", int),
    "serverPort": ("server_port", int),
}


def _coerce(key: str, value: Any, kind: type) -> Any:
    if kind is int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"parse config file: {key}: cannot use {value!r} as integer")
        return value
    if isinstance(value, (dict, list)):
        raise ConfigError(f"parse config file: {key}: cannot use {value!r} as string")
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class Loader:
    """Loads the configuration file, merging it onto the defaults."""

    def __init__(self, path: str | Path = CONFIG_FILE_NAME) -> None:
        self.path = Path(path)

    def load(self) -> Config:
        """Read, merge and validate the configuration; defaults if no file exists."""
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return defaults()
        except OSError as exc:
            raise ConfigError(f"read config file: {exc}") from exc

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError(f"parse config file: {exc}") from exc
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("parse config file: top level must be a mapping")

        overrides = {
            attr: _coerce(key, data[key], kind)
            for key, (attr, kind) in _YAML_FIELDS.items()
            if data.get(key) is not None
        }
        cfg = dataclasses.replace(defaults(), **overrides)

        try:
            cfg.validate()
        except ConfigError as exc:
            raise ConfigError(f"validate config: {exc}") from exc
        return cfg