"""Runs a prompt inside a Docker container, teeing output to a log file."""

from __future__ import annotations

import os
import subprocess
import sys
import tempfile
import threading
from contextlib import contextmanager
from functools import partial
from pathlib import Path
from typing import BinaryIO, Iterator, TextIO


class ExecutorError(Exception):
    """Raised when a prompt cannot be executed."""


def prepare_log_file(log_file: str | os.PathLike[str]) -> BinaryIO:
    """Create the log directory and open the log file for writing, truncated."""
    path = Path(log_file)
    try:
        path.parent.mkdir(mode=0o750, parents=True, exist_ok=True)
    except OSError as exc:
        raise ExecutorError(f"create log directory: {exc}") from exc
    try:
        fd = os.open(path, os.O_CREAT | os.O_WRONLY | os.O_TRUNC, 0o600)
    except OSError as exc:
        raise ExecutorError(f"open log file: {exc}") from exc
    return os.fdopen(fd, "wb")


@contextmanager
def prompt_temp_file(prompt_content: str) -> Iterator[str]:
    """Write the prompt to a temporary file, yield its path and remove it afterwards."""
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            newline="",
            prefix="dark-factory-prompt-",
            suffix=".md",
            delete=False,
        ) as handle:
            path = handle.name
            handle.write(prompt_content)
    except OSError as exc:
        raise ExecutorError(f"create prompt temp file: {exc}") from exc
    try:
        yield path
    finally:
        try:
            os.remove(path)
        except OSError:
            pass


def _pump(source: BinaryIO, sink: TextIO, log: BinaryIO, lock: threading.Lock) -> None:
    raw_sink = getattr(sink, "buffer", None)
    for chunk in iter(partial(source.read1, 65536), b""):
        if raw_sink is not None:
            raw_sink.write(chunk)
            raw_sink.flush()
        else:
            sink.write(chunk.decode("utf-8", errors="replace"))
            sink.flush()
        with lock:
            log.write(chunk)
            log.flush()


class DockerExecutor:
    """Executes prompts in a container built from the given image."""

    def __init__(self, container_image: str) -> None:
        self.container_image = container_image

    def build_docker_command(
        self,
        container_name: str,
        prompt_file_path: str,
        project_root: str,
        home: str,
    ) -> list[str]:
        """Return the docker run argument list."""
        return [
            "docker", "run", "--rm",
            "--name", container_name,
            "--cap-add=NET_ADMIN", "--cap-add=NET_RAW",
            "-e", "YOLO_PROMPT_FILE=/tmp/prompt.md",
            "-v", prompt_file_path + ":/tmp/prompt.md:ro",
            "-v", project_root + ":/workspace",
            "-v", home + "/.claude-yolo:/home/node/.claude",
            "-v", home + "/go/pkg:/home/node/go/pkg",
            self.container_image,
        ]

    def execute(
        self,
        prompt_content: str,
        log_file: str | os.PathLike[str],
        container_name: str,
    ) -> None:
        """Run the container and block until it exits; raise on a non-zero exit."""
        try:
            project_root = os.getcwd()
        except OSError as exc:
            raise ExecutorError(f"get working directory: {exc}") from exc
        try:
            home = str(Path.home())
        except (RuntimeError, KeyError) as exc:
            raise ExecutorError(f"get home directory: {exc}") from exc

        try:
            log = prepare_log_file(log_file)
        except ExecutorError as exc:
            raise ExecutorError(f"prepare log file: {exc}") from exc

        with log, prompt_temp_file(prompt_content) as prompt_path:
            command = self.build_docker_command(container_name, prompt_path, project_root, home)
            try:
                process = subprocess.Popen(
                    command, stdout=subprocess.PIPE, stderr=subprocess.PIPE
                )
            except OSError as exc:
                raise ExecutorError(f"docker run failed: {exc}") from exc

            lock = threading.Lock()
            pumps = [
                threading.Thread(target=_pump, args=(process.stdout, sys.stdout, log, lock)),
                threading.Thread(target=_pump, args=(process.stderr, sys.stderr, log, lock)),
            ]
            for pump in pumps:
                pump.start()
            for pump in pumps:
                pump.join()
            returncode = process.wait()

        if returncode != 0:
            raise ExecutorError(f"docker run failed: exit status {returncode}")