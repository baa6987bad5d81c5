"""Run external tools with a reproducible environment."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
import logging
import os
from pathlib import Path
import shlex
import subprocess
import time

from md2overleaf.core.config import DEFAULT_SEARCH_PATH
from md2overleaf.core.exceptions import ToolExecutionError


logger = logging.getLogger(__name__)


def build_tool_env(
    search_path: str = DEFAULT_SEARCH_PATH,
    extra: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Return the caller's environment with ``PATH`` pinned to ``search_path``."""
    env = dict(os.environ)
    env["PATH"] = search_path
    if extra:
        env.update(extra)
    return env


def format_command(command: Sequence[str]) -> str:
    return shlex.join(str(part) for part in command)


def run_tool(
    command: Sequence[str | Path],
    *,
    cwd: Path,
    description: str,
    search_path: str = DEFAULT_SEARCH_PATH,
    extra_env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Execute ``command`` and return the completed process.

    A non-zero exit status is returned to the caller, only a failure to start
    the tool raises.
    """
    args = [str(part) for part in command]
    logger.info("Running %s: %s", description, format_command(args))
    logger.debug("Working directory: %s", cwd)
    try:
        result = subprocess.run(
            args,
            check=False,
            capture_output=True,
            text=True,
            cwd=cwd,
            env=build_tool_env(search_path, extra_env),
        )
    except OSError as exc:
        raise ToolExecutionError(f"Failed to execute {description}: {exc}") from exc

    if result.stdout:
        logger.debug("%s stdout:\n%s", description, result.stdout.rstrip())
    if result.stderr:
        logger.debug("%s stderr:\n%s", description, result.stderr.rstrip())
    return result


def failure_detail(result: subprocess.CompletedProcess[str]) -> str:
    """Return the most useful output of a failed process."""
    return (result.stderr or "").strip() or (result.stdout or "").strip()


def wait_for_file(path: Path, *, timeout: float, interval: float = 0.25) -> bool:
    """Poll until ``path`` exists or ``timeout`` seconds have elapsed."""
    deadline = time.monotonic() + timeout
    while True:
        if path.exists():
            return True
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            return False
        time.sleep(min(interval, remaining))


__all__ = [
    "build_tool_env",
    "failure_detail",
    "format_command",
    "run_tool",
    "wait_for_file",
]
