"""Blocking subprocess helpers.

Every external invocation blocks until it completes; no two run at once.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from supabase_stateful.utils.logger import get_logger


@dataclass(frozen=True)
class CommandResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


def run_capture(args: Sequence[str], cwd: str | Path | None = None) -> CommandResult:
    """Run a command and capture its output as UTF-8 text.

    pg_dump and psql emit the database encoding (UTF-8) whatever the local
    locale is. Undecodable bytes become U+FFFD instead of raising.

    Raises:
        FileNotFoundError: If the executable does not exist
    """
    get_logger().debug("run: %s", " ".join(args))
    result = subprocess.run(
        list(args),
        capture_output=True,
        text=True,
        encoding="utf-8",
        errors="replace",
        cwd=cwd,
    )
    return CommandResult(
        args=tuple(args),
        returncode=result.returncode,
        stdout=result.stdout or "",
        stderr=result.stderr or "",
    )


def run_streaming(args: Sequence[str], cwd: str | Path | None = None) -> int:
    """Run a command with stdio inherited so its output reaches the terminal.

    Returns:
        The exit code; 127 when the executable is missing
    """
    logger = get_logger()
    logger.debug("run (streaming): %s", " ".join(args))
    try:
        result = subprocess.run(list(args), cwd=cwd)
    except FileNotFoundError:
        logger.error("executable not found: %s", args[0])
        return 127
    return result.returncode
