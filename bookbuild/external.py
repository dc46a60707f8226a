"""Running the external tools (Markdown converter, highlighter, compiler)."""

from __future__ import annotations

import os
import subprocess
from pathlib import Path

from .errors import ExternalToolError


def run_command(
    command: str,
    *,
    stdin: str,
    what: str,
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
) -> str:
    """Pipe `stdin` through a shell command and return its stdout."""
    full_env = dict(os.environ)
    if env:
        full_env.update(env)
    try:
        p = subprocess.run(
            command,
            shell=True,
            input=stdin,
            capture_output=True,
            text=True,
            encoding="utf-8",
            cwd=str(cwd) if cwd else None,
            env=full_env,
        )
    except OSError as e:
        raise ExternalToolError(f"{what}: cannot run {command!r}: {e}") from e
    if p.returncode != 0:
        raise ExternalToolError(
            f"{what}: command {command!r} exited with status {p.returncode}",
            returncode=p.returncode,
            stderr=p.stderr,
        )
    return p.stdout
