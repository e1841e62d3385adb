from __future__ import annotations

import errno
import os
import subprocess
from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from .exceptions import ProcessStartError


@dataclass(frozen=True)
class ProcessSpec:
    """What to run: argv, an optional environment and optional stdin text.

    ``env=None`` inherits the caller's environment.
    """

    argv: Sequence[str]
    env: Mapping[str, str] | None = None
    input: str | None = None
    cwd: str | os.PathLike[str] | None = None


def spawn(spec: ProcessSpec) -> subprocess.Popen[bytes]:
    """Start the process described by ``spec`` with its output streams piped.

    stdin is only piped when there is input to write; otherwise the child reads
    from ``DEVNULL`` rather than inheriting the caller's stdin.
    """
    cmd = list(spec.argv)
    if not cmd:
        raise ProcessStartError(cmd, 1, "No command given.")
    try:
        return subprocess.Popen(
            cmd,
            stdin=subprocess.PIPE if spec.input is not None else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=dict(spec.env) if spec.env is not None else None,
            cwd=spec.cwd,
        )
    except OSError as exc:
        raise _command_error(cmd, exc) from exc


def _command_error(cmd: list[str], exc: OSError) -> ProcessStartError:
    if exc.errno == errno.ENOENT:
        return ProcessStartError(
            cmd,
            127,
            f"Command not found: {cmd[0]}. Ensure it is installed and on PATH.",
        )
    return ProcessStartError(cmd, 1, str(exc))
