from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class ProcessOutputError(Exception):
    """Base exception for django-processoutput."""


class ProcessStartError(ProcessOutputError):
    """Raised when a process could not be spawned."""

    def __init__(self, cmd: Sequence[str], returncode: int, message: str = ""):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.message = message
        cmdstr = " ".join(self.cmd)
        super().__init__(f"Failed to start process (exit {returncode}): {cmdstr}\n{message}".strip())


class InputWriteError(ProcessOutputError):
    """Raised when input could not be written to a process's stdin.

    The process is not terminated; ``process`` holds its handle so the caller
    can still terminate and reap it.
    """

    def __init__(self, cmd: Sequence[str], message: str = "", process: Any = None):
        self.cmd = list(cmd)
        self.message = message
        self.process = process
        cmdstr = " ".join(self.cmd)
        super().__init__(f"Failed to write input to process: {cmdstr}\n{message}".strip())
