"""Output strategies: where a monitored process's lines end up.

A strategy hands out a fresh ``(stdout_sink, stderr_sink)`` pair for every
monitoring run, so consecutive runs on the same monitor never share storage.
"""

from __future__ import annotations

from typing import IO, Protocol

from .settings import get_line_separator, get_setting
from .sinks import BufferingSink, ConsoleSink, LineSink, StreamingProcessOwner, StreamingSink

SinkPair = tuple[LineSink, LineSink]


class OutputStrategy(Protocol):
    def open_sinks(self) -> SinkPair: ...


class CollectingOutput:
    """Buffer both streams so the result carries the captured text."""

    def __init__(self, line_separator: str | None = None):
        self.line_separator = line_separator

    def open_sinks(self) -> tuple[BufferingSink, BufferingSink]:
        separator = self.line_separator if self.line_separator is not None else get_line_separator()
        return BufferingSink(separator), BufferingSink(separator)


class StreamingOutput:
    """Deliver every line to ``owner`` as soon as it is read."""

    def __init__(self, owner: StreamingProcessOwner):
        self.owner = owner

    def open_sinks(self) -> SinkPair:
        return StreamingSink(self.owner, is_stdout=True), StreamingSink(self.owner, is_stdout=False)


class ConsoleOutput:
    """Echo stdout and stderr lines to the given text streams."""

    def __init__(
        self,
        stdout: IO[str] | None = None,
        stderr: IO[str] | None = None,
        stdout_prefix: str | None = None,
        stderr_prefix: str | None = None,
    ):
        self.stdout = stdout
        self.stderr = stderr
        self.stdout_prefix = stdout_prefix
        self.stderr_prefix = stderr_prefix

    def open_sinks(self) -> SinkPair:
        stdout_prefix = self.stdout_prefix
        if stdout_prefix is None:
            stdout_prefix = str(get_setting("CONSOLE_STDOUT_PREFIX"))
        stderr_prefix = self.stderr_prefix
        if stderr_prefix is None:
            stderr_prefix = str(get_setting("CONSOLE_STDERR_PREFIX"))
        return (
            ConsoleSink(self.stdout, stdout_prefix, is_stdout=True),
            ConsoleSink(self.stderr, stderr_prefix, is_stdout=False),
        )
