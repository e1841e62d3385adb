from __future__ import annotations

import sys
from typing import IO, Protocol, runtime_checkable


@runtime_checkable
class LineSink(Protocol):
    """Destination for the lines of one output stream."""

    def add_line(self, line: str) -> None: ...


@runtime_checkable
class StreamingProcessOwner(Protocol):
    """Receives process output as it is produced.

    Both methods may be called concurrently, one thread per stream. Order is
    preserved within a stream, never between the two.
    """

    def process_stdout(self, line: str) -> None: ...

    def process_stderr(self, line: str) -> None: ...


class BufferingSink:
    """Accumulates the lines of one stream in memory.

    Written only by its reader thread and read once that thread has been joined.
    """

    def __init__(self, line_separator: str = "\n"):
        self.line_separator = line_separator
        self._lines: list[str] = []

    def add_line(self, line: str) -> None:
        self._lines.append(line)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    @property
    def text(self) -> str:
        return self.line_separator.join(self._lines)

    def __len__(self) -> int:
        return len(self._lines)


class StreamingSink:
    """Forwards each line straight to an owner, on the reader thread."""

    def __init__(self, owner: StreamingProcessOwner, is_stdout: bool):
        self.owner = owner
        self.is_stdout = is_stdout

    def add_line(self, line: str) -> None:
        if self.is_stdout:
            self.owner.process_stdout(line)
        else:
            self.owner.process_stderr(line)

    def __repr__(self) -> str:
        stream = "stdout" if self.is_stdout else "stderr"
        return f"<StreamingSink {stream} owner={self.owner!r}>"


class ConsoleSink:
    """Writes each line to a text stream, prefixed, flushing as it goes."""

    def __init__(self, stream: IO[str] | None = None, prefix: str = "", is_stdout: bool = True):
        if stream is None:
            stream = sys.stdout if is_stdout else sys.stderr
        self.stream = stream
        self.prefix = prefix

    def add_line(self, line: str) -> None:
        self.stream.write(f"{self.prefix}{line}\n")
        self.stream.flush()
