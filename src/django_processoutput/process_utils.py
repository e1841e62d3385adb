from __future__ import annotations

import io
import logging
from collections.abc import Iterable
from contextlib import suppress
from threading import Thread
from typing import IO

from .sinks import LineSink

logger = logging.getLogger(__name__)


def _deliver(sink: LineSink, line: str) -> None:
    try:
        sink.add_line(line)
    except Exception:
        # Keep draining even when the sink fails.
        logger.exception("Output sink %r failed to accept a line", sink)


def _discard(stream: IO[bytes]) -> None:
    for _ in iter(lambda: stream.read(65536), b""):
        pass


def read_lines(stream: IO[bytes], sink: LineSink, *, encoding: str, errors: str = "replace") -> None:
    """Read ``stream`` to end-of-stream, handing each decoded line to ``sink``.

    Lines are delivered as soon as their terminator arrives, without it. ``\\n``,
    ``\\r\\n`` and a lone ``\\r`` all end a line, and a final line with no
    terminator is still delivered. Read errors (typically the pipe being torn
    down because the process was killed) end the loop quietly, and the stream is
    closed afterwards.
    """
    text = io.TextIOWrapper(stream, encoding=encoding, errors=errors, newline=None)
    with suppress(OSError, ValueError):
        try:
            for line in iter(text.readline, ""):
                _deliver(sink, line[:-1] if line.endswith("\n") else line)
        except UnicodeDecodeError:
            logger.exception("Could not decode output for sink %r, discarding the rest of the stream", sink)
            _discard(stream)
    with suppress(OSError, ValueError):
        text.close()


def start_line_reader(
    stream: IO[bytes],
    sink: LineSink,
    *,
    name: str,
    encoding: str,
    errors: str = "replace",
) -> Thread:
    """Drain ``stream`` into ``sink`` on a background daemon thread."""
    thread = Thread(
        target=read_lines,
        args=(stream, sink),
        kwargs={"encoding": encoding, "errors": errors},
        name=name,
        daemon=True,
    )
    thread.start()
    return thread


def join_line_readers(threads: Iterable[Thread], interval: float) -> None:
    """Block until every reader thread has finished.

    Each thread is joined with a bounded timeout, so the wait re-checks all
    readers every ``interval`` seconds until none is alive.
    """
    pending = list(threads)
    while pending:
        for thread in pending:
            thread.join(interval)
        pending = [thread for thread in pending if thread.is_alive()]
