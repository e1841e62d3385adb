from __future__ import annotations

import io
import subprocess
import sys
import time
from threading import Thread

from django_processoutput.process_utils import join_line_readers, read_lines, start_line_reader
from django_processoutput.sinks import BufferingSink


class _BrokenStream(io.IOBase):
    def readable(self) -> bool:
        return True

    def read1(self, size: int = -1) -> bytes:
        raise OSError("read failed")


class _FailingAfterStream(io.IOBase):
    """Yields some chunks, then fails as a killed process's pipe would."""

    def __init__(self, chunks: list[bytes]):
        self._chunks = list(chunks)

    def readable(self) -> bool:
        return True

    def read1(self, size: int = -1) -> bytes:
        if self._chunks:
            return self._chunks.pop(0)
        raise ValueError("I/O operation on closed file.")


class _ExplodingSink:
    def __init__(self):
        self.seen: list[str] = []

    def add_line(self, line: str) -> None:
        self.seen.append(line)
        if line == "bad":
            raise RuntimeError("sink failure")


class TestReadLines:
    def test_reads_lines_in_order(self):
        sink = BufferingSink()
        stream = io.BytesIO(b"one\ntwo\nthree\n")

        read_lines(stream, sink, encoding="utf-8")

        assert sink.lines == ["one", "two", "three"]
        assert stream.closed

    def test_final_partial_line_is_delivered(self):
        sink = BufferingSink()

        read_lines(io.BytesIO(b"first\nlast"), sink, encoding="utf-8")

        assert sink.lines == ["first", "last"]

    def test_empty_stream_delivers_nothing(self):
        sink = BufferingSink()

        read_lines(io.BytesIO(b""), sink, encoding="utf-8")

        assert sink.lines == []

    def test_strips_crlf(self):
        sink = BufferingSink()

        read_lines(io.BytesIO(b"a\r\nb\r\n"), sink, encoding="utf-8")

        assert sink.lines == ["a", "b"]

    def test_strips_bare_cr(self):
        sink = BufferingSink()

        read_lines(io.BytesIO(b"10%\r50%\r100%\rdone\n"), sink, encoding="utf-8")

        assert sink.lines == ["10%", "50%", "100%", "done"]

    def test_multibyte_unit_encoding(self):
        sink = BufferingSink()

        read_lines(io.BytesIO("one\ntwo\n".encode("utf-16")), sink, encoding="utf-16")

        assert sink.lines == ["one", "two"]

    def test_strict_decode_failure_drains_stream(self, caplog):
        sink = BufferingSink()
        stream = io.BytesIO(b"ok\n\xff\xfe\nmore\n")

        read_lines(stream, sink, encoding="utf-8", errors="strict")

        assert stream.closed
        assert "discarding the rest of the stream" in caplog.text

    def test_blank_lines_are_kept(self):
        sink = BufferingSink()

        read_lines(io.BytesIO(b"a\n\nb\n"), sink, encoding="utf-8")

        assert sink.lines == ["a", "", "b"]

    def test_decodes_with_given_encoding(self):
        sink = BufferingSink()

        read_lines(io.BytesIO("café\n".encode("latin-1")), sink, encoding="latin-1")

        assert sink.lines == ["café"]

    def test_undecodable_bytes_are_replaced(self):
        sink = BufferingSink()

        read_lines(io.BytesIO(b"ok\xff\n"), sink, encoding="utf-8", errors="replace")

        assert sink.lines == ["ok�"]

    def test_read_error_is_absorbed(self):
        sink = BufferingSink()

        read_lines(_BrokenStream(), sink, encoding="utf-8")  # type: ignore[arg-type]

        assert sink.lines == []

    def test_lines_before_read_error_remain_delivered(self):
        sink = BufferingSink()

        read_lines(_FailingAfterStream([b"a\n", b"b\n"]), sink, encoding="utf-8")  # type: ignore[arg-type]

        assert sink.lines == ["a", "b"]

    def test_sink_failure_does_not_stop_draining(self, caplog):
        sink = _ExplodingSink()

        read_lines(io.BytesIO(b"good\nbad\nafter\n"), sink, encoding="utf-8")

        assert sink.seen == ["good", "bad", "after"]
        assert "failed to accept a line" in caplog.text


class TestStartLineReader:
    def test_reader_runs_on_daemon_thread(self):
        sink = BufferingSink()

        thread = start_line_reader(io.BytesIO(b"x\ny\n"), sink, name="stdout-test", encoding="utf-8")
        thread.join(5)

        assert not thread.is_alive()
        assert thread.daemon
        assert thread.name == "stdout-test"
        assert sink.lines == ["x", "y"]

    def test_broken_stream_thread_terminates_cleanly(self):
        sink = BufferingSink()

        thread = start_line_reader(_BrokenStream(), sink, name="stderr-test", encoding="utf-8")  # type: ignore[arg-type]
        thread.join(5)

        assert not thread.is_alive()

    def test_lines_arrive_before_stream_ends(self):
        script = (
            "import sys, time\n"
            "print('early', flush=True)\n"
            "time.sleep(30)\n"
        )
        proc = subprocess.Popen([sys.executable, "-c", script], stdout=subprocess.PIPE)
        assert proc.stdout is not None
        sink = BufferingSink()
        thread = start_line_reader(proc.stdout, sink, name="stdout-live", encoding="utf-8")
        try:
            deadline = time.monotonic() + 10
            while not sink.lines and time.monotonic() < deadline:
                time.sleep(0.01)
            assert sink.lines == ["early"]
            assert thread.is_alive()
        finally:
            proc.kill()
            proc.wait(timeout=10)
            thread.join(5)
        assert not thread.is_alive()


class TestJoinLineReaders:
    def test_returns_once_all_threads_finish(self):
        threads = [Thread(target=time.sleep, args=(0.1,)), Thread(target=time.sleep, args=(0.2,))]
        for thread in threads:
            thread.start()

        join_line_readers(threads, 0.01)

        assert not any(thread.is_alive() for thread in threads)

    def test_no_threads(self):
        join_line_readers([], 0.01)
