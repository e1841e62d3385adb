from __future__ import annotations

import logging
import subprocess
from collections.abc import Mapping, Sequence
from contextlib import suppress

from .exceptions import InputWriteError
from .output import CollectingOutput, OutputStrategy
from .process_utils import join_line_readers, start_line_reader
from .result import ProcessResult
from .settings import get_encoding, get_setting
from .signals import post_process_monitor, pre_process_monitor
from .sinks import BufferingSink
from .spawner import ProcessSpec, spawn

logger = logging.getLogger(__name__)


class ProcessMonitor:
    """Runs a process while draining stdout and stderr on their own threads.

    Both readers are started before anything can block on the process: stdin
    writes and the exit wait both come after, so a child that fills one pipe
    while nothing reads it can never stall the run.

    A monitor can be reused for several runs one after another, but not for
    concurrent runs.
    """

    def __init__(
        self,
        output: OutputStrategy | None = None,
        *,
        poll_interval: float | None = None,
        encoding: str | None = None,
    ):
        self.output = output if output is not None else CollectingOutput()
        self.poll_interval = poll_interval
        self.encoding = encoding
        self._command: tuple[str, ...] = ()
        self._environment: dict[str, str] | None = None
        self._process: subprocess.Popen[bytes] | None = None
        self._result: ProcessResult | None = None

    def monitor(self, spec: ProcessSpec) -> ProcessResult:
        """Start the process described by ``spec`` and monitor it to completion."""
        process = spawn(spec)
        return self.monitor_process(process, spec.argv, environment=spec.env, input=spec.input)

    def monitor_process(
        self,
        process: subprocess.Popen[bytes],
        command: str | Sequence[str],
        environment: Mapping[str, str] | None = None,
        input: str | None = None,
    ) -> ProcessResult:
        """Monitor an already started process until it exits and its output is drained.

        Raises ``InputWriteError`` if ``input`` cannot be written; the process is
        left running in that case and is available as the error's ``process``.
        """
        command = (command,) if isinstance(command, str) else tuple(command)
        environment = dict(environment) if environment is not None else None
        self._command = command
        self._environment = environment

        poll_interval = self.poll_interval
        if poll_interval is None:
            poll_interval = float(get_setting("POLL_INTERVAL"))  # type: ignore[arg-type]
        encoding = self.encoding or get_encoding()
        errors = str(get_setting("ENCODING_ERRORS"))

        logger.debug("Monitoring process pid=%s argv0=%s", process.pid, command[0] if command else "")

        try:
            self._process = process
            pre_process_monitor.send(sender=self.__class__, command=command, environment=environment)
            stdout_sink, stderr_sink = self.output.open_sinks()
            readers = []
            if process.stderr is not None:
                readers.append(
                    start_line_reader(
                        process.stderr, stderr_sink, name=f"stderr-{process.pid}", encoding=encoding, errors=errors
                    )
                )
            if process.stdout is not None:
                readers.append(
                    start_line_reader(
                        process.stdout, stdout_sink, name=f"stdout-{process.pid}", encoding=encoding, errors=errors
                    )
                )

            if input is not None:
                self._write_input(process, command, input, encoding)

            exit_code = process.wait()
            logger.debug("Process pid=%s exited with code %s, draining output", process.pid, exit_code)
            join_line_readers(readers, poll_interval)
        finally:
            self._process = None

        result = self._build_result(command, environment, exit_code, stdout_sink, stderr_sink)
        self._result = result
        post_process_monitor.send(sender=self.__class__, result=result)
        return result

    def destroy(self) -> None:
        """Terminate the running process, if any.

        An in-flight ``monitor`` call then sees the process exit and finishes
        draining as usual.
        """
        process = self._process
        if process is None:
            return
        logger.debug("Terminating process pid=%s", process.pid)
        process.terminate()

    @staticmethod
    def _write_input(process: subprocess.Popen[bytes], command: tuple[str, ...], input: str, encoding: str) -> None:
        if process.stdin is None:
            raise InputWriteError(command, "Process has no stdin pipe.", process=process)
        try:
            process.stdin.write(input.encode(encoding))
            process.stdin.close()
        except (OSError, ValueError) as exc:
            with suppress(OSError, ValueError):
                process.stdin.close()
            raise InputWriteError(command, str(exc), process=process) from exc

    @staticmethod
    def _build_result(
        command: tuple[str, ...],
        environment: dict[str, str] | None,
        exit_code: int,
        stdout_sink: object,
        stderr_sink: object,
    ) -> ProcessResult:
        if isinstance(stdout_sink, BufferingSink) and isinstance(stderr_sink, BufferingSink):
            return ProcessResult(
                command=command,
                environment=environment,
                exit_code=exit_code,
                stdout_lines=tuple(stdout_sink.lines),
                stderr_lines=tuple(stderr_sink.lines),
                line_separator=stdout_sink.line_separator,
            )
        return ProcessResult(command=command, environment=environment, exit_code=exit_code)

    @property
    def process(self) -> subprocess.Popen[bytes] | None:
        return self._process

    @property
    def command(self) -> tuple[str, ...]:
        return self._command

    @property
    def environment(self) -> dict[str, str] | None:
        return self._environment

    @property
    def result(self) -> ProcessResult | None:
        return self._result

    @property
    def exit_code(self) -> int:
        return self._result.exit_code if self._result is not None else 0

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    def __str__(self) -> str:
        return f"exit code={self.exit_code}"
