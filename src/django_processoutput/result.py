from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ProcessResult:
    """Outcome of one monitoring run.

    ``stdout_lines`` and ``stderr_lines`` are only populated when the output was
    collected; streaming and console runs leave them as ``None``.
    """

    command: tuple[str, ...]
    environment: dict[str, str] | None = field(hash=False)
    exit_code: int
    stdout_lines: tuple[str, ...] | None = None
    stderr_lines: tuple[str, ...] | None = None
    line_separator: str = "\n"

    @property
    def success(self) -> bool:
        return self.exit_code == 0

    @property
    def stdout(self) -> str | None:
        if self.stdout_lines is None:
            return None
        return self.line_separator.join(self.stdout_lines)

    @property
    def stderr(self) -> str | None:
        if self.stderr_lines is None:
            return None
        return self.line_separator.join(self.stderr_lines)

    def __str__(self) -> str:
        return f"exit code={self.exit_code}"
