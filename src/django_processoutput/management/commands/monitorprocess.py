from __future__ import annotations

import os

from django.core.management.base import BaseCommand, CommandError, CommandParser

from django_processoutput.exceptions import InputWriteError, ProcessStartError
from django_processoutput.monitor import ProcessMonitor
from django_processoutput.output import ConsoleOutput
from django_processoutput.spawner import ProcessSpec


class Command(BaseCommand):
    help = "Run a command, echoing its stdout and stderr as they are produced."

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument("command", nargs="+", help="Command to run, followed by its arguments.")
        parser.add_argument(
            "--input",
            default=None,
            help="Text written to the command's stdin before it is closed.",
        )
        parser.add_argument(
            "-e",
            "--env",
            action="append",
            default=[],
            metavar="KEY=VALUE",
            help="Set an environment variable for the command (repeatable).",
        )

    def handle(self, *args: object, **options: object) -> None:
        command = [str(token) for token in options["command"]]  # type: ignore[attr-defined]
        input_text = options["input"]
        verbosity = int(options["verbosity"])  # type: ignore[arg-type]
        env = self._parse_env(options["env"])  # type: ignore[arg-type]

        spec = ProcessSpec(
            argv=command,
            env=env,
            input=str(input_text) if input_text is not None else None,
        )
        monitor = ProcessMonitor(ConsoleOutput(stdout=self.stdout, stderr=self.stderr))

        try:
            result = monitor.monitor(spec)
        except ProcessStartError as exc:
            self.stderr.write(str(exc))
            raise SystemExit(exc.returncode) from exc
        except InputWriteError as exc:
            self.stderr.write(str(exc))
            raise SystemExit(1) from exc

        if not result.success:
            self.stderr.write(f"Process failed: {result}")
            raise SystemExit(1)

        if verbosity >= 1:
            self.stdout.write(self.style.SUCCESS(f"Process completed: {result}"))

    @staticmethod
    def _parse_env(assignments: list[str]) -> dict[str, str] | None:
        if not assignments:
            return None
        env = dict(os.environ)
        for assignment in assignments:
            key, sep, value = assignment.partition("=")
            if not sep or not key:
                raise CommandError(f"Invalid environment assignment '{assignment}', expected KEY=VALUE.")
            env[key] = value
        return env
