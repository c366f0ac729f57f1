import logging
import os
import shlex
import subprocess  # noqa: S404
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dcm.libs.classes.errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Command:
    program: str
    args: tuple[str, ...] = ()
    cwd: Path | None = None
    env: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def of(
        cls,
        program: str,
        *args: str,
        cwd: Path | None = None,
        env: Mapping[str, str] | None = None,
    ) -> "Command":
        return cls(program=program, args=tuple(args), cwd=cwd, env=dict(env or {}))

    def argv(self) -> list[str]:
        return [self.program, *self.args]

    def __str__(self) -> str:
        return shlex.join(self.argv())


class Runner(ABC):
    @abstractmethod
    def run(self, command: Command) -> None:
        """Run with the standard streams of the current process."""

    @abstractmethod
    def output(self, command: Command) -> str:
        """Run and return the combined stdout and stderr."""


@dataclass
class SubprocessRunner(Runner):
    def _environ(self, command: Command) -> dict[str, str] | None:
        if not command.env:
            return None
        return {**os.environ, **command.env}

    def _execute(self, command: Command, *, capture: bool) -> str:
        logger.debug("Running '%s' in %s", command, command.cwd or Path.cwd())

        try:
            completed = subprocess.run(  # noqa: S603
                command.argv(),
                cwd=command.cwd,
                env=self._environ(command),
                stdout=subprocess.PIPE if capture else None,
                stderr=subprocess.STDOUT if capture else None,
                text=True,
                check=False,
            )
        except OSError as e:
            raise CommandError(str(e)) from e

        output = completed.stdout or ""
        if completed.returncode != 0:
            raise CommandError(f"exit status {completed.returncode}", output)

        return output

    def run(self, command: Command) -> None:
        self._execute(command, capture=False)

    def output(self, command: Command) -> str:
        return self._execute(command, capture=True)
