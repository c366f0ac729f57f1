import io
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
from rich.console import Console

from dcm.app_config import AppConfig
from dcm.app_state import AppState
from dcm.libs.classes.dcm import Dcm
from dcm.libs.classes.errors import CommandError
from dcm.libs.classes.runner import Command, Runner


@dataclass
class FakeRunner(Runner):
    """Records commands; fails or answers according to the configured argv tables."""

    outputs: dict[tuple[str, ...], str] = field(default_factory=dict)
    failures: dict[tuple[str, ...], str] = field(default_factory=dict)
    calls: list[Command] = field(default_factory=list)

    def _check(self, command: Command) -> None:
        self.calls.append(command)
        argv = tuple(command.argv())
        if argv in self.failures:
            raise CommandError("exit status 1", self.failures[argv])

    def run(self, command: Command) -> None:
        self._check(command)

    def output(self, command: Command) -> str:
        self._check(command)
        return self.outputs.get(tuple(command.argv()), "")

    def argvs(self) -> list[list[str]]:
        return [c.argv() for c in self.calls]


@dataclass
class DcmHarness:
    dcm: Dcm
    runner: FakeRunner
    out: io.StringIO
    err: io.StringIO


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    return AppConfig(dir=tmp_path, project="dcmtest")


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def make_dcm(app_config: AppConfig, runner: FakeRunner) -> Callable[..., DcmHarness]:
    def factory(services: Mapping[Any, Any]) -> DcmHarness:
        out = io.StringIO()
        err = io.StringIO()
        dcm = Dcm(
            AppState(app_config=app_config, services=services),
            runner,
            console=Console(file=out, width=200),
            err_console=Console(file=err, width=200),
        )
        return DcmHarness(dcm=dcm, runner=runner, out=out, err=err)

    return factory
