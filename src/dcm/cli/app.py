import logging

import click
import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from typer.core import TyperCommand

from dcm.app_config import load_app_config
from dcm.app_state import AppState
from dcm.libs.classes.dcm import Dcm
from dcm.libs.classes.errors import DcmError
from dcm.libs.classes.runner import SubprocessRunner

RAW_ARGS = "dcm.raw_args"

app = typer.Typer(add_completion=False)
console = Console(stderr=True, emoji=False)


class RawArgsCommand(TyperCommand):
    """Keeps the tokens exactly as given, ``--`` included."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.meta[RAW_ARGS] = list(args)
        return super().parse_args(ctx, args)


def _print_error(error: Exception) -> None:
    console.print(
        str(error),
        style="bold red",
        markup=False,
        emoji=False,
        highlight=False,
        soft_wrap=True,
    )


@app.command(
    cls=RawArgsCommand,
    context_settings={
        "allow_extra_args": True,
        "ignore_unknown_options": True,
        "help_option_names": [],
    },
)
def main(
    ctx: typer.Context,
    args: list[str] | None = typer.Argument(
        None,
        help="Sub-command and its arguments, see `dcm help`.",
    ),
):
    try:
        app_config = load_app_config()
    except ValidationError as e:
        _print_error(e)
        raise typer.Exit(code=1) from e

    logging.basicConfig(
        level=app_config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )

    try:
        app_state = AppState.load(app_config)
    except DcmError as e:
        _print_error(e)
        raise typer.Exit(code=1) from e

    dcm = Dcm(app_state, SubprocessRunner(), err_console=console)
    result = dcm.command(ctx.meta.get(RAW_ARGS, args or []))

    if result.error is not None:
        _print_error(result.error)

    raise typer.Exit(code=result.code)
