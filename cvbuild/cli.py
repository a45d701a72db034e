"""Thin CLI wrapper for cvbuild.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import logging
import shlex
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from typer.core import TyperGroup

from cvbuild import __version__
from cvbuild.config import get_settings, print_settings_json

USAGE = (
    "Usage: cvbuild build [--version=<version>] [--dry-run] [--flags=<flags>] "
    "[--cuda] [--nocontrib] [--nobuild] [--jobs=<n>]"
)
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

console = Console()


def _echo(text: str = "") -> None:
    """Print plain text without markup, highlighting or wrapping."""
    console.print(text, markup=False, highlight=False, soft_wrap=True)


class UsageGroup(TyperGroup):
    """Command group that prints the usage line when no command is named.

    Options given before the command name are moved after it, so
    ``cvbuild --dry-run build`` behaves like ``cvbuild build --dry-run``.
    """

    def parse_args(self, ctx: typer.Context, args: list[str]) -> list[str]:
        group_options = {*ctx.help_option_names, "--version", "-V"}
        for index, arg in enumerate(args):
            if arg in group_options:
                break
            if arg in self.commands:
                if index:
                    args = [arg, *args[:index], *args[index + 1 :]]
                break
        else:
            _echo(USAGE)
            ctx.exit(0)
        return super().parse_args(ctx, args)


app = typer.Typer(
    name="cvbuild",
    help="cvbuild - build native OpenCV bindings",
    cls=UsageGroup,
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"cvbuild version {__version__}")
        raise typer.Exit()


def jobs_callback(value: str) -> str:
    """Validate --jobs: 'max' or a positive integer."""
    if value == "max":
        return value
    if not value.isdigit() or int(value) < 1:
        raise typer.BadParameter("must be 'max' or a positive integer")
    return str(int(value))


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """cvbuild - build native OpenCV bindings."""


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        _echo(print_settings_json(settings))
        return

    def show(value: object) -> str:
        return escape(str(value)) if value else "(not set)"

    console.print("[bold]Effective Configuration:[/bold]")
    console.print()
    console.print("[bold]OpenCV:[/bold]")
    console.print(f"  Lib dir:             {show(settings.opencv_lib_dir)}")
    console.print(f"  Include dir:         {show(settings.opencv_include_dir)}")
    console.print(f"  Build root:          {show(settings.opencv_build_root)}")
    console.print(f"  Version:             {show(settings.opencv_version)}")
    console.print(f"  Auto build disabled: {settings.autobuild_disabled}")
    console.print()
    console.print("[bold]Build tool:[/bold]")
    console.print(f"  Project directory:   {show(settings.project_dir)}")
    console.print(f"  Build command:       {show(settings.build_command)}")
    console.print(f"  Install command:     {show(settings.install_command)}")
    console.print(f"  Descriptor:          {show(settings.hidden_descriptor)}")
    console.print(f"  Debug build:         {settings.debug_build}")
    console.print()
    console.print("[bold]Operational:[/bold]")
    console.print(f"  Log level:           {settings.log_level}")


@app.command()
def build(
    version: Annotated[
        str | None,
        typer.Option("--version", help="OpenCV version to auto-build"),
    ] = None,
    flags: Annotated[
        str | None,
        typer.Option("--flags", help="Extra flags for the OpenCV auto-build"),
    ] = None,
    cuda: Annotated[
        bool,
        typer.Option("--cuda", help="Auto-build OpenCV with CUDA"),
    ] = False,
    nocontrib: Annotated[
        bool,
        typer.Option("--nocontrib", help="Auto-build OpenCV without contrib"),
    ] = False,
    nobuild: Annotated[
        bool,
        typer.Option("--nobuild", help="Use an installed OpenCV, do not auto-build"),
    ] = False,
    jobs: Annotated[
        str,
        typer.Option(
            "--jobs", "-j", help="Parallel build jobs", callback=jobs_callback
        ),
    ] = "max",
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run", "--dryrun", help="Print the build setup, do not build"
        ),
    ] = False,
) -> None:
    """Build the native OpenCV bindings.

    Resolves the OpenCV include and library directories, derives the
    defines, includes and link arguments, and runs the native build tool.
    """
    from cvbuild.builds.service import compile_lib
    from cvbuild.errors import CvBuildError
    from cvbuild.types import BuildOptions

    options = BuildOptions(
        version=version,
        flags=flags,
        cuda=cuda,
        no_contrib=nocontrib,
        no_build=nobuild,
        jobs=jobs,
        dry_run=dry_run,
    )
    settings = get_settings()
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    try:
        outcome = compile_lib(options, settings=settings)
    except CvBuildError as e:
        console.print(f"[red]Error \\[{e.code}]: {escape(e.message)}[/red]")
        raise typer.Exit(code=1) from None

    if outcome.dry_run:
        _echo()
        for line in outcome.flags.export_lines():
            _echo(line)
        _echo()
        _echo(shlex.join(outcome.command))
        _echo()
    else:
        console.print("[green]Build completed with no error[/green]")


if __name__ == "__main__":
    app()
