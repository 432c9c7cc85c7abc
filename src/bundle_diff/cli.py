# Author: PB & Claude
# Maintainer: PB
# Original date: 2026.10.18
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# bundle-diff/src/bundle_diff/cli.py

"""Command line interface for bundle-diff."""

import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .build import measure_build
from .config import check_config_path, find_config, load_config
from .errors import BundleDiffError
from .report import print_report
from .snapshot import (
    SnapshotBuilder,
    load_snapshot_file,
    read_project_name,
    write_snapshot_file,
)

app = typer.Typer(help="Project bundle comparison tool")
console = Console()
err_console = Console(stderr=True)


def _setup_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=debug)],
        force=True,
    )


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool = typer.Option(False, "--version", "-V", callback=_version_callback,
                                 is_eager=True, help="Show version and exit"),
) -> None:
    """Compare frontend builds by file size."""


@app.command()
def snapshot(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Path to config file"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o",
        help='Output filepath (default: "bundle_snapshot_<date>_<time>.json")'
    ),
    exec_cmd: Optional[str] = typer.Option(
        None, "--exec", "-e",
        help="Build command (run with NO_HASH=true env variable set)"
    ),
    path: Optional[str] = typer.Option(None, "--path", "-p", help="Build path"),
    skip_build: bool = typer.Option(False, "--skip-build",
                                    help="Measure an existing build without running the build command"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Build project and take snapshot."""
    _setup_logging(debug)
    try:
        config_path = check_config_path(config) if config else find_config()
        settings = load_config(config_path)
        build_command = exec_cmd or settings.build.command
        build_path = path or settings.build.path

        console.print()
        console.print("Taking a snapshot...")

        build_time = None
        if not skip_build:
            with console.status("Build project", spinner_style="yellow"):
                build_time = measure_build(build_command, settings.build.env)

        with console.status("Generate snapshot", spinner_style="yellow"):
            builder = SnapshotBuilder(project_name=read_project_name())
            result = builder.build(build_path, build_time, settings.categories)

        with console.status("Save snapshot", spinner_style="yellow"):
            saved = write_snapshot_file(result, output)

        console.print(f" [green]✔[/green] Done! {saved} has been saved")
        console.print()

    except BundleDiffError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


@app.command()
def diff(
    left: Path = typer.Argument(..., help="Path to left (older) snapshot"),
    right: Path = typer.Argument(..., help="Path to right (newer) snapshot"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """Compare snapshots."""
    _setup_logging(debug)
    try:
        try:
            left_bytes = left.read_bytes()
            right_bytes = right.read_bytes()
        except OSError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)

        if left_bytes == right_bytes:
            console.print("Snapshots are equal")
            raise typer.Exit(0)

        left_snapshot = load_snapshot_file(left)
        right_snapshot = load_snapshot_file(right)
        print_report(console, left_snapshot, right_snapshot, left.stem, right.stem)

    except BundleDiffError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)


def main() -> None:
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
