"""Command-line interface primitives for :mod:`react_boundary`.

This module exposes the Typer application behind the ``react-boundary``
console script.

Example:
    >>> import typer
    >>> from react_boundary.cli import create_app
    >>> app = create_app()
    >>> isinstance(app, typer.Typer)
    True
"""

from __future__ import annotations

from pathlib import Path

import typer

from react_boundary.cli.analyze import analyze_command
from react_boundary.cli.common import resolve_app_config
from react_boundary.core.config import render_config

_app_help = (
    "Classify the client/server boundary of React-style modules."
    "\n\n"
    "Use `react-boundary analyze PATH...` to report client directives, "
    "exported components, imports and imported markup usages."
)


def create_app() -> "typer.Typer":
    """Return the Typer application powering the ``react-boundary`` CLI.

    Returns:
        A configured Typer application ready to be invoked.
    """

    app = typer.Typer(
        help=_app_help,
        no_args_is_help=True,
        rich_markup_mode="rich",
        invoke_without_command=False,
        cls=typer.core.TyperGroup,
    )

    @app.callback()
    def main_callback() -> None:
        """Top-level CLI callback ensuring subcommands are dispatched."""

        return None

    app.command(
        "analyze",
        help="Analyze source files and print the boundary report.",
    )(analyze_command)

    @app.command(
        "config",
        help="Print the effective configuration as TOML.",
    )
    def config_command(
        config_path: Path | None = typer.Option(
            None,
            "--config",
            "-c",
            help="TOML configuration file (or REACT_BOUNDARY_CONFIG).",
        ),
        log_level: str | None = typer.Option(
            None,
            "--log-level",
            "-l",
            help="Override the logging level shown in the output.",
        ),
    ) -> None:
        """Render the merged defaults, file, env and CLI layers.

        Example:
            >>> from typer.testing import CliRunner
            >>> result = CliRunner().invoke(create_app(), ["config"])
            >>> result.exit_code
            0
        """

        config = resolve_app_config(
            config_path=config_path,
            cli_overrides={"log_level": log_level},
        )
        typer.echo(render_config(config), nl=False)

    return app


__all__ = ["create_app"]
