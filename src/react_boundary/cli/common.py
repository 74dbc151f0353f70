"""Configuration plumbing shared by CLI commands."""

from __future__ import annotations

import os
from pathlib import Path
import tomllib
from typing import Any, Mapping

from pydantic import ValidationError
import typer

from react_boundary.core.config import (
    ENV_CONFIG_PATH,
    AppConfig,
    env_overrides,
    load_config,
    load_packaged_defaults,
    read_user_config,
)


def resolve_app_config(
    *,
    config_path: Path | None,
    cli_overrides: Mapping[str, Any] | None = None,
    environ: Mapping[str, str] | None = None,
) -> AppConfig:
    """Build the effective configuration or exit with a red message.

    ``config_path`` wins over ``REACT_BOUNDARY_CONFIG``; both are optional.
    """

    env = os.environ if environ is None else environ
    if config_path is None and env.get(ENV_CONFIG_PATH):
        config_path = Path(env[ENV_CONFIG_PATH])

    user_config: dict[str, Any] | None = None
    if config_path is not None:
        try:
            user_config = read_user_config(config_path)
        except FileNotFoundError as exc:
            typer.secho(
                f"Config file not found: {config_path}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc
        except (OSError, tomllib.TOMLDecodeError) as exc:
            typer.secho(
                f"Failed to read config {config_path}: {exc}",
                fg=typer.colors.RED,
                err=True,
            )
            raise typer.Exit(code=1) from exc

    overrides = {
        key: value
        for key, value in (cli_overrides or {}).items()
        if value is not None
    }
    try:
        return load_config(
            defaults=load_packaged_defaults(),
            user_config=user_config,
            env_config=env_overrides(env),
            cli_overrides=overrides,
        )
    except ValidationError as exc:
        typer.secho(
            f"Invalid configuration: {exc}",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1) from exc


__all__ = ["resolve_app_config"]
