"""Configuration models and loaders for :mod:`react_boundary`."""

from __future__ import annotations

from collections.abc import Mapping as MappingABC
from enum import StrEnum
from pathlib import Path
from typing import Any, Literal, Mapping

import tomllib
import tomlkit
from pydantic import BaseModel, Field, field_validator, model_validator

from react_boundary.resources import get_resource

ConcurrencyValue = int | Literal["auto"]

ENV_LOG_LEVEL = "REACT_BOUNDARY_LOG_LEVEL"
ENV_CONFIG_PATH = "REACT_BOUNDARY_CONFIG"


class OutputFormat(StrEnum):
    """Supported CLI output renderings."""

    JSON = "json"
    TEXT = "text"


def _dedupe(values: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(value.strip() for value in values if value))


class AnalyzerSettings(BaseModel):
    """Names and conventions the boundary heuristics match against."""

    client_directive: str = Field(
        default="use client",
        description="Directive literal that marks a module as client-side.",
    )
    runtime_modules: tuple[str, ...] = Field(
        default=("react/jsx-runtime", "react/jsx-dev-runtime"),
        description=(
            "Module specifiers whose imports bind compiled markup factories."
        ),
    )
    component_type_names: tuple[str, ...] = Field(
        default=(
            "FC",
            "FunctionComponent",
            "VFC",
            "ReactElement",
            "ReactNode",
            "Component",
        ),
        description="Type names that mark an annotated binding as a component.",
    )
    runtime_factory_properties: tuple[str, ...] = Field(
        default=("jsx", "jsxs", "jsxDEV", "Fragment", "createElement"),
        description=(
            "Member names recognized on runtime objects, e.g. ``rt.jsx(...)``."
        ),
    )
    hoc_callees: tuple[str, ...] = Field(
        default=("forwardRef", "memo"),
        description="Wrapper calls whose first argument is a component body.",
    )
    registration_callee: str = Field(
        default="__export",
        description="Bundler helper that registers a module's exports.",
    )
    position_encoding: Literal["codepoint", "utf-16"] = Field(
        default="codepoint",
        description=(
            "Unit for character offsets: Unicode scalar values or UTF-16 "
            "code units."
        ),
    )

    model_config = {
        "frozen": True,
        "str_strip_whitespace": True,
    }

    @field_validator(
        "runtime_modules",
        "component_type_names",
        "runtime_factory_properties",
        "hoc_callees",
    )
    @classmethod
    def _normalize_names(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        return _dedupe(value)

    @field_validator("client_directive", "registration_callee")
    @classmethod
    def _require_text(cls, value: str) -> str:
        if not value:
            raise ValueError("Value cannot be blank.")
        return value


class AppConfig(BaseModel):
    """Root configuration for the :mod:`react_boundary` application."""

    log_level: str = Field(
        default="INFO",
        description="Default logging level for the application runtime.",
    )
    max_concurrency: ConcurrencyValue = Field(
        default="auto",
        description=(
            "Number of files analyzed concurrently or 'auto' for dynamic"
            " selection."
        ),
    )
    output_format: OutputFormat = Field(
        default=OutputFormat.JSON,
        description="Default rendering for analysis results.",
    )
    analyzer: AnalyzerSettings = Field(
        default_factory=AnalyzerSettings,
        description="Heuristic names and position conventions.",
    )

    model_config = {
        "str_strip_whitespace": True,
        "validate_assignment": True,
    }

    @field_validator("max_concurrency")
    @classmethod
    def _validate_max_concurrency(
        cls,
        value: ConcurrencyValue,
    ) -> ConcurrencyValue:
        if isinstance(value, str):
            normalized = value.strip().lower()
            if normalized != "auto":
                raise ValueError(
                    "max_concurrency must be a positive integer or 'auto'."
                )
            return "auto"
        if value < 1:
            raise ValueError(
                "max_concurrency must be >= 1 when provided as an integer."
            )
        return value

    @model_validator(mode="after")
    def _post_process(self) -> "AppConfig":
        """Normalize fields after validation."""

        object.__setattr__(self, "log_level", self.log_level.upper())
        return self


DEFAULTS_RESOURCE_NAME = "react_boundary.defaults.toml"


def read_packaged_defaults_text() -> str:
    """Return the raw packaged defaults TOML content.

    Example:
        >>> text = read_packaged_defaults_text()
        >>> text.startswith("#")
        True
    """

    resource = get_resource(DEFAULTS_RESOURCE_NAME)
    return resource.read_text(encoding="utf-8")


def load_packaged_defaults() -> dict[str, Any]:
    """Load the packaged defaults as a plain dictionary.

    Example:
        >>> defaults = load_packaged_defaults()
        >>> defaults["log_level"]
        'INFO'
    """

    text = read_packaged_defaults_text()
    data: dict[str, Any] = tomllib.loads(text)
    return data


def read_user_config(path: Path) -> dict[str, Any]:
    """Parse a user TOML file.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        tomllib.TOMLDecodeError: If the file is not valid TOML.
    """

    with path.expanduser().open("rb") as handle:
        return tomllib.load(handle)


def env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    """Extract configuration overrides from environment variables."""

    overrides: dict[str, Any] = {}
    level = environ.get(ENV_LOG_LEVEL)
    if level:
        overrides["log_level"] = level
    return overrides


def _deep_merge(
    base: Mapping[str, Any],
    overlay: Mapping[str, Any],
) -> dict[str, Any]:
    """Recursively merge ``overlay`` into ``base`` returning a new dict."""

    merged: dict[str, Any] = dict(base)
    for key, value in overlay.items():
        if (
            key in merged
            and isinstance(merged[key], MappingABC)
            and isinstance(value, MappingABC)
        ):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(
    *,
    defaults: Mapping[str, Any],
    user_config: Mapping[str, Any] | None = None,
    env_config: Mapping[str, Any] | None = None,
    cli_overrides: Mapping[str, Any] | None = None,
) -> AppConfig:
    """Load configuration according to the precedence stack.

    Args:
        defaults: Packaged defaults shipped with the application.
        user_config: Parsed user TOML content.
        env_config: Settings derived from environment variables.
        cli_overrides: Settings supplied via CLI flags.

    Returns:
        A validated :class:`AppConfig` instance.

    Raises:
        pydantic.ValidationError: If the merged values are invalid.
    """

    stack = dict(defaults)
    for layer in (user_config, env_config, cli_overrides):
        if layer:
            stack = _deep_merge(stack, layer)
    return AppConfig(**stack)


def render_config(
    config: AppConfig,
    *,
    include_comments: bool = True,
) -> str:
    """Render ``config`` as TOML.

    Args:
        config: Configuration instance to serialize.
        include_comments: Whether to prepend precedence commentary.

    Returns:
        A TOML-formatted string that :func:`load_config` accepts back.
    """

    document = tomlkit.document()

    if include_comments:
        document.add(tomlkit.comment("Effective react-boundary configuration"))
        document.add(
            tomlkit.comment(
                "Precedence: CLI flags > env vars > config file > defaults"
            )
        )
        document.add(tomlkit.comment("Environment overrides:"))
        document.add(tomlkit.comment(f"  {ENV_LOG_LEVEL}=debug"))
        document.add(tomlkit.comment(f"  {ENV_CONFIG_PATH}=/path/to/file.toml"))
        document.add(tomlkit.nl())

    document["log_level"] = config.log_level
    document["max_concurrency"] = config.max_concurrency
    document["output_format"] = config.output_format.value

    analyzer = config.analyzer
    analyzer_table = tomlkit.table()
    analyzer_table["client_directive"] = analyzer.client_directive
    analyzer_table["runtime_modules"] = list(analyzer.runtime_modules)
    analyzer_table["component_type_names"] = list(
        analyzer.component_type_names
    )
    analyzer_table["runtime_factory_properties"] = list(
        analyzer.runtime_factory_properties
    )
    analyzer_table["hoc_callees"] = list(analyzer.hoc_callees)
    analyzer_table["registration_callee"] = analyzer.registration_callee
    analyzer_table["position_encoding"] = analyzer.position_encoding
    document["analyzer"] = analyzer_table

    return tomlkit.dumps(document)


__all__ = [
    "AnalyzerSettings",
    "AppConfig",
    "ConcurrencyValue",
    "DEFAULTS_RESOURCE_NAME",
    "ENV_CONFIG_PATH",
    "ENV_LOG_LEVEL",
    "OutputFormat",
    "env_overrides",
    "load_config",
    "load_packaged_defaults",
    "read_packaged_defaults_text",
    "read_user_config",
    "render_config",
]
