"""``react-boundary analyze`` command."""

from __future__ import annotations

import concurrent.futures
from dataclasses import dataclass
import json
import os
from pathlib import Path
from typing import Any, Sequence

import typer

from react_boundary.analysis import AnalysisError, AnalysisResult
from react_boundary.analysis.service import BoundaryAnalyzer
from react_boundary.cli.common import resolve_app_config
from react_boundary.core.config import ConcurrencyValue, OutputFormat
from react_boundary.core.logging import configure_logging, get_logger


@dataclass(slots=True)
class FileOutcome:
    """Analysis result or failure message for one input path."""

    path: Path
    result: AnalysisResult | None = None
    error: str | None = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"path": str(self.path)}
        if self.result is not None:
            payload["result"] = self.result.to_dict()
        if self.error is not None:
            payload["error"] = self.error
        return payload


def resolve_concurrency(
    setting: ConcurrencyValue,
    *,
    target_count: int,
) -> int:
    """Return the worker count for ``target_count`` files.

    Example:
        >>> resolve_concurrency(8, target_count=3)
        3
    """

    if target_count <= 0:
        return 0
    if isinstance(setting, int):
        return max(1, min(setting, target_count))
    cpu_count = os.cpu_count() or 1
    return max(1, min(cpu_count, target_count))


def analyze_file(
    analyzer: BoundaryAnalyzer,
    path: Path,
    *,
    extension: str | None = None,
) -> FileOutcome:
    """Analyze ``path``; failures become part of the outcome."""

    try:
        content = path.read_bytes()
    except OSError as exc:
        get_logger(__name__, path=str(path)).error(
            "analysis-read-failed", error=str(exc)
        )
        return FileOutcome(path=path, error=f"Failed to read file: {exc}")

    try:
        result = analyzer.analyze(content, extension or path.suffix)
    except AnalysisError as exc:
        return FileOutcome(path=path, error=str(exc))
    return FileOutcome(path=path, result=result)


def run_analysis(
    paths: Sequence[Path],
    *,
    analyzer: BoundaryAnalyzer,
    extension: str | None = None,
    concurrency: int = 1,
) -> list[FileOutcome]:
    """Analyze ``paths`` and return outcomes in input order."""

    if concurrency <= 1 or len(paths) <= 1:
        return [
            analyze_file(analyzer, path, extension=extension) for path in paths
        ]

    with concurrent.futures.ThreadPoolExecutor(
        max_workers=concurrency,
        thread_name_prefix="analyze",
    ) as executor:
        return list(
            executor.map(
                lambda path: analyze_file(
                    analyzer, path, extension=extension
                ),
                paths,
            )
        )


def _format_position(position: Any) -> str:
    return f"{position.line + 1}:{position.character + 1}"


def render_text(outcome: FileOutcome) -> None:
    """Echo a human summary of one outcome."""

    result = outcome.result
    if outcome.error is not None or result is None:
        typer.secho(f"{outcome.path}", fg=typer.colors.RED, bold=True)
        typer.secho(f"  error: {outcome.error}", fg=typer.colors.RED)
        return

    marker = "client" if result.is_client_module else "server"
    typer.secho(f"{outcome.path} [{marker}]", bold=True)

    typer.echo(f"  imports: {len(result.imports)}")
    for record in result.imports:
        names = ", ".join(record.identifiers) or "side effect"
        typer.echo(f"    {record.source} ({names})")

    typer.echo(f"  components: {len(result.components)}")
    for component in result.components:
        location = (
            f" at {_format_position(component.range.start)}"
            if component.range is not None
            else ""
        )
        typer.echo(f"    {component.name} ({component.export_kind}){location}")

    typer.echo(f"  markup usages: {len(result.jsx_usages)}")
    for usage in result.jsx_usages:
        location = (
            f" at {_format_position(usage.range.start)}"
            if usage.range is not None
            else ""
        )
        typer.echo(f"    {usage.component_name}{location}")


def analyze_command(
    paths: list[Path] = typer.Argument(
        ...,
        metavar="PATH...",
        help="Source files to analyze.",
    ),
    extension: str | None = typer.Option(
        None,
        "--extension",
        "-x",
        help="Treat every file as this extension (defaults to each suffix).",
    ),
    output_format: OutputFormat | None = typer.Option(
        None,
        "--format",
        "-f",
        case_sensitive=False,
        help="Output rendering (json or text).",
    ),
    log_level: str | None = typer.Option(
        None,
        "--log-level",
        "-l",
        help="Override the logging level (DEBUG/INFO/WARNING/ERROR).",
    ),
    log_file: Path | None = typer.Option(
        None,
        "--log-file",
        help="Also write JSON-lines logs to this file.",
    ),
    config_path: Path | None = typer.Option(
        None,
        "--config",
        "-c",
        help="TOML configuration file (or REACT_BOUNDARY_CONFIG).",
    ),
    jobs: int | None = typer.Option(
        None,
        "--jobs",
        "-j",
        min=1,
        help="Number of files analyzed concurrently.",
    ),
) -> None:
    """Classify the client/server boundary of each file.

    Exits with status 1 when any file cannot be analyzed.
    """

    config = resolve_app_config(
        config_path=config_path,
        cli_overrides={
            "log_level": log_level,
            "output_format": output_format,
            "max_concurrency": jobs,
        },
    )

    try:
        configure_logging(level=config.log_level, log_file=log_file)
    except ValueError as exc:
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc
    logger = get_logger(__name__, command="analyze")

    analyzer = BoundaryAnalyzer(config.analyzer)
    concurrency = resolve_concurrency(
        config.max_concurrency, target_count=len(paths)
    )
    outcomes = run_analysis(
        paths,
        analyzer=analyzer,
        extension=extension,
        concurrency=concurrency,
    )

    if config.output_format is OutputFormat.JSON:
        document = {"files": [outcome.to_dict() for outcome in outcomes]}
        typer.echo(json.dumps(document, indent=2))
    else:
        for outcome in outcomes:
            render_text(outcome)

    failures = [outcome for outcome in outcomes if outcome.failed]
    logger.debug(
        "analyze-complete",
        files=len(outcomes),
        failures=len(failures),
        concurrency=concurrency,
    )
    if failures:
        raise typer.Exit(code=1)


__all__ = [
    "FileOutcome",
    "analyze_command",
    "analyze_file",
    "render_text",
    "resolve_concurrency",
    "run_analysis",
]
