"""End-to-end tests for :func:`react_boundary.analysis.analyze`."""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path
from textwrap import dedent

import pytest
from rich.console import Console

from react_boundary.analysis import (
    AnalysisError,
    BoundaryAnalyzer,
    SourceParseError,
    UnsupportedExtensionError,
    analyze,
)
from react_boundary.analysis.positions import Position, Range
from react_boundary.analysis.syntax import Span
from react_boundary.core.config import AnalyzerSettings
from react_boundary.core.logging import configure_logging


def _source(text: str) -> bytes:
    return dedent(text).encode("utf-8")


def test_default_export_of_arrow_component() -> None:
    result = analyze(
        b"const Button = () => <button>Click</button>; export default Button;",
        "tsx",
    )

    (component,) = result.components
    assert component.name == "Button"
    assert component.is_client_component is False
    assert component.export_kind == "default"
    assert component.span == Span(6, 12)
    assert component.range == Range(Position(0, 6), Position(0, 12))
    assert result.is_client_module is False


def test_client_directive_marks_every_component() -> None:
    result = analyze(
        _source(
            """\
            "use client";
            export const Button = () => { return <button/>; };
            export const Link = () => { return <a/>; };
            const Card = () => <div/>;
            export default Card;
            """
        ),
        "tsx",
    )

    assert [c.name for c in result.components] == ["Button", "Link", "Card"]
    assert all(c.is_client_component for c in result.components)
    assert result.is_client_module


def test_directive_must_lead_the_module() -> None:
    result = analyze(
        _source(
            """\
            import { x } from "./x";
            "use client";
            export const Button = () => <button/>;
            """
        ),
        "tsx",
    )

    assert not result.is_client_module
    assert not result.components[0].is_client_component


def test_usages_are_filtered_by_imported_identifiers() -> None:
    result = analyze(
        _source(
            """\
            import { Button } from "./c";
            const Local = () => <div/>;
            const App = () => <><Button/><Local/></>;
            export default App;
            """
        ),
        "tsx",
    )

    assert [u.component_name for u in result.jsx_usages] == ["Button"]
    assert [c.name for c in result.components] == ["App"]


def test_invalid_syntax_raises_instead_of_returning_empty_result() -> None:
    with pytest.raises(SourceParseError) as exc:
        analyze(b"export const = <div>;", "tsx")

    assert isinstance(exc.value, AnalysisError)
    assert str(exc.value).startswith("Error: ")


def test_renamed_runtime_import_classifies_component() -> None:
    result = analyze(
        _source(
            """\
            import { jsx as foobar } from "react/jsx-runtime";
            export const X = () => foobar("div", { children: "hi" });
            """
        ),
        "js",
    )

    assert [c.name for c in result.components] == ["X"]


def test_type_only_imports_are_excluded() -> None:
    result = analyze(
        _source(
            """\
            import type { FC } from "react";
            import { type Props, Button } from "./button";
            """
        ),
        "ts",
    )

    (record,) = result.imports
    assert record.identifiers == ("Button",)
    assert "FC" not in result.imported_identifiers


def test_unsupported_extension_raises() -> None:
    with pytest.raises(UnsupportedExtensionError):
        analyze(b"<template></template>", "vue")


def test_client_fixture(fixtures_dir: Path) -> None:
    result = analyze((fixtures_dir / "client.tsx").read_bytes(), "tsx")

    assert result.is_client_module
    assert result.imports == ()
    assert [(c.name, c.export_kind) for c in result.components] == [
        ("ClientComponentNamedExport", "named"),
        ("ClientComponentFunctionExport", "named"),
        ("ClientComponentDefaultExport", "default"),
    ]
    assert all(c.is_client_component for c in result.components)
    default = result.components[-1]
    assert default.range is not None
    assert default.range.start == Position(4, 6)


def test_server_fixture(fixtures_dir: Path) -> None:
    result = analyze((fixtures_dir / "server.tsx").read_bytes(), "tsx")

    assert not result.is_client_module
    (record,) = result.imports
    assert record.source == "./client"
    assert record.identifiers == (
        "ClientComponentDefaultExport",
        "ClientComponentNamedExport",
    )
    assert [(c.name, c.export_kind) for c in result.components] == [
        ("ServerComponent", "default")
    ]

    first, second = result.jsx_usages
    assert first.component_name == "ClientComponentDefaultExport"
    assert first.range == Range(Position(9, 6), Position(9, 38))
    assert second.component_name == "ClientComponentNamedExport"
    assert second.range is not None
    assert second.range.start == Position(10, 6)


def test_client_uses_client_fixture(fixtures_dir: Path) -> None:
    result = analyze(
        (fixtures_dir / "client-uses-client.tsx").read_bytes(), "tsx"
    )

    assert result.is_client_module
    assert [(c.name, c.export_kind) for c in result.components] == [
        ("ClientUsesClientNamedFunction", "named"),
        ("ClientUsesClientDefaultFunction", "default-function"),
    ]
    (usage,) = result.jsx_usages
    assert usage.component_name == "ClientComponentNamedExport"
    assert usage.range is not None
    assert usage.range.start == Position(11, 6)


def test_import_source_range_covers_specifier_interior(
    fixtures_dir: Path,
) -> None:
    result = analyze((fixtures_dir / "server.tsx").read_bytes(), "tsx")

    (record,) = result.imports
    assert record.source_range == Range(Position(3, 8), Position(3, 16))


def test_utf16_position_encoding_counts_surrogate_pairs() -> None:
    source = "/* \U0001F600 */ export const A = () => <div/>;".encode("utf-8")

    default = analyze(source, "tsx")
    utf16 = analyze(
        source, "tsx", settings=AnalyzerSettings(position_encoding="utf-16")
    )

    assert default.components[0].range.start == Position(0, 21)
    assert utf16.components[0].range.start == Position(0, 22)
    assert default.components[0].span == utf16.components[0].span


def test_custom_client_directive() -> None:
    settings = AnalyzerSettings(client_directive="use browser")
    analyzer = BoundaryAnalyzer(settings)

    result = analyzer.analyze(
        b'"use browser";\nexport const A = () => <div/>;\n', "tsx"
    )

    assert analyzer.settings is settings
    assert result.is_client_module


def test_result_to_dict_is_json_ready(fixtures_dir: Path) -> None:
    result = analyze((fixtures_dir / "server.tsx").read_bytes(), "tsx")

    payload = json.loads(json.dumps(result.to_dict()))

    assert payload["is_client_module"] is False
    assert payload["imports"][0]["source"] == "./client"
    assert payload["imports"][0]["source_range"]["start"] == {
        "line": 3,
        "character": 8,
    }
    assert payload["components"][0]["export_kind"] == "default"
    assert [u["component_name"] for u in payload["jsx_usages"]] == [
        "ClientComponentDefaultExport",
        "ClientComponentNamedExport",
    ]


def test_failures_are_logged_before_raising(tmp_path: Path) -> None:
    log_file = tmp_path / "analysis.log"
    configure_logging(
        level="error",
        log_file=log_file,
        console=Console(file=io.StringIO()),
    )

    with pytest.raises(SourceParseError):
        analyze(b"const = ;", "js")

    for handler in logging.getLogger().handlers:
        handler.flush()
    payload = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
    assert payload["event"] == "analysis-failed"
    assert payload["extension"] == "js"
    assert payload["error"].startswith("Error: ")


def test_create_element_children_count_as_usages() -> None:
    result = analyze(
        _source(
            """\
            import React from "react";
            import { Button } from "./b";
            const App = () =>
              React.createElement("div", null, React.createElement(Button, null));
            export default App;
            """
        ),
        "js",
    )

    assert [u.component_name for u in result.jsx_usages] == ["Button"]
    assert [c.name for c in result.components] == ["App"]
