"""Tests for :mod:`react_boundary.analysis.imports`."""

from __future__ import annotations

from textwrap import dedent

from react_boundary.analysis.imports import (
    collect_imports,
    runtime_factory_identifiers,
)
from react_boundary.analysis.models import ImportRecord
from react_boundary.analysis.parsing import parse_module
from react_boundary.analysis.positions import LineIndex, Position
from react_boundary.analysis.syntax import Span


def _statements(source: str, extension: str = "tsx"):
    return parse_module(source.encode("utf-8"), extension).program.body


def test_collects_value_imports_and_skips_type_only_forms() -> None:
    source = dedent(
        """\
        import type { FC } from "react";
        import Default, { Named, type Props, other as Renamed } from "./ui";
        import * as Icons from "./icons";
        import "./globals.css";
        """
    )

    records = collect_imports(_statements(source))

    assert [record.source for record in records] == [
        "./ui",
        "./icons",
        "./globals.css",
    ]
    assert records[0].identifiers == ("Default", "Named", "Renamed")
    assert records[1].identifiers == ("Icons",)
    assert records[2].identifiers == ()


def test_source_span_excludes_quotes() -> None:
    source = 'import { Button } from "./button";\n'
    (record,) = collect_imports(_statements(source))

    encoded = source.encode("utf-8")
    assert encoded[record.source_span.start : record.source_span.end] == (
        b"./button"
    )
    assert record.source_range is None


def test_source_range_computed_from_line_index() -> None:
    source = '// header\nimport { Button } from "./button";\n'
    index = LineIndex(source)

    (record,) = collect_imports(_statements(source), line_index=index)

    assert record.source_range is not None
    assert record.source_range.start == Position(1, 24)
    assert record.source_range.end == Position(1, 32)


def test_runtime_factory_identifiers_follow_renamed_imports() -> None:
    source = dedent(
        """\
        import { jsx as foobar, jsxs } from "react/jsx-runtime";
        import { jsxDEV } from "react/jsx-dev-runtime";
        import { jsx } from "./not-runtime";
        """
    )

    records = collect_imports(_statements(source, "js"))

    assert runtime_factory_identifiers(records) == frozenset(
        {"foobar", "jsxs", "jsxDEV"}
    )
    assert runtime_factory_identifiers(records, ("./not-runtime",)) == (
        frozenset({"jsx"})
    )


def test_runtime_factory_identifiers_empty_without_runtime_import() -> None:
    record = ImportRecord(("Button",), "./button", Span(0, 0))

    assert runtime_factory_identifiers([record]) == frozenset()
