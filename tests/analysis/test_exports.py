"""Tests for :mod:`react_boundary.analysis.exports`."""

from __future__ import annotations

from textwrap import dedent

from react_boundary.analysis.components import ComponentClassifier
from react_boundary.analysis.exports import ExportResolver, resolve_exports
from react_boundary.analysis.parsing import parse_module


def _resolve(source: str, extension: str = "tsx", **kwargs):
    encoded = dedent(source).encode("utf-8")
    program = parse_module(encoded, extension).program
    exports = resolve_exports(program.body, ComponentClassifier(), **kwargs)
    return encoded, exports


def _pairs(source: str, extension: str = "tsx", **kwargs):
    _, exports = _resolve(source, extension, **kwargs)
    return [(export.name, export.kind) for export in exports]


def test_default_export_of_identifier() -> None:
    encoded, exports = _resolve(
        "const Button = () => <button>Click</button>; export default Button;"
    )

    ((name, span, kind),) = exports
    assert (name, kind) == ("Button", "default")
    assert encoded[span.start : span.end] == b"Button"
    assert span.start == 6


def test_inline_named_and_default_function_exports() -> None:
    pairs = _pairs(
        """\
        export const Header = () => <header/>;
        export function Footer() { return <footer/>; }
        export default function Page() { return <main/>; }
        export const helper = () => 1;
        """
    )

    assert pairs == [
        ("Header", "named"),
        ("Footer", "named"),
        ("Page", "default-function"),
    ]


def test_specifiers_look_up_local_then_alias() -> None:
    pairs = _pairs(
        """\
        const Card = () => <div/>;
        const util = 1;
        export { Card as PublicCard, util };
        export { Missing as Card };
        """
    )

    assert pairs == [("Card", "specifier"), ("Card", "specifier")]


def test_duplicates_across_forms_are_preserved() -> None:
    pairs = _pairs(
        """\
        export const Button = () => <button/>;
        export default Button;
        """
    )

    assert pairs == [("Button", "named"), ("Button", "default")]


def test_type_only_reexports_and_anonymous_defaults_are_skipped() -> None:
    pairs = _pairs(
        """\
        const Card = () => <div/>;
        export type { Card };
        export { Card } from "./elsewhere";
        export default () => <section/>;
        """
    )

    assert pairs == []


def test_registration_pattern_exports_known_declarations_first() -> None:
    pairs = _pairs(
        """\
        const Page = () => <main/>;
        const Button = () => <button/>;
        const helper = () => 1;
        export default Page;
        __export(exports, {
          Button: () => Button,
          helper: () => helper,
          Unknown: () => Unknown,
        });
        """,
        extension="js",
    )

    assert pairs == [("Button", "registration"), ("Page", "default")]


def test_registration_callee_is_configurable() -> None:
    source = """\
        const Button = () => <button/>;
        defineExports(module, { Button: () => Button });
        __export(module, { Button: () => Button });
        """

    assert _pairs(source, "js", registration_callee="defineExports") == [
        ("Button", "registration")
    ]


def test_resolver_declaration_map_is_last_write_wins() -> None:
    program = parse_module(
        dedent(
            """\
            const Panel = () => <div/>;
            function Panel2() { return <div/>; }
            var Panel = () => <section/>;
            """
        ).encode("utf-8"),
        "js",
    ).program
    resolver = ExportResolver(ComponentClassifier())

    resolver.declare(program.body)

    assert set(resolver.declarations) == {"Panel", "Panel2"}
    assert resolver.declarations["Panel"].start > 60
