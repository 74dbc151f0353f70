"""Tests for the component classifier."""

from __future__ import annotations

from textwrap import dedent

import pytest

from react_boundary.analysis.components import (
    ComponentClassifier,
    is_component,
    is_component_name,
    is_function_component,
)
from react_boundary.analysis.parsing import parse_module
from react_boundary.analysis.syntax import (
    FunctionDeclaration,
    Span,
    TypeReference,
    VariableDeclaration,
)


def _declarator(source: str, extension: str = "tsx"):
    program = parse_module(dedent(source).encode("utf-8"), extension).program
    statement = program.body[-1]
    assert isinstance(statement, VariableDeclaration)
    return statement.declarations[0]


def _function(source: str, extension: str = "tsx") -> FunctionDeclaration:
    program = parse_module(dedent(source).encode("utf-8"), extension).program
    statement = program.body[-1]
    assert isinstance(statement, FunctionDeclaration)
    return statement


def _classify(source: str, runtime: frozenset[str] = frozenset()) -> bool:
    declarator = _declarator(source)
    return is_component(
        declarator.id.name,
        declarator.type_annotation,
        declarator.init,
        runtime,
    )


@pytest.mark.parametrize(
    ("name", "expected"),
    [("Button", True), ("button", False), ("Écran", True), ("_Hidden", False), ("", False)],
)
def test_component_name_gate(name: str, expected: bool) -> None:
    assert is_component_name(name) is expected


@pytest.mark.parametrize(
    "source",
    [
        "const MyComponent = () => { return <div>Hello</div>; };",
        "const MyComponent = () => <div>Hello</div>;",
        "const MyComponent = () => <>fragment</>;",
        "const MyComponent = () => (\n  <div/>\n);",
        "const MyComponent = function () { return <div/>; };",
        "const MyComponent = <div/>;",
        "const MyComponent: FC = () => { return null; };",
        "const MyComponent: React.FC<Props> = () => null;",
        "const MyComponent: ReactNode = null;",
        "const MyComponent = () => { if (x) { return <a/>; } return null; };",
    ],
)
def test_variable_components_are_detected(source: str) -> None:
    assert _classify(source)


@pytest.mark.parametrize(
    "source",
    [
        "const myComponent = () => { return <div>Hello</div>; };",
        'const MyFunction = () => { return "hello"; };',
        "const MyValue = 42;",
        "const MyHook: Props = () => null;",
        "const MyComponent = () => { const el = () => <div/>; return el; };",
    ],
)
def test_non_components_are_rejected(source: str) -> None:
    assert not _classify(source)


def test_function_declarations() -> None:
    component = _function("function MyComponent() { return <div>Hello</div>; }")
    lowercase = _function("function myFunction() { return <div>Hello</div>; }")
    plain = _function('function MyFunction() { return "hello"; }')
    typed = _function("function MyComponent(): ReactElement { return null as any; }")

    for declaration, expected in [
        (component, True),
        (lowercase, False),
        (plain, False),
        (typed, True),
    ]:
        assert (
            is_function_component(
                declaration.id.name,
                declaration.return_type,
                declaration.body,
            )
            is expected
        )


def test_function_declaration_never_unwraps_expression_statements() -> None:
    declaration = _function("function Loose() { <div/>; }")

    assert not is_function_component(
        declaration.id.name, declaration.return_type, declaration.body
    )


def test_renamed_runtime_factory_call_is_markup() -> None:
    source = (
        'import { jsx as foobar } from "react/jsx-runtime";\n'
        'const X = () => foobar("div", {});\n'
    )

    assert _classify(source, frozenset({"foobar"}))
    assert not _classify(source)


@pytest.mark.parametrize(
    "body",
    [
        'return (0, _jsx)("div", {});',
        'return (0, runtime.jsxs)("div", {});',
        'return (0, runtime["jsxDEV"])("div", {});',
        'return runtime.jsx("div", {});',
        'return React.createElement("div", null);',
    ],
)
def test_compiled_runtime_call_shapes(body: str) -> None:
    source = f"const Compiled = function () {{ {body} }};"

    assert _classify(source, frozenset({"_jsx"}))


def test_sequence_with_unknown_identifier_is_rejected() -> None:
    source = 'const Compiled = () => (0, helper)("div", {});'

    assert not _classify(source, frozenset({"_jsx"}))


@pytest.mark.parametrize(
    "source",
    [
        "const Input = React.forwardRef((props, ref) => <input ref={ref} />);",
        "const Input = forwardRef(function (props, ref) { return <input />; });",
        "const Card = memo(() => <div/>);",
        "const Card = UI.memo(forwardRef(() => <div/>));",
    ],
)
def test_higher_order_component_wrappers(source: str) -> None:
    assert _classify(source)


def test_unknown_wrapper_is_not_a_component() -> None:
    assert not _classify("const Card = wrap(() => <div/>);")


def test_classifier_honours_custom_type_names() -> None:
    classifier = ComponentClassifier(component_type_names=frozenset({"Widget"}))
    annotation = TypeReference(Span(0, 0), "Widget")

    assert classifier.is_component("Thing", annotation, None)
    assert not classifier.is_component(
        "Thing", TypeReference(Span(0, 0), "FC"), None
    )


def test_returns_inside_if_branches_are_searched() -> None:
    declaration = _function(
        "function Guarded() { if (ready) { return <div/>; } return null; }"
    )

    assert is_function_component(
        declaration.id.name, declaration.return_type, declaration.body
    )
