"""Immutable syntax model consumed by the boundary analysis.

The parser layer lowers tree-sitter's concrete syntax tree into the closed set
of variants declared here. Analysis code only ever pattern-matches on these
classes, so every node kind it does not recognize arrives as one of the
``Unknown*`` variants and falls through to a "no match" arm.

Example:
    >>> Span(3, 9).length
    6
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, TypeAlias

__all__ = [
    "Span",
    "TypeReference",
    "Identifier",
    "StringLiteral",
    "JSXIdentifier",
    "JSXMemberName",
    "JSXNamespacedName",
    "JSXElementName",
    "JSXElement",
    "JSXFragment",
    "JSXExpressionContainer",
    "JSXText",
    "JSXChild",
    "CallExpression",
    "MemberExpression",
    "ComputedMemberExpression",
    "SequenceExpression",
    "ParenthesizedExpression",
    "ArrowFunctionExpression",
    "FunctionExpression",
    "Property",
    "ObjectExpression",
    "ArrayExpression",
    "LogicalExpression",
    "ConditionalExpression",
    "UnknownExpression",
    "Expression",
    "ImportSpecifier",
    "ImportDeclaration",
    "ExportSpecifier",
    "ExportNamedDeclaration",
    "ExportDefaultDeclaration",
    "VariableDeclarator",
    "VariableDeclaration",
    "FunctionDeclaration",
    "BlockStatement",
    "IfStatement",
    "ReturnStatement",
    "ExpressionStatement",
    "UnknownStatement",
    "Statement",
    "Directive",
    "Program",
    "unwrap_parentheses",
]


@dataclass(frozen=True, slots=True, order=True)
class Span:
    """Half-open byte range into the analyzed source."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class TypeReference:
    """Type annotation reduced to the referenced type name.

    ``name`` is the rightmost identifier (``FC`` for both ``FC<Props>`` and
    ``React.FC<Props>``); ``qualifier`` keeps the dotted prefix when present.
    Annotations that are not plain type references lower with ``name=None``.
    """

    span: Span
    name: str | None
    qualifier: str | None = None


# ----------------------------------------------------------------------------
# Expressions
# ----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Identifier:
    span: Span
    name: str


@dataclass(frozen=True, slots=True)
class StringLiteral:
    """String literal; ``span`` includes the delimiting quotes."""

    span: Span
    value: str


@dataclass(frozen=True, slots=True)
class JSXIdentifier:
    span: Span
    name: str


@dataclass(frozen=True, slots=True)
class JSXMemberName:
    """Dotted tag name such as ``AlertDialog.Root``.

    ``object`` is ``None`` when the base is ``this``.
    """

    span: Span
    object: "JSXIdentifier | JSXMemberName | None"
    property: str


@dataclass(frozen=True, slots=True)
class JSXNamespacedName:
    span: Span
    namespace: str
    name: str


JSXElementName: TypeAlias = JSXIdentifier | JSXMemberName | JSXNamespacedName


@dataclass(frozen=True, slots=True)
class JSXElement:
    """Markup element; ``span`` covers opening through closing tag."""

    span: Span
    name: JSXElementName
    children: tuple["JSXChild", ...] = ()
    self_closing: bool = False


@dataclass(frozen=True, slots=True)
class JSXFragment:
    span: Span
    children: tuple["JSXChild", ...] = ()


@dataclass(frozen=True, slots=True)
class JSXExpressionContainer:
    span: Span
    expression: "Expression | None"


@dataclass(frozen=True, slots=True)
class JSXText:
    span: Span


JSXChild: TypeAlias = (
    JSXElement | JSXFragment | JSXExpressionContainer | JSXText
)


@dataclass(frozen=True, slots=True)
class CallExpression:
    span: Span
    callee: "Expression"
    arguments: tuple["Expression", ...] = ()


@dataclass(frozen=True, slots=True)
class MemberExpression:
    """Static member access ``object.property``."""

    span: Span
    object: "Expression"
    property: str


@dataclass(frozen=True, slots=True)
class ComputedMemberExpression:
    """Computed member access ``object[expression]``."""

    span: Span
    object: "Expression"
    expression: "Expression"


@dataclass(frozen=True, slots=True)
class SequenceExpression:
    span: Span
    expressions: tuple["Expression", ...]


@dataclass(frozen=True, slots=True)
class ParenthesizedExpression:
    span: Span
    expression: "Expression"


@dataclass(frozen=True, slots=True)
class ArrowFunctionExpression:
    """Arrow function.

    Expression bodies are stored as a single :class:`ExpressionStatement` in
    ``body`` with ``expression=True`` so traversal can treat both body forms
    as a statement list.
    """

    span: Span
    body: tuple["Statement", ...]
    expression: bool = False
    return_type: TypeReference | None = None


@dataclass(frozen=True, slots=True)
class FunctionExpression:
    span: Span
    body: tuple["Statement", ...] | None
    id: Identifier | None = None
    return_type: TypeReference | None = None


@dataclass(frozen=True, slots=True)
class Property:
    """Object literal member; ``key`` is ``None`` for computed/spread keys."""

    span: Span
    key: str | None
    value: "Expression | None"
    shorthand: bool = False


@dataclass(frozen=True, slots=True)
class ObjectExpression:
    span: Span
    properties: tuple[Property, ...] = ()


@dataclass(frozen=True, slots=True)
class ArrayExpression:
    span: Span
    elements: tuple["Expression", ...] = ()


@dataclass(frozen=True, slots=True)
class LogicalExpression:
    """Short-circuit ``left && right``, ``left || right`` or ``left ?? right``."""

    span: Span
    operator: str
    left: "Expression"
    right: "Expression"


@dataclass(frozen=True, slots=True)
class ConditionalExpression:
    span: Span
    test: "Expression"
    consequent: "Expression"
    alternate: "Expression"


@dataclass(frozen=True, slots=True)
class UnknownExpression:
    """Any expression kind the analysis does not inspect."""

    span: Span
    kind: str


Expression: TypeAlias = (
    Identifier
    | StringLiteral
    | JSXElement
    | JSXFragment
    | CallExpression
    | MemberExpression
    | ComputedMemberExpression
    | SequenceExpression
    | ParenthesizedExpression
    | ArrowFunctionExpression
    | FunctionExpression
    | ObjectExpression
    | ArrayExpression
    | LogicalExpression
    | ConditionalExpression
    | UnknownExpression
)


# ----------------------------------------------------------------------------
# Statements
# ----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ImportSpecifier:
    span: Span
    kind: Literal["default", "namespace", "named"]
    local: Identifier
    imported: str | None = None
    type_only: bool = False


@dataclass(frozen=True, slots=True)
class ImportDeclaration:
    span: Span
    source: StringLiteral
    specifiers: tuple[ImportSpecifier, ...] = ()
    type_only: bool = False


@dataclass(frozen=True, slots=True)
class ExportSpecifier:
    span: Span
    local: str
    exported: str
    type_only: bool = False


@dataclass(frozen=True, slots=True)
class ExportNamedDeclaration:
    """``export <declaration>`` or ``export { ... } [from "..."]``."""

    span: Span
    declaration: "Statement | None" = None
    specifiers: tuple[ExportSpecifier, ...] = ()
    source: StringLiteral | None = None
    type_only: bool = False


@dataclass(frozen=True, slots=True)
class ExportDefaultDeclaration:
    """``export default`` followed by a declaration or an expression."""

    span: Span
    declaration: "FunctionDeclaration | UnknownStatement | Expression"


@dataclass(frozen=True, slots=True)
class VariableDeclarator:
    """Single binding; ``id`` is ``None`` for destructuring patterns."""

    span: Span
    id: Identifier | None
    init: Expression | None = None
    type_annotation: TypeReference | None = None


@dataclass(frozen=True, slots=True)
class VariableDeclaration:
    span: Span
    kind: str
    declarations: tuple[VariableDeclarator, ...] = ()


@dataclass(frozen=True, slots=True)
class FunctionDeclaration:
    span: Span
    id: Identifier | None
    body: tuple["Statement", ...] | None
    return_type: TypeReference | None = None


@dataclass(frozen=True, slots=True)
class BlockStatement:
    span: Span
    body: tuple["Statement", ...] = ()


@dataclass(frozen=True, slots=True)
class IfStatement:
    span: Span
    consequent: "Statement"
    alternate: "Statement | None" = None


@dataclass(frozen=True, slots=True)
class ReturnStatement:
    span: Span
    argument: Expression | None = None


@dataclass(frozen=True, slots=True)
class ExpressionStatement:
    span: Span
    expression: Expression


@dataclass(frozen=True, slots=True)
class UnknownStatement:
    span: Span
    kind: str


Statement: TypeAlias = (
    ImportDeclaration
    | ExportNamedDeclaration
    | ExportDefaultDeclaration
    | VariableDeclaration
    | FunctionDeclaration
    | BlockStatement
    | IfStatement
    | ReturnStatement
    | ExpressionStatement
    | UnknownStatement
)


@dataclass(frozen=True, slots=True)
class Directive:
    """Prologue string such as ``"use client"`` (``value`` is unquoted)."""

    span: Span
    value: str


@dataclass(frozen=True, slots=True)
class Program:
    span: Span
    directives: tuple[Directive, ...] = ()
    body: tuple[Statement, ...] = field(default_factory=tuple)


def unwrap_parentheses(expression: Expression) -> Expression:
    """Strip any number of enclosing parentheses from ``expression``.

    Example:
        >>> inner = Identifier(Span(1, 2), "x")
        >>> unwrap_parentheses(ParenthesizedExpression(Span(0, 3), inner))
        Identifier(span=Span(start=1, end=2), name='x')
    """

    while isinstance(expression, ParenthesizedExpression):
        expression = expression.expression
    return expression
