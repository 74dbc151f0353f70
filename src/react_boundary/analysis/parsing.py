"""tree-sitter front end: grammar selection, diagnostics, and lowering.

The lowering walks the concrete syntax tree once and produces the immutable
variants from :mod:`react_boundary.analysis.syntax`. Node kinds without a
dedicated variant become ``UnknownStatement``/``UnknownExpression``.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Iterable

from tree_sitter import Language, Parser
import tree_sitter_javascript
import tree_sitter_typescript

from .errors import (
    Diagnostic,
    SourceDecodeError,
    SourceParseError,
    UnsupportedExtensionError,
)
from .positions import LineIndex
from .syntax import (
    ArrayExpression,
    ArrowFunctionExpression,
    BlockStatement,
    CallExpression,
    ComputedMemberExpression,
    ConditionalExpression,
    Directive,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    ExportSpecifier,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    IfStatement,
    ImportDeclaration,
    ImportSpecifier,
    JSXChild,
    JSXElement,
    JSXElementName,
    JSXExpressionContainer,
    JSXFragment,
    JSXIdentifier,
    JSXMemberName,
    JSXNamespacedName,
    JSXText,
    LogicalExpression,
    MemberExpression,
    ObjectExpression,
    ParenthesizedExpression,
    Program,
    Property,
    ReturnStatement,
    SequenceExpression,
    Span,
    Statement,
    StringLiteral,
    TypeReference,
    UnknownExpression,
    UnknownStatement,
    VariableDeclaration,
    VariableDeclarator,
)

__all__ = [
    "ParsedModule",
    "SUPPORTED_EXTENSIONS",
    "grammar_for_extension",
    "parse_module",
]

_GRAMMAR_BY_EXTENSION: dict[str, str] = {
    "js": "javascript",
    "mjs": "javascript",
    "cjs": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "mts": "typescript",
    "cts": "typescript",
    "tsx": "tsx",
}

SUPPORTED_EXTENSIONS: tuple[str, ...] = tuple(_GRAMMAR_BY_EXTENSION)

_SKIPPED_NODES = {"comment", "hash_bang_line", "html_comment"}
_FUNCTION_DECLARATIONS = {
    "function_declaration",
    "generator_function_declaration",
}
_FUNCTION_EXPRESSIONS = {
    "function_expression",
    "function",
    "generator_function",
}
_LOGICAL_OPERATORS = {"&&", "||", "??"}
_SNIPPET_CONTEXT_LINES = 1


@dataclass(frozen=True, slots=True)
class ParsedModule:
    """Lowered program together with the decoded text it came from."""

    program: Program
    text: str
    grammar: str


def grammar_for_extension(extension: str) -> str:
    """Return the grammar name for ``extension``.

    Example:
        >>> grammar_for_extension(".TSX")
        'tsx'
    """

    normalized = extension.strip().lower().lstrip(".")
    try:
        return _GRAMMAR_BY_EXTENSION[normalized]
    except KeyError:
        raise UnsupportedExtensionError(extension) from None


@lru_cache(maxsize=None)
def _load_language(grammar: str) -> Language:
    if grammar == "javascript":
        return Language(tree_sitter_javascript.language())
    if grammar == "tsx":
        return Language(tree_sitter_typescript.language_tsx())
    return Language(tree_sitter_typescript.language_typescript())


def parse_module(content: bytes, extension: str) -> ParsedModule:
    """Parse ``content`` with the grammar selected by ``extension``.

    Raises:
        UnsupportedExtensionError: If ``extension`` has no grammar.
        SourceDecodeError: If ``content`` is not valid UTF-8.
        SourceParseError: If the parser reports a syntax error.
    """

    grammar = grammar_for_extension(extension)
    try:
        text = content.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise SourceDecodeError(exc) from exc

    parser = Parser(_load_language(grammar))
    tree = parser.parse(content)
    root = tree.root_node
    if root.has_error:
        raise SourceParseError(_diagnose(root, text))

    program = _Lowerer(content).program(root)
    return ParsedModule(program=program, text=text, grammar=grammar)


# ----------------------------------------------------------------------------
# Diagnostics
# ----------------------------------------------------------------------------


def _first_problem(node: Any) -> Any | None:
    if node.is_missing:
        return node
    for child in node.children:
        if child.has_error or child.is_missing:
            found = _first_problem(child)
            if found is not None:
                return found
    if node.is_error:
        return _unexpected_token(node)
    return None


def _unexpected_token(error: Any) -> Any:
    """Return the token inside ``error`` that the parser could not place.

    Recovery keeps the partial subtrees it already built; the first bare
    token after one of them is where parsing went wrong. Without such a
    token the last leaf of the error node is reported.
    """

    seen_subtree = False
    for child in error.children:
        if child.is_named:
            seen_subtree = True
        elif seen_subtree:
            return child
    leaf = error
    while leaf.children:
        leaf = leaf.children[-1]
    return leaf


def _diagnose(root: Any, text: str) -> Diagnostic:
    problem = _first_problem(root) or root
    span = Span(problem.start_byte, problem.end_byte)
    if problem.is_missing:
        message = f"Expected `{problem.type}`"
    else:
        token = _first_token_text(problem)
        message = (
            f"Unexpected token `{token}`" if token else "Unexpected token"
        )
    index = LineIndex(text)
    start = index.position(span.start)
    end = index.position(span.end)
    snippet = _render_snippet(text, start.line, start.character, end)
    return Diagnostic(
        message=message,
        span=span,
        line=start.line,
        character=start.character,
        snippet=snippet,
    )


def _first_token_text(node: Any) -> str:
    while node.children:
        node = node.children[0]
    raw = node.text or b""
    return raw.decode("utf-8", errors="replace").strip()


def _render_snippet(text: str, line: int, character: int, end: Any) -> str:
    lines = text.splitlines() or [""]
    line = min(line, len(lines) - 1)
    first = max(0, line - _SNIPPET_CONTEXT_LINES)
    gutter = len(str(line + 1))
    rendered: list[str] = []
    for number in range(first, line + 1):
        rendered.append(f"{number + 1:>{gutter}} | {lines[number]}")
    if end.line == line:
        width = max(1, end.character - character)
    else:
        width = max(1, len(lines[line]) - character)
    rendered.append(f"{'':>{gutter}} | {' ' * character}{'^' * width}")
    return "\n".join(rendered)


# ----------------------------------------------------------------------------
# Lowering
# ----------------------------------------------------------------------------


class _Lowerer:
    """Translate tree-sitter nodes into syntax variants."""

    def __init__(self, source: bytes) -> None:
        self._source = source

    # -- helpers ---------------------------------------------------------
    def _text(self, node: Any) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    @staticmethod
    def _span(node: Any) -> Span:
        return Span(node.start_byte, node.end_byte)

    @staticmethod
    def _named(node: Any) -> list[Any]:
        return [
            child
            for child in node.named_children
            if child.type not in _SKIPPED_NODES
        ]

    @staticmethod
    def _has_keyword(node: Any, *keywords: str) -> bool:
        return any(
            not child.is_named and child.type in keywords
            for child in node.children
        )

    @staticmethod
    def _first_of_type(node: Any, *types: str) -> Any | None:
        for child in node.named_children:
            if child.type in types:
                return child
        return None

    def _string(self, node: Any) -> StringLiteral:
        return StringLiteral(self._span(node), self._text(node)[1:-1])

    def _name_text(self, node: Any) -> str:
        if node.type == "string":
            return self._text(node)[1:-1]
        return self._text(node)

    # -- program ---------------------------------------------------------
    def program(self, root: Any) -> Program:
        directives: list[Directive] = []
        body: list[Statement] = []
        in_prologue = True
        for child in self._named(root):
            if in_prologue:
                directive = self._directive(child)
                if directive is not None:
                    directives.append(directive)
                    continue
                in_prologue = False
            body.append(self.statement(child))
        return Program(
            span=self._span(root),
            directives=tuple(directives),
            body=tuple(body),
        )

    def _directive(self, node: Any) -> Directive | None:
        if node.type != "expression_statement":
            return None
        named = self._named(node)
        if len(named) != 1 or named[0].type != "string":
            return None
        return Directive(self._span(node), self._text(named[0])[1:-1])

    def statements(self, nodes: Iterable[Any]) -> tuple[Statement, ...]:
        return tuple(
            self.statement(node)
            for node in nodes
            if node.type not in _SKIPPED_NODES
        )

    # -- statements ------------------------------------------------------
    def statement(self, node: Any) -> Statement:
        kind = node.type
        if kind == "import_statement":
            return self._import(node)
        if kind == "export_statement":
            return self._export(node)
        if kind in {"lexical_declaration", "variable_declaration"}:
            return self._variable_declaration(node)
        if kind in _FUNCTION_DECLARATIONS:
            return self._function_declaration(node)
        if kind == "statement_block":
            return BlockStatement(
                self._span(node), self.statements(node.named_children)
            )
        if kind == "if_statement":
            return self._if(node)
        if kind == "return_statement":
            named = self._named(node)
            argument = self.expression(named[0]) if named else None
            return ReturnStatement(self._span(node), argument)
        if kind == "expression_statement":
            named = self._named(node)
            if named:
                return ExpressionStatement(
                    self._span(node), self.expression(named[0])
                )
        return UnknownStatement(self._span(node), kind)

    def _if(self, node: Any) -> IfStatement:
        consequence = node.child_by_field_name("consequence")
        alternative = node.child_by_field_name("alternative")
        alternate: Statement | None = None
        if alternative is not None:
            inner = self._named(alternative)
            if alternative.type == "else_clause" and inner:
                alternate = self.statement(inner[0])
            elif alternative.type != "else_clause":
                alternate = self.statement(alternative)
        return IfStatement(
            self._span(node),
            consequent=self.statement(consequence),
            alternate=alternate,
        )

    def _variable_declaration(self, node: Any) -> VariableDeclaration:
        kind_node = node.child_by_field_name("kind")
        if kind_node is not None:
            kind = self._text(kind_node)
        elif node.type == "variable_declaration":
            kind = "var"
        else:
            kind = node.children[0].type
        declarators = tuple(
            self._declarator(child)
            for child in node.named_children
            if child.type == "variable_declarator"
        )
        return VariableDeclaration(self._span(node), kind, declarators)

    def _declarator(self, node: Any) -> VariableDeclarator:
        name = node.child_by_field_name("name")
        identifier = None
        if name is not None and name.type == "identifier":
            identifier = Identifier(self._span(name), self._text(name))
        annotation = node.child_by_field_name("type")
        value = node.child_by_field_name("value")
        return VariableDeclarator(
            self._span(node),
            id=identifier,
            init=self.expression(value) if value is not None else None,
            type_annotation=self._type_reference(annotation),
        )

    def _function_declaration(self, node: Any) -> FunctionDeclaration:
        name = node.child_by_field_name("name")
        identifier = None
        if name is not None:
            identifier = Identifier(self._span(name), self._text(name))
        return FunctionDeclaration(
            self._span(node),
            id=identifier,
            body=self._body(node),
            return_type=self._type_reference(
                node.child_by_field_name("return_type")
            ),
        )

    def _body(self, node: Any) -> tuple[Statement, ...] | None:
        body = node.child_by_field_name("body")
        if body is None:
            return None
        return self.statements(body.named_children)

    # -- types -----------------------------------------------------------
    def _type_reference(self, node: Any | None) -> TypeReference | None:
        if node is None:
            return None
        span = self._span(node)
        if node.type != "type_annotation":
            return TypeReference(span, None)
        named = self._named(node)
        if not named:
            return TypeReference(span, None)
        target = named[0]
        if target.type == "generic_type":
            target = target.child_by_field_name("name") or target
        if target.type == "type_identifier":
            return TypeReference(span, self._text(target))
        if target.type == "nested_type_identifier":
            name = target.child_by_field_name("name")
            module = target.child_by_field_name("module")
            return TypeReference(
                span,
                self._text(name) if name is not None else None,
                qualifier=self._text(module) if module is not None else None,
            )
        return TypeReference(span, None)

    # -- modules ---------------------------------------------------------
    def _import(self, node: Any) -> ImportDeclaration | UnknownStatement:
        source = node.child_by_field_name("source")
        require = self._first_of_type(node, "import_require_clause")
        if source is None and require is not None:
            source = require.child_by_field_name("source")
        if source is None:
            return UnknownStatement(self._span(node), node.type)

        specifiers: list[ImportSpecifier] = []
        clause = self._first_of_type(node, "import_clause")
        if clause is not None:
            specifiers.extend(self._import_clause(clause))
        if require is not None:
            local = self._first_of_type(require, "identifier")
            if local is not None:
                specifiers.append(
                    ImportSpecifier(
                        self._span(local),
                        kind="default",
                        local=Identifier(self._span(local), self._text(local)),
                    )
                )
        return ImportDeclaration(
            self._span(node),
            source=self._string(source),
            specifiers=tuple(specifiers),
            type_only=self._has_keyword(node, "type", "typeof"),
        )

    def _import_clause(self, clause: Any) -> Iterable[ImportSpecifier]:
        for child in clause.named_children:
            if child.type == "identifier":
                yield ImportSpecifier(
                    self._span(child),
                    kind="default",
                    local=Identifier(self._span(child), self._text(child)),
                    imported="default",
                )
            elif child.type == "namespace_import":
                local = self._first_of_type(child, "identifier")
                if local is not None:
                    yield ImportSpecifier(
                        self._span(child),
                        kind="namespace",
                        local=Identifier(self._span(local), self._text(local)),
                    )
            elif child.type == "named_imports":
                for spec in child.named_children:
                    if spec.type == "import_specifier":
                        yield self._import_specifier(spec)

    def _import_specifier(self, node: Any) -> ImportSpecifier:
        name = node.child_by_field_name("name")
        alias = node.child_by_field_name("alias")
        local = alias if alias is not None else name
        return ImportSpecifier(
            self._span(node),
            kind="named",
            local=Identifier(self._span(local), self._name_text(local)),
            imported=self._name_text(name) if name is not None else None,
            type_only=self._has_keyword(node, "type", "typeof"),
        )

    def _export(self, node: Any) -> Statement:
        span = self._span(node)
        declaration = node.child_by_field_name("declaration")
        value = node.child_by_field_name("value")

        if self._has_keyword(node, "default"):
            if declaration is not None:
                return ExportDefaultDeclaration(
                    span, self.statement(declaration)
                )
            if value is not None:
                return ExportDefaultDeclaration(span, self.expression(value))
            return UnknownStatement(span, node.type)

        type_only = self._has_keyword(node, "type")
        if declaration is not None:
            return ExportNamedDeclaration(
                span,
                declaration=self.statement(declaration),
                type_only=type_only,
            )

        source = node.child_by_field_name("source")
        clause = self._first_of_type(node, "export_clause")
        if clause is None and source is None:
            return UnknownStatement(span, node.type)

        specifiers: list[ExportSpecifier] = []
        if clause is not None:
            for spec in clause.named_children:
                if spec.type != "export_specifier":
                    continue
                name = spec.child_by_field_name("name")
                alias = spec.child_by_field_name("alias")
                local = self._name_text(name)
                specifiers.append(
                    ExportSpecifier(
                        self._span(spec),
                        local=local,
                        exported=(
                            self._name_text(alias)
                            if alias is not None
                            else local
                        ),
                        type_only=self._has_keyword(spec, "type"),
                    )
                )
        return ExportNamedDeclaration(
            span,
            specifiers=tuple(specifiers),
            source=self._string(source) if source is not None else None,
            type_only=type_only,
        )

    # -- expressions -----------------------------------------------------
    def expression(self, node: Any) -> Expression:
        kind = node.type
        span = self._span(node)
        if kind == "identifier":
            return Identifier(span, self._text(node))
        if kind == "string":
            return self._string(node)
        if kind in {"jsx_element", "jsx_self_closing_element", "jsx_fragment"}:
            return self._jsx(node)
        if kind == "call_expression":
            return self._call(node)
        if kind == "member_expression":
            obj = node.child_by_field_name("object")
            prop = node.child_by_field_name("property")
            if obj is not None and prop is not None:
                return MemberExpression(
                    span, self.expression(obj), self._text(prop)
                )
        if kind == "subscript_expression":
            obj = node.child_by_field_name("object")
            index = node.child_by_field_name("index")
            if obj is not None and index is not None:
                return ComputedMemberExpression(
                    span, self.expression(obj), self.expression(index)
                )
        if kind == "sequence_expression":
            return SequenceExpression(span, tuple(self._sequence(node)))
        if kind == "parenthesized_expression":
            named = self._named(node)
            if named:
                return ParenthesizedExpression(
                    span, self.expression(named[0])
                )
        if kind == "arrow_function":
            return self._arrow(node)
        if kind in _FUNCTION_EXPRESSIONS:
            name = node.child_by_field_name("name")
            return FunctionExpression(
                span,
                body=self._body(node),
                id=(
                    Identifier(self._span(name), self._text(name))
                    if name is not None
                    else None
                ),
                return_type=self._type_reference(
                    node.child_by_field_name("return_type")
                ),
            )
        if kind == "object":
            return ObjectExpression(span, tuple(self._properties(node)))
        if kind == "array":
            return ArrayExpression(
                span,
                tuple(self.expression(child) for child in self._named(node)),
            )
        if kind == "binary_expression":
            operator = node.child_by_field_name("operator")
            left = node.child_by_field_name("left")
            right = node.child_by_field_name("right")
            if (
                operator is not None
                and operator.type in _LOGICAL_OPERATORS
                and left is not None
                and right is not None
            ):
                return LogicalExpression(
                    span,
                    operator.type,
                    self.expression(left),
                    self.expression(right),
                )
        if kind == "ternary_expression":
            test = node.child_by_field_name("condition")
            consequent = node.child_by_field_name("consequence")
            alternate = node.child_by_field_name("alternative")
            if None not in (test, consequent, alternate):
                return ConditionalExpression(
                    span,
                    self.expression(test),
                    self.expression(consequent),
                    self.expression(alternate),
                )
        return UnknownExpression(span, kind)

    def _sequence(self, node: Any) -> Iterable[Expression]:
        for child in self._named(node):
            if child.type == "sequence_expression":
                yield from self._sequence(child)
            else:
                yield self.expression(child)

    def _call(self, node: Any) -> Expression:
        callee = node.child_by_field_name("function")
        if callee is None:
            return UnknownExpression(self._span(node), node.type)
        arguments = node.child_by_field_name("arguments")
        lowered: tuple[Expression, ...] = ()
        if arguments is not None and arguments.type == "arguments":
            lowered = tuple(
                self.expression(child) for child in self._named(arguments)
            )
        return CallExpression(
            self._span(node), self.expression(callee), lowered
        )

    def _arrow(self, node: Any) -> ArrowFunctionExpression:
        body = node.child_by_field_name("body")
        return_type = self._type_reference(
            node.child_by_field_name("return_type")
        )
        if body is None:
            return ArrowFunctionExpression(
                self._span(node), (), return_type=return_type
            )
        if body.type == "statement_block":
            return ArrowFunctionExpression(
                self._span(node),
                self.statements(body.named_children),
                expression=False,
                return_type=return_type,
            )
        statement = ExpressionStatement(self._span(body), self.expression(body))
        return ArrowFunctionExpression(
            self._span(node),
            (statement,),
            expression=True,
            return_type=return_type,
        )

    def _properties(self, node: Any) -> Iterable[Property]:
        for child in self._named(node):
            span = self._span(child)
            if child.type == "pair":
                key = child.child_by_field_name("key")
                value = child.child_by_field_name("value")
                yield Property(
                    span,
                    key=self._property_key(key),
                    value=self.expression(value) if value is not None else None,
                )
            elif child.type == "shorthand_property_identifier":
                name = self._text(child)
                yield Property(
                    span, key=name, value=Identifier(span, name), shorthand=True
                )
            elif child.type == "method_definition":
                name = child.child_by_field_name("name")
                yield Property(
                    span, key=self._property_key(name), value=None
                )
            else:
                yield Property(span, key=None, value=self.expression(child))

    def _property_key(self, node: Any | None) -> str | None:
        if node is None:
            return None
        if node.type in {
            "property_identifier",
            "identifier",
            "number",
            "private_property_identifier",
        }:
            return self._text(node)
        if node.type == "string":
            return self._text(node)[1:-1]
        return None

    # -- markup ----------------------------------------------------------
    def _jsx(self, node: Any) -> JSXElement | JSXFragment:
        span = self._span(node)
        if node.type == "jsx_self_closing_element":
            name = node.child_by_field_name("name")
            if name is None:
                return JSXFragment(span)
            return JSXElement(span, self._jsx_name(name), self_closing=True)

        children = tuple(self._jsx_children(node))
        if node.type == "jsx_fragment":
            return JSXFragment(span, children)
        opening = node.child_by_field_name("open_tag")
        if opening is None:
            opening = self._first_of_type(node, "jsx_opening_element")
        name = (
            opening.child_by_field_name("name")
            if opening is not None
            else None
        )
        if name is None:
            return JSXFragment(span, children)
        return JSXElement(span, self._jsx_name(name), children)

    def _jsx_children(self, node: Any) -> Iterable[JSXChild]:
        for child in node.named_children:
            kind = child.type
            if kind in {"jsx_opening_element", "jsx_closing_element"}:
                continue
            if kind in _SKIPPED_NODES:
                continue
            span = self._span(child)
            if kind in {
                "jsx_element",
                "jsx_self_closing_element",
                "jsx_fragment",
            }:
                yield self._jsx(child)
            elif kind == "jsx_expression":
                named = self._named(child)
                yield JSXExpressionContainer(
                    span, self.expression(named[0]) if named else None
                )
            else:
                yield JSXText(span)

    def _jsx_name(self, node: Any) -> JSXElementName:
        span = self._span(node)
        kind = node.type
        if kind in {"member_expression", "nested_identifier"}:
            obj = node.child_by_field_name("object")
            prop = node.child_by_field_name("property")
            if obj is not None and prop is not None:
                return JSXMemberName(
                    span, self._jsx_object(obj), self._text(prop)
                )
            return self._dotted_name(node)
        if kind == "jsx_namespace_name":
            parts = [self._text(child) for child in node.named_children]
            namespace = parts[0] if parts else ""
            return JSXNamespacedName(span, namespace, parts[-1] if parts else "")
        return JSXIdentifier(span, self._text(node))

    def _dotted_name(self, node: Any) -> JSXIdentifier | JSXMemberName:
        span = self._span(node)
        head, *rest = [part.strip() for part in self._text(node).split(".")]
        if not rest:
            return JSXIdentifier(span, head)
        base = None if head == "this" else JSXIdentifier(span, head)
        current = JSXMemberName(span, base, rest[0])
        for part in rest[1:]:
            current = JSXMemberName(span, current, part)
        return current

    def _jsx_object(
        self, node: Any | None
    ) -> JSXIdentifier | JSXMemberName | None:
        if node is None or node.type == "this":
            return None
        if node.type in {"member_expression", "nested_identifier"}:
            lowered = self._jsx_name(node)
            if isinstance(lowered, (JSXIdentifier, JSXMemberName)):
                return lowered
            return None
        return JSXIdentifier(self._span(node), self._text(node))
