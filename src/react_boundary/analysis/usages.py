"""Markup usage collection.

Walks statements depth-first and records ``(name, span)`` for every markup
element whose tag resolves to an uppercase-led name. The span always covers
the whole element so decorations can be anchored after the closing tag.
Calls into the compiled markup runtime (``jsx(Button, {...})``) are recorded
the same way, keyed by their first argument.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable

from .components import (
    RUNTIME_FACTORY_PROPERTIES,
    ComponentClassifier,
    is_component_name,
)
from .syntax import (
    ArrayExpression,
    ArrowFunctionExpression,
    BlockStatement,
    CallExpression,
    ComputedMemberExpression,
    ConditionalExpression,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    FunctionExpression,
    Identifier,
    IfStatement,
    JSXChild,
    JSXElement,
    JSXElementName,
    JSXExpressionContainer,
    JSXFragment,
    JSXIdentifier,
    JSXMemberName,
    LogicalExpression,
    MemberExpression,
    ObjectExpression,
    ParenthesizedExpression,
    ReturnStatement,
    SequenceExpression,
    Span,
    Statement,
    StringLiteral,
    UnknownStatement,
    VariableDeclaration,
    unwrap_parentheses,
)

__all__ = ["UsageCollector", "collect_usages", "element_usage_name"]


def element_usage_name(name: JSXElementName) -> str | None:
    """Return the usage name recorded for a tag, or ``None`` to ignore it.

    Example:
        >>> tag = JSXMemberName(Span(1, 17), JSXIdentifier(Span(1, 12), "AlertDialog"), "Root")
        >>> element_usage_name(tag)
        'AlertDialog'
    """

    if isinstance(name, JSXIdentifier):
        return name.name if is_component_name(name.name) else None
    if isinstance(name, JSXMemberName):
        base: JSXIdentifier | JSXMemberName | None = name
        while isinstance(base, JSXMemberName):
            base = base.object
        if base is None:
            return None
        return base.name if is_component_name(base.name) else None
    return None


def _factory_name(callee: Expression) -> str | None:
    callee = unwrap_parentheses(callee)
    if isinstance(callee, SequenceExpression) and callee.expressions:
        callee = unwrap_parentheses(callee.expressions[-1])
    if isinstance(callee, MemberExpression):
        return callee.property
    if isinstance(callee, ComputedMemberExpression):
        key = unwrap_parentheses(callee.expression)
        if isinstance(key, StringLiteral):
            return key.value
    return None


class UsageCollector:
    """Accumulate markup usages in depth-first pre-order."""

    def __init__(
        self,
        runtime_identifiers: AbstractSet[str] = frozenset(),
        *,
        factory_properties: AbstractSet[str] = RUNTIME_FACTORY_PROPERTIES,
    ) -> None:
        self._runtime_identifiers = runtime_identifiers
        self._classifier = ComponentClassifier(
            runtime_identifiers=runtime_identifiers,
            factory_properties=factory_properties,
        )
        self.usages: list[tuple[str, Span]] = []

    def visit_statements(self, statements: Iterable[Statement]) -> None:
        for statement in statements:
            self.visit_statement(statement)

    def visit_statement(self, statement: Statement) -> None:
        if isinstance(statement, ReturnStatement):
            if statement.argument is not None:
                self.visit_expression(statement.argument)
        elif isinstance(statement, ExpressionStatement):
            self.visit_expression(statement.expression)
        elif isinstance(statement, VariableDeclaration):
            self._visit_declarators(statement)
        elif isinstance(statement, ExportNamedDeclaration):
            declaration = statement.declaration
            if isinstance(declaration, VariableDeclaration):
                self._visit_declarators(declaration)
            elif isinstance(declaration, FunctionDeclaration):
                self.visit_statements(declaration.body or ())
        elif isinstance(statement, ExportDefaultDeclaration):
            declaration = statement.declaration
            if isinstance(declaration, FunctionDeclaration):
                self.visit_statements(declaration.body or ())
            elif not isinstance(declaration, UnknownStatement):
                self.visit_expression(declaration)
        elif isinstance(statement, BlockStatement):
            self.visit_statements(statement.body)
        elif isinstance(statement, IfStatement):
            self.visit_statement(statement.consequent)
            if statement.alternate is not None:
                self.visit_statement(statement.alternate)

    def _visit_declarators(self, declaration: VariableDeclaration) -> None:
        for declarator in declaration.declarations:
            if declarator.init is not None:
                self.visit_expression(declarator.init)

    def visit_expression(self, expression: Expression) -> None:
        if isinstance(expression, JSXElement):
            self.visit_element(expression)
        elif isinstance(expression, JSXFragment):
            self._visit_children(expression.children)
        elif isinstance(expression, ParenthesizedExpression):
            self.visit_expression(expression.expression)
        elif isinstance(expression, ArrowFunctionExpression):
            self.visit_statements(expression.body)
        elif isinstance(expression, FunctionExpression):
            self.visit_statements(expression.body or ())
        elif isinstance(expression, LogicalExpression):
            self.visit_expression(expression.left)
            self.visit_expression(expression.right)
        elif isinstance(expression, ConditionalExpression):
            self.visit_expression(expression.consequent)
            self.visit_expression(expression.alternate)
        elif isinstance(expression, CallExpression):
            if self._classifier.is_runtime_call(expression):
                self._visit_runtime_call(expression)
            else:
                for argument in expression.arguments:
                    self.visit_expression(argument)

    def visit_element(self, element: JSXElement) -> None:
        name = element_usage_name(element.name)
        if name is not None:
            self.usages.append((name, element.span))
        self._visit_children(element.children)

    def _visit_children(self, children: Iterable[JSXChild]) -> None:
        for child in children:
            if isinstance(child, JSXElement):
                self.visit_element(child)
            elif isinstance(child, JSXFragment):
                self._visit_children(child.children)
            elif (
                isinstance(child, JSXExpressionContainer)
                and child.expression is not None
            ):
                self.visit_expression(child.expression)

    def _visit_runtime_call(self, call: CallExpression) -> None:
        if not call.arguments:
            return
        name = self._runtime_call_name(call.arguments[0])
        if name is not None:
            self.usages.append((name, call.span))
        if len(call.arguments) < 2:
            return
        props = call.arguments[1]
        if isinstance(props, ObjectExpression):
            for prop in props.properties:
                if prop.key != "children" or prop.value is None:
                    continue
                if isinstance(prop.value, ArrayExpression):
                    for item in prop.value.elements:
                        self.visit_expression(item)
                else:
                    self.visit_expression(prop.value)
        if _factory_name(call.callee) == "createElement":
            for child in call.arguments[2:]:
                self.visit_expression(child)

    def _runtime_call_name(self, target: Expression) -> str | None:
        while isinstance(target, MemberExpression):
            target = target.object
        if not isinstance(target, Identifier):
            return None
        if target.name in self._runtime_identifiers:
            return None
        return target.name if is_component_name(target.name) else None


def collect_usages(
    statements: Iterable[Statement],
    runtime_identifiers: AbstractSet[str] = frozenset(),
    *,
    factory_properties: AbstractSet[str] = RUNTIME_FACTORY_PROPERTIES,
) -> list[tuple[str, Span]]:
    """Return every markup usage in ``statements`` (not deduplicated)."""

    collector = UsageCollector(
        runtime_identifiers, factory_properties=factory_properties
    )
    collector.visit_statements(statements)
    return collector.usages
