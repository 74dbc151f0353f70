"""Heuristic component classification for top-level declarations.

A declaration is a component when its name starts with an uppercase letter
and either its annotation names a component type or its body produces markup.
Markup is recognized both as literal elements and as calls into the compiled
markup runtime (``jsx(...)``, ``(0, _jsx)(...)``, ``runtime.jsxs(...)``).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import AbstractSet, Iterable

from .syntax import (
    ArrowFunctionExpression,
    BlockStatement,
    CallExpression,
    ComputedMemberExpression,
    Expression,
    ExpressionStatement,
    FunctionExpression,
    Identifier,
    IfStatement,
    JSXElement,
    JSXFragment,
    MemberExpression,
    ReturnStatement,
    SequenceExpression,
    Statement,
    StringLiteral,
    TypeReference,
    unwrap_parentheses,
)

__all__ = [
    "COMPONENT_TYPE_NAMES",
    "ComponentClassifier",
    "HOC_CALLEES",
    "RUNTIME_FACTORY_PROPERTIES",
    "is_component",
    "is_function_component",
    "is_component_name",
]

COMPONENT_TYPE_NAMES: frozenset[str] = frozenset(
    {
        "FC",
        "FunctionComponent",
        "VFC",
        "ReactElement",
        "ReactNode",
        "Component",
    }
)
RUNTIME_FACTORY_PROPERTIES: frozenset[str] = frozenset(
    {"jsx", "jsxs", "jsxDEV", "Fragment", "createElement"}
)
HOC_CALLEES: frozenset[str] = frozenset({"forwardRef", "memo"})


def is_component_name(name: str) -> bool:
    """Return ``True`` when ``name`` starts with an uppercase letter.

    Example:
        >>> is_component_name("Button"), is_component_name("button")
        (True, False)
    """

    return bool(name) and name[0].isupper()


@dataclass(frozen=True, slots=True)
class ComponentClassifier:
    """Classify declarations against one module's runtime import set."""

    runtime_identifiers: AbstractSet[str] = frozenset()
    component_type_names: AbstractSet[str] = COMPONENT_TYPE_NAMES
    factory_properties: AbstractSet[str] = RUNTIME_FACTORY_PROPERTIES
    hoc_callees: AbstractSet[str] = HOC_CALLEES

    def is_component(
        self,
        name: str,
        type_annotation: TypeReference | None,
        init: Expression | None,
    ) -> bool:
        """Classify a variable binding ``name: type_annotation = init``."""

        if not is_component_name(name):
            return False
        if self._is_component_type(type_annotation):
            return True
        if init is None:
            return False
        return self._contains_markup(init)

    def is_function_component(
        self,
        name: str,
        return_type: TypeReference | None,
        body: Iterable[Statement] | None,
    ) -> bool:
        """Classify ``function name(): return_type { body }``."""

        if not is_component_name(name):
            return False
        if self._is_component_type(return_type):
            return True
        if body is None:
            return False
        return self._returns_markup(body)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _is_component_type(self, annotation: TypeReference | None) -> bool:
        return (
            annotation is not None
            and annotation.name is not None
            and annotation.name in self.component_type_names
        )

    def _contains_markup(self, expression: Expression) -> bool:
        expression = unwrap_parentheses(expression)
        if self._is_markup(expression):
            return True
        if isinstance(expression, ArrowFunctionExpression):
            if expression.expression:
                return any(
                    isinstance(statement, ExpressionStatement)
                    and self._is_markup(statement.expression)
                    for statement in expression.body
                )
            return self._returns_markup(expression.body)
        if isinstance(expression, FunctionExpression):
            return expression.body is not None and self._returns_markup(
                expression.body
            )
        if isinstance(expression, CallExpression) and self._is_hoc_call(
            expression
        ):
            return bool(expression.arguments) and self._contains_markup(
                expression.arguments[0]
            )
        return False

    def _returns_markup(self, statements: Iterable[Statement]) -> bool:
        for statement in statements:
            if isinstance(statement, ReturnStatement):
                if statement.argument is not None and self._is_markup(
                    statement.argument
                ):
                    return True
            elif isinstance(statement, BlockStatement):
                if self._returns_markup(statement.body):
                    return True
            elif isinstance(statement, IfStatement):
                branches = [statement.consequent]
                if statement.alternate is not None:
                    branches.append(statement.alternate)
                if self._returns_markup(branches):
                    return True
        return False

    def _is_markup(self, expression: Expression) -> bool:
        expression = unwrap_parentheses(expression)
        if isinstance(expression, (JSXElement, JSXFragment)):
            return True
        return self.is_runtime_call(expression)

    def is_runtime_call(self, expression: Expression) -> bool:
        """Return ``True`` for calls into the compiled markup runtime."""

        if not isinstance(expression, CallExpression):
            return False
        callee = unwrap_parentheses(expression.callee)
        if isinstance(callee, Identifier):
            return callee.name in self.runtime_identifiers
        if isinstance(callee, SequenceExpression):
            if not callee.expressions:
                return False
            callee = unwrap_parentheses(callee.expressions[-1])
            if isinstance(callee, Identifier):
                return callee.name in self.runtime_identifiers
        return self._is_factory_member(callee)

    def _is_factory_member(self, callee: Expression) -> bool:
        if isinstance(callee, MemberExpression):
            return callee.property in self.factory_properties
        if isinstance(callee, ComputedMemberExpression):
            key = unwrap_parentheses(callee.expression)
            return (
                isinstance(key, StringLiteral)
                and key.value in self.factory_properties
            )
        return False

    def _is_hoc_call(self, call: CallExpression) -> bool:
        callee = unwrap_parentheses(call.callee)
        if isinstance(callee, Identifier):
            return callee.name in self.hoc_callees
        if isinstance(callee, MemberExpression):
            return callee.property in self.hoc_callees
        return False


def is_component(
    name: str,
    type_annotation: TypeReference | None,
    init: Expression | None,
    runtime_identifiers: AbstractSet[str] = frozenset(),
) -> bool:
    """Classify a variable declaration with the default settings."""

    classifier = ComponentClassifier(runtime_identifiers=runtime_identifiers)
    return classifier.is_component(name, type_annotation, init)


def is_function_component(
    name: str,
    return_type: TypeReference | None,
    body: Iterable[Statement] | None,
    runtime_identifiers: AbstractSet[str] = frozenset(),
) -> bool:
    """Classify a function declaration with the default settings."""

    classifier = ComponentClassifier(runtime_identifiers=runtime_identifiers)
    return classifier.is_function_component(name, return_type, body)
