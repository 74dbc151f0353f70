"""Reconcile classified declarations with the module's export forms."""

from __future__ import annotations

from typing import Iterable, NamedTuple

from .components import ComponentClassifier
from .models import ExportKind
from .syntax import (
    CallExpression,
    ExportDefaultDeclaration,
    ExportNamedDeclaration,
    Expression,
    ExpressionStatement,
    FunctionDeclaration,
    Identifier,
    ObjectExpression,
    Span,
    Statement,
    VariableDeclaration,
    unwrap_parentheses,
)

__all__ = ["ExportResolver", "ResolvedExport", "resolve_exports"]

DEFAULT_REGISTRATION_CALLEE = "__export"


class ResolvedExport(NamedTuple):
    name: str
    span: Span
    kind: ExportKind


class ExportResolver:
    """Three-pass export resolution over top-level statements.

    The declaration map is keyed by identifier with last-write-wins
    semantics; lexical scoping is ignored.

    Example:
        >>> resolver = ExportResolver(ComponentClassifier())
        >>> resolver.resolve(())
        []
    """

    def __init__(
        self,
        classifier: ComponentClassifier,
        *,
        registration_callee: str = DEFAULT_REGISTRATION_CALLEE,
    ) -> None:
        self._classifier = classifier
        self._registration_callee = registration_callee
        self.declarations: dict[str, Span] = {}

    def resolve(self, statements: Iterable[Statement]) -> list[ResolvedExport]:
        statements = tuple(statements)
        self.declare(statements)
        exports = self._registrations(statements)
        for statement in statements:
            if isinstance(statement, ExportDefaultDeclaration):
                exports.extend(self._default_export(statement))
            elif isinstance(statement, ExportNamedDeclaration):
                exports.extend(self._named_export(statement))
        return exports

    # ------------------------------------------------------------------
    # Declaration pass
    # ------------------------------------------------------------------
    def declare(self, statements: Iterable[Statement]) -> None:
        """Record every top-level declaration classified as a component."""

        for statement in statements:
            if isinstance(statement, ExportNamedDeclaration):
                statement = statement.declaration
            elif isinstance(statement, ExportDefaultDeclaration):
                statement = statement.declaration
            for name, span in self._classify(statement):
                self.declarations[name] = span

    def _classify(self, statement: object) -> Iterable[tuple[str, Span]]:
        if isinstance(statement, VariableDeclaration):
            for declarator in statement.declarations:
                if declarator.id is None:
                    continue
                if self._classifier.is_component(
                    declarator.id.name,
                    declarator.type_annotation,
                    declarator.init,
                ):
                    yield declarator.id.name, declarator.id.span
        elif isinstance(statement, FunctionDeclaration):
            if statement.id is not None and self._classifier.is_function_component(
                statement.id.name, statement.return_type, statement.body
            ):
                yield statement.id.name, statement.id.span

    # ------------------------------------------------------------------
    # Registration pass
    # ------------------------------------------------------------------
    def _registrations(
        self, statements: Iterable[Statement]
    ) -> list[ResolvedExport]:
        exports: list[ResolvedExport] = []
        for statement in statements:
            if not isinstance(statement, ExpressionStatement):
                continue
            registry = self._registry_object(statement.expression)
            if registry is None:
                continue
            for prop in registry.properties:
                if prop.key is None:
                    continue
                span = self.declarations.get(prop.key)
                if span is not None:
                    exports.append(
                        ResolvedExport(prop.key, span, "registration")
                    )
        return exports

    def _registry_object(
        self, expression: Expression
    ) -> ObjectExpression | None:
        call = unwrap_parentheses(expression)
        if not isinstance(call, CallExpression) or len(call.arguments) != 2:
            return None
        callee = unwrap_parentheses(call.callee)
        if not (
            isinstance(callee, Identifier)
            and callee.name == self._registration_callee
        ):
            return None
        registry = unwrap_parentheses(call.arguments[1])
        return registry if isinstance(registry, ObjectExpression) else None

    # ------------------------------------------------------------------
    # Export-statement pass
    # ------------------------------------------------------------------
    def _default_export(
        self, statement: ExportDefaultDeclaration
    ) -> list[ResolvedExport]:
        declaration = statement.declaration
        if isinstance(declaration, FunctionDeclaration):
            return self._register(declaration, "default-function")
        target = unwrap_parentheses(declaration)
        if isinstance(target, Identifier):
            span = self.declarations.get(target.name)
            if span is not None:
                return [ResolvedExport(target.name, span, "default")]
        return []

    def _named_export(
        self, statement: ExportNamedDeclaration
    ) -> list[ResolvedExport]:
        if statement.type_only:
            return []
        if statement.declaration is not None:
            return self._register(statement.declaration, "named")
        if statement.source is not None:
            return []
        exports: list[ResolvedExport] = []
        for specifier in statement.specifiers:
            if specifier.type_only:
                continue
            for name in (specifier.local, specifier.exported):
                span = self.declarations.get(name)
                if span is not None:
                    exports.append(ResolvedExport(name, span, "specifier"))
                    break
        return exports

    def _register(
        self, declaration: Statement, kind: ExportKind
    ) -> list[ResolvedExport]:
        exports = []
        for name, span in self._classify(declaration):
            self.declarations[name] = span
            exports.append(ResolvedExport(name, span, kind))
        return exports


def resolve_exports(
    statements: Iterable[Statement],
    classifier: ComponentClassifier,
    *,
    registration_callee: str = DEFAULT_REGISTRATION_CALLEE,
) -> list[ResolvedExport]:
    """Return exported components in resolution order (not deduplicated)."""

    resolver = ExportResolver(
        classifier, registration_callee=registration_callee
    )
    return resolver.resolve(statements)
