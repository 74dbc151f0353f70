"""Value-level import collection."""

from __future__ import annotations

from typing import Iterable, Sequence

from .models import ImportRecord
from .positions import LineIndex
from .syntax import ImportDeclaration, Span, Statement

__all__ = ["collect_imports", "runtime_factory_identifiers"]

DEFAULT_RUNTIME_MODULES: tuple[str, ...] = (
    "react/jsx-runtime",
    "react/jsx-dev-runtime",
)


def collect_imports(
    statements: Iterable[Statement],
    *,
    line_index: LineIndex | None = None,
) -> list[ImportRecord]:
    """Return one record per value-level import statement.

    Type-only statements are dropped entirely and type-only specifiers are
    dropped from the surviving statements. Side-effect imports produce a
    record with no identifiers.
    """

    records: list[ImportRecord] = []
    for statement in statements:
        if not isinstance(statement, ImportDeclaration) or statement.type_only:
            continue
        identifiers = tuple(
            specifier.local.name
            for specifier in statement.specifiers
            if not specifier.type_only
        )
        literal = statement.source.span
        records.append(
            ImportRecord(
                identifiers=identifiers,
                source=statement.source.value,
                source_span=Span(literal.start + 1, literal.end - 1),
                source_range=(
                    line_index.literal_range(literal)
                    if line_index is not None
                    else None
                ),
            )
        )
    return records


def runtime_factory_identifiers(
    imports: Iterable[ImportRecord],
    runtime_modules: Sequence[str] = DEFAULT_RUNTIME_MODULES,
) -> frozenset[str]:
    """Return local names bound by imports of a markup runtime module.

    Example:
        >>> record = ImportRecord(("_jsx",), "react/jsx-runtime", Span(0, 0))
        >>> sorted(runtime_factory_identifiers([record]))
        ['_jsx']
    """

    modules = set(runtime_modules)
    return frozenset(
        name
        for record in imports
        if record.source in modules
        for name in record.identifiers
    )
