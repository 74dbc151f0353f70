"""Result models returned by :func:`react_boundary.analysis.analyze`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from .positions import Range
from .syntax import Span

__all__ = [
    "AnalysisResult",
    "ExportKind",
    "ExportedComponent",
    "ImportRecord",
    "MarkupUsage",
]

ExportKind = Literal[
    "default",
    "named",
    "default-function",
    "specifier",
    "registration",
]


def _span_dict(span: Span) -> dict[str, int]:
    return {"start": span.start, "end": span.end}


@dataclass(frozen=True, slots=True)
class ImportRecord:
    """Value-level import statement and the local names it binds."""

    identifiers: tuple[str, ...]
    source: str
    source_span: Span
    source_range: Range | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "identifiers": list(self.identifiers),
            "source": self.source,
            "source_span": _span_dict(self.source_span),
        }
        if self.source_range is not None:
            payload["source_range"] = self.source_range.to_dict()
        return payload


@dataclass(frozen=True, slots=True)
class ExportedComponent:
    """Component reachable through one export form."""

    name: str
    span: Span
    is_client_component: bool
    export_kind: ExportKind = "named"
    range: Range | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "name": self.name,
            "is_client_component": self.is_client_component,
            "export_kind": self.export_kind,
            "span": _span_dict(self.span),
        }
        if self.range is not None:
            payload["range"] = self.range.to_dict()
        return payload


@dataclass(frozen=True, slots=True)
class MarkupUsage:
    """Markup element referencing an imported component."""

    component_name: str
    span: Span
    range: Range | None = None

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "component_name": self.component_name,
            "span": _span_dict(self.span),
        }
        if self.range is not None:
            payload["range"] = self.range.to_dict()
        return payload


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Everything learned about one module."""

    imports: tuple[ImportRecord, ...] = ()
    components: tuple[ExportedComponent, ...] = ()
    jsx_usages: tuple[MarkupUsage, ...] = ()
    is_client_module: bool = False

    @property
    def imported_identifiers(self) -> frozenset[str]:
        return frozenset(
            name for record in self.imports for name in record.identifiers
        )

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of the result.

        Example:
            >>> AnalysisResult().to_dict()["components"]
            []
        """

        return {
            "is_client_module": self.is_client_module,
            "imports": [record.to_dict() for record in self.imports],
            "components": [item.to_dict() for item in self.components],
            "jsx_usages": [usage.to_dict() for usage in self.jsx_usages],
        }
