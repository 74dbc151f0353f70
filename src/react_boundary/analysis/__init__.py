"""Client/server boundary analysis for React-style modules.

Example:
    >>> from react_boundary.analysis import analyze
    >>> result = analyze(b'"use client"; export const A = () => <div/>;', "tsx")
    >>> result.is_client_module, [c.name for c in result.components]
    (True, ['A'])
"""

from __future__ import annotations

from .components import (
    ComponentClassifier,
    is_component,
    is_function_component,
)
from .errors import (
    AnalysisError,
    Diagnostic,
    SourceDecodeError,
    SourceParseError,
    UnsupportedExtensionError,
)
from .exports import ExportResolver, ResolvedExport, resolve_exports
from .imports import collect_imports, runtime_factory_identifiers
from .models import (
    AnalysisResult,
    ExportedComponent,
    ImportRecord,
    MarkupUsage,
)
from .parsing import SUPPORTED_EXTENSIONS, ParsedModule, parse_module
from .positions import (
    LineIndex,
    Position,
    Range,
    offset_to_position,
    span_to_range,
    string_literal_to_range,
)
from .service import BoundaryAnalyzer, analyze
from .usages import collect_usages

__all__ = [
    "AnalysisError",
    "AnalysisResult",
    "BoundaryAnalyzer",
    "ComponentClassifier",
    "Diagnostic",
    "ExportResolver",
    "ExportedComponent",
    "ImportRecord",
    "LineIndex",
    "MarkupUsage",
    "ParsedModule",
    "Position",
    "Range",
    "ResolvedExport",
    "SUPPORTED_EXTENSIONS",
    "SourceDecodeError",
    "SourceParseError",
    "UnsupportedExtensionError",
    "analyze",
    "collect_imports",
    "collect_usages",
    "is_component",
    "is_function_component",
    "offset_to_position",
    "parse_module",
    "resolve_exports",
    "runtime_factory_identifiers",
    "span_to_range",
    "string_literal_to_range",
]
