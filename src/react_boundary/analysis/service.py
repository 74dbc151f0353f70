"""Single-file boundary analysis orchestration."""

from __future__ import annotations

from react_boundary.core.config import AnalyzerSettings
from react_boundary.core.logging import get_logger

from .components import ComponentClassifier
from .errors import AnalysisError
from .exports import resolve_exports
from .imports import collect_imports, runtime_factory_identifiers
from .models import AnalysisResult, ExportedComponent, MarkupUsage
from .parsing import ParsedModule, parse_module
from .positions import LineIndex
from .usages import collect_usages

__all__ = ["BoundaryAnalyzer", "analyze"]


class BoundaryAnalyzer:
    """Run the analysis passes for one module at a time.

    Instances hold only immutable settings, so one analyzer can serve
    concurrent callers.

    Example:
        >>> analyzer = BoundaryAnalyzer()
        >>> result = analyzer.analyze(b"export const A = () => <div/>;", "tsx")
        >>> [component.name for component in result.components]
        ['A']
    """

    def __init__(self, settings: AnalyzerSettings | None = None) -> None:
        self._settings = settings or AnalyzerSettings()

    @property
    def settings(self) -> AnalyzerSettings:
        return self._settings

    def analyze(self, content: bytes, extension: str) -> AnalysisResult:
        """Parse ``content`` and classify its client/server boundary.

        Raises:
            UnsupportedExtensionError: If ``extension`` is not supported.
            SourceDecodeError: If ``content`` is not valid UTF-8.
            SourceParseError: If the source has a syntax error.
        """

        logger = get_logger(__name__, extension=extension, size=len(content))
        try:
            parsed = parse_module(content, extension)
        except AnalysisError as exc:
            logger.error("analysis-failed", error=str(exc))
            raise

        result = self.analyze_module(parsed)
        logger.debug(
            "analysis-complete",
            grammar=parsed.grammar,
            client=result.is_client_module,
            imports=len(result.imports),
            components=len(result.components),
            usages=len(result.jsx_usages),
        )
        return result

    def analyze_module(self, parsed: ParsedModule) -> AnalysisResult:
        """Run every pass over an already parsed module."""

        settings = self._settings
        program = parsed.program
        statements = program.body
        line_index = LineIndex(parsed.text, encoding=settings.position_encoding)

        is_client = any(
            directive.value == settings.client_directive
            for directive in program.directives
        )

        imports = collect_imports(statements, line_index=line_index)
        runtime_identifiers = runtime_factory_identifiers(
            imports, settings.runtime_modules
        )
        factory_properties = frozenset(settings.runtime_factory_properties)
        classifier = ComponentClassifier(
            runtime_identifiers=runtime_identifiers,
            component_type_names=frozenset(settings.component_type_names),
            factory_properties=factory_properties,
            hoc_callees=frozenset(settings.hoc_callees),
        )

        components = tuple(
            ExportedComponent(
                name=resolved.name,
                span=resolved.span,
                is_client_component=is_client,
                export_kind=resolved.kind,
                range=line_index.range(resolved.span),
            )
            for resolved in resolve_exports(
                statements,
                classifier,
                registration_callee=settings.registration_callee,
            )
        )

        imported = {name for record in imports for name in record.identifiers}
        usages = tuple(
            MarkupUsage(
                component_name=name,
                span=span,
                range=line_index.range(span),
            )
            for name, span in collect_usages(
                statements,
                runtime_identifiers,
                factory_properties=factory_properties,
            )
            if name in imported
        )

        return AnalysisResult(
            imports=tuple(imports),
            components=components,
            jsx_usages=usages,
            is_client_module=is_client,
        )


def analyze(
    content: bytes,
    extension: str,
    *,
    settings: AnalyzerSettings | None = None,
) -> AnalysisResult:
    """Analyze one module's source bytes.

    Example:
        >>> source = b"const Button = () => <button/>; export default Button;"
        >>> [c.name for c in analyze(source, "tsx").components]
        ['Button']
    """

    return BoundaryAnalyzer(settings).analyze(content, extension)
