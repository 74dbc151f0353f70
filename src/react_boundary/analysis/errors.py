"""Domain-specific exceptions for boundary analysis."""

from __future__ import annotations

from dataclasses import dataclass

from .syntax import Span


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """First problem reported by the parser, with a rendered snippet."""

    message: str
    span: Span
    line: int
    character: int
    snippet: str

    def render(self) -> str:
        location = f"{self.line + 1}:{self.character + 1}"
        return f"{self.message} at {location}\n{self.snippet}"


class AnalysisError(RuntimeError):
    """Base error for failures that prevent a file from being analyzed."""


class UnsupportedExtensionError(AnalysisError):
    """Raised when no grammar is registered for the requested extension."""

    def __init__(self, extension: str) -> None:
        self.extension = extension
        super().__init__(
            f"Failed to parse extension: unsupported extension {extension!r}"
        )


class SourceDecodeError(AnalysisError):
    """Raised when the source bytes are not valid UTF-8."""

    def __init__(self, reason: UnicodeDecodeError) -> None:
        self.offset = reason.start
        super().__init__(
            f"Source is not valid UTF-8 (byte offset {reason.start}): "
            f"{reason.reason}"
        )


class SourceParseError(AnalysisError):
    """Raised when the parser reports a syntax error."""

    def __init__(self, diagnostic: Diagnostic) -> None:
        self.diagnostic = diagnostic
        super().__init__(f"Error: {diagnostic.render()}")


__all__ = [
    "AnalysisError",
    "Diagnostic",
    "SourceDecodeError",
    "SourceParseError",
    "UnsupportedExtensionError",
]
