"""Byte offset to line/character mapping.

Lines are counted by newline characters. Characters are counted since the
last newline, in Unicode scalar values by default or in UTF-16 code units when
``encoding="utf-16"`` is requested (the unit used by editor position
protocols).

Example:
    >>> offset_to_position("ab\\ncd", 4)
    Position(line=1, character=1)
"""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass
from typing import Literal

from .syntax import Span

PositionEncoding = Literal["codepoint", "utf-16"]

__all__ = [
    "LineIndex",
    "Position",
    "PositionEncoding",
    "Range",
    "offset_to_position",
    "span_to_range",
    "string_literal_to_range",
]


@dataclass(frozen=True, slots=True, order=True)
class Position:
    line: int
    character: int

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True, slots=True)
class Range:
    start: Position
    end: Position

    def to_dict(self) -> dict[str, dict[str, int]]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


class LineIndex:
    """Precomputed offsets answering position lookups in ``O(log n)``."""

    def __init__(
        self,
        source: str,
        *,
        encoding: PositionEncoding = "codepoint",
    ) -> None:
        if encoding not in ("codepoint", "utf-16"):
            raise ValueError(f"Unsupported position encoding: {encoding!r}")
        self._encoding = encoding
        self._char_starts: list[int] = []
        self._units: list[int] = [0]
        self._newlines: list[int] = []
        total_bytes = 0
        total_units = 0
        for index, char in enumerate(source):
            self._char_starts.append(total_bytes)
            total_bytes += len(char.encode("utf-8"))
            if encoding == "utf-16" and ord(char) > 0xFFFF:
                total_units += 2
            else:
                total_units += 1
            self._units.append(total_units)
            if char == "\n":
                self._newlines.append(index)

    @property
    def encoding(self) -> PositionEncoding:
        return self._encoding

    def position(self, offset: int) -> Position:
        """Return the position of byte ``offset``.

        Characters whose first byte lies before ``offset`` are counted, so an
        offset past the end of the text maps to the end of the last line.
        """

        counted = bisect_left(self._char_starts, offset)
        line = bisect_left(self._newlines, counted)
        line_start = self._newlines[line - 1] + 1 if line else 0
        character = self._units[counted] - self._units[line_start]
        return Position(line=line, character=character)

    def range(self, span: Span) -> Range:
        return Range(
            start=self.position(span.start),
            end=self.position(span.end),
        )

    def literal_range(self, span: Span) -> Range:
        """Return the range inside a quoted literal whose span has quotes."""

        return Range(
            start=self.position(span.start + 1),
            end=self.position(span.end - 1),
        )


def offset_to_position(
    source: str,
    byte_offset: int,
    *,
    encoding: PositionEncoding = "codepoint",
) -> Position:
    """Convert ``byte_offset`` into a zero-based line/character position."""

    return LineIndex(source, encoding=encoding).position(byte_offset)


def span_to_range(
    source: str,
    span: Span,
    *,
    encoding: PositionEncoding = "codepoint",
) -> Range:
    """Map both endpoints of ``span`` independently."""

    return LineIndex(source, encoding=encoding).range(span)


def string_literal_to_range(
    source: str,
    span: Span,
    *,
    encoding: PositionEncoding = "codepoint",
) -> Range:
    """Map a quoted literal span to the range of its interior.

    One delimiter byte is assumed on each side; escape sequences are not
    accounted for.

    Example:
        >>> string_literal_to_range('import "x"', Span(7, 10))
        Range(start=Position(line=0, character=8), end=Position(line=0, character=9))
    """

    return LineIndex(source, encoding=encoding).literal_range(span)
