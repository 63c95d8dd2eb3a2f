"""
Ignore-Region Filter — Lexer for VALIDATION:IGNORE markers.

Agent documents deliberately contain wrong example code ("do NOT do
this") for human readers. Authors fence those examples:

    <!-- VALIDATION:IGNORE:START -->
    CloudXInitParams(...)   // old API, shown as a counter-example
    <!-- VALIDATION:IGNORE:END -->

The lexer turns raw text into a stream of TEXT / START / END tokens and
a small state machine pairs them into regions. Every error state has a
name (see InputErrorKind); nothing is guessed.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator

from agentcheck.core.errors import InputError, InputErrorKind
from agentcheck.core.location import line_of


class TokenKind(str, Enum):
    TEXT = "text"
    START = "start"
    END = "end"


@dataclass(frozen=True)
class Token:
    kind: TokenKind
    start: int
    end: int
    line: int


@dataclass(frozen=True)
class IgnoreRegion:
    """A removed span, in raw-text offsets. Markers included."""
    start: int
    end: int
    start_line: int
    end_line: int

    @property
    def length(self) -> int:
        return self.end - self.start

    @property
    def separator(self) -> str:
        """
        What the region leaves behind: its newlines, or one space.

        Text on either side of a region never joins into a new marker,
        and filtered lines stay aligned with raw lines.
        """
        return "\n" * (self.end_line - self.start_line) or " "


@dataclass(frozen=True)
class IgnoreMarkers:
    """
    The paired marker words.

    A marker may stand alone or be wrapped in an HTML comment; the
    comment delimiters are consumed with the marker.
    """
    start: str = "VALIDATION:IGNORE:START"
    end: str = "VALIDATION:IGNORE:END"

    def pattern(self) -> re.Pattern:
        return re.compile(
            r"(?:<!--[ \t]*)?"
            rf"(?:(?P<start>{re.escape(self.start)})|(?P<end>{re.escape(self.end)}))"
            r"(?:[ \t]*-->)?"
        )


DEFAULT_MARKERS = IgnoreMarkers()


def tokenize(text: str, markers: IgnoreMarkers = DEFAULT_MARKERS) -> Iterator[Token]:
    """Split text into TEXT runs and marker tokens."""
    pos = 0
    for m in markers.pattern().finditer(text):
        if m.start() > pos:
            yield Token(TokenKind.TEXT, pos, m.start(), line_of(text, pos))
        kind = TokenKind.START if m.group("start") else TokenKind.END
        yield Token(kind, m.start(), m.end(), line_of(text, m.start()))
        pos = m.end()
    if pos < len(text):
        yield Token(TokenKind.TEXT, pos, len(text), line_of(text, pos))


def scan_ignore_regions(
    text: str,
    markers: IgnoreMarkers = DEFAULT_MARKERS,
) -> list[IgnoreRegion]:
    """
    Pair START/END markers into regions.

    Raises:
        InputError: nested START, END without START, or START never closed
    """
    regions: list[IgnoreRegion] = []
    open_token = None

    for token in tokenize(text, markers):
        if token.kind is TokenKind.TEXT:
            continue

        if token.kind is TokenKind.START:
            if open_token is not None:
                raise InputError(
                    InputErrorKind.NESTED_REGION,
                    f"'{markers.start}' found inside the ignore region opened "
                    f"at line {open_token.line}",
                    line=token.line,
                )
            open_token = token
            continue

        if open_token is None:
            raise InputError(
                InputErrorKind.UNMATCHED_END,
                f"'{markers.end}' has no matching '{markers.start}'",
                line=token.line,
            )
        regions.append(IgnoreRegion(
            start=open_token.start,
            end=token.end,
            start_line=open_token.line,
            end_line=token.line,
        ))
        open_token = None

    if open_token is not None:
        raise InputError(
            InputErrorKind.UNTERMINATED_REGION,
            f"'{markers.start}' is never closed by '{markers.end}'",
            line=open_token.line,
        )

    return regions


def remove_regions(text: str, regions: list[IgnoreRegion]) -> str:
    """Replace already-scanned regions with their separators."""
    parts: list[str] = []
    pos = 0
    for region in regions:
        parts.append(text[pos:region.start])
        parts.append(region.separator)
        pos = region.end
    parts.append(text[pos:])
    return "".join(parts)


def filter_ignore_regions(text: str, markers: IgnoreMarkers = DEFAULT_MARKERS) -> str:
    """Return text with every ignore region (markers included) removed."""
    return remove_regions(text, scan_ignore_regions(text, markers))
