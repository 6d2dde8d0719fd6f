"""Comment extraction from line-oriented source text."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

from .errors import ConfigError
from .models import CommentLine
from .syntax import CommentSyntax


class CommentExtractor:
    """Turns source lines into comment lines for a single comment syntax.

    Each comment block yields its interior lines followed by exactly one
    ``CommentLine(last=True)``. A block still open at end of input is closed
    by that final marker as well.
    """

    def __init__(self, syntax: CommentSyntax) -> None:
        if (syntax.start is None) != (syntax.stop is None):
            raise ConfigError(
                f"comment syntax `{syntax.extension}`: start and stop must both be present, "
                "or they must both be absent."
            )
        if syntax.start is None and syntax.each_line is None:
            raise ConfigError(f"comment syntax `{syntax.extension}` needs an `each_line` pattern")
        self.syntax = syntax

    def extract(self, lines: Iterable[str]) -> Iterator[CommentLine]:
        in_comment = False
        for line in lines:
            if self.syntax.delimited:
                event, in_comment = self._delimited(line, in_comment)
            else:
                event, in_comment = self._line_based(line, in_comment)
            if event is not None:
                yield event
        if in_comment:
            yield CommentLine("", last=True)

    def _line_based(self, line: str, in_comment: bool) -> tuple[Optional[CommentLine], bool]:
        each_line = self.syntax.each_line
        match = each_line.search(line) if each_line is not None else None
        if match is not None:
            text = match.group(1)
            return (CommentLine(text) if text is not None else None), True
        if in_comment:
            return CommentLine("", last=True), False
        return None, False

    def _delimited(self, line: str, in_comment: bool) -> tuple[Optional[CommentLine], bool]:
        start, stop, each_line = self.syntax.start, self.syntax.stop, self.syntax.each_line
        if not in_comment:
            return None, start is not None and start.search(line) is not None
        if stop is not None and stop.search(line):
            return CommentLine("", last=True), False
        if each_line is not None:
            match = each_line.search(line)
            if match is not None and match.group(1) is not None:
                return CommentLine(match.group(1)), True
        # Lines the prefix pattern does not recognise (blank lines, say) are kept verbatim.
        return CommentLine(line), True


__all__ = ["CommentExtractor"]
