"""Grouping of comment lines into tagged documentation fragments."""

from __future__ import annotations

import re
from typing import Dict, Iterable, Iterator, List

from .errors import ReservedTagError
from .logging import get_logger
from .models import BODY_VARIABLE, ORDER_TAG, CommentLine, Fragment

_TAG_RE = re.compile(r".*@(?P<tag>\S+)\s+(?P<value>.*)")

_LOGGER = get_logger("fragments")


def parse_order(text: str) -> float:
    """Parse an ``@order`` value, falling back to 0.0 when it is not a number."""
    try:
        return float(text.strip())
    except ValueError as exc:
        _LOGGER.warning("Error while evaluating @order %s: %s", text, exc)
        return 0.0


class FragmentParser:
    """Builds one :class:`Fragment` per comment block.

    Lines carrying an ``@tag value`` annotation become tags; every other line
    is body text. Blocks without any body line are dropped.
    """

    def __init__(self, source: str | None = None) -> None:
        self.source = source

    def parse(self, comments: Iterable[CommentLine]) -> Iterator[Fragment]:
        tags: Dict[str, str] = {}
        body: List[str] = []
        order = 0.0
        for comment in comments:
            if comment.last:
                if body:
                    yield self._build(tags, order, body)
                tags, body, order = {}, [], 0.0
                continue

            match = _TAG_RE.match(comment.text)
            if match is None:
                body.append(comment.text)
                continue

            tag = match.group("tag")
            value = match.group("value").strip()
            if tag == BODY_VARIABLE:
                raise ReservedTagError(tag, self.source)
            if tag == ORDER_TAG:
                order = parse_order(value)
            tags[tag] = value

        if body:
            yield self._build(tags, order, body)

    def _build(self, tags: Dict[str, str], order: float, body: List[str]) -> Fragment:
        text = "".join(f"{line}\n" for line in body)
        return Fragment(tags=tags, order=order, body=text, source=self.source)


__all__ = ["FragmentParser", "parse_order"]
