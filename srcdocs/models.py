"""Core data models shared across srcdocs components."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional

BODY_VARIABLE = "__body__"
FILE_TAG = "file"
ORDER_TAG = "order"


@dataclass(frozen=True)
class CommentLine:
    """A single line of comment text, or the marker closing a comment block."""

    text: str
    last: bool = False


@dataclass
class Fragment:
    """One extracted comment block: its tags, sort order and body text."""

    tags: Dict[str, str] = field(default_factory=dict)
    order: float = 0.0
    body: str = ""
    source: Optional[str] = None

    def context(self) -> Dict[str, str]:
        """Return the template variables for this fragment."""
        variables = dict(self.tags)
        variables[BODY_VARIABLE] = self.body
        return variables


@dataclass(frozen=True)
class RenderedBlock:
    """Rendered text destined for one output file."""

    order: float
    body: str
