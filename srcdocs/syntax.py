"""Comment syntax descriptors and the per-extension lookup table."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from fnmatch import translate
from pathlib import PurePath
from re import Pattern
from typing import Iterable, Iterator, List, Optional, Tuple, Union

from .errors import ConfigError

PathLike = Union[str, PurePath]


@dataclass(frozen=True)
class CommentSyntax:
    """How comments look in files whose name matches ``extension``.

    A syntax is either delimited (``start`` and ``stop`` both set, with an
    optional ``each_line`` prefix stripper) or line based (only ``each_line``,
    applied to every line independently).
    """

    extension: str
    start: Optional[Pattern[str]] = None
    each_line: Optional[Pattern[str]] = None
    stop: Optional[Pattern[str]] = None
    order: float = 0.0
    matchers: Tuple[Pattern[str], ...] = field(default=(), repr=False, compare=False)

    @property
    def delimited(self) -> bool:
        return self.start is not None

    def matches(self, path: PathLike) -> bool:
        """Return True when the full path or the bare filename matches the glob."""
        pure = PurePath(path)
        candidates = (pure.as_posix(), pure.name)
        return any(matcher.match(candidate) for matcher in self.matchers for candidate in candidates)


def expand_braces(pattern: str) -> List[str]:
    """Expand ``{a,b}`` alternatives into plain fnmatch patterns."""
    start = pattern.find("{")
    if start == -1:
        return [pattern]

    depth = 0
    parts: List[str] = []
    current = start + 1
    for index in range(start, len(pattern)):
        char = pattern[index]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                parts.append(pattern[current:index])
                end = index
                break
        elif char == "," and depth == 1:
            parts.append(pattern[current:index])
            current = index + 1
    else:
        raise ConfigError(f"unbalanced braces in extension pattern `{pattern}`")

    prefix, suffix = pattern[:start], pattern[end + 1 :]
    expanded: List[str] = []
    for part in parts:
        expanded.extend(expand_braces(f"{prefix}{part}{suffix}"))
    return expanded


def compile_syntax(
    extension: str,
    *,
    start: str | None = None,
    each_line: str | None = None,
    stop: str | None = None,
    order: float = 0.0,
) -> CommentSyntax:
    """Validate raw pattern strings and build a :class:`CommentSyntax`."""
    if not isinstance(extension, str) or not extension.strip():
        raise ConfigError("comment syntax requires a non-empty `extension` glob")
    if (start is None) != (stop is None):
        raise ConfigError(
            f"comment syntax `{extension}`: start and stop must both be present, "
            "or they must both be absent."
        )
    if start is None and each_line is None:
        raise ConfigError(f"comment syntax `{extension}` needs an `each_line` pattern when start/stop are absent")

    matchers = tuple(
        re.compile(translate(alternative), re.IGNORECASE) for alternative in expand_braces(extension)
    )
    each_line_re = _compile(extension, "each_line", each_line)
    if each_line_re is not None and each_line_re.groups < 1:
        raise ConfigError(f"comment syntax `{extension}`: `each_line` must define a capture group")

    return CommentSyntax(
        extension=extension,
        start=_compile(extension, "start", start),
        each_line=each_line_re,
        stop=_compile(extension, "stop", stop),
        order=float(order),
        matchers=matchers,
    )


def _compile(extension: str, name: str, pattern: str | None) -> Optional[Pattern[str]]:
    if pattern is None:
        return None
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"comment syntax `{extension}`: invalid `{name}` regex: {exc}") from exc


class SyntaxTable:
    """Priority-ordered comment syntaxes; the first matching entry wins.

    Entries are kept in the given order after a stable sort on ``order``, so
    earlier entries win ties between overlapping extension globs.
    """

    def __init__(self, syntaxes: Iterable[CommentSyntax]) -> None:
        self._entries: Tuple[CommentSyntax, ...] = tuple(sorted(syntaxes, key=lambda syntax: syntax.order))

    def find(self, path: PathLike) -> Optional[CommentSyntax]:
        for syntax in self._entries:
            if syntax.matches(path):
                return syntax
        return None

    def __iter__(self) -> Iterator[CommentSyntax]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


DEFAULT_COMMENT_SYNTAXES: Tuple[CommentSyntax, ...] = (
    compile_syntax(
        "*.{c,cpp,java,h,hpp,c++,h++,cxx,hxx,groovy,v,js,cs,ts,jsx,tsx,go,zig,kt,kts,d,swift,php,css,scala,dart,m}",
        start=r"^\s*/\*\*\s*$",
        each_line=r"^\s*\*\s?(.*)",
        stop=r"^\s*\*/+\s*",
    ),
    compile_syntax("*.{rb,r,sh,pl,pm,jl,awk,nim,crystal,tcl}", each_line=r"^\s*#\s?(.*)$"),
    compile_syntax("*.{asm,s,clj,el,lisp,scm,ss,rkt}", each_line=r"^\s*;\s?(.*)$", order=1.0),
    compile_syntax("*.{vb,vba}", each_line=r"^\s*'\s?(.*)$", order=1.0),
    compile_syntax("*.{f,for,f90,f95,fortran}", each_line=r"^\s*!\s?(.*)$", order=1.0),
    compile_syntax("*.{lua,hs,elm,sql}", each_line=r"^\s*--\s?(.*)$"),
    compile_syntax("*.{py,pyi}", start=r'^\s*"""\s*$', stop=r'^\s*"""\s*$'),
    compile_syntax("*.rs", each_line=r"^\s*///\s?(.*)$"),
    compile_syntax("*.jl", start=r"^\s*#=\s*$", stop=r"^\s*=#\s*$"),
)


__all__ = [
    "CommentSyntax",
    "DEFAULT_COMMENT_SYNTAXES",
    "SyntaxTable",
    "compile_syntax",
    "expand_braces",
]
