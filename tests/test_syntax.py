"""Tests for srcdocs.syntax."""

from __future__ import annotations

from pathlib import Path

import pytest

from srcdocs.errors import ConfigError
from srcdocs.syntax import DEFAULT_COMMENT_SYNTAXES, SyntaxTable, compile_syntax, expand_braces


def test_expand_braces_handles_alternatives_and_nesting() -> None:
    assert expand_braces("*.rs") == ["*.rs"]
    assert expand_braces("*.{c,h}") == ["*.c", "*.h"]
    assert expand_braces("*.{c{,pp},h}") == ["*.c", "*.cpp", "*.h"]


def test_expand_braces_rejects_unbalanced_pattern() -> None:
    with pytest.raises(ConfigError):
        expand_braces("*.{c,h")


def test_compile_syntax_requires_start_and_stop_together() -> None:
    with pytest.raises(ConfigError, match="start and stop must both be present"):
        compile_syntax("*.x", start=r"^/\*$", each_line=r"(.*)")


def test_compile_syntax_requires_each_line_for_line_comments() -> None:
    with pytest.raises(ConfigError, match="each_line"):
        compile_syntax("*.x")


def test_compile_syntax_requires_capture_group() -> None:
    with pytest.raises(ConfigError, match="capture group"):
        compile_syntax("*.x", each_line=r"^\s*%")


def test_compile_syntax_reports_invalid_regex() -> None:
    with pytest.raises(ConfigError, match="invalid `start` regex"):
        compile_syntax("*.x", start="(", stop=r"\)")


def test_syntax_matches_case_insensitively_on_path_or_name() -> None:
    syntax = compile_syntax("*.{c,h}", each_line=r"^//(.*)")
    assert syntax.matches(Path("src/Main.C"))
    assert syntax.matches("include/api.h")
    assert not syntax.matches("src/main.cc")

    makefile = compile_syntax("Makefile", each_line=r"^#(.*)")
    assert makefile.matches(Path("build/Makefile"))
    assert makefile.matches("makefile")


def test_syntax_table_first_match_wins_with_order_tie_break() -> None:
    first = compile_syntax("*.txt", each_line=r"^#(.*)")
    second = compile_syntax("*.txt", each_line=r"^%(.*)")
    assert SyntaxTable([first, second]).find("notes.txt") is first

    late_but_preferred = compile_syntax("*.txt", each_line=r"^;(.*)", order=-1)
    table = SyntaxTable([first, second, late_but_preferred])
    assert table.find("notes.txt") is late_but_preferred


def test_default_table_covers_common_languages() -> None:
    table = SyntaxTable(DEFAULT_COMMENT_SYNTAXES)

    c_syntax = table.find("lib/module.cpp")
    assert c_syntax is not None and c_syntax.delimited

    python_syntax = table.find("pkg/module.py")
    assert python_syntax is not None and python_syntax.delimited
    assert python_syntax.each_line is None

    ruby_syntax = table.find("script.rb")
    assert ruby_syntax is not None and not ruby_syntax.delimited
    assert ruby_syntax.each_line.search("# hello").group(1) == "hello"

    # Julia files match the hash-comment entry before the #= =# block entry.
    julia_syntax = table.find("model.jl")
    assert julia_syntax is ruby_syntax

    assert table.find("README.md") is None
