"""End-to-end tests for srcdocs.orchestrator."""

from __future__ import annotations

from pathlib import Path

import pytest

from srcdocs.config import SrcDocsConfig
from srcdocs.errors import ReservedTagError
from srcdocs.models import Fragment
from srcdocs.orchestrator import Orchestrator
from tests._fixtures.source_builder import SourceBuilder


def test_file_tag_routes_body_without_config(source_builder: SourceBuilder) -> None:
    source_builder.write(
        {
            "main.c": """
            /**
             * @file docs/a.md
             * hello
             */
            int main(void) { return 0; }
            """,
        }
    )

    result = Orchestrator().run([source_builder.root], source_builder.dest)

    assert result.documents == {"docs/a.md": "hello\n"}
    assert result.fragment_count == 1
    assert result.written == [source_builder.dest / "docs" / "a.md"]
    assert source_builder.read("docs/a.md") == "hello\n"


def test_order_sorts_across_files_and_ties_keep_scan_order(source_builder: SourceBuilder) -> None:
    source_builder.write(
        {
            "a_first.py": '''
            """
            @file guide.md
            @order 1
            ## Usage
            """
            ''',
            "b_second.rb": """
            # @file guide.md
            # Intro one
            """,
            "c_third.lua": """
            -- @file guide.md
            -- Intro two
            """,
            "d_fourth.go": """
            /**
             * @file guide.md
             * @order -1
             * # Title
             */
            """,
        }
    )

    Orchestrator().run([source_builder.root], source_builder.dest)

    assert source_builder.read("guide.md") == "# Title\nIntro one\nIntro two\n## Usage\n"


def test_templates_from_default_config_file(source_builder: SourceBuilder) -> None:
    source_builder.write(
        {
            "api.ts": """
            /**
             * @kind api
             * @name Foo
             * does X
             */
            export function foo() {}

            /**
             * @kind api
             * @name Bar
             * does Y
             */
            export function bar() {}
            """,
        }
    )
    source_builder.write_config(
        """
        [header]
        version = "0.2.1"

        [[template.foreach]]
        tags = ["kind"]
        file = "{{name}}.md"
        output = "### {{name}}\\n{{__body__}}"

        [[template.all]]
        tags = ["kind"]
        file = "index.md"
        output = "{% for item in items %}- {{ item.name }}\\n{% endfor %}"
        """
    )

    result = Orchestrator().run([source_builder.root], source_builder.dest)

    assert result.documents == {
        "Foo.md": "### Foo\ndoes X\n",
        "Bar.md": "### Bar\ndoes Y\n",
        "index.md": "- Foo\n- Bar\n",
    }
    assert source_builder.read("index.md") == "- Foo\n- Bar\n"


def test_explicit_config_adds_comment_syntax(source_builder: SourceBuilder, tmp_path: Path) -> None:
    source_builder.write({"query.txt": "% @file notes.md\n% custom syntax\nSELECT 1;\n"})
    config_path = tmp_path / "srcdocs.toml"
    config_path.write_text(
        '[header]\nversion = "0.2.1"\n\n[[comment]]\nextension = "*.txt"\neach_line = \'^%\\s?(.*)$\'\n',
        encoding="utf-8",
    )

    result = Orchestrator().run([source_builder.root], source_builder.dest, config_path=config_path)

    assert result.documents == {"notes.md": "custom syntax\n"}


def test_reserved_tag_aborts_before_writing(source_builder: SourceBuilder) -> None:
    source_builder.write(
        {
            "a.c": "/**\n * @file ok.md\n * fine\n */\n",
            "b.c": "/**\n * @__body__ x\n * text\n */\n",
        }
    )

    with pytest.raises(ReservedTagError):
        Orchestrator().run([source_builder.root], source_builder.dest)

    assert not (source_builder.dest / "ok.md").exists()


def test_missing_destination_is_rejected(source_builder: SourceBuilder, tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError, match="does not exist"):
        Orchestrator().run([source_builder.root], tmp_path / "nowhere")


def test_dry_run_renders_without_writing(source_builder: SourceBuilder) -> None:
    source_builder.write({"x.sh": "# @file out.md\n# text\n"})

    result = Orchestrator().run([source_builder.root], source_builder.dest, dry_run=True)

    assert result.documents == {"out.md": "text\n"}
    assert result.written == []
    assert not (source_builder.dest / "out.md").exists()


def test_sources_without_comments_produce_no_documents(source_builder: SourceBuilder) -> None:
    source_builder.write({"plain.c": "int x = 1;\n", "readme.md": "# hi\n"})

    result = Orchestrator().run([source_builder.root], source_builder.dest)

    assert result.documents == {}
    assert result.fragment_count == 0
    assert list(source_builder.dest.iterdir()) == []


def test_render_is_pure() -> None:
    fragments = [
        Fragment(tags={"file": "a.md"}, order=1.0, body="second\n"),
        Fragment(tags={"file": "a.md"}, order=0.0, body="first\n"),
    ]
    assert Orchestrator().render(fragments, SrcDocsConfig.default()) == {"a.md": "first\nsecond\n"}
