"""Source traversal and per-file comment extraction."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Iterator, List

from .extractor import CommentExtractor
from .fragments import FragmentParser
from .logging import get_logger
from .models import Fragment
from .syntax import SyntaxTable

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".idea",
}


class SourceScanner:
    """Walks source paths in a stable order and extracts fragments from each file."""

    def __init__(self) -> None:
        self.logger = get_logger("scanner")

    def iter_files(self, sources: Iterable[Path | str]) -> Iterator[Path]:
        """Yield every file under ``sources``, directories walked in sorted order."""
        for source in sources:
            source_path = Path(source).expanduser()
            if source_path.is_file():
                yield source_path
                continue
            if not source_path.exists():
                raise FileNotFoundError(f"Source path not found: {source}")
            for dirpath, dirnames, filenames in os.walk(source_path):
                dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)
                current_dir = Path(dirpath)
                for filename in sorted(filenames):
                    yield current_dir / filename

    def read_fragments(self, path: Path, syntaxes: SyntaxTable) -> List[Fragment]:
        """Return the fragments found in ``path``; files without a known syntax yield none."""
        self.logger.debug("Reading file %s", path)
        syntax = syntaxes.find(path)
        if syntax is None:
            self.logger.debug("Skipping file without a matching extension")
            return []

        extractor = CommentExtractor(syntax)
        parser = FragmentParser(source=str(path))
        try:
            with path.open("r", encoding="utf-8") as handle:
                lines = (line.rstrip("\n") for line in handle)
                return list(parser.parse(extractor.extract(lines)))
        except UnicodeDecodeError as exc:
            self.logger.warning("Skipping %s: file is not valid UTF-8 (%s)", path, exc.reason)
            return []


__all__ = ["SourceScanner"]
