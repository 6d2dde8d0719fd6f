"""Pipeline orchestration: scan sources, apply templates, write documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Sequence

from .aggregator import assemble
from .config import SrcDocsConfig, load_config, resolve_config_path
from .logging import get_logger
from .models import Fragment
from .scanner import SourceScanner


@dataclass
class RunResult:
    """Outcome of a documentation run."""

    documents: Dict[str, str]
    fragment_count: int
    written: List[Path] = field(default_factory=list)
    dry_run: bool = False


class Orchestrator:
    """Coordinates extraction, templating and output for one run."""

    def __init__(self, scanner: SourceScanner | None = None) -> None:
        self.scanner = scanner or SourceScanner()
        self.logger = get_logger("orchestrator")

    def run(
        self,
        sources: Sequence[Path | str],
        dest: Path | str = ".",
        *,
        config_path: Path | str | None = None,
        dry_run: bool = False,
    ) -> RunResult:
        """Extract documentation from ``sources`` into files under ``dest``."""
        dest_path = Path(dest).expanduser()
        if not dest_path.exists():
            raise FileNotFoundError(f"The destination path `{dest_path}` does not exist.")

        resolved = resolve_config_path(dest_path, Path(config_path) if config_path is not None else None)
        if resolved is not None:
            self.logger.debug("Loading config from %s", resolved)
        config = load_config(resolved)

        fragments = self.collect(sources, config)
        self.logger.debug("Collected %d fragments", len(fragments))
        documents = self.render(fragments, config)

        result = RunResult(documents=documents, fragment_count=len(fragments), dry_run=dry_run)
        if dry_run:
            self.logger.info("Dry run: %d doc files not written", len(documents))
            return result
        result.written = self.write(dest_path, documents)
        return result

    def collect(self, sources: Iterable[Path | str], config: SrcDocsConfig) -> List[Fragment]:
        """Gather fragments from every file, in scan order."""
        fragments: List[Fragment] = []
        for path in self.scanner.iter_files(sources):
            fragments.extend(self.scanner.read_fragments(path, config.syntaxes))
        return fragments

    def render(self, fragments: Iterable[Fragment], config: SrcDocsConfig) -> Dict[str, str]:
        """Apply the configured templates and return destination -> content."""
        return assemble(config.engine().apply(fragments))

    def write(self, dest: Path, documents: Dict[str, str]) -> List[Path]:
        self.logger.debug("Writing doc files:")
        written: List[Path] = []
        for name, content in documents.items():
            self.logger.debug(" - %s", name)
            path = dest / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            written.append(path)
        return written


__all__ = ["Orchestrator", "RunResult"]
