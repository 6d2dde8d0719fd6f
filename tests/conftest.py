from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator

import pytest

from tests._fixtures.source_builder import SourceBuilder


@pytest.fixture
def source_builder(tmp_path: Path) -> SourceBuilder:
    """Provide a reusable source tree builder rooted at the pytest tmp_path."""
    return SourceBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _reset_srcdocs_logger() -> Iterator[None]:
    """Undo configure_logging() so caplog sees srcdocs records in every test."""
    yield
    logger = logging.getLogger("srcdocs")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
