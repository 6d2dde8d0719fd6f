"""Final ordering and concatenation of rendered blocks per destination."""

from __future__ import annotations

import math
from typing import Callable, Dict, Iterable, List, Mapping, TypeVar

from .models import RenderedBlock

T = TypeVar("T")


def stable_sort(items: Iterable[T], key: Callable[[T], float]) -> List[T]:
    """Sort ascending by ``key``, equal keys keeping their original position.

    An item whose key is NaN cannot be compared, so it stays where it is and
    nothing is moved across it. Each run between NaN items is sorted on its own.
    """
    result: List[T] = []
    run: List[T] = []
    for item in items:
        if math.isnan(key(item)):
            result.extend(sorted(run, key=key))
            result.append(item)
            run = []
        else:
            run.append(item)
    result.extend(sorted(run, key=key))
    return result


def sort_blocks(blocks: Iterable[RenderedBlock]) -> List[RenderedBlock]:
    """Return blocks sorted by ascending order, equal orders keeping their position."""
    return stable_sort(blocks, key=lambda block: block.order)


def assemble(rendered: Mapping[str, Iterable[RenderedBlock]]) -> Dict[str, str]:
    """Concatenate each destination's sorted blocks into its final content."""
    return {
        destination: "".join(block.body for block in sort_blocks(blocks))
        for destination, blocks in rendered.items()
    }


__all__ = ["assemble", "sort_blocks", "stable_sort"]
