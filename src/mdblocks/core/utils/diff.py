"""Semantic block comparison and unified diffs for round-trip checks"""

import difflib
import re
from typing import Iterable

from mdblocks.core.models import Block


WS_RE = re.compile(r'\s+')


def block_signature(block: Block) -> tuple:
    """(type, whitespace-normalized content, inner signatures) for comparison."""
    return (
        block.type.value,
        WS_RE.sub(' ', block.content).strip(),
        tuple(block_signature(b) for b in block.inner_blocks),
    )


def semantic_mismatches(a: Iterable[Block], b: Iterable[Block]) -> list[str]:
    """Describe block-for-block type/content differences. Empty list if equivalent."""
    left = [block_signature(x) for x in a]
    right = [block_signature(x) for x in b]
    problems = []
    if len(left) != len(right):
        problems.append(f"block count {len(left)} != {len(right)}")
    for i, (x, y) in enumerate(zip(left, right)):
        if x != y:
            problems.append(f"block {i}: {x[0]} {x[1]!r} != {y[0]} {y[1]!r}")
    return problems


def unified_diff(
    old: str,
    new: str,
    from_label: str = "original",
    to_label: str = "normalized",
    context: int = 3,
    ) -> list[str]:
    """Return unified diff lines comparing old to new. Empty list if identical.

    Lines already include newlines; join with '' for display.
    """
    old_lines = old.splitlines(keepends=True)
    new_lines = new.splitlines(keepends=True)
    return list(
        difflib.unified_diff(old_lines, new_lines, fromfile=from_label, tofile=to_label, n=context)
    )
