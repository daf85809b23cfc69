"""Line-level preprocessing: footnote definitions, $$ math blocks, and task checkboxes"""

import logging
import re
from dataclasses import dataclass, field
from typing import Union

from mdblocks.core.models import Block, BlockType


log = logging.getLogger(__name__)

FOOTNOTE_DEF_RE = re.compile(r'^\[\^([^\]]+)\]:\s*(.+)$')
SINGLE_LINE_MATH_RE = re.compile(r'^\s*\$\$(.+?)\$\$\s*$')
FENCE_RE = re.compile(r'^[ ]{0,3}(`{3,}|~{3,})')
TASK_RE = re.compile(r'^([ \t]*)[-*][ \t]+\[( |x|X)\][ \t]+')

TASK_CHECKED = 'TASKBOX_CHECKED '
TASK_UNCHECKED = 'TASKBOX_UNCHECKED '

Segment = Union[str, Block]


@dataclass
class Preprocessed:
    """Ordered text runs and pre-built math blocks, plus extracted footnotes."""
    segments:  list[Segment] = field(default_factory=list)
    footnotes: dict[str, str] = field(default_factory=dict)


class _FenceTracker:
    """Tracks whether a line sits inside a fenced code block."""

    def __init__(self):
        self.marker: str | None = None

    def feed(self, line: str) -> bool:
        """Return True if line is part of a fence (opening, body, or closing)."""
        m = FENCE_RE.match(line)
        if self.marker is None:
            if m:
                self.marker = m.group(1)
                return True
            return False
        if m and m.group(1)[0] == self.marker[0] and len(m.group(1)) >= len(self.marker) \
                and not line.strip()[len(m.group(1)):].strip():
            self.marker = None
        return True


def normalize_newlines(text: str) -> str:
    return text.replace('\r\n', '\n').replace('\r', '\n')


def extract_footnotes(lines: list[str]) -> tuple[list[str], dict[str, str]]:
    """Remove footnote definition lines; return (remaining lines, id -> content)."""
    footnotes: dict[str, str] = {}
    kept: list[str] = []
    fence = _FenceTracker()
    for line in lines:
        m = None if fence.feed(line) else FOOTNOTE_DEF_RE.match(line)
        if m:
            footnotes[m.group(1)] = m.group(2)
        else:
            kept.append(line)
    return kept, footnotes


def _math_block(content: str) -> Block:
    return Block(type=BlockType.math, content=content, metadata={'inline': False})


def split_math(lines: list[str]) -> list[Segment]:
    """Split lines into text runs and display-math blocks.

    An unclosed $$ block at end of input is returned to the text stream.
    """
    segments: list[Segment] = []
    buffer: list[str] = []
    math_lines: list[str] = []
    raw_lines: list[str] = []
    in_math = False
    fence = _FenceTracker()

    def flush():
        if buffer:
            segments.append('\n'.join(buffer))
            buffer.clear()

    for line in lines:
        trimmed = line.rstrip()

        if not in_math:
            if fence.feed(line):
                buffer.append(line)
                continue

            single = SINGLE_LINE_MATH_RE.match(trimmed)
            if single:
                flush()
                segments.append(_math_block(single.group(1).strip()))
                continue

            if trimmed.startswith('$$'):
                flush()
                after = trimmed[2:].lstrip()
                if after.endswith('$$'):
                    segments.append(_math_block(after[:-2].strip()))
                    continue
                in_math = True
                raw_lines.append(line)
                if after:
                    math_lines.append(after)
                continue

            buffer.append(line)
            continue

        raw_lines.append(line)
        if trimmed.endswith('$$'):
            before = trimmed[:-2].rstrip()
            if before:
                math_lines.append(before)
            segments.append(_math_block('\n'.join(math_lines).strip()))
            math_lines.clear()
            raw_lines.clear()
            in_math = False
            continue

        math_lines.append(line)

    if in_math:
        log.debug("Unclosed $$ block; restoring %d line(s) as text", len(raw_lines))
        buffer.extend(raw_lines)
    flush()
    return segments


def preprocess(text: str, footnotes: bool = True) -> Preprocessed:
    """Run footnote (optional) and math extraction over raw markdown text."""
    lines = normalize_newlines(text).split('\n')
    notes: dict[str, str] = {}
    if footnotes:
        lines, notes = extract_footnotes(lines)
    return Preprocessed(segments=split_math(lines), footnotes=notes)


def rewrite_tasks(text: str) -> str:
    """Replace `- [ ] ` / `- [x] ` list markers with sentinel-prefixed items."""
    out: list[str] = []
    fence = _FenceTracker()
    for line in text.split('\n'):
        if not fence.feed(line):
            m = TASK_RE.match(line)
            if m:
                marker = TASK_CHECKED if m.group(2) in 'xX' else TASK_UNCHECKED
                line = f"{m.group(1)}- {marker}{line[m.end():]}"
        out.append(line)
    return '\n'.join(out)
