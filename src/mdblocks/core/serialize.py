"""Deterministic Block/Document to Markdown serialization"""

import re
from typing import Iterable

from mdblocks.core.models import Block, BlockType, Document


INDENT_WIDTH = 2
BACKTICK_RUN_RE = re.compile(r'`{3,}')
MATH_LINE_RE = re.compile(r'^([ \t]*)\$\$', re.MULTILINE)
LIST_MARKER_TYPES = {BlockType.bulletList, BlockType.numberedList, BlockType.taskList}


def _fence(content: str) -> str:
    """Return a backtick fence longer than any backtick run inside content."""
    longest = max((len(m) for m in BACKTICK_RUN_RE.findall(content)), default=2)
    return '`' * max(3, longest + 1)


def _fenced(content: str, language: str) -> str:
    fence = _fence(content)
    return f"{fence}{language}\n{content}\n{fence}"


def _escape_math_lines(text: str) -> str:
    """Backslash-escape `$$` at line start so text never re-parses as display math."""
    return MATH_LINE_RE.sub(r'\1\\$$', text)


def _marker(block: Block) -> str:
    """List marker (with trailing space) written before the block's content."""
    if block.type == BlockType.bulletList:
        return '- '
    if block.type == BlockType.numberedList:
        return f"{block.order}. "
    if block.type == BlockType.taskList:
        return '- [x] ' if block.checked else '- [ ] '
    return ''


def _quote(text: str) -> str:
    return '\n'.join(f"> {line}" if line else '>' for line in text.split('\n'))


def block_body(block: Block) -> str:
    """Markdown for a single block, without indentation."""
    t, content = block.type, block.content

    if block.heading_level:
        return f"{'#' * block.heading_level} {content}"
    if t in LIST_MARKER_TYPES:
        return f"{_marker(block)}{_escape_math_lines(content)}"
    if t == BlockType.code or t == BlockType.mermaid:
        return _fenced(content, 'mermaid' if t == BlockType.mermaid else block.language)
    if t == BlockType.math:
        if block.is_inline_math:
            return f"${content}$"
        return f"$$\n{content}\n$$"
    if t == BlockType.blockquote:
        if block.admonition:
            body = f"[!{block.admonition.upper()}]\n{content}" if content else f"[!{block.admonition.upper()}]"
            return _quote(body)
        if 'language' in block.metadata:
            return _quote(_fenced(content, block.language))
        return _quote(content)
    if t == BlockType.image:
        alt = block.metadata.get('alt') or ''
        title = block.metadata.get('title') or ''
        suffix = f' "{title}"' if title else ''
        return f"![{alt}]({content}{suffix})"
    if t == BlockType.horizontalRule:
        return '---'
    if t == BlockType.footnoteDefinition:
        return f"[^{block.metadata.get('id', '')}]: {content}"
    if t == BlockType.paragraph:
        return _escape_math_lines(content)
    return content


def _indent(text: str, prefix: str) -> str:
    if not prefix:
        return text
    return '\n'.join(prefix + line if line else line for line in text.split('\n'))


def serialize_blocks(blocks: Iterable[Block]) -> str:
    """Join blocks with one blank line; nested lines align under their parent item.

    Under bullet and task parents each level adds two spaces; under a
    numbered parent the child aligns with the parent's content column.
    """
    parts: list[str] = []
    columns: list[int] = [0]        # content column per indent level

    for block in blocks:
        level = block.indent_level
        if level >= len(columns):
            columns.extend(columns[-1] + INDENT_WIDTH for _ in range(level - len(columns) + 1))
        del columns[level + 1:]
        prefix = ' ' * columns[level]
        columns.append(columns[level] + (len(_marker(block)) if block.type == BlockType.numberedList else INDENT_WIDTH))
        parts.append(_indent(block_body(block), prefix))

    return '\n\n'.join(parts) + '\n' if parts else ''


def serialize_document(doc: Document) -> str:
    return serialize_blocks(doc.blocks)
