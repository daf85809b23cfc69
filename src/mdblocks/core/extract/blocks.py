"""SyntaxTreeNode-to-Block conversion, including admonitions and task items"""

import logging
import re
from typing import Callable, Optional

from markdown_it.tree import SyntaxTreeNode

from mdblocks.core.extract.inline import LIST_TYPES, render_inline
from mdblocks.core.extract.preprocess import TASK_CHECKED, TASK_UNCHECKED
from mdblocks.core.models import Block, BlockType
from mdblocks.core.serialize import serialize_blocks


log = logging.getLogger(__name__)

ADMONITION_RE = re.compile(r'^\[!(NOTE|TIP|IMPORTANT|WARNING|CAUTION)\]\s*(.*)', re.IGNORECASE | re.DOTALL)
INLINE_MATH_RE = re.compile(r'(?<![\\$])\$(?!\$)(.+?)(?<![\\$])\$(?!\$)')
LITERAL_TASKS = {'[ ] ': False, '[x] ': True, '[X] ': True}

Reparse = Callable[[str], list[Block]]


def contains_inline_math(text: str) -> bool:
    """True if text holds an unescaped single-dollar span that is not part of $$."""
    return INLINE_MATH_RE.search(text) is not None


def split_task(text: str) -> tuple[Optional[bool], str]:
    """Return (checked, content) for task items, (None, text) otherwise."""
    for sentinel, checked in ((TASK_CHECKED, True), (TASK_UNCHECKED, False)):
        if text.startswith(sentinel):
            return checked, text[len(sentinel):]
        if text == sentinel.strip():
            return checked, ''
    if text[:4] in LITERAL_TASKS:
        return LITERAL_TASKS[text[:4]], text[4:]
    return None, text


def _standalone_image(inline: SyntaxTreeNode | None) -> SyntaxTreeNode | None:
    """Return the image node if inline content is a single image, else None."""
    if inline is None:
        return None
    meaningful = [
        c for c in inline.children
        if c.type not in ('softbreak', 'hardbreak')
        and not (c.type == 'text' and not c.content.strip())
    ]
    if len(meaningful) == 1 and meaningful[0].type == 'image':
        return meaningful[0]
    return None


def _table_row(cells: list[str]) -> str:
    return f"| {' | '.join(cells)} |"


def serialize_table(node: SyntaxTreeNode) -> str:
    """Re-serialize a table node as a GFM pipe table (alignment dropped)."""
    headers: list[str] = []
    rows: list[list[str]] = []
    for section in node.children:
        for tr in section.children:
            cells = [render_inline(cell).replace('|', '\\|') for cell in tr.children]
            if section.type == 'thead':
                headers = headers or cells
            else:
                rows.append(cells)

    lines = []
    if headers:
        lines.append(_table_row(headers))
        lines.append(_table_row(['---'] * len(headers)))
    lines.extend(_table_row(r) for r in rows)
    return '\n'.join(lines)


def _requote(block: Block) -> Block:
    """Re-tag a block found inside a quote; fenced content keeps its language."""
    if block.type == BlockType.mermaid:
        return block.copy_with(type=BlockType.blockquote, metadata={**block.metadata, 'language': 'mermaid'})
    return block.copy_with(type=BlockType.blockquote)


class BlockConverter:
    """Walks a markdown-it syntax tree and emits an ordered Block list.

    `reparse` runs the full text pipeline (without footnote extraction) and is
    used for admonition bodies.
    """

    def __init__(self, reparse: Reparse):
        self.reparse = reparse

    def convert(self, root: SyntaxTreeNode) -> list[Block]:
        blocks: list[Block] = []
        for child in root.children:
            blocks.extend(self.convert_node(child, 0))
        return blocks

    def convert_node(self, node: SyntaxTreeNode, indent: int) -> list[Block]:
        handlers = {
            'heading':      self._heading,
            'paragraph':    self._paragraph,
            'bullet_list':  self._list,
            'ordered_list': self._list,
            'fence':        self._code,
            'code_block':   self._code,
            'hr':           self._hr,
            'table':        self._table,
            'blockquote':   self._blockquote,
        }
        handler = handlers.get(node.type, self._other)
        return handler(node, indent)

    def _heading(self, node: SyntaxTreeNode, indent: int) -> list[Block]:
        level = int(node.tag[1])
        return [Block(type=BlockType.heading(level), content=render_inline(node), indent_level=indent)]

    def _paragraph(self, node: SyntaxTreeNode, indent: int) -> list[Block]:
        image = _standalone_image(node.children[0] if node.children else None)
        if image is not None:
            return [Block(
                type=BlockType.image,
                content=image.attrs.get('src', ''),
                metadata={'alt': image.content, 'title': image.attrs.get('title', '')},
                indent_level=indent,
            )]
        return self._text_block(render_inline(node), indent)

    def _text_block(self, text: str, indent: int) -> list[Block]:
        if not text:
            return []
        return [Block(
            type=BlockType.paragraph,
            content=text,
            metadata={'inlineMath': contains_inline_math(text)},
            indent_level=indent,
        )]

    def _list(self, node: SyntaxTreeNode, indent: int) -> list[Block]:
        ordered = node.type == 'ordered_list'
        blocks: list[Block] = []
        items = [c for c in node.children if c.type == 'list_item']

        for order, item in enumerate(items, start=1):
            checked, content = split_task(render_inline(item))
            if checked is not None:
                blocks.append(Block(
                    type=BlockType.taskList, content=content,
                    metadata={'checked': checked}, indent_level=indent,
                ))
            elif ordered:
                blocks.append(Block(
                    type=BlockType.numberedList, content=content,
                    metadata={'order': order}, indent_level=indent,
                ))
            else:
                blocks.append(Block(type=BlockType.bulletList, content=content, indent_level=indent))

            for child in item.children:
                if child.type in LIST_TYPES:
                    blocks.extend(self._list(child, indent + 1))
        return blocks

    def _code(self, node: SyntaxTreeNode, indent: int) -> list[Block]:
        info = node.info.split() if node.info else []
        language = info[0].lower() if info else ''
        content = node.content[:-1] if node.content.endswith('\n') else node.content

        if language == 'mermaid':
            return [Block(type=BlockType.mermaid, content=content, indent_level=indent)]
        return [Block(
            type=BlockType.code, content=content,
            metadata={'language': language}, indent_level=indent,
        )]

    def _hr(self, node: SyntaxTreeNode, indent: int) -> list[Block]:
        return [Block(type=BlockType.horizontalRule, indent_level=indent)]

    def _table(self, node: SyntaxTreeNode, indent: int) -> list[Block]:
        return [Block(type=BlockType.table, content=serialize_table(node), indent_level=indent)]

    def _blockquote(self, node: SyntaxTreeNode, indent: int) -> list[Block]:
        children: list[Block] = []
        for child in node.children:
            children.extend(self.convert_node(child, indent))

        m = ADMONITION_RE.match(serialize_blocks(children).strip())
        if m is None:
            return [_requote(b) for b in children]

        kind, body = m.group(1).lower(), m.group(2).strip()
        log.debug("Admonition '%s' with %d chars of body", kind, len(body))
        inner = self.reparse(body)
        if indent:
            inner = [b.copy_with(indent_level=b.indent_level + indent) for b in inner]
        return [Block(
            type=BlockType.blockquote,
            content=body,
            metadata={'admonition': kind, 'innerBlocks': inner},
            indent_level=indent,
        )]

    def _other(self, node: SyntaxTreeNode, indent: int) -> list[Block]:
        text = render_inline(node) if node.children else node.content.strip()
        return self._text_block(text, indent)
