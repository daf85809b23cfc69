"""Immutable document editing: every operation returns a new Document

Unknown block ids are a no-op and return the document unchanged.
"""

from typing import Callable, Optional

from mdblocks.core.models import Block, BlockType, Document


DEFAULT_MAX_INDENT = 5


def _map_block(doc: Document, block_id: str, fn: Callable[[Block], Block]) -> Document:
    """Replace the block with block_id by fn(block); no-op when absent."""
    i = doc.find(block_id)
    if i < 0:
        return doc
    blocks = list(doc.blocks)
    blocks[i] = fn(blocks[i])
    return doc.copy_with(blocks=blocks)


def update_block(doc: Document, block_id: str, content: str) -> Document:
    return _map_block(doc, block_id, lambda b: b.copy_with(content=content))


def set_block_type(doc: Document, block_id: str, block_type: BlockType | str) -> Document:
    """Change a block's type; plain type names such as "heading1" are accepted."""
    block_type = BlockType(block_type)
    return _map_block(doc, block_id, lambda b: b.copy_with(type=block_type))


def insert_block_after(doc: Document, block_id: str, block: Optional[Block] = None) -> Document:
    """Insert block (default: empty paragraph at the anchor's indent) after block_id."""
    i = doc.find(block_id)
    if i < 0:
        return doc
    anchor = doc.blocks[i]
    new = block or Block(type=BlockType.paragraph, indent_level=anchor.indent_level)
    return doc.copy_with(blocks=[*doc.blocks[:i + 1], new, *doc.blocks[i + 1:]])


def insert_image_after(doc: Document, block_id: str, url: str, alt: str = '') -> Document:
    i = doc.find(block_id)
    if i < 0:
        return doc
    image = Block(
        type=BlockType.image,
        content=url,
        metadata={'alt': alt, 'title': ''},
        indent_level=doc.blocks[i].indent_level,
    )
    return insert_block_after(doc, block_id, image)


def delete_block(doc: Document, block_id: str) -> Document:
    """Remove block_id; a document never ends up without blocks."""
    if doc.find(block_id) < 0:
        return doc
    blocks = [b for b in doc.blocks if b.id != block_id]
    if not blocks:
        blocks = [Block(type=BlockType.paragraph)]
    return doc.copy_with(blocks=blocks)


def _swap(doc: Document, i: int, j: int) -> Document:
    blocks = list(doc.blocks)
    blocks[i], blocks[j] = blocks[j], blocks[i]
    return doc.copy_with(blocks=blocks)


def move_block_up(doc: Document, block_id: str) -> Document:
    i = doc.find(block_id)
    return _swap(doc, i, i - 1) if i > 0 else doc


def move_block_down(doc: Document, block_id: str) -> Document:
    i = doc.find(block_id)
    return _swap(doc, i, i + 1) if 0 <= i < len(doc.blocks) - 1 else doc


def indent_block(doc: Document, block_id: str, max_indent: int = DEFAULT_MAX_INDENT) -> Document:
    return _map_block(
        doc, block_id,
        lambda b: b.copy_with(indent_level=b.indent_level + 1) if b.indent_level < max_indent else b,
    )


def outdent_block(doc: Document, block_id: str) -> Document:
    return _map_block(
        doc, block_id,
        lambda b: b.copy_with(indent_level=b.indent_level - 1) if b.indent_level > 0 else b,
    )


def toggle_task(doc: Document, block_id: str) -> Document:
    """Flip `checked` on a taskList block; content and other blocks are untouched."""
    def _toggle(b: Block) -> Block:
        if b.type != BlockType.taskList:
            return b
        return b.copy_with(metadata={**b.metadata, 'checked': not b.checked})
    return _map_block(doc, block_id, _toggle)


def renumber_lists(doc: Document) -> Document:
    """Reassign `order` 1..n for each consecutive numbered run per indent level."""
    counters: dict[int, int] = {}
    blocks: list[Block] = []
    for b in doc.blocks:
        # deeper counters end whenever a shallower block appears
        counters = {lvl: n for lvl, n in counters.items() if lvl <= b.indent_level}
        if b.type == BlockType.numberedList:
            order = counters.get(b.indent_level, 0) + 1
            counters[b.indent_level] = order
            if b.order != order or 'order' not in b.metadata:
                b = b.copy_with(metadata={**b.metadata, 'order': order})
        else:
            counters.pop(b.indent_level, None)
        blocks.append(b)
    return doc.copy_with(blocks=blocks)
