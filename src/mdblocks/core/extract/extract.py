"""Markdown text to Block list / Document: preprocess, tokenize, convert"""

import logging
from typing import Any, Optional

from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode

from mdblocks.core.extract.blocks import BlockConverter
from mdblocks.core.extract.preprocess import preprocess, rewrite_tasks
from mdblocks.core.models import Block, BlockType, Document


log = logging.getLogger(__name__)

DEFAULT_PRESET = 'gfm-like'


def make_parser(preset: str = DEFAULT_PRESET) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name; ==mark== stays literal text."""
    return MarkdownIt(preset, options_update={"linkify": False})


def _footnote_blocks(footnotes: dict[str, str]) -> list[Block]:
    return [
        Block(type=BlockType.footnoteDefinition, content=content, metadata={'id': key, 'index': index})
        for index, (key, content) in enumerate(footnotes.items(), start=1)
    ]


def parse_blocks(text: str, preset: str = DEFAULT_PRESET, extract_footnotes: bool = True) -> list[Block]:
    """Parse markdown text into an ordered, never-empty Block list.

    Footnote definitions are only collected when extract_footnotes is set;
    admonition bodies are re-parsed with it off.
    """
    pre = preprocess(text, footnotes=extract_footnotes)
    parser = make_parser(preset)
    converter = BlockConverter(
        reparse=lambda body: parse_blocks(body, preset, extract_footnotes=False),
    )

    blocks: list[Block] = []
    for segment in pre.segments:
        if isinstance(segment, Block):
            blocks.append(segment)
        elif segment.strip():
            tree = SyntaxTreeNode(parser.parse(rewrite_tasks(segment)))
            blocks.extend(converter.convert(tree))

    blocks.extend(_footnote_blocks(pre.footnotes))

    if not blocks:
        log.debug("No blocks parsed from %d chars; using an empty paragraph", len(text))
        blocks.append(Block(type=BlockType.paragraph))
    return blocks


def parse_markdown(
    text: str,
    title: Optional[str] = None,
    file_path: Optional[str] = None,
    metadata: Optional[dict[str, Any]] = None,
    preset: str = DEFAULT_PRESET,
    ) -> Document:
    """Parse markdown text into a Document."""
    return Document(
        title=title or "Untitled",
        blocks=parse_blocks(text, preset),
        file_path=file_path,
        metadata=metadata or {},
    )
