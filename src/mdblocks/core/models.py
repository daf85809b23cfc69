"""Block and Document data models shared by the parser, serializer, and editors"""

import re
from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


HEADING_RE = re.compile(r'^heading([1-6])$')
UNCOUNTED_TYPES = {'code', 'mermaid', 'image', 'horizontalRule'}


class BlockType(str, Enum):
    """Restrict blocks to the content kinds the converter can produce"""
    heading1 = "heading1"
    heading2 = "heading2"
    heading3 = "heading3"
    heading4 = "heading4"
    heading5 = "heading5"
    heading6 = "heading6"
    paragraph = "paragraph"
    bulletList = "bulletList"
    numberedList = "numberedList"
    taskList = "taskList"
    code = "code"
    blockquote = "blockquote"
    image = "image"
    horizontalRule = "horizontalRule"
    table = "table"
    mermaid = "mermaid"
    math = "math"
    footnoteDefinition = "footnoteDefinition"

    @classmethod
    def heading(cls, level: int) -> "BlockType":
        """Return the heading type for level 1-6 (clamped)."""
        return cls(f"heading{min(max(level, 1), 6)}")


def _new_id() -> str:
    return str(uuid4())


class _Model(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class Block(_Model):
    """A single typed, addressable unit of document content.

    `metadata` is an open map whose keys depend on `type` (order, checked,
    language, alt/title, admonition/innerBlocks, inline, id/index, inlineMath).
    """
    id:           str = Field(default_factory=_new_id)
    type:         BlockType
    content:      str = ""
    metadata:     dict[str, Any] = Field(default_factory=dict)
    indent_level: int = Field(default=0, ge=0)
    is_editing:   bool = False
    created_at:   datetime = Field(default_factory=datetime.now)
    updated_at:   datetime = Field(default_factory=datetime.now)

    @field_validator('type', mode='before')
    @classmethod
    def _coerce_type(cls, value):
        """Unknown type names from stored JSON degrade to paragraph."""
        if isinstance(value, BlockType):
            return value
        try:
            return BlockType(value)
        except ValueError:
            return BlockType.paragraph

    @field_validator('metadata', mode='after')
    @classmethod
    def _load_inner_blocks(cls, value: dict[str, Any]) -> dict[str, Any]:
        inner = value.get('innerBlocks')
        if inner and any(isinstance(b, dict) for b in inner):
            value = dict(value)
            value['innerBlocks'] = [b if isinstance(b, Block) else Block.model_validate(b) for b in inner]
        return value

    def copy_with(self, **changes: Any) -> "Block":
        """Return a new Block with changes applied and updated_at refreshed."""
        changes.setdefault('updated_at', datetime.now())
        if 'metadata' in changes:
            changes['metadata'] = dict(changes['metadata'])
        return self.model_copy(update=changes)

    # --- typed views over metadata ---

    @property
    def heading_level(self) -> Optional[int]:
        m = HEADING_RE.match(self.type.value)
        return int(m.group(1)) if m else None

    @property
    def order(self) -> int:
        return int(self.metadata.get('order') or 1)

    @property
    def checked(self) -> bool:
        return self.metadata.get('checked') is True

    @property
    def language(self) -> str:
        return self.metadata.get('language') or ''

    @property
    def admonition(self) -> Optional[str]:
        return self.metadata.get('admonition')

    @property
    def inner_blocks(self) -> list["Block"]:
        return list(self.metadata.get('innerBlocks') or [])

    @property
    def is_inline_math(self) -> bool:
        return self.metadata.get('inline') is True

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Block":
        return cls.model_validate(data)


class Document(_Model):
    """An ordered block sequence plus title, source path, and open metadata."""
    id:         str = Field(default_factory=_new_id)
    title:      str = "Untitled"
    blocks:     list[Block] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    file_path:  Optional[str] = None
    metadata:   dict[str, Any] = Field(default_factory=dict)

    @model_validator(mode='after')
    def _unique_block_ids(self) -> "Document":
        seen: set[str] = set()
        for b in self.blocks:
            if b.id in seen:
                raise ValueError(f"Duplicate block id: {b.id}")
            seen.add(b.id)
        return self

    @classmethod
    def new(cls, title: str = "Untitled") -> "Document":
        """Return a fresh document holding a single empty paragraph."""
        return cls(title=title, blocks=[Block(type=BlockType.paragraph)])

    def copy_with(self, **changes: Any) -> "Document":
        """Return a new Document with changes applied and updated_at refreshed."""
        changes.setdefault('updated_at', datetime.now())
        if 'blocks' in changes:
            changes['blocks'] = list(changes['blocks'])
            # model_copy skips validation; keep the id invariant for replaced sequences
            ids = [b.id for b in changes['blocks']]
            if len(ids) != len(set(ids)):
                raise ValueError("Duplicate block id in replacement blocks")
        return self.model_copy(update=changes)

    def find(self, block_id: str) -> int:
        """Return the index of block_id, or -1 when absent."""
        return next((i for i, b in enumerate(self.blocks) if b.id == block_id), -1)

    @property
    def word_count(self) -> int:
        return sum(
            len(b.content.split())
            for b in self.blocks
            if b.type.value not in UNCOUNTED_TYPES
        )

    def to_markdown(self) -> str:
        from mdblocks.core.serialize import serialize_document
        return serialize_document(self)

    def to_json(self) -> dict[str, Any]:
        return self.model_dump(mode='json', by_alias=True)

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "Document":
        return cls.model_validate(data)
