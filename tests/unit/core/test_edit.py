"""Unit tests for core/edit.py"""

import pytest

from mdblocks.core import edit
from mdblocks.core.models import Block, BlockType, Document


@pytest.fixture(name="doc")
def doc_fixture():
    return Document(blocks=[
        Block(id="a", type=BlockType.paragraph, content="first"),
        Block(id="b", type=BlockType.taskList, content="todo", metadata={"checked": False}),
        Block(id="c", type=BlockType.paragraph, content="last"),
    ])


def _ids(doc: Document) -> list[str]:
    return [b.id for b in doc.blocks]


def test_update_block(doc):
    new = edit.update_block(doc, "a", "changed")
    assert new.blocks[0].content == "changed"
    assert doc.blocks[0].content == "first"
    assert new.blocks[1] is doc.blocks[1]


def test_unknown_id_is_noop(doc):
    assert edit.update_block(doc, "missing", "x") is doc
    assert edit.delete_block(doc, "missing") is doc
    assert edit.move_block_up(doc, "missing") is doc
    assert edit.toggle_task(doc, "missing") is doc


def test_set_block_type(doc):
    new = edit.set_block_type(doc, "a", BlockType.heading2)
    assert new.blocks[0].type == BlockType.heading2
    assert new.blocks[0].content == "first"


def test_insert_block_after_defaults_to_empty_paragraph(doc):
    doc = edit.indent_block(doc, "b")
    new = edit.insert_block_after(doc, "b")
    assert len(new.blocks) == 4
    inserted = new.blocks[2]
    assert inserted.type == BlockType.paragraph
    assert inserted.content == ""
    assert inserted.indent_level == 1


def test_insert_image_after(doc):
    new = edit.insert_image_after(doc, "c", "pic.png", alt="Pic")
    image = new.blocks[-1]
    assert image.type == BlockType.image
    assert image.content == "pic.png"
    assert image.metadata == {"alt": "Pic", "title": ""}


def test_delete_block(doc):
    assert _ids(edit.delete_block(doc, "b")) == ["a", "c"]


def test_delete_last_block_leaves_empty_paragraph():
    doc = Document(blocks=[Block(id="only", type=BlockType.heading1, content="T")])
    new = edit.delete_block(doc, "only")
    assert len(new.blocks) == 1
    assert new.blocks[0].type == BlockType.paragraph
    assert new.blocks[0].id != "only"


def test_move_block_up_and_down(doc):
    assert _ids(edit.move_block_up(doc, "b")) == ["b", "a", "c"]
    assert _ids(edit.move_block_down(doc, "b")) == ["a", "c", "b"]
    assert edit.move_block_up(doc, "a") is doc
    assert edit.move_block_down(doc, "c") is doc


def test_indent_is_bounded(doc):
    for _ in range(10):
        doc = edit.indent_block(doc, "a", max_indent=3)
    assert doc.blocks[0].indent_level == 3


def test_outdent_stops_at_zero(doc):
    new = edit.outdent_block(doc, "a")
    assert new.blocks[0].indent_level == 0


def test_toggle_task_changes_only_checked(doc):
    """Toggling flips checked and leaves content and other blocks alone."""
    new = edit.toggle_task(doc, "b")
    assert new.blocks[1].checked is True
    assert new.blocks[1].content == "todo"
    assert new.blocks[0] == doc.blocks[0]
    assert new.blocks[2] == doc.blocks[2]
    assert edit.toggle_task(new, "b").blocks[1].checked is False


def test_toggle_task_ignores_other_types(doc):
    new = edit.toggle_task(doc, "a")
    assert new.blocks[0] == doc.blocks[0]


def test_renumber_lists():
    doc = Document(blocks=[
        Block(type=BlockType.numberedList, content="a", metadata={"order": 4}),
        Block(type=BlockType.numberedList, content="a.1", metadata={"order": 9}, indent_level=1),
        Block(type=BlockType.numberedList, content="b", metadata={"order": 7}),
        Block(type=BlockType.paragraph, content="break"),
        Block(type=BlockType.numberedList, content="c"),
    ])
    new = edit.renumber_lists(doc)
    assert [b.metadata.get("order") for b in new.blocks] == [1, 1, 2, None, 1]


def test_set_block_type_accepts_type_name(doc):
    new = edit.set_block_type(doc, "a", "heading1")
    assert new.blocks[0].type is BlockType.heading1
    assert new.blocks[0].heading_level == 1


def test_set_block_type_rejects_unknown_name(doc):
    with pytest.raises(ValueError):
        edit.set_block_type(doc, "a", "callout")
