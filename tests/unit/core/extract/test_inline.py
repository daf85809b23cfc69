"""Unit tests for core/extract/inline.py"""

import pytest

from mdblocks.core.extract.inline import plain_text, render_inline


def _first(tree, md):
    return tree(md).children[0]


@pytest.mark.parametrize("md,expected", [
    ("plain text",               "plain text"),
    ("a **b** c",                "a **b** c"),
    ("a __b__ c",                "a **b** c"),
    ("a *b* c",                  "a *b* c"),
    ("a _b_ c",                  "a *b* c"),
    ("a `b` c",                  "a `b` c"),
    ("a ~~b~~ c",                "a ~~b~~ c"),
    ("a ==b== c",                "a ==b== c"),
    ("see [site](https://x.io)", "see [site](https://x.io)"),
    ("![pic](a.png) after",      "![pic](a.png) after"),
])
def test_render_inline_formats(tree, md, expected):
    """Inline formatting is flattened to canonical Markdown."""
    assert render_inline(_first(tree, md)) == expected


def test_link_label_flattened(tree):
    """Formatting inside a link label is dropped to plain text."""
    assert render_inline(_first(tree, "[**bold** link](u)")) == "[bold link](u)"


def test_code_span_with_backtick(tree):
    """A code span containing a backtick gets a longer fence."""
    assert render_inline(_first(tree, "`` a`b ``")) == "`` a`b ``"


def test_softbreak_and_hardbreak(tree):
    """Soft breaks become newlines; hard breaks keep two trailing spaces."""
    assert render_inline(_first(tree, "a\nb")) == "a\nb"
    assert render_inline(_first(tree, "a  \nb")) == "a  \nb"


def test_list_item_skips_nested_list(tree):
    """A list item's own text excludes its nested list."""
    item = _first(tree, "- item\n  - nested").children[0]
    assert render_inline(item) == "item"


def test_render_inline_trims():
    """None renders as an empty string."""
    assert render_inline(None) == ""


def test_plain_text(tree):
    """plain_text drops all markup."""
    assert plain_text(_first(tree, "a **b** `c`")) == "a b c"
