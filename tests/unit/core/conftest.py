"""Shared fixtures for core unit tests"""

import pytest
from markdown_it.tree import SyntaxTreeNode

from mdblocks.core.extract.extract import make_parser


@pytest.fixture(name="parser")
def parser_fixture():
    return make_parser()


@pytest.fixture(name="tree")
def tree_fixture(parser):
    """Return a callable that parses markdown into a SyntaxTreeNode root."""
    def _tree(md: str) -> SyntaxTreeNode:
        return SyntaxTreeNode(parser.parse(md))
    return _tree
