"""Integration tests for the export and round-trip check pipeline"""

import json

import pytest

from mdblocks.core.export import build_markdown, output_stem, write_doc
from mdblocks.core.models import Document
from mdblocks.core.parse import parse_text
from mdblocks.core.pipeline import run_check, run_export


def test_run_export_writes_frontmatter_and_sidecar(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "src").mkdir()
    (tmp_path / "src" / "post.md").write_text("---\ntitle: Post\n---\n* one\n* two\n")

    results = run_export("src", tmp_path / "out", fmt="md")

    assert len(results) == 1
    src, md_path = results[0]
    assert md_path == tmp_path / "out" / "src" / "post.md"
    assert md_path.read_text() == "---\ntitle: Post\n---\n\n- one\n\n- two\n"
    sidecar = json.loads((tmp_path / "out" / "src" / "post.json").read_text())
    assert sidecar["title"] == "Post"
    assert sidecar["wordCount"] == 2
    assert [b["type"] for b in sidecar["blocks"]] == ["bulletList", "bulletList"]


def test_run_export_wraps_failures(tmp_path):
    (tmp_path / "bad.md").write_text("---\nkey: [unclosed\n---\n")
    with pytest.raises(RuntimeError, match="Failed to export"):
        run_export(str(tmp_path), tmp_path / "out")


def test_run_check_passes_rich_sample(tmp_path, rich_md):
    (tmp_path / "rich.md").write_text(rich_md)
    assert run_check(str(tmp_path)) == {}


def test_build_markdown_without_frontmatter():
    doc = parse_text("Text\n")
    assert build_markdown(doc, "Text\n") == "Text\n"


def test_output_stem_falls_back_to_title():
    assert output_stem(Document.new("My Notes")) == "my-notes"
    assert output_stem(Document.new("!!!")) == "untitled"


def test_write_doc_absolute_path_goes_to_output_root(tmp_path):
    doc = parse_text("# Hi\n", path=tmp_path / "hi.md")
    md_path, json_path = write_doc(doc, tmp_path / "out", fmt="mdx")
    assert md_path == tmp_path / "out" / "hi.mdx"
    assert json_path.exists()
