"""Export: normalized Markdown/MDX with frontmatter, sidecar JSON, and file writing"""

import json
from pathlib import Path

import yaml

from mdblocks.core.models import Document
from mdblocks.core.serialize import serialize_document
from mdblocks.core.utils.slug import slugify


def build_body(doc: Document) -> str:
    """Serialize the document's blocks back to Markdown."""
    return serialize_document(doc)


def build_markdown(doc: Document, body: str) -> str:
    """Return body with the document's YAML frontmatter (if any) prepended."""
    fm = dict(doc.metadata.get('frontmatter') or {})
    if not fm:
        return body
    header = yaml.dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{header}---\n\n{body.lstrip()}"


def build_sidecar(doc: Document) -> dict:
    """Build the sidecar JSON dict: document fields plus the full block model."""
    data = doc.to_json()
    data['wordCount'] = doc.word_count
    return data


def output_stem(doc: Document) -> str:
    """File stem for exported output: the source file stem, else the slugified title."""
    if doc.file_path:
        return Path(doc.file_path).stem
    return slugify(doc.title)


def write_doc(doc: Document, output_dir: Path, fmt: str = 'md') -> tuple[Path, Path]:
    """Write MD/MDX + sidecar JSON for a single document.

    Output path mirrors the source directory structure when the document's
    file path is relative:
      output_dir / Path(doc.file_path).parent / <stem>.{fmt|json}

    Returns (markdown_path, json_path).
    """
    dest_dir = output_dir
    if doc.file_path and not Path(doc.file_path).is_absolute():
        dest_dir = output_dir / Path(doc.file_path).parent
    dest_dir.mkdir(parents=True, exist_ok=True)

    stem = output_stem(doc)
    md_path = dest_dir / f"{stem}.{fmt}"
    json_path = dest_dir / f"{stem}.json"

    md_path.write_text(build_markdown(doc, build_body(doc)), encoding='utf-8')
    json_path.write_text(json.dumps(build_sidecar(doc), indent=2, ensure_ascii=False), encoding='utf-8')
    return md_path, json_path
