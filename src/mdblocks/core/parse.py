"""File discovery, frontmatter extraction, and file-to-Document parsing"""

import hashlib
import re
from pathlib import Path
from typing import Any

import yaml

from mdblocks.core.extract.extract import DEFAULT_PRESET, parse_markdown
from mdblocks.core.models import Document


FRONTMATTER_RE = re.compile(r'^---\s*\n(.*?)\n---\s*\n', re.DOTALL)
MD_EXTENSIONS = {'.md', '.markdown'}
TITLE_SUFFIX_RE = re.compile(r'\.(md|markdown|txt)$', re.IGNORECASE)


def content_hash(raw: str) -> str:
    """Hex SHA-256 of the raw file text, for callers that cache parse results."""
    return hashlib.sha256(raw.encode("utf-8")).hexdigest()


def strip_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """Return (frontmatter_dict, body) with YAML header removed."""
    m = FRONTMATTER_RE.match(text)
    if m:
        try:
            fm = yaml.safe_load(m.group(1)) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML frontmatter: {e}") from e
        if not isinstance(fm, dict):
            raise ValueError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
        return fm, text[m.end():]
    return {}, text


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.markdown files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix.lower() in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.is_file() and p.suffix.lower() in MD_EXTENSIONS)


def title_for(path: Path | None, frontmatter: dict[str, Any]) -> str:
    """Title from frontmatter, else the file name without its markdown suffix."""
    title = frontmatter.get('title') or (TITLE_SUFFIX_RE.sub('', path.name) if path else '')
    return str(title) if title else "Untitled"


def parse_text(raw: str, path: Path | None = None, parser_config: str = DEFAULT_PRESET) -> Document:
    """Parse raw file content (frontmatter allowed) into a Document."""
    frontmatter, body = strip_frontmatter(raw)
    metadata: dict[str, Any] = {"hash": content_hash(raw)}
    if frontmatter:
        metadata["frontmatter"] = frontmatter
    return parse_markdown(
        body,
        title=title_for(path, frontmatter),
        file_path=str(path) if path else None,
        metadata=metadata,
        preset=parser_config,
    )


def parse_file(path: Path, parser_config: str = DEFAULT_PRESET) -> Document:
    """Read a single markdown file (UTF-8) into a Document."""
    return parse_text(path.read_text(encoding='utf-8'), path, parser_config)
