"""Pipeline step functions: batch export and round-trip checking over files"""

import logging
from pathlib import Path

from mdblocks.core.export import build_body, write_doc
from mdblocks.core.extract.extract import parse_blocks
from mdblocks.core.models import Document
from mdblocks.core.parse import discover_files, parse_file
from mdblocks.core.utils.diff import semantic_mismatches, unified_diff


log = logging.getLogger(__name__)


def roundtrip_problems(doc: Document, parser_config: str = 'gfm-like') -> list[str]:
    """Compare doc.blocks with parse(serialize(doc)); empty list when equivalent."""
    reparsed = parse_blocks(build_body(doc), parser_config)
    return semantic_mismatches(doc.blocks, reparsed)


def run_export(
    path: str,
    output_dir: Path,
    fmt: str = 'md',
    parser_config: str = 'gfm-like',
    ) -> list[tuple[Path, Path]]:
    """Parse every markdown file under path and write normalized output. Returns (source, output) pairs."""
    results = []
    for p in discover_files(Path(path)):
        try:
            doc = parse_file(p, parser_config)
            md_path, _ = write_doc(doc, output_dir, fmt)
        except Exception as e:
            raise RuntimeError(f"Failed to export {p}: {e}") from e
        log.info("Exported %s -> %s (%d blocks)", p, md_path, len(doc.blocks))
        results.append((p, md_path))
    return results


def run_check(path: str, parser_config: str = 'gfm-like') -> dict[Path, list[str]]:
    """Check semantic round-trip for each file. Returns {path: report lines} for failures only."""
    failures: dict[Path, list[str]] = {}
    for p in discover_files(Path(path)):
        try:
            doc = parse_file(p, parser_config)
        except ValueError as e:
            failures[p] = [str(e)]
            continue
        problems = roundtrip_problems(doc, parser_config)
        if problems:
            first = build_body(doc)
            second = build_body(Document(blocks=parse_blocks(first, parser_config)))
            failures[p] = problems + unified_diff(first, second, "serialized", "reserialized")
        log.debug("Checked %s: %d problem(s)", p, len(problems))
    return failures
