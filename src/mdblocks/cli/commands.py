"""CLI command implementations"""

import json
import sys
from pathlib import Path
from typing import Annotated, Optional

import typer

from mdblocks.config import Settings, load_config
from mdblocks.core.export import build_body, build_markdown
from mdblocks.core.models import Document
from mdblocks.core.parse import parse_file, parse_text
from mdblocks.core.pipeline import run_check, run_export
from mdblocks.core.utils.logs import configure_logging


VerboseOpt = Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging")]
ParserOpt = Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")]


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None, verbose: bool = False) -> Settings:
    """Load config with standard CLI error handling, then set up logging."""
    try:
        settings = load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))
    configure_logging(settings.log_level, verbose)
    return settings


def _load(path: str, settings: Settings) -> Document:
    """Parse a file, or stdin when path is '-'."""
    try:
        if path == "-":
            doc = parse_text(sys.stdin.read(), parser_config=settings.parser_config)
            if not doc.metadata.get('frontmatter', {}).get('title'):
                doc = doc.copy_with(title=settings.default_title)
            return doc
        p = Path(path)
        if not p.is_file():
            _fail(f"Not a file: {path}")
        return parse_file(p, settings.parser_config)
    except (ValueError, OSError) as e:
        _fail(f"Could not parse {path}", e)


def parse_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to parse ('-' for stdin)")],
    parser: ParserOpt = None,
    verbose: VerboseOpt = False,
    ):
    """Print the block model of a markdown file as JSON."""
    settings = _settings(overrides={"parser_config": parser}, verbose=verbose)
    doc = _load(path, settings)
    typer.echo(json.dumps(doc.to_json(), indent=2, ensure_ascii=False))


def format_cmd(
    path: Annotated[str, typer.Argument(help="Markdown file to normalize ('-' for stdin)")],
    out: Annotated[Optional[Path], typer.Option("--out", "-o", help="Write to this file instead of stdout")] = None,
    parser: ParserOpt = None,
    verbose: VerboseOpt = False,
    ):
    """Parse then re-serialize a markdown file (frontmatter kept)."""
    settings = _settings(overrides={"parser_config": parser}, verbose=verbose)
    doc = _load(path, settings)
    text = build_markdown(doc, build_body(doc))
    if out is None:
        typer.echo(text, nl=False)
        return
    try:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
    except OSError as e:
        _fail(f"Could not write {out}", e)
    typer.echo(f"  {path} -> {out}")


def export_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to export")],
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    fmt: Annotated[Optional[str], typer.Option("--format", help="md or mdx")] = None,
    parser: ParserOpt = None,
    verbose: VerboseOpt = False,
    ):
    """Write normalized MD/MDX + sidecar JSON for every markdown file under path."""
    settings = _settings(
        overrides={"output_dir": out, "output_format": fmt, "parser_config": parser},
        verbose=verbose,
    )
    output_dir = Path(settings.output_dir)
    try:
        results = run_export(path, output_dir, settings.output_format, settings.parser_config)
    except RuntimeError as e:
        _fail(str(e))
    if not results:
        typer.echo(f"No markdown files found under {path}.")
        raise typer.Exit(1)
    for src, md_path in results:
        typer.echo(f"  {src} -> {md_path}")
    typer.echo(f"Exported {len(results)} document(s) to {output_dir}/")


def check_cmd(
    path: Annotated[str, typer.Argument(help="File or directory to check")],
    parser: ParserOpt = None,
    verbose: VerboseOpt = False,
    ):
    """Verify that parse(serialize(parse(x))) matches parse(x) block for block."""
    settings = _settings(overrides={"parser_config": parser}, verbose=verbose)
    failures = run_check(path, settings.parser_config)
    for p, report in failures.items():
        typer.echo(f"FAIL {p}")
        for line in report:
            typer.echo(f"  {line.rstrip()}")
    if failures:
        typer.echo(f"{len(failures)} file(s) failed the round-trip check.", err=True)
        raise typer.Exit(1)
    typer.echo("Round-trip check passed.")
