"""Cytosol command line."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import click

from cytosol import __version__
from cytosol.ast_nodes import File
from cytosol.config import CytosolConfig, find_config, load_config
from cytosol.errors import CompileError, DiagnosticRenderer, ParseError
from cytosol.lexer import Lexer
from cytosol.parser import parse_file
from cytosol.source import SourceFile


def _parse_source(src: SourceFile, renderer: DiagnosticRenderer) -> File | None:
    """Lex and parse one file, echoing diagnostics. Returns None on error."""
    try:
        tokens = Lexer(src.content, src.name).lex()
        return parse_file(src.name, tokens)
    except CompileError as e:
        for diag in e.diagnostics:
            click.echo(renderer.render(diag), err=True)
    except ParseError as e:
        click.echo(renderer.render(e.to_diagnostic()), err=True)
    return None


def _collect_sources(path: Path) -> tuple[str, list[Path], CytosolConfig]:
    """Resolve what to check: a single file, a project, or a bare directory."""
    if path.is_file():
        return path.name, [path], CytosolConfig()

    try:
        config_path = find_config(path)
    except FileNotFoundError:
        config = CytosolConfig()
        root = path
        name = path.resolve().name
    else:
        config = load_config(config_path)
        root = config_path.parent / config.check.source_dir
        if not root.is_dir():
            root = config_path.parent  # fallback to project root
        name = config.package.name

    files = sorted(
        p for p in root.rglob("*")
        if p.is_file() and p.suffix in config.check.extensions
    )
    return name, files, config


@click.group()
@click.version_option(__version__, prog_name="cytosol")
def main() -> None:
    """Parser front end for the Cytosol language."""


@main.command()
@click.argument("path", default=".", type=click.Path(exists=True))
@click.option("--no-color", is_flag=True, help="Disable colored diagnostics.")
def check(path: str, no_color: bool) -> None:
    """Parse Cytosol sources and report syntax errors."""
    name, files, config = _collect_sources(Path(path))
    click.echo(f"checking {name}...")

    if not files:
        click.echo("warning: no source files found", err=True)
        return

    had_errors = False
    for source_file in files:
        src = SourceFile(source_file)
        renderer = DiagnosticRenderer(
            color=config.check.color and not no_color,
            sources={src.name: src.content},
        )
        if _parse_source(src, renderer) is None:
            had_errors = True

    if had_errors:
        raise SystemExit(1)
    click.echo(f"checked {name}: {len(files)} file(s), no errors")


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def view(file: str) -> None:
    """View the AST of a Cytosol source file."""
    src = SourceFile(Path(file))
    renderer = DiagnosticRenderer(color=True, sources={src.name: src.content})
    tree = _parse_source(src, renderer)
    if tree is None:
        raise SystemExit(1)
    _dump_ast(tree, 0)


@main.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def tokens(file: str) -> None:
    """Print the token stream of a Cytosol source file."""
    src = SourceFile(Path(file))
    try:
        toks = Lexer(src.content, src.name).lex()
    except CompileError as e:
        renderer = DiagnosticRenderer(color=True, sources={src.name: src.content})
        for diag in e.diagnostics:
            click.echo(renderer.render(diag), err=True)
        raise SystemExit(1)

    for tok in toks:
        click.echo(f"{tok.span.start_line}:{tok.span.start_col}\t{tok.kind.name}\t{tok.value!r}")


def _dump_ast(node: object, depth: int) -> None:
    """Print a readable AST dump."""
    indent = "  " * depth
    name = type(node).__name__

    if hasattr(node, "__dataclass_fields__"):
        fields = node.__dataclass_fields__  # type: ignore[union-attr]
        click.echo(f"{indent}{name}")
        for field_name in fields:
            if field_name in ("span", "op_span"):
                continue
            value = getattr(node, field_name)
            if isinstance(value, list):
                if value:
                    click.echo(f"{indent}  {field_name}:")
                    for item in value:
                        _dump_ast(item, depth + 2)
                else:
                    click.echo(f"{indent}  {field_name}: []")
            elif hasattr(value, "__dataclass_fields__"):
                click.echo(f"{indent}  {field_name}:")
                _dump_ast(value, depth + 2)
            elif isinstance(value, Enum):
                click.echo(f"{indent}  {field_name}: {value.value}")
            elif value is not None:
                click.echo(f"{indent}  {field_name}: {value!r}")
    else:
        click.echo(f"{indent}{name}: {node!r}")
