#!/usr/bin/env python3
"""
dx: CLI for the docsindex documentation indexer

Usage:
    dx search "query"              # Search documents
    dx get guides/setup.md         # Show one document
    dx tree                        # Browse structure
    dx tags --sort=frequency       # List tags
    dx backlinks guides/setup.md   # Who links here
    dx related guides/setup.md     # Backlinks, outgoing links, tag siblings
    dx graph --json                # Relationship graph
    dx ask "How do I install it?"  # Templated answer with sources
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path
from typing import Any, NoReturn

import click
from pydantic import BaseModel

from . import __version__ as DOCSINDEX_VERSION
from ._logging import configure_logging
from .config import DEFAULT_MIN_SCORE, DEFAULT_SEARCH_LIMIT, MAX_SEARCH_LIMIT, ConfigurationError, get_docs_root

log = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Output helpers
# ─────────────────────────────────────────────────────────────────────────────


def _to_jsonable(data: Any) -> Any:
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json")
    if isinstance(data, list):
        return [_to_jsonable(item) for item in data]
    if isinstance(data, dict):
        return {key: _to_jsonable(value) for key, value in data.items()}
    return data


def output(data: Any, as_json: bool = False) -> None:
    """Print data as JSON or plain text."""
    if as_json:
        click.echo(json.dumps(_to_jsonable(data), indent=2, ensure_ascii=False))
    else:
        click.echo(data)


def format_table(rows: list[dict], columns: list[str], max_widths: dict | None = None) -> str:
    """Format rows as a simple left-aligned text table."""
    if not rows:
        return ""

    max_widths = max_widths or {}
    widths = {col: len(col) for col in columns}
    cells: list[dict[str, str]] = []
    for row in rows:
        rendered = {}
        for col in columns:
            value = row.get(col)
            value = "" if value is None else str(value)
            limit = max_widths.get(col)
            if limit and len(value) > limit:
                value = value[: limit - 3] + "..."
            rendered[col] = value
            widths[col] = max(widths[col], len(value))
        cells.append(rendered)

    header = "  ".join(col.upper().ljust(widths[col]) for col in columns)
    separator = "  ".join("-" * widths[col] for col in columns)
    lines = [header, separator]
    for rendered in cells:
        lines.append("  ".join(rendered[col].ljust(widths[col]) for col in columns).rstrip())
    return "\n".join(lines)


def _handle_error(
    ctx: click.Context,
    error: Exception,
    code: str = "ERROR",
    exit_code: int = 1,
) -> NoReturn:
    """Report an error and exit.

    Errors are emitted as JSON when the command was given --json or the
    group was given --json-errors; otherwise as a plain message.
    """
    obj = ctx.find_object(dict) or {}
    json_errors = obj.get("json_errors", False) or ctx.params.get("as_json", False)
    message = str(error)

    if json_errors:
        click.echo(json.dumps({"error": {"code": code, "message": message}}), err=True)
    else:
        click.echo(f"Error: {message}", err=True)

    sys.exit(exit_code)


def _get_store(ctx: click.Context):
    """Build the store lazily so --help works without a docs root."""
    from .store import IndexStore

    obj = ctx.ensure_object(dict)
    if "store" in obj:
        return obj["store"]

    try:
        root = Path(obj["root"]) if obj.get("root") else get_docs_root()
        log.debug("Using docs root %s", root)
        store = IndexStore.from_directory(root)
    except ConfigurationError as exc:
        _handle_error(ctx, exc, code="CONFIGURATION_ERROR")

    obj["store"] = store
    return store


def _run(ctx: click.Context, fn):
    """Run a store query, converting corpus failures into CLI errors."""
    from .corpus import CorpusError

    try:
        return fn(_get_store(ctx))
    except CorpusError as exc:
        _handle_error(ctx, exc, code="CORPUS_ERROR")


# ─────────────────────────────────────────────────────────────────────────────
# CLI group
# ─────────────────────────────────────────────────────────────────────────────


@click.group()
@click.version_option(version=DOCSINDEX_VERSION, prog_name="dx")
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="DOCSINDEX_ROOT",
    help="Documentation root directory (default: $DOCSINDEX_ROOT or discovered)",
)
@click.option("--json-errors", is_flag=True, help="Report errors as JSON")
@click.option("--quiet", "-q", is_flag=True, help="Only log warnings and errors")
@click.pass_context
def cli(ctx: click.Context, root: Path | None, json_errors: bool, quiet: bool):
    """Search, tags, backlinks and graph views over a documentation folder."""
    configure_logging("WARNING" if quiet else None)
    ctx.ensure_object(dict)
    ctx.obj["root"] = root
    ctx.obj["json_errors"] = json_errors


@cli.command()
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def get(ctx: click.Context, path: str, as_json: bool):
    """Show a document's title, front-matter and body.

    \b
    Examples:
      dx get guides/setup.md
    """
    doc = _run(ctx, lambda store: store.get_document(path))
    if doc is None:
        _handle_error(ctx, ValueError(f"Document not found: {path}"), code="NOT_FOUND")

    if as_json:
        output(doc, as_json=True)
        return

    click.echo(f"# {doc.title}")
    for key, value in doc.front_matter.items():
        if isinstance(value, list):
            value = ", ".join(value)
        click.echo(f"{key}: {value}")
    click.echo("")
    click.echo(doc.body)


@cli.command()
@click.option("--hidden", multiple=True, help="Extra path prefix to hide (repeatable)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def tree(ctx: click.Context, hidden: tuple[str, ...], as_json: bool):
    """Show the folder/file tree of the corpus."""

    def query(store):
        return store.list_tree([*store.settings.hidden_directories, *hidden])

    nodes = _run(ctx, query)

    if as_json:
        output(nodes, as_json=True)
        return

    if not nodes:
        click.echo("No documents found.")
        return

    def _print(children, depth: int) -> None:
        for node in children:
            suffix = "/" if node.kind == "folder" else ""
            click.echo(f"{'  ' * depth}{node.name}{suffix}")
            if node.children:
                _print(node.children, depth + 1)

    _print(nodes, 0)


@cli.command()
@click.argument("query")
@click.option(
    "--limit", "-n", default=DEFAULT_SEARCH_LIMIT, type=click.IntRange(min=1, max=MAX_SEARCH_LIMIT), help="Max results"
)
@click.option("--min-score", default=DEFAULT_MIN_SCORE, type=float, help="Drop results scoring below this")
@click.option("--no-content", is_flag=True, help="Match titles and headings only")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def search(ctx: click.Context, query: str, limit: int, min_score: float, no_content: bool, as_json: bool):
    """Search document titles, headings and bodies.

    \b
    Examples:
      dx search "deployment"
      dx search api --limit=5 --no-content
    """
    results = _run(
        ctx,
        lambda store: store.search(
            query,
            max_results=limit,
            min_score=min_score,
            include_content=not no_content,
        ),
    )

    if as_json:
        output(results, as_json=True)
        return

    if not results:
        click.echo("No results.")
        return

    rows = [
        {"path": r.path, "title": r.title, "score": f"{r.score:.2f}", "match": r.match_type}
        for r in results
    ]
    click.echo(format_table(rows, ["path", "title", "score", "match"], {"title": 40}))


@cli.command()
@click.option("--sort", "sort_by", type=click.Choice(["alphabetical", "frequency"]), default="alphabetical")
@click.option("--order", type=click.Choice(["asc", "desc"]), default="asc")
@click.option("--min-count", default=1, type=click.IntRange(min=1), help="Only tags used this often")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def tags(ctx: click.Context, sort_by: str, order: str, min_count: int, as_json: bool):
    """List all tags with usage counts.

    \b
    Examples:
      dx tags
      dx tags --sort=frequency --order=desc
    """
    result = _run(ctx, lambda store: store.list_tags(sort_by=sort_by, order=order, min_count=min_count))

    if as_json:
        output(result, as_json=True)
        return

    if not result:
        click.echo("No tags found.")
        return

    for tag_info in result:
        click.echo(f"  {tag_info.name}: {tag_info.count}")


@cli.command()
@click.argument("name")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def tag(ctx: click.Context, name: str, as_json: bool):
    """Show the documents carrying one tag."""
    info = _run(ctx, lambda store: store.get_tag(name))

    if as_json:
        output(info, as_json=True)
        return

    if info is None:
        click.echo(f"Tag not found: {name}")
        return

    click.echo(f"{info.name} ({info.count})")
    for f in info.files:
        click.echo(f"  {f.path}  {f.title}")


@cli.command()
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def backlinks(ctx: click.Context, path: str, as_json: bool):
    """Show documents linking to PATH."""
    result = _run(ctx, lambda store: store.get_backlinks(path))

    if as_json:
        output(result, as_json=True)
        return

    if not result:
        click.echo("No backlinks.")
        return

    rows = [
        {"source": b.source_file, "title": b.source_title, "refs": b.reference_count, "text": b.link_text}
        for b in result
    ]
    click.echo(format_table(rows, ["source", "title", "refs", "text"], {"title": 40, "text": 30}))


@cli.command()
@click.argument("path")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def related(ctx: click.Context, path: str, as_json: bool):
    """Show backlinks, outgoing links and tag siblings of PATH."""
    result = _run(ctx, lambda store: store.get_related(path))

    if as_json:
        output(result, as_json=True)
        return

    if not (result.backlinks or result.outgoing_links or result.by_tags):
        click.echo("No related content.")
        return

    if result.backlinks:
        click.echo("Linked from:")
        for b in result.backlinks:
            click.echo(f"  {b.source_file}  {b.source_title}")
    if result.outgoing_links:
        click.echo("Links to:")
        for link in result.outgoing_links:
            click.echo(f"  {link.file_path}  {link.title}")
    for group in result.by_tags:
        click.echo(f"Shares tags {group.tag}:")
        for f in group.files:
            click.echo(f"  {f.file_path}  {f.title}")


@cli.command()
@click.option("--current", help="Mark this document as the current one")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def graph(ctx: click.Context, current: str | None, as_json: bool):
    """Show the relationship graph of documents, images and tags."""
    data = _run(ctx, lambda store: store.get_graph(current))

    if as_json:
        output(data, as_json=True)
        return

    counts: dict[str, int] = {}
    for node in data.nodes:
        counts[node.kind] = counts.get(node.kind, 0) + 1
    summary = ", ".join(f"{count} {kind}" for kind, count in sorted(counts.items()))
    click.echo(f"Nodes: {len(data.nodes)} ({summary or 'none'})")
    click.echo(f"Edges: {len(data.edges)}")
    for edge in data.edges:
        click.echo(f"  {edge.source} -[{edge.kind}]-> {edge.target}")


@cli.command()
@click.argument("question")
@click.option("--sources", "max_sources", type=click.IntRange(min=1), help="Max sources cited")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def ask(ctx: click.Context, question: str, max_sources: int | None, as_json: bool):
    """Answer a question from the documentation.

    \b
    Examples:
      dx ask "How do I install the docs hub?"
    """
    answer = _run(ctx, lambda store: store.answer(question, max_sources=max_sources))

    if as_json:
        output(answer, as_json=True)
        return

    click.echo(answer.text)
    click.echo("")
    click.echo(f"Confidence: {answer.confidence:.0%}")
    for source in answer.sources:
        click.echo(f"  - {source.title} ({source.path})")


@cli.command()
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def questions(ctx: click.Context, as_json: bool):
    """List suggested questions for `dx ask`."""
    result = _run(ctx, lambda store: store.common_questions())

    if as_json:
        output(result, as_json=True)
        return

    for question in result:
        click.echo(f"  {question}")


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
