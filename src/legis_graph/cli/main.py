"""
legis-graph CLI - build and query the legislative knowledge graph
"""

from __future__ import annotations

import asyncio
import json
import logging
from contextlib import asynccontextmanager

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from legis_graph.knowledge_graph.models import NodeType
from legis_graph.knowledge_graph.pipeline import IngestionError
from legis_graph.knowledge_graph.query_engine import GraphQueryEngine
from legis_graph.settings import settings

console = Console()


def _configure_logging() -> None:
    level = (settings.log_level or "INFO").upper()
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


@asynccontextmanager
async def open_source():
    from legis_graph.service.db import PostgresRecordSource

    source = await PostgresRecordSource.connect(settings.postgres_dsn)
    try:
        yield source
    finally:
        await source.close()


async def _built_engine() -> GraphQueryEngine:
    from legis_graph.service.app import build_query_engine

    async with open_source() as source:
        engine = build_query_engine(source, settings)
        await engine.rebuild()
    return engine


def _load() -> GraphQueryEngine:
    _configure_logging()
    try:
        return asyncio.run(_built_engine())
    except IngestionError as e:
        raise click.ClickException(str(e)) from e


def _print_json(data) -> None:
    console.print_json(json.dumps(data, default=str))


@click.group()
def cli():
    """Legislative knowledge graph"""
    pass


@cli.command()
def version():
    """Print the package version"""
    from legis_graph import __version__

    click.echo(__version__)


@cli.command()
def build():
    """Build the graph from the database and show its size"""
    engine = _load()
    stats = engine.stats()
    last = engine.registry.last_stats

    table = Table(title="Knowledge graph")
    table.add_column("Kind", style="cyan")
    table.add_column("Type")
    table.add_column("Count", justify="right", style="green")
    for node_type, n in sorted(stats["nodesByType"].items()):
        table.add_row("node", node_type, str(n))
    for edge_type, n in sorted(stats["edgesByType"].items()):
        table.add_row("edge", edge_type, str(n))
    console.print(table)

    console.print(f"[bold]{stats['nodes']}[/bold] nodes, [bold]{stats['edges']}[/bold] edges")
    if last is not None:
        console.print(f"Built in {last.duration_ms:.0f}ms")
        if last.skipped:
            console.print(f"[yellow]Skipped {last.skipped_total} records[/yellow]: {last.skipped}")


@cli.command()
@click.argument("from_id")
@click.argument("to_id")
def path(from_id, to_id):
    """Shortest path between two nodes, e.g. member:A000360 bill:118-hr-1"""
    engine = _load()
    result = engine.path(from_id, to_id)
    if result is None:
        console.print("[yellow]No path found between these nodes[/yellow]")
        return

    hops = result["length"]
    console.print(f"[bold]{hops}[/bold] hop" + ("" if hops == 1 else "s"))
    for i, node in enumerate(result["nodes"]):
        console.print(f"  [cyan]{node['id']}[/cyan] {escape(node['label'])}")
        if i < len(result["edges"]):
            edge = result["edges"][i]
            console.print(f"    [dim]{edge['source']} -{edge['type']}-> {edge['target']}[/dim]")


@cli.command()
@click.argument("node_id")
@click.option("--depth", default=2, help="Hops to expand (max 4)")
@click.option(
    "--type",
    "node_type",
    type=click.Choice([t.value for t in NodeType]),
    default=None,
    help="Only report nodes of this type",
)
def connections(node_id, depth, node_type):
    """Nodes near NODE_ID"""
    engine = _load()
    result = engine.connections(node_id, depth=depth, node_type=NodeType(node_type) if node_type else None)
    if result is None:
        raise click.ClickException(f"Graph node not found: {node_id}")

    table = Table(title=f"Connections of {node_id}")
    table.add_column("Depth", justify="right")
    table.add_column("Node", style="cyan")
    table.add_column("Label")
    table.add_column("Via")
    for c in result["connections"]:
        via = " / ".join(e["type"] for e in c["edges"])
        table.add_row(str(c["depth"]), c["node"]["id"], escape(c["node"]["label"]), via)
    console.print(table)
    console.print(f"{result['total']} total")


@cli.command()
@click.argument("node_id")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON")
def influence(node_id, as_json):
    """Influence score of NODE_ID with its factors"""
    engine = _load()
    result = engine.influence(node_id)
    if result is None:
        raise click.ClickException(f"Graph node not found: {node_id}")
    if as_json:
        _print_json(result)
        return

    console.print(f"[bold]{node_id}[/bold] influence: [green]{result['score']}[/green]/100")
    for f in result["factors"]:
        console.print(f"  {f['factor']}: {f['value']}")


@cli.command()
def serve():
    """Run the HTTP service"""
    from legis_graph.service.server import main

    main()


def app() -> None:
    cli()


if __name__ == "__main__":
    app()
