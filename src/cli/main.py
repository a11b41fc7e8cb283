"""
Typer CLI for cluster-drill.

Commands:
    cluster-drill clusters      - Show how items are divided into clusters
    cluster-drill simulate      - Run a simulated session and show the order

Usage:
    cluster-drill --help
    cluster-drill clusters --items data/items.json
    cluster-drill simulate --grid 12 --method random_clusters --rounds 2,1
    cluster-drill -v simulate --method random --passes 3
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger
from rich.console import Console
from rich.table import Table

from config import get_settings
from src.selection import (
    ClusteringAlgorithm,
    SelectionConfig,
    SelectionError,
    SelectionMethod,
    StudyItem,
    StudySession,
    compute_kmeans_clusters,
    compute_random_clusters,
    default_primitive,
    grid_items,
    load_items,
)

app = typer.Typer(
    name="cluster-drill",
    help="cluster-drill: round-based cluster item selection",
    no_args_is_help=True,
)
console = Console()


def _configure_logging(level: str) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level.upper(),
        format="<level>{message}</level>",
    )


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logging"),
) -> None:
    """Round-based cluster item selection."""
    if verbose:
        _configure_logging("DEBUG")


# =============================================================================
# Helpers
# =============================================================================


def _load(items_path: Optional[Path], grid: int) -> list[StudyItem]:
    """Load items from a JSON file, or lay out a synthetic grid."""
    try:
        if items_path is not None:
            return load_items(items_path)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Could not load items: {e}[/red]")
        raise typer.Exit(1)
    return grid_items(grid)


def _build_config(
    rounds: Optional[str],
    clusters: Optional[int],
    passes: Optional[int],
) -> SelectionConfig:
    config = SelectionConfig.from_settings()
    if rounds is not None:
        try:
            config.rounds = [int(part) for part in rounds.split(",") if part.strip()]
        except ValueError:
            console.print(f"[red]Invalid round schedule: {rounds}[/red]")
            raise typer.Exit(1)
    if clusters is not None:
        config.cluster_count = clusters
    if passes is not None:
        config.max_passes = passes
    return config


# =============================================================================
# Commands
# =============================================================================


@app.command()
def clusters(
    items_path: Optional[Path] = typer.Option(None, "--items", "-i", help="JSON file with items"),
    grid: int = typer.Option(16, "--grid", "-g", help="Synthetic grid size when no file is given"),
    method: SelectionMethod = typer.Option(SelectionMethod.KMEANS, "--method", "-m", help="Clustering method"),
    cluster_count: Optional[int] = typer.Option(None, "--clusters", "-k", help="Number of clusters"),
) -> None:
    """Show how items are divided into clusters."""
    items = _load(items_path, grid)
    config = _build_config(None, cluster_count, None)
    primitive = default_primitive(config)

    try:
        if method == SelectionMethod.KMEANS:
            result = compute_kmeans_clusters(items, config.cluster_count, primitive)
        elif method == SelectionMethod.RANDOM_CLUSTERS:
            result = compute_random_clusters(items, config.cluster_count, primitive)
        else:
            console.print("[yellow]The random method does not use clusters[/yellow]")
            raise typer.Exit(1)
    except SelectionError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    table = Table(title=f"{len(result)} clusters ({method.value})")
    table.add_column("ID", justify="right")
    table.add_column("Sorting ID", justify="right")
    table.add_column("Size", justify="right")
    table.add_column("Members")

    for cluster in result:
        table.add_row(
            str(cluster.id),
            str(cluster.sorting_id),
            str(cluster.size),
            ", ".join(item.label for item in cluster.members),
        )

    console.print(table)


@app.command()
def simulate(
    items_path: Optional[Path] = typer.Option(None, "--items", "-i", help="JSON file with items"),
    grid: int = typer.Option(8, "--grid", "-g", help="Synthetic grid size when no file is given"),
    method: Optional[SelectionMethod] = typer.Option(None, "--method", "-m", help="Selection method"),
    rounds: Optional[str] = typer.Option(None, "--rounds", "-r", help="Comma-separated passes per round"),
    cluster_count: Optional[int] = typer.Option(None, "--clusters", "-k", help="Number of clusters"),
    passes: Optional[int] = typer.Option(None, "--passes", "-p", help="Passes for the random method"),
    show: int = typer.Option(20, "--show", "-s", help="Presentations to list"),
) -> None:
    """Run a simulated session where every item is answered."""
    items = _load(items_path, grid)
    config = _build_config(rounds, cluster_count, passes)
    session = StudySession(
        items,
        method=method or SelectionMethod(get_settings().selection_method),
        config=config,
    )

    table = Table(title=f"Session ({session.method.value})")
    table.add_column("#", justify="right")
    table.add_column("Item")
    table.add_column("Cluster", justify="right")
    table.add_column("Seen", justify="right")

    repeats = 0
    previous: StudyItem | None = None
    try:
        while (item := session.next_item()) is not None:
            if item is previous:
                repeats += 1
            if session.presentations <= show:
                cluster_id = "-"
                if isinstance(session.algorithm, ClusteringAlgorithm):
                    cluster_id = str(session.algorithm.get_cluster_of_item(item).id)
                table.add_row(str(session.presentations), item.label, cluster_id, str(item.times_seen))
            session.submit_answer(correct=True)
            previous = item
    except SelectionError as e:
        console.print(f"[red]Session failed: {e}[/red]")
        raise typer.Exit(1)

    if show > 0:
        console.print(table)

    seen_counts = sorted({item.times_seen for item in items})
    console.print(f"\n[bold]Presentations:[/bold] {session.presentations}")
    console.print(f"[bold]Answers per item:[/bold] {', '.join(str(c) for c in seen_counts)}")
    console.print(f"[bold]Back-to-back repeats:[/bold] {repeats}")


# =============================================================================
# Entry Point
# =============================================================================


def main() -> None:
    """CLI entry point."""
    _configure_logging(get_settings().log_level)
    app()


if __name__ == "__main__":
    main()
