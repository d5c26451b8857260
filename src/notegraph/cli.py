"""CLI entrypoint for notegraph."""

from __future__ import annotations

import logging
from pathlib import Path

import click
import networkx as nx
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table
from sklearn.metrics import silhouette_score

from notegraph.config import NumericConfig
from notegraph.errors import NoteGraphError
from notegraph.graph import LinkMatrixBuilder, to_networkx
from notegraph.pipeline import build_note_map
from notegraph.reduction import SVDReducer
from notegraph.sources import EmbeddingSource, LinkGraphSource, VectorSource, get_embedder
from notegraph.vault import load_vault, vault_links

console = Console()


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
def main(verbose: bool):
    """notegraph — map an Obsidian vault's link graph into coordinates and clusters."""
    load_dotenv()
    _setup_logging(verbose)


@main.command(name="map")
@click.argument("vault", type=click.Path(exists=True, file_okay=False))
@click.option(
    "--source",
    type=click.Choice(["links", "laplacian", "embeddings"]),
    default="links",
    help="Vectors to reduce: adjacency rows, Laplacian rows or text embeddings.",
)
@click.option("--dims", default=2, show_default=True, help="Target dimensionality.")
@click.option("--clusters", "num_clusters", default=None, type=int, help="Number of k-means clusters.")
@click.option("--center/--no-center", default=True, show_default=True, help="Center columns before SVD.")
@click.option("--scale", is_flag=True, help="Scale columns to unit variance before SVD.")
@click.option("--normalize", "normalize_first", is_flag=True, help="L2-normalize vectors first.")
@click.option(
    "--backend",
    type=click.Choice(["openai", "local"]),
    default="local",
    help="Embedding backend (with --source embeddings).",
)
@click.option("--model", default=None, help="Embedding model name override.")
def map_(
    vault: str,
    source: str,
    dims: int,
    num_clusters: int | None,
    center: bool,
    scale: bool,
    normalize_first: bool,
    backend: str,
    model: str | None,
):
    """Reduce each note to DIMS coordinates and optionally cluster them."""
    vault_path = Path(vault)
    try:
        config = NumericConfig.from_env()
    except ValueError as e:
        raise click.ClickException(str(e)) from e

    with console.status("Loading vault..."):
        notes = load_vault(vault_path)
    console.print(f"Loaded [bold]{len(notes)}[/bold] notes from {vault_path}")

    if not notes:
        console.print("[yellow]Vault has no notes.[/yellow]")
        return

    titles = [n.title for n in notes]
    vector_source: VectorSource
    if source == "embeddings":
        embedder_kwargs = {"model": model} if model else {}
        with console.status(f"Loading embedding model ({backend})..."):
            embedder = get_embedder(backend, **embedder_kwargs)
        texts = [f"{n.title}\n\n{n.content}" for n in notes]
        vector_source = EmbeddingSource([n.id for n in notes], texts, embedder, labels=titles)
    else:
        note_paths, links = vault_links(notes)
        console.print(f"Resolved [bold]{len(links)}[/bold] links")
        vector_source = LinkGraphSource(
            note_paths, links, laplacian=source == "laplacian", labels=titles
        )

    try:
        with console.status(f"Building vectors ({vector_source.source_id})..."):
            items = vector_source.fetch_vectors()
        with console.status("Reducing and clustering..."):
            note_map = build_note_map(
                items,
                target_dims=dims,
                num_clusters=num_clusters,
                reducer=SVDReducer(center=center, scale=scale, config=config),
                normalize_first=normalize_first,
                config=config,
            )
    except NoteGraphError as e:
        raise click.ClickException(str(e)) from e

    table = Table(title=f"Note map ({note_map.source_id})", show_lines=False)
    table.add_column("Note", style="cyan")
    if note_map.clusters is not None:
        table.add_column("Cluster", justify="right", style="bold green")
    for d in range(dims):
        table.add_column(f"x{d}", justify="right")

    for i, label in enumerate(note_map.labels):
        row = [label]
        if note_map.clusters is not None:
            row.append(str(note_map.clusters[i]))
        row.extend(f"{x:.4f}" for x in note_map.coordinates[i])
        table.add_row(*row)
    console.print(table)

    if note_map.clusters is not None:
        n_labels = len(set(note_map.clusters))
        if dims > 0 and 2 <= n_labels < len(note_map.clusters):
            score = silhouette_score(note_map.coordinates, note_map.clusters)
            console.print(f"Silhouette score: {score:.3f}")


@main.command()
@click.argument("vault", type=click.Path(exists=True, file_okay=False))
def stats(vault: str):
    """Print basic statistics about the vault's directed link structure."""
    notes = load_vault(Path(vault))
    note_paths, links = vault_links(notes)

    builder = LinkMatrixBuilder(note_paths)
    adjacency = builder.build(links)
    G = to_networkx(adjacency, builder.note_paths)

    console.print(f"Notes: {builder.num_notes()}")
    console.print(f"Links: {len(links)}")
    console.print(f"Distinct linked pairs: {adjacency.nnz}")
    console.print(f"Self-links: {nx.number_of_selfloops(G)}")

    if G.number_of_nodes() == 0:
        return

    components = list(nx.weakly_connected_components(G))
    console.print(f"Weakly connected components: {len(components)}")

    isolates = list(nx.isolates(G))
    console.print(f"Isolated notes (no links): {len(isolates)}")

    if G.number_of_edges() > 0:
        console.print(f"Graph density: {nx.density(G):.4f}")


if __name__ == "__main__":
    main()
