"""Chain the stages: source vectors -> reduced coordinates -> cluster labels."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from notegraph.clustering import kmeans
from notegraph.config import NumericConfig
from notegraph.reduction import DimensionalityReducer, SVDReducer
from notegraph.sources import VectorWithMetadata
from notegraph.vectors import normalize

logger = logging.getLogger(__name__)


@dataclass
class NoteMap:
    """Low-dimensional layout of a set of notes."""

    ids: list[str]
    labels: list[str]
    coordinates: list[list[float]]
    clusters: list[int] | None  # None when clustering was not requested
    source_id: str = ""


def build_note_map(
    items: Sequence[VectorWithMetadata],
    target_dims: int = 2,
    num_clusters: int | None = None,
    reducer: DimensionalityReducer | None = None,
    normalize_first: bool = False,
    config: NumericConfig | None = None,
) -> NoteMap:
    """Reduce the item vectors to *target_dims* and optionally cluster them.

    Clustering runs on the reduced coordinates. Each stage raises its own
    errors; nothing is returned on failure.
    """
    reducer = reducer or SVDReducer(config=config)
    vectors = [item.vector for item in items]
    if normalize_first:
        vectors = normalize(vectors, config=config)

    coordinates = reducer.reduce(vectors, target_dims)

    clusters = None
    if num_clusters is not None:
        clusters = kmeans(coordinates, num_clusters, config=config).labels

    source_id = items[0].source_id if items else ""
    logger.debug(
        "Mapped %d items from %r to %d dims with %s",
        len(items), source_id, target_dims, reducer.method_name,
    )
    return NoteMap(
        ids=[item.id for item in items],
        labels=[item.label for item in items],
        coordinates=coordinates,
        clusters=clusters,
        source_id=source_id,
    )
