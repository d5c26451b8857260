"""Tests for the links -> coordinates -> clusters pipeline."""

import pytest

from notegraph.errors import InsufficientData, ZeroNormVector
from notegraph.pipeline import build_note_map
from notegraph.reduction import DimensionalityReducer
from notegraph.sources import LinkGraphSource, VectorWithMetadata


def _two_communities():
    """Notes 0-2 link among themselves, notes 3-5 among themselves."""
    paths = [f"n{i}.md" for i in range(6)]
    links = [
        (0, 1), (1, 2), (2, 0), (0, 2),
        (3, 4), (4, 5), (5, 3), (3, 5),
    ]
    return LinkGraphSource(paths, links)


def test_build_note_map_shapes():
    items = _two_communities().fetch_vectors()
    note_map = build_note_map(items, target_dims=3, num_clusters=2)
    assert note_map.ids == [f"n{i}.md" for i in range(6)]
    assert len(note_map.coordinates) == 6
    assert all(len(c) == 3 for c in note_map.coordinates)
    assert len(note_map.clusters) == 6
    assert set(note_map.clusters) <= {0, 1}
    assert note_map.source_id == "forward-links"


def test_build_note_map_without_clusters():
    items = _two_communities().fetch_vectors()
    note_map = build_note_map(items)
    assert note_map.clusters is None
    assert all(len(c) == 2 for c in note_map.coordinates)


def test_build_note_map_is_deterministic():
    items = _two_communities().fetch_vectors()
    first = build_note_map(items, target_dims=2, num_clusters=3)
    second = build_note_map(items, target_dims=2, num_clusters=3)
    assert first.clusters == second.clusters
    assert first.coordinates == second.coordinates


def test_normalize_first_rejects_sink_notes():
    # n2 has no outgoing links, so its adjacency row is all zero
    items = LinkGraphSource(["n0", "n1", "n2"], [(0, 1), (1, 2)]).fetch_vectors()
    with pytest.raises(ZeroNormVector) as exc_info:
        build_note_map(items, normalize_first=True)
    assert exc_info.value.vector_index == 2


def test_too_many_clusters():
    items = _two_communities().fetch_vectors()
    with pytest.raises(InsufficientData):
        build_note_map(items, num_clusters=7)


def test_empty_items():
    with pytest.raises(InsufficientData):
        build_note_map([], num_clusters=1)


def test_custom_reducer():
    class Identity(DimensionalityReducer):
        method_name = "identity"

        def reduce(self, vectors, target_dims):
            return [list(v)[:target_dims] for v in vectors]

    items = [
        VectorWithMetadata("a", "A", [0.0, 0.0], "manual"),
        VectorWithMetadata("b", "B", [0.0, 1.0], "manual"),
        VectorWithMetadata("c", "C", [9.0, 9.0], "manual"),
    ]
    note_map = build_note_map(items, target_dims=2, num_clusters=2, reducer=Identity())
    assert note_map.coordinates == [[0.0, 0.0], [0.0, 1.0], [9.0, 9.0]]
    assert note_map.clusters == [0, 0, 1]
    assert note_map.labels == ["A", "B", "C"]
