"""Build sparse adjacency and Laplacian matrices from directed note links."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

import networkx as nx
import numpy as np
from scipy.sparse import coo_matrix, csr_matrix, diags, spmatrix

from notegraph.errors import InvalidLinkIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NoteLink:
    """One directed reference from note ``from_id`` to note ``to_id``."""

    from_id: int
    to_id: int

    @classmethod
    def from_dict(cls, data: Mapping[str, int]) -> NoteLink:
        """Accept both ``from_id``/``to_id`` and the host's ``fromId``/``toId`` keys."""
        if "fromId" in data or "toId" in data:
            return cls(int(data["fromId"]), int(data["toId"]))
        return cls(int(data["from_id"]), int(data["to_id"]))


LinkLike = NoteLink | tuple[int, int]


def _as_pair(link: LinkLike, max_index: int) -> tuple[int, int]:
    """Unpack a link, rejecting indices that are not whole numbers."""
    if isinstance(link, NoteLink):
        from_id, to_id = link.from_id, link.to_id
    else:
        from_id, to_id = link
    if int(from_id) != from_id or int(to_id) != to_id:
        raise InvalidLinkIndex(from_id, to_id, max_index)
    return int(from_id), int(to_id)


class LinkMatrixBuilder:
    """Turns note links into sparse graph matrices over a fixed note index.

    Indices are assigned to distinct paths in first-seen order. A repeated
    path keeps the index of its first occurrence and does not add a row.
    The builder is immutable once constructed and may be shared freely.
    """

    def __init__(self, note_paths: Iterable[str]):
        index: dict[str, int] = {}
        for path in note_paths:
            if path in index:
                logger.debug("Duplicate note path %r keeps index %d", path, index[path])
                continue
            index[path] = len(index)
        self._index = index
        self._paths = tuple(index)

    def num_notes(self) -> int:
        return len(self._paths)

    @property
    def note_paths(self) -> tuple[str, ...]:
        """Paths in index order."""
        return self._paths

    def get_note_index(self, path: str) -> int | None:
        return self._index.get(path)

    def links_from_paths(self, pairs: Iterable[tuple[str, str]]) -> list[NoteLink]:
        """Map ``(from_path, to_path)`` pairs to index links.

        An unknown path is reported as ``InvalidLinkIndex`` with ``-1`` in its
        position.
        """
        links = []
        for from_path, to_path in pairs:
            from_id = self._index.get(from_path, -1)
            to_id = self._index.get(to_path, -1)
            if from_id < 0 or to_id < 0:
                raise InvalidLinkIndex(from_id, to_id, self.num_notes() - 1)
            links.append(NoteLink(from_id, to_id))
        return links

    def build(self, links: Iterable[LinkLike]) -> csr_matrix:
        """Build the weighted adjacency matrix.

        Cell ``(i, j)`` holds the number of links from ``i`` to ``j``;
        duplicates and self-loops are counted. The first out-of-range link
        aborts the build.
        """
        n = self.num_notes()
        counts: Counter[tuple[int, int]] = Counter()
        for link in links:
            from_id, to_id = _as_pair(link, n - 1)
            if not (0 <= from_id < n and 0 <= to_id < n):
                raise InvalidLinkIndex(from_id, to_id, n - 1)
            counts[(from_id, to_id)] += 1

        rows = np.fromiter((i for i, _ in counts), dtype=np.int64, count=len(counts))
        cols = np.fromiter((j for _, j in counts), dtype=np.int64, count=len(counts))
        data = np.fromiter(counts.values(), dtype=np.float64, count=len(counts))
        matrix = coo_matrix((data, (rows, cols)), shape=(n, n)).tocsr()

        logger.debug("Adjacency matrix %dx%d with %d nonzeros", n, n, matrix.nnz)
        return matrix

    def build_laplacian(self, links: Iterable[LinkLike]) -> csr_matrix:
        """Build ``L = D - A`` where ``D`` holds each note's out-degree."""
        adjacency = self.build(links)
        n = self.num_notes()
        if n == 0:
            return adjacency

        out_degree = np.asarray(adjacency.sum(axis=1)).ravel()
        degree = diags(out_degree, offsets=0, shape=(n, n), format="csr")
        laplacian = csr_matrix(degree - adjacency)
        laplacian.eliminate_zeros()
        return laplacian

    def matrix_to_vectors(self, matrix: spmatrix) -> list[list[float]]:
        """Materialize each sparse row as a dense, zero-filled list of length ``num_notes``."""
        n = self.num_notes()
        matrix = csr_matrix(matrix)
        if matrix.shape != (n, n):
            raise ValueError(f"Expected a {n}x{n} matrix, got {matrix.shape}")

        vectors: list[list[float]] = []
        for i in range(n):
            start, end = matrix.indptr[i], matrix.indptr[i + 1]
            row = np.zeros(n, dtype=np.float64)
            row[matrix.indices[start:end]] = matrix.data[start:end]
            vectors.append(row.tolist())
        return vectors


def to_networkx(matrix: spmatrix, note_paths: Sequence[str] | None = None) -> nx.DiGraph:
    """Expose a graph matrix as a weighted ``DiGraph`` (edge ``weight`` = cell value).

    Nodes are the integer note indices; when ``note_paths`` is given each node
    gets a ``path`` attribute.
    """
    G = nx.from_scipy_sparse_array(csr_matrix(matrix), create_using=nx.DiGraph)
    if note_paths is not None:
        nx.set_node_attributes(G, dict(enumerate(note_paths)), name="path")
    return G
