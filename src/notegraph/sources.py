"""Vector sources: where the per-note vectors fed to reduction come from.

A source yields one :class:`VectorWithMetadata` per note. Link-graph sources
use adjacency or Laplacian rows; embedding sources call an OpenAI or local
sentence-transformers model.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

import numpy as np

from notegraph.graph import LinkLike, LinkMatrixBuilder

logger = logging.getLogger(__name__)


@dataclass
class VectorWithMetadata:
    """A single vector point and the note it describes."""

    id: str  # note path or other unique id
    label: str  # display name
    vector: list[float]
    source_id: str
    metadata: dict[str, str] = field(default_factory=dict)

    @property
    def dimensionality(self) -> int:
        return len(self.vector)

    def add_metadata(self, key: str, value: str) -> None:
        self.metadata[key] = value


class VectorSource(ABC):
    """Base class for anything that produces one vector per note."""

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Unique identifier, e.g. ``"forward-links"``."""

    @property
    @abstractmethod
    def dimensionality(self) -> int:
        """Length of every vector this source yields."""

    @abstractmethod
    def fetch_vectors(self) -> list[VectorWithMetadata]:
        """Produce the vectors."""


class LinkGraphSource(VectorSource):
    """Adjacency (or Laplacian) rows of the note link graph.

    Args:
        note_paths: Note ids in index order.
        links: ``NoteLink`` objects or ``(from_id, to_id)`` pairs.
        laplacian: Use ``D - A`` rows instead of adjacency rows.
        labels: Optional display names aligned with ``note_paths``; a repeated
            path keeps the label of its first occurrence.
    """

    def __init__(
        self,
        note_paths: Sequence[str],
        links: Iterable[LinkLike],
        laplacian: bool = False,
        labels: Sequence[str] | None = None,
    ):
        self.builder = LinkMatrixBuilder(note_paths)
        self.links = list(links)
        self.laplacian = laplacian
        self.labels: dict[str, str] = {}
        if labels is not None:
            if len(labels) != len(note_paths):
                raise ValueError(f"Got {len(note_paths)} note paths but {len(labels)} labels")
            for path, label in zip(note_paths, labels):
                self.labels.setdefault(path, label)

    @property
    def source_id(self) -> str:
        return "laplacian" if self.laplacian else "forward-links"

    @property
    def dimensionality(self) -> int:
        return self.builder.num_notes()

    def fetch_vectors(self) -> list[VectorWithMetadata]:
        if self.laplacian:
            matrix = self.builder.build_laplacian(self.links)
        else:
            matrix = self.builder.build(self.links)
        rows = self.builder.matrix_to_vectors(matrix)

        paths = self.builder.note_paths
        return [
            VectorWithMetadata(
                id=path, label=self.labels.get(path, path), vector=row, source_id=self.source_id
            )
            for path, row in zip(paths, rows)
        ]


class Embedder(ABC):
    """Base class for embedding backends."""

    model: str

    @abstractmethod
    def embed(self, texts: list[str]) -> np.ndarray:
        """Return an (N, D) array of embeddings for the given texts."""


class OpenAIEmbedder(Embedder):
    """Embed via OpenAI's API (requires OPENAI_API_KEY env var)."""

    def __init__(self, model: str = "text-embedding-3-small", batch_size: int = 128):
        from openai import OpenAI

        self.client = OpenAI()
        self.model = model
        self.batch_size = batch_size

    def embed(self, texts: list[str]) -> np.ndarray:
        rows: list[list[float]] = []
        for start in range(0, len(texts), self.batch_size):
            batch = texts[start : start + self.batch_size]
            logger.debug("Embedding batch of %d texts with %s", len(batch), self.model)
            response = self.client.embeddings.create(input=batch, model=self.model)
            rows.extend(item.embedding for item in response.data)
        return np.array(rows, dtype=np.float64)


class LocalEmbedder(Embedder):
    """Embed locally using sentence-transformers (no API key needed)."""

    def __init__(self, model: str = "all-MiniLM-L6-v2"):
        from sentence_transformers import SentenceTransformer

        self.model = model
        self._model = SentenceTransformer(model)

    def embed(self, texts: list[str]) -> np.ndarray:
        return self._model.encode(texts, show_progress_bar=False, convert_to_numpy=True)


def get_embedder(backend: str = "openai", **kwargs) -> Embedder:
    """Factory for embedder backends.

    Args:
        backend: "openai" or "local"
    """
    if backend == "openai":
        return OpenAIEmbedder(**kwargs)
    elif backend == "local":
        return LocalEmbedder(**kwargs)
    else:
        raise ValueError(f"Unknown embedding backend: {backend!r}")


class EmbeddingSource(VectorSource):
    """Text embeddings of each note.

    Embeddings are computed once, on the first :meth:`fetch_vectors` (or
    :attr:`dimensionality`) access.
    """

    def __init__(
        self,
        ids: Sequence[str],
        texts: Sequence[str],
        embedder: Embedder,
        labels: Sequence[str] | None = None,
    ):
        if len(ids) != len(texts):
            raise ValueError(f"Got {len(ids)} ids but {len(texts)} texts")
        self.ids = list(ids)
        self.texts = list(texts)
        self.labels = list(labels) if labels is not None else list(ids)
        self.embedder = embedder
        self._embeddings: np.ndarray | None = None

    @property
    def source_id(self) -> str:
        return f"embedding:{self.embedder.model}"

    def _compute(self) -> np.ndarray:
        if self._embeddings is None:
            if not self.texts:
                self._embeddings = np.zeros((0, 0), dtype=np.float64)
            else:
                embeddings = np.asarray(self.embedder.embed(self.texts), dtype=np.float64)
                if embeddings.ndim != 2 or embeddings.shape[0] != len(self.ids):
                    raise ValueError(
                        f"Embedder {self.embedder.model!r} returned shape {embeddings.shape} "
                        f"for {len(self.ids)} texts"
                    )
                self._embeddings = embeddings
        return self._embeddings

    @property
    def dimensionality(self) -> int:
        embeddings = self._compute()
        return int(embeddings.shape[1]) if embeddings.ndim == 2 else 0

    def fetch_vectors(self) -> list[VectorWithMetadata]:
        embeddings = self._compute()
        return [
            VectorWithMetadata(id=i, label=label, vector=row.tolist(), source_id=self.source_id)
            for i, label, row in zip(self.ids, self.labels, embeddings)
        ]
