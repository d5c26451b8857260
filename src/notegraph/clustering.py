"""Deterministic k-means clustering.

Seeding is a farthest-point variant of k-means++: the first centroid is the
first input vector and each further centroid is the point farthest from its
nearest chosen centroid. No randomness is involved, so identical input always
yields identical labels.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from notegraph.config import DEFAULT_CONFIG, NumericConfig
from notegraph.errors import InsufficientData
from notegraph.vectors import Vector, as_matrix, pairwise_distances

logger = logging.getLogger(__name__)


@dataclass
class ClusteringResult:
    """Result of a single k-means run."""

    labels: list[int]
    centroids: list[list[float]]
    n_iter: int
    converged: bool
    inertia: float  # sum of squared distances to assigned centroids


def _farthest_point_init(X: np.ndarray, k: int) -> np.ndarray:
    """Return (k, d) initial centroids; ties go to the earliest point."""
    centroids = np.empty((k, X.shape[1]), dtype=np.float64)
    centroids[0] = X[0]
    min_dist = pairwise_distances(X, centroids[:1])[:, 0]
    for j in range(1, k):
        idx = int(np.argmax(min_dist))
        centroids[j] = X[idx]
        min_dist = np.minimum(min_dist, pairwise_distances(X, centroids[j : j + 1])[:, 0])
    return centroids


def _update_centroids(X: np.ndarray, labels: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """Mean of each cluster's members; empty clusters keep their centroid."""
    updated = centroids.copy()
    for j in range(centroids.shape[0]):
        members = X[labels == j]
        if len(members):
            updated[j] = members.mean(axis=0)
    return updated


def kmeans(
    vectors: Sequence[Vector], k: int, config: NumericConfig | None = None
) -> ClusteringResult:
    """Partition *vectors* into *k* groups with Lloyd iterations.

    Each iteration assigns every point to its nearest centroid (lowest index
    wins ties), stops when no assignment changed, and otherwise moves each
    centroid to the mean of its members. Labels start at all zeros.

    Raises:
        InsufficientData: for empty input, ``k == 0`` or ``k > len(vectors)``.
        InvalidVectorDimensions: if the vectors have inconsistent lengths.
    """
    config = config or DEFAULT_CONFIG
    n = len(vectors)
    if n == 0 or k == 0:
        raise InsufficientData(required=1, provided=0)
    if k < 0:
        raise ValueError(f"k must be >= 1, got {k}")
    if k > n:
        raise InsufficientData(required=k, provided=n)

    X = as_matrix(vectors)
    centroids = _farthest_point_init(X, k)
    labels = np.zeros(n, dtype=np.int64)

    converged = False
    n_iter = 0
    for _ in range(config.max_iterations):
        n_iter += 1
        new_labels = np.argmin(pairwise_distances(X, centroids), axis=1)
        if np.array_equal(new_labels, labels):
            converged = True
            break
        labels = new_labels
        centroids = _update_centroids(X, labels, centroids)

    diffs = X - centroids[labels]
    inertia = float(np.sum(diffs * diffs))
    logger.debug(
        "k-means k=%d on %d points: %d iterations, converged=%s, inertia=%.6g",
        k, n, n_iter, converged, inertia,
    )
    return ClusteringResult(
        labels=labels.astype(int).tolist(),
        centroids=centroids.tolist(),
        n_iter=n_iter,
        converged=converged,
        inertia=inertia,
    )


def cluster(
    vectors: Sequence[Vector], k: int, config: NumericConfig | None = None
) -> list[int]:
    """Return one cluster index in ``0..k-1`` per input vector, in input order."""
    return kmeans(vectors, k, config=config).labels
