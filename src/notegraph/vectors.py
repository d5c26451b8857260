"""Dense vector helpers: validation, normalization and distances."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from notegraph.config import DEFAULT_CONFIG, NumericConfig
from notegraph.errors import InvalidVectorDimensions, ZeroNormVector

Vector = Sequence[float]


def as_matrix(vectors: Sequence[Vector]) -> np.ndarray:
    """Stack equal-length vectors into an ``(N, dim)`` float64 array.

    The first vector fixes ``dim``; the first vector of any other length
    raises ``InvalidVectorDimensions``. Empty input gives a ``(0, 0)`` array.
    """
    if len(vectors) == 0:
        return np.zeros((0, 0), dtype=np.float64)

    dim = len(vectors[0])
    for i, vec in enumerate(vectors):
        if len(vec) != dim:
            raise InvalidVectorDimensions(expected=dim, got=len(vec), vector_index=i)
    return np.asarray(vectors, dtype=np.float64).reshape(len(vectors), dim)


def normalize(
    vectors: Sequence[Vector], config: NumericConfig | None = None
) -> list[list[float]]:
    """Scale every vector to unit Euclidean norm.

    Raises:
        InvalidVectorDimensions: if the vectors have inconsistent lengths.
        ZeroNormVector: if a vector's norm is below ``config.zero_norm_epsilon``.
    """
    eps = (config or DEFAULT_CONFIG).zero_norm_epsilon
    X = as_matrix(vectors)
    norms = np.linalg.norm(X, axis=1)
    for i, norm in enumerate(norms):
        if norm < eps:
            raise ZeroNormVector(vector_index=i)
    return (X / norms[:, None]).tolist()


def euclidean_distance(a: Vector, b: Vector) -> float:
    """Return ``sqrt(sum((a_i - b_i)^2))``.

    Raises:
        InvalidVectorDimensions: if the lengths differ (``b`` is reported as
            the offending vector).
    """
    if len(a) != len(b):
        raise InvalidVectorDimensions(expected=len(a), got=len(b), vector_index=1)
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    return float(np.sqrt(np.sum(diff * diff)))


def pairwise_distances(points: np.ndarray, centers: np.ndarray) -> np.ndarray:
    """(N, K) Euclidean distances between the rows of *points* and *centers*."""
    if points.shape[1] != centers.shape[1]:
        raise InvalidVectorDimensions(
            expected=points.shape[1], got=centers.shape[1], vector_index=0
        )
    diffs = points[:, None, :] - centers[None, :, :]
    return np.sqrt(np.sum(diffs * diffs, axis=2))

