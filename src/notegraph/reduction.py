"""Reduce high-dimensional vectors to a few coordinates for visualization.

Reducers share one capability, ``reduce(vectors, target_dims)``, so another
strategy can be dropped in behind :class:`DimensionalityReducer` without
touching callers. The only strategy today is PCA via a thin SVD.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np

from notegraph.config import DEFAULT_CONFIG, NumericConfig
from notegraph.errors import DimensionalityReductionError, InsufficientData
from notegraph.vectors import Vector, as_matrix

logger = logging.getLogger(__name__)


class DimensionalityReducer(ABC):
    """Base class for reduction strategies."""

    @property
    @abstractmethod
    def method_name(self) -> str:
        """Short name reported in errors, e.g. ``"SVD"``."""

    @abstractmethod
    def reduce(self, vectors: Sequence[Vector], target_dims: int) -> list[list[float]]:
        """Return one ``target_dims``-long vector per input vector."""

    def _validate(self, vectors: Sequence[Vector], target_dims: int) -> np.ndarray:
        if len(vectors) == 0:
            raise InsufficientData(required=1, provided=0)
        X = as_matrix(vectors)
        dim = X.shape[1]
        if target_dims < 0:
            raise DimensionalityReductionError(
                self.method_name, f"Target dimensions ({target_dims}) must be non-negative"
            )
        if target_dims > dim:
            raise DimensionalityReductionError(
                self.method_name,
                f"Target dimensions ({target_dims}) cannot exceed input dimensions ({dim})",
            )
        if not np.all(np.isfinite(X)):
            raise DimensionalityReductionError(
                self.method_name, "Input contains NaN or infinite values"
            )
        return X


class SVDReducer(DimensionalityReducer):
    """Project onto the top principal directions using ``U * sigma``.

    Args:
        center: Subtract each column's mean first (PCA). Default True.
        scale: Divide each column by its standard deviation, floored at
            ``config.scale_floor``. Default False.
        config: Numeric constants.
    """

    def __init__(
        self,
        center: bool = True,
        scale: bool = False,
        config: NumericConfig | None = None,
    ):
        self.center = center
        self.scale = scale
        self.config = config or DEFAULT_CONFIG

    @property
    def method_name(self) -> str:
        return "SVD"

    def _prepare(self, X: np.ndarray) -> np.ndarray:
        if self.center:
            X = X - X.mean(axis=0, keepdims=True)
        if self.scale:
            # Root-mean-square per column: the std-dev once the data is centered.
            rms = np.sqrt(np.mean(X * X, axis=0, keepdims=True))
            X = X / np.maximum(rms, self.config.scale_floor)
        return X

    def reduce(self, vectors: Sequence[Vector], target_dims: int) -> list[list[float]]:
        X = self._validate(vectors, target_dims)
        n = X.shape[0]
        Xp = self._prepare(X)

        try:
            U, S, _ = np.linalg.svd(Xp, full_matrices=False)
        except np.linalg.LinAlgError as e:
            raise DimensionalityReductionError(self.method_name, f"SVD did not converge: {e}") from e

        # Thin SVD has min(n, dim) components; directions past that have zero
        # singular value and project to 0.
        kk = min(target_dims, U.shape[1])
        Z = np.zeros((n, target_dims), dtype=np.float64)
        Z[:, :kk] = U[:, :kk] * S[:kk]

        logger.debug(
            "SVD reduced %dx%d to %d dims (top singular values: %s)",
            n, X.shape[1], target_dims, S[:kk].round(6).tolist(),
        )
        return Z.tolist()


def get_reducer(method: str = "svd", **kwargs) -> DimensionalityReducer:
    """Factory for reduction strategies.

    Args:
        method: "svd"
    """
    if method.lower() == "svd":
        return SVDReducer(**kwargs)
    else:
        raise ValueError(f"Unknown reduction method: {method!r}")
