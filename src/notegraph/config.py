"""Numeric tolerances and limits shared by the vector operations.

Defaults can be overridden per process through environment variables
(typically from a .env file loaded by the CLI):

    NOTEGRAPH_ZERO_NORM_EPSILON   norm below which a vector counts as zero
    NOTEGRAPH_SCALE_FLOOR         minimum column std-dev used when scaling
    NOTEGRAPH_MAX_ITERATIONS      k-means Lloyd iteration cap
"""

from __future__ import annotations

import os
from dataclasses import dataclass

ENV_PREFIX = "NOTEGRAPH_"


@dataclass(frozen=True)
class NumericConfig:
    """Constants for normalization, SVD scaling and k-means."""

    zero_norm_epsilon: float = 1e-10
    scale_floor: float = 1e-10
    max_iterations: int = 100

    def __post_init__(self):
        if not self.zero_norm_epsilon > 0:
            raise ValueError(
                f"zero_norm_epsilon must be positive, got {self.zero_norm_epsilon}"
            )
        if not self.scale_floor > 0:
            raise ValueError(f"scale_floor must be positive, got {self.scale_floor}")
        if self.max_iterations < 1:
            raise ValueError(
                f"max_iterations must be >= 1, got {self.max_iterations}"
            )

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> NumericConfig:
        """Build a config from ``NOTEGRAPH_*`` variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        defaults = cls()

        def _get(name: str, cast, default):
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is None or raw.strip() == "":
                return default
            try:
                return cast(raw)
            except ValueError as e:
                raise ValueError(
                    f"Invalid value for {ENV_PREFIX + name.upper()}: {raw!r}"
                ) from e

        return cls(
            zero_norm_epsilon=_get("zero_norm_epsilon", float, defaults.zero_norm_epsilon),
            scale_floor=_get("scale_floor", float, defaults.scale_floor),
            max_iterations=_get("max_iterations", int, defaults.max_iterations),
        )


DEFAULT_CONFIG = NumericConfig()
