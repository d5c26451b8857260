"""Tests for vector normalization and distances."""

import math

import numpy as np
import pytest

from notegraph.config import NumericConfig
from notegraph.errors import InvalidVectorDimensions, ZeroNormVector
from notegraph.vectors import (
    as_matrix,
    euclidean_distance,
    normalize,
    pairwise_distances,
)


def test_normalize():
    result = normalize([[3.0, 4.0], [1.0, 0.0]])
    assert len(result) == 2
    assert result[0][0] == pytest.approx(0.6, abs=1e-10)
    assert result[0][1] == pytest.approx(0.8, abs=1e-10)
    assert result[1] == pytest.approx([1.0, 0.0], abs=1e-10)


def test_normalize_unit_norm():
    rng = np.random.default_rng(7)
    vectors = rng.standard_normal((10, 6)) * 50
    for vec in normalize(vectors.tolist()):
        assert np.linalg.norm(vec) == pytest.approx(1.0, abs=1e-12)


def test_normalize_zero_vector():
    with pytest.raises(ZeroNormVector) as exc_info:
        normalize([[1.0, 1.0], [0.0, 0.0]])
    assert exc_info.value.vector_index == 1


def test_normalize_epsilon_is_configurable():
    tiny = [[1e-6, 0.0]]
    assert normalize(tiny)[0] == pytest.approx([1.0, 0.0])
    with pytest.raises(ZeroNormVector):
        normalize(tiny, config=NumericConfig(zero_norm_epsilon=1e-3))


def test_euclidean_distance():
    dist = euclidean_distance([1.0, 2.0, 3.0], [4.0, 5.0, 6.0])
    assert abs(dist - 5.196152422706632) < 1e-10
    assert dist == pytest.approx(math.sqrt(27))


def test_euclidean_distance_properties():
    a, b = [0.5, -2.0, 3.0], [1.0, 1.0, -1.0]
    assert euclidean_distance(a, b) == euclidean_distance(b, a)
    assert euclidean_distance(a, b) > 0
    assert euclidean_distance(a, a) == 0.0


def test_euclidean_distance_mismatched():
    with pytest.raises(InvalidVectorDimensions) as exc_info:
        euclidean_distance([1.0, 2.0, 3.0], [1.0, 2.0])
    assert exc_info.value.expected == 3
    assert exc_info.value.got == 2


def test_as_matrix_reports_first_ragged_vector():
    with pytest.raises(InvalidVectorDimensions) as exc_info:
        as_matrix([[1.0, 2.0], [3.0, 4.0], [5.0], [6.0, 7.0, 8.0]])
    err = exc_info.value
    assert (err.expected, err.got, err.vector_index) == (2, 1, 2)


def test_as_matrix_shape():
    assert as_matrix([[1, 2, 3], [4, 5, 6]]).shape == (2, 3)
    assert as_matrix([]).shape == (0, 0)


def test_pairwise_distances_matches_scalar():
    points = np.array([[0.0, 0.0], [3.0, 4.0], [1.0, 1.0]])
    centers = np.array([[0.0, 0.0], [3.0, 0.0]])
    dists = pairwise_distances(points, centers)
    assert dists.shape == (3, 2)
    for i in range(3):
        for j in range(2):
            assert dists[i, j] == pytest.approx(euclidean_distance(points[i], centers[j]))



def test_normalize_rejects_ragged_vectors():
    with pytest.raises(InvalidVectorDimensions) as exc_info:
        normalize([[3.0, 4.0], [1.0, 0.0, 0.0]])
    assert exc_info.value.vector_index == 1
