"""
Shared pytest fixtures for SegHMM tests.
"""
import pytest
import numpy as np

from seghmm.core.observations import ObservationReal, ObservationInteger, ObservationVector
from seghmm.core.opdf import OpdfGaussianFactory


@pytest.fixture
def gaussian_factory():
    return OpdfGaussianFactory()


@pytest.fixture
def two_regime_sequences():
    """
    Two sequences of 4 real observations, k=2.

    K-Means groups 1.2 with the zeros (centroids 0.24 and 3.0). The first
    Viterbi pass moves it to the wide cluster {2.0, 5.0, 2.0}; the second
    pass moves nothing.
    """
    seq1 = [ObservationReal(v) for v in (0.0, 0.0, 0.0, 0.0)]
    seq2 = [ObservationReal(v) for v in (2.0, 1.2, 5.0, 2.0)]
    return [seq1, seq2]


@pytest.fixture
def separated_real_sequences():
    """Three sequences alternating between regimes around 0 and around 10."""
    np.random.seed(7)
    sequences = []
    for _ in range(3):
        values = np.concatenate([
            np.random.normal(0.0, 0.5, 6),
            np.random.normal(10.0, 0.5, 6),
            np.random.normal(0.0, 0.5, 6),
        ])
        sequences.append([ObservationReal(v) for v in values])
    return sequences


@pytest.fixture
def vector_observations():
    """Random 2-D observations (not sequences)."""
    np.random.seed(42)
    points = np.vstack([
        np.random.normal([0, 0], 0.3, size=(10, 2)),
        np.random.normal([5, 5], 0.3, size=(10, 2)),
    ])
    return [ObservationVector(p) for p in points]


@pytest.fixture
def integer_sequences():
    """Symbol sequences over {0, 1, 2, 3}."""
    return [
        [ObservationInteger(v) for v in (0, 0, 1, 0, 3, 3, 2, 3)],
        [ObservationInteger(v) for v in (3, 2, 3, 3, 0, 1, 0, 0)],
    ]
