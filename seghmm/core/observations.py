"""
SegHMM observation types

Observations carry two independent capabilities:
1. Observation: the value an HMM state emits (consumed by distributions)
2. CentroidFactory: produces a Centroid, used by K-Means partitioning

Concrete types (real, integer, vector) implement both.

Observations are compared by identity. Two observations holding the same
value are still distinct members of a cluster.
"""

from abc import ABC, abstractmethod
from typing import Iterable

import numpy as np


class Observation(ABC):
    """An observation emitted by an HMM state."""

    @abstractmethod
    def as_array(self) -> np.ndarray:
        """Return the observed value as a numpy array (0-d or 1-d)."""


class Centroid(ABC):
    """Representative point of a cluster of observations."""

    @abstractmethod
    def reevaluate(self, observations: Iterable['CentroidFactory']) -> None:
        """Move the centroid to the center of the given observations."""

    @abstractmethod
    def distance(self, observation: 'CentroidFactory') -> float:
        """Distance between this centroid and an observation."""


class CentroidFactory(ABC):
    """Capability of producing a centroid located on the observation."""

    @abstractmethod
    def factor(self) -> Centroid:
        """Return a new centroid initially located on this observation."""


# =============================================================================
# Scalar observations
# =============================================================================

class ScalarCentroid(Centroid):
    """Centroid of real or integer observations (mean, absolute distance)."""

    def __init__(self, value: float):
        self.value = float(value)

    def reevaluate(self, observations):
        values = [o.value for o in observations]
        if values:
            self.value = float(np.mean(values))

    def distance(self, observation) -> float:
        return abs(observation.value - self.value)


class ObservationReal(Observation, CentroidFactory):
    """A real-valued observation."""

    def __init__(self, value: float):
        self.value = float(value)

    def as_array(self) -> np.ndarray:
        return np.asarray(self.value)

    def factor(self) -> ScalarCentroid:
        return ScalarCentroid(self.value)

    def __repr__(self):
        return f"ObservationReal({self.value!r})"


class ObservationInteger(Observation, CentroidFactory):
    """An integer observation, typically a symbol index."""

    def __init__(self, value: int):
        self.value = int(value)

    def as_array(self) -> np.ndarray:
        return np.asarray(self.value)

    def factor(self) -> ScalarCentroid:
        return ScalarCentroid(self.value)

    def __repr__(self):
        return f"ObservationInteger({self.value!r})"


# =============================================================================
# Vector observations
# =============================================================================

class VectorCentroid(Centroid):
    """Centroid of vector observations (mean vector, Euclidean distance)."""

    def __init__(self, values: np.ndarray):
        self.values = np.array(values, dtype=float)

    def reevaluate(self, observations):
        vectors = [o.values for o in observations]
        if vectors:
            self.values = np.mean(vectors, axis=0)

    def distance(self, observation) -> float:
        return float(np.linalg.norm(observation.values - self.values))


class ObservationVector(Observation, CentroidFactory):
    """A real vector observation of fixed dimension."""

    def __init__(self, values):
        self.values = np.array(values, dtype=float).ravel()

    @property
    def dimension(self) -> int:
        return len(self.values)

    def as_array(self) -> np.ndarray:
        return self.values

    def factor(self) -> VectorCentroid:
        return VectorCentroid(self.values)

    def __repr__(self):
        return f"ObservationVector({self.values.tolist()!r})"
