"""
SegHMM observation probability distributions (Opdf)

Provides:
1. OpdfGaussian: univariate normal over ObservationReal
2. OpdfMultiGaussian: multivariate normal over ObservationVector
3. OpdfInteger: categorical distribution over ObservationInteger

Each distribution fits its parameters in place by maximum likelihood.
Factories build the default distribution used for states without data.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Sequence

import numpy as np
from scipy import stats


# Numerical floors applied after maximum-likelihood fitting
MIN_VARIANCE = 1e-6
COVARIANCE_RIDGE = 1e-6


class Opdf(ABC):
    """Observation probability distribution of one HMM state."""

    kind: str = ''

    @abstractmethod
    def log_probabilities(self, observations: Sequence) -> np.ndarray:
        """Log density (or mass) of each observation, shape (T,)."""

    @abstractmethod
    def fit(self, observations) -> None:
        """Fit parameters to a non-empty collection of observations."""

    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        """Serialize parameters to a JSON-compatible dictionary."""

    def log_probability(self, observation) -> float:
        return float(self.log_probabilities([observation])[0])

    def probability(self, observation) -> float:
        return float(np.exp(self.log_probability(observation)))

    @staticmethod
    def _values(observations) -> np.ndarray:
        """Stack Observation.as_array() of each observation, shape (T,) or (T, d)."""
        return np.array([o.as_array() for o in observations], dtype=float)

    @staticmethod
    def _checked(observations) -> list:
        observations = list(observations)
        if not observations:
            raise ValueError("Cannot fit a distribution to an empty set of observations")
        return observations


class OpdfFactory(ABC):
    """Builds default distributions."""

    @abstractmethod
    def generate(self) -> Opdf:
        """Return a new distribution with default parameters."""


# =============================================================================
# Univariate Gaussian
# =============================================================================

class OpdfGaussian(Opdf):
    """Normal distribution over real observations."""

    kind = 'gaussian'

    def __init__(self, mean: float = 0.0, variance: float = 1.0):
        if variance <= 0:
            raise ValueError(f"Variance must be positive, got {variance}")
        self.mean = float(mean)
        self.variance = float(variance)

    def log_probabilities(self, observations):
        x = self._values(observations)
        return stats.norm.logpdf(x, loc=self.mean, scale=np.sqrt(self.variance))

    def fit(self, observations):
        x = self._values(self._checked(observations))
        self.mean = float(x.mean())
        self.variance = max(float(x.var()), MIN_VARIANCE)

    def to_dict(self):
        return {'type': self.kind, 'mean': self.mean, 'variance': self.variance}

    def __repr__(self):
        return f"OpdfGaussian(mean={self.mean:.4g}, variance={self.variance:.4g})"


class OpdfGaussianFactory(OpdfFactory):
    def generate(self) -> OpdfGaussian:
        return OpdfGaussian()


# =============================================================================
# Multivariate Gaussian
# =============================================================================

class OpdfMultiGaussian(Opdf):
    """
    Multivariate normal distribution over vector observations.

    Defaults to a zero mean and identity covariance of the given dimension.
    """

    kind = 'multi_gaussian'

    def __init__(self, dimension: int, mean=None, covariance=None):
        if dimension < 1:
            raise ValueError(f"Dimension must be at least 1, got {dimension}")
        self.dimension = dimension
        self.mean = np.zeros(dimension) if mean is None else np.array(mean, dtype=float)
        self.covariance = (np.eye(dimension) if covariance is None
                           else np.array(covariance, dtype=float))
        if self.mean.shape != (dimension,) or self.covariance.shape != (dimension, dimension):
            raise ValueError(
                f"Mean and covariance must have shapes ({dimension},) and "
                f"({dimension}, {dimension})"
            )

    def log_probabilities(self, observations):
        x = self._values(observations).reshape(-1, self.dimension)
        logp = stats.multivariate_normal.logpdf(x, mean=self.mean, cov=self.covariance,
                                                allow_singular=True)
        return np.atleast_1d(logp)

    def fit(self, observations):
        x = self._values(self._checked(observations))
        if x.ndim != 2 or x.shape[1] != self.dimension:
            raise ValueError(
                f"Expected observations of dimension {self.dimension}, got shape {x.shape}"
            )
        self.mean = x.mean(axis=0)
        centered = x - self.mean
        self.covariance = centered.T @ centered / len(x) + COVARIANCE_RIDGE * np.eye(self.dimension)

    def to_dict(self):
        return {
            'type': self.kind,
            'dimension': self.dimension,
            'mean': self.mean.tolist(),
            'covariance': self.covariance.tolist(),
        }

    def __repr__(self):
        return f"OpdfMultiGaussian(dimension={self.dimension}, mean={self.mean.tolist()})"


class OpdfMultiGaussianFactory(OpdfFactory):
    """Builds multivariate gaussian distributions of a fixed dimension."""

    def __init__(self, dimension: int):
        self.dimension = dimension

    def generate(self) -> OpdfMultiGaussian:
        return OpdfMultiGaussian(self.dimension)


# =============================================================================
# Categorical over integers
# =============================================================================

class OpdfInteger(Opdf):
    """Categorical distribution over the integers [0, nb_entries)."""

    kind = 'integer'

    def __init__(self, nb_entries: int, probabilities=None):
        if nb_entries < 1:
            raise ValueError(f"Number of entries must be at least 1, got {nb_entries}")
        self.nb_entries = nb_entries
        if probabilities is None:
            self.probabilities = np.full(nb_entries, 1.0 / nb_entries)
        else:
            self.probabilities = np.array(probabilities, dtype=float)
            if self.probabilities.shape != (nb_entries,):
                raise ValueError(f"Expected {nb_entries} probabilities")

    def _indices(self, observations) -> np.ndarray:
        idx = self._values(observations).astype(int)
        if idx.size and (idx.min() < 0 or idx.max() >= self.nb_entries):
            raise ValueError(
                f"Integer observation out of range [0, {self.nb_entries})"
            )
        return idx

    def log_probabilities(self, observations):
        with np.errstate(divide='ignore'):
            return np.log(self.probabilities[self._indices(observations)])

    def fit(self, observations):
        idx = self._indices(self._checked(observations))
        counts = np.bincount(idx, minlength=self.nb_entries).astype(float)
        self.probabilities = counts / counts.sum()

    def to_dict(self):
        return {
            'type': self.kind,
            'nb_entries': self.nb_entries,
            'probabilities': self.probabilities.tolist(),
        }

    def __repr__(self):
        return f"OpdfInteger({np.round(self.probabilities, 4).tolist()})"


class OpdfIntegerFactory(OpdfFactory):
    """Builds uniform categorical distributions."""

    def __init__(self, nb_entries: int):
        self.nb_entries = nb_entries

    def generate(self) -> OpdfInteger:
        return OpdfInteger(self.nb_entries)


def opdf_from_dict(d: Dict[str, Any]) -> Opdf:
    """Deserialize a distribution written by Opdf.to_dict()."""
    kind = d.get('type')
    if kind == OpdfGaussian.kind:
        return OpdfGaussian(d['mean'], d['variance'])
    if kind == OpdfMultiGaussian.kind:
        return OpdfMultiGaussian(d['dimension'], d['mean'], d['covariance'])
    if kind == OpdfInteger.kind:
        return OpdfInteger(d['nb_entries'], d['probabilities'])
    raise ValueError(f"Unknown distribution type: {kind}")


def make_opdf_factory(kind: str, dimension: int = 1, nb_entries: int = 2) -> OpdfFactory:
    """Factory selection by name, as used by the command-line tools."""
    if kind == 'gaussian':
        return OpdfGaussianFactory()
    if kind == 'multi_gaussian':
        return OpdfMultiGaussianFactory(dimension)
    if kind == 'integer':
        return OpdfIntegerFactory(nb_entries)
    raise ValueError(f"Unknown distribution type: {kind}")
