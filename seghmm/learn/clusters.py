"""
Cluster membership store of the K-Means HMM learner.

Each registered observation receives an integer handle. Assignments live in a
flat handle-indexed array; the member-sets of each cluster are insertion
ordered mappings from handle to observation.
"""

from types import MappingProxyType
from typing import Callable, List, Optional, Sequence

import numpy as np

from seghmm.core.observations import CentroidFactory
from seghmm.learn.kmeans import kmeans_partition


Initializer = Callable[[int, Sequence], List[list]]


class ClusterStore:
    """
    Exclusive assignment of observations to k clusters.

    Args:
        k: Number of clusters
        observations: Observations to partition; an object listed several
            times is registered once
        initializer: Callable (k, observations) -> k member lists covering
            every observation exactly once. Defaults to K-Means.
    """

    def __init__(self, k: int, observations: Sequence,
                 initializer: Optional[Initializer] = None):
        if k < 1:
            raise ValueError(f"Number of clusters must be at least 1, got {k}")

        self._handles = {}
        self._observations = []
        for o in observations:
            if id(o) not in self._handles:
                self._handles[id(o)] = len(self._observations)
                self._observations.append(o)

        if not self._observations:
            raise ValueError("Cannot build clusters from an empty set of observations")
        for o in self._observations:
            if not isinstance(o, CentroidFactory):
                raise TypeError(
                    f"{type(o).__name__} does not implement CentroidFactory"
                )

        if initializer is None:
            initializer = kmeans_partition
        partition = initializer(k, list(self._observations))
        if len(partition) != k:
            raise ValueError(f"Initializer returned {len(partition)} clusters, expected {k}")

        self._assignments = np.full(len(self._observations), -1, dtype=np.intp)
        self._members = [dict() for _ in range(k)]
        for i, cluster in enumerate(partition):
            for o in cluster:
                h = self._handle(o)
                if self._assignments[h] != -1:
                    raise ValueError(f"Initializer placed {o!r} in more than one cluster")
                self._assignments[h] = i
                self._members[i][h] = o

        if np.any(self._assignments == -1):
            missing = int(np.sum(self._assignments == -1))
            raise ValueError(f"Initializer left {missing} observation(s) unassigned")

    def _handle(self, observation) -> int:
        try:
            return self._handles[id(observation)]
        except KeyError:
            raise KeyError(f"Observation {observation!r} is not registered") from None

    @property
    def n_clusters(self) -> int:
        return len(self._members)

    def __len__(self) -> int:
        return len(self._observations)

    def cluster_of(self, observation) -> int:
        """Current cluster index of a registered observation."""
        return int(self._assignments[self._handle(observation)])

    def members_of(self, index: int):
        """Live, read-only view of the observations in cluster `index`."""
        return MappingProxyType(self._members[index]).values()

    def cluster_sizes(self) -> List[int]:
        return [len(m) for m in self._members]

    def migrate(self, observation, from_index: int, to_index: int):
        """
        Move an observation from one cluster to another.

        The observation is added to the target before it leaves the source,
        so it always belongs to at least one member-set.
        """
        h = self._handle(observation)
        if not (0 <= to_index < self.n_clusters):
            raise IndexError(f"Cluster index {to_index} out of range [0, {self.n_clusters})")
        if self._assignments[h] != from_index:
            raise ValueError(
                f"{observation!r} is in cluster {self._assignments[h]}, not {from_index}"
            )
        if from_index == to_index:
            return

        self._members[to_index][h] = observation
        self._assignments[h] = to_index
        del self._members[from_index][h]
