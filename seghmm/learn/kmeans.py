"""
Centroid-based K-Means partitioning (Lloyd's algorithm).

Works on any observation implementing CentroidFactory: the observation type
decides what a centroid and a distance are.

Initialization is deterministic: centroid i starts on observation
``i * n // k`` of the input order, so results are reproducible for a given
corpus.
"""

from typing import List, Optional, Sequence

from seghmm.core.observations import CentroidFactory


class KMeansCalculator:
    """
    Partition observations into k clusters.

    Args:
        k: Number of clusters
        observations: Observations implementing CentroidFactory
        max_iter: Maximum number of assign/update rounds (None = until stable)

    Attributes:
        n_iter_: Number of assignment rounds performed
        labels_: Cluster index of each observation, in input order
    """

    def __init__(self, k: int, observations: Sequence[CentroidFactory],
                 max_iter: Optional[int] = None):
        observations = list(observations)
        if k < 1:
            raise ValueError(f"Number of clusters must be at least 1, got {k}")
        if k > len(observations):
            raise ValueError(
                f"Cannot build {k} clusters from {len(observations)} observations"
            )
        if max_iter is not None and max_iter < 1:
            raise ValueError(f"max_iter must be at least 1, got {max_iter}")
        for o in observations:
            if not isinstance(o, CentroidFactory):
                raise TypeError(
                    f"{type(o).__name__} does not implement CentroidFactory; "
                    "K-Means needs observations that can produce a centroid"
                )

        self.k = k
        self.observations = observations
        self.max_iter = max_iter
        self.n_iter_ = 0

        n = len(observations)
        self.centroids = [observations[i * n // k].factor() for i in range(k)]
        self.labels_: List[int] = [-1] * n
        self._run()

    def _closest(self, observation) -> int:
        # Ties go to the lowest index
        distances = [c.distance(observation) for c in self.centroids]
        return distances.index(min(distances))

    def _run(self):
        while self.max_iter is None or self.n_iter_ < self.max_iter:
            self.n_iter_ += 1
            labels = [self._closest(o) for o in self.observations]
            if labels == self.labels_:
                break
            self.labels_ = labels

            for i, centroid in enumerate(self.centroids):
                members = self.cluster(i)
                # An empty cluster keeps its previous centroid
                if members:
                    centroid.reevaluate(members)

    def cluster(self, i: int) -> list:
        """Members of cluster i, in input order."""
        return [o for o, label in zip(self.observations, self.labels_) if label == i]

    def clusters(self) -> List[list]:
        return [self.cluster(i) for i in range(self.k)]


def kmeans_partition(k: int, observations: Sequence[CentroidFactory]) -> List[list]:
    """Default initializer of the K-Means HMM learner."""
    return KMeansCalculator(k, observations).clusters()
