"""
Segmental K-Means learning of HMM parameters.

Observations of all sequences are first partitioned into k clusters; cluster
membership is used as a state label. Each iteration:
1. estimates Pi, A and the state distributions from the labels
2. decodes every sequence with the estimated HMM (Viterbi)
3. moves every observation whose decoded state differs from its cluster

Iteration stops at a fixed point: a pass that moves no observation.
"""

import warnings
from typing import Callable, Optional, Sequence

import numpy as np
from tqdm import tqdm

from seghmm.core.hmm import Hmm, viterbi
from seghmm.core.opdf import OpdfFactory
from seghmm.learn.clusters import ClusterStore, Initializer


Decoder = Callable[[Sequence, Hmm], np.ndarray]


# =============================================================================
# Parameter estimation from cluster labels
# =============================================================================

def estimate_pi(hmm: Hmm, clusters: ClusterStore, sequences: Sequence[Sequence]):
    """Pi[i] = fraction of sequences whose first observation is in cluster i."""
    counts = np.zeros(hmm.n_states)
    for sequence in sequences:
        counts[clusters.cluster_of(sequence[0])] += 1

    for i in range(hmm.n_states):
        hmm.set_pi(i, counts[i] / len(sequences))


def estimate_transitions(hmm: Hmm, clusters: ClusterStore, sequences: Sequence[Sequence]):
    """
    A[i, j] = fraction of transitions leaving cluster i that enter cluster j.

    A state never left (no outgoing transition in the corpus) gets a uniform
    row.
    """
    n = hmm.n_states
    counts = np.zeros((n, n))

    for sequence in sequences:
        if len(sequence) < 2:
            continue
        labels = [clusters.cluster_of(o) for o in sequence]
        for first, second in zip(labels[:-1], labels[1:]):
            counts[first, second] += 1

    for i in range(n):
        total = counts[i].sum()
        for j in range(n):
            if total == 0:
                hmm.set_aij(i, j, 1.0 / n)  # Arbitrarily
            else:
                hmm.set_aij(i, j, counts[i, j] / total)


def estimate_opdfs(hmm: Hmm, clusters: ClusterStore, opdf_factory: OpdfFactory):
    """Fit each state's distribution to its cluster; empty clusters get a default one."""
    for i in range(hmm.n_states):
        members = clusters.members_of(i)
        if len(members) == 0:
            hmm.set_opdf(i, opdf_factory.generate())
        else:
            hmm.get_opdf(i).fit(members)


def estimate_hmm(n_states: int, clusters: ClusterStore, sequences: Sequence[Sequence],
                 opdf_factory: OpdfFactory) -> Hmm:
    """Build a new HMM from the current cluster labels."""
    hmm = Hmm(n_states, opdf_factory)
    estimate_pi(hmm, clusters, sequences)
    estimate_transitions(hmm, clusters, sequences)
    estimate_opdfs(hmm, clusters, opdf_factory)
    return hmm


# =============================================================================
# Learner
# =============================================================================

class TrainingMonitor:
    """Tracks training progress (observations moved per iteration)."""
    def __init__(self):
        self.history = []


class KMeansLearner:
    """
    Segmental K-Means HMM learner.

    Args:
        n_states: Number of states of the learned HMM
        opdf_factory: Builds the state distributions
        sequences: Observation sequences (each non-empty)
        initializer: Builds the first partition (default: K-Means)
        decoder: (sequence, hmm) -> state path (default: Viterbi)
        max_iterations: Upper bound on iterations run by learn().
            None (default) iterates until a fixed point.
        verbose: Show a progress bar while learning

    Example:
        learner = KMeansLearner(2, OpdfGaussianFactory(), sequences)
        hmm = learner.learn()
    """

    def __init__(self, n_states: int, opdf_factory: OpdfFactory,
                 sequences: Sequence[Sequence],
                 initializer: Optional[Initializer] = None,
                 decoder: Decoder = viterbi,
                 max_iterations: Optional[int] = None,
                 verbose: bool = False):
        sequences = [list(s) for s in sequences]
        if not sequences:
            raise ValueError("At least one observation sequence is required")
        if any(len(s) == 0 for s in sequences):
            raise ValueError("Observation sequences must not be empty")
        if max_iterations is not None and max_iterations < 1:
            raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")

        # Each object holds a single cluster assignment
        observations = [o for s in sequences for o in s]
        if len({id(o) for o in observations}) != len(observations):
            raise ValueError(
                "The same observation object appears more than once in the "
                "sequences; use a distinct object per position"
            )

        self.n_states = n_states
        self.opdf_factory = opdf_factory
        self.sequences = sequences
        self.decoder = decoder
        self.max_iterations = max_iterations
        self.verbose = verbose

        self.clusters = ClusterStore(n_states, observations, initializer)

        self.n_iterations = 0
        self.last_migrations: Optional[int] = None
        self.monitor_ = TrainingMonitor()
        self._terminated = False

    def is_terminated(self) -> bool:
        """True once an iteration moved no observation."""
        return self._terminated

    def iterate(self) -> Hmm:
        """
        One K-Means iteration: estimate a new HMM from the current clusters,
        then realign the clusters with it.

        Returns:
            The HMM estimated at the start of this iteration
        """
        hmm = estimate_hmm(self.n_states, self.clusters, self.sequences, self.opdf_factory)
        self._terminated = self._optimize_clusters(hmm)
        self.n_iterations += 1
        return hmm

    def learn(self) -> Hmm:
        """
        Iterate until a fixed point (or max_iterations) is reached.

        Returns:
            The last HMM estimated
        """
        pbar = tqdm(desc="K-Means", unit="iter", disable=not self.verbose, leave=False)
        n_run = 0
        try:
            while True:
                hmm = self.iterate()
                n_run += 1
                pbar.update(1)
                pbar.set_postfix({'migrations': self.last_migrations})

                if self.is_terminated():
                    break
                if self.max_iterations is not None and n_run >= self.max_iterations:
                    warnings.warn(
                        f"K-Means did not reach a fixed point in {self.max_iterations} "
                        f"iterations ({self.last_migrations} observations moved in the "
                        "last one)",
                        RuntimeWarning,
                    )
                    break
        finally:
            pbar.close()

        return hmm

    def _optimize_clusters(self, hmm: Hmm) -> bool:
        """Move observations to their decoded state. Returns True if nothing moved."""
        migrations = 0

        for sequence in self.sequences:
            states = self.decoder(sequence, hmm)
            if len(states) != len(sequence):
                raise ValueError(
                    f"Decoder returned {len(states)} states for a sequence of {len(sequence)}"
                )

            for o, state in zip(sequence, states):
                current = self.clusters.cluster_of(o)
                if current != state:
                    self.clusters.migrate(o, current, int(state))
                    migrations += 1

        self.last_migrations = migrations
        self.monitor_.history.append(migrations)
        return migrations == 0
