"""Segmental K-Means learning: initial partition, cluster store, learner."""

from seghmm.learn.kmeans import KMeansCalculator, kmeans_partition
from seghmm.learn.clusters import ClusterStore
from seghmm.learn.kmeans_learner import (
    KMeansLearner,
    estimate_hmm,
    estimate_pi,
    estimate_transitions,
    estimate_opdfs,
)

__all__ = [
    'KMeansCalculator',
    'kmeans_partition',
    'ClusterStore',
    'KMeansLearner',
    'estimate_hmm',
    'estimate_pi',
    'estimate_transitions',
    'estimate_opdfs',
]
