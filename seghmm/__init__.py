"""
SegHMM - segmental K-Means estimation of Hidden Markov Models
from unlabeled observation sequences.
"""

__version__ = "1.0.0"

from seghmm.core.hmm import Hmm, viterbi
from seghmm.core.model_io import load_model, save_model
from seghmm.learn.kmeans_learner import KMeansLearner
