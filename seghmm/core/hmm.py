"""
SegHMM HMM module

Provides:
1. Hmm: an N-state HMM snapshot (start probabilities, transition matrix,
   one observation distribution per state)
2. Viterbi decoding in log space

Model I/O (load/save) lives in seghmm.core.model_io.
"""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np

from seghmm.core.opdf import Opdf, OpdfFactory, opdf_from_dict


def _viterbi(log_startprob: np.ndarray, log_transmat: np.ndarray,
             log_emission: np.ndarray) -> Tuple[np.ndarray, float]:
    """
    Viterbi for an N-state HMM.

    Args:
        log_startprob: (N,) log start probabilities
        log_transmat: (N, N) log transition matrix
        log_emission: (T, N) log emission probability of each observation

    Returns:
        path: Most likely state sequence
        log_prob: Log probability of path

    Ties are resolved toward the lowest state index.
    """
    T, n_states = log_emission.shape
    states = np.arange(n_states)

    delta = log_startprob + log_emission[0]
    backpointer = np.zeros((T, n_states), dtype=np.intp)

    for t in range(1, T):
        # scores[i, j]: best path ending in i at t-1, then i -> j
        scores = delta[:, np.newaxis] + log_transmat
        backpointer[t] = np.argmax(scores, axis=0)
        delta = scores[backpointer[t], states] + log_emission[t]

    path = np.empty(T, dtype=np.intp)
    path[-1] = np.argmax(delta)
    log_prob = float(delta[path[-1]])

    for t in range(T - 2, -1, -1):
        path[t] = backpointer[t + 1, path[t + 1]]

    return path, log_prob


class Hmm:
    """
    HMM with an arbitrary number of states.

    Attributes follow the scikit-learn naming used across the package:
        startprob_: (n_states,) initial state probabilities (Pi)
        transmat_: (n_states, n_states) transition probabilities (A)
        opdfs: one observation distribution per state (B)

    A new Hmm has uniform start and transition probabilities and a default
    distribution per state from the factory.
    """

    def __init__(self, n_states: int, opdf_factory: Optional[OpdfFactory] = None):
        if n_states < 1:
            raise ValueError(f"Number of states must be at least 1, got {n_states}")
        self.n_states = n_states
        self.startprob_ = np.full(n_states, 1.0 / n_states)
        self.transmat_ = np.full((n_states, n_states), 1.0 / n_states)
        self.opdfs: List[Optional[Opdf]] = [
            opdf_factory.generate() if opdf_factory is not None else None
            for _ in range(n_states)
        ]

    # Accessors

    def get_pi(self, i: int) -> float:
        return float(self.startprob_[i])

    def set_pi(self, i: int, value: float):
        self.startprob_[i] = value

    def get_aij(self, i: int, j: int) -> float:
        return float(self.transmat_[i, j])

    def set_aij(self, i: int, j: int, value: float):
        self.transmat_[i, j] = value

    def get_opdf(self, i: int) -> Opdf:
        return self.opdfs[i]

    def set_opdf(self, i: int, opdf: Opdf):
        self.opdfs[i] = opdf

    # Decoding

    def log_emission(self, sequence: Sequence) -> np.ndarray:
        """Log emission probability of each observation under each state, (T, N)."""
        if any(opdf is None for opdf in self.opdfs):
            raise ValueError("Every state needs an observation distribution")
        return np.column_stack([opdf.log_probabilities(sequence) for opdf in self.opdfs])

    def decode(self, sequence: Sequence) -> Tuple[np.ndarray, float]:
        """
        Most likely state sequence and its log probability.

        Args:
            sequence: Non-empty list of observations

        Returns:
            path: State index per observation, shape (T,)
            log_prob: Log probability of the path
        """
        if len(sequence) == 0:
            raise ValueError("Cannot decode an empty sequence")

        with np.errstate(divide='ignore'):  # log(0) transitions are -inf
            log_startprob = np.log(self.startprob_)
            log_transmat = np.log(self.transmat_)

        return _viterbi(log_startprob, log_transmat, self.log_emission(sequence))

    def predict(self, sequence: Sequence) -> np.ndarray:
        """Predict most likely state sequence using the Viterbi algorithm."""
        path, _ = self.decode(sequence)
        return path

    # Validation / serialization

    def validate(self, tol: float = 1e-9) -> bool:
        """Check that Pi and each row of A are probability distributions."""
        errors = []
        if self.startprob_.shape != (self.n_states,):
            errors.append(f"startprob_ has incorrect shape: {self.startprob_.shape}")
        if self.transmat_.shape != (self.n_states, self.n_states):
            errors.append(f"transmat_ has incorrect shape: {self.transmat_.shape}")
        if not errors:
            if np.any(self.startprob_ < 0) or abs(self.startprob_.sum() - 1.0) > tol:
                errors.append("startprob_ does not sum to 1")
            if np.any(self.transmat_ < 0) or \
                    np.any(np.abs(self.transmat_.sum(axis=1) - 1.0) > tol):
                errors.append("transmat_ rows do not sum to 1")

        if errors:
            raise ValueError("HMM validation failed:\n" + "\n".join(f"  - {e}" for e in errors))
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Serialize model to dictionary."""
        return {
            'n_states': self.n_states,
            'startprob': self.startprob_.tolist(),
            'transmat': self.transmat_.tolist(),
            'opdfs': [opdf.to_dict() for opdf in self.opdfs],
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> 'Hmm':
        """Deserialize model from dictionary."""
        model = cls(n_states=d['n_states'])
        model.startprob_ = np.array(d['startprob'], dtype=float)
        model.transmat_ = np.array(d['transmat'], dtype=float)
        model.opdfs = [opdf_from_dict(o) for o in d['opdfs']]
        if len(model.opdfs) != model.n_states:
            raise ValueError(
                f"Expected {model.n_states} distributions, found {len(model.opdfs)}"
            )
        return model

    def __repr__(self):
        return f"Hmm(n_states={self.n_states})"


def viterbi(sequence: Sequence, hmm: Hmm) -> np.ndarray:
    """Decoder used by the K-Means learner: Viterbi state path of a sequence."""
    return hmm.predict(sequence)
