"""Core HMM, observations, distributions and I/O."""

from seghmm.core.observations import (
    Observation, CentroidFactory, Centroid,
    ObservationReal, ObservationInteger, ObservationVector,
)
from seghmm.core.opdf import (
    Opdf, OpdfFactory,
    OpdfGaussian, OpdfGaussianFactory,
    OpdfMultiGaussian, OpdfMultiGaussianFactory,
    OpdfInteger, OpdfIntegerFactory,
)
from seghmm.core.hmm import Hmm, viterbi
from seghmm.core.model_io import load_model, save_model
from seghmm.core.sequence_io import read_sequences
