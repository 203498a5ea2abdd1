"""
SegHMM model I/O module

Saves and loads HMMs as JSON (human-readable, portable). Distributions are
stored as typed dictionaries (see Opdf.to_dict).
"""

import json
import os
import warnings

from seghmm.core.hmm import Hmm


MODEL_TYPE = 'SegHMM'
FORMAT_VERSION = '1.0'


def load_model(filepath: str) -> Hmm:
    """
    Load a model from a JSON file written by save_model().

    Args:
        filepath: Path to model file

    Returns:
        Hmm instance
    """
    with open(filepath, 'r') as f:
        data = json.load(f)

    if data.get('model_type') != MODEL_TYPE:
        raise ValueError(
            f"{filepath} is not a {MODEL_TYPE} model (model_type={data.get('model_type')!r})"
        )

    return Hmm.from_dict(data)


def save_model(hmm: Hmm, filepath: str) -> str:
    """
    Save model to file in JSON format.

    If the filepath does not end in .json, the extension is replaced with .json
    and a warning is issued.

    Args:
        hmm: Model to save
        filepath: Output path (.json)

    Returns:
        The path actually written
    """
    if not filepath.endswith('.json'):
        old_path = filepath
        base, _ = os.path.splitext(filepath)
        filepath = base + '.json'
        warnings.warn(
            f"Only JSON format is supported for saving. "
            f"Saving to '{filepath}' instead of '{old_path}'."
        )

    data = {
        'model_type': MODEL_TYPE,
        'version': FORMAT_VERSION,
        **hmm.to_dict(),
    }
    with open(filepath, 'w') as f:
        json.dump(data, f, indent=2)

    return filepath
