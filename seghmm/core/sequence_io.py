"""
Observation sequence files.

Sequences are read from tab-separated tables with one row per observation:

    sequence    value
    s1          0.12
    s1          0.30
    s2          4.10

The 'sequence' column groups rows into sequences; row order inside the file is
the observation order. For vector observations every column other than
'sequence' is one coordinate.

Missing or non-numeric cells are rejected with ValueError, as are fractional
values for integer observations.
"""

from typing import List

import pandas as pd

from seghmm.core.observations import ObservationInteger, ObservationReal, ObservationVector


SEQUENCE_COLUMN = 'sequence'
KINDS = ('real', 'integer', 'vector')


def sequences_from_frame(df: pd.DataFrame, kind: str = 'real') -> List[list]:
    """
    Build observation sequences from a DataFrame.

    Args:
        df: Table with a 'sequence' column and value column(s)
        kind: 'real', 'integer' or 'vector'

    Returns:
        List of sequences (lists of observations), in order of first appearance
    """
    if kind not in KINDS:
        raise ValueError(f"Unknown observation kind: {kind} (expected one of {KINDS})")
    if SEQUENCE_COLUMN not in df.columns:
        raise ValueError(f"Missing '{SEQUENCE_COLUMN}' column")

    value_columns = [c for c in df.columns if c != SEQUENCE_COLUMN]
    if not value_columns:
        raise ValueError("No value column found")
    if kind != 'vector':
        if 'value' not in df.columns:
            raise ValueError("Missing 'value' column")
        value_columns = ['value']

    unnamed = df[SEQUENCE_COLUMN].isna()
    if unnamed.any():
        raise ValueError(f"Missing sequence name in {int(unnamed.sum())} row(s)")

    values = df[value_columns]
    if not all(pd.api.types.is_numeric_dtype(t) for t in values.dtypes):
        raise ValueError(f"Non-numeric values in column(s) {value_columns}")
    missing = values.isna().any(axis=1)
    if missing.any():
        first = int(missing.to_numpy().argmax())
        raise ValueError(
            f"Missing value in {int(missing.sum())} row(s) (first at data row {first + 1})"
        )
    if kind == 'integer':
        fractional = (values['value'] % 1) != 0
        if fractional.any():
            raise ValueError(
                f"Non-integer value {values['value'][fractional].iloc[0]} for integer observations"
            )

    sequences = []
    for _, group in df.groupby(SEQUENCE_COLUMN, sort=False):
        if kind == 'real':
            seq = [ObservationReal(v) for v in group['value']]
        elif kind == 'integer':
            seq = [ObservationInteger(v) for v in group['value']]
        else:
            seq = [ObservationVector(row) for row in group[value_columns].to_numpy()]
        sequences.append(seq)

    return sequences


def read_sequences(filepath: str, kind: str = 'real') -> List[list]:
    """Read observation sequences from a tab-separated file."""
    df = pd.read_csv(filepath, sep='\t', dtype={SEQUENCE_COLUMN: str})
    return sequences_from_frame(df, kind)
