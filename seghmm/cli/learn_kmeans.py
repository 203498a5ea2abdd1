#!/usr/bin/env python3
"""
SegHMM learn-kmeans CLI entry point.
Learns an HMM from observation sequences with segmental K-Means.
"""

import argparse
import os
import sys

import numpy as np

from seghmm.core.model_io import save_model
from seghmm.core.opdf import make_opdf_factory
from seghmm.core.sequence_io import read_sequences
from seghmm.learn.kmeans_learner import KMeansLearner
from seghmm.cli.common import (
    OPDF_OBSERVATION_KINDS,
    add_opdf_args, add_states_args, add_output_args, add_iteration_args,
    add_verbose_args, add_version_args, check_opdf_args,
)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Learn an HMM from observation sequences (segmental K-Means)',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog='''
Input:
  Tab-separated table, one row per observation, with a 'sequence' column
  naming the sequence and a 'value' column (gaussian, integer) or one
  column per coordinate (multi_gaussian).

Examples:
  seghmm-learn-kmeans -i seqs.tsv -n 3 -o model.json
  seghmm-learn-kmeans -i vectors.tsv -n 2 --opdf multi_gaussian -d 2 -o model.json
'''
    )
    add_version_args(parser)
    parser.add_argument('-i', '--input', required=True,
                        help='Observation sequences (.tsv)')
    add_states_args(parser)
    add_opdf_args(parser)
    add_output_args(parser)
    add_iteration_args(parser)
    add_verbose_args(parser)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    check_opdf_args(args)

    if not os.path.exists(args.input):
        print(f"Error: input file not found: {args.input}")
        sys.exit(1)

    kind = OPDF_OBSERVATION_KINDS[args.opdf]
    try:
        sequences = read_sequences(args.input, kind)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.opdf == 'multi_gaussian' and sequences and \
            sequences[0][0].dimension != args.dimension:
        print(f"Error: --dimension {args.dimension} does not match input "
              f"({sequences[0][0].dimension} columns)")
        sys.exit(1)

    if args.opdf == 'integer' and sequences:
        symbols = [o.value for s in sequences for o in s]
        if min(symbols) < 0 or max(symbols) >= args.nb_entries:
            print(f"Error: input symbols span [{min(symbols)}, {max(symbols)}], "
                  f"outside [0, {args.nb_entries}) set by --nb-entries")
            sys.exit(1)

    if args.verbose:
        n_obs = sum(len(s) for s in sequences)
        print("SegHMM K-Means learning")
        print(f"  Input: {args.input}")
        print(f"  Sequences: {len(sequences)} ({n_obs:,} observations)")
        print(f"  States: {args.nb_states}")
        print(f"  Distribution: {args.opdf}")

    factory = make_opdf_factory(args.opdf, dimension=args.dimension,
                                nb_entries=args.nb_entries)
    try:
        learner = KMeansLearner(args.nb_states, factory, sequences,
                                max_iterations=args.max_iterations,
                                verbose=args.verbose)
    except (ValueError, TypeError) as e:
        print(f"Error: {e}")
        sys.exit(1)

    hmm = learner.learn()

    if args.verbose:
        status = "converged" if learner.is_terminated() else "stopped"
        print(f"\nK-Means {status} after {learner.n_iterations} iteration(s)")
        print(f"Start probabilities: {np.round(hmm.startprob_, 4)}")
        print(f"Transition matrix:\n{np.round(hmm.transmat_, 4)}")
        for i, opdf in enumerate(hmm.opdfs):
            print(f"  State {i}: {opdf}")

    path = save_model(hmm, args.out_hmm)
    print(f"Saved: {path}")


if __name__ == '__main__':
    main()
