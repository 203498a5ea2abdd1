#!/usr/bin/env python3
"""
SegHMM create CLI entry point.
Writes an HMM with uniform start/transition probabilities and default
state distributions.
"""

import argparse

from seghmm.core.hmm import Hmm
from seghmm.core.model_io import save_model
from seghmm.core.opdf import make_opdf_factory
from seghmm.cli.common import (
    add_opdf_args, add_states_args, add_output_args, add_version_args,
    check_opdf_args,
)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description='Create an HMM with default parameters',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    add_version_args(parser)
    add_states_args(parser)
    add_opdf_args(parser)
    add_output_args(parser)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    check_opdf_args(args)

    factory = make_opdf_factory(args.opdf, dimension=args.dimension,
                                nb_entries=args.nb_entries)
    hmm = Hmm(args.nb_states, factory)

    path = save_model(hmm, args.out_hmm)
    print(f"Saved: {path} ({args.nb_states} states, {args.opdf})")


if __name__ == '__main__':
    main()
