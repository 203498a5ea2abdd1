"""Shared argparse argument factories for SegHMM CLI tools.

Each function adds a group of related arguments to an ArgumentParser.
Default values can be overridden per-script where needed.
"""

import argparse


OPDF_CHOICES = ['gaussian', 'multi_gaussian', 'integer']

# Observation kind read from sequence files for each distribution
OPDF_OBSERVATION_KINDS = {
    'gaussian': 'real',
    'multi_gaussian': 'vector',
    'integer': 'integer',
}


def add_opdf_args(parser: argparse.ArgumentParser,
                  default: str = 'gaussian') -> None:
    """Add observation distribution arguments (--opdf, --dimension, --nb-entries)."""
    parser.add_argument(
        '--opdf', choices=OPDF_CHOICES, default=default,
        help=f"Observation distribution of each state (default: {default})"
    )
    parser.add_argument(
        '-d', '--dimension', type=int, default=1,
        help="Vector dimension (multi_gaussian only, default: 1)"
    )
    parser.add_argument(
        '-r', '--nb-entries', type=int, default=2,
        help="Number of symbols (integer only, default: 2)"
    )


def add_states_args(parser: argparse.ArgumentParser,
                    required: bool = True) -> None:
    """Add -n/--nb-states argument."""
    parser.add_argument(
        '-n', '--nb-states', type=int, required=required,
        default=None if required else 2,
        help="Number of HMM states"
    )


def add_output_args(parser: argparse.ArgumentParser,
                    required: bool = True,
                    help_text: str = "Output HMM file (.json)") -> None:
    """Add -o/--out-hmm argument."""
    parser.add_argument(
        '-o', '--out-hmm', required=required,
        help=help_text
    )


def add_iteration_args(parser: argparse.ArgumentParser,
                       default=None) -> None:
    """Add --max-iterations argument."""
    parser.add_argument(
        '--max-iterations', type=int, default=default,
        help="Stop learning after this many iterations (default: until convergence)"
    )


def add_verbose_args(parser: argparse.ArgumentParser) -> None:
    """Add --verbose flag."""
    parser.add_argument(
        '-v', '--verbose', action='store_true',
        help="Verbose output"
    )


def add_version_args(parser: argparse.ArgumentParser) -> None:
    """Add --version flag."""
    from seghmm import __version__
    parser.add_argument(
        '--version', action='version',
        version=f'%(prog)s {__version__}'
    )


def check_opdf_args(args: argparse.Namespace) -> None:
    """Exit with an error message on inconsistent model arguments."""
    if args.nb_states < 1:
        raise SystemExit("Error: --nb-states must be at least 1")
    if args.opdf == 'multi_gaussian' and args.dimension < 1:
        raise SystemExit("Error: --dimension must be at least 1")
    if args.opdf == 'integer' and args.nb_entries < 1:
        raise SystemExit("Error: --nb-entries must be at least 1")
