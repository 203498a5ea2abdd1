"""
Tests for seghmm.cli.common argument factories.
"""
import pytest
import argparse

from seghmm.cli.common import (
    OPDF_CHOICES,
    OPDF_OBSERVATION_KINDS,
    add_opdf_args,
    add_states_args,
    add_output_args,
    add_iteration_args,
    add_verbose_args,
    check_opdf_args,
)


class TestAddOpdfArgs:
    def test_defaults(self):
        parser = argparse.ArgumentParser()
        add_opdf_args(parser)
        args = parser.parse_args([])
        assert args.opdf == 'gaussian'
        assert args.dimension == 1
        assert args.nb_entries == 2

    def test_custom_default(self):
        parser = argparse.ArgumentParser()
        add_opdf_args(parser, default='integer')
        args = parser.parse_args([])
        assert args.opdf == 'integer'

    def test_valid_choices(self):
        parser = argparse.ArgumentParser()
        add_opdf_args(parser)
        for opdf in OPDF_CHOICES:
            args = parser.parse_args(['--opdf', opdf])
            assert args.opdf == opdf

    def test_invalid_choice(self):
        parser = argparse.ArgumentParser()
        add_opdf_args(parser)
        with pytest.raises(SystemExit):
            parser.parse_args(['--opdf', 'poisson'])

    def test_short_flags(self):
        parser = argparse.ArgumentParser()
        add_opdf_args(parser)
        args = parser.parse_args(['-d', '3', '-r', '5'])
        assert args.dimension == 3
        assert args.nb_entries == 5

    def test_every_choice_has_observation_kind(self):
        assert set(OPDF_OBSERVATION_KINDS) == set(OPDF_CHOICES)


class TestAddStatesArgs:
    def test_required(self):
        parser = argparse.ArgumentParser()
        add_states_args(parser)
        with pytest.raises(SystemExit):
            parser.parse_args([])

    def test_optional_default(self):
        parser = argparse.ArgumentParser()
        add_states_args(parser, required=False)
        args = parser.parse_args([])
        assert args.nb_states == 2

    def test_value(self):
        parser = argparse.ArgumentParser()
        add_states_args(parser)
        args = parser.parse_args(['-n', '4'])
        assert args.nb_states == 4


class TestAddOutputArgs:
    def test_required(self):
        parser = argparse.ArgumentParser()
        add_output_args(parser)
        with pytest.raises(SystemExit):
            parser.parse_args([])

    def test_value(self):
        parser = argparse.ArgumentParser()
        add_output_args(parser)
        args = parser.parse_args(['--out-hmm', 'model.json'])
        assert args.out_hmm == 'model.json'


class TestAddIterationArgs:
    def test_default_unbounded(self):
        parser = argparse.ArgumentParser()
        add_iteration_args(parser)
        args = parser.parse_args([])
        assert args.max_iterations is None

    def test_value(self):
        parser = argparse.ArgumentParser()
        add_iteration_args(parser)
        args = parser.parse_args(['--max-iterations', '10'])
        assert args.max_iterations == 10


class TestAddVerboseArgs:
    def test_default_off(self):
        parser = argparse.ArgumentParser()
        add_verbose_args(parser)
        args = parser.parse_args([])
        assert args.verbose is False

    def test_short_flag(self):
        parser = argparse.ArgumentParser()
        add_verbose_args(parser)
        args = parser.parse_args(['-v'])
        assert args.verbose is True


class TestCheckOpdfArgs:
    def _args(self, **kwargs):
        defaults = dict(nb_states=2, opdf='gaussian', dimension=1, nb_entries=2)
        defaults.update(kwargs)
        return argparse.Namespace(**defaults)

    def test_valid(self):
        check_opdf_args(self._args())

    def test_zero_states(self):
        with pytest.raises(SystemExit, match="nb-states"):
            check_opdf_args(self._args(nb_states=0))

    def test_bad_dimension(self):
        with pytest.raises(SystemExit, match="dimension"):
            check_opdf_args(self._args(opdf='multi_gaussian', dimension=0))

    def test_bad_nb_entries(self):
        with pytest.raises(SystemExit, match="nb-entries"):
            check_opdf_args(self._args(opdf='integer', nb_entries=0))

    def test_dimension_ignored_for_gaussian(self):
        check_opdf_args(self._args(dimension=0))
