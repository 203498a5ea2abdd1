"""
Tests for the seghmm-create and seghmm-learn-kmeans entry points.
"""
import pytest
import numpy as np
import pandas as pd

from seghmm.cli import create, learn_kmeans
from seghmm.core.model_io import load_model
from seghmm.core.opdf import OpdfInteger, OpdfMultiGaussian


@pytest.fixture
def real_tsv(tmp_path):
    np.random.seed(3)
    rows = []
    for name in ('a', 'b'):
        values = np.concatenate([np.random.normal(0, 0.3, 5), np.random.normal(8, 0.3, 5)])
        rows.extend((name, v) for v in values)
    path = tmp_path / "seqs.tsv"
    pd.DataFrame(rows, columns=['sequence', 'value']).to_csv(path, sep='\t', index=False)
    return str(path)


class TestCreate:
    def test_gaussian(self, tmp_path, capsys):
        out = str(tmp_path / "model.json")
        create.main(['-n', '3', '-o', out])

        hmm = load_model(out)
        assert hmm.n_states == 3
        np.testing.assert_allclose(hmm.transmat_, np.full((3, 3), 1 / 3))
        assert "Saved" in capsys.readouterr().out

    def test_integer(self, tmp_path):
        out = str(tmp_path / "model.json")
        create.main(['-n', '2', '--opdf', 'integer', '-r', '4', '-o', out])

        opdf = load_model(out).get_opdf(0)
        assert isinstance(opdf, OpdfInteger)
        np.testing.assert_allclose(opdf.probabilities, [0.25] * 4)

    def test_multi_gaussian(self, tmp_path):
        out = str(tmp_path / "model.json")
        create.main(['-n', '2', '--opdf', 'multi_gaussian', '-d', '3', '-o', out])

        opdf = load_model(out).get_opdf(1)
        assert isinstance(opdf, OpdfMultiGaussian)
        assert opdf.dimension == 3

    def test_invalid_states(self, tmp_path):
        with pytest.raises(SystemExit):
            create.main(['-n', '0', '-o', str(tmp_path / "model.json")])


class TestLearnKMeans:
    def test_learns_two_regimes(self, real_tsv, tmp_path):
        out = str(tmp_path / "learned.json")
        learn_kmeans.main(['-i', real_tsv, '-n', '2', '-o', out])

        hmm = load_model(out)
        assert hmm.validate()
        means = sorted(o.mean for o in hmm.opdfs)
        assert means[0] == pytest.approx(0.0, abs=0.5)
        assert means[1] == pytest.approx(8.0, abs=0.5)

    def test_verbose_summary(self, real_tsv, tmp_path, capsys):
        out = str(tmp_path / "learned.json")
        learn_kmeans.main(['-i', real_tsv, '-n', '2', '-o', out, '-v'])

        captured = capsys.readouterr().out
        assert "Sequences: 2" in captured
        assert "converged" in captured

    def test_vector_input(self, tmp_path):
        path = tmp_path / "vectors.tsv"
        pd.DataFrame({
            'sequence': ['s'] * 6,
            'x': [0.0, 0.1, 0.2, 5.0, 5.1, 5.2],
            'y': [0.0, 0.2, 0.1, 5.0, 5.2, 5.1],
        }).to_csv(path, sep='\t', index=False)
        out = str(tmp_path / "learned.json")

        learn_kmeans.main(['-i', str(path), '-n', '2', '--opdf', 'multi_gaussian',
                           '-d', '2', '-o', out])

        assert load_model(out).get_opdf(0).dimension == 2

    def test_dimension_mismatch(self, tmp_path):
        path = tmp_path / "vectors.tsv"
        pd.DataFrame({'sequence': ['s', 's'], 'x': [0.0, 1.0], 'y': [0.0, 1.0]}).to_csv(
            path, sep='\t', index=False)

        with pytest.raises(SystemExit) as exc:
            learn_kmeans.main(['-i', str(path), '-n', '1', '--opdf', 'multi_gaussian',
                               '-d', '3', '-o', str(tmp_path / "m.json")])
        assert exc.value.code == 1

    def test_integer_input(self, tmp_path):
        path = tmp_path / "symbols.tsv"
        path.write_text("sequence\tvalue\n" + "".join(
            f"s\t{v}\n" for v in (0, 0, 1, 0, 3, 3, 2, 3)))
        out = str(tmp_path / "learned.json")

        learn_kmeans.main(['-i', str(path), '-n', '2', '--opdf', 'integer',
                           '-r', '4', '-o', out])

        assert load_model(out).get_opdf(0).nb_entries == 4

    def test_symbol_outside_nb_entries(self, tmp_path, capsys):
        path = tmp_path / "symbols.tsv"
        path.write_text("sequence\tvalue\ns\t0\ns\t1\ns\t3\ns\t3\n")
        out = tmp_path / "m.json"

        with pytest.raises(SystemExit) as exc:
            learn_kmeans.main(['-i', str(path), '-n', '2', '--opdf', 'integer',
                               '-o', str(out)])
        assert exc.value.code == 1
        assert "--nb-entries" in capsys.readouterr().out
        assert not out.exists()

    def test_empty_cell_exits_with_error(self, tmp_path, capsys):
        path = tmp_path / "gap.tsv"
        path.write_text("sequence\tvalue\ns\t0.0\ns\t\ns\t5.0\ns\t5.1\n")
        out = tmp_path / "m.json"

        with pytest.raises(SystemExit) as exc:
            learn_kmeans.main(['-i', str(path), '-n', '2', '-o', str(out)])
        assert exc.value.code == 1
        assert "Error: Missing value" in capsys.readouterr().out
        assert not out.exists()

    def test_missing_input(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            learn_kmeans.main(['-i', str(tmp_path / "nope.tsv"), '-n', '2',
                               '-o', str(tmp_path / "m.json")])
        assert exc.value.code == 1

    def test_too_many_states(self, tmp_path):
        path = tmp_path / "tiny.tsv"
        path.write_text("sequence\tvalue\ns\t1.0\ns\t2.0\n")

        with pytest.raises(SystemExit) as exc:
            learn_kmeans.main(['-i', str(path), '-n', '5', '-o', str(tmp_path / "m.json")])
        assert exc.value.code == 1
