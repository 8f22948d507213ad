import numpy as np
import pytest

from ..activation import sigmoid
from ..exceptions import ConfigurationError
from ..loader import (load_potential, read_graph_file, read_parameters_file,
                      read_minmax_file, read_mean_file, write_potential)

TINY_GRAPH = """1 2 sigmoid 2 1
1.0 -1.0
0.5 2.0
2.0 -3.0

0.0 0.5
0.25 0.0
"""

TINY_PARAMETERS = """2
0.5 4.0 0.0
0.1 4.0 1.0 1.0
"""


@pytest.fixture
def tiny_dir(tmp_path):
    (tmp_path / "graph.dat").write_text(TINY_GRAPH)
    (tmp_path / "parameters.dat").write_text(TINY_PARAMETERS)
    return tmp_path


def write_graph(tmp_path, text):
    path = tmp_path / "graph.dat"
    path.write_text(text)
    return path


class TestGraphFile:

    def test_tiny_network(self, tiny_dir):
        net = read_graph_file(tiny_dir / "graph.dat")
        assert net.num_inputs == 2
        assert net.nodes_per_layer == 2
        assert net.num_hidden_layers == 1
        assert net.activation.name == "sigmoid"
        assert np.allclose(net.weights[-1], [[2.0], [-3.0]])
        assert np.allclose(net.biases[-1], [0.25])
        x = np.array([0.2, -0.4])
        h = sigmoid(np.array([0.0, -0.5]))
        energy, _ = net.forward(x)
        assert energy == pytest.approx(2.0*h[0] - 3.0*h[1] + 0.25)

    def test_leading_blank_lines_and_trailing_newlines(self, tmp_path):
        text = TINY_GRAPH.replace("\n1.0 -1.0", "\n\n1.0 -1.0") + "\n\n"
        net = read_graph_file(write_graph(tmp_path, text))
        assert np.allclose(net.weights[0], [[1.0, -1.0], [0.5, 2.0]])

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError):
            read_graph_file(tmp_path / "graph.dat")

    @pytest.mark.parametrize("text", [
        # short header
        "1 2 sigmoid 2\n1 1\n1 1\n1 1\n\n1 1\n1 0\n",
        # non-numeric header
        "one 2 sigmoid 2 1\n1 1\n1 1\n1 1\n\n1 1\n1 0\n",
        # missing weight row
        "1 2 sigmoid 2 1\n1 1\n1 1\n\n1 1\n1 0\n",
        # row of wrong length
        "1 2 sigmoid 2 1\n1 1 1\n1 1\n1 1\n\n1 1\n1 0\n",
        # missing output bias row
        "1 2 sigmoid 2 1\n1 1\n1 1\n1 1\n\n1 1\n",
        # unparsable number
        "1 2 sigmoid 2 1\n1 x\n1 1\n1 1\n\n1 1\n1 0\n",
        # unsupported activation
        "1 2 softplus 2 1\n1 1\n1 1\n1 1\n\n1 1\n1 0\n",
        # more than one output
        "1 2 sigmoid 2 2\n1 1\n1 1\n1 1\n1 1\n\n1 1\n1 0\n",
    ])
    def test_malformed(self, tmp_path, text):
        with pytest.raises(ConfigurationError):
            read_graph_file(write_graph(tmp_path, text))


class TestParameterFiles:

    def test_parameters(self, tiny_dir):
        descriptors = read_parameters_file(tiny_dir / "parameters.dat")
        assert len(descriptors) == 2
        assert descriptors.num_radial == 1
        assert descriptors[1].parameters == (0.1, 4.0, 1.0, 1.0)

    def test_count_mismatch(self, tmp_path):
        path = tmp_path / "parameters.dat"
        path.write_text("3\n0.5 4.0 0.0\n0.1 4.0 1.0 1.0\n")
        with pytest.raises(ConfigurationError):
            read_parameters_file(path)

    def test_wrong_number_of_values(self, tmp_path):
        path = tmp_path / "parameters.dat"
        path.write_text("1\n0.5 4.0\n")
        with pytest.raises(ConfigurationError):
            read_parameters_file(path)

    def test_fractional_zeta(self, tmp_path):
        path = tmp_path / "parameters.dat"
        path.write_text("2\n0.5 4.0 0.0\n0.1 4.0 0.5 1.0\n")
        with pytest.raises(ConfigurationError):
            read_parameters_file(path)

    def test_optional_files_missing(self, tmp_path):
        assert read_minmax_file(tmp_path / "minmax.txt") is None
        assert read_mean_file(tmp_path / "mean.txt") is None

    def test_minmax_columns(self, tmp_path):
        path = tmp_path / "minmax.txt"
        path.write_text("0 1 2\n0 1 2\n")
        with pytest.raises(ConfigurationError):
            read_minmax_file(path)


class TestPotentialDirectory:

    def test_load_without_optional_files(self, tiny_dir):
        files = load_potential(tiny_dir)
        assert files.minmax is None
        assert files.mean is None
        assert files.network.num_inputs == len(files.descriptors)

    def test_round_trip(self, tmp_path, network, descriptors):
        rng = np.random.default_rng(3)
        minmax = np.sort(rng.normal(size=(len(descriptors), 2)), axis=1)
        mean = rng.normal(size=len(descriptors))
        write_potential(tmp_path, network, descriptors, minmax=minmax,
                        mean=mean)
        files = load_potential(tmp_path)
        assert files.descriptors == descriptors
        for w1, w2 in zip(files.network.weights, network.weights):
            assert np.array_equal(w1, w2)
        for b1, b2 in zip(files.network.biases, network.biases):
            assert np.array_equal(b1, b2)
        assert np.array_equal(files.minmax, minmax)
        assert np.array_equal(files.mean, mean)
        x = rng.normal(size=len(descriptors))
        assert files.network.forward(x)[0] == network.forward(x)[0]

    def test_input_count_mismatch(self, tiny_dir):
        (tiny_dir / "parameters.dat").write_text("1\n0.5 4.0 0.0\n")
        with pytest.raises(ConfigurationError):
            load_potential(tiny_dir)

    def test_mean_length_mismatch(self, tiny_dir):
        (tiny_dir / "mean.txt").write_text("0.1\n0.2\n0.3\n")
        with pytest.raises(ConfigurationError):
            load_potential(tiny_dir)

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ConfigurationError):
            load_potential(tmp_path / "nothing")

    def test_verbose(self, tiny_dir, capsys):
        load_potential(tiny_dir, verbose=True)
        out = capsys.readouterr().out
        assert "Hidden layers   : 1" in out
        assert "2 symmetry functions" in out
