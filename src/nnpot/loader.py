"""
Read and write the files of a trained potential.

A potential directory contains

  graph.dat       network topology, weights, and biases
  parameters.dat  symmetry function parameters
  minmax.txt      (optional) min/max of each network input in training
  mean.txt        (optional) mean of each feature; enables centering

graph.dat format::

  <hidden layers> <nodes per layer> <activation> <inputs> <outputs>
  <weight rows: inputs rows for input->layer 1,
                nodes rows for each further hidden layer,
                outputs rows for the last hidden layer->output>
  <blank line>
  <bias rows: one per hidden layer plus one for the output layer>

Every row has <nodes per layer> values.  The output weights are stored
as <outputs> rows and reshaped (column-major) into a matrix of shape
(nodes, outputs); only the first <outputs> values of the final bias row
are used.

parameters.dat format::

  <number of symmetry functions>
  eta Rc Rs              (radial, 3 values)
  eta Rc zeta lambda     (angular, 4 values)
  ...

"""

from collections import namedtuple
import os

import numpy as np

from .exceptions import ConfigurationError
from .network import FeedForwardNetwork
from .symmetry import DescriptorSet, descriptor_from_parameters

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

GRAPH_FILE = "graph.dat"
PARAMETERS_FILE = "parameters.dat"
MINMAX_FILE = "minmax.txt"
MEAN_FILE = "mean.txt"

PotentialFiles = namedtuple(
    "PotentialFiles", ["path", "network", "descriptors", "minmax", "mean"])


def _parse_row(line, path, lineno):
    try:
        return [float(v) for v in line.split()]
    except ValueError:
        raise ConfigurationError(
            "{}, line {}: cannot parse numbers: '{}'".format(
                path, lineno, line.strip()))


def _check_exists(path):
    if not os.path.exists(path):
        raise ConfigurationError("File not found: '{}'".format(path))


def read_graph_file(path: os.PathLike) -> FeedForwardNetwork:
    """
    Parse a graph.dat file.

    Raises:
      ConfigurationError: if the file is missing or malformed, or if the
        number of rows does not match the declared topology

    """
    _check_exists(path)
    with open(path) as fp:
        header = fp.readline().split()
        if len(header) != 5:
            raise ConfigurationError(
                "{}: header must contain 5 fields (layers, nodes, "
                "activation, inputs, outputs), found {}.".format(
                    path, len(header)))
        try:
            n_layers = int(header[0])
            n_nodes = int(header[1])
            activation = header[2]
            n_inputs = int(header[3])
            n_outputs = int(header[4])
        except ValueError:
            raise ConfigurationError(
                "{}: invalid header: '{}'".format(path, " ".join(header)))

        weight_rows = []
        bias_rows = []
        rows = weight_rows
        for lineno, line in enumerate(fp, start=2):
            if len(line.strip()) == 0:
                # the first blank line after the weights separates blocks
                if rows is weight_rows and len(weight_rows) > 0:
                    rows = bias_rows
                continue
            rows.append(_parse_row(line, path, lineno))

    if n_layers < 1 or n_nodes < 1 or n_inputs < 1 or n_outputs < 1:
        raise ConfigurationError(
            "{}: layers, nodes, inputs, and outputs must be "
            "positive.".format(path))

    n_weight_rows = n_inputs + n_nodes*(n_layers - 1) + n_outputs
    if len(weight_rows) != n_weight_rows:
        raise ConfigurationError(
            "{}: found {} weight rows; {} inputs, {} hidden layers of "
            "{} nodes, and {} outputs require {}.".format(
                path, len(weight_rows), n_inputs, n_layers, n_nodes,
                n_outputs, n_weight_rows))
    if len(bias_rows) != n_layers + 1:
        raise ConfigurationError(
            "{}: found {} bias rows; expected {}.".format(
                path, len(bias_rows), n_layers + 1))
    for i, row in enumerate(weight_rows + bias_rows[:-1]):
        if len(row) != n_nodes:
            raise ConfigurationError(
                "{}: row {} of the weight/bias blocks has {} values; "
                "expected {}.".format(path, i + 1, len(row), n_nodes))
    if len(bias_rows[-1]) < n_outputs:
        raise ConfigurationError(
            "{}: output bias row has {} values; expected at least "
            "{}.".format(path, len(bias_rows[-1]), n_outputs))

    weight_rows = np.array(weight_rows)
    weights = [weight_rows[:n_inputs]]
    first = n_inputs
    for i in range(n_layers - 1):
        weights.append(weight_rows[first:first + n_nodes])
        first += n_nodes
    output_block = weight_rows[first:first + n_outputs]
    weights.append(output_block.flatten(order='F').reshape(
        (n_nodes, n_outputs), order='F'))

    biases = [np.array(row) for row in bias_rows[:-1]]
    biases.append(np.array(bias_rows[-1][:n_outputs]))

    return FeedForwardNetwork(weights, biases, activation=activation)


def read_parameters_file(path: os.PathLike) -> DescriptorSet:
    """
    Parse a parameters.dat file.

    Raises:
      ConfigurationError: if the file is missing or malformed

    """
    _check_exists(path)
    with open(path) as fp:
        first = fp.readline().split()
        try:
            num_symm_func = int(first[0])
        except (IndexError, ValueError):
            raise ConfigurationError(
                "{}: first line must hold the number of symmetry "
                "functions.".format(path))
        rows = []
        for lineno, line in enumerate(fp, start=2):
            if len(line.strip()) == 0:
                if len(rows) > 0:
                    break
                continue
            rows.append(_parse_row(line, path, lineno))

    if len(rows) != num_symm_func:
        raise ConfigurationError(
            "{}: declares {} symmetry functions but lists {}.".format(
                path, num_symm_func, len(rows)))
    return DescriptorSet([descriptor_from_parameters(row) for row in rows])


def read_minmax_file(path: os.PathLike):
    """
    Returns:
      (n, 2) array with the min and max of each input, or None if the
      file does not exist

    """
    if not os.path.exists(path):
        return None
    try:
        minmax = np.loadtxt(path, ndmin=2)
    except ValueError as e:
        raise ConfigurationError("{}: {}".format(path, e))
    if minmax.size > 0 and minmax.shape[1] != 2:
        raise ConfigurationError(
            "{}: expected two columns (min max), found {}.".format(
                path, minmax.shape[1]))
    return minmax.reshape(-1, 2)


def read_mean_file(path: os.PathLike):
    """
    Returns:
      array with one mean per feature, or None if the file does not
      exist

    """
    if not os.path.exists(path):
        return None
    try:
        return np.loadtxt(path, ndmin=1).reshape(-1)
    except ValueError as e:
        raise ConfigurationError("{}: {}".format(path, e))


def load_potential(directory: os.PathLike,
                   verbose: bool = False) -> PotentialFiles:
    """
    Read all files of a potential directory and check that their
    dimensions are consistent.

    Args:
      directory: path to the potential directory
      verbose: print a summary of what was read

    Returns:
      PotentialFiles

    """
    if not os.path.isdir(directory):
        raise ConfigurationError(
            "Potential directory not found: '{}'".format(directory))
    network = read_graph_file(os.path.join(directory, GRAPH_FILE))
    descriptors = read_parameters_file(
        os.path.join(directory, PARAMETERS_FILE))
    minmax = read_minmax_file(os.path.join(directory, MINMAX_FILE))
    mean = read_mean_file(os.path.join(directory, MEAN_FILE))

    if network.num_inputs != len(descriptors):
        raise ConfigurationError(
            "Network has {} inputs but {} symmetry functions are "
            "defined.".format(network.num_inputs, len(descriptors)))
    if minmax is not None and len(minmax) != len(descriptors):
        raise ConfigurationError(
            "{}: {} rows for {} symmetry functions.".format(
                MINMAX_FILE, len(minmax), len(descriptors)))
    if mean is not None and len(mean) != len(descriptors):
        raise ConfigurationError(
            "{}: {} values for {} symmetry functions.".format(
                MEAN_FILE, len(mean), len(descriptors)))

    if verbose:
        print("Potential directory: {}".format(directory))
        print(network, end="")
        print(descriptors)
        print("Min/max file: {}".format(
            "found" if minmax is not None else "not found"))
        print("Mean file: {}".format(
            "found (inputs will be centered)" if mean is not None
            else "not found"))

    return PotentialFiles(directory, network, descriptors, minmax, mean)


def _format_row(values):
    return " ".join("{:.17g}".format(float(v)) for v in values)


def write_graph_file(network: FeedForwardNetwork, path: os.PathLike):
    n_nodes = network.nodes_per_layer
    n_outputs = network.num_outputs
    with open(path, 'w') as fp:
        fp.write("{} {} {} {} {}\n".format(
            network.num_hidden_layers, n_nodes, network.activation.name,
            network.num_inputs, n_outputs))
        for w in network.weights[:-1]:
            for row in w:
                fp.write(_format_row(row) + "\n")
        output_block = network.weights[-1].flatten(order='F').reshape(
            (n_outputs, n_nodes), order='F')
        for row in output_block:
            fp.write(_format_row(row) + "\n")
        fp.write("\n")
        for b in network.biases[:-1]:
            fp.write(_format_row(b) + "\n")
        output_bias = np.zeros(n_nodes)
        output_bias[:n_outputs] = network.biases[-1]
        fp.write(_format_row(output_bias) + "\n")


def write_parameters_file(descriptors: DescriptorSet, path: os.PathLike):
    with open(path, 'w') as fp:
        fp.write("{}\n".format(len(descriptors)))
        for d in descriptors:
            fp.write(_format_row(d.parameters) + "\n")


def write_minmax_file(minmax, path: os.PathLike):
    with open(path, 'w') as fp:
        for row in np.asarray(minmax).reshape(-1, 2):
            fp.write(_format_row(row) + "\n")


def write_mean_file(mean, path: os.PathLike):
    with open(path, 'w') as fp:
        for value in np.asarray(mean).reshape(-1):
            fp.write(_format_row([value]) + "\n")


def write_potential(directory: os.PathLike, network: FeedForwardNetwork,
                    descriptors: DescriptorSet, minmax=None, mean=None):
    """
    Write all files of a potential directory (created if necessary).

    """
    os.makedirs(directory, exist_ok=True)
    write_graph_file(network, os.path.join(directory, GRAPH_FILE))
    write_parameters_file(descriptors,
                          os.path.join(directory, PARAMETERS_FILE))
    if minmax is not None:
        write_minmax_file(minmax, os.path.join(directory, MINMAX_FILE))
    if mean is not None:
        write_mean_file(mean, os.path.join(directory, MEAN_FILE))
