"""
Feed-forward neural network with a linear input layer, one or more
hidden layers with a nonlinear activation, and a linear output layer
producing a single scalar (the atomic energy).

The network object only holds the (read-only) parameters.  All
intermediate results of a forward pass are returned in a
``LayerCache`` owned by the caller, so that a single network can be
shared by concurrent evaluations.

"""

from collections import namedtuple
from typing import List, Sequence

import numpy as np

from .activation import get_activation
from .exceptions import ConfigurationError

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

# activations[0] is the input vector, activations[l] (l >= 1) the
# output of hidden layer l; output is the (linear) network output
LayerCache = namedtuple("LayerCache", ["activations", "output"])


class FeedForwardNetwork(object):
    """
    Multilayer perceptron E(x) with

      a[0]   = x
      a[l+1] = f(a[l] W[l] + b[l])        l = 0, ..., N-1
      E      = a[N] W[N] + b[N]

    where N is the number of hidden layers and f the activation.

    Parameters
    ----------
    weights : list of 2D arrays
        weights[k] has shape (inputs of layer k, outputs of layer k)
    biases : list of 1D arrays
        biases[k] has length equal to the number of outputs of layer k
    activation : str
        Name of the hidden-layer activation function ('sigmoid' or 'tanh')

    Raises
    ------
    ConfigurationError
        If the layer dimensions are inconsistent.
    """

    def __init__(self, weights: Sequence[np.ndarray],
                 biases: Sequence[np.ndarray],
                 activation: str = 'sigmoid'):
        self.activation = get_activation(activation)
        self.weights = [self._readonly(np.atleast_2d(w)) for w in weights]
        self.biases = [self._readonly(np.ravel(b)) for b in biases]
        self._check_dimensions()
        # transposes for the backward pass
        self.weights_transposed = [self._readonly(w.T) for w in self.weights]

    @staticmethod
    def _readonly(a):
        a = np.array(a, dtype=float)
        a.setflags(write=False)
        return a

    def _check_dimensions(self):
        if len(self.weights) < 2:
            raise ConfigurationError(
                "The network needs at least one hidden layer.")
        if len(self.weights) != len(self.biases):
            raise ConfigurationError(
                "Number of weight matrices ({}) and bias vectors ({}) "
                "differ.".format(len(self.weights), len(self.biases)))
        nodes = self.weights[0].shape[1]
        for k, (w, b) in enumerate(zip(self.weights, self.biases)):
            n_in = self.weights[0].shape[0] if k == 0 else nodes
            n_out = 1 if k == len(self.weights) - 1 else nodes
            if w.shape != (n_in, n_out):
                raise ConfigurationError(
                    "Weight matrix {} has shape {}; expected {}.".format(
                        k, w.shape, (n_in, n_out)))
            if b.shape != (n_out,):
                raise ConfigurationError(
                    "Bias vector {} has length {}; expected {}.".format(
                        k, b.shape[0], n_out))

    def __str__(self):
        out = "FeedForwardNetwork:\n"
        out += "  Inputs          : {}\n".format(self.num_inputs)
        out += "  Hidden layers   : {}\n".format(self.num_hidden_layers)
        out += "  Nodes per layer : {}\n".format(self.nodes_per_layer)
        out += "  Activation      : {}\n".format(self.activation.name)
        out += "  Outputs         : {}\n".format(self.num_outputs)
        return out

    @property
    def num_inputs(self) -> int:
        return self.weights[0].shape[0]

    @property
    def num_outputs(self) -> int:
        return self.weights[-1].shape[1]

    @property
    def num_hidden_layers(self) -> int:
        return len(self.weights) - 1

    @property
    def nodes_per_layer(self) -> int:
        return self.weights[0].shape[1]

    def forward(self, x):
        """
        Evaluate the network.

        Args:
          x: input (feature) vector of length num_inputs

        Returns:
          tuple (energy, cache) with the scalar output and the
          LayerCache needed by backward()

        """
        x = np.asarray(x, dtype=float)
        if x.shape != (self.num_inputs,):
            raise ValueError(
                "Input vector of shape {}; expected ({},).".format(
                    x.shape, self.num_inputs))
        f = self.activation.function
        activations: List[np.ndarray] = [x]
        for w, b in zip(self.weights[:-1], self.biases[:-1]):
            activations.append(f(activations[-1] @ w + b))
        output = activations[-1] @ self.weights[-1] + self.biases[-1]
        return float(output[0]), LayerCache(activations, output)

    def backward(self, cache: LayerCache):
        """
        Backpropagate the derivative of the output through the network.

        The output layer is linear, so the seed is dE/d(output) = 1.
        Activation derivatives are computed from the stored activations.

        Returns:
          gradient dE/dx as array of length num_inputs

        """
        df = self.activation.derivative
        delta = np.ones(self.num_outputs)
        for layer in range(self.num_hidden_layers, 0, -1):
            delta = ((delta @ self.weights_transposed[layer])
                     * df(cache.activations[layer]))
        # input layer is linear
        return delta @ self.weights_transposed[0]

    def evaluate(self, x):
        """
        Returns:
          tuple (energy, gradient)

        """
        energy, cache = self.forward(x)
        return energy, self.backward(cache)

    def numerical_gradient(self, x, delta=1.0e-5):
        """
        Central finite-difference estimate of dE/dx.

        """
        x = np.array(x, dtype=float)
        gradient = np.zeros(self.num_inputs)
        for i in range(self.num_inputs):
            x[i] += delta
            e_plus, _ = self.forward(x)
            x[i] -= 2.0*delta
            e_minus, _ = self.forward(x)
            x[i] += delta
            gradient[i] = (e_plus - e_minus)/(2.0*delta)
        return gradient
