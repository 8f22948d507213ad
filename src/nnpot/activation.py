"""
Activation functions of the hidden network layers.

Derivatives are expressed in terms of the activation value a = f(x)
so that the backward pass can reuse the activations stored during the
forward pass.

"""

from collections import namedtuple

import numpy as np

from .exceptions import ConfigurationError

__author__ = "The nnpot developers"
__date__ = "2026-10-18"

Activation = namedtuple("Activation", ["name", "function", "derivative"])


def sigmoid(x):
    return 1.0/(1.0 + np.exp(-x))


def sigmoid_derivative(a):
    """
    Derivative of the sigmoid function.

    Args:
      a: sigmoid(x), NOT x

    """
    return a*(1.0 - a)


def tanh(x):
    return np.tanh(x)


def tanh_derivative(a):
    """Derivative of tanh(x) given a = tanh(x)."""
    return 1.0 - a*a


ACTIVATIONS = {
    "sigmoid": Activation("sigmoid", sigmoid, sigmoid_derivative),
    "tanh": Activation("tanh", tanh, tanh_derivative)
}


def get_activation(name):
    """
    Look up an activation function by name (case insensitive).

    Raises:
      ConfigurationError: if the activation is not supported

    """
    try:
        return ACTIVATIONS[name.lower()]
    except (KeyError, AttributeError):
        raise ConfigurationError(
            "Unsupported activation function: '{}'.  Supported: {}".format(
                name, ", ".join(sorted(ACTIVATIONS))))
