"""
Exceptions and warnings raised by nnpot.

"""

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


class ConfigurationError(Exception):
    """
    Malformed or missing potential files, inconsistent dimensions, or
    invalid potential options.  Raised before any evaluation takes place.

    """

    def __init__(self, msg):
        super().__init__(msg)
        self.msg = msg


class UsageError(Exception):
    """
    Wrong number or form of configuration arguments.

    """

    def __init__(self, msg, argument=None):
        if argument is not None:
            msg = "{} (argument: '{}')".format(msg, argument)
        super().__init__(msg)
        self.msg = msg
        self.argument = argument


class RuntimeInvariantViolation(Exception):
    """
    Geometric input handed to the potential during a step that cannot
    be evaluated without producing wrong forces.

    """

    def __init__(self, msg):
        super().__init__(msg)
        self.msg = msg


class ExtrapolationWarning(UserWarning):
    """Network inputs outside of the range seen during training."""
    pass


class FormatError(Exception):

    def __init__(self, frmt):
        self.msg = "Format not supported: {}".format(frmt)
        super().__init__(self.msg)


class FormatGuessError(Exception):

    def __init__(self, filename):
        self.msg = "Failed to guess format of file: {}".format(filename)
        super().__init__(self.msg)
