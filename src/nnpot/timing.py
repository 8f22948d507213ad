"""
Timing of function calls and code sections for profiling.

    timing = Timing(outfile=sys.stderr)

    @timing
    def evaluate_frame(...):
        ...

    timing.reset("Reading structures")
    ...
    timing.log("Structures read")

"""

import functools
import sys
import timeit

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


class Timing(object):
    """
    Args:
      outfile: file object or path of the output file
      enabled (bool): if False, nothing is written

    Attributes:
      totals (dict): accumulated time (s) per decorated function

    """

    def __init__(self, outfile=sys.stdout, enabled=True):
        if hasattr(outfile, 'write'):
            self.fp = outfile
            self._close_at_del = False
        else:
            self.fp = open(outfile, 'w')
            self._close_at_del = True
        self.enabled = enabled
        self.totals = {}
        self.frmt = "call to `{}' - elapsed time (s): {:.6f}\n"
        self.t0 = timeit.default_timer()

    def __del__(self):
        if self._close_at_del:
            self.fp.close()

    def __call__(self, func):
        @functools.wraps(func)
        def wrap(*args, **kwargs):
            t0 = timeit.default_timer()
            result = func(*args, **kwargs)
            dt = timeit.default_timer() - t0
            self.totals[func.__name__] = self.totals.get(
                func.__name__, 0.0) + dt
            if self.enabled:
                self.fp.write(self.frmt.format(func.__name__, dt))
            return result
        return wrap

    def reset(self, message=None):
        if message is not None and self.enabled:
            self.fp.write(message + "\n")
        self.t0 = timeit.default_timer()

    def log(self, message):
        dt = timeit.default_timer() - self.t0
        if self.enabled:
            self.fp.write(message + " {:.6f}\n".format(dt))
        return dt
