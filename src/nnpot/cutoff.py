"""
Cosine cutoff function and its radial derivative.

Two conventions are provided.  With ``cut=True`` ("hard-cut") all
values for r >= Rc are zero.  With ``cut=False`` ("soft") the cosine
expression is evaluated unconditionally, which is only correct for
distances that have already been filtered against Rc.

Both value and first derivative vanish at r = Rc.

"""

import numpy as np

__author__ = "The nnpot developers"
__date__ = "2026-10-18"


def _as_output(value):
    if np.ndim(value) == 0:
        return float(value)
    return value


def cutoff_function(r, rc, cut=True):
    """
    fc(r) = 0.5*[cos(pi*r/Rc) + 1]  for r < Rc
    fc(r) = 0                       for r >= Rc  (only if cut=True)

    Args:
      r: distance or array of distances
      rc: cutoff radius; arrays broadcast against r
      cut: apply the hard cut beyond rc

    Returns:
      float for scalar input, numpy array otherwise

    """
    r = np.asarray(r, dtype=float)
    value = 0.5*(np.cos(np.pi*r/rc) + 1.0)
    if cut:
        value = np.where(r < rc, value, 0.0)
    return _as_output(value)


def cutoff_derivative(r, rc, cut=True):
    """
    dfc/dr = -0.5*pi/Rc*sin(pi*r/Rc)  for r < Rc
    dfc/dr = 0                        for r >= Rc  (only if cut=True)

    """
    r = np.asarray(r, dtype=float)
    value = -0.5*np.pi/rc*np.sin(np.pi*r/rc)
    if cut:
        value = np.where(r < rc, value, 0.0)
    return _as_output(value)
