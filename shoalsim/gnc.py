"""
Vector and angle utilities supporting vessel motion.

Small, allocation-light helpers used by the motion controller every tick. All
vector functions take and return 2D numpy float arrays and never modify their
inputs.

Functions
---------
**Angle Operations**
    ssa(angle) : Produces shortest signed angle to [-pi to pi).
    rotateTowards(current, target, maxStep) : Step-capped turn (rad).
**Vector Operations**
    clampMagnitude(vector, maxLength) : Cap length, keep direction.
    moveTowards(current, target, maxDelta) : Step-capped move, no overshoot.
    normalized(vector, eps) : Unit vector or zero vector.
    quantizeDirection(vector, sectors) : Snap direction to compass sectors.
"""

from numpy.typing import NDArray
import numpy as np
import math

#-----------------------------------------------------------------------------#

# Type Aliases
NPFltArr = NDArray[np.float64]

# Lengths below this are treated as zero
EPS = 1e-9

# Relative slack when comparing a length against a clamp limit
CLAMP_TOL = 1e-12

###############################################################################

def ssa(angle:float)->float:
    """
    Compute the smallest signed angle to range [-pi, pi).

    Parameters
    ----------
    angle : float
        Angle in radians (any value).

    Returns
    -------
    ssa_angle : float
        Angle wrapped to [-pi, pi).
    """

    return (angle + math.pi) % (2 * math.pi) - math.pi

###############################################################################

def rotateTowards(current:float, target:float, maxStep:float)->float:
    """
    Turn from current toward target heading by at most maxStep (radians).

    Takes the short way around the circle and lands exactly on target when
    it is within reach. Result is wrapped with ssa().
    """

    diff = ssa(target - current)
    if (abs(diff) <= maxStep):
        return ssa(target)
    return ssa(current + math.copysign(maxStep, diff))

###############################################################################

def clampMagnitude(vector:NPFltArr, maxLength:float)->NPFltArr:
    """
    Cap the length of a vector at maxLength, preserving its direction.

    Vectors already within the limit are returned as an unchanged copy, so
    applying the clamp twice gives the same result as applying it once. The
    limit check allows a relative rounding slack of CLAMP_TOL so that a
    rescaled vector whose length lands an ulp above maxLength is accepted.
    """

    v = np.array(vector, dtype=float)
    length = math.hypot(v[0], v[1])
    if (length <= maxLength * (1.0 + CLAMP_TOL)):
        return v
    if (maxLength <= 0.0):
        return np.zeros(2)
    return v * (maxLength / length)

###############################################################################

def moveTowards(current:NPFltArr, target:NPFltArr, maxDelta:float)->NPFltArr:
    """
    Move current toward target by at most maxDelta.

    Parameters
    ----------
    current : ndarray, shape (2,)
        Starting vector.
    target : ndarray, shape (2,)
        Vector to approach.
    maxDelta : float
        Largest allowed change in length of (result - current).

    Returns
    -------
    result : ndarray, shape (2,)
        A copy of target when it lies within maxDelta, otherwise the point
        maxDelta along the straight line from current to target.

    Notes
    -----
    Returning target itself when in reach means repeated calls converge on it
    exactly instead of stalling a rounding error short.
    """

    c = np.array(current, dtype=float)
    t = np.array(target, dtype=float)
    delta = t - c
    dist = math.hypot(delta[0], delta[1])
    if ((dist <= maxDelta) or (dist == 0.0)):
        return t
    return c + delta * (maxDelta / dist)

###############################################################################

def normalized(vector:NPFltArr, eps:float=EPS)->NPFltArr:
    """Return unit vector along vector, or (0, 0) if its length is <= eps."""

    v = np.array(vector, dtype=float)
    length = math.hypot(v[0], v[1])
    if (length <= eps):
        return np.zeros(2)
    return v / length

###############################################################################

def quantizeDirection(vector:NPFltArr, sectors:int=8)->NPFltArr:
    """
    Snap the direction of vector to the nearest of equally spaced sectors.

    Length is preserved. With sectors=8 the allowed directions are the four
    axes and the four diagonals, so raw keyboard input (components -1, 0, 1)
    passes through unchanged apart from rounding.
    """

    v = np.array(vector, dtype=float)
    length = math.hypot(v[0], v[1])
    if (length <= EPS):
        return np.zeros(2)
    step = 2 * math.pi / sectors
    angle = round(math.atan2(v[1], v[0]) / step) * step
    snapped = np.array([math.cos(angle), math.sin(angle)]) * length
    # Remove cos/sin residue on the axes
    snapped[np.abs(snapped) < EPS] = 0.0
    return snapped
