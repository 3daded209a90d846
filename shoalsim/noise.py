"""
Seeded 2D Perlin gradient noise.

Classes
-------
NoiseSampler
    Maps continuous (x, y) coordinates to a coherent scalar in [0, 1].


Notes
-----
The sampler is a pure function of its seed: the only state is the permutation
table built once from ``numpy.random.default_rng(seed)``. Evaluating the same
coordinates with the same seed always gives the same value, independent of
call order or how the coordinates are batched into arrays.

Lattice points (integer x and y) always evaluate to exactly 0.5, which is a
property of gradient noise and not a bug.


References
----------
[1] Perlin, K. (2002). "Improving Noise." ACM SIGGRAPH 2002.
"""

from typing import Union
from numpy.typing import NDArray
import numpy as np
from shoalsim import logger
from shoalsim.errors import configFail

#-----------------------------------------------------------------------------#

# Type Aliases
NPFltArr = NDArray[np.float64]
NPIntArr = NDArray[np.int_]
Number = Union[int, float, np.number]

# Global Variables
log = logger.addLog('noise')

# Unit gradients selected by hash % 4
GRADIENTS = np.array([[0, 1], [0, -1], [1, 0], [-1, 0]], dtype=float)

###############################################################################

class NoiseSampler:
    """
    2D Perlin noise sampler with values normalized to [0, 1].


    Parameters
    ----------
    seed : int, default=0
        Non-negative PRNG seed for the permutation table. seed=0 is valid.


    Attributes
    ----------
    seed : int
        Seed used to build the permutation table.
    p : ndarray of int, shape (512,)
        Shuffled 0..255 permutation, repeated twice so corner hashes never
        need a wrap.


    Methods
    -------
    __call__(x, y) :
        Sample noise in [0, 1]. Scalars in, float out; arrays in, array out.
    perlin2D(x, y) :
        Raw single-octave Perlin noise in [-1, 1].


    Examples
    --------
    >>> sampler = NoiseSampler(seed=7)
    >>> value = sampler(0.35, 1.2)      # float in [0, 1]
    >>> sampler(3, 4)                   # lattice point
    0.5
    >>> sampler(np.array([0.1, 0.2]), np.array([0.0, 0.0])).shape
    (2,)
    """

    ## Constructor ===========================================================#
    def __init__(self, seed:int=0)->None:
        if ((isinstance(seed, bool)) or
            (not isinstance(seed, (int, np.integer))) or (seed < 0)):
            configFail(log, "Noise seed must be a non-negative integer, got %r",
                       seed)
        self.seed = int(seed)
        self.p = self._get_permutation_table()

    ## Special Methods =======================================================#
    def __call__(self,
                 x:Union[Number, NPFltArr],
                 y:Union[Number, NPFltArr],
                 )->Union[float, NPFltArr]:
        """Sample noise at (x, y), mapped from [-1, 1] into [0, 1]."""

        n = np.clip((self.perlin2D(x, y) + 1.0) * 0.5, 0.0, 1.0)
        if (n.ndim == 0):
            return float(n)
        return n

    #--------------------------------------------------------------------------
    def __repr__(self)->str:
        return f"{self.__class__.__name__}(seed={self.seed})"

    ## Methods ===============================================================#
    def perlin2D(self,
                 x:Union[Number, NPFltArr],
                 y:Union[Number, NPFltArr],
                 )->NPFltArr:
        """
        Compute raw single-octave Perlin noise at (x, y).

        Parameters
        ----------
        x, y : float or ndarray
            Coordinates in noise space. Arrays must broadcast together.

        Returns
        -------
        n : ndarray
            Noise values in [-1, 1], 0-d for scalar input.

        Notes
        -----
        Lattice coordinates use floor() rather than truncation so negative
        inputs land in the correct cell, and are wrapped with ``& 255`` onto
        the permutation table.
        """

        x = np.asarray(x, dtype=float)
        y = np.asarray(y, dtype=float)

        # Grid cell corners and smooth interpolation weights
        x0, y0 = np.floor(x), np.floor(y)
        xi = x0.astype(np.int64) & 255
        yi = y0.astype(np.int64) & 255
        xf, yf = x - x0, y - y0
        u, v = self._fade(xf), self._fade(yf)

        # Noise components at the four corners
        p = self.p
        n00 = self._gradient(p[p[xi    ] + yi    ], xf    , yf    )
        n01 = self._gradient(p[p[xi    ] + yi + 1], xf    , yf - 1)
        n10 = self._gradient(p[p[xi + 1] + yi    ], xf - 1, yf    )
        n11 = self._gradient(p[p[xi + 1] + yi + 1], xf - 1, yf - 1)

        x1 = self._lerp(n00, n10, u)
        x2 = self._lerp(n01, n11, u)
        return self._lerp(x1, x2, v)

    ## Helper Methods ========================================================#
    def _get_permutation_table(self)->NPIntArr:
        """Shuffle 0..255 with the seeded generator and repeat it twice."""

        rng = np.random.default_rng(seed=self.seed)
        p = np.arange(256, dtype=np.int64)
        rng.shuffle(p)
        return np.concatenate([p, p])

    #--------------------------------------------------------------------------
    @staticmethod
    def _fade(t:NPFltArr)->NPFltArr:
        """Improved Perlin fade curve 6t^5 - 15t^4 + 10t^3."""

        return t * t * t * (t * (t * 6 - 15) + 10)

    #--------------------------------------------------------------------------
    @staticmethod
    def _gradient(h:NPIntArr, xf:NPFltArr, yf:NPFltArr)->NPFltArr:
        """Dot product of the hashed corner gradient with the offset (xf, yf)."""

        g = GRADIENTS[h % 4]
        return (g[..., 0] * xf) + (g[..., 1] * yf)

    #--------------------------------------------------------------------------
    @staticmethod
    def _lerp(a:NPFltArr, b:NPFltArr, x:NPFltArr)->NPFltArr:
        return a + x * (b - a)
