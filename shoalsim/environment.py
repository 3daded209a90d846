"""
Seabed environment: procedural depth-field generation and depth queries.

Builds a bathymetric grid from layered (fBm) Perlin noise and exposes it as an
immutable, queryable surface shared by every vessel in a simulation.


Classes
-------
DepthFieldConfig
    Validated, immutable generation parameters.
DepthFieldGenerator
    Fractal noise synthesis of a depth grid from a DepthFieldConfig.
DepthField
    Immutable depth grid with point, batch and region queries.
Rect
    Grid-space rectangle used for region queries.


Notes
-----
**Depth Convention:**

Depth is positive downward, measured from the water surface to the seabed in
meters. Higher normalized noise means deeper water:

    depth = normalized * (maxDepth - minDepth) + minDepth

so a normalized value of 0 is the shallowest point (minDepth).

**Coordinate System:**

Grid cell (row, col) covers the world square

    x in [origin.x + col*worldScale, origin.x + (col+1)*worldScale)
    y in [origin.y + row*worldScale, origin.y + (row+1)*worldScale)

and the depths are stored in a flat row-major buffer at index
``row*width + col``.

**Boundary Behavior:**

Queries outside the grid are clamped to the nearest edge cell. They never
raise and never wrap around.

**Query Policy:**

depthAt() returns the depth of the cell containing the point (nearest-cell).
This produces visible steps at cell boundaries. Bilinear interpolation
between cell centres is available with ``interpolate=True`` but is not the
default because it changes what a vessel sees at cell edges.


Examples
--------
### Generate a field and query it:

>>> from shoalsim.environment import DepthFieldGenerator
>>> field = DepthFieldGenerator().generate(
...     width=256, height=256, worldScale=2.0, noiseScale=0.05,
...     octaves=4, persistence=0.5, lacunarity=2.0, maxDepth=40.0, seed=3)
>>> d = field.depthAt((120.0, 80.0))
>>> field.minDepth <= d <= field.maxDepth
True

### Regenerate with a new seed:

>>> newField = field.regenerate(seed=4)    # field itself is unchanged
"""

from dataclasses import dataclass, fields, replace
from typing import Any, Mapping, NamedTuple, Optional, Tuple, Union
from numpy.typing import NDArray
import math
import numpy as np
from shoalsim import logger
from shoalsim.errors import configFail, requireFinite
from shoalsim.noise import NoiseSampler

#-----------------------------------------------------------------------------#

# Type Aliases
NPFltArr = NDArray[np.float64]
Number = Union[int, float, np.number]
Vec2 = Union[Tuple[float, float], NPFltArr]

# Global Variables
log = logger.addLog('env')

###############################################################################

class Rect(NamedTuple):
    """Grid-space rectangle: first column, first row, columns, rows."""

    col: int
    row: int
    width: int
    height: int

###############################################################################

def _requireInt(name:str, value:Any, minimum:int)->int:
    if ((isinstance(value, bool)) or
        (not isinstance(value, (int, np.integer)))):
        configFail(log, "%s must be an integer, got %r", name, value)
    if (value < minimum):
        configFail(log, "%s must be >= %d, got %d", name, minimum, value)
    return int(value)

###############################################################################

@dataclass(frozen=True)
class DepthFieldConfig:
    """
    Generation parameters for a depth field.


    Parameters
    ----------
    mapWidth, mapHeight : int, default=512
        Grid dimensions in cells. Must be positive.
    worldScale : float, default=1.0
        World units (meters) per grid cell. Must be positive.
    noiseScale : float, default=0.1
        Frequency of the first octave in noise units per cell.
    octaves : int, default=4
        Number of noise layers, at least 1.
    persistence : float, default=0.5
        Amplitude ratio between successive octaves, in (0, 1].
    lacunarity : float, default=2.0
        Frequency ratio between successive octaves, greater than 1.
    minDepth : float, default=0.0
        Shallowest depth (m), non-negative.
    maxDepth : float, default=100.0
        Deepest depth (m), positive and greater than minDepth.
    seed : int, default=0
        Noise permutation seed.
    origin : tuple of float, default=(0.0, 0.0)
        World coordinates of the corner of cell (0, 0).


    Raises
    ------
    ConfigurationError
        Any parameter outside its valid domain.
    """

    mapWidth: int = 512
    mapHeight: int = 512
    worldScale: float = 1.0
    noiseScale: float = 0.1
    octaves: int = 4
    persistence: float = 0.5
    lacunarity: float = 2.0
    minDepth: float = 0.0
    maxDepth: float = 100.0
    seed: int = 0
    origin: Tuple[float, float] = (0.0, 0.0)

    def __post_init__(self)->None:
        for name, minimum in (('mapWidth', 1), ('mapHeight', 1),
                              ('octaves', 1), ('seed', 0)):
            object.__setattr__(self, name,
                               _requireInt(name, getattr(self, name), minimum))

        worldScale = requireFinite(log, 'worldScale', self.worldScale)
        noiseScale = requireFinite(log, 'noiseScale', self.noiseScale)
        persistence = requireFinite(log, 'persistence', self.persistence)
        lacunarity = requireFinite(log, 'lacunarity', self.lacunarity)
        minDepth = requireFinite(log, 'minDepth', self.minDepth)
        maxDepth = requireFinite(log, 'maxDepth', self.maxDepth)

        if (worldScale <= 0):
            configFail(log, "worldScale must be positive, got %s", worldScale)
        if (noiseScale <= 0):
            configFail(log, "noiseScale must be positive, got %s", noiseScale)
        if not (0 < persistence <= 1):
            configFail(log, "persistence must be in (0, 1], got %s",
                       persistence)
        if (lacunarity <= 1):
            configFail(log, "lacunarity must be greater than 1, got %s",
                       lacunarity)
        if (maxDepth <= 0):
            configFail(log, "maxDepth must be positive, got %s", maxDepth)
        if (minDepth < 0):
            configFail(log, "minDepth must be non-negative, got %s", minDepth)
        if (minDepth >= maxDepth):
            configFail(log, "minDepth (%s) must be less than maxDepth (%s)",
                       minDepth, maxDepth)

        try:
            ox, oy = self.origin
        except (TypeError, ValueError):
            configFail(log, "origin must be an (x, y) pair, got %r",
                       self.origin)
        origin = (requireFinite(log, 'origin.x', ox),
                  requireFinite(log, 'origin.y', oy))

        # Normalize numeric types on the frozen instance
        object.__setattr__(self, 'worldScale', worldScale)
        object.__setattr__(self, 'noiseScale', noiseScale)
        object.__setattr__(self, 'persistence', persistence)
        object.__setattr__(self, 'lacunarity', lacunarity)
        object.__setattr__(self, 'minDepth', minDepth)
        object.__setattr__(self, 'maxDepth', maxDepth)
        object.__setattr__(self, 'origin', origin)

    #--------------------------------------------------------------------------
    @classmethod
    def fromDict(cls, options:Mapping[str, Any])->'DepthFieldConfig':
        """Build from a mapping of option names, rejecting unknown names."""

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if (unknown):
            configFail(log, "Unrecognized depth field options: %s",
                       ', '.join(unknown))
        return cls(**options)

    #--------------------------------------------------------------------------
    @property
    def amplitudeSum(self)->float:
        """Sum of the octave amplitudes used for fBm normalization."""
        return sum(self.persistence**i for i in range(self.octaves))

###############################################################################

class DepthFieldGenerator:
    """
    Fractal (fBm) synthesis of depth grids from Perlin noise.

    Stateless apart from a cache of noise samplers keyed by seed. Every call
    validates its parameters before allocating anything and either returns a
    complete DepthField or raises ConfigurationError.


    Methods
    -------
    generate(width, height, worldScale, noiseScale, octaves, persistence,
             lacunarity, maxDepth, minDepth, seed, origin) :
        Validate parameters and build a DepthField.
    generateFromConfig(config) :
        Build a DepthField from an existing DepthFieldConfig.
    normalizedNoise(config) :
        The [0, 1] fBm array before depth scaling, shape (height, width).


    Notes
    -----
    For cell (x=col, y=row) the octave sum is

        sum_i noise(x*f_i, y*f_i) * a_i,   f_0 = noiseScale, a_0 = 1
        f_{i+1} = f_i * lacunarity,        a_{i+1} = a_i * persistence

    divided by sum_i a_i. Each octave sample is in [0, 1], so the weighted
    mean stays in [0, 1] for any octave count, and a single octave reproduces
    the raw noise sample exactly.
    """

    def __init__(self)->None:
        self._samplers = {}

    #--------------------------------------------------------------------------
    def generate(self,
                 width:int,
                 height:int,
                 worldScale:float,
                 noiseScale:float,
                 octaves:int,
                 persistence:float,
                 lacunarity:float,
                 maxDepth:float,
                 minDepth:float = 0.0,
                 seed:int = 0,
                 origin:Tuple[float, float] = (0.0, 0.0),
                 )->'DepthField':
        """
        Generate a depth field.

        Parameters
        ----------
        width, height : int
            Grid dimensions in cells.
        worldScale : float
            World units per cell.
        noiseScale : float
            First-octave frequency.
        octaves : int
            Number of octaves (>= 1).
        persistence : float
            Amplitude decay per octave, in (0, 1].
        lacunarity : float
            Frequency growth per octave, > 1.
        maxDepth : float
            Deepest value in meters.
        minDepth : float, default=0.0
            Shallowest value in meters.
        seed : int, default=0
            Noise seed.
        origin : tuple of float, default=(0, 0)
            World coordinates of cell (0, 0).

        Returns
        -------
        field : DepthField
            New immutable depth field.

        Raises
        ------
        ConfigurationError
            Invalid dimensions or parameters.
        """

        config = DepthFieldConfig(mapWidth=width,
                                  mapHeight=height,
                                  worldScale=worldScale,
                                  noiseScale=noiseScale,
                                  octaves=octaves,
                                  persistence=persistence,
                                  lacunarity=lacunarity,
                                  minDepth=minDepth,
                                  maxDepth=maxDepth,
                                  seed=seed,
                                  origin=origin)
        return self.generateFromConfig(config)

    #--------------------------------------------------------------------------
    def generateFromConfig(self, config:DepthFieldConfig)->'DepthField':
        """Generate a depth field from a validated configuration."""

        if (not isinstance(config, DepthFieldConfig)):
            raise TypeError(f"expected DepthFieldConfig, got {type(config)}")

        log.debug('Generating %dx%d depth field: noiseScale=%s octaves=%d '
                  'persistence=%s lacunarity=%s seed=%d',
                  config.mapWidth, config.mapHeight, config.noiseScale,
                  config.octaves, config.persistence, config.lacunarity,
                  config.seed)

        normalized = self.normalizedNoise(config)
        zRange = config.maxDepth - config.minDepth
        depth = np.clip(normalized * zRange + config.minDepth,
                        config.minDepth, config.maxDepth)

        field = DepthField(depth.ravel(),
                           width=config.mapWidth,
                           height=config.mapHeight,
                           worldScale=config.worldScale,
                           origin=config.origin,
                           minDepth=config.minDepth,
                           maxDepth=config.maxDepth,
                           config=config)
        log.info('Depth field %dx%d ready, depth %.2f to %.2f m',
                 field.width, field.height,
                 float(depth.min()), float(depth.max()))
        return field

    #--------------------------------------------------------------------------
    def normalizedNoise(self, config:DepthFieldConfig)->NPFltArr:
        """
        Return the normalized fBm array in [0, 1], shape (height, width).
        """

        sampler = self.sampler(config.seed)
        x, y = np.meshgrid(np.arange(config.mapWidth, dtype=float),
                           np.arange(config.mapHeight, dtype=float))

        total = np.zeros((config.mapHeight, config.mapWidth))
        amp = 1.0
        freq = config.noiseScale
        ampSum = 0.0
        for _ in range(config.octaves):
            total += sampler(x * freq, y * freq) * amp
            ampSum += amp
            amp *= config.persistence
            freq *= config.lacunarity

        return np.clip(total / ampSum, 0.0, 1.0)

    #--------------------------------------------------------------------------
    def sampler(self, seed:int)->NoiseSampler:
        """Return the cached NoiseSampler for seed."""

        if (seed not in self._samplers):
            self._samplers[seed] = NoiseSampler(seed)
        return self._samplers[seed]

###############################################################################

class DepthField:
    """
    Immutable bathymetric grid with depth queries.


    Parameters
    ----------
    depths : array_like
        Either a flat sequence of width*height depths in row-major order or a
        (height, width) array.
    width, height : int
        Grid dimensions.
    worldScale : float, default=1.0
        World units per cell.
    origin : tuple of float, default=(0, 0)
        World coordinates of the corner of cell (0, 0).
    minDepth, maxDepth : float, optional
        Normalization range. Default to the data extremes. Every depth must
        lie inside [minDepth, maxDepth].
    config : DepthFieldConfig, optional
        Parameters the field was generated from, used by regenerate().


    Attributes
    ----------
    width, height : int
        Grid dimensions in cells.
    worldScale : float
        World units per cell.
    origin : tuple of float
        World coordinates of the grid corner.
    minDepth, maxDepth : float
        Depth range (m).
    depths : ndarray, shape (width*height,)
        Read-only flat row-major depth buffer.
    grid : ndarray, shape (height, width)
        Read-only 2D view of the same buffer.
    config : DepthFieldConfig or None
        Generation parameters.


    Methods
    -------
    __call__(x, y) :
        Shorthand for depthAt((x, y)).
    depthAt(position, interpolate) :
        Depth at a world position.
    xy2Index(x, y) :
        Clamped (row, col) of the cell containing a world point.
    sample_points(x, y) :
        Vectorized nearest-cell depths.
    regionDepths(rect) :
        Read-only sub-grid for a grid-space rectangle.
    sample_region(xBounds, yBounds) :
        Read-only sub-grid for world-space bounds, endpoints inclusive.
    regenerate(**changes) :
        New DepthField from this field's config with fields replaced.
    isBeached(position, profile), canNavigate(position, profile),
    clearanceAt(position, profile) :
        Depth checks against a vessel profile.


    Notes
    -----
    The buffer is flagged non-writeable and every array handed out is a view
    of it, so consumers can read without copying but cannot alter the field.
    Replacing a field means building a new one; holders of the old instance
    keep a valid snapshot.
    """

    ## Constructor ===========================================================#
    def __init__(self,
                 depths:Any,
                 width:int,
                 height:int,
                 worldScale:float = 1.0,
                 origin:Tuple[float, float] = (0.0, 0.0),
                 minDepth:Optional[float] = None,
                 maxDepth:Optional[float] = None,
                 config:Optional[DepthFieldConfig] = None,
                 )->None:
        width = _requireInt('width', width, 1)
        height = _requireInt('height', height, 1)
        worldScale = requireFinite(log, 'worldScale', worldScale)
        if (worldScale <= 0):
            configFail(log, "worldScale must be positive, got %s", worldScale)

        buf = np.array(depths, dtype=float).ravel()
        if (buf.size != width * height):
            configFail(log, "Expected %d depth values for %dx%d grid, got %d",
                       width * height, width, height, buf.size)
        if (not np.all(np.isfinite(buf))):
            configFail(log, "Depth values must be finite")

        lo = float(buf.min()) if (minDepth is None) else \
            requireFinite(log, 'minDepth', minDepth)
        hi = float(buf.max()) if (maxDepth is None) else \
            requireFinite(log, 'maxDepth', maxDepth)
        if (lo > hi):
            configFail(log, "minDepth (%s) must not exceed maxDepth (%s)",
                       lo, hi)
        if ((buf.min() < lo) or (buf.max() > hi)):
            configFail(log, "Depth values outside [%s, %s]", lo, hi)

        try:
            ox, oy = origin
        except (TypeError, ValueError):
            configFail(log, "origin must be an (x, y) pair, got %r", origin)
        buf.setflags(write=False)

        self._depths = buf
        self._width = width
        self._height = height
        self._worldScale = worldScale
        self._origin = (requireFinite(log, 'origin.x', ox),
                        requireFinite(log, 'origin.y', oy))
        self._minDepth = lo
        self._maxDepth = hi
        self._config = config

    #--------------------------------------------------------------------------
    @classmethod
    def uniform(cls,
                width:int,
                height:int,
                depth:float,
                worldScale:float = 1.0,
                origin:Tuple[float, float] = (0.0, 0.0),
                )->'DepthField':
        """Field with the same depth in every cell."""

        return cls(np.full(width * height, float(depth)), width, height,
                   worldScale=worldScale, origin=origin,
                   minDepth=depth, maxDepth=depth)

    ## Properties ============================================================#
    @property
    def width(self)->int:
        """Grid width in cells."""
        return self._width

    @property
    def height(self)->int:
        """Grid height in cells."""
        return self._height

    @property
    def worldScale(self)->float:
        """World units per grid cell."""
        return self._worldScale

    @property
    def origin(self)->Tuple[float, float]:
        """World coordinates of the corner of cell (0, 0)."""
        return self._origin

    @property
    def minDepth(self)->float:
        return self._minDepth

    @property
    def maxDepth(self)->float:
        return self._maxDepth

    @property
    def config(self)->Optional[DepthFieldConfig]:
        return self._config

    @property
    def depths(self)->NPFltArr:
        """Read-only flat row-major buffer."""
        return self._depths

    @property
    def grid(self)->NPFltArr:
        """Read-only (height, width) view of the depth buffer."""
        return self._depths.reshape(self._height, self._width)

    @property
    def extent(self)->Tuple[float, float, float, float]:
        """World bounds [xmin, xmax, ymin, ymax] covered by the grid."""
        ox, oy = self._origin
        return (ox, ox + self._width * self._worldScale,
                oy, oy + self._height * self._worldScale)

    ## Special Methods =======================================================#
    def __call__(self, x:Number, y:Number)->float:
        """Return depth at (x, y) world coordinates."""
        return self.depthAt((x, y))

    #--------------------------------------------------------------------------
    def __repr__(self)->str:
        return (
            f"{self.__class__.__name__}("
            f"width={self.width}, "
            f"height={self.height}, "
            f"worldScale={self.worldScale}, "
            f"origin={self.origin}, "
            f"minDepth={self.minDepth}, "
            f"maxDepth={self.maxDepth})"
        )

    #--------------------------------------------------------------------------
    def __str__(self)->str:
        cw = 16
        out = (
            f"Depth Field\n"
            f"{' Size:':{cw}} {self.width} x {self.height} cells\n"
            f"{' Cell:':{cw}} {self.worldScale} m\n"
            f"{' Origin:':{cw}} {self.origin}\n"
            f"{' Depth:':{cw}} {self.minDepth} to {self.maxDepth} m\n"
        )
        if (self.config is not None):
            out += (
                f"{' Noise scale:':{cw}} {self.config.noiseScale}\n"
                f"{' Octaves:':{cw}} {self.config.octaves}\n"
                f"{' Persistence:':{cw}} {self.config.persistence}\n"
                f"{' Lacunarity:':{cw}} {self.config.lacunarity}\n"
                f"{' Seed:':{cw}} {self.config.seed}\n"
            )
        return out

    ## Methods ===============================================================#
    def xy2Index(self, x:Number, y:Number)->Tuple[int, int]:
        """
        Transform world coordinates to clamped array indices.

        Parameters
        ----------
        x, y : float
            World coordinates.

        Returns
        -------
        (row, col) : tuple of int
            Indices of the cell containing (x, y), clamped to the grid.
            Non-finite coordinates clamp like very large values; NaN maps to
            the first cell.
        """

        gx, gy = self._toGrid(x, y)
        col = int(np.clip(np.floor(gx), 0, self._width - 1))
        row = int(np.clip(np.floor(gy), 0, self._height - 1))
        return row, col

    #--------------------------------------------------------------------------
    def depthAt(self, position:Vec2, interpolate:bool=False)->float:
        """
        Depth at a world-space position.

        Parameters
        ----------
        position : (x, y)
            World coordinates.
        interpolate : bool, default=False
            If False, return the depth of the containing cell. If True,
            bilinearly interpolate between the four nearest cell centres
            (clamped at the edges).

        Returns
        -------
        depth : float
            Depth in meters, always within [minDepth, maxDepth].
        """

        x, y = position[0], position[1]
        if (not interpolate):
            row, col = self.xy2Index(x, y)
            return float(self._depths[row * self._width + col])

        # Cell centres sit at half-cell offsets
        gx, gy = self._toGrid(x, y)
        fx = float(np.clip(gx - 0.5, 0, self._width - 1))
        fy = float(np.clip(gy - 0.5, 0, self._height - 1))
        c0, r0 = int(math.floor(fx)), int(math.floor(fy))
        c1, r1 = min(c0 + 1, self._width - 1), min(r0 + 1, self._height - 1)
        tx, ty = fx - c0, fy - r0

        d = self._depths
        w = self._width
        top = d[r0 * w + c0] + tx * (d[r0 * w + c1] - d[r0 * w + c0])
        bot = d[r1 * w + c0] + tx * (d[r1 * w + c1] - d[r1 * w + c0])
        value = top + ty * (bot - top)
        return float(np.clip(value, self._minDepth, self._maxDepth))

    #--------------------------------------------------------------------------
    def sample_points(self, x:Any, y:Any)->NPFltArr:
        """
        Nearest-cell depths at a list of world points (x_i, y_i).

        Returns an array with the broadcast shape of x and y.
        """

        gx, gy = self._toGrid(np.asarray(x, dtype=float),
                              np.asarray(y, dtype=float))
        cols = np.clip(np.floor(gx), 0, self._width - 1).astype(np.int64)
        rows = np.clip(np.floor(gy), 0, self._height - 1).astype(np.int64)
        return self._depths[rows * self._width + cols]

    #--------------------------------------------------------------------------
    def regionDepths(self, rect:Rect)->NPFltArr:
        """
        Read-only sub-grid for a grid-space rectangle.

        Parameters
        ----------
        rect : Rect or tuple
            (col, row, width, height) in cells. Parts outside the grid are
            cut off; a rectangle entirely outside gives an empty array.

        Returns
        -------
        region : ndarray, shape (rows, cols)
            Non-writeable view; assigning into it raises ValueError.
        """

        col, row, w, h = (int(v) for v in rect)
        c0 = min(max(col, 0), self._width)
        r0 = min(max(row, 0), self._height)
        c1 = min(max(col + max(w, 0), c0), self._width)
        r1 = min(max(row + max(h, 0), r0), self._height)
        return self.grid[r0:r1, c0:c1]

    #--------------------------------------------------------------------------
    def sample_region(self, xBounds:Any, yBounds:Any)->NPFltArr:
        """
        Read-only sub-grid covering world bounds [xmin, xmax], [ymin, ymax].

        Endpoints are inclusive: both boundary cells are part of the result.
        Bounds outside the grid are clamped.
        """

        xmin, xmax = xBounds[0], xBounds[1]
        ymin, ymax = yBounds[0], yBounds[1]
        r0, c0 = self.xy2Index(xmin, ymin)
        r1, c1 = self.xy2Index(xmax, ymax)
        c0, c1 = min(c0, c1), max(c0, c1)
        r0, r1 = min(r0, r1), max(r0, r1)
        return self.regionDepths(Rect(c0, r0, c1 - c0 + 1, r1 - r0 + 1))

    #--------------------------------------------------------------------------
    def regenerate(self, **changes:Any)->'DepthField':
        """
        Build a new DepthField from this field's config with changes applied.

        Parameters
        ----------
        **changes
            DepthFieldConfig fields to replace (e.g. seed=5, octaves=6).

        Returns
        -------
        field : DepthField
            Brand-new instance. This instance is not modified.

        Raises
        ------
        ConfigurationError
            Unknown option name, invalid value, or a field built without
            generation parameters.
        """

        if (self._config is None):
            configFail(log, "Depth field has no generation parameters to "
                            "regenerate from")
        known = {f.name for f in fields(DepthFieldConfig)}
        unknown = sorted(set(changes) - known)
        if (unknown):
            configFail(log, "Unrecognized depth field options: %s",
                       ', '.join(unknown))
        log.info('Regenerating depth field with %s', changes or 'same config')
        return DepthFieldGenerator().generateFromConfig(
            replace(self._config, **changes))

    #--------------------------------------------------------------------------
    def isBeached(self, position:Vec2, profile:Any)->bool:
        """True if the depth at position is less than the vessel clearance."""
        return self.depthAt(position) < profile.requiredClearance()

    #--------------------------------------------------------------------------
    def canNavigate(self, position:Vec2, profile:Any)->bool:
        """True if a vessel with profile can float at position."""
        return not self.isBeached(position, profile)

    #--------------------------------------------------------------------------
    def clearanceAt(self, position:Vec2, profile:Any)->float:
        """Water under the keel beyond the required clearance (m)."""
        return self.depthAt(position) - profile.requiredClearance()

    ## Helper Methods ========================================================#
    def _toGrid(self, x:Any, y:Any)->Tuple[Any, Any]:
        """Continuous grid coordinates with NaN and inf made clampable."""

        big = float(max(self._width, self._height)) + 1.0
        gx = (np.asarray(x, dtype=float) - self._origin[0]) / self._worldScale
        gy = (np.asarray(y, dtype=float) - self._origin[1]) / self._worldScale
        gx = np.nan_to_num(gx, nan=0.0, posinf=big, neginf=-big)
        gy = np.nan_to_num(gy, nan=0.0, posinf=big, neginf=-big)
        return gx, gy
