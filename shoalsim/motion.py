"""
Vessel motion model with depth-based grounding.

Turns a per-tick 2D input vector into acceleration-limited velocity and
position, and switches a vessel between the Free and Grounded states by
comparing the water depth under it with the clearance its profile requires.


Classes
-------
MotionConfig
    Validated, immutable tuning parameters.
MotionState
    Per-vessel simulation state owned by a MotionController.
MotionStatus
    Free / Grounded.
MotionEvent
    Transition notifications: GROUNDED, UNGROUNDED.
MotionController
    Tick-driven state machine for one vessel.


Notes
-----
**Tick Sequence:**

Each call to MotionController.advance(input, dt):

1. Clamps the input to unit length, keeping its direction. With
   snapDirections the direction is then snapped to the nearest of 8.
2. Checks grounding at the current position. A vessel found Grounded here
   has its target reduced by beachedSpeedMultiplier in this same tick.
3. Targets input * moveSpeed, reduced when Grounded.
4. Accelerates toward the target (input above deadzone) or decelerates
   toward rest, never stepping further than rate * dt.
5. Caps the speed at maxSpeed and integrates position.
6. Re-checks grounding at the new position.

Without a depth field or profile both checks are skipped and grounding only
changes through setGrounded(). With depth data, a state forced by
setGrounded() holds until the check at the start of the next tick.

**Events:**

Transitions are returned from advance() and also delivered synchronously to
subscribed callbacks, in subscription order, before advance() returns. A
tick can produce one transition per check; listeners receive both in order
and advance() returns the later one.
"""

from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union
from numpy.typing import NDArray
import math
import numpy as np
from shoalsim import gnc
from shoalsim import logger
from shoalsim.environment import DepthField
from shoalsim.errors import configFail, requireFinite
from shoalsim.vessels import VesselProfile

#-----------------------------------------------------------------------------#

# Type Aliases
NPFltArr = NDArray[np.float64]
Vec2 = Union[Tuple[float, float], NPFltArr]

# Global Variables
log = logger.addLog('motion')

# Navigation warnings
WARN_BEACHED = "BEACHED - Move to deeper water!"
WARN_SHALLOW = "SHALLOW WATER - Proceed with caution!"
SHALLOW_FACTOR = 1.5            # warn below this multiple of the clearance

###############################################################################

class MotionStatus(Enum):
    FREE = 'free'
    GROUNDED = 'grounded'

###############################################################################

class MotionEvent(Enum):
    GROUNDED = 'grounded'
    UNGROUNDED = 'ungrounded'

###############################################################################

@dataclass(frozen=True)
class MotionConfig:
    """
    Tuning parameters for a MotionController.


    Parameters
    ----------
    moveSpeed : float, default=5.0
        Target speed at full input (m/s).
    rotationSpeed : float, default=180.0
        Maximum heading turn rate (deg/s).
    acceleration : float, default=10.0
        Velocity change per second while input is held (m/s^2).
    deceleration : float, default=15.0
        Velocity change per second while coasting to rest (m/s^2).
    maxSpeed : float, default=8.0
        Hard speed cap (m/s).
    beachedSpeedMultiplier : float, default=0.2
        Target speed factor while grounded, in (0, 1].
    eightDirectionalMovement : bool, default=True
        Normalize diagonal input so two held axes are no faster than one.
        Input longer than 1 is always clamped to unit length with its
        direction kept, so either value gives the same motion; the option is
        carried for hosts that configure it.
    snapDirections : bool, default=False
        Snap the input direction to the 4 axes and 4 diagonals after
        clamping (magnitude kept).
    deadzone : float, default=0.1
        Input magnitude at or below which the vessel coasts, in [0, 1).


    Raises
    ------
    ConfigurationError
        Negative or non-finite rates, multiplier outside (0, 1], deadzone
        outside [0, 1), or a non-boolean eightDirectionalMovement or
        snapDirections.
    """

    moveSpeed: float = 5.0
    rotationSpeed: float = 180.0
    acceleration: float = 10.0
    deceleration: float = 15.0
    maxSpeed: float = 8.0
    beachedSpeedMultiplier: float = 0.2
    eightDirectionalMovement: bool = True
    deadzone: float = 0.1
    snapDirections: bool = False

    def __post_init__(self)->None:
        for name in ('moveSpeed', 'rotationSpeed', 'acceleration',
                     'deceleration', 'maxSpeed'):
            value = requireFinite(log, name, getattr(self, name))
            if (value < 0):
                configFail(log, "%s must be non-negative, got %s", name, value)
            object.__setattr__(self, name, value)

        mult = requireFinite(log, 'beachedSpeedMultiplier',
                             self.beachedSpeedMultiplier)
        if not (0 < mult <= 1):
            configFail(log, "beachedSpeedMultiplier must be in (0, 1], got %s",
                       mult)
        object.__setattr__(self, 'beachedSpeedMultiplier', mult)

        deadzone = requireFinite(log, 'deadzone', self.deadzone)
        if not (0 <= deadzone < 1):
            configFail(log, "deadzone must be in [0, 1), got %s", deadzone)
        object.__setattr__(self, 'deadzone', deadzone)

        for name in ('eightDirectionalMovement', 'snapDirections'):
            value = getattr(self, name)
            if (not isinstance(value, (bool, np.bool_))):
                configFail(log, "%s must be a bool, got %r", name, value)
            object.__setattr__(self, name, bool(value))

    #--------------------------------------------------------------------------
    @classmethod
    def fromDict(cls, options:Mapping[str, Any])->'MotionConfig':
        """Build from a mapping of option names, rejecting unknown names."""

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if (unknown):
            configFail(log, "Unrecognized motion options: %s",
                       ', '.join(unknown))
        return cls(**options)

###############################################################################

@dataclass
class MotionState:
    """
    Mutable per-vessel state. Only its MotionController writes to it.

    position and velocity are world-frame (x, y) arrays; heading is in degrees
    counter-clockwise from +x, in [-180, 180).
    """

    position: NPFltArr = field(default_factory=lambda: np.zeros(2))
    velocity: NPFltArr = field(default_factory=lambda: np.zeros(2))
    speed: float = 0.0
    isGrounded: bool = False
    heading: float = 0.0

    def copy(self)->'MotionState':
        return replace(self,
                       position=self.position.copy(),
                       velocity=self.velocity.copy())

###############################################################################

Listener = Callable[['MotionController', MotionEvent], Any]

class MotionController:
    """
    Per-vessel motion and grounding state machine.


    Parameters
    ----------
    config : MotionConfig, optional
        Tuning parameters. Defaults to MotionConfig().
    depthField : DepthField, optional
        Shared seabed. Without one, grounding only changes via setGrounded().
    profile : VesselProfile, optional
        Shared boat class. Without one, grounding only changes via
        setGrounded().
    position : (x, y), default=(0, 0)
        Starting world position.
    heading : float, default=0.0
        Starting heading in degrees.
    name : str, default='Vessel'
        Label used in log messages.
    **options
        Individual MotionConfig fields overriding those in config, e.g.
        ``MotionController(moveSpeed=4, maxSpeed=6)``.


    Raises
    ------
    ConfigurationError
        Invalid or unrecognized configuration, or a non-finite position.


    Examples
    --------
    >>> field = DepthField.uniform(64, 64, depth=10.0)
    >>> boat = MotionController(depthField=field,
    ...                         profile=VesselProfile(draft=1.5))
    >>> boat.advance((1, 0), 0.1)
    >>> round(boat.speed(), 3)
    1.0
    """

    ## Constructor ===========================================================#
    def __init__(self,
                 config:Optional[MotionConfig] = None,
                 depthField:Optional[DepthField] = None,
                 profile:Optional[VesselProfile] = None,
                 position:Vec2 = (0.0, 0.0),
                 heading:float = 0.0,
                 name:str = 'Vessel',
                 **options:Any,
                 )->None:
        base = MotionConfig() if (config is None) else config
        if (options):
            base = MotionConfig.fromDict({**asdict(base), **options})

        px = requireFinite(log, 'position.x', position[0])
        py = requireFinite(log, 'position.y', position[1])
        hdg = requireFinite(log, 'heading', heading)

        self.name = name
        self._config = base
        self.depthField = depthField                # non-owning reference
        self.profile = profile                      # non-owning reference
        self._state = MotionState(position=np.array([px, py]),
                                  heading=math.degrees(
                                      gnc.ssa(math.radians(hdg))))
        self._listeners: List[Listener] = []

        log.debug('%s: created with %s', self.name, self._config)

    ## Properties ============================================================#
    @property
    def config(self)->MotionConfig:
        """Tuning parameters (immutable)."""
        return self._config

    @property
    def state(self)->MotionState:
        """Snapshot copy of the current state."""
        return self._state.copy()

    @property
    def position(self)->NPFltArr:
        return self._state.position.copy()

    @property
    def currentVelocity(self)->NPFltArr:
        return self._state.velocity.copy()

    @property
    def currentSpeed(self)->float:
        return self._state.speed

    @property
    def heading(self)->float:
        """Heading in degrees, counter-clockwise from +x."""
        return self._state.heading

    @property
    def isGrounded(self)->bool:
        return self._state.isGrounded

    @property
    def status(self)->MotionStatus:
        if (self._state.isGrounded):
            return MotionStatus.GROUNDED
        return MotionStatus.FREE

    ## Special Methods =======================================================#
    def __repr__(self)->str:
        return f"<{self.__class__.__name__} {self.name} at {hex(id(self))}>"

    #--------------------------------------------------------------------------
    def __str__(self)->str:
        x, y = self._state.position
        return (f"{self.name}: pos ({x:.2f}, {y:.2f}) speed "
                f"{self._state.speed:.2f} m/s {self.status.value}")

    ## Methods ===============================================================#
    def advance(self, inputVector:Vec2, deltaTime:float)->Optional[MotionEvent]:
        """
        Advance the vessel by one simulation tick.

        Parameters
        ----------
        inputVector : (x, y)
            Raw directional input, nominally in [-1, 1] per axis. Longer
            vectors are clamped to unit length; non-finite components count
            as zero.
        deltaTime : float
            Tick length in seconds. Zero, negative or non-finite values make
            the call a no-op.

        Returns
        -------
        event : MotionEvent or None
            The grounding transition produced by this tick, if any. When both
            checks report a transition, the one at the new position.
        """

        try:
            dt = float(deltaTime)
        except (TypeError, ValueError):
            return None
        if (not (math.isfinite(dt) and (dt > 0))):
            return None

        cfg = self._config
        st = self._state

        # Input: finite and unit-capped with direction kept
        raw = np.nan_to_num(np.asarray(inputVector, dtype=float).ravel()[:2],
                            nan=0.0, posinf=0.0, neginf=0.0)
        if (raw.size < 2):
            raw = np.zeros(2)
        direction = gnc.clampMagnitude(raw, 1.0)
        if (cfg.snapDirections):
            direction = gnc.quantizeDirection(direction)
        inputMag = math.hypot(direction[0], direction[1])

        # Grounding at the start position decides this tick's penalty
        startEvent = self._updateGrounding()
        if (startEvent is not None):
            self._dispatch(startEvent)

        # Target velocity with beaching penalty
        target = direction * cfg.moveSpeed
        if (st.isGrounded):
            target = target * cfg.beachedSpeedMultiplier

        # Step-capped acceleration / deceleration
        if (inputMag > cfg.deadzone):
            velocity = gnc.moveTowards(st.velocity, target,
                                       cfg.acceleration * dt)
        else:
            velocity = gnc.moveTowards(st.velocity, np.zeros(2),
                                       cfg.deceleration * dt)

        st.velocity = self.clampSpeed(velocity)
        st.speed = math.hypot(st.velocity[0], st.velocity[1])
        st.position = st.position + st.velocity * dt

        # Turn toward the commanded direction
        if (inputMag > cfg.deadzone):
            goal = math.atan2(direction[1], direction[0])
            psi = gnc.rotateTowards(math.radians(st.heading), goal,
                                    math.radians(cfg.rotationSpeed) * dt)
            st.heading = math.degrees(psi)

        event = self._updateGrounding()
        if (event is not None):
            self._dispatch(event)
            return event
        return startEvent

    #--------------------------------------------------------------------------
    def clampSpeed(self, velocity:Vec2)->NPFltArr:
        """Return velocity with its magnitude capped at maxSpeed."""
        return gnc.clampMagnitude(velocity, self._config.maxSpeed)

    #--------------------------------------------------------------------------
    def speed(self)->float:
        """Current speed (m/s)."""
        return self._state.speed

    #--------------------------------------------------------------------------
    def movementDirection(self)->NPFltArr:
        """Unit vector along the current velocity, (0, 0) when at rest."""
        return gnc.normalized(self._state.velocity)

    #--------------------------------------------------------------------------
    def isMoving(self)->bool:
        """True when speed exceeds the input deadzone."""
        return self._state.speed > self._config.deadzone

    #--------------------------------------------------------------------------
    def setGrounded(self, grounded:bool)->None:
        """
        Force the grounding state for scripted events.

        No event is emitted. With depth data, the check at the start of the
        next tick reports any transition relative to the forced state.
        """

        grounded = bool(grounded)
        if (grounded != self._state.isGrounded):
            log.info('%s: grounding forced %s', self.name,
                     'on' if grounded else 'off')
        self._state.isGrounded = grounded

    #--------------------------------------------------------------------------
    def canMoveTo(self, position:Vec2)->bool:
        """True if the vessel could float at position (always, without data)."""

        if ((self.depthField is None) or (self.profile is None)):
            return True
        return self.depthField.canNavigate(position, self.profile)

    #--------------------------------------------------------------------------
    def navigationWarning(self)->str:
        """Human-readable warning for the current position, '' if none."""

        if (self._state.isGrounded):
            return WARN_BEACHED
        if ((self.depthField is not None) and (self.profile is not None)):
            depth = self.depthField.depthAt(self._state.position)
            if (depth < self.profile.requiredClearance() * SHALLOW_FACTOR):
                return WARN_SHALLOW
        return ""

    #--------------------------------------------------------------------------
    def subscribe(self, callback:Listener)->None:
        """Register callback(controller, event) for grounding transitions."""
        self._listeners.append(callback)

    #--------------------------------------------------------------------------
    def unsubscribe(self, callback:Listener)->None:
        """Remove a registered callback. Unknown callbacks are ignored."""
        if (callback in self._listeners):
            self._listeners.remove(callback)

    ## Helper Methods ========================================================#
    def _updateGrounding(self)->Optional[MotionEvent]:
        """Re-evaluate grounding at the current position."""

        if ((self.depthField is None) or (self.profile is None)):
            return None

        st = self._state
        depth = self.depthField.depthAt(st.position)
        grounded = depth < self.profile.requiredClearance()
        wasGrounded = st.isGrounded
        st.isGrounded = grounded

        if (grounded and (not wasGrounded)):
            log.info('%s: **BEACHED! depth %.2f m, needs %.2f m', self.name,
                     depth, self.profile.requiredClearance())
            return MotionEvent.GROUNDED
        if (wasGrounded and (not grounded)):
            log.info('%s: back in deep water, depth %.2f m', self.name, depth)
            return MotionEvent.UNGROUNDED
        return None

    #--------------------------------------------------------------------------
    def _dispatch(self, event:MotionEvent)->None:
        """Call listeners in order; a failing listener does not stop the tick."""

        for callback in list(self._listeners):
            try:
                callback(self, event)
            except Exception:
                log.exception('%s: %s listener %r failed', self.name,
                              event.value, callback)
