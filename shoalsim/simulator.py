"""
Fixed-timestep simulation driver.

Owns the shared depth field, the vessels moving over it and the input source
for each vessel, and advances them together one tick at a time.


Classes
-------
Simulation
    Tick loop over a set of MotionControllers sharing one DepthField.
ScriptedInput
    Input source that replays a fixed sequence of input vectors.


Notes
-----
The driver is single-threaded. Each step() reads one input vector per vessel,
advances every vessel once in insertion order, then hands the simulation to
the optional renderer. Input sources and the renderer are external
collaborators: any exception they raise is logged and the step carries on
with zero input or without rendering, so a failing collaborator cannot leave
the simulation half-updated.

Regenerating the seabed builds a new DepthField and swaps the reference held
by the driver and by every vessel. The previous field is not touched.


Examples
--------
>>> from shoalsim import DepthField, MotionController, VesselProfile
>>> sim = Simulation(DepthField.uniform(100, 100, depth=20.0), sampleTime=0.1)
>>> boat = sim.addVessel(MotionController(profile=VesselProfile(draft=1.5)),
...                      ScriptedInput([(1, 0)], repeatLast=True))
>>> data = sim.run(50)
>>> data.shape
(1, 51, 5)
"""

from typing import Any, Callable, List, Optional, Sequence
from numpy.typing import NDArray
import datetime
import time
import numpy as np
from shoalsim import logger
from shoalsim.environment import DepthField
from shoalsim.errors import configFail, requireFinite
from shoalsim.motion import MotionController, MotionEvent

#-----------------------------------------------------------------------------#

# Type Aliases
NPFltArr = NDArray[np.float64]
InputSource = Callable[[int], Any]
Renderer = Callable[['Simulation'], Any]

# Global Variables
log = logger.addLog('sim')

# Columns of the history array returned by Simulation.run()
HISTORY_FIELDS = ('x', 'y', 'vx', 'vy', 'grounded')

###############################################################################

class ScriptedInput:
    """
    Replay a list of input vectors, one per tick.

    Parameters
    ----------
    vectors : sequence of (x, y)
        Input for ticks 0, 1, 2, ...
    repeatLast : bool, default=False
        After the script ends, keep returning the last vector instead of
        (0, 0).
    """

    def __init__(self, vectors:Sequence[Any], repeatLast:bool=False)->None:
        self.vectors = [np.asarray(v, dtype=float) for v in vectors]
        self.repeatLast = repeatLast

    def __call__(self, tick:int)->NPFltArr:
        if (0 <= tick < len(self.vectors)):
            return self.vectors[tick]
        if (self.repeatLast and self.vectors):
            return self.vectors[-1]
        return np.zeros(2)

###############################################################################

class Simulation:
    """
    Fixed-timestep loop over vessels sharing one depth field.


    Parameters
    ----------
    depthField : DepthField
        Shared seabed.
    sampleTime : float, default=0.02
        Tick length in seconds. Must be positive.
    name : str, default='Simulation'
        Title used in log output.
    renderer : callable, optional
        renderer(simulation) called after every step.
    logging : str, default='nofile'
        Main logger setup: 'all' (console and file), 'noout' (file only),
        'nofile' (console only) or 'none' (leave logging unconfigured).
    logFile : str, optional
        Log file name for 'all' and 'noout'. Defaults to '<name>.log'.


    Attributes
    ----------
    vessels : list of MotionController
        Vessels in update order.
    inputs : list of callable
        Input source per vessel, inputs[i](tick) -> (x, y).
    tick : int
        Number of completed steps.
    clock : float
        Simulated time in seconds, tick * sampleTime.
    """

    ## Constructor ===========================================================#
    def __init__(self,
                 depthField:DepthField,
                 sampleTime:float = 0.02,
                 name:str = 'Simulation',
                 renderer:Optional[Renderer] = None,
                 logging:str = 'nofile',
                 logFile:Optional[str] = None,
                 )->None:
        h = requireFinite(log, 'sampleTime', sampleTime)
        if (h <= 0):
            configFail(log, "sampleTime must be positive, got %s", h)
        if (not isinstance(depthField, DepthField)):
            configFail(log, "depthField must be a DepthField, got %r",
                       type(depthField))

        self.name = name
        self._sampleTime = h
        self.depthField = depthField
        self.renderer = renderer
        self.vessels: List[MotionController] = []
        self.inputs: List[InputSource] = []
        self.tick = 0
        self.clock = 0.0

        ## Logging
        self.log = self._setupLogging(logging, logFile)

    ## Properties ============================================================#
    @property
    def sampleTime(self)->float:
        """Tick length in seconds."""
        return self._sampleTime

    @property
    def nVeh(self)->int:
        """Number of vessels."""
        return len(self.vessels)

    ## Special Methods =======================================================#
    def __str__(self)->str:
        cw = 16
        line = '-' * 48
        out = [
            line,
            f"{' Simulation:':{cw}} {self.name}",
            f"{' Sample time:':{cw}} {self.sampleTime} s",
            f"{' Vessels:':{cw}} {self.nVeh}",
            line,
            f"{self.depthField}",
        ]
        return '\n'.join(out)

    ## Methods ===============================================================#
    def addVessel(self,
                  controller:MotionController,
                  inputSource:Optional[InputSource] = None,
                  )->MotionController:
        """
        Add a vessel and bind it to the shared depth field.

        Parameters
        ----------
        controller : MotionController
            Vessel to simulate. Its depthField is replaced by the shared one.
        inputSource : callable, optional
            inputSource(tick) -> (x, y). Defaults to no input.

        Returns
        -------
        controller : MotionController
            The same controller, for chaining.
        """

        controller.depthField = self.depthField
        self.vessels.append(controller)
        self.inputs.append(inputSource if (inputSource is not None)
                           else ScriptedInput([]))
        log.debug('Added %s', controller.name)
        return controller

    #--------------------------------------------------------------------------
    def step(self)->List[Optional[MotionEvent]]:
        """
        Advance every vessel by one tick.

        Returns
        -------
        events : list of MotionEvent or None
            Grounding transition per vessel for this tick.
        """

        logger.setSimTime(self.clock)
        events = []
        for vessel, source in zip(self.vessels, self.inputs):
            events.append(vessel.advance(self._readInput(vessel, source),
                                         self.sampleTime))
        self.tick += 1
        self.clock = self.tick * self.sampleTime
        self._render()
        return events

    #--------------------------------------------------------------------------
    def run(self, N:int)->NPFltArr:
        """
        Run N steps and return the vessel history.

        Parameters
        ----------
        N : int
            Number of steps. Must be non-negative.

        Returns
        -------
        simData : ndarray, shape (nVeh, N+1, 5)
            Row k holds [x, y, vx, vy, grounded] after k steps; row 0 is the
            state before the first step.
        """

        if ((isinstance(N, bool)) or (not isinstance(N, (int, np.integer)))
            or (N < 0)):
            configFail(log, "N must be a non-negative integer, got %r", N)

        simData = np.empty([self.nVeh, N + 1, len(HISTORY_FIELDS)], float)
        self._record(simData, 0)

        start = time.time()
        for i in range(1, N + 1):
            self.step()
            self._record(simData, i)
        real = time.time() - start

        line = '*' * 64
        self.log.info(line)
        self.log.info('%s: %d steps, simulated %s, real %.3f s', self.name, N,
                      datetime.timedelta(seconds=round(N * self.sampleTime)),
                      real)
        for v in self.vessels:
            self.log.info('%s', v)
        self.log.info(line)
        return simData

    #--------------------------------------------------------------------------
    def regenerate(self, **changes:Any)->DepthField:
        """
        Replace the shared depth field with a regenerated one.

        The new field is built from the current field's configuration with
        changes applied, then swapped into the driver and every vessel. The
        old field object is left as it was.

        Returns
        -------
        field : DepthField
            The new shared field.
        """

        newField = self.depthField.regenerate(**changes)
        self.depthField = newField
        for v in self.vessels:
            v.depthField = newField
        return newField

    #--------------------------------------------------------------------------
    def snapshot(self)->NPFltArr:
        """Current [x, y, vx, vy, grounded] per vessel, shape (nVeh, 5)."""

        out = np.empty([self.nVeh, len(HISTORY_FIELDS)], float)
        for j, v in enumerate(self.vessels):
            st = v.state
            out[j, 0:2] = st.position
            out[j, 2:4] = st.velocity
            out[j, 4] = float(st.isGrounded)
        return out

    ## Helper Methods ========================================================#
    def _record(self, simData:NPFltArr, i:int)->None:
        if (self.nVeh):
            simData[:, i, :] = self.snapshot()

    #--------------------------------------------------------------------------
    def _readInput(self, vessel:MotionController, source:InputSource)->Any:
        """Fetch input from a collaborator, falling back to (0, 0) on error."""

        try:
            value = np.asarray(source(self.tick), dtype=float).ravel()
        except Exception:
            log.exception('%s: input source failed at tick %d', vessel.name,
                          self.tick)
            return np.zeros(2)
        if ((value.size < 2) or (not np.all(np.isfinite(value[:2])))):
            log.warning('%s: bad input %r at tick %d, using (0, 0)',
                        vessel.name, value, self.tick)
            return np.zeros(2)
        return value[:2]

    #--------------------------------------------------------------------------
    def _render(self)->None:
        if (self.renderer is None):
            return
        try:
            self.renderer(self)
        except Exception:
            log.exception('Renderer failed at tick %d', self.tick)

    #--------------------------------------------------------------------------
    def _setupLogging(self, setting:str, logFile:Optional[str]):
        """Configure the main logger for the requested output setting."""

        fileName = logFile if (logFile is not None) else f"{self.name}.log"
        if (setting == 'all'):
            return logger.setupMain(fileName=fileName)
        if (setting == 'noout'):
            return logger.setupMain(fileName=fileName, outFormat=None)
        if (setting == 'nofile'):
            return logger.setupMain(fileName=None)
        if (setting == 'none'):
            return log
        configFail(log, "Unknown logging setting %r", setting)
