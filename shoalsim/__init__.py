"""
shoalsim: Vessel Navigation over Procedural Seabeds

Generates deterministic bathymetry from layered Perlin noise and simulates
vessels whose motion is limited by the water depth under their keel.

Modules
-------
noise : Seeded 2D Perlin noise sampler
environment : Depth field generation and queries
vessels : Vessel draft / clearance profiles and presets
motion : Per-vessel motion and grounding controller
simulator : Fixed-timestep simulation driver
display : Depth images and plots (matplotlib)
gnc : Vector and angle math
errors : Configuration exceptions
logger : Logging configuration and utilities

Examples
--------
### Basic simulation:

>>> import shoalsim as ss
>>>
>>> field = ss.DepthFieldGenerator().generate(
...     width=128, height=128, worldScale=1.0, noiseScale=0.05,
...     octaves=4, persistence=0.5, lacunarity=2.0, maxDepth=30.0, seed=1)
>>> sim = ss.Simulation(field, sampleTime=0.05)
>>> boat = sim.addVessel(
...     ss.MotionController(profile=ss.getBoatTypeByName('Sailboat'),
...                         position=(64, 64)),
...     ss.ScriptedInput([(1, 1)], repeatLast=True))
>>> simData = sim.run(200)
"""

# Core modules - import for direct access
from . import environment
from . import errors
from . import gnc
from . import logger
from . import motion
from . import noise
from . import simulator
from . import vessels

# Classes and functions for convenience
from .environment import DepthField, DepthFieldConfig, DepthFieldGenerator, Rect
from .errors import ConfigurationError
from .motion import (MotionConfig, MotionController, MotionEvent,
                     MotionState, MotionStatus)
from .noise import NoiseSampler
from .simulator import ScriptedInput, Simulation
from .vessels import (BOAT_TYPES, VesselProfile, getBoatTypeByIndex,
                      getBoatTypeByName)

# Version info
__version__ = "0.1.0"

# Define what gets imported with "from shoalsim import *"
__all__ = [
    # Modules
    'environment',
    'errors',
    'gnc',
    'logger',
    'motion',
    'noise',
    'simulator',
    'vessels',
    # Main classes
    'BOAT_TYPES',
    'ConfigurationError',
    'DepthField',
    'DepthFieldConfig',
    'DepthFieldGenerator',
    'MotionConfig',
    'MotionController',
    'MotionEvent',
    'MotionState',
    'MotionStatus',
    'NoiseSampler',
    'Rect',
    'ScriptedInput',
    'Simulation',
    'VesselProfile',
    'getBoatTypeByIndex',
    'getBoatTypeByName',
]
