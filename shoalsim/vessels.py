"""
Vessel classes: draft and clearance descriptors for boat types.


Classes
-------
VesselProfile
    Immutable draft / safety-margin descriptor of a boat class.


Functions
---------
getBoatTypeByName(name)
    Look up a preset profile by name.
getBoatTypeByIndex(index)
    Look up a preset profile by position in BOAT_TYPES.


Notes
-----
Profiles are plain values. Any number of motion controllers may share one
profile; none of them can change it.
"""

from dataclasses import dataclass, fields
from typing import Any, Mapping, Optional, Tuple
from shoalsim import logger
from shoalsim.errors import configFail, requireFinite

#-----------------------------------------------------------------------------#

# Global Variables
log = logger.addLog('veh')

###############################################################################

@dataclass(frozen=True)
class VesselProfile:
    """
    Static descriptor of a boat class.


    Parameters
    ----------
    draft : float
        How deep the hull sits in the water (m). Non-negative.
    safetyMargin : float, default=2.0
        Extra water required under the keel (m). Non-negative.
    name : str, default=''
        Display name of the boat class.


    Raises
    ------
    ConfigurationError
        Negative or non-finite draft or safetyMargin.


    Examples
    --------
    >>> VesselProfile(draft=1.5, safetyMargin=2.0).requiredClearance()
    3.5
    """

    draft: float
    safetyMargin: float = 2.0
    name: str = ''

    def __post_init__(self)->None:
        draft = requireFinite(log, 'draft', self.draft)
        margin = requireFinite(log, 'safetyMargin', self.safetyMargin)
        if (draft < 0):
            configFail(log, "draft must be non-negative, got %s", draft)
        if (margin < 0):
            configFail(log, "safetyMargin must be non-negative, got %s", margin)
        object.__setattr__(self, 'draft', draft)
        object.__setattr__(self, 'safetyMargin', margin)

    #--------------------------------------------------------------------------
    @classmethod
    def fromDict(cls, options:Mapping[str, Any])->'VesselProfile':
        """Build from a mapping of option names, rejecting unknown names."""

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(options) - known)
        if (unknown):
            configFail(log, "Unrecognized vessel options: %s",
                       ', '.join(unknown))
        if ('draft' not in options):
            configFail(log, "Vessel options must include draft")
        return cls(**options)

    #--------------------------------------------------------------------------
    def requiredClearance(self)->float:
        """Minimum water depth to float with margin: draft + safetyMargin."""
        return self.draft + self.safetyMargin

    #--------------------------------------------------------------------------
    def __str__(self)->str:
        label = self.name or 'Vessel'
        return (f"{label} (draft {self.draft} m, margin {self.safetyMargin} m,"
                f" needs {self.requiredClearance()} m)")

###############################################################################

# Preset boat classes
BOAT_TYPES: Tuple[VesselProfile, ...] = (
    VesselProfile(draft=1.5, safetyMargin=2.0, name='Sailboat'),
    VesselProfile(draft=0.8, safetyMargin=1.5, name='Motorboat'),
    VesselProfile(draft=12.0, safetyMargin=3.0, name='Cargo Ship'),
    VesselProfile(draft=8.0, safetyMargin=2.0, name='Submarine'),
)

###############################################################################

def getBoatTypeByName(name:str)->Optional[VesselProfile]:
    """Return the preset profile called name, or None."""

    for boat in BOAT_TYPES:
        if (boat.name == name):
            return boat
    return None

###############################################################################

def getBoatTypeByIndex(index:int)->Optional[VesselProfile]:
    """Return the preset profile at index, or None if out of range."""

    if (0 <= index < len(BOAT_TYPES)):
        return BOAT_TYPES[index]
    return None
