"""
Exceptions raised by the simulation core.

Only construction-time problems are reported as exceptions. Steady-state
operations (depth queries, motion ticks) clamp their inputs instead.
"""

import logging
import math

###############################################################################

class ConfigurationError(ValueError):
    """Invalid construction parameters for a generator, vessel or controller."""

###############################################################################

def configFail(log:logging.Logger, msg:str, *args)->None:
    """Log msg at CRITICAL on log and raise ConfigurationError with it."""

    text = msg % args if args else msg
    log.critical(text)
    raise ConfigurationError(text)

###############################################################################

def requireFinite(log:logging.Logger, name:str, value)->float:
    """Return value as float, failing if it is not a finite real number."""

    try:
        value = float(value)
    except (TypeError, ValueError):
        configFail(log, "%s must be a real number, got %r", name, value)
    if (not math.isfinite(value)):
        configFail(log, "%s must be finite, got %r", name, value)
    return value
