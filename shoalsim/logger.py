"""
Logging configuration for seabed navigation simulations.

Central place where the package loggers are created and wired to a shared
console handler and an optional file handler. Every record carries the
current simulation time so log lines from the tick loop can be matched to the
step that produced them.


Functions
---------
**Setup Functions:**

    setupMain(fileName, fileFormat, fileLevel, outFormat, outLevel)
        Configure and return the main package logger.

**Logger Management:**

    addLog(name)
        Create logger that uses main logger handlers.
    noneLog(name)
        Create logger with no handlers (warnings only).
    removeLog(name)
        Remove logger and close unshared handlers.

**Handler Management:**

    addMainHandlers(subLog)
        Add main logger handlers to sublevel logger.
    removeHandlers(name)
        Remove all handlers from logger, closing unshared ones.
    closeHandler(handler)
        Close handler and update global variables.
    deepRemoveHandler(handler)
        Remove handler from all loggers and close it.

**Custom Features:**

    customRecordFactory(args, kwargs)
        Add simulation time field to log records.
    CustomFormatter
        Format log records with bracketed function names and multi-line support.


Global Variables
----------------
log : logging.Logger
    Main package logger instance.
consoleHandler : logging.StreamHandler
    Shared console output handler.
fileHandler : logging.FileHandler
    Shared file output handler.
simTime : str
    Current simulation time for log records (seconds, two decimals).


Notes
-----
Module loggers ('env', 'noise', 'veh', 'motion', 'sim', 'disp') are created at
import time with addLog(). If setupMain() has not run yet they are parked in a
pending list and receive the main handlers once it does. The Simulation driver
writes simTime at the start of every step.
"""

from typing import Optional
from datetime import datetime
import logging
import os

#-----------------------------------------------------------------------------#

# Logging levels
DEBUG = logging.DEBUG           # 10
INFO = logging.INFO             # 20
WARNING = logging.WARNING       # 30
ERROR = logging.ERROR           # 40
CRITICAL = logging.CRITICAL     # 50

# Log record component formats
SIMTIME = '%(simTime)8s'
DATETIME = '%(asctime)s'
NAME  = '%(name)-8s'
LEVEL = '%(levelname)-7s'
FUNCTION = '%(funcName)s'
MESSAGE = '%(message)s'

# Delimiter strings
CS = ' : '      # Colon with spaces
RAB = '>'       # Right angle bracket
P = '|'         # Pipe
S = ' '         # Space

# Formatting strings
FMT_DATE = '%H:%M:%S'
FMT_OUT = P+SIMTIME+P+S+NAME+CS+LEVEL+S+RAB+S+MESSAGE
FMT_FILE = P+SIMTIME+S+DATETIME+P+S+NAME+S+LEVEL+S+FUNCTION+CS+MESSAGE

# Main logger name
MAIN_LOG = 'shoalsim'

# Global variables -----------------------------------------------------------#

# Main logger and main handlers
log = None
consoleHandler = None
fileHandler = None

# Register loggers needing main handlers
pending = []

# Custom logging
oldFactory = logging.getLogRecordFactory()  # Cache for original record factory
simTime = '0.00'                            # Initial value of custom field

###############################################################################

class CustomFormatter(logging.Formatter):
    """
    Log formatter with bracketed function names and multi-line support.

    Function names are wrapped as ``[funcName]`` and padded. When a message
    spans several lines the log prefix is repeated on each one so the file
    stays greppable.
    """

    def format(self, record):
        # Wrap function name in brackets with white space padding after bracket
        if not (record.funcName.startswith("[")):
            func = f"[{record.funcName}]"
            record.funcName = f"{func:19}"

        # Insert log prefix when any newline characters are used in log message
        newline = '\n'
        if (isinstance(record.msg, str) and (newline in record.msg)):
            # Make local copy of log record
            record = logging.makeLogRecord(record.__dict__)
            # Get log prefix format and ignore the rest
            prefixFmt, _, _ = self._fmt.partition(MESSAGE)
            # Add missing log record attributes if part of prefix
            if (DATETIME in prefixFmt):
                record.asctime = self.formatTime(record, self.datefmt)
            prefix = prefixFmt % record.__dict__
            record.msg = (newline + prefix).join(record.msg.split(newline))

        return super().format(record)

###############################################################################

def customRecordFactory(*args, **kwargs):
    """Create log record carrying the global simTime field."""

    record = oldFactory(*args, **kwargs)
    record.simTime = simTime
    return record

###############################################################################

def setSimTime(seconds:float)->None:
    """Set the simulation time stamped onto subsequent log records."""

    global simTime
    simTime = f'{seconds:.2f}'

###############################################################################

def addMainHandlers(subLog:logging.Logger)->None:
    """
    Add main logger handlers (console, file) to sublevel logger.

    Parameters
    ----------
    subLog : logging.Logger
        Logger to receive main handlers.
    """

    if ((consoleHandler is not None) and
        (consoleHandler not in subLog.handlers)):
        subLog.addHandler(consoleHandler)
    if ((fileHandler is not None) and
        (fileHandler not in subLog.handlers)):
        subLog.addHandler(fileHandler)
    subLog.debug('%s logger activated', subLog.name)

###############################################################################

def setupMain(fileName:Optional[str] = None,
              fileFormat:Optional[str] = FMT_FILE,
              fileLevel:int = DEBUG,
              outFormat:Optional[str] = FMT_OUT,
              outLevel:int = INFO,
              )->logging.Logger:
    """
    Configure and return main package logger with console and file handlers.


    Parameters
    ----------
    fileName : str, optional
        Log file name. If None, file output is disabled.
    fileFormat : str, optional
        Format string for file handler. If None, file output is disabled.
    fileLevel : int, default=DEBUG
        Minimum log level for file handler.
    outFormat : str, optional
        Format string for console handler. If None, console output disabled.
    outLevel : int, default=INFO
        Minimum log level for console handler.


    Returns
    -------
    log : logging.Logger
        Main logger instance with configured handlers.


    Notes
    -----
    - Installs the record factory that adds the simTime field.
    - Loggers created before this call (pending) get the main handlers now.
    - Calling again after setup returns the existing logger unchanged.
    """

    global log, consoleHandler, fileHandler

    if (log is None):

        # Create main logger
        logging.setLogRecordFactory(customRecordFactory)
        log = logging.getLogger(MAIN_LOG)
        log.setLevel(DEBUG)

        # Console handler
        if (outFormat is not None):
            if (consoleHandler is None):
                consoleHandler = logging.StreamHandler()
                consoleHandler.set_name('Console handler')
                consoleHandler.setLevel(outLevel)
                consoleHandler.setFormatter(CustomFormatter(outFormat))
            log.addHandler(consoleHandler)
            log.info('Console logging started')

        # File handler
        if ((fileName is not None) and (fileFormat is not None)):
            if (fileHandler is None):
                fileHandler = logging.FileHandler(fileName)
                fileHandler.set_name('File handler')
                fileHandler.setLevel(fileLevel)
                fileHandler.setFormatter(CustomFormatter(fileFormat,
                                                         FMT_DATE))
            log.addHandler(fileHandler)
            start = datetime.now().strftime("%m/%d/%Y %H:%M:%S")
            log.info('File logging started at %s in %s',
                     start, os.path.basename(fileName))

        # Hand main handlers to loggers created before setup
        while pending:
            name = pending.pop()
            addMainHandlers(logging.getLogger(name))

    return log

###############################################################################

def addLog(name:str)->logging.Logger:
    """
    Create logger that shares main logger handlers.

    Parameters
    ----------
    name : str
        Logger name.

    Returns
    -------
    logger : logging.Logger
        New or existing logger with main handlers.
    """

    # Return existing logger
    if (name in logging.Logger.manager.loggerDict):
        return logging.getLogger(name)

    thisLog = logging.getLogger(name)
    thisLog.setLevel(DEBUG)

    # Register logger if main logger not yet created
    if (log is None):
        pending.append(name)
    else:
        addMainHandlers(thisLog)

    return thisLog

###############################################################################

def noneLog(name:str)->logging.Logger:
    """
    Create or configure logger with no handlers.

    Existing non-shared handlers are closed. If the logger is the main logger
    all of its handlers are removed everywhere and closed. The level is set to
    WARNING so only warnings and errors reach the last-resort handler.
    """

    global log

    thisLog = logging.getLogger(name)
    thisLog.setLevel(WARNING)

    if (thisLog.handlers):
        if (thisLog is log):
            while thisLog.handlers:
                deepRemoveHandler(thisLog.handlers[0])
        else:
            removeHandlers(name)

    if (name == MAIN_LOG):
        log = thisLog

    return thisLog

###############################################################################

def closeHandler(handler:logging.Handler)->None:
    """Close handler and clear the matching global handler reference."""

    global consoleHandler
    global fileHandler

    handler.close()

    if (handler is consoleHandler):
        consoleHandler = None
    elif (handler is fileHandler):
        fileHandler = None

###############################################################################

def removeHandlers(name:str)->None:
    """
    Remove all handlers from logger, closing unshared ones.

    Parameters
    ----------
    name : str
        Logger name.
    """

    thisLog = logging.getLogger(name)

    while thisLog.handlers:
        handler = thisLog.handlers[0]
        thisLog.removeHandler(handler)

        # Close handler if not shared with other loggers
        shared = any(
            (handler in l.handlers)
            for l in logging.Logger.manager.loggerDict.values()
            if isinstance(l, logging.Logger)
        )
        if (not shared):
            closeHandler(handler)

###############################################################################

def deepRemoveHandler(handler:logging.Handler)->None:
    """Remove handler from every registered logger and close it."""

    for thisLog in list(logging.Logger.manager.loggerDict.values()):
        if (isinstance(thisLog, logging.Logger) and
            (handler in thisLog.handlers)):
            thisLog.removeHandler(handler)

    closeHandler(handler)

###############################################################################

def removeLog(name:str)->None:
    """
    Remove logger and close unshared handlers.

    Handlers shared with other loggers stay open. Removing the main logger
    resets the global log so setupMain() can run again.
    """

    global log

    thisLog = logging.getLogger(name)
    removeHandlers(name)

    del logging.Logger.manager.loggerDict[name]
    if (thisLog is log):
        log = None
