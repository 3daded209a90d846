"""
Visualization of depth fields and vessel tracks.

Rendering collaborator for the simulation core. Reads the depth grid, its
depth range and vessel positions; never writes back into the simulation.


Functions
---------
depthImage(field)
    RGBA image of a depth field, white (shallow) to blue (deep).
display2D(field, positions, dispType, show)
    Plot a depth field with optional vessel tracks.
plotTracks(simData, sampleTime, figNo, show)
    Plot speed and grounding history of each vessel versus time.


Notes
-----
Default plot parameters (figure size, colors) are module-level globals and
can be modified before calling plot functions.
"""

from typing import Optional
from numpy.typing import NDArray
import matplotlib.pyplot as plt
import numpy as np
from shoalsim import logger
from shoalsim.environment import DepthField

#-----------------------------------------------------------------------------#

# Type Aliases
NPFltArr = NDArray[np.float64]

# Global Variables
log = logger.addLog('disp')

# Plot Parameters
SHALLOW_RGBA = (1.0, 1.0, 1.0, 1.0)     # white
DEEP_RGBA = (0.0, 0.0, 1.0, 1.0)        # blue
figSize = (9, 6)                        # figure size in inches
legendSize = 10

###############################################################################

def depthImage(field:DepthField)->NPFltArr:
    """
    Build an RGBA image of a depth field.

    Each pixel is a linear blend from SHALLOW_RGBA at minDepth to DEEP_RGBA
    at maxDepth.


    Parameters
    ----------
    field : DepthField
        Field to render.


    Returns
    -------
    image : ndarray, shape (height, width, 4)
        RGBA values in [0, 1]. Row 0 is grid row 0 (use origin='lower' when
        displaying). A flat field renders entirely shallow.
    """

    span = field.maxDepth - field.minDepth
    if (span > 0):
        t = (field.grid - field.minDepth) / span
    else:
        t = np.zeros((field.height, field.width))
    t = np.clip(t, 0.0, 1.0)[..., np.newaxis]

    shallow = np.asarray(SHALLOW_RGBA)
    deep = np.asarray(DEEP_RGBA)
    return shallow + t * (deep - shallow)

###############################################################################

def display2D(field:DepthField,
              positions:Optional[NPFltArr] = None,
              dispType:str = 'image',
              show:bool = True,
              ):
    """
    Display 2D image of a depth field.

    Parameters
    ----------
    field : DepthField
        Field to display.
    positions : ndarray, optional
        Vessel tracks, either (N, 2) for one vessel or (nVeh, N, >=2) such as
        the history returned by Simulation.run().
    dispType : str, default='image'
        Display style.
        'image': white-to-blue depth image.
        'contour': color map with labeled depth contours.
    show : bool, default=True
        Call plt.show() before returning.

    Returns
    -------
    fig : matplotlib.figure.Figure
    """

    extent = field.extent
    fig, ax = plt.subplots(figsize=figSize)

    if (dispType == 'contour'):
        p = ax.imshow(field.grid, extent=extent, origin='lower',
                      cmap='Blues', alpha=0.5,
                      vmin=field.minDepth, vmax=field.maxDepth)
        fig.colorbar(p, ax=ax, label='Depth (m)').ax.invert_yaxis()
        ws = field.worldScale
        x = extent[0] + (np.arange(field.width) + 0.5) * ws
        y = extent[2] + (np.arange(field.height) + 0.5) * ws
        if ((field.width > 1) and (field.height > 1) and
            (field.maxDepth > field.minDepth)):
            contours = ax.contour(x, y, field.grid, 10, colors='black',
                                  alpha=0.4)
            ax.clabel(contours, inline=True, fontsize=8, fmt="%.0f")
    else:
        ax.imshow(depthImage(field), extent=extent, origin='lower')

    # Vessel tracks
    if (positions is not None):
        tracks = np.asarray(positions, dtype=float)
        if (tracks.ndim == 2):
            tracks = tracks[np.newaxis]
        for j, track in enumerate(tracks):
            ax.plot(track[:, 0], track[:, 1], linestyle='dotted',
                    color='black')
            ax.scatter(track[-1, 0], track[-1, 1], marker='^', color='red',
                       s=64, label=f'Vessel {j:02}')
        ax.legend(fontsize=legendSize)

    ax.set_xlabel('x (m)')
    ax.set_ylabel('y (m)')
    log.debug('Displaying %dx%d depth field', field.width, field.height)
    if (show):
        plt.show()
    return fig

###############################################################################

def plotTracks(simData:NPFltArr,
               sampleTime:float,
               figNo:int = 1,
               show:bool = True,
               ):
    """
    Plot speed and grounding state of each vessel versus time.

    Parameters
    ----------
    simData : ndarray, shape (nVeh, N+1, 5)
        History from Simulation.run(), rows [x, y, vx, vy, grounded].
    sampleTime : float
        Tick length in seconds.
    figNo : int, default=1
        Matplotlib figure number.
    show : bool, default=True
        Call plt.show() before returning.

    Returns
    -------
    fig : matplotlib.figure.Figure
    """

    simData = np.asarray(simData, dtype=float)
    t = np.arange(simData.shape[1]) * sampleTime

    fig = plt.figure(figNo, figsize=figSize)
    plt.subplot(2, 1, 1)
    for j, data in enumerate(simData):
        plt.plot(t, np.hypot(data[:, 2], data[:, 3]), label=f'Vessel {j:02}')
    plt.ylabel('Speed (m/s)')
    plt.legend(fontsize=legendSize)
    plt.grid()

    plt.subplot(2, 1, 2)
    for j, data in enumerate(simData):
        plt.step(t, data[:, 4], where='post', label=f'Vessel {j:02}')
    plt.yticks([0, 1], ['free', 'grounded'])
    plt.xlabel('Time (s)')
    plt.grid()

    if (show):
        plt.show()
    return fig
