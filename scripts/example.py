"""
example.py - Simple Example for shoalsim

Basic workflow for generating a seabed and sailing a few boats across it.
Uses preset boat types and scripted input; the run ends with a plot of the
depth field and the vessel tracks.
"""

import shoalsim as ss
from shoalsim import display

#------------------------------------------------------------------------------#
#    Seabed                                                                    #
#------------------------------------------------------------------------------#

field = ss.DepthFieldGenerator().generate(     # generate the depth field
    width=256,                                 # grid columns
    height=256,                                # grid rows
    worldScale=1.0,                            # meters per cell
    noiseScale=0.02,                           # first octave frequency
    octaves=4,                                 # noise layers
    persistence=0.5,                           # amplitude decay per octave
    lacunarity=2.0,                            # frequency growth per octave
    maxDepth=25.0,                             # deepest water (m)
    seed=7,                                    # same seed, same seabed
)

#------------------------------------------------------------------------------#
#    Set Up Simulation                                                         #
#------------------------------------------------------------------------------#

sim = ss.Simulation(field, sampleTime=0.05, name='Example')

#------------------------------------------------------------------------------#
#    Vessels                                                                   #
#------------------------------------------------------------------------------#

events = []
def onGrounding(boat, event):                  # observer for beaching events
    events.append((sim.clock, boat.name, event.value))

start = (128.0, 128.0)
headings = [(1, 0), (0, 1), (-1, -1)]          # one course per boat
for i, course in enumerate(headings):
    boat = ss.MotionController(
        profile=ss.getBoatTypeByIndex(i),      # Sailboat, Motorboat, Cargo
        position=start,
        name=ss.getBoatTypeByIndex(i).name,
    )
    boat.subscribe(onGrounding)
    sim.addVessel(boat, ss.ScriptedInput([course], repeatLast=True))

#------------------------------------------------------------------------------#
#    Run Simulation                                                            #
#------------------------------------------------------------------------------#

simData = sim.run(400)                         # 20 s of simulated time

for t, name, what in events:
    sim.log.info('%6.2f s  %-10s %s', t, name, what)
for boat in sim.vessels:
    if (boat.navigationWarning()):
        sim.log.info('%s: %s', boat.name, boat.navigationWarning())

display.display2D(field, simData)              # depth image with tracks
display.plotTracks(simData, sim.sampleTime)    # speed and grounding history
